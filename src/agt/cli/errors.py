"""Error boundary for CLI commands.

Every failure that escapes a command is classified, logged with its context,
rendered with help text, and turned into the exit code for its kind.
"""

import functools
import logging
from collections.abc import Callable
from typing import Any, TypeVar

import click

from agt.cli.output import user_output
from agt.core.errors import ErrorKind, classify, exit_code_for, format_error

T = TypeVar("T", bound=Callable[..., Any])

logger = logging.getLogger(__name__)


def handle_errors(func: T) -> T:
    """Decorator that classifies any failure and exits with its code.

    click's own usage and exit exceptions pass through untouched.

    Example:
        @click.command("label")
        @click.pass_obj
        @handle_errors
        def label_cmd(ctx: AgtContext) -> None:
            ...
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (click.exceptions.Exit, click.ClickException):
            raise
        except (Exception, KeyboardInterrupt) as e:
            error = classify(e)
            logger.error(
                "%s failed: %s",
                func.__name__,
                error.message,
                extra={
                    "fields": {
                        "kind": error.kind.value,
                        "variant": error.variant.value if error.variant else None,
                        "context": dict(error.context),
                    }
                },
                exc_info=error.kind is ErrorKind.UNKNOWN,
            )
            user_output("")
            user_output(format_error(error))
            raise SystemExit(exit_code_for(error)) from None

    return wrapper  # type: ignore[return-value]
