"""User-facing progress and diagnostic output."""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager

import click
from rich.console import Console

from agt.cli.output import user_output


class UserFeedback(ABC):
    """Provides user-facing progress and diagnostic output.

    Workflows report through ``ctx.feedback`` instead of printing directly so
    tests can assert on what the user was told.

    Usage:
        with ctx.feedback.status("Fetching labels..."):
            labels = ctx.reads.labels()
        ctx.feedback.success(f"Found {len(labels)} label(s)")
    """

    @abstractmethod
    def info(self, message: str) -> None:
        """Show informational message."""

    @abstractmethod
    def success(self, message: str) -> None:
        """Show success message."""

    @abstractmethod
    def warning(self, message: str) -> None:
        """Show a non-fatal problem."""

    @abstractmethod
    def error(self, message: str) -> None:
        """Show error message."""

    @abstractmethod
    def status(self, message: str) -> AbstractContextManager[None]:
        """Show a spinner while the block runs."""


class InteractiveFeedback(UserFeedback):
    """Styled stderr output with rich spinners."""

    def __init__(self) -> None:
        self._console = Console(stderr=True)

    def info(self, message: str) -> None:
        user_output(message)

    def success(self, message: str) -> None:
        user_output(click.style(message, fg="green"))

    def warning(self, message: str) -> None:
        user_output(click.style(message, fg="yellow"))

    def error(self, message: str) -> None:
        user_output(click.style(message, fg="red"))

    @contextmanager
    def status(self, message: str) -> Iterator[None]:
        with self._console.status(message, spinner="dots"):
            yield
