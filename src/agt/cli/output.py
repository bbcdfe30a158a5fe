"""Output helpers for CLI commands.

User-facing messages go to stderr so stdout stays clean for data that might be
piped (URLs of created issues and pull requests, listings).
"""

from typing import Any

import click


def user_output(message: Any = "", nl: bool = True) -> None:
    """Output informational message for human users (stderr)."""
    click.echo(message, nl=nl, err=True)


def machine_output(message: Any = "", nl: bool = True) -> None:
    """Output structured data for scripts (stdout)."""
    click.echo(message, nl=nl)
