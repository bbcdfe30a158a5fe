"""Branch management commands."""

import click

from agt.cli.errors import handle_errors
from agt.core.context import AgtContext
from agt.core.workflows.branch import create_branch, delete_branches


@click.group("branch")
def branch_group() -> None:
    """Create branches from issues and clean up old ones."""


@branch_group.command("create")
@click.pass_obj
@handle_errors
def branch_create_cmd(ctx: AgtContext) -> None:
    """Create <type>/<issue>-<title> from a selected open issue."""
    create_branch(ctx)


@branch_group.command("delete")
@click.pass_obj
@handle_errors
def branch_delete_cmd(ctx: AgtContext) -> None:
    """Delete selected branches locally and/or on origin.

    The current branch and protected branches (main, master, develop, ...)
    are never offered. Exits 1 when any deletion failed.
    """
    result = delete_branches(ctx)
    if result.failures:
        raise SystemExit(1)
