import click

from agt.cli.errors import handle_errors
from agt.cli.output import machine_output
from agt.core.context import AgtContext
from agt.core.workflows.issue import create_issue


@click.command("issue")
@click.pass_obj
@handle_errors
def issue_cmd(ctx: AgtContext) -> None:
    """Create a GitHub issue interactively.

    Uses the repository's .github/ISSUE_TEMPLATE templates when available.
    The new issue's URL is printed to stdout.
    """
    result = create_issue(ctx)
    if result.url:
        machine_output(result.url)
