import click

from agt.cli.errors import handle_errors
from agt.cli.output import machine_output
from agt.core.context import AgtContext
from agt.core.workflows.pull_request import create_pull_request


@click.command("pr")
@click.pass_obj
@handle_errors
def pr_cmd(ctx: AgtContext) -> None:
    """Push the current branch and open a pull request.

    The branch is checked against the freshly fetched base first. When it is
    behind you are offered a rebase; a branch with no new commits is refused.
    """
    result = create_pull_request(ctx)
    if result.url:
        machine_output(result.url)
