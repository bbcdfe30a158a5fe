import click

from agt.cli.errors import handle_errors
from agt.cli.output import machine_output, user_output
from agt.core.context import AgtContext
from agt.core.github.types import PullRequest
from agt.core.workflows.common import format_issue_line
from agt.core.workflows.listing import ListKind, list_open_items


def format_pull_request_line(pr: PullRequest) -> str:
    draft = click.style(" [draft]", fg="yellow") if pr.is_draft else ""
    branch = click.style(f"({pr.branch})", dim=True)
    return f"{click.style(f'#{pr.number}', bold=True)} {pr.title}{draft} {branch}"


@click.command("list")
@click.option(
    "--type",
    "list_type",
    type=click.Choice([kind.value for kind in ListKind]),
    default=None,
    help="What to list. Prompts when omitted.",
)
@click.pass_obj
@handle_errors
def list_cmd(ctx: AgtContext, list_type: str | None) -> None:
    """List open issues or pull requests."""
    listing = list_open_items(ctx, ListKind(list_type) if list_type else None)

    if listing.kind is ListKind.ISSUES:
        if not listing.issues:
            user_output(click.style("No open issues found.", fg="green"))
            return
        user_output(click.style("\n=== Open Issues ===\n", fg="cyan", bold=True))
        for issue in listing.issues:
            machine_output(format_issue_line(issue))
        return

    if not listing.pull_requests:
        user_output(click.style("No open pull requests found.", fg="green"))
        return
    user_output(click.style("\n=== Open Pull Requests ===\n", fg="cyan", bold=True))
    for pr in listing.pull_requests:
        machine_output(format_pull_request_line(pr))
