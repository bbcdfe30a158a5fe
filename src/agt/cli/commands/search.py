import click

from agt.cli.errors import handle_errors
from agt.cli.output import machine_output, user_output
from agt.core.context import AgtContext
from agt.core.github.types import IssueMatch, PullRequestMatch
from agt.core.workflows.listing import ListKind
from agt.core.workflows.search import search_items


def format_issue_match(issue: IssueMatch) -> str:
    labels = click.style(f" [{', '.join(issue.labels)}]", fg="yellow") if issue.labels else ""
    return (
        f"{click.style(f'#{issue.number}', bold=True)} {issue.title}"
        f" {click.style(f'[{issue.state}]', fg='cyan')}{labels}"
        f" {click.style(f'by @{issue.author}', dim=True)}"
    )


def format_pull_request_match(pr: PullRequestMatch) -> str:
    draft = click.style(" [draft]", fg="yellow") if pr.is_draft else ""
    return (
        f"{click.style(f'#{pr.number}', bold=True)} {pr.title}"
        f" {click.style(f'[{pr.state}]', fg='cyan')}{draft}"
        f" {click.style(f'({pr.branch}) by @{pr.author}', dim=True)}"
    )


@click.command("search")
@click.option(
    "--type",
    "search_type",
    type=click.Choice([kind.value for kind in ListKind]),
    default=None,
    help="What to search. Prompts when omitted.",
)
@click.argument("query", required=False)
@click.pass_obj
@handle_errors
def search_cmd(ctx: AgtContext, search_type: str | None, query: str | None) -> None:
    """Search issues or pull requests, filtered by state, author and label."""
    results = search_items(ctx, ListKind(search_type) if search_type else None, query)

    if results.count == 0:
        user_output(click.style("No results found.", fg="yellow"))
        return

    user_output(
        click.style(f"\n=== Found {results.count} result(s) ===\n", fg="cyan", bold=True)
    )
    for issue in results.issues:
        machine_output(format_issue_match(issue))
    for pr in results.pull_requests:
        machine_output(format_pull_request_match(pr))
