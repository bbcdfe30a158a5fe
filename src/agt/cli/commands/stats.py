import click
from rich.console import Console
from rich.table import Table

from agt.cli.errors import handle_errors
from agt.core.context import AgtContext
from agt.core.workflows.stats import RepositorySummary, fetch_summary


def render_summary(summary: RepositorySummary, console: Console) -> None:
    stats = summary.stats
    overview = Table(show_header=False, title="Repository Overview", title_justify="left")
    overview.add_column("field", style="bold")
    overview.add_column("value")
    overview.add_row("Name", stats.name)
    if stats.description:
        overview.add_row("Description", stats.description)
    overview.add_row("Stars", str(stats.stars))
    overview.add_row("Forks", str(stats.forks))
    overview.add_row("Watchers", str(stats.watchers))
    overview.add_row("Open issues", str(stats.open_issues))
    console.print(overview)
    console.print()

    if not summary.contributors:
        console.print("No contributors reported.")
        return

    contributors = Table(show_header=True, header_style="bold", title="Contributors")
    contributors.add_column("login", style="cyan", no_wrap=True)
    contributors.add_column("commits", justify="right")
    for contributor in summary.contributors:
        contributors.add_row(contributor.login, str(contributor.contributions))
    console.print(contributors)


@click.command("stats")
@click.pass_obj
@handle_errors
def stats_cmd(ctx: AgtContext) -> None:
    """Show the repository summary and contributors reported by GitHub."""
    summary = fetch_summary(ctx)
    render_summary(summary, Console())
