import click
from rich.console import Console
from rich.table import Table

from agt.cli.errors import handle_errors
from agt.cli.output import user_output
from agt.core.context import AgtContext
from agt.core.workflows.setup import SetupReport, StepStatus, run_setup

_STATUS_STYLES = {
    StepStatus.PASS: "[green]pass[/green]",
    StepStatus.FAIL: "[red]fail[/red]",
    StepStatus.SKIP: "[dim]skipped[/dim]",
}


def render_report(report: SetupReport, console: Console) -> None:
    table = Table(show_header=True, header_style="bold", title="Setup Summary")
    table.add_column("step", style="bold", no_wrap=True)
    table.add_column("status")
    table.add_column("detail")
    for step in report.steps:
        table.add_row(step.name, _STATUS_STYLES[step.status], step.detail)
    console.print(table)


@click.command("setup")
@click.pass_obj
@handle_errors
def setup_cmd(ctx: AgtContext) -> None:
    """Check git, gh and GitHub access, then optionally write a config file."""
    report = run_setup(ctx)
    if report is None:
        user_output(click.style("Setup cancelled. Run 'agt setup' when you're ready.", fg="yellow"))
        return

    render_report(report, Console(stderr=True))
    if not report.ready:
        user_output(
            click.style("Setup incomplete. Fix the failed step and run it again.", fg="red")
        )
        raise SystemExit(1)
    user_output(click.style("All set! Run 'agt' to get started.", fg="green"))
