import click

from agt.cli.commands.branch import branch_create_cmd, branch_delete_cmd, branch_group
from agt.cli.commands.config import config_cmd
from agt.cli.commands.issue import issue_cmd
from agt.cli.commands.label import label_cmd
from agt.cli.commands.list_cmd import list_cmd
from agt.cli.commands.logs import logs_cmd
from agt.cli.commands.pr import pr_cmd
from agt.cli.commands.search import search_cmd
from agt.cli.commands.setup import setup_cmd
from agt.cli.commands.stats import stats_cmd
from agt.cli.errors import handle_errors
from agt.core.context import AgtContext, create_context
from agt.core.prompts import Choice

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags

MENU: tuple[tuple[str, click.Command], ...] = (
    ("Create an issue", issue_cmd),
    ("Create a branch from an issue", branch_create_cmd),
    ("Delete branches", branch_delete_cmd),
    ("Create a pull request", pr_cmd),
    ("Create a label", label_cmd),
    ("List open issues or pull requests", list_cmd),
    ("Search issues or pull requests", search_cmd),
    ("Show repository statistics", stats_cmd),
    ("Run the setup wizard", setup_cmd),
)


@handle_errors
def choose_from_menu(ctx: AgtContext) -> click.Command:
    return ctx.prompter.select(
        "What would you like to do?",
        [Choice(label=label, value=command) for label, command in MENU],
    )


@click.group(context_settings=CONTEXT_SETTINGS, invoke_without_command=True)
@click.version_option(package_name="agt")
@click.option("--debug", is_flag=True, help="Mirror log records to stderr.")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Automate GitHub issue, branch, pull request and label workflows.

    Run without a command to pick one from a menu.
    """
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context(debug=debug)
        ctx.call_on_close(ctx.obj.cache.stop_sweeper)

    if ctx.invoked_subcommand is None:
        ctx.invoke(choose_from_menu(ctx.obj))


cli.add_command(branch_group)
cli.add_command(config_cmd)
cli.add_command(issue_cmd)
cli.add_command(label_cmd)
cli.add_command(list_cmd)
cli.add_command(logs_cmd)
cli.add_command(pr_cmd)
cli.add_command(search_cmd)
cli.add_command(setup_cmd)
cli.add_command(stats_cmd)


def main() -> None:
    """CLI entry point used by the `agt` console script."""
    cli()
