import click

from agt.cli.errors import handle_errors
from agt.core.context import AgtContext
from agt.core.workflows.label import create_label


@click.command("label")
@click.pass_obj
@handle_errors
def label_cmd(ctx: AgtContext) -> None:
    """Create a repository label (name, hex color, description)."""
    create_label(ctx)
