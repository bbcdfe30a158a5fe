import json

import click

from agt.cli.errors import handle_errors
from agt.cli.output import machine_output, user_output
from agt.core.config import (
    CONFIG_FILENAME,
    AgtConfig,
    ConfigValidationError,
    save_config,
    validate_document,
)
from agt.core.context import AgtContext
from agt.core.errors import ClassifiedError, ErrorKind
from agt.core.validation import parse_csv, validate_not_empty


def prompt_config(ctx: AgtContext, current: AgtConfig) -> AgtConfig:
    """Ask for the scalar settings, keeping branch types from ``current``."""
    base = validate_not_empty(
        ctx.prompter.text("Default base branch", default=current.default_base_branch),
        "Default base branch",
    )
    auto_assign = ctx.prompter.confirm(
        "Assign new issues and PRs to yourself when no assignee is given?",
        default=current.auto_assign,
    )
    auto_templates = ctx.prompter.confirm(
        "Use .github issue/PR templates when available?", default=current.auto_templates
    )
    labels = ctx.prompter.text(
        "Default labels (comma-separated, Enter for none)",
        default=",".join(current.default_labels),
    )

    document = current.to_document()
    document.update(
        {
            "defaultBaseBranch": base,
            "autoAssign": auto_assign,
            "autoTemplates": auto_templates,
            "defaultLabels": parse_csv(labels),
        }
    )
    try:
        return validate_document(document)
    except ConfigValidationError as e:
        raise ClassifiedError(ErrorKind.INVALID_INPUT, str(e)) from e


@click.command("config")
@click.option(
    "--global",
    "global_",
    is_flag=True,
    help=f"Write ~/{CONFIG_FILENAME} instead of ./{CONFIG_FILENAME}.",
)
@click.option("--show", is_flag=True, help="Print the effective configuration and exit.")
@click.pass_obj
@handle_errors
def config_cmd(ctx: AgtContext, global_: bool, show: bool) -> None:
    """Show or interactively update agt configuration."""
    if show:
        source = ctx.loaded_config.source
        user_output(f"Source: {source if source is not None else 'built-in defaults'}")
        machine_output(json.dumps(ctx.config.to_document(), indent=2))
        return

    updated = prompt_config(ctx, ctx.config)
    path = (ctx.home if global_ else ctx.cwd) / CONFIG_FILENAME
    save_config(updated, path)
    user_output(click.style(f"Configuration saved to {path}", fg="green"))
