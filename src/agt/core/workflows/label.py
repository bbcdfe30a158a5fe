"""Label creation workflow."""

from dataclasses import dataclass

from agt.core.cache import CacheKey
from agt.core.context import AgtContext
from agt.core.ensure import Ensure
from agt.core.github.types import LabelDraft
from agt.core.validation import DEFAULT_LABEL_COLOR, validate_hex_color, validate_not_empty


@dataclass(frozen=True)
class LabelResult:
    draft: LabelDraft


def create_label(ctx: AgtContext) -> LabelResult:
    """Prompt for a label and create it with ``gh label create``.

    The color is validated as soon as it is entered, so a bad color never
    reaches gh.
    """
    Ensure.workflow_ready(ctx.runner, ctx.repo)

    name = validate_not_empty(ctx.prompter.text("Label name", required=True), "Label name")
    color = validate_hex_color(
        ctx.prompter.text("Label color (6-digit hex)", default=DEFAULT_LABEL_COLOR)
    )
    description = ctx.prompter.text("Label description (optional)")

    draft = LabelDraft(name=name, color=color, description=description)
    with ctx.feedback.status(f"Creating label '{name}'..."):
        ctx.github.create_label(draft)
    ctx.reads.invalidate(CacheKey.LABELS)

    ctx.logger.info("label created name=%s color=%s", name, color)
    ctx.feedback.success(f"Label '{name}' created successfully")
    ctx.feedback.info(f"Color: #{color}")
    return LabelResult(draft=draft)
