"""Issue creation workflow."""

from dataclasses import dataclass

from agt.core.cache import CacheKey
from agt.core.context import AgtContext
from agt.core.ensure import Ensure
from agt.core.github.types import IssueDraft
from agt.core.templates import BodyKind
from agt.core.validation import validate_not_empty
from agt.core.workflows.common import compose_body, resolve_assignees, select_labels


@dataclass(frozen=True)
class IssueResult:
    url: str
    draft: IssueDraft


def create_issue(ctx: AgtContext) -> IssueResult:
    """Prompt for an issue and create it with ``gh issue create``."""
    Ensure.workflow_ready(ctx.runner, ctx.repo)

    title = validate_not_empty(ctx.prompter.text("Issue title", required=True), "Issue title")
    ctx.logger.info("issue title entered title=%s", title)

    body = compose_body(ctx, BodyKind.ISSUE, "Issue description")
    assignees = resolve_assignees(
        ctx, ctx.prompter.text("Assignees (comma-separated, Enter to skip)")
    )
    labels = select_labels(ctx)
    milestone = ctx.prompter.text("Milestone (Enter to skip)")

    draft = IssueDraft(
        title=title,
        body=body,
        assignees=assignees,
        labels=labels,
        milestone=milestone,
    )
    with ctx.feedback.status("Creating issue..."):
        url = ctx.github.create_issue(draft)
    ctx.reads.invalidate(CacheKey.OPEN_ISSUES)

    ctx.logger.info("issue created title=%s url=%s", title, url)
    ctx.feedback.success("Issue created successfully")
    return IssueResult(url=url, draft=draft)
