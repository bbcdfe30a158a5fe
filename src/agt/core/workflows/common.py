"""Steps shared by the issue and pull-request workflows."""

import click

from agt.core.context import AgtContext
from agt.core.errors import ClassifiedError
from agt.core.github.types import NO_LABEL, Issue
from agt.core.prompts import Choice
from agt.core.templates import BodyKind, ContextRequest
from agt.core.validation import parse_csv, validate_not_empty


def format_issue_line(issue: Issue) -> str:
    if issue.label != NO_LABEL:
        label_text = click.style(f"[{issue.label}]", fg="yellow")
    else:
        label_text = click.style("[no label]", dim=True)
    return f"{click.style(f'#{issue.number}', bold=True)} {issue.title} {label_text}"


def show_open_issues(ctx: AgtContext, issues: list[Issue]) -> None:
    if not issues:
        return
    ctx.feedback.info(click.style("\n=== Open Issues ===\n", fg="cyan", bold=True))
    for issue in issues:
        ctx.feedback.info(format_issue_line(issue))
    ctx.feedback.info("")


def compose_body(ctx: AgtContext, kind: BodyKind, description_prompt: str) -> str:
    """Ask the body author for a body, falling back to a typed description.

    The author first names the context it wants shown; open issues are fetched
    through the cache and displayed before ``compose`` runs.
    """
    if ctx.body_author.context_request(kind) is ContextRequest.OPEN_ISSUES:
        with ctx.feedback.status("Fetching open issues..."):
            issues = ctx.reads.open_issues()
        show_open_issues(ctx, issues)

    body = ctx.body_author.compose(kind)
    if body:
        return body
    description = ctx.prompter.text(description_prompt, required=True)
    return validate_not_empty(description, "Description")


def resolve_assignees(ctx: AgtContext, raw: str) -> str:
    """Comma-joined assignees; empty input means the current user when auto-assign is on.

    Looking up the current user is best effort: a failure is reported and the
    issue or PR is created unassigned.
    """
    assignees = parse_csv(raw)
    if assignees:
        return ",".join(assignees)
    if not ctx.config.auto_assign:
        return ""

    try:
        with ctx.feedback.status("Getting current user..."):
            login = ctx.github.get_current_user()
    except ClassifiedError as e:
        ctx.logger.warning("current user lookup failed kind=%s", e.kind.value)
        ctx.feedback.warning("Failed to get current user, continuing without assignee")
        return ""
    if login:
        ctx.feedback.success(f"Assignee set to your account: {login}")
    return login


def select_labels(ctx: AgtContext) -> frozenset[str]:
    """Multi-select from the repository's labels, config defaults preselected."""
    with ctx.feedback.status("Fetching labels..."):
        labels = ctx.reads.labels()
    ctx.feedback.success(f"Found {len(labels)} label(s)")
    if not labels:
        return frozenset()

    preselected = [label for label in ctx.config.default_labels if label in labels]
    chosen = ctx.prompter.multi_select(
        "Select labels:",
        [Choice(label=label, value=label) for label in labels],
        preselected=preselected,
    )
    if chosen:
        ctx.feedback.info(click.style("Selected labels: ", fg="green") + ", ".join(chosen))
    return frozenset(chosen)
