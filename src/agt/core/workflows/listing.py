"""Read-only listings of open issues and pull requests."""

from dataclasses import dataclass
from enum import Enum

from agt.core.context import AgtContext
from agt.core.ensure import Ensure
from agt.core.github.types import Issue, PullRequest
from agt.core.prompts import Choice


class ListKind(Enum):
    ISSUES = "issues"
    PULL_REQUESTS = "prs"


@dataclass(frozen=True)
class Listing:
    kind: ListKind
    issues: list[Issue]
    pull_requests: list[PullRequest]


def list_open_items(ctx: AgtContext, kind: ListKind | None = None) -> Listing:
    """Fetch open issues or pull requests through the cache.

    Asks which to list when ``kind`` is not given.
    """
    Ensure.workflow_ready(ctx.runner, ctx.repo)

    if kind is None:
        kind = ctx.prompter.select(
            "What would you like to list?",
            [
                Choice(label="Issues", value=ListKind.ISSUES),
                Choice(label="Pull Requests", value=ListKind.PULL_REQUESTS),
            ],
        )

    if kind is ListKind.ISSUES:
        with ctx.feedback.status("Fetching open issues..."):
            issues = ctx.reads.open_issues()
        return Listing(kind=kind, issues=issues, pull_requests=[])

    with ctx.feedback.status("Fetching open pull requests..."):
        pull_requests = ctx.reads.open_pull_requests()
    return Listing(kind=kind, issues=[], pull_requests=pull_requests)
