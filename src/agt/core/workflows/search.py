"""Search issues or pull requests by text, state, author and label."""

from dataclasses import dataclass

from agt.core.context import AgtContext
from agt.core.ensure import Ensure
from agt.core.github.types import IssueMatch, PullRequestMatch, SearchFilters, SearchState
from agt.core.prompts import Choice
from agt.core.validation import validate_not_empty
from agt.core.workflows.listing import ListKind

_STATE_LABELS = {
    SearchState.ALL: "All",
    SearchState.OPEN: "Open",
    SearchState.CLOSED: "Closed",
    SearchState.MERGED: "Merged",
}


@dataclass(frozen=True)
class SearchResults:
    kind: ListKind
    query: str
    filters: SearchFilters
    issues: list[IssueMatch]
    pull_requests: list[PullRequestMatch]

    @property
    def count(self) -> int:
        return len(self.issues) + len(self.pull_requests)


def _ask_filters(ctx: AgtContext, kind: ListKind) -> SearchFilters:
    states = [SearchState.ALL, SearchState.OPEN, SearchState.CLOSED]
    if kind is ListKind.PULL_REQUESTS:
        states.append(SearchState.MERGED)
    state = ctx.prompter.select(
        "Filter by state:",
        [Choice(label=_STATE_LABELS[s], value=s) for s in states],
        default=SearchState.ALL,
    )

    author = ""
    if ctx.prompter.confirm("Filter by author?", default=False):
        author = validate_not_empty(ctx.prompter.text("Author username:"), "Author")

    label = ""
    if kind is ListKind.ISSUES and ctx.prompter.confirm("Filter by label?", default=False):
        label = validate_not_empty(ctx.prompter.text("Label name:"), "Label")

    return SearchFilters(state=state, author=author, label=label)


def search_items(
    ctx: AgtContext, kind: ListKind | None = None, query: str | None = None
) -> SearchResults:
    """Ask for whatever was not given on the command line, then run one search.

    Results are not cached; the read is retried on transient network errors.
    """
    Ensure.workflow_ready(ctx.runner, ctx.repo)

    if kind is None:
        kind = ctx.prompter.select(
            "What would you like to search?",
            [
                Choice(label="Issues", value=ListKind.ISSUES),
                Choice(label="Pull Requests", value=ListKind.PULL_REQUESTS),
            ],
        )
    if query is None:
        query = ctx.prompter.text("Search query:", required=True)
    query = validate_not_empty(query, "Search query")

    filters = _ask_filters(ctx, kind)
    ctx.logger.info(
        "search kind=%s state=%s author=%s label=%s",
        kind.value,
        filters.state.value,
        bool(filters.author),
        bool(filters.label),
    )

    if kind is ListKind.ISSUES:
        with ctx.feedback.status("Searching issues..."):
            issues = ctx.reads.search_issues(query, filters)
        return SearchResults(kind, query, filters, issues=issues, pull_requests=[])

    with ctx.feedback.status("Searching pull requests..."):
        pull_requests = ctx.reads.search_pull_requests(query, filters)
    return SearchResults(kind, query, filters, issues=[], pull_requests=pull_requests)
