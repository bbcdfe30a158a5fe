"""Type definitions for GitHub operations."""

from dataclasses import dataclass, field
from enum import Enum

NO_LABEL = "none"


@dataclass(frozen=True)
class Issue:
    """Read-only projection of an open issue."""

    number: str
    title: str
    label: str = NO_LABEL


@dataclass(frozen=True)
class PullRequest:
    """Read-only projection of an open pull request."""

    number: str
    title: str
    branch: str
    is_draft: bool


@dataclass(frozen=True)
class RepoStats:
    name: str
    description: str
    stars: int
    forks: int
    open_issues: int
    watchers: int


@dataclass(frozen=True)
class Contributor:
    login: str
    contributions: int


@dataclass(frozen=True)
class IssueDraft:
    """Everything needed for one `gh issue create` call."""

    title: str
    body: str
    assignees: str = ""
    labels: frozenset[str] = field(default_factory=frozenset)
    milestone: str = ""


@dataclass(frozen=True)
class PullRequestDraft:
    """Everything needed for one `gh pr create` call."""

    title: str
    body: str
    head: str
    base: str
    reviewers: str = ""
    assignees: str = ""
    labels: frozenset[str] = field(default_factory=frozenset)
    milestone: str = ""
    is_draft: bool = False


@dataclass(frozen=True)
class LabelDraft:
    name: str
    color: str
    description: str = ""


class SearchState(Enum):
    """Values accepted by ``gh issue/pr list --state``."""

    ALL = "all"
    OPEN = "open"
    CLOSED = "closed"
    MERGED = "merged"  # pull requests only


@dataclass(frozen=True)
class SearchFilters:
    state: SearchState = SearchState.ALL
    author: str = ""
    label: str = ""


@dataclass(frozen=True)
class IssueMatch:
    """An issue returned by a search, in any state."""

    number: str
    title: str
    state: str
    author: str
    labels: tuple[str, ...] = ()


@dataclass(frozen=True)
class PullRequestMatch:
    """A pull request returned by a search, in any state."""

    number: str
    title: str
    state: str
    author: str
    branch: str
    is_draft: bool = False
