"""Abstract base class for GitHub operations."""

from abc import ABC, abstractmethod

from agt.core.github.types import (
    Contributor,
    Issue,
    IssueDraft,
    IssueMatch,
    LabelDraft,
    PullRequest,
    PullRequestDraft,
    PullRequestMatch,
    RepoStats,
    SearchFilters,
)


class GitHub(ABC):
    """Abstract interface for GitHub operations.

    All implementations (real and fake) must implement this interface.
    Reads are idempotent and may be cached or retried by callers; create_*
    methods are mutations and are issued exactly once.
    """

    @abstractmethod
    def check_auth(self) -> str:
        """Check that gh is logged in.

        Returns:
            The login gh reports, or "unknown" when it does not print one

        Raises:
            ClassifiedError: auth-failed when gh has no valid credentials
        """
        ...

    @abstractmethod
    def get_current_user(self) -> str:
        """Return the login of the authenticated user."""
        ...

    @abstractmethod
    def list_labels(self) -> list[str]:
        ...

    @abstractmethod
    def list_open_issues(self) -> list[Issue]:
        ...

    @abstractmethod
    def list_open_pull_requests(self) -> list[PullRequest]:
        ...

    @abstractmethod
    def get_repo_stats(self) -> RepoStats:
        ...

    @abstractmethod
    def list_contributors(self) -> list[Contributor]:
        ...

    @abstractmethod
    def search_issues(self, query: str, filters: SearchFilters) -> list[IssueMatch]:
        """Search issues with GitHub search syntax plus state, author and label filters."""
        ...

    @abstractmethod
    def search_pull_requests(self, query: str, filters: SearchFilters) -> list[PullRequestMatch]:
        """Search pull requests; ``filters.label`` is ignored."""
        ...

    @abstractmethod
    def create_issue(self, draft: IssueDraft) -> str:
        """Create an issue.

        Returns:
            URL of the created issue as printed by gh
        """
        ...

    @abstractmethod
    def create_pull_request(self, draft: PullRequestDraft) -> str:
        """Create a pull request.

        Returns:
            URL of the created pull request as printed by gh
        """
        ...

    @abstractmethod
    def create_label(self, draft: LabelDraft) -> None:
        ...
