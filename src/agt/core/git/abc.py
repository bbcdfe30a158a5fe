"""High-level git operations interface.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation issuing git commands through a CommandRunner
- FakeGit (tests/fakes): In-memory implementation for tests
"""

from abc import ABC, abstractmethod

DEFAULT_REMOTE = "origin"


class Git(ABC):
    """Abstract interface for git operations.

    All implementations (real and fake) must implement this interface.
    Mutating methods are issued exactly once and never retried.
    """

    # Reads ------------------------------------------------------------------

    @abstractmethod
    def get_current_branch(self) -> str | None:
        """Get the currently checked-out branch, or None on a detached HEAD."""
        ...

    @abstractmethod
    def list_remote_branches(self) -> list[str]:
        """List remote branch names with the remote prefix removed.

        The symbolic ``origin/HEAD -> origin/main`` entry is skipped.
        """
        ...

    @abstractmethod
    def count_commits(self, base_ref: str, head_ref: str) -> int:
        """Count commits reachable from ``head_ref`` but not from ``base_ref``."""
        ...

    @abstractmethod
    def count_divergence(self, upstream_ref: str, local_ref: str) -> tuple[int, int]:
        """Count commits on each side of ``upstream_ref...local_ref``.

        Returns:
            (behind, ahead): commits only on upstream, commits only on local
        """
        ...

    @abstractmethod
    def fetch_branch(self, remote: str, branch: str) -> None:
        """Fetch a single branch from a remote, updating its tracking ref."""
        ...

    # Mutations --------------------------------------------------------------

    @abstractmethod
    def create_branch(self, branch: str) -> None:
        """Create ``branch`` from HEAD and check it out."""
        ...

    @abstractmethod
    def push_branch(self, branch: str, remote: str = DEFAULT_REMOTE) -> None:
        """Push ``branch`` to ``remote`` and set it as upstream."""
        ...

    @abstractmethod
    def rebase(self, onto_ref: str) -> None:
        """Rebase the current branch onto ``onto_ref``."""
        ...

    @abstractmethod
    def delete_local_branch(self, branch: str) -> None:
        ...

    @abstractmethod
    def delete_remote_branch(self, branch: str, remote: str = DEFAULT_REMOTE) -> None:
        ...
