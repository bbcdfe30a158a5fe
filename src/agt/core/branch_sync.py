"""Branch divergence checks and rebase-based resync.

State machine:

    UNKNOWN --check_sync--> CHECKED --> SYNCED    (behind == 0)
                                    --> DIVERGED  (behind > 0)
    DIVERGED --resync ok--> SYNCED

Sync status is computed from a fresh fetch every time and never cached.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from agt.core.errors import ClassifiedError, ErrorKind, ErrorVariant
from agt.core.git.abc import DEFAULT_REMOTE, Git

logger = logging.getLogger(__name__)


class SyncState(Enum):
    UNKNOWN = "unknown"
    CHECKED = "checked"
    SYNCED = "synced"
    DIVERGED = "diverged"


@dataclass(frozen=True)
class BranchSyncStatus:
    """Divergence of a local branch from the fetched remote base.

    ``is_synced`` depends only on ``behind``; being ahead is expected for a
    branch that is about to become a pull request.
    """

    is_synced: bool
    behind: int
    ahead: int


class BranchSyncEngine:
    """Compares a local branch with its remote base and rebases on request."""

    def __init__(self, git: Git, remote: str = DEFAULT_REMOTE) -> None:
        self._git = git
        self._remote = remote
        self._state = SyncState.UNKNOWN

    @property
    def state(self) -> SyncState:
        return self._state

    def remote_ref(self, base_branch: str) -> str:
        return f"{self._remote}/{base_branch}"

    def check_sync(self, local_branch: str, base_branch: str) -> BranchSyncStatus:
        """Fetch the base branch and count commits on each side.

        Args:
            local_branch: Branch that will become the PR head
            base_branch: Branch the PR will target

        Returns:
            BranchSyncStatus with behind/ahead counts relative to the remote base
        """
        self._git.fetch_branch(self._remote, base_branch)
        behind, ahead = self._git.count_divergence(self.remote_ref(base_branch), local_branch)
        self._state = SyncState.CHECKED
        status = BranchSyncStatus(is_synced=behind == 0, behind=behind, ahead=ahead)
        self._state = SyncState.SYNCED if status.is_synced else SyncState.DIVERGED
        logger.info(
            "sync check local=%s base=%s behind=%d ahead=%d",
            local_branch,
            self.remote_ref(base_branch),
            behind,
            ahead,
        )
        return status

    def resync(self, base_branch: str) -> None:
        """Rebase the current branch onto the fetched base branch.

        A failed rebase is terminal: the rebase is left in progress for the user
        to resolve by hand.

        Raises:
            ClassifiedError: operation-failed / rebase-conflict if git cannot
                complete the rebase
        """
        onto = self.remote_ref(base_branch)
        try:
            self._git.rebase(onto)
        except ClassifiedError as e:
            logger.error("rebase onto %s failed kind=%s", onto, e.kind.value)
            raise ClassifiedError(
                ErrorKind.OPERATION_FAILED,
                f"Could not rebase onto '{onto}'. Resolve the conflicts manually.",
                variant=ErrorVariant.REBASE_CONFLICT,
                context={**e.context, "onto": onto},
            ) from e
        self._state = SyncState.SYNCED
        logger.info("rebased onto %s", onto)
