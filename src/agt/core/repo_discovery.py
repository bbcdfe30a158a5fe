"""Repository discovery.

Finds the enclosing git repository by walking up the directory tree, without
spawning git, so the repository precondition costs no subprocess.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class RepoContext:
    """A git repository root."""

    root: Path

    @property
    def name(self) -> str:
        return self.root.name


@dataclass(frozen=True)
class NoRepoSentinel:
    """Sentinel value indicating execution outside a git repository.

    Commands that require a repository check for this sentinel and fail fast
    with repository-missing.
    """

    message: str = "Not inside a git repository"


def discover_repo_or_sentinel(cwd: Path) -> RepoContext | NoRepoSentinel:
    """Walk up from `cwd` to find a directory containing `.git`.

    `.git` may be a directory or, inside a linked worktree or submodule, a file;
    either marks the root.
    """
    if not cwd.exists():
        return NoRepoSentinel(message=f"Start path '{cwd}' does not exist")

    cur = cwd.resolve()
    for parent in [cur, *cur.parents]:
        if (parent / ".git").exists():
            return RepoContext(root=parent)

    return NoRepoSentinel(message="Not inside a git repository (no .git found up the tree)")
