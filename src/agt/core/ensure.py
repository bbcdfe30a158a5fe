"""Precondition checks shared by the workflows.

Each check raises a ClassifiedError instead of exiting, so the CLI error
handler renders help text and picks the exit code. None of them spawn a
process.
"""

from agt.core.errors import ClassifiedError, ErrorKind
from agt.core.repo_discovery import NoRepoSentinel, RepoContext
from agt.core.subprocess import CommandRunner

TOOL_INSTALL_HINTS = {
    "git": "https://git-scm.com/downloads",
    "gh": "https://cli.github.com/",
}


class Ensure:
    """Helper class for asserting workflow preconditions."""

    @staticmethod
    def in_repository(repo: RepoContext | NoRepoSentinel) -> RepoContext:
        """Narrow ``repo`` to a RepoContext or raise repository-missing."""
        if isinstance(repo, NoRepoSentinel):
            raise ClassifiedError(ErrorKind.REPOSITORY_MISSING, repo.message)
        return repo

    @staticmethod
    def tool_available(runner: CommandRunner, program: str) -> None:
        if not runner.is_available(program):
            hint = TOOL_INSTALL_HINTS.get(program, "")
            raise ClassifiedError(
                ErrorKind.TOOL_MISSING,
                f"'{program}' is not installed or not on PATH",
                context={"program": program, "install": hint},
            )

    @staticmethod
    def workflow_ready(runner: CommandRunner, repo: RepoContext | NoRepoSentinel) -> RepoContext:
        """Repository discovered and both git and gh on PATH."""
        root = Ensure.in_repository(repo)
        Ensure.tool_available(runner, "git")
        Ensure.tool_available(runner, "gh")
        return root
