"""Production Git implementation.

Every method maps to exactly one git invocation through the CommandRunner.
"""

from agt.core.errors import ClassifiedError, ErrorKind
from agt.core.git.abc import DEFAULT_REMOTE, Git
from agt.core.subprocess import CommandRunner, CommandSpec


class RealGit(Git):
    """Production implementation issuing git commands through a CommandRunner."""

    def __init__(self, runner: CommandRunner) -> None:
        self._runner = runner

    def _git(self, *args: str) -> str:
        return self._runner.run(CommandSpec.git(*args)).stdout

    def get_current_branch(self) -> str | None:
        branch = self._git("branch", "--show-current").strip()
        return branch or None

    def list_remote_branches(self) -> list[str]:
        output = self._git("branch", "--list", "--remotes")
        branches: list[str] = []
        for line in output.splitlines():
            name = line.strip()
            if not name or "->" in name:
                continue
            _, sep, short = name.partition("/")
            branch = short if sep else name
            if branch and branch != "HEAD" and branch not in branches:
                branches.append(branch)
        return branches

    def count_commits(self, base_ref: str, head_ref: str) -> int:
        output = self._git("rev-list", "--count", f"{base_ref}..{head_ref}")
        return _parse_count(output, f"{base_ref}..{head_ref}")

    def count_divergence(self, upstream_ref: str, local_ref: str) -> tuple[int, int]:
        range_spec = f"{upstream_ref}...{local_ref}"
        output = self._git("rev-list", "--left-right", "--count", range_spec)
        parts = output.split()
        if len(parts) != 2:
            raise ClassifiedError(
                ErrorKind.COMMAND_FAILED,
                f"Unexpected rev-list output for {range_spec}: {output!r}",
                context={"command": f"git rev-list --left-right --count {range_spec}"},
            )
        return _parse_count(parts[0], range_spec), _parse_count(parts[1], range_spec)

    def fetch_branch(self, remote: str, branch: str) -> None:
        self._git("fetch", remote, branch)

    def create_branch(self, branch: str) -> None:
        self._git("checkout", "-b", branch)

    def push_branch(self, branch: str, remote: str = DEFAULT_REMOTE) -> None:
        self._git("push", "-u", remote, branch)

    def rebase(self, onto_ref: str) -> None:
        self._git("rebase", onto_ref)

    def delete_local_branch(self, branch: str) -> None:
        self._git("branch", "-D", branch)

    def delete_remote_branch(self, branch: str, remote: str = DEFAULT_REMOTE) -> None:
        self._git("push", remote, "--delete", branch)


def _parse_count(text: str, range_spec: str) -> int:
    stripped = text.strip()
    if not stripped.isdigit():
        raise ClassifiedError(
            ErrorKind.COMMAND_FAILED,
            f"Expected a commit count for {range_spec}, got {stripped!r}",
        )
    return int(stripped)
