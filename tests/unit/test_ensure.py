from pathlib import Path

import pytest

from agt.core.ensure import Ensure
from agt.core.errors import ClassifiedError, ErrorKind
from agt.core.repo_discovery import NoRepoSentinel, RepoContext
from tests.fakes.command_runner import FakeCommandRunner


def test_workflow_ready_checks_git_then_gh_without_running_anything() -> None:
    runner = FakeCommandRunner()
    repo = RepoContext(root=Path("/test/repo"))

    assert Ensure.workflow_ready(runner, repo) == repo
    assert runner.availability_checks == ["git", "gh"]
    assert runner.calls == []


def test_repository_missing_is_checked_first() -> None:
    runner = FakeCommandRunner(unavailable=frozenset({"gh"}))

    with pytest.raises(ClassifiedError) as exc_info:
        Ensure.workflow_ready(runner, NoRepoSentinel())

    assert exc_info.value.kind is ErrorKind.REPOSITORY_MISSING
    assert runner.availability_checks == []


def test_missing_tool_carries_install_hint() -> None:
    runner = FakeCommandRunner(unavailable=frozenset({"gh"}))

    with pytest.raises(ClassifiedError) as exc_info:
        Ensure.tool_available(runner, "gh")

    assert exc_info.value.kind is ErrorKind.TOOL_MISSING
    assert exc_info.value.context["install"] == "https://cli.github.com/"
