"""Tests for RealCommandRunner: argv handling, classification and logging."""

import logging
import subprocess
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from agt.core.errors import ClassifiedError, ErrorKind, ErrorVariant
from agt.core.subprocess import CommandSpec, RealCommandRunner


class RecordingHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture
def log_records() -> tuple[logging.Logger, list[logging.LogRecord]]:
    logger = logging.getLogger("agt.test.subprocess")
    logger.setLevel(logging.DEBUG)
    handler = RecordingHandler()
    logger.handlers = [handler]
    logger.propagate = False
    return logger, handler.records


def _completed(returncode: int, stdout: str = "", stderr: str = "") -> Mock:
    result = Mock(spec=subprocess.CompletedProcess)
    result.returncode = returncode
    result.stdout = stdout
    result.stderr = stderr
    return result


def test_success_strips_trailing_whitespace_and_passes_argv(log_records) -> None:
    logger, records = log_records
    runner = RealCommandRunner(Path("/repo"), logger, timeout_seconds=5)

    with patch("agt.core.subprocess.subprocess.run") as mock_run:
        mock_run.return_value = _completed(0, stdout="main\n\n")
        result = runner.run(CommandSpec.git("branch", "--show-current"))

    assert result.stdout == "main"
    assert result.exit_code == 0
    mock_run.assert_called_once_with(
        ["git", "branch", "--show-current"],
        cwd=Path("/repo"),
        capture_output=True,
        text=True,
        encoding="utf-8",
        check=False,
        timeout=5,
    )
    assert len(records) == 1
    fields = records[0].fields  # type: ignore[attr-defined]
    assert fields["program"] == "git"
    assert fields["args"] == ["branch", "--show-current"]
    assert fields["outcome"] == "ok"
    assert fields["exit_code"] == 0
    assert "duration_ms" in fields


def test_nonzero_exit_is_classified_with_context(log_records) -> None:
    logger, records = log_records
    runner = RealCommandRunner(Path("/repo"), logger)

    with patch("agt.core.subprocess.subprocess.run") as mock_run:
        mock_run.return_value = _completed(1, stderr="API rate limit exceeded for user")
        with pytest.raises(ClassifiedError) as exc_info:
            runner.run(CommandSpec.gh("label", "list"))

    error = exc_info.value
    assert error.kind is ErrorKind.NETWORK_ERROR
    assert error.variant is ErrorVariant.RATE_LIMIT
    assert error.context["command"] == "gh label list"
    assert error.context["cwd"] == "/repo"
    assert records[0].levelno == logging.WARNING
    assert records[0].fields["error_kind"] == "network-error"  # type: ignore[attr-defined]


def test_unmatched_nonzero_exit_is_command_failed(log_records) -> None:
    logger, _ = log_records
    runner = RealCommandRunner(Path("/repo"), logger)

    with patch("agt.core.subprocess.subprocess.run") as mock_run:
        mock_run.return_value = _completed(128, stderr="fatal: something unusual")
        with pytest.raises(ClassifiedError) as exc_info:
            runner.run(CommandSpec.git("status"))

    assert exc_info.value.kind is ErrorKind.COMMAND_FAILED


@pytest.mark.parametrize(
    ("raised", "kind"),
    [
        (FileNotFoundError(2, "No such file or directory", "gh"), ErrorKind.TOOL_MISSING),
        (PermissionError(13, "Permission denied", "gh"), ErrorKind.TOOL_MISSING),
        (OSError(8, "Exec format error"), ErrorKind.TOOL_MISSING),
        (NotADirectoryError(20, "Not a directory", "/repo"), ErrorKind.TOOL_MISSING),
        (subprocess.TimeoutExpired(cmd=["gh", "api", "user"], timeout=60), ErrorKind.NETWORK_TIMEOUT),
        (UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte"), ErrorKind.COMMAND_FAILED),
    ],
)
def test_spawn_problems_are_classified_and_logged(log_records, raised: Exception, kind: ErrorKind) -> None:
    logger, records = log_records
    runner = RealCommandRunner(Path("/repo"), logger)

    with patch("agt.core.subprocess.subprocess.run", side_effect=raised):
        with pytest.raises(ClassifiedError) as exc_info:
            runner.run(CommandSpec.gh("api", "user"))

    assert exc_info.value.kind is kind
    assert exc_info.value.__cause__ is raised
    assert len(records) == 1
    assert records[0].fields["error_kind"] == kind.value  # type: ignore[attr-defined]


def test_untrusted_program_is_rejected() -> None:
    with pytest.raises(ValueError):
        CommandSpec(program="sh", args=("-c", "echo hi"))


def test_is_available_uses_path_lookup(log_records) -> None:
    logger, _ = log_records
    runner = RealCommandRunner(Path("/repo"), logger)

    with patch("agt.core.subprocess.shutil.which", return_value=None) as mock_which:
        assert not runner.is_available("gh")

    mock_which.assert_called_once_with("gh")


def test_unexpected_failure_is_still_logged(log_records) -> None:
    logger, records = log_records
    runner = RealCommandRunner(Path("/repo"), logger)

    with patch("agt.core.subprocess.subprocess.run", side_effect=ValueError("embedded null byte")):
        with pytest.raises(ClassifiedError) as exc_info:
            runner.run(CommandSpec.git("status"))

    assert exc_info.value.kind is ErrorKind.UNKNOWN
    assert exc_info.value.context["command"] == "git status"
    assert len(records) == 1
    assert records[0].fields["outcome"] == "error"  # type: ignore[attr-defined]
