"""External process execution with classified failures.

Every call to git or gh goes through a CommandRunner. The runner passes the
argument list straight to subprocess (never through a shell), bounds it with a
wall-clock timeout, records the invocation to the structured log, and turns any
failure into a ClassifiedError.
"""

import logging
import shutil
import subprocess
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from agt.core.errors import ClassifiedError, CommandFailure, ErrorKind, classify

TRUSTED_PROGRAMS = frozenset({"git", "gh"})

DEFAULT_COMMAND_TIMEOUT_SECONDS = 60.0


@dataclass(frozen=True)
class CommandSpec:
    """One external invocation: a trusted program and its argument list."""

    program: str
    args: tuple[str, ...]

    def __post_init__(self) -> None:
        if self.program not in TRUSTED_PROGRAMS:
            msg = f"Refusing to run untrusted program: {self.program}"
            raise ValueError(msg)

    @staticmethod
    def git(*args: str) -> "CommandSpec":
        return CommandSpec(program="git", args=tuple(args))

    @staticmethod
    def gh(*args: str) -> "CommandSpec":
        return CommandSpec(program="gh", args=tuple(args))

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]

    @property
    def command_line(self) -> str:
        return " ".join(self.argv)


@dataclass(frozen=True)
class CommandResult:
    """Output of a successful invocation, trailing whitespace removed."""

    stdout: str
    exit_code: int


class CommandRunner(ABC):
    """Abstract interface for running git/gh commands."""

    @abstractmethod
    def run(self, spec: CommandSpec) -> CommandResult:
        """Run a command synchronously.

        Args:
            spec: The command to run

        Returns:
            CommandResult for a zero exit status

        Raises:
            ClassifiedError: If the program cannot be spawned, exits non-zero,
                times out, or produces output that is not valid text
        """
        ...

    @abstractmethod
    def is_available(self, program: str) -> bool:
        """Check whether a program is on PATH without spawning it."""
        ...


class RealCommandRunner(CommandRunner):
    """Production implementation using subprocess.run()."""

    def __init__(
        self,
        cwd: Path,
        logger: logging.Logger,
        *,
        timeout_seconds: float = DEFAULT_COMMAND_TIMEOUT_SECONDS,
    ) -> None:
        self._cwd = cwd
        self._logger = logger
        self._timeout_seconds = timeout_seconds

    def run(self, spec: CommandSpec) -> CommandResult:
        started = time.monotonic()
        try:
            proc = subprocess.run(
                spec.argv,
                cwd=self._cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                check=False,
                timeout=self._timeout_seconds,
            )
        except OSError as e:
            # any spawn failure, including ENOEXEC and a vanished run directory
            error = ClassifiedError(
                ErrorKind.TOOL_MISSING,
                f"Could not start '{spec.program}': {e.strerror or e}",
                context=self._context(spec),
            )
            self._record(spec, started, outcome="spawn-failed", error=error)
            raise error from e
        except subprocess.TimeoutExpired as e:
            error = ClassifiedError(
                ErrorKind.NETWORK_TIMEOUT,
                f"'{spec.command_line}' did not finish within {self._timeout_seconds:g}s",
                context=self._context(spec),
            )
            self._record(spec, started, outcome="timeout", error=error)
            raise error from e
        except UnicodeDecodeError as e:
            error = ClassifiedError(
                ErrorKind.COMMAND_FAILED,
                f"Output of '{spec.command_line}' is not valid UTF-8 text",
                context=self._context(spec),
            )
            self._record(spec, started, outcome="undecodable", error=error)
            raise error from e
        except Exception as e:
            classified = classify(e)
            error = ClassifiedError(
                classified.kind,
                classified.message,
                variant=classified.variant,
                context={**classified.context, **self._context(spec)},
            )
            self._record(spec, started, outcome="error", error=error)
            raise error from e

        if proc.returncode != 0:
            classified = classify(
                CommandFailure(
                    program=spec.program,
                    args=spec.args,
                    exit_code=proc.returncode,
                    stderr=proc.stderr or "",
                )
            )
            error = ClassifiedError(
                classified.kind,
                classified.message,
                variant=classified.variant,
                context={**classified.context, **self._context(spec)},
            )
            self._record(spec, started, outcome="failed", error=error, exit_code=proc.returncode)
            raise error

        self._record(spec, started, outcome="ok", exit_code=proc.returncode)
        return CommandResult(stdout=(proc.stdout or "").rstrip(), exit_code=proc.returncode)

    def is_available(self, program: str) -> bool:
        return shutil.which(program) is not None

    def _context(self, spec: CommandSpec) -> dict[str, str]:
        return {"command": spec.command_line, "cwd": str(self._cwd)}

    def _record(
        self,
        spec: CommandSpec,
        started: float,
        *,
        outcome: str,
        error: ClassifiedError | None = None,
        exit_code: int | None = None,
    ) -> None:
        fields: dict[str, object] = {
            "program": spec.program,
            "args": list(spec.args),
            "outcome": outcome,
            "exit_code": exit_code,
            "duration_ms": int((time.monotonic() - started) * 1000),
        }
        if error is None:
            self._logger.info("command %s", spec.command_line, extra={"fields": fields})
            return
        fields["error_kind"] = error.kind.value
        self._logger.warning("command %s", spec.command_line, extra={"fields": fields})
