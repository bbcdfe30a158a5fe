"""Fake CommandRunner for testing.

FakeCommandRunner never spawns a process. Responses are keyed by the full argv
of a CommandSpec; unknown commands succeed with empty output.
"""

from agt.core.errors import ClassifiedError
from agt.core.subprocess import CommandResult, CommandRunner, CommandSpec


class FakeCommandRunner(CommandRunner):
    """In-memory fake implementation of CommandRunner.

    This class has NO public setup methods. All state is provided via constructor.
    """

    def __init__(
        self,
        *,
        outputs: dict[tuple[str, ...], str] | None = None,
        failures: dict[tuple[str, ...], ClassifiedError] | None = None,
        unavailable: frozenset[str] = frozenset(),
    ) -> None:
        """Create FakeCommandRunner with canned responses.

        Args:
            outputs: argv tuple -> stdout returned for that invocation
            failures: argv tuple -> error raised for that invocation
            unavailable: Programs reported as missing from PATH
        """
        self._outputs = outputs or {}
        self._failures = failures or {}
        self._unavailable = unavailable
        self._calls: list[CommandSpec] = []
        self._availability_checks: list[str] = []

    @property
    def calls(self) -> list[CommandSpec]:
        """Every spec passed to run(), in order."""
        return self._calls

    @property
    def availability_checks(self) -> list[str]:
        return self._availability_checks

    def run(self, spec: CommandSpec) -> CommandResult:
        self._calls.append(spec)
        key = tuple(spec.argv)
        if key in self._failures:
            raise self._failures[key]
        return CommandResult(stdout=self._outputs.get(key, "").rstrip(), exit_code=0)

    def is_available(self, program: str) -> bool:
        self._availability_checks.append(program)
        return program not in self._unavailable
