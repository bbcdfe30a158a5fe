"""Fake Time implementation for testing.

FakeTime tracks sleep() calls without actually sleeping, and its monotonic
clock only moves when a test advances it (or when something sleeps).
"""

from agt.core.time.abc import Time


class FakeTime(Time):
    """Fake implementation that tracks calls without sleeping.

    This class has NO public setup methods besides advance(), which stands in
    for the passage of time between operations.
    """

    def __init__(self, start: float = 1000.0) -> None:
        self._now = start
        self._sleep_calls: list[float] = []

    @property
    def sleep_calls(self) -> list[float]:
        """Read-only access to tracked sleep calls for test assertions."""
        return self._sleep_calls

    def advance(self, seconds: float) -> None:
        self._now += seconds

    def sleep(self, seconds: float) -> None:
        self._sleep_calls.append(seconds)
        self._now += seconds

    def monotonic(self) -> float:
        return self._now
