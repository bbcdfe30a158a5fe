"""Time operations abstraction for testing.

This module provides an ABC for clock operations (sleep and a monotonic
reading) so that retry backoff and cache expiry can be tested without
actually waiting.
"""

from abc import ABC, abstractmethod


class Time(ABC):
    """Abstract time operations for dependency injection."""

    @abstractmethod
    def sleep(self, seconds: float) -> None:
        """Sleep for specified number of seconds.

        Args:
            seconds: Number of seconds to sleep
        """
        ...

    @abstractmethod
    def monotonic(self) -> float:
        """Return a monotonic clock reading in seconds.

        Only differences between two readings are meaningful.
        """
        ...
