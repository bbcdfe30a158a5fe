"""Retry with exponential backoff for transient network failures.

Only idempotent reads are retried. A failure is retried when it classifies as
network-error, network-timeout or connection-refused; every other kind is
re-raised on the spot.

Delay calculation: delay = base_delay * (backoff_factor ** attempt), with a
zero-based attempt index. With defaults the waits are 1s then 2s, and the third
failure is re-raised without waiting.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

import click

from agt.core.errors import classify
from agt.core.time.abc import Time

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Capped exponential backoff for classified network failures."""

    max_attempts: int = 3
    base_delay: float = 1.0
    backoff_factor: float = 2.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            msg = f"max_attempts must be at least 1, got {self.max_attempts}"
            raise ValueError(msg)

    def delay_for(self, attempt: int) -> float:
        return self.base_delay * (self.backoff_factor**attempt)

    def run(self, operation: Callable[[], T], time: Time) -> T:
        """Invoke ``operation``, retrying transient network failures.

        Args:
            operation: Zero-argument idempotent read
            time: Clock used for backoff sleeps

        Returns:
            The operation's result

        Raises:
            ClassifiedError: Non-network failures immediately, network failures
                once attempts are exhausted
        """
        for attempt in range(self.max_attempts):
            try:
                return operation()
            except Exception as e:
                error = classify(e)
                if not error.is_retryable:
                    if error is e:
                        raise
                    raise error from e

                if attempt == self.max_attempts - 1:
                    logger.warning(
                        "giving up after %d attempts kind=%s",
                        self.max_attempts,
                        error.kind.value,
                    )
                    if error is e:
                        raise
                    raise error from e

                delay = self.delay_for(attempt)
                logger.warning(
                    "transient failure kind=%s attempt=%d/%d retry_in=%.1fs",
                    error.kind.value,
                    attempt + 1,
                    self.max_attempts,
                    delay,
                )
                click.echo(
                    f"Network error, retrying in {delay:.1f}s "
                    f"(attempt {attempt + 1}/{self.max_attempts})...",
                    err=True,
                )
                time.sleep(delay)

        msg = "RetryPolicy.run finished without a result or an exception"
        raise RuntimeError(msg)


DEFAULT_RETRY_POLICY = RetryPolicy()


def with_retry(
    operation: Callable[[], T],
    time: Time,
    *,
    max_attempts: int = 3,
    base_delay: float = 1.0,
) -> T:
    """Functional form of RetryPolicy.run with the default backoff factor."""
    return RetryPolicy(max_attempts=max_attempts, base_delay=base_delay).run(operation, time)
