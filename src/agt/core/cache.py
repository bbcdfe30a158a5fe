"""In-memory cache with per-entry expiry.

One TTLCache lives for one process invocation and serves one repository
context, so keys name the kind of read ("labels", "open-issues") and never the
repository. Expiry is always re-checked on read; the optional background
sweeper only reclaims memory.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from agt.core.time.abc import Time

T = TypeVar("T")

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL_SECONDS = 60 * 60


class CacheKey:
    LABELS = "labels"
    OPEN_ISSUES = "open-issues"
    OPEN_PULL_REQUESTS = "open-pull-requests"
    REPO_STATS = "repo-stats"
    CONTRIBUTORS = "contributors"


class CacheTTL:
    """Time-to-live per read kind, in seconds."""

    LABELS = 5 * 60
    OPEN_ISSUES = 1 * 60
    OPEN_PULL_REQUESTS = 1 * 60
    REPO_STATS = 5 * 60
    CONTRIBUTORS = 10 * 60


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    expires_at: float


@dataclass(frozen=True)
class CacheStats:
    total: int
    valid: int
    expired: int


class TTLCache:
    """Key/value store whose entries expire ``ttl`` seconds after being set."""

    def __init__(
        self,
        time: Time,
        *,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
    ) -> None:
        self._time = time
        self._sweep_interval = sweep_interval
        self._store: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._stop_sweeper = threading.Event()
        self._sweeper: threading.Thread | None = None

    def _live_entry(self, key: str) -> CacheEntry | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if self._time.monotonic() < entry.expires_at:
                return entry
            del self._store[key]
            return None

    def get(self, key: str) -> Any | None:
        """Return the stored value, or None if missing or expired."""
        entry = self._live_entry(key)
        if entry is None:
            return None
        return entry.value

    def has(self, key: str) -> bool:
        return self._live_entry(key) is not None

    def set(self, key: str, value: Any, ttl: float) -> None:
        """Store ``value`` until ``ttl`` seconds from now, replacing any entry."""
        with self._lock:
            self._store[key] = CacheEntry(value=value, expires_at=self._time.monotonic() + ttl)

    def get_or_compute(self, key: str, ttl: float, producer: Callable[[], T]) -> T:
        """Return the cached value, or call ``producer`` once and cache its result.

        Args:
            key: Cache key naming the read kind
            ttl: Lifetime in seconds for a freshly computed value
            producer: Zero-argument read; any internal retrying is its own concern

        Returns:
            The cached or freshly produced value
        """
        entry = self._live_entry(key)
        if entry is not None:
            logger.debug("cache hit key=%s", key)
            return entry.value

        logger.debug("cache miss key=%s", key)
        value = producer()
        self.set(key, value, ttl)
        return value

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def sweep(self) -> int:
        """Evict every expired entry. Returns the number evicted."""
        with self._lock:
            now = self._time.monotonic()
            expired = [key for key, entry in self._store.items() if now >= entry.expires_at]
            for key in expired:
                del self._store[key]
        if expired:
            logger.debug("cache sweep evicted=%d", len(expired))
        return len(expired)

    def size(self) -> int:
        with self._lock:
            return len(self._store)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._store)

    def stats(self) -> CacheStats:
        with self._lock:
            now = self._time.monotonic()
            valid = sum(1 for entry in self._store.values() if now < entry.expires_at)
            return CacheStats(total=len(self._store), valid=valid, expired=len(self._store) - valid)

    # ------------------------------------------------------------------
    # Background sweeper
    # ------------------------------------------------------------------

    def start_sweeper(self) -> None:
        """Start a daemon thread that calls sweep() every sweep interval."""
        if self._sweeper is not None and self._sweeper.is_alive():
            return
        self._stop_sweeper.clear()
        self._sweeper = threading.Thread(
            target=self._sweep_loop, name="agt-cache-sweeper", daemon=True
        )
        self._sweeper.start()

    def stop_sweeper(self) -> None:
        self._stop_sweeper.set()
        if self._sweeper is not None:
            self._sweeper.join(timeout=1.0)
            self._sweeper = None

    @property
    def sweeper_running(self) -> bool:
        return self._sweeper is not None and self._sweeper.is_alive()

    def _sweep_loop(self) -> None:
        while not self._stop_sweeper.wait(self._sweep_interval):
            self.sweep()
