"""Cached, retried GitHub reads.

Each read kind has its own cache key and TTL. On a miss the cache invokes one
producer, and the producer runs the gh read under the RetryPolicy, so a
transient network failure is retried without the cache ever calling the
producer twice.
"""

from collections.abc import Callable
from typing import TypeVar

from agt.core.cache import CacheKey, CacheTTL, TTLCache
from agt.core.github.abc import GitHub
from agt.core.github.types import (
    Contributor,
    Issue,
    IssueMatch,
    PullRequest,
    PullRequestMatch,
    RepoStats,
    SearchFilters,
)
from agt.core.retry import DEFAULT_RETRY_POLICY, RetryPolicy
from agt.core.time.abc import Time

T = TypeVar("T")


class CachedReads:
    """Read-through cache in front of GitHub's idempotent reads."""

    def __init__(
        self,
        github: GitHub,
        cache: TTLCache,
        time: Time,
        retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    ) -> None:
        self._github = github
        self._cache = cache
        self._time = time
        self._retry_policy = retry_policy

    def _read(self, key: str, ttl: float, read: Callable[[], T]) -> T:
        return self._cache.get_or_compute(
            key, ttl, lambda: self._retry_policy.run(read, self._time)
        )

    def labels(self) -> list[str]:
        return self._read(CacheKey.LABELS, CacheTTL.LABELS, self._github.list_labels)

    def open_issues(self) -> list[Issue]:
        return self._read(CacheKey.OPEN_ISSUES, CacheTTL.OPEN_ISSUES, self._github.list_open_issues)

    def open_pull_requests(self) -> list[PullRequest]:
        return self._read(
            CacheKey.OPEN_PULL_REQUESTS,
            CacheTTL.OPEN_PULL_REQUESTS,
            self._github.list_open_pull_requests,
        )

    def repo_stats(self) -> RepoStats:
        return self._read(CacheKey.REPO_STATS, CacheTTL.REPO_STATS, self._github.get_repo_stats)

    def contributors(self) -> list[Contributor]:
        return self._read(
            CacheKey.CONTRIBUTORS, CacheTTL.CONTRIBUTORS, self._github.list_contributors
        )

    # Searches are not cached: every query is different, but they are still retried.
    def search_issues(self, query: str, filters: SearchFilters) -> list[IssueMatch]:
        return self._retry_policy.run(
            lambda: self._github.search_issues(query, filters), self._time
        )

    def search_pull_requests(self, query: str, filters: SearchFilters) -> list[PullRequestMatch]:
        return self._retry_policy.run(
            lambda: self._github.search_pull_requests(query, filters), self._time
        )

    def invalidate(self, key: str) -> None:
        """Drop one read kind, e.g. labels after a label is created."""
        self._cache.delete(key)
