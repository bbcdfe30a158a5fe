"""Tests for TTLCache expiry, compute-once and sweeping."""

import time as real_time

from agt.core.cache import CacheKey, CacheTTL, TTLCache
from agt.core.time.real import RealTime
from tests.fakes.time import FakeTime


def test_set_then_get_returns_value() -> None:
    cache = TTLCache(FakeTime())

    cache.set("labels", ["bug"], ttl=300)

    assert cache.get("labels") == ["bug"]


def test_value_absent_once_ttl_elapses() -> None:
    time = FakeTime()
    cache = TTLCache(time)
    cache.set("labels", ["bug"], ttl=300)

    time.advance(299)
    assert cache.get("labels") == ["bug"]

    time.advance(1)
    assert cache.get("labels") is None
    assert cache.size() == 0


def test_set_overwrites_and_resets_expiry() -> None:
    time = FakeTime()
    cache = TTLCache(time)
    cache.set("k", 1, ttl=10)
    time.advance(8)

    cache.set("k", 2, ttl=10)
    time.advance(8)

    assert cache.get("k") == 2


def test_get_or_compute_calls_producer_once_while_fresh() -> None:
    time = FakeTime()
    cache = TTLCache(time)
    calls: list[int] = []

    def producer() -> str:
        calls.append(1)
        return "value"

    assert cache.get_or_compute("k", 60, producer) == "value"
    assert cache.get_or_compute("k", 60, producer) == "value"
    assert len(calls) == 1

    time.advance(60)
    cache.get_or_compute("k", 60, producer)
    assert len(calls) == 2


def test_get_or_compute_does_not_cache_failures() -> None:
    cache = TTLCache(FakeTime())

    def failing() -> str:
        raise RuntimeError("boom")

    try:
        cache.get_or_compute("k", 60, failing)
    except RuntimeError:
        pass

    assert not cache.has("k")


def test_delete_and_clear() -> None:
    cache = TTLCache(FakeTime())
    cache.set("a", 1, ttl=10)
    cache.set("b", 2, ttl=10)

    cache.delete("a")
    assert cache.keys() == ["b"]

    cache.clear()
    assert cache.size() == 0


def test_sweep_evicts_only_expired_entries() -> None:
    time = FakeTime()
    cache = TTLCache(time)
    cache.set(CacheKey.OPEN_ISSUES, [], ttl=CacheTTL.OPEN_ISSUES)
    cache.set(CacheKey.CONTRIBUTORS, [], ttl=CacheTTL.CONTRIBUTORS)
    time.advance(120)

    stats = cache.stats()
    assert (stats.total, stats.valid, stats.expired) == (2, 1, 1)

    assert cache.sweep() == 1
    assert cache.keys() == [CacheKey.CONTRIBUTORS]


def test_ttl_policy() -> None:
    assert CacheTTL.LABELS == 300
    assert CacheTTL.OPEN_ISSUES == 60
    assert CacheTTL.OPEN_PULL_REQUESTS == 60
    assert CacheTTL.REPO_STATS == 300
    assert CacheTTL.CONTRIBUTORS == 600


def test_background_sweeper_evicts_and_stops() -> None:
    cache = TTLCache(RealTime(), sweep_interval=0.01)
    cache.set("short", 1, ttl=0.001)
    cache.set("long", 2, ttl=60)

    cache.start_sweeper()
    try:
        assert cache.sweeper_running
        deadline = real_time.monotonic() + 2.0
        while "short" in cache.keys() and real_time.monotonic() < deadline:
            real_time.sleep(0.01)
    finally:
        cache.stop_sweeper()

    assert cache.keys() == ["long"]
    assert not cache.sweeper_running
