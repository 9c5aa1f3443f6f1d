"""
Tests for the TTL metrics cache.
"""

from datetime import datetime, timezone

import pytest

from propdesk.core.clock import FixedClock
from propdesk.metrics.metrics_cache import MetricsCache


@pytest.fixture
def clock():
    return FixedClock(datetime(2025, 7, 2, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def cache(clock):
    return MetricsCache(clock=clock, ttl_seconds=120)


def test_hit_before_expiry(cache, clock):
    cache.set("acc-1", {"balance": 50500.0})
    clock.advance(seconds=119)
    assert cache.get("acc-1") == {"balance": 50500.0}


def test_expired_entry_is_a_miss(cache, clock):
    cache.set("acc-1", "metrics")
    clock.advance(seconds=120)
    assert cache.get("acc-1") is None
    assert cache.stats().size == 0


def test_per_entry_ttl(cache, clock):
    cache.set("short", "a", ttl_seconds=5)
    cache.set("long", "b")
    clock.advance(seconds=10)
    assert cache.get("short") is None
    assert cache.get("long") == "b"


def test_invalidate_and_clear(cache):
    cache.set("acc-1", "a")
    cache.set("acc-2", "b")

    cache.invalidate("acc-1")
    cache.invalidate("missing")
    assert cache.get("acc-1") is None
    assert cache.get("acc-2") == "b"

    cache.clear()
    assert cache.get("acc-2") is None


def test_cleanup_removes_only_expired(cache, clock):
    cache.set("old", "a", ttl_seconds=10)
    cache.set("fresh", "b")
    clock.advance(seconds=30)

    assert cache.cleanup() == 1
    assert cache.stats().keys == ["fresh"]


def test_stats_track_hits_and_misses(cache):
    cache.set("acc-1", "a")
    cache.get("acc-1")
    cache.get("acc-1")
    cache.get("nope")

    stats = cache.stats()
    assert stats.hits == 2
    assert stats.misses == 1
    assert stats.hit_rate == pytest.approx(2 / 3)
    assert MetricsCache().stats().hit_rate == 0.0
