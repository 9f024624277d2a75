"""Tests for the MemoryCache module."""

from __future__ import annotations

import pytest

from errorgroups.cache import DEFAULT_TTL_SECONDS, MemoryCache
from errorgroups.models import CacheConfig


@pytest.fixture()
def cache(clock):
    """A one-hour MemoryCache driven by the fake clock."""
    return MemoryCache(CacheConfig(enabled=True, ttl_seconds=3600), clock=clock)


@pytest.fixture()
def disabled_cache(clock):
    return MemoryCache(CacheConfig(enabled=False, ttl_seconds=3600), clock=clock)


# ------------------------------------------------------------------ #
# Core get/set behaviour
# ------------------------------------------------------------------ #


class TestGetSet:
    def test_set_and_get(self, cache: MemoryCache) -> None:
        cache.set("ALL_SERVICES-NO_GROUP", ("a", "b"))
        assert cache.get("ALL_SERVICES-NO_GROUP") == ("a", "b")

    def test_miss_returns_none(self, cache: MemoryCache) -> None:
        assert cache.get("never-stored") is None

    def test_value_is_kept_by_reference(self, cache: MemoryCache) -> None:
        value = ("x",)
        cache.set("k", value)
        assert cache.get("k") is value

    def test_set_replaces_existing_entry(self, cache: MemoryCache) -> None:
        cache.set("k", 1)
        cache.set("k", 2)
        assert cache.get("k") == 2
        assert len(cache) == 1

    def test_default_config_is_one_hour(self) -> None:
        assert MemoryCache().ttl_seconds == DEFAULT_TTL_SECONDS == 3600


# ------------------------------------------------------------------ #
# Expiry
# ------------------------------------------------------------------ #


class TestExpiry:
    def test_entry_live_until_ttl(self, cache: MemoryCache, clock) -> None:
        cache.set("k", "v")
        clock.advance(3599)
        assert cache.get("k") == "v"

    def test_entry_expires_at_ttl(self, cache: MemoryCache, clock) -> None:
        cache.set("k", "v")
        clock.advance(3600)
        assert cache.get("k") is None

    def test_expired_entry_counts_as_miss(self, cache: MemoryCache, clock) -> None:
        cache.set("k", "v")
        clock.advance(3601)
        assert cache.get("k") is None
        assert cache.stats()["misses"] == 1
        assert len(cache) == 0

    def test_zero_ttl_stores_nothing(self, cache: MemoryCache) -> None:
        cache.set("k", "old")
        cache.set("k", "new", ttl=0)
        assert cache.get("k") is None

    def test_per_entry_ttl_overrides_default(self, cache: MemoryCache, clock) -> None:
        cache.set("short", "v", ttl=10)
        cache.set("long", "v")
        clock.advance(11)
        assert cache.get("short") is None
        assert cache.get("long") == "v"

    def test_expiry_measured_from_set_time(self, cache: MemoryCache, clock) -> None:
        cache.set("k", "old")
        clock.advance(3000)
        cache.set("k", "new")
        clock.advance(3000)
        assert cache.get("k") == "new"

    def test_keys_skips_expired(self, cache: MemoryCache, clock) -> None:
        cache.set("a", 1, ttl=10)
        cache.set("b", 2)
        clock.advance(20)
        assert cache.keys() == ["b"]


# ------------------------------------------------------------------ #
# Invalidation
# ------------------------------------------------------------------ #


class TestInvalidation:
    def test_delete(self, cache: MemoryCache) -> None:
        cache.set("a", 1)
        cache.delete("a")
        assert cache.get("a") is None

    def test_delete_missing_key_is_noop(self, cache: MemoryCache) -> None:
        cache.delete("missing")

    def test_flush_all(self, cache: MemoryCache) -> None:
        cache.set("a", 1)
        cache.set("b", 2)
        cache.flush_all()
        assert len(cache) == 0
        assert cache.get("a") is None


# ------------------------------------------------------------------ #
# Disabled cache
# ------------------------------------------------------------------ #


class TestDisabled:
    def test_writes_are_ignored(self, disabled_cache: MemoryCache) -> None:
        disabled_cache.set("k", "v")
        assert disabled_cache.get("k") is None
        assert len(disabled_cache) == 0

    def test_stats_report_disabled(self, disabled_cache: MemoryCache) -> None:
        assert disabled_cache.stats() == {"enabled": False}


# ------------------------------------------------------------------ #
# Stats and container protocol
# ------------------------------------------------------------------ #


class TestStats:
    def test_counts_hits_and_misses(self, cache: MemoryCache) -> None:
        cache.get("k")
        cache.set("k", "v")
        cache.get("k")
        cache.get("k")
        stats = cache.stats()
        assert stats == {
            "enabled": True,
            "size": 1,
            "hits": 2,
            "misses": 1,
            "ttl_seconds": 3600,
        }

    def test_contains(self, cache: MemoryCache, clock) -> None:
        cache.set("k", "v")
        assert "k" in cache
        assert "other" not in cache
        assert 42 not in cache
        clock.advance(3600)
        assert "k" not in cache

    def test_max_entries_drops_least_recently_used(self, clock) -> None:
        cache = MemoryCache(CacheConfig(ttl_seconds=3600, max_entries=2), clock=clock)
        cache.set("short", 1, ttl=10)
        cache.set("a", 2)
        cache.set("b", 3)
        assert cache.keys() == ["a", "b"]
