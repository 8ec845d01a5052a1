"""Tests for the bounded TTL cache."""

import pytest

from src.askmycar.vehicles.cache import TTLCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


class TestTTLCache:
    def test_get_and_set(self, clock):
        cache = TTLCache(max_entries=3, ttl_seconds=60, clock=clock)

        cache.set("2019-toyota-camry", "https://img/camry.jpg")

        assert cache.get("2019-toyota-camry") == "https://img/camry.jpg"
        assert cache.get("2020-ford-f-150") is None
        assert cache.stats.hits == 1
        assert cache.stats.misses == 1

    def test_capacity_eviction_is_lru(self, clock):
        cache = TTLCache(max_entries=2, ttl_seconds=60, clock=clock)
        cache.set("a", "1")
        cache.set("b", "2")
        cache.get("a")

        cache.set("c", "3")

        assert len(cache) == 2
        assert cache.get("b") is None
        assert cache.get("a") == "1"
        assert cache.get("c") == "3"
        assert cache.stats.evictions == 1

    def test_expired_entries_are_misses(self, clock):
        cache = TTLCache(max_entries=2, ttl_seconds=60, clock=clock)
        cache.set("a", "1")

        clock.now += 61

        assert "a" not in cache
        assert cache.get("a") is None
        assert len(cache) == 0
        assert cache.stats.expirations == 1

    def test_entry_alive_until_ttl(self, clock):
        cache = TTLCache(max_entries=2, ttl_seconds=60, clock=clock)
        cache.set("a", "1")

        clock.now += 60

        assert cache.get("a") == "1"

    def test_zero_ttl_never_expires(self, clock):
        cache = TTLCache(max_entries=2, ttl_seconds=0, clock=clock)
        cache.set("a", "1")

        clock.now += 10**9

        assert cache.get("a") == "1"

    def test_overwrite_refreshes_entry(self, clock):
        cache = TTLCache(max_entries=2, ttl_seconds=60, clock=clock)
        cache.set("a", "1")
        clock.now += 50
        cache.set("a", "2")
        clock.now += 50

        assert cache.get("a") == "2"
        assert len(cache) == 1

    def test_invalidate_and_clear(self, clock):
        cache = TTLCache(max_entries=2, ttl_seconds=60, clock=clock)
        cache.set("a", "1")
        cache.set("b", "2")

        assert cache.invalidate("a") is True
        assert cache.invalidate("a") is False
        cache.clear()
        assert len(cache) == 0

    def test_capacity_must_be_positive(self):
        with pytest.raises(ValueError):
            TTLCache(max_entries=0)
