"""
Tests for TTLCache.

Tests cover:
- Basic get/set/delete behavior and defaults
- Expiry with an injected clock (boundary at exactly the TTL)
- Bounded size: oldest entry evicted first
- purge_expired and statistics
- Concurrent writers never corrupt the store
"""

import threading
import time

import pytest

from utils.cache import TTLCache


class TestTTLCache:
    """Test suite for the TTL cache."""

    @pytest.fixture
    def cache(self, clock):
        """Fixture providing a small cache on a fake clock."""
        return TTLCache(max_entries=3, clock=clock)

    # ==================== Basic Operations ====================

    def test_set_and_get(self, cache):
        cache.set("env:Delhi:Mining", {"score": 71}, ttl=60)
        assert cache.get("env:Delhi:Mining") == {"score": 71}
        assert "env:Delhi:Mining" in cache
        assert len(cache) == 1

    def test_missing_key_returns_default(self, cache):
        assert cache.get("missing") is None
        assert cache.get("missing", "fallback") == "fallback"

    def test_set_replaces_whole_entry(self, cache, clock):
        """A second set replaces the value and restarts the TTL."""
        cache.set("k", "old", ttl=10)
        clock.advance(8)
        cache.set("k", "new", ttl=10)
        clock.advance(8)
        assert cache.get("k") == "new"

    def test_delete(self, cache):
        cache.set("k", 1, ttl=10)
        assert cache.delete("k") is True
        assert cache.delete("k") is False
        assert cache.get("k") is None

    def test_non_positive_ttl_removes_entry(self, cache):
        """Storing with ttl <= 0 never leaves a live entry."""
        cache.set("k", 1, ttl=10)
        cache.set("k", 2, ttl=0)
        assert "k" not in cache
        cache.set("j", 3, ttl=-5)
        assert len(cache) == 0

    def test_falsy_values_are_cached(self, cache):
        """contains() distinguishes a cached falsy value from a miss."""
        cache.set("zero", 0, ttl=10)
        assert cache.contains("zero")
        assert cache.get("zero", "default") == 0

    def test_invalid_capacity_rejected(self):
        with pytest.raises(ValueError):
            TTLCache(max_entries=0)

    # ==================== Expiry ====================

    def test_entry_live_before_ttl(self, cache, clock):
        cache.set("k", "v", ttl=180)
        clock.advance(179.9)
        assert cache.get("k") == "v"

    def test_entry_expires_at_ttl(self, cache, clock):
        """Boundary: an entry is gone exactly at its TTL."""
        cache.set("k", "v", ttl=180)
        clock.advance(180)
        assert cache.get("k") is None
        assert len(cache) == 0

    @pytest.mark.slow
    def test_expiry_with_real_clock(self):
        """Entries expire in wall-clock time as well."""
        cache = TTLCache()
        cache.set("k", "v", ttl=0.1)
        assert cache.get("k") == "v"
        time.sleep(0.15)
        assert cache.get("k") is None

    def test_purge_expired(self, cache, clock):
        """purge_expired removes only expired entries and reports the count."""
        cache.set("short", 1, ttl=5)
        cache.set("long", 2, ttl=50)
        clock.advance(10)
        assert cache.purge_expired() == 1
        assert len(cache) == 1
        assert cache.get("long") == 2

    # ==================== Bounded Size ====================

    def test_oldest_entry_evicted_when_full(self, cache):
        for i in range(4):
            cache.set(f"k{i}", i, ttl=60)
        assert len(cache) == 3
        assert cache.get("k0") is None
        assert cache.get("k3") == 3

    def test_reinsert_moves_entry_to_newest(self, cache):
        """Re-setting an entry protects it from the next eviction."""
        cache.set("a", 1, ttl=60)
        cache.set("b", 2, ttl=60)
        cache.set("c", 3, ttl=60)
        cache.set("a", 10, ttl=60)
        cache.set("d", 4, ttl=60)
        assert cache.get("a") == 10
        assert cache.get("b") is None

    # ==================== Statistics ====================

    def test_stats_count_hits_and_misses(self, cache, clock):
        cache.set("k", "v", ttl=10)
        cache.get("k")
        cache.get("missing")
        clock.advance(20)
        cache.get("k")
        stats = cache.stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 2
        assert stats["entries"] == 0
        assert stats["maxEntries"] == 3

    def test_clear(self, cache):
        cache.set("a", 1, ttl=10)
        cache.set("b", 2, ttl=10)
        cache.clear()
        assert len(cache) == 0

    # ==================== Concurrency ====================

    def test_concurrent_writers(self):
        """Many threads writing and reading never exceed the bound or see partial values."""
        cache = TTLCache(max_entries=50)
        errors = []

        def worker(n):
            for i in range(200):
                key = f"k{(n * 7 + i) % 80}"
                value = {"writer": n, "i": i}
                cache.set(key, value, ttl=30)
                got = cache.get(key)
                if got is not None and set(got) != {"writer", "i"}:
                    errors.append(got)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(cache) <= 50
