"""Tests for utils/cache.py — sliding TTL cache that holds page views."""
import time
from utils.cache import TTLCache


class TestTTLCache:
    def test_basic_set_get(self):
        cache = TTLCache()
        cache.set("key", "value")
        assert cache.get("key") == "value"

    def test_miss_returns_none(self):
        cache = TTLCache()
        assert cache.get("nonexistent") is None

    def test_ttl_expiry(self):
        cache = TTLCache(ttl_seconds=0.05)
        cache.set("key", "value")
        assert cache.get("key") == "value"
        time.sleep(0.1)
        assert cache.get("key") is None

    def test_get_extends_lifetime(self):
        cache = TTLCache(ttl_seconds=0.15)
        cache.set("key", "value")
        for _ in range(4):
            time.sleep(0.05)
            assert cache.get("key") == "value"

    def test_clear(self):
        cache = TTLCache()
        cache.set("k1", "v1")
        cache.set("k2", "v2")
        cache.clear()
        assert cache.get("k1") is None
        assert cache.get("k2") is None

    def test_stats_tracks_hits_misses(self):
        cache = TTLCache()
        cache.set("k", "v")
        cache.get("k")   # hit
        cache.get("nope") # miss
        stats = cache.stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1

    def test_stats_size(self):
        cache = TTLCache()
        cache.set("a", 1)
        cache.set("b", 2)
        assert cache.stats()["size"] == 2
        assert len(cache) == 2

    def test_maxsize_eviction(self):
        cache = TTLCache(maxsize=2)
        cache.set("k1", "v1")
        cache.set("k2", "v2")
        cache.set("k3", "v3")  # evicts k1, the closest to expiry
        assert len(cache) == 2
        assert cache.get("k1") is None
        assert cache.get("k3") == "v3"

    def test_overwrite_does_not_evict(self):
        cache = TTLCache(maxsize=2)
        cache.set("k1", "v1")
        cache.set("k2", "v2")
        cache.set("k1", "v1b")
        assert cache.get("k1") == "v1b"
        assert cache.get("k2") == "v2"

    def test_pop(self):
        evicted = []
        cache = TTLCache(on_evict=lambda k, v: evicted.append(k))
        cache.set("k", "v")
        assert cache.pop("k") == "v"
        assert cache.pop("k") is None
        assert evicted == []

    def test_on_evict_for_capacity_and_expiry(self):
        evicted = []
        cache = TTLCache(maxsize=1, ttl_seconds=0.05,
                         on_evict=lambda k, v: evicted.append((k, v)))
        cache.set("a", 1)
        cache.set("b", 2)
        assert evicted == [("a", 1)]
        time.sleep(0.1)
        assert cache.purge_expired() == 1
        assert evicted == [("a", 1), ("b", 2)]
