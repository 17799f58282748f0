"""
Unit tests for AttributeCache.
"""
import threading
import time

from kstar.cache import AttributeCache, CacheEntry


class TestAttributeCache:
    """Test suite for AttributeCache."""

    def test_miss_returns_none(self):
        cache = AttributeCache(attr_index=0, generation=1)
        assert cache.get(3) is None
        assert 3 not in cache

    def test_put_then_get(self):
        cache = AttributeCache(0, 1)
        entry = CacheEntry(value=0.4, missing_prob=0.2)
        assert cache.put(1, entry) is entry
        assert cache.get(1) is entry
        assert len(cache) == 1

    def test_first_writer_wins(self):
        cache = AttributeCache(0, 1)
        first = CacheEntry(0.4, 0.2)
        cache.put(1, first)
        assert cache.put(1, CacheEntry(0.9, 0.9)) is first

    def test_get_or_compute_runs_once(self):
        cache = AttributeCache(0, 1)
        calls = []

        def compute():
            calls.append(1)
            return CacheEntry(0.5, 0.5)

        first = cache.get_or_compute(2.5, compute)
        second = cache.get_or_compute(2.5, compute)
        assert first is second
        assert len(calls) == 1

    def test_concurrent_population(self):
        cache = AttributeCache(0, 1)
        calls = []
        results = []

        def compute():
            calls.append(1)
            time.sleep(0.01)
            return CacheEntry(0.5, 0.5)

        def worker():
            results.append(cache.get_or_compute('key', compute))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(calls) == 1
        assert all(result is results[0] for result in results)

    def test_is_current(self):
        cache = AttributeCache(0, generation=3)
        assert cache.is_current(3)
        assert not cache.is_current(4)
