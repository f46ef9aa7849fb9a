"""
Unit tests for the bounded calculation cache.
"""
import threading
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from bracket_layout.cache import CalculationCache, memoize


class TestCalculationCache:
    """Tests for FIFO eviction and basic operations."""

    def test_default_capacity(self, cache):
        assert cache.capacity == 100

    def test_fifo_eviction(self, cache):
        for i in range(101):
            cache.set(f'k{i}', i)
        assert cache.size() == 100
        assert 'k0' not in cache
        assert 'k1' in cache
        assert cache.get('k100') == 100

    def test_reads_do_not_refresh_order(self):
        cache = CalculationCache(capacity=2)
        cache.set('a', 1)
        cache.set('b', 2)
        cache.get('a')
        cache.set('c', 3)
        assert 'a' not in cache
        assert 'b' in cache

    def test_clear(self, cache):
        cache.set('a', 1)
        cache.clear()
        assert cache.size() == 0
        assert len(cache) == 0
        assert cache.get('a') is None

    def test_get_default(self, cache):
        assert cache.get('missing', 'fallback') == 'fallback'

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            CalculationCache(capacity=0)

    def test_get_or_compute_runs_once(self, cache):
        calls = []

        def compute():
            calls.append(1)
            return ['value']

        first = cache.get_or_compute('key', compute)
        second = cache.get_or_compute('key', compute)
        assert first is second
        assert len(calls) == 1

    def test_concurrent_callers_share_value(self, cache):
        results = []

        def worker():
            results.append(cache.get_or_compute('shared', lambda: object()))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert all(result is results[0] for result in results)

    def test_independent_caches(self):
        one, two = CalculationCache(), CalculationCache()
        one.set('a', 1)
        assert 'a' not in two


class TestMemoize:
    """Tests for the optional-cache helper."""

    def test_without_cache(self):
        assert memoize(None, 'k', lambda: 5) == 5

    def test_with_cache(self, cache):
        memoize(cache, 'k', lambda: 5)
        assert memoize(cache, 'k', lambda: 6) == 5
