"""
Bounded memoization shared by the organizer, position calculator and scaling.

Each bracket view owns its own cache so independent views never share
state. Eviction is FIFO: once the cache grows past its capacity the oldest
inserted key is dropped.
"""
import threading
from collections import OrderedDict
from typing import Any, Callable, Hashable, Optional

from bracket_layout.constants import DEFAULT_CACHE_CAPACITY


class CalculationCache:
    def __init__(self, capacity: int = DEFAULT_CACHE_CAPACITY):
        if capacity < 1:
            raise ValueError(f"Cache capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._entries = OrderedDict()
        self._lock = threading.RLock()

    def __repr__(self):
        return f"CalculationCache(capacity={self.capacity}, size={self.size()})"

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        return self.size()

    def get(self, key: Hashable, default: Any = None) -> Any:
        with self._lock:
            return self._entries.get(key, default)

    def set(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._store(key, value)

    def get_or_compute(self, key: Hashable, compute: Callable[[], Any]) -> Any:
        """Return the cached value for ``key``, computing and storing it on a miss.

        The lock is held across the computation so two threads asking for the
        same key always observe the same object.
        """
        with self._lock:
            if key in self._entries:
                return self._entries[key]
            value = compute()
            self._store(key, value)
            return value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def _store(self, key, value):
        # Re-setting a key keeps its original insertion slot
        self._entries[key] = value
        while len(self._entries) > self.capacity:
            self._entries.popitem(last=False)


def memoize(cache: Optional[CalculationCache], key: Hashable, compute: Callable[[], Any]) -> Any:
    """Run ``compute`` through ``cache`` when one is given, directly otherwise."""
    if cache is None:
        return compute()
    return cache.get_or_compute(key, compute)
