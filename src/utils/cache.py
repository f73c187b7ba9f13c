"""In-memory TTL cache for catalog lookups."""

from __future__ import annotations

import time
from collections import OrderedDict
from threading import RLock
from typing import Any, Callable, Hashable, Tuple

MISSING = object()


class TTLCache:
    """Thread-safe TTL cache with LRU eviction and an injectable clock."""

    def __init__(self, maxsize: int = 128, ttl: float = 300.0, clock: Callable[[], float] = time.time) -> None:
        if maxsize <= 0:
            raise ValueError("maxsize must be positive")
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self.maxsize = maxsize
        self.ttl = ttl
        self._clock = clock
        self._data: "OrderedDict[Hashable, Tuple[Any, float]]" = OrderedDict()
        self._lock = RLock()

    def get(self, key: Hashable, default: Any = MISSING) -> Any:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return default
            value, expiry = entry
            if expiry <= self._clock():
                self._data.pop(key, None)
                return default
            self._data.move_to_end(key)
            return value

    def set(self, key: Hashable, value: Any) -> None:
        with self._lock:
            if key in self._data:
                self._data.move_to_end(key)
            self._data[key] = (value, self._clock() + self.ttl)
            while len(self._data) > self.maxsize:
                self._data.popitem(last=False)

    def get_or_set(self, key: Hashable, factory: Callable[[], Any]) -> Any:
        """Return the cached value or compute, store and return a fresh one.

        ``factory`` runs outside the lock; exceptions propagate and nothing
        is cached for that key.
        """
        cached = self.get(key, MISSING)
        if cached is not MISSING:
            return cached
        value = factory()
        self.set(key, value)
        return value

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for _, expiry in self._data.values() if expiry > now)


__all__ = ["TTLCache", "MISSING"]
