"""In-memory TTL cache service with bounded size.

Expiry is lazy: a stale entry is only dropped when it is read. When an insert
pushes the cache past ``max_size`` the earliest-inserted key is evicted
(insertion order, not access order).
"""

import copy
import threading
import time
from typing import Any, Callable


class CacheService:
    """Thread-safe in-memory cache with TTL and FIFO overflow eviction."""

    def __init__(
        self,
        ttl: float = 600,
        max_size: int = 500,
        clock: Callable[[], float] = time.time,
    ):
        # dicts keep insertion order; overwriting a key keeps its position
        self._store: dict[str, tuple[Any, float]] = {}
        self._ttl = ttl
        self._max_size = max_size
        self._clock = clock
        self._lock = threading.Lock()

    @property
    def ttl(self) -> float:
        return self._ttl

    @property
    def max_size(self) -> int:
        return self._max_size

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            value, stored_at = entry
            if self._clock() - stored_at > self._ttl:
                del self._store[key]
                return None
            return copy.deepcopy(value)

    def set(self, key: str, value: Any) -> None:
        stored = copy.deepcopy(value)
        with self._lock:
            self._store[key] = (stored, self._clock())
            if len(self._store) > self._max_size:
                oldest = next(iter(self._store))
                del self._store[oldest]

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
