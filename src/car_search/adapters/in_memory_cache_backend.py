from __future__ import annotations

import heapq
import logging
import threading
import time
from typing import Callable

from car_search.ports.cache_backend import CacheBackend

logger = logging.getLogger(__name__)


class InMemoryCacheBackend(CacheBackend):
    """
    Process-local cache used when no Redis URL is configured, and in tests.

    Mimics Redis expiry semantics: expired keys read as missing. Every write
    also sweeps keys whose TTL has passed, so entries that are never read
    again do not accumulate.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._values: dict[str, str] = {}
        self._expires_at: dict[str, float] = {}
        # (expires_at, key); stale tuples are skipped when popped
        self._expiry_heap: list[tuple[float, str]] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def get(self, key: str) -> str | None:
        with self._lock:
            if key not in self._values:
                return None
            if self._clock() >= self._expires_at[key]:
                self._drop(key)
                return None
            return self._values[key]

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        with self._lock:
            now = self._clock()
            self._sweep(now)
            expires_at = now + ttl_seconds
            self._values[key] = value
            self._expires_at[key] = expires_at
            heapq.heappush(self._expiry_heap, (expires_at, key))

    def delete(self, key: str) -> None:
        with self._lock:
            self._drop(key)

    def delete_prefix(self, prefix: str) -> int:
        with self._lock:
            keys = [key for key in self._values if key.startswith(prefix)]
            for key in keys:
                self._drop(key)

        logger.debug("Deleted cache keys by prefix", extra={"prefix": prefix, "deleted": len(keys)})
        return len(keys)

    def _drop(self, key: str) -> None:
        self._values.pop(key, None)
        self._expires_at.pop(key, None)

    def _sweep(self, now: float) -> None:
        """Remove every expired key. Caller holds the lock."""
        while self._expiry_heap and self._expiry_heap[0][0] <= now:
            expires_at, key = heapq.heappop(self._expiry_heap)
            # A later set() may have extended or removed the key
            if self._expires_at.get(key) == expires_at:
                self._drop(key)
        if not self._values:
            self._expiry_heap.clear()
