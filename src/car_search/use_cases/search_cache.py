"""
Caches for the expensive, row-independent parts of search.

Cache Layers:
1. Facets cache (short TTL) - facets/stats/buckets keyed by the canonical filter set
2. Filter-options cache (longer TTL) - global selectable values and ranges

Both are best-effort: backend failures are logged and reported as a miss, never
raised into the request. Listing pages are never cached; they depend on
pagination state and are cheap to refetch.
"""

from __future__ import annotations

import hashlib
import json
import logging
import time
from dataclasses import dataclass
from typing import Callable

from car_search.domain.filters import SearchFilters
from car_search.domain.results import FilterOptions, SearchAggregates
from car_search.ports.cache_backend import CacheBackend

logger = logging.getLogger(__name__)

FACETS_CACHE_TTL = 60 * 5  # 5 minutes
FILTER_OPTIONS_CACHE_TTL = 60 * 10  # 10 minutes

FACETS_PREFIX = "facets:"
FILTER_OPTIONS_KEY = "filter-options:all"


@dataclass(frozen=True, slots=True)
class CachedAggregates:
    aggregates: SearchAggregates
    cached_at: float


class FacetsCache:
    """
    Content-addressed cache of SearchAggregates.

    The read path re-checks ``cached_at`` against the TTL even though the backend
    expires keys itself, so a backend with a lagging clock cannot serve stale data.
    """

    def __init__(
        self,
        backend: CacheBackend,
        ttl_seconds: int = FACETS_CACHE_TTL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._backend = backend
        self._ttl = ttl_seconds
        self._clock = clock

    @staticmethod
    def cache_key(filters: SearchFilters) -> str:
        """
        Stable key for a filter set.

        Uses ``SearchFilters.canonical()`` (unset dimensions dropped, values sorted)
        serialized with sorted keys, so parameter order never causes a miss.
        Pagination and sort are not part of SearchFilters and never affect the key.
        """
        canonical = json.dumps(filters.canonical(), sort_keys=True, separators=(",", ":"))
        digest = hashlib.sha256(canonical.encode()).hexdigest()[:16]
        return f"{FACETS_PREFIX}{digest}"

    def get(self, key: str) -> CachedAggregates | None:
        try:
            raw = self._backend.get(key)
            if raw is None:
                logger.debug("Facets cache MISS", extra={"cache_key": key})
                return None

            payload = json.loads(raw)
            cached_at = float(payload["cached_at"])
            if self._clock() - cached_at > self._ttl:
                logger.debug("Facets cache entry expired", extra={"cache_key": key})
                return None

            logger.debug("Facets cache HIT", extra={"cache_key": key})
            return CachedAggregates(
                aggregates=SearchAggregates.from_dict(payload["aggregates"]),
                cached_at=cached_at,
            )
        except Exception as e:
            logger.warning("Facets cache read failed", extra={"cache_key": key, "error": str(e)})
            return None

    def set(self, key: str, aggregates: SearchAggregates) -> bool:
        """Store aggregates; returns False (after logging) when the write failed."""
        try:
            payload = {"aggregates": aggregates.to_dict(), "cached_at": self._clock()}
            self._backend.set(key, json.dumps(payload), ttl_seconds=self._ttl)
            return True
        except Exception as e:
            logger.warning("Facets cache write failed", extra={"cache_key": key, "error": str(e)})
            return False

    def invalidate_all(self) -> bool:
        """
        Drop every cached facet entry.

        Call whenever the listing set changes (ingest, price change, deactivation).
        """
        try:
            deleted = self._backend.delete_prefix(FACETS_PREFIX)
            logger.info("Facets cache invalidated", extra={"deleted": deleted})
            return True
        except Exception as e:
            logger.error("Facets cache invalidation failed", extra={"error": str(e)})
            return False


class FilterOptionsCache:
    """Single-entry cache for the filter-options payload."""

    def __init__(self, backend: CacheBackend, ttl_seconds: int = FILTER_OPTIONS_CACHE_TTL) -> None:
        self._backend = backend
        self._ttl = ttl_seconds

    def get(self) -> FilterOptions | None:
        try:
            raw = self._backend.get(FILTER_OPTIONS_KEY)
            return FilterOptions.from_dict(json.loads(raw)) if raw is not None else None
        except Exception as e:
            logger.warning("Filter options cache read failed", extra={"error": str(e)})
            return None

    def set(self, options: FilterOptions) -> bool:
        try:
            self._backend.set(FILTER_OPTIONS_KEY, json.dumps(options.to_dict()), ttl_seconds=self._ttl)
            return True
        except Exception as e:
            logger.warning("Filter options cache write failed", extra={"error": str(e)})
            return False

    def invalidate(self) -> bool:
        try:
            self._backend.delete(FILTER_OPTIONS_KEY)
            logger.info("Filter options cache invalidated")
            return True
        except Exception as e:
            logger.error("Filter options cache invalidation failed", extra={"error": str(e)})
            return False
