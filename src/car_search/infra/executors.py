"""
Dedicated thread pool for search fan-out.

One search issues ~19 independent read queries (rows, count, facets, stats,
buckets). Running them on a bounded, search-only pool keeps latency close to the
slowest single query without letting search load starve other endpoints.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

from car_search.infra.config import search_max_workers

logger = logging.getLogger(__name__)

_search_executor: ThreadPoolExecutor | None = None


def get_search_executor() -> ThreadPoolExecutor:
    """Get or create the shared search executor (lazy initialization)."""
    global _search_executor
    if _search_executor is None:
        max_workers = search_max_workers()
        _search_executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="search-fanout",
        )
        logger.info("Created search executor", extra={"max_workers": max_workers})
    return _search_executor


def shutdown_search_executor() -> None:
    global _search_executor
    if _search_executor is not None:
        _search_executor.shutdown(wait=False, cancel_futures=True)
        _search_executor = None
