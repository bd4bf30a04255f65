"""
Dependency injection for FastAPI routes.

Key principle: the listing store opens its own short-lived session per query
(search sub-queries run on worker threads and must not share one), so routes
receive a store bound to the shared session factory rather than a session.
Only stateless or thread-safe singletons use lru_cache.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor
from functools import lru_cache

from fastapi import Depends

from car_search.adapters.in_memory_cache_backend import InMemoryCacheBackend
from car_search.adapters.redis_cache_backend import RedisCacheBackend
from car_search.adapters.sqlalchemy_listing_store import SqlAlchemyListingStore
from car_search.adapters.static_zip_geocoder import StaticZipGeocoder
from car_search.infra.config import (
    cache_invalidation_token,
    facets_cache_ttl_seconds,
    filter_options_cache_ttl_seconds,
    redis_url,
)
from car_search.infra.db.session import get_session_local
from car_search.infra.executors import get_search_executor
from car_search.ports.cache_backend import CacheBackend
from car_search.ports.geocoder import Geocoder
from car_search.ports.listing_store import ListingStore
from car_search.use_cases.get_filter_options import GetFilterOptions
from car_search.use_cases.get_listing_by_vin import GetListingByVin
from car_search.use_cases.get_listing_price_history import GetListingPriceHistory
from car_search.use_cases.invalidate_search_caches import InvalidateSearchCaches
from car_search.use_cases.search_cache import FacetsCache, FilterOptionsCache
from car_search.use_cases.search_listings import SearchListings

logger = logging.getLogger(__name__)


def get_listing_store() -> ListingStore:
    return SqlAlchemyListingStore(session_factory=get_session_local())


@lru_cache(maxsize=1)
def get_cache_backend() -> CacheBackend:
    """
    Process-wide cache backend.

    Redis when REDIS_URL is configured, otherwise an in-process cache (which
    is only shared between requests served by this process).
    """
    url = redis_url()
    if url:
        logger.info("Using Redis cache backend")
        return RedisCacheBackend.from_url(url)

    logger.info("REDIS_URL not set; using in-process cache backend")
    return InMemoryCacheBackend()


@lru_cache(maxsize=1)
def get_geocoder() -> Geocoder:
    return StaticZipGeocoder()


def get_executor() -> Executor:
    return get_search_executor()


def get_facets_cache(backend: CacheBackend = Depends(get_cache_backend)) -> FacetsCache:
    return FacetsCache(backend, ttl_seconds=facets_cache_ttl_seconds())


def get_filter_options_cache(
    backend: CacheBackend = Depends(get_cache_backend),
) -> FilterOptionsCache:
    return FilterOptionsCache(backend, ttl_seconds=filter_options_cache_ttl_seconds())


def get_search_listings_use_case(
    store: ListingStore = Depends(get_listing_store),
    geocoder: Geocoder = Depends(get_geocoder),
    executor: Executor = Depends(get_executor),
    facets_cache: FacetsCache = Depends(get_facets_cache),
) -> SearchListings:
    """
    Factory function that returns a configured SearchListings use case.

    Args:
        store: Listing store (injected by FastAPI via Depends(get_listing_store))
        geocoder: ZIP code resolver
        executor: Shared search fan-out pool
        facets_cache: Cache for facets, stats and buckets

    Returns:
        SearchListings: Configured use case instance
    """
    return SearchListings(
        listing_store=store,
        geocoder=geocoder,
        executor=executor,
        facets_cache=facets_cache,
    )


def get_filter_options_use_case(
    store: ListingStore = Depends(get_listing_store),
    cache: FilterOptionsCache = Depends(get_filter_options_cache),
) -> GetFilterOptions:
    return GetFilterOptions(listing_store=store, cache=cache)


def get_listing_by_vin_use_case(
    store: ListingStore = Depends(get_listing_store),
) -> GetListingByVin:
    return GetListingByVin(listing_store=store)


def get_listing_price_history_use_case(
    store: ListingStore = Depends(get_listing_store),
) -> GetListingPriceHistory:
    return GetListingPriceHistory(listing_store=store)


def get_invalidate_search_caches_use_case(
    facets_cache: FacetsCache = Depends(get_facets_cache),
    filter_options_cache: FilterOptionsCache = Depends(get_filter_options_cache),
) -> InvalidateSearchCaches:
    return InvalidateSearchCaches(
        facets_cache=facets_cache,
        filter_options_cache=filter_options_cache,
        expected_token=cache_invalidation_token(),
    )
