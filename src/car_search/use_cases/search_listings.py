from __future__ import annotations

import logging
import math
import time
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from typing import Any, Callable

from car_search.domain.aggregations import (
    FACET_DIMENSIONS,
    MILES_BUCKETS,
    PRICE_BUCKETS,
    aggregate_listings,
    bucketize,
    current_year,
    median,
    year_buckets,
)
from car_search.domain.errors import DomainError, SearchExecutionError
from car_search.domain.filters import Paging, SearchFilters, SortSpec
from car_search.domain.geo import (
    Coordinates,
    annotate_distances,
    filter_by_radius,
    sort_by_distance,
)
from car_search.domain.predicates import Predicate
from car_search.domain.query_builder import build_predicates, radius_prefilter
from car_search.domain.results import (
    ListingHit,
    NumericStats,
    PageMeta,
    SearchAggregates,
    SearchBuckets,
    SearchResults,
    SearchStats,
    YearStats,
)
from car_search.ports.geocoder import Geocoder
from car_search.ports.listing_store import ColumnSummary, ListingStore
from car_search.use_cases.search_cache import FacetsCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SearchListingsRequest:
    filters: SearchFilters
    paging: Paging = Paging()
    sort: SortSpec = SortSpec()
    include_facets: bool = True
    include_stats: bool = True
    include_buckets: bool = True

    @property
    def wants_aggregates(self) -> bool:
        return self.include_facets or self.include_stats or self.include_buckets


class SearchListings:
    """
    Faceted listing search: one page of rows plus facets, stats and buckets that
    all describe the same filtered row set.

    Flow:
    1. Validate filters, paging and sort (single source of validation)
    2. Build the predicate tuple once; every sub-query receives it unchanged
    3. Fan out rows, count, 11 facet queries, 3 summaries and 3 value scans on
       the executor, then gather
    4. With a resolved radius search, fetch every matching row inside the radius
       bounding box instead, filter and optionally distance-sort them in process,
       paginate the filtered list, and aggregate over exactly those rows
    5. Serve/populate the facets cache around step 3/4

    Failure policy: any failing sub-query fails the whole search with
    SearchExecutionError; a partially computed envelope is never returned.
    Facet/stat/bucket sections are computed together whenever any one of them
    is requested, so one cache entry can serve every combination of flags.
    """

    def __init__(
        self,
        listing_store: ListingStore,
        geocoder: Geocoder,
        executor: Executor,
        facets_cache: FacetsCache | None = None,
        year_provider: Callable[[], int] = current_year,
    ) -> None:
        self._store = listing_store
        self._geocoder = geocoder
        self._executor = executor
        self._facets_cache = facets_cache
        self._year_provider = year_provider

    def execute(
        self, request: SearchListingsRequest, origin: Coordinates | None = None
    ) -> SearchResults:
        """
        Execute a listing search.

        Args:
            request: Filters, paging, sort and section flags
            origin: Already-resolved search origin; when omitted and the filters
                carry a ZIP code, the geocoder resolves it

        Returns:
            SearchResults envelope (sections not requested are None)

        Raises:
            ValidationError: If filters, paging or sort are invalid
            SearchExecutionError: If any store query fails
        """
        started = time.perf_counter()

        request.filters.validate()
        request.paging.validate()
        request.sort.validate()

        if origin is None and request.filters.zip_code:
            origin = self._geocoder.resolve(request.filters.zip_code)
            if origin is None:
                logger.info(
                    "ZIP code not resolved; searching without geographic filter",
                    extra={"zip_code": request.filters.zip_code},
                )

        predicates = build_predicates(request.filters)

        cache_key: str | None = None
        cached: SearchAggregates | None = None
        if request.wants_aggregates and self._facets_cache is not None:
            cache_key = self._facets_cache.cache_key(request.filters)
            hit = self._facets_cache.get(cache_key)
            cached = hit.aggregates if hit is not None else None

        try:
            if origin is not None and (
                request.filters.has_geo_filter or request.sort.field == "distance"
            ):
                hits, total, aggregates = self._search_in_process(
                    request, predicates, origin, cached
                )
            else:
                hits, total, aggregates = self._search_in_store(
                    request, predicates, origin, cached
                )
        except DomainError:
            raise
        except Exception as e:
            logger.error(
                "Search execution failed",
                exc_info=e,
                extra={"filters": request.filters.describe(), "error_type": type(e).__name__},
            )
            raise SearchExecutionError() from e

        if cache_key is not None and cached is None and aggregates is not None:
            self._facets_cache.set(cache_key, aggregates)  # type: ignore[union-attr]

        per_page = request.paging.per_page
        query_time_ms = round((time.perf_counter() - started) * 1000, 2)

        logger.info(
            "Search executed",
            extra={
                "filters": request.filters.describe(),
                "active_filters": request.filters.active_count(),
                "total": total,
                "cached_facets": cached is not None,
                "query_time_ms": query_time_ms,
            },
        )

        return SearchResults(
            hits=hits,
            meta=PageMeta(
                page=request.paging.page,
                per_page=per_page,
                total=total,
                total_pages=math.ceil(total / per_page),
            ),
            facets=aggregates.facets if aggregates and request.include_facets else None,
            stats=aggregates.stats if aggregates and request.include_stats else None,
            buckets=aggregates.buckets if aggregates and request.include_buckets else None,
            cached_facets=cached is not None,
            query_time_ms=query_time_ms,
        )

    # ==========================================================================
    # Store-side path: pagination, counts and aggregates pushed to the store
    # ==========================================================================

    def _search_in_store(
        self,
        request: SearchListingsRequest,
        predicates: tuple[Predicate, ...],
        origin: Coordinates | None,
        cached: SearchAggregates | None,
    ) -> tuple[list[ListingHit], int, SearchAggregates | None]:
        paging = request.paging
        tasks: dict[str, Callable[[], Any]] = {
            "rows": lambda: self._store.fetch_page(
                predicates, request.sort, limit=paging.per_page, offset=paging.offset
            ),
            "count": lambda: self._store.count(predicates),
        }
        if request.wants_aggregates and cached is None:
            tasks.update(self._aggregate_tasks(predicates))

        results = self._gather(tasks)

        rows = results["rows"]
        if origin is not None:
            hits = annotate_distances(rows, origin)
        else:
            hits = [ListingHit(listing=row) for row in rows]

        aggregates = cached
        if request.wants_aggregates and cached is None:
            aggregates = self._assemble_aggregates(results)

        return hits, results["count"], aggregates

    def _aggregate_tasks(self, predicates: tuple[Predicate, ...]) -> dict[str, Callable[[], Any]]:
        tasks: dict[str, Callable[[], Any]] = {}
        for dimension in FACET_DIMENSIONS:
            tasks[f"facet:{dimension.name}"] = (
                lambda dimension=dimension: self._store.facet(predicates, dimension)
            )
        for column in ("price", "miles", "year"):
            tasks[f"summary:{column}"] = (
                lambda column=column: self._store.summarize(predicates, column)
            )
            tasks[f"values:{column}"] = (
                lambda column=column: self._store.column_values(predicates, column)
            )
        return tasks

    def _assemble_aggregates(self, results: dict[str, Any]) -> SearchAggregates:
        def numeric(column: str) -> NumericStats:
            summary: ColumnSummary = results[f"summary:{column}"]
            if summary.min is None:
                return NumericStats()
            return NumericStats(
                min=summary.min,
                max=summary.max,  # type: ignore[arg-type]
                avg=round(summary.avg),  # type: ignore[arg-type]
                median=median(results[f"values:{column}"]),
            )

        year_summary: ColumnSummary = results["summary:year"]
        year = self._year_provider()

        return SearchAggregates(
            facets={
                dimension.name: results[f"facet:{dimension.name}"]
                for dimension in FACET_DIMENSIONS
            },
            stats=SearchStats(
                price=numeric("price"),
                miles=numeric("miles"),
                year=(
                    YearStats(min=int(year_summary.min), max=int(year_summary.max))  # type: ignore[arg-type]
                    if year_summary.min is not None
                    else YearStats()
                ),
            ),
            buckets=SearchBuckets(
                price=bucketize(results["values:price"], PRICE_BUCKETS),
                miles=bucketize(results["values:miles"], MILES_BUCKETS),
                year=bucketize(results["values:year"], year_buckets(year)),
            ),
        )

    # ==========================================================================
    # In-process path: geographic constraints the store cannot evaluate
    # ==========================================================================

    def _search_in_process(
        self,
        request: SearchListingsRequest,
        predicates: tuple[Predicate, ...],
        origin: Coordinates,
        cached: SearchAggregates | None,
    ) -> tuple[list[ListingHit], int, SearchAggregates | None]:
        radius = request.filters.radius if request.filters.has_geo_filter else None
        fetch_predicates = predicates
        if radius is not None:
            fetch_predicates += radius_prefilter(origin, radius)

        rows = self._store.fetch_page(fetch_predicates, request.sort, limit=None)
        hits = annotate_distances(rows, origin)

        if radius is not None:
            hits = filter_by_radius(hits, radius)
        if request.sort.field == "distance":
            hits = sort_by_distance(hits, descending=request.sort.descending)

        # The filtered length, not the store count, drives pagination
        total = len(hits)
        start = request.paging.offset
        page = hits[start : start + request.paging.per_page]

        aggregates = cached
        if request.wants_aggregates and cached is None:
            aggregates = aggregate_listings([hit.listing for hit in hits], self._year_provider())

        return page, total, aggregates

    # ==========================================================================
    # Scatter/gather
    # ==========================================================================

    def _gather(self, tasks: dict[str, Callable[[], Any]]) -> dict[str, Any]:
        """Run every task on the executor; on the first failure cancel the rest and re-raise."""
        futures: dict[str, Future[Any]] = {
            name: self._executor.submit(task) for name, task in tasks.items()
        }
        try:
            return {name: future.result() for name, future in futures.items()}
        except Exception:
            for future in futures.values():
                future.cancel()
            raise
