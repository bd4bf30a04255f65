"""Get filter options use case."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from car_search.domain.aggregations import FacetDimension
from car_search.domain.query_builder import ACTIVE_ONLY
from car_search.domain.results import FILTER_OPTION_DIMENSIONS, FilterOptions, ValueRange
from car_search.ports.listing_store import ListingStore
from car_search.use_cases.search_cache import FilterOptionsCache

logger = logging.getLogger(__name__)

RANGE_COLUMNS = ("year", "price", "miles")


@dataclass(frozen=True, slots=True)
class GetFilterOptionsResponse:
    options: FilterOptions
    source: str  # "cache" or "database"


class GetFilterOptions:
    """
    Global selectable values for the search UI.

    Counts cover every active listing regardless of the current search, so a UI
    can render its filter panel before the first query. Values are not capped.
    """

    def __init__(
        self, listing_store: ListingStore, cache: FilterOptionsCache | None = None
    ) -> None:
        self._store = listing_store
        self._cache = cache

    def execute(self) -> GetFilterOptionsResponse:
        if self._cache is not None:
            cached = self._cache.get()
            if cached is not None:
                return GetFilterOptionsResponse(options=cached, source="cache")

        options = FilterOptions(
            **{
                name: self._store.facet(ACTIVE_ONLY, FacetDimension(field, None))
                for name, field in FILTER_OPTION_DIMENSIONS
            },
            ranges={column: self._range(column) for column in RANGE_COLUMNS},
        )

        if self._cache is not None:
            self._cache.set(options)

        logger.info("Filter options loaded from database")
        return GetFilterOptionsResponse(options=options, source="database")

    def _range(self, column: str) -> ValueRange:
        summary = self._store.summarize(ACTIVE_ONLY, column)
        return ValueRange(min=summary.min, max=summary.max)
