from __future__ import annotations

from car_search.domain.aggregations import FacetDimension, facet_counts
from car_search.domain.filters import SortSpec
from car_search.domain.listing import Listing, PriceHistoryEntry
from car_search.domain.predicates import Predicate, matches_all
from car_search.domain.results import FacetValue
from car_search.ports.listing_store import ColumnSummary, ListingStore


class InMemoryListingStore(ListingStore):
    """
    Canonical contract implementation for tests.

    - Evaluates predicates with their reference ``matches`` semantics
    - Orders by the requested column with NULLs last, then by id
    - Applies limit/offset AFTER filtering and ordering
    - Never mutates its listings, so concurrent reads are safe
    """

    def __init__(
        self,
        listings: list[Listing],
        price_history: list[PriceHistoryEntry] | None = None,
    ) -> None:
        self._listings = list(listings)
        self._price_history = list(price_history or [])

    def fetch_page(
        self,
        predicates: tuple[Predicate, ...],
        sort: SortSpec,
        limit: int | None,
        offset: int = 0,
    ) -> list[Listing]:
        column, descending = sort.store_order()
        matches = sorted(self._matching(predicates), key=lambda listing: listing.id)

        present = [m for m in matches if getattr(m, column) is not None]
        missing = [m for m in matches if getattr(m, column) is None]
        # Stable sort keeps the id order for ties, in both directions
        present.sort(key=lambda listing: getattr(listing, column), reverse=descending)
        ordered = present + missing

        end = None if limit is None else offset + limit
        return ordered[offset:end]

    def count(self, predicates: tuple[Predicate, ...]) -> int:
        return len(self._matching(predicates))

    def facet(
        self, predicates: tuple[Predicate, ...], dimension: FacetDimension
    ) -> list[FacetValue]:
        return facet_counts(self._matching(predicates), dimension)

    def summarize(self, predicates: tuple[Predicate, ...], column: str) -> ColumnSummary:
        values = self.column_values(predicates, column)
        if not values:
            return ColumnSummary()
        return ColumnSummary(min=values[0], max=values[-1], avg=sum(values) / len(values))

    def column_values(self, predicates: tuple[Predicate, ...], column: str) -> list[float]:
        values = [getattr(listing, column) for listing in self._matching(predicates)]
        return sorted(value for value in values if value is not None)

    def get_by_vin(self, vin: str) -> Listing | None:
        for listing in self._listings:
            if listing.vin == vin:
                return listing
        return None

    def price_history(self, vin: str) -> list[PriceHistoryEntry]:
        entries = [entry for entry in self._price_history if entry.vin == vin]
        return sorted(entries, key=lambda entry: entry.recorded_at, reverse=True)

    def _matching(self, predicates: tuple[Predicate, ...]) -> list[Listing]:
        return [listing for listing in self._listings if matches_all(listing, predicates)]
