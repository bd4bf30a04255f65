from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from car_search.domain.aggregations import FacetDimension
from car_search.domain.filters import SortSpec
from car_search.domain.listing import Listing, PriceHistoryEntry
from car_search.domain.predicates import Predicate
from car_search.domain.results import FacetValue


@dataclass(frozen=True, slots=True)
class ColumnSummary:
    """MIN/MAX/AVG of one numeric column over non-null values (all None when no rows)."""

    min: float | None = None
    max: float | None = None
    avg: float | None = None


class ListingStore(ABC):
    """
    Port for read access to listings.

    Every query method takes the predicate tuple produced by
    ``car_search.domain.query_builder.build_predicates`` and must apply it unmodified,
    so that rows, counts, facets and aggregates in one response describe one row set.

    Contract:
        - Implementations must be safe to call from several threads at once
          (the search engine fans sub-queries out on a thread pool)
        - Rows are ordered by the requested column, NULLs last, then by id ascending
        - Facet values exclude NULL and are ordered by count desc, then value
    """

    @abstractmethod
    def fetch_page(
        self,
        predicates: tuple[Predicate, ...],
        sort: SortSpec,
        limit: int | None,
        offset: int = 0,
    ) -> list[Listing]:
        """Matching listings with their dealer attached; ``limit=None`` returns all."""
        ...

    @abstractmethod
    def count(self, predicates: tuple[Predicate, ...]) -> int: ...

    @abstractmethod
    def facet(
        self, predicates: tuple[Predicate, ...], dimension: FacetDimension
    ) -> list[FacetValue]: ...

    @abstractmethod
    def summarize(self, predicates: tuple[Predicate, ...], column: str) -> ColumnSummary: ...

    @abstractmethod
    def column_values(self, predicates: tuple[Predicate, ...], column: str) -> list[float]:
        """Non-null values of ``column`` over matching rows, ascending."""
        ...

    @abstractmethod
    def get_by_vin(self, vin: str) -> Listing | None: ...

    @abstractmethod
    def price_history(self, vin: str) -> list[PriceHistoryEntry]:
        """Price observations for a VIN, newest first."""
        ...
