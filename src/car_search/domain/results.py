from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from car_search.domain.listing import Listing


@dataclass(frozen=True, slots=True)
class ListingHit:
    """A listing row in a result page, with its distance from the search origin (miles)."""

    listing: Listing
    distance: float | None = None


@dataclass(frozen=True, slots=True)
class PageMeta:
    page: int
    per_page: int
    total: int
    total_pages: int


@dataclass(frozen=True, slots=True)
class FacetValue:
    value: str | int
    count: int


@dataclass(frozen=True, slots=True)
class NumericStats:
    min: float = 0
    max: float = 0
    avg: float = 0
    median: float = 0


@dataclass(frozen=True, slots=True)
class YearStats:
    min: int = 0
    max: int = 0


@dataclass(frozen=True, slots=True)
class SearchStats:
    price: NumericStats = field(default_factory=NumericStats)
    miles: NumericStats = field(default_factory=NumericStats)
    year: YearStats = field(default_factory=YearStats)


@dataclass(frozen=True, slots=True)
class BucketCount:
    label: str
    count: int
    min: int | None = None
    max: int | None = None


@dataclass(frozen=True, slots=True)
class SearchBuckets:
    price: list[BucketCount] = field(default_factory=list)
    miles: list[BucketCount] = field(default_factory=list)
    year: list[BucketCount] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class SearchAggregates:
    """The expensive, cacheable part of a search: facets, stats and buckets."""

    facets: dict[str, list[FacetValue]]
    stats: SearchStats
    buckets: SearchBuckets

    def to_dict(self) -> dict[str, Any]:
        return {
            "facets": {
                name: [asdict(value) for value in values] for name, values in self.facets.items()
            },
            "stats": asdict(self.stats),
            "buckets": asdict(self.buckets),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SearchAggregates:
        stats = data["stats"]
        buckets = data["buckets"]
        return cls(
            facets={
                name: [FacetValue(**value) for value in values]
                for name, values in data["facets"].items()
            },
            stats=SearchStats(
                price=NumericStats(**stats["price"]),
                miles=NumericStats(**stats["miles"]),
                year=YearStats(**stats["year"]),
            ),
            buckets=SearchBuckets(
                price=[BucketCount(**b) for b in buckets["price"]],
                miles=[BucketCount(**b) for b in buckets["miles"]],
                year=[BucketCount(**b) for b in buckets["year"]],
            ),
        )


@dataclass(frozen=True, slots=True)
class SearchResults:
    hits: list[ListingHit]
    meta: PageMeta
    facets: dict[str, list[FacetValue]] | None = None
    stats: SearchStats | None = None
    buckets: SearchBuckets | None = None
    cached_facets: bool = False
    query_time_ms: float = 0.0


@dataclass(frozen=True, slots=True)
class ValueRange:
    min: float | None = None
    max: float | None = None


FILTER_OPTION_DIMENSIONS = (
    ("makes", "make"),
    ("conditions", "condition"),
    ("drivetrains", "drivetrain"),
    ("transmissions", "transmission"),
    ("fuel_types", "fuel_type"),
    ("dealer_types", "dealer_type"),
)


@dataclass(frozen=True, slots=True)
class FilterOptions:
    """Every selectable value per dimension with global counts, plus global ranges."""

    makes: list[FacetValue]
    conditions: list[FacetValue]
    drivetrains: list[FacetValue]
    transmissions: list[FacetValue]
    fuel_types: list[FacetValue]
    dealer_types: list[FacetValue]
    ranges: dict[str, ValueRange]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FilterOptions:
        options = {
            name: [FacetValue(**value) for value in data[name]]
            for name, _ in FILTER_OPTION_DIMENSIONS
        }
        return cls(
            **options,
            ranges={name: ValueRange(**value) for name, value in data["ranges"].items()},
        )
