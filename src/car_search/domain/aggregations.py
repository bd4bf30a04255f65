"""
Facet dimensions, histogram buckets and summary statistics.

These helpers work on plain Python values so every store backend shares the same
bucketing and median rules; stores only have to hand back the raw column values.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Sequence

from car_search.domain.listing import Listing
from car_search.domain.predicates import field_value
from car_search.domain.results import (
    BucketCount,
    FacetValue,
    NumericStats,
    SearchAggregates,
    SearchBuckets,
    SearchStats,
    YearStats,
)


@dataclass(frozen=True, slots=True)
class FacetDimension:
    name: str
    limit: int | None  # None: bounded enumeration, no cap needed


FACET_DIMENSIONS: tuple[FacetDimension, ...] = (
    FacetDimension("make", 50),
    FacetDimension("model", 50),
    FacetDimension("trim", 50),
    FacetDimension("year", 20),
    FacetDimension("condition", None),
    FacetDimension("exterior_color", 20),
    FacetDimension("interior_color", 20),
    FacetDimension("drivetrain", None),
    FacetDimension("transmission", None),
    FacetDimension("fuel_type", None),
    FacetDimension("dealer_type", None),
)


@dataclass(frozen=True, slots=True)
class BucketSpec:
    """Half-open interval ``[min, max)``; a missing bound is unbounded."""

    label: str
    min: int | None = None
    max: int | None = None

    def contains(self, value: float) -> bool:
        if self.min is not None and value < self.min:
            return False
        if self.max is not None and value >= self.max:
            return False
        return True


PRICE_BUCKETS: tuple[BucketSpec, ...] = (
    BucketSpec("Under $20k", None, 20_000),
    BucketSpec("$20k-$30k", 20_000, 30_000),
    BucketSpec("$30k-$40k", 30_000, 40_000),
    BucketSpec("$40k-$50k", 40_000, 50_000),
    BucketSpec("$50k+", 50_000, None),
)

MILES_BUCKETS: tuple[BucketSpec, ...] = (
    BucketSpec("Under 10k", None, 10_000),
    BucketSpec("10k-25k", 10_000, 25_000),
    BucketSpec("25k-50k", 25_000, 50_000),
    BucketSpec("50k-75k", 50_000, 75_000),
    BucketSpec("75k+", 75_000, None),
)


def year_buckets(current_year: int) -> tuple[BucketSpec, ...]:
    """
    Current model year, the three before it, then everything older.

    Model years after the current calendar year fold into the current-year bucket.
    """
    return (
        BucketSpec(str(current_year), current_year, None),
        BucketSpec(str(current_year - 1), current_year - 1, current_year),
        BucketSpec(str(current_year - 2), current_year - 2, current_year - 1),
        BucketSpec(str(current_year - 3), current_year - 3, current_year - 2),
        BucketSpec(f"{current_year - 4} and older", None, current_year - 3),
    )


def current_year() -> int:
    return date.today().year


# ==============================================================================
# Pure aggregation functions
# ==============================================================================


def bucketize(values: Iterable[float], specs: Sequence[BucketSpec]) -> list[BucketCount]:
    """Count values per bucket; empty buckets are omitted, order follows ``specs``."""
    counts = [0] * len(specs)
    for value in values:
        for index, spec in enumerate(specs):
            if spec.contains(value):
                counts[index] += 1
                break

    return [
        BucketCount(label=spec.label, count=count, min=spec.min, max=spec.max)
        for spec, count in zip(specs, counts)
        if count > 0
    ]


def median(values: Sequence[float]) -> float:
    """Median of non-null values (0 for an empty sequence)."""
    ordered = sorted(value for value in values if value is not None)
    if not ordered:
        return 0
    midpoint = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[midpoint - 1] + ordered[midpoint]) / 2
    return ordered[midpoint]


def numeric_stats(values: Sequence[float]) -> NumericStats:
    present = [value for value in values if value is not None]
    if not present:
        return NumericStats()
    return NumericStats(
        min=min(present),
        max=max(present),
        avg=round(sum(present) / len(present)),
        median=median(present),
    )


def year_stats(values: Sequence[int]) -> YearStats:
    present = [value for value in values if value is not None]
    if not present:
        return YearStats()
    return YearStats(min=min(present), max=max(present))


def sort_facet_values(counts: Iterable[tuple[str | int, int]], limit: int | None) -> list[FacetValue]:
    """Highest count first; ties broken by value so output is deterministic."""
    ordered = sorted(counts, key=lambda item: (-item[1], str(item[0])))
    if limit is not None:
        ordered = ordered[:limit]
    return [FacetValue(value=value, count=count) for value, count in ordered]


def facet_counts(listings: Iterable[Listing], dimension: FacetDimension) -> list[FacetValue]:
    counter: Counter[str | int] = Counter()
    for listing in listings:
        value = field_value(listing, dimension.name)
        if value is not None:
            counter[value] += 1
    return sort_facet_values(counter.items(), dimension.limit)


def aggregate_listings(listings: Sequence[Listing], year: int | None = None) -> SearchAggregates:
    """Facets, stats and buckets for an already-materialised row set."""
    year = year if year is not None else current_year()
    prices = [listing.price for listing in listings if listing.price is not None]
    miles = [listing.miles for listing in listings if listing.miles is not None]
    years = [listing.year for listing in listings if listing.year is not None]

    return SearchAggregates(
        facets={dimension.name: facet_counts(listings, dimension) for dimension in FACET_DIMENSIONS},
        stats=SearchStats(
            price=numeric_stats(prices),
            miles=numeric_stats(miles),
            year=year_stats(years),
        ),
        buckets=SearchBuckets(
            price=bucketize(prices, PRICE_BUCKETS),
            miles=bucketize(miles, MILES_BUCKETS),
            year=bucketize(years, year_buckets(year)),
        ),
    )
