"""
Store-agnostic predicate objects over a listing (optionally joined to its dealer).

Predicates are immutable values. A store adapter compiles them into its own query
language; ``matches`` defines the reference semantics, including SQL-style NULL
handling: a missing value never satisfies a predicate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from car_search.domain.listing import Listing


LISTING_FIELDS = frozenset(
    {
        "is_active",
        "is_certified",
        "make",
        "model",
        "trim",
        "year",
        "price",
        "miles",
        "condition",
        "exterior_color",
        "interior_color",
        "drivetrain",
        "transmission",
        "fuel_type",
    }
)
DEALER_FIELDS = frozenset({"dealer_type", "latitude", "longitude"})


def field_value(listing: Listing, field: str) -> Any:
    if field in DEALER_FIELDS:
        if listing.dealer is None:
            return None
        return getattr(listing.dealer, field)
    if field in LISTING_FIELDS:
        return getattr(listing, field)
    raise KeyError(f"Unknown listing field: {field}")


@dataclass(frozen=True, slots=True)
class Predicate:
    field: str

    @property
    def requires_dealer(self) -> bool:
        return self.field in DEALER_FIELDS

    def matches(self, listing: Listing) -> bool:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class Equals(Predicate):
    value: Any

    def matches(self, listing: Listing) -> bool:
        actual = field_value(listing, self.field)
        return actual is not None and actual == self.value


@dataclass(frozen=True, slots=True)
class OneOf(Predicate):
    values: tuple[Any, ...]

    def matches(self, listing: Listing) -> bool:
        actual = field_value(listing, self.field)
        return actual is not None and actual in self.values


@dataclass(frozen=True, slots=True)
class AtLeast(Predicate):
    bound: float

    def matches(self, listing: Listing) -> bool:
        actual = field_value(listing, self.field)
        return actual is not None and actual >= self.bound


@dataclass(frozen=True, slots=True)
class AtMost(Predicate):
    bound: float

    def matches(self, listing: Listing) -> bool:
        actual = field_value(listing, self.field)
        return actual is not None and actual <= self.bound


def matches_all(listing: Listing, predicates: tuple[Predicate, ...]) -> bool:
    return all(predicate.matches(listing) for predicate in predicates)
