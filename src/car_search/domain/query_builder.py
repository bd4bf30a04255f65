"""Translate SearchFilters into the predicate set shared by every search sub-query."""

from __future__ import annotations

from car_search.domain.filters import SearchFilters
from car_search.domain.geo import Coordinates, bounding_box, is_valid_coordinates
from car_search.domain.predicates import AtLeast, AtMost, Equals, OneOf, Predicate


ACTIVE_ONLY: tuple[Predicate, ...] = (Equals("is_active", True),)

_MULTI_VALUE_COLUMNS = (
    "make",
    "model",
    "trim",
    "condition",
    "exterior_color",
    "interior_color",
    "drivetrain",
    "transmission",
    "fuel_type",
    "dealer_type",
)

_RANGE_COLUMNS = (
    ("year", "year_min", "year_max"),
    ("price", "price_min", "price_max"),
    ("miles", "miles_min", "miles_max"),
)


def build_predicates(filters: SearchFilters) -> tuple[Predicate, ...]:
    """
    Build the ordered, immutable predicate set for a filter state.

    - Always starts with ``is_active = true``
    - Each non-empty multi-valued dimension becomes one ``OneOf``
    - Each present range bound becomes one ``AtLeast``/``AtMost``
    - The geographic filter is NOT represented; radius filtering happens after
      the store query (see ``car_search.domain.geo`` and ``radius_prefilter``)

    The same tuple is handed to the row, count, facet, stat and bucket queries.
    """
    predicates: list[Predicate] = list(ACTIVE_ONLY)

    for column in _MULTI_VALUE_COLUMNS:
        values = getattr(filters, column)
        if values:
            predicates.append(OneOf(column, tuple(values)))

    for column, low_name, high_name in _RANGE_COLUMNS:
        low = getattr(filters, low_name)
        high = getattr(filters, high_name)
        if low is not None:
            predicates.append(AtLeast(column, low))
        if high is not None:
            predicates.append(AtMost(column, high))

    if filters.is_certified is not None:
        predicates.append(Equals("is_certified", filters.is_certified))

    return tuple(predicates)


# The flat-earth box underestimates longitude span at high latitudes
_PREFILTER_PADDING = 1.1
_PREFILTER_MAX_RADIUS_MILES = 500
_PREFILTER_MAX_ABS_LAT = 75


def radius_prefilter(origin: Coordinates, radius_miles: float) -> tuple[Predicate, ...]:
    """
    Dealer lat/lon bounds that enclose the search circle.

    Narrows the rows a radius search pulls from the store. Every listing inside
    the circle is inside the padded box, so the exact radius check afterwards
    sees the same candidates it would without this. Returns no predicates when
    the box would be unreliable (huge radius, polar origin) or would wrap the
    antimeridian.
    """
    if radius_miles > _PREFILTER_MAX_RADIUS_MILES or abs(origin.lat) > _PREFILTER_MAX_ABS_LAT:
        return ()

    box = bounding_box(origin, radius_miles * _PREFILTER_PADDING)
    if not (
        is_valid_coordinates(box.min_lat, box.min_lon)
        and is_valid_coordinates(box.max_lat, box.max_lon)
    ):
        return ()

    return (
        AtLeast("latitude", box.min_lat),
        AtMost("latitude", box.max_lat),
        AtLeast("longitude", box.min_lon),
        AtMost("longitude", box.max_lon),
    )
