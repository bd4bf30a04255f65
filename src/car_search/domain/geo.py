"""
Geographic helpers: great-circle distance, radius filtering and distance sorting.

All distances are in statute miles on a spherical earth (radius 3958.8 mi).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from car_search.domain.listing import Listing
from car_search.domain.results import ListingHit


EARTH_RADIUS_MILES = 3958.8
MILES_PER_DEGREE_LAT = 69.0


@dataclass(frozen=True, slots=True)
class Coordinates:
    lat: float
    lon: float


@dataclass(frozen=True, slots=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float


def distance_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance between two points, in miles."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def bounding_box(origin: Coordinates, radius_miles: float) -> BoundingBox:
    """Lat/lon box that contains every point within ``radius_miles`` of ``origin``."""
    lat_change = radius_miles / MILES_PER_DEGREE_LAT
    lon_change = radius_miles / (math.cos(math.radians(origin.lat)) * MILES_PER_DEGREE_LAT)
    return BoundingBox(
        min_lat=origin.lat - lat_change,
        max_lat=origin.lat + lat_change,
        min_lon=origin.lon - lon_change,
        max_lon=origin.lon + lon_change,
    )


def is_valid_coordinates(lat: float, lon: float) -> bool:
    return -90 <= lat <= 90 and -180 <= lon <= 180


def normalize_zip(zip_code: str) -> str:
    """``"02101-1234"`` -> ``"02101"``; short numeric codes are zero-padded to 5 digits."""
    return zip_code.strip().split("-")[0].zfill(5)


def distance_to(listing: Listing, origin: Coordinates) -> float | None:
    dealer = listing.dealer
    if dealer is None or not dealer.has_coordinates:
        return None
    return distance_miles(origin.lat, origin.lon, dealer.latitude, dealer.longitude)  # type: ignore[arg-type]


def annotate_distances(listings: list[Listing], origin: Coordinates) -> list[ListingHit]:
    return [ListingHit(listing=listing, distance=distance_to(listing, origin)) for listing in listings]


def filter_by_radius(hits: list[ListingHit], radius_miles: float) -> list[ListingHit]:
    """Keep rows whose distance is known and <= radius; rows without coordinates are dropped."""
    return [hit for hit in hits if hit.distance is not None and hit.distance <= radius_miles]


def sort_by_distance(hits: list[ListingHit], descending: bool = False) -> list[ListingHit]:
    """
    Stable sort by distance; rows with unknown distance always go last.

    Ties keep their incoming (store) order, which already carries the id tiebreaker.
    """
    known = [hit for hit in hits if hit.distance is not None]
    unknown = [hit for hit in hits if hit.distance is None]
    known.sort(key=lambda hit: hit.distance, reverse=descending)  # type: ignore[arg-type,return-value]
    return known + unknown
