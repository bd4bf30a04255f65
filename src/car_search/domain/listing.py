from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


# ==============================================================================
# Enumerated attribute values
# ==============================================================================

CONDITIONS = ("new", "used", "certified")
DRIVETRAINS = ("fwd", "rwd", "awd", "4wd")
TRANSMISSIONS = ("automatic", "manual")
FUEL_TYPES = ("gas", "diesel", "hybrid", "electric")
DEALER_TYPES = ("franchise", "independent")


@dataclass(frozen=True, slots=True)
class Dealer:
    id: str
    name: str
    dealer_type: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    website: str | None = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass(frozen=True, slots=True)
class Listing:
    """A vehicle offer as the ingestion pipeline stored it.

    Only active listings are visible to search. ``vin`` is unique across the
    table. ``dealer`` is None when the listing has no known seller, which also
    excludes it from radius filtering and distance sorting.
    """

    id: str
    vin: str
    year: int
    make: str
    model: str
    first_seen_at: datetime
    last_seen_at: datetime
    source: str
    source_url: str
    trim: str | None = None
    body_type: str | None = None
    drivetrain: str | None = None
    transmission: str | None = None
    fuel_type: str | None = None
    exterior_color: str | None = None
    interior_color: str | None = None
    price: int | None = None
    base_msrp: int | None = None
    combined_msrp: int | None = None
    miles: int | None = None
    condition: str | None = None
    is_certified: bool = False
    is_active: bool = True
    is_sold: bool = False
    image_url: str | None = None
    dealer_id: str | None = None
    dealer: Dealer | None = None


@dataclass(frozen=True, slots=True)
class PriceHistoryEntry:
    vin: str
    price: int | None
    miles: int | None
    source: str | None
    recorded_at: datetime
