#!/usr/bin/env python3
"""
Seed dealers, listings and price history with deterministic random data.

Features:
- Deterministic: fixed seed → same dataset every run
- Idempotent: safe to run multiple times (clears before seeding)
- Realism-lite: prices correlated with year and make band, mileage with age
- Dealers are placed around the metros the ZIP geocoder knows, so radius
  searches return results locally

Usage:
    DATABASE_URL=postgresql+psycopg://... python scripts/seed_listings.py
"""

from __future__ import annotations

import random
import sys
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add src to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from car_search.adapters.redis_cache_backend import RedisCacheBackend
from car_search.adapters.static_zip_geocoder import ZIP_COORDINATES
from car_search.domain.listing import CONDITIONS, DEALER_TYPES, DRIVETRAINS, FUEL_TYPES
from car_search.infra.config import redis_url
from car_search.infra.db.models import DealerRow, ListingRow, PriceHistoryRow
from car_search.infra.db.session import get_session
from car_search.ports.cache_backend import CacheBackend
from car_search.use_cases.search_cache import FacetsCache, FilterOptionsCache


# ==============================================================================
# Configuration
# ==============================================================================

RANDOM_SEED = 42
NUM_DEALERS = 40
NUM_LISTINGS = 500
CURRENT_YEAR = 2026


# ==============================================================================
# US Market Vehicle Data
# ==============================================================================

# Base MSRP band (USD) per make category
MAKES = {
    "economy": {
        "makes": ["Nissan", "Chevrolet", "Kia", "Hyundai"],
        "base_price_min": 18_000,
        "base_price_max": 30_000,
    },
    "mid_range": {
        "makes": ["Toyota", "Honda", "Mazda", "Subaru", "Ford"],
        "base_price_min": 24_000,
        "base_price_max": 42_000,
    },
    "premium": {
        "makes": ["BMW", "Mercedes-Benz", "Audi", "Lexus", "Tesla"],
        "base_price_min": 42_000,
        "base_price_max": 85_000,
    },
}

MODELS_BY_MAKE = {
    "Nissan": ["Sentra", "Altima", "Rogue", "Frontier"],
    "Chevrolet": ["Malibu", "Equinox", "Silverado", "Tahoe"],
    "Kia": ["Forte", "Sportage", "Telluride", "Sorento"],
    "Hyundai": ["Elantra", "Tucson", "Santa Fe", "Ioniq 5"],
    "Toyota": ["Corolla", "Camry", "RAV4", "Tacoma", "Highlander"],
    "Honda": ["Civic", "Accord", "CR-V", "Pilot"],
    "Mazda": ["Mazda3", "CX-5", "CX-50", "CX-90"],
    "Subaru": ["Impreza", "Outback", "Forester", "Crosstrek"],
    "Ford": ["Escape", "Explorer", "F-150", "Mustang"],
    "BMW": ["3 Series", "5 Series", "X3", "X5"],
    "Mercedes-Benz": ["C-Class", "E-Class", "GLC", "GLE"],
    "Audi": ["A4", "A6", "Q5", "Q7"],
    "Lexus": ["ES", "IS", "RX", "NX"],
    "Tesla": ["Model 3", "Model Y", "Model S", "Model X"],
}

TRIMS = ["Base", "S", "SE", "LE", "XLE", "Sport", "Limited", "Touring", "Premium"]
COLORS = ["White", "Black", "Silver", "Gray", "Blue", "Red", "Green", "Brown"]
INTERIOR_COLORS = ["Black", "Gray", "Beige", "Brown"]
SOURCES = ["cars.com", "autotrader", "carfax"]


# ==============================================================================
# Generation
# ==============================================================================


def calculate_price(make: str, year: int) -> int:
    """Depreciate a random base price ~12%/year (capped at 65%) and round to $100."""
    category = next(
        (data for data in MAKES.values() if make in data["makes"]),
        MAKES["mid_range"],
    )
    base_price = random.randint(category["base_price_min"], category["base_price_max"])

    years_old = max(0, CURRENT_YEAR - year)
    depreciation = min(0.12 * years_old, 0.65)
    price = base_price * (1 - depreciation) * random.uniform(0.92, 1.08)

    return max(int(round(price / 100)) * 100, 5_000)


def random_vin() -> str:
    alphabet = "ABCDEFGHJKLMNPRSTUVWXYZ0123456789"  # VINs never use I, O, Q
    return "".join(random.choice(alphabet) for _ in range(17))


def generate_dealer(index: int) -> DealerRow:
    zip_code, origin = random.choice(list(ZIP_COORDINATES.items()))

    return DealerRow(
        id=str(uuid.UUID(int=random.getrandbits(128))),
        name=f"Dealer {index:03d}",
        dealer_type=random.choice(DEALER_TYPES),
        zip_code=zip_code,
        # Within roughly 0-60 miles of the metro reference point
        latitude=round(origin.lat + random.uniform(-0.8, 0.8), 6),
        longitude=round(origin.lon + random.uniform(-0.8, 0.8), 6),
    )


def generate_listing(dealers: list[DealerRow], now: datetime) -> ListingRow:
    category = random.choice(list(MAKES.keys()))
    make = random.choice(MAKES[category]["makes"])
    model = random.choice(MODELS_BY_MAKE[make])

    year = random.choices(
        range(CURRENT_YEAR - 9, CURRENT_YEAR + 1),
        weights=[1, 1, 2, 2, 3, 3, 4, 5, 6, 4],
        k=1,
    )[0]

    condition = "new" if year >= CURRENT_YEAR else random.choice(CONDITIONS[1:])
    years_old = max(0, CURRENT_YEAR - year)
    miles = random.randint(0, 50) if condition == "new" else random.randint(
        years_old * 6_000, years_old * 14_000 + 5_000
    )

    fuel_type = "electric" if make == "Tesla" else random.choices(FUEL_TYPES, weights=[8, 1, 3, 1])[0]
    first_seen_at = now - timedelta(days=random.randint(0, 120))

    return ListingRow(
        id=str(uuid.UUID(int=random.getrandbits(128))),
        vin=random_vin(),
        year=year,
        make=make,
        model=model,
        # Some rows deliberately lack optional attributes
        trim=random.choice(TRIMS) if random.random() > 0.1 else None,
        drivetrain=random.choice(DRIVETRAINS),
        transmission="automatic" if random.random() > 0.08 else "manual",
        fuel_type=fuel_type,
        exterior_color=random.choice(COLORS),
        interior_color=random.choice(INTERIOR_COLORS) if random.random() > 0.15 else None,
        price=calculate_price(make, year) if random.random() > 0.03 else None,
        miles=miles,
        condition=condition,
        is_certified=condition == "certified",
        is_active=random.random() > 0.05,
        first_seen_at=first_seen_at,
        last_seen_at=now - timedelta(days=random.randint(0, 3)),
        source=random.choice(SOURCES),
        source_url=f"https://example.com/listings/{make.lower().replace(' ', '-')}-{year}",
        dealer_id=random.choice(dealers).id if random.random() > 0.05 else None,
    )


def generate_price_history(listing: ListingRow) -> list[PriceHistoryRow]:
    if listing.price is None:
        return []

    history = []
    price = listing.price
    recorded_at = listing.first_seen_at
    for _ in range(random.randint(1, 4)):
        history.append(
            PriceHistoryRow(
                listing_id=listing.id,
                vin=listing.vin,
                price=price,
                miles=listing.miles,
                source=listing.source,
                recorded_at=recorded_at,
            )
        )
        price = int(price * random.uniform(0.95, 1.0))
        recorded_at = recorded_at + timedelta(days=random.randint(3, 20))

    return history


def seed_listings(
    num_dealers: int = NUM_DEALERS, num_listings: int = NUM_LISTINGS, seed: int = RANDOM_SEED
) -> None:
    random.seed(seed)
    now = datetime(CURRENT_YEAR, 6, 1, tzinfo=timezone.utc)

    print(f"🌱 Seeding {num_dealers} dealers and {num_listings} listings (seed={seed})...")

    with get_session() as session:
        print("🗑️  Clearing existing data...")
        session.query(PriceHistoryRow).delete()
        session.query(ListingRow).delete()
        session.query(DealerRow).delete()

        dealers = [generate_dealer(i) for i in range(1, num_dealers + 1)]
        session.add_all(dealers)
        session.flush()

        listings = [generate_listing(dealers, now) for _ in range(num_listings)]
        session.add_all(listings)
        session.flush()

        history = [entry for listing in listings for entry in generate_price_history(listing)]
        session.add_all(history)
        session.flush()

        print(f"✅ Seeded {len(dealers)} dealers, {len(listings)} listings, {len(history)} price points")

        print("\n📊 Sample listings:")
        for i, listing in enumerate(listings[:5], 1):
            price = f"${listing.price:,}" if listing.price is not None else "no price"
            print(f"   {i}. {listing.year} {listing.make} {listing.model} - {price} ({listing.condition})")

    # Only after the commit: cached aggregates would otherwise describe the old rows
    invalidate_search_caches()


def invalidate_search_caches(backend: CacheBackend | None = None) -> None:
    """Drop cached facets and filter options so searches see the new data."""
    if backend is None:
        url = redis_url()
        if not url:
            print("ℹ️  REDIS_URL not set; no shared search cache to invalidate")
            return
        backend = RedisCacheBackend.from_url(url)

    facets_cleared = FacetsCache(backend).invalidate_all()
    options_cleared = FilterOptionsCache(backend).invalidate()
    if facets_cleared and options_cleared:
        print("🧹 Search caches invalidated")
    else:
        print("⚠️  Search cache invalidation failed; cached results expire with their TTL")


if __name__ == "__main__":
    try:
        seed_listings()
    except Exception as e:
        print(f"❌ Error seeding database: {e}", file=sys.stderr)
        sys.exit(1)
