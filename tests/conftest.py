"""Shared fixtures: small factories for domain listings and dealers."""

from __future__ import annotations

import itertools
from datetime import datetime, timezone
from typing import Any, Callable

import pytest

from car_search.domain.listing import Dealer, Listing

SEEN_AT = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def make_dealer() -> Callable[..., Dealer]:
    counter = itertools.count(1)

    def factory(**overrides: Any) -> Dealer:
        n = next(counter)
        values: dict[str, Any] = {
            "id": f"dealer-{n:03d}",
            "name": f"Dealer {n}",
            "dealer_type": "franchise",
        }
        values.update(overrides)
        return Dealer(**values)

    return factory


@pytest.fixture
def make_listing() -> Callable[..., Listing]:
    """
    Factory for Listing values.

    Ids are zero-padded so string order matches creation order; VINs are
    derived from the id so they are unique and 17 characters long.
    """
    counter = itertools.count(1)

    def factory(**overrides: Any) -> Listing:
        n = next(counter)
        values: dict[str, Any] = {
            "id": f"listing-{n:04d}",
            "vin": f"1HGCM82633A{n:06d}",
            "year": 2021,
            "make": "Toyota",
            "model": "Camry",
            "price": 25_000,
            "miles": 30_000,
            "condition": "used",
            "first_seen_at": SEEN_AT,
            "last_seen_at": SEEN_AT,
            "source": "cars.com",
            "source_url": f"https://example.com/listings/{n}",
        }
        values.update(overrides)
        return Listing(**values)

    return factory
