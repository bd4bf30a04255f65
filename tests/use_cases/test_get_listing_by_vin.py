"""Tests for VIN lookups: GetListingByVin and GetListingPriceHistory."""

from __future__ import annotations

from datetime import datetime
from typing import Callable
from unittest.mock import Mock

import pytest

from car_search.adapters.in_memory_listing_store import InMemoryListingStore
from car_search.domain.errors import NotFoundError, ValidationError
from car_search.domain.listing import Listing, PriceHistoryEntry
from car_search.ports.listing_store import ListingStore
from car_search.use_cases.get_listing_by_vin import (
    GetListingByVin,
    GetListingByVinRequest,
    normalize_vin,
)
from car_search.use_cases.get_listing_price_history import GetListingPriceHistory

VIN = "1HGCM82633A004352"


@pytest.fixture
def listing(make_listing: Callable[..., Listing]) -> Listing:
    return make_listing(vin=VIN, is_active=False)


@pytest.fixture
def store(listing: Listing) -> InMemoryListingStore:
    return InMemoryListingStore(
        [listing],
        price_history=[
            PriceHistoryEntry(VIN, 27_000, 20_000, "cars.com", datetime(2026, 1, 1)),
            PriceHistoryEntry(VIN, 25_500, 21_000, "cars.com", datetime(2026, 2, 1)),
        ],
    )


# ==============================================================================
# normalize_vin
# ==============================================================================


def test_normalize_vin_uppercases_and_strips() -> None:
    assert normalize_vin(" 1hgcm82633a004352 ") == VIN


@pytest.mark.parametrize(
    "vin",
    [
        "",
        "SHORT",
        "1HGCM82633A0043521",
        "1HGCM82633A00435-",
        # Unicode letters and digits that str.isalnum() accepts
        "1HGCM82633A00435É",
        "1HGCM82633A00435\u0663",
        "\uff11HGCM82633A004352",
    ],
)
def test_malformed_vin_is_rejected(vin: str) -> None:
    with pytest.raises(ValidationError) as exc_info:
        normalize_vin(vin)

    assert exc_info.value.errors[0]["code"] == "INVALID_VIN"  # type: ignore[index]


# ==============================================================================
# GetListingByVin
# ==============================================================================


def test_returns_listing_even_when_inactive(store: InMemoryListingStore, listing: Listing) -> None:
    response = GetListingByVin(store).execute(GetListingByVinRequest(vin=VIN.lower()))

    assert response.listing == listing


def test_unknown_vin_raises_not_found(store: InMemoryListingStore) -> None:
    with pytest.raises(NotFoundError) as exc_info:
        GetListingByVin(store).execute(GetListingByVinRequest(vin="JH4KA7561PC008269"))

    assert exc_info.value.context["identifier"] == "JH4KA7561PC008269"


def test_malformed_vin_never_reaches_store() -> None:
    store = Mock(spec=ListingStore)

    with pytest.raises(ValidationError):
        GetListingByVin(store).execute(GetListingByVinRequest(vin="nope"))

    store.get_by_vin.assert_not_called()


# ==============================================================================
# GetListingPriceHistory
# ==============================================================================


def test_price_history_newest_first(store: InMemoryListingStore) -> None:
    response = GetListingPriceHistory(store).execute(VIN)

    assert response.vin == VIN
    assert [entry.price for entry in response.entries] == [25_500, 27_000]


def test_price_history_empty_for_listing_without_changes(
    make_listing: Callable[..., Listing],
) -> None:
    listing = make_listing()

    response = GetListingPriceHistory(InMemoryListingStore([listing])).execute(listing.vin)

    assert response.entries == []


def test_price_history_unknown_vin(store: InMemoryListingStore) -> None:
    with pytest.raises(NotFoundError):
        GetListingPriceHistory(store).execute("JH4KA7561PC008269")
