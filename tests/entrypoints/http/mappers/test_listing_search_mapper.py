"""
Tests for ListingSearchMapper and the query-string parsers.

The mapper owns request normalisation (comma lists, enum filtering, boolean
parsing, default radius) and the response shape (omitted sections, rounded
distance, days on lot).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import pytest

from car_search.domain.listing import Dealer, Listing, PriceHistoryEntry
from car_search.domain.results import (
    BucketCount,
    FacetValue,
    FilterOptions,
    ListingHit,
    PageMeta,
    SearchBuckets,
    SearchResults,
    SearchStats,
    ValueRange,
)
from car_search.entrypoints.http.dtos.listing_search import ListingSearchQueryDTO
from car_search.entrypoints.http.mappers.listing_search_mapper import (
    DEFAULT_RADIUS_MILES,
    ListingSearchMapper,
    parse_bool,
    parse_list,
)
from car_search.use_cases.get_filter_options import GetFilterOptionsResponse
from car_search.use_cases.get_listing_price_history import GetListingPriceHistoryResponse


def query(**params: Any) -> ListingSearchQueryDTO:
    return ListingSearchQueryDTO(**params)


# ==============================================================================
# parse_list / parse_bool
# ==============================================================================


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, None),
        ("", None),
        (" , ,", None),
        ("Toyota", ("Toyota",)),
        ("Toyota, Honda,", ("Toyota", "Honda")),
    ],
)
def test_parse_list(raw: str | None, expected: tuple[str, ...] | None) -> None:
    assert parse_list(raw) == expected


def test_parse_list_keeps_free_text_case() -> None:
    assert parse_list("BMW,land rover") == ("BMW", "land rover")


def test_parse_list_filters_and_lowercases_enumerations() -> None:
    assert parse_list("AWD,hover,4wd", ("fwd", "awd", "4wd")) == ("awd", "4wd")
    assert parse_list("hover", ("fwd",)) is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("true", True), ("false", False), ("True", None), ("1", None), ("yes", None), (None, None)],
)
def test_parse_bool_accepts_only_literals(raw: str | None, expected: bool | None) -> None:
    assert parse_bool(raw) is expected


# ==============================================================================
# to_domain_filters / to_domain_request
# ==============================================================================


def test_to_domain_filters_maps_every_dimension() -> None:
    filters = ListingSearchMapper.to_domain_filters(
        query(
            make="Toyota,Honda",
            model="Camry",
            trim="XLE",
            year_min=2019,
            year_max=2023,
            price_min=15_000,
            price_max=30_000,
            miles_min=0,
            miles_max=50_000,
            condition="used,Certified",
            is_certified="true",
            exterior_color="White",
            interior_color="Black",
            drivetrain="awd",
            transmission="automatic",
            fuel_type="hybrid",
            dealer_type="franchise",
        )
    )

    assert filters.make == ("Toyota", "Honda")
    assert filters.model == ("Camry",)
    assert filters.trim == ("XLE",)
    assert (filters.year_min, filters.year_max) == (2019, 2023)
    assert (filters.price_min, filters.price_max) == (15_000, 30_000)
    assert (filters.miles_min, filters.miles_max) == (0, 50_000)
    assert filters.condition == ("used", "certified")
    assert filters.is_certified is True
    assert filters.exterior_color == ("White",)
    assert filters.interior_color == ("Black",)
    assert filters.drivetrain == ("awd",)
    assert filters.transmission == ("automatic",)
    assert filters.fuel_type == ("hybrid",)
    assert filters.dealer_type == ("franchise",)
    assert filters.zip_code is None
    assert filters.radius is None


def test_unknown_enumeration_values_are_dropped() -> None:
    filters = ListingSearchMapper.to_domain_filters(query(condition="mint", fuel_type="steam"))

    assert filters.condition is None
    assert filters.fuel_type is None


def test_zip_code_defaults_radius() -> None:
    filters = ListingSearchMapper.to_domain_filters(query(zip_code=" 10001 "))

    assert filters.zip_code == "10001"
    assert filters.radius == DEFAULT_RADIUS_MILES


def test_explicit_radius_is_kept() -> None:
    filters = ListingSearchMapper.to_domain_filters(query(zip_code="10001", radius=25))

    assert filters.radius == 25


def test_radius_without_zip_code_is_ignored() -> None:
    filters = ListingSearchMapper.to_domain_filters(query(zip_code="  ", radius=25))

    assert filters.zip_code is None
    assert filters.radius is None


def test_to_domain_request_defaults() -> None:
    request = ListingSearchMapper.to_domain_request(query())

    assert request.paging.page == 1
    assert request.paging.per_page == 25
    assert (request.sort.field, request.sort.order) == ("price", "asc")
    assert request.include_facets and request.include_stats and request.include_buckets


@pytest.mark.parametrize(("raw", "expected"), [("false", False), ("true", True), ("no", True)])
def test_section_flags_only_disabled_by_literal_false(raw: str, expected: bool) -> None:
    request = ListingSearchMapper.to_domain_request(
        query(include_facets=raw, include_stats=raw, include_buckets=raw)
    )

    assert request.include_facets is expected
    assert request.include_stats is expected
    assert request.include_buckets is expected


def test_to_domain_request_maps_paging_and_sort() -> None:
    request = ListingSearchMapper.to_domain_request(
        query(page=3, per_page=10, sort_by="distance", sort_order="desc")
    )

    assert (request.paging.page, request.paging.per_page) == (3, 10)
    assert (request.sort.field, request.sort.order) == ("distance", "desc")


# ==============================================================================
# Responses
# ==============================================================================


@pytest.fixture
def dealer(make_dealer: Callable[..., Dealer]) -> Dealer:
    return make_dealer(city="New York", state="NY", latitude=40.758, longitude=-73.9855)


def test_to_listing_response_derives_days_on_lot(
    make_listing: Callable[..., Listing], dealer: Dealer
) -> None:
    listing = make_listing(dealer=dealer, dealer_id=dealer.id)
    now = listing.first_seen_at + timedelta(days=12, hours=5)

    dto = ListingSearchMapper.to_listing_response(listing, now=now)

    assert dto.days_on_lot == 12
    assert dto.dealer is not None
    assert dto.dealer.city == "New York"
    assert "distance" not in dto.model_fields_set


def test_days_on_lot_is_never_negative(make_listing: Callable[..., Listing]) -> None:
    listing = make_listing()

    dto = ListingSearchMapper.to_listing_response(
        listing, now=listing.first_seen_at - timedelta(days=2)
    )

    assert dto.days_on_lot == 0


def test_distance_is_rounded_to_whole_miles(make_listing: Callable[..., Listing]) -> None:
    dto = ListingSearchMapper.to_hit_response(ListingHit(make_listing(), distance=12.6))

    assert dto.distance == 13


def test_listing_without_dealer(make_listing: Callable[..., Listing]) -> None:
    assert ListingSearchMapper.to_listing_response(make_listing()).dealer is None


def results(hits: list[ListingHit], **sections: Any) -> SearchResults:
    return SearchResults(
        hits=hits,
        meta=PageMeta(page=1, per_page=25, total=len(hits), total_pages=1),
        query_time_ms=4.2,
        **sections,
    )


def test_to_response_includes_requested_sections(make_listing: Callable[..., Listing]) -> None:
    dto = ListingSearchMapper.to_response(
        results(
            [ListingHit(make_listing())],
            facets={"make": [FacetValue("Toyota", 1)]},
            stats=SearchStats(),
            buckets=SearchBuckets(price=[BucketCount("$20k-$30k", 1, 20_000, 30_000)]),
        )
    )
    body = dto.model_dump(exclude_unset=True)

    assert body["success"] is True
    assert body["meta"] == {"page": 1, "per_page": 25, "total": 1, "total_pages": 1}
    assert body["facets"] == {"make": [{"value": "Toyota", "count": 1}]}
    assert body["stats"]["price"] == {"min": 0, "max": 0, "avg": 0, "median": 0}
    assert body["buckets"]["price"] == [
        {"label": "$20k-$30k", "count": 1, "min": 20_000, "max": 30_000}
    ]
    assert body["performance"] == {"query_time_ms": 4.2, "cached_facets": False}


def test_to_response_omits_disabled_sections(make_listing: Callable[..., Listing]) -> None:
    body = ListingSearchMapper.to_response(results([ListingHit(make_listing())])).model_dump(
        exclude_unset=True
    )

    assert "facets" not in body
    assert "stats" not in body
    assert "buckets" not in body
    assert "distance" not in body["data"][0]
    # Null listing columns are still sent
    assert body["data"][0]["trim"] is None


def test_to_filter_options_response() -> None:
    options = FilterOptions(
        makes=[FacetValue("Toyota", 3)],
        conditions=[FacetValue("used", 3)],
        drivetrains=[],
        transmissions=[],
        fuel_types=[],
        dealer_types=[],
        ranges={"year": ValueRange(2018, 2024)},
    )

    dto = ListingSearchMapper.to_filter_options_response(
        GetFilterOptionsResponse(options=options, source="cache")
    )

    assert dto.success is True
    assert dto.source == "cache"
    assert dto.data.makes[0].value == "Toyota"
    assert dto.data.ranges["year"].min == 2018


def test_to_price_history_response() -> None:
    recorded_at = datetime(2026, 2, 1, tzinfo=timezone.utc)
    entry = PriceHistoryEntry("1HGCM82633A004352", 25_500, 21_000, "cars.com", recorded_at)

    dto = ListingSearchMapper.to_price_history_response(
        GetListingPriceHistoryResponse(vin=entry.vin, entries=[entry])
    )

    assert dto.vin == "1HGCM82633A004352"
    assert dto.data[0].price == 25_500
    assert dto.data[0].recorded_at == recorded_at
