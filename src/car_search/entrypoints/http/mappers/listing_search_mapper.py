from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import Any

from car_search.domain.filters import Paging, SearchFilters, SortSpec
from car_search.domain.listing import (
    CONDITIONS,
    DEALER_TYPES,
    DRIVETRAINS,
    FUEL_TYPES,
    TRANSMISSIONS,
    Dealer,
    Listing,
    PriceHistoryEntry,
)
from car_search.domain.results import ListingHit, SearchResults
from car_search.entrypoints.http.dtos.filter_options import FilterOptionsDTO, FilterOptionsResponseDTO
from car_search.entrypoints.http.dtos.listing_search import (
    DealerResponseDTO,
    ListingResponseDTO,
    ListingSearchQueryDTO,
    ListingSearchResponseDTO,
    PriceHistoryEntryDTO,
    PriceHistoryResponseDTO,
)
from car_search.use_cases.get_filter_options import GetFilterOptionsResponse
from car_search.use_cases.get_listing_price_history import GetListingPriceHistoryResponse
from car_search.use_cases.search_listings import SearchListingsRequest

DEFAULT_RADIUS_MILES = 100.0

# Enumerated dimensions: values outside the set are dropped at the boundary
_ALLOWED_VALUES: dict[str, tuple[str, ...]] = {
    "condition": CONDITIONS,
    "drivetrain": DRIVETRAINS,
    "transmission": TRANSMISSIONS,
    "fuel_type": FUEL_TYPES,
    "dealer_type": DEALER_TYPES,
}


def parse_list(raw: str | None, allowed: tuple[str, ...] | None = None) -> tuple[str, ...] | None:
    """
    Split a comma-separated parameter.

    Blank items are dropped; when ``allowed`` is given, items are lower-cased and
    anything outside it is dropped. Returns None when nothing remains.
    """
    if not raw:
        return None
    values = [item.strip() for item in raw.split(",") if item.strip()]
    if allowed is not None:
        values = [value.lower() for value in values if value.lower() in allowed]
    return tuple(values) or None


def parse_bool(raw: str | None) -> bool | None:
    """Only the literal strings 'true' and 'false' count; anything else means unset."""
    if raw == "true":
        return True
    if raw == "false":
        return False
    return None


class ListingSearchMapper:
    """Maps between REST DTOs and domain models for listing search."""

    @staticmethod
    def to_domain_filters(dto: ListingSearchQueryDTO) -> SearchFilters:
        zip_code = dto.zip_code.strip() if dto.zip_code and dto.zip_code.strip() else None
        radius = dto.radius
        if zip_code is not None and radius is None:
            radius = DEFAULT_RADIUS_MILES

        return SearchFilters(
            make=parse_list(dto.make),
            model=parse_list(dto.model),
            trim=parse_list(dto.trim),
            year_min=dto.year_min,
            year_max=dto.year_max,
            price_min=dto.price_min,
            price_max=dto.price_max,
            miles_min=dto.miles_min,
            miles_max=dto.miles_max,
            condition=parse_list(dto.condition, _ALLOWED_VALUES["condition"]),
            is_certified=parse_bool(dto.is_certified),
            exterior_color=parse_list(dto.exterior_color),
            interior_color=parse_list(dto.interior_color),
            drivetrain=parse_list(dto.drivetrain, _ALLOWED_VALUES["drivetrain"]),
            transmission=parse_list(dto.transmission, _ALLOWED_VALUES["transmission"]),
            fuel_type=parse_list(dto.fuel_type, _ALLOWED_VALUES["fuel_type"]),
            dealer_type=parse_list(dto.dealer_type, _ALLOWED_VALUES["dealer_type"]),
            zip_code=zip_code,
            radius=radius if zip_code is not None else None,
        )

    @staticmethod
    def to_domain_request(dto: ListingSearchQueryDTO) -> SearchListingsRequest:
        # Section flags default to on; only an explicit 'false' turns one off
        return SearchListingsRequest(
            filters=ListingSearchMapper.to_domain_filters(dto),
            paging=Paging(page=dto.page, per_page=dto.per_page),
            sort=SortSpec(field=dto.sort_by, order=dto.sort_order),
            include_facets=parse_bool(dto.include_facets) is not False,
            include_stats=parse_bool(dto.include_stats) is not False,
            include_buckets=parse_bool(dto.include_buckets) is not False,
        )

    @staticmethod
    def to_dealer_response(dealer: Dealer) -> DealerResponseDTO:
        return DealerResponseDTO(**asdict(dealer))

    @staticmethod
    def to_listing_response(
        listing: Listing, distance: float | None = None, now: datetime | None = None
    ) -> ListingResponseDTO:
        """
        Converts a domain Listing to its REST shape.

        ``days_on_lot`` is derived from ``first_seen_at``; distance is rounded to
        whole miles.
        """
        now = now or datetime.now(listing.first_seen_at.tzinfo)
        extra: dict[str, Any] = {}
        if distance is not None:
            extra["distance"] = round(distance)

        return ListingResponseDTO(
            id=listing.id,
            vin=listing.vin,
            year=listing.year,
            make=listing.make,
            model=listing.model,
            trim=listing.trim,
            body_type=listing.body_type,
            drivetrain=listing.drivetrain,
            transmission=listing.transmission,
            fuel_type=listing.fuel_type,
            exterior_color=listing.exterior_color,
            interior_color=listing.interior_color,
            price=listing.price,
            base_msrp=listing.base_msrp,
            combined_msrp=listing.combined_msrp,
            miles=listing.miles,
            condition=listing.condition,
            is_certified=listing.is_certified,
            is_active=listing.is_active,
            is_sold=listing.is_sold,
            image_url=listing.image_url,
            source=listing.source,
            source_url=listing.source_url,
            first_seen_at=listing.first_seen_at,
            last_seen_at=listing.last_seen_at,
            days_on_lot=max((now - listing.first_seen_at).days, 0),
            dealer=(
                ListingSearchMapper.to_dealer_response(listing.dealer)
                if listing.dealer is not None
                else None
            ),
            **extra,
        )

    @staticmethod
    def to_hit_response(hit: ListingHit) -> ListingResponseDTO:
        return ListingSearchMapper.to_listing_response(hit.listing, distance=hit.distance)

    @staticmethod
    def to_response(result: SearchResults) -> ListingSearchResponseDTO:
        """
        Sections the caller switched off are left unset, so the route (which
        serializes with ``exclude_unset``) omits them instead of sending null.
        """
        payload: dict[str, Any] = {
            "success": True,
            "data": [ListingSearchMapper.to_hit_response(hit) for hit in result.hits],
            "meta": asdict(result.meta),
            "performance": {
                "query_time_ms": result.query_time_ms,
                "cached_facets": result.cached_facets,
            },
        }
        if result.facets is not None:
            payload["facets"] = {
                name: [asdict(value) for value in values] for name, values in result.facets.items()
            }
        if result.stats is not None:
            payload["stats"] = asdict(result.stats)
        if result.buckets is not None:
            payload["buckets"] = asdict(result.buckets)

        return ListingSearchResponseDTO.model_validate(payload)

    @staticmethod
    def to_filter_options_response(result: GetFilterOptionsResponse) -> FilterOptionsResponseDTO:
        return FilterOptionsResponseDTO(
            data=FilterOptionsDTO.model_validate(result.options.to_dict()),
            source=result.source,  # type: ignore[arg-type]
        )

    @staticmethod
    def to_price_history_entry(entry: PriceHistoryEntry) -> PriceHistoryEntryDTO:
        return PriceHistoryEntryDTO(
            price=entry.price,
            miles=entry.miles,
            source=entry.source,
            recorded_at=entry.recorded_at,
        )

    @staticmethod
    def to_price_history_response(result: GetListingPriceHistoryResponse) -> PriceHistoryResponseDTO:
        return PriceHistoryResponseDTO(
            vin=result.vin,
            data=[ListingSearchMapper.to_price_history_entry(entry) for entry in result.entries],
        )
