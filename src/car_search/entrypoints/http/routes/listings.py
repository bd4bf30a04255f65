from fastapi import APIRouter, Depends

from car_search.entrypoints.http.dependencies import (
    get_filter_options_use_case,
    get_listing_by_vin_use_case,
    get_listing_price_history_use_case,
    get_search_listings_use_case,
)
from car_search.entrypoints.http.dtos.filter_options import FilterOptionsResponseDTO
from car_search.entrypoints.http.dtos.listing_search import (
    ListingDetailResponseDTO,
    ListingSearchQueryDTO,
    ListingSearchResponseDTO,
    PriceHistoryResponseDTO,
)
from car_search.entrypoints.http.error_responses import ErrorResponse
from car_search.entrypoints.http.mappers.listing_search_mapper import ListingSearchMapper
from car_search.use_cases.get_filter_options import GetFilterOptions
from car_search.use_cases.get_listing_by_vin import GetListingByVin, GetListingByVinRequest
from car_search.use_cases.get_listing_price_history import GetListingPriceHistory
from car_search.use_cases.search_listings import SearchListings

router = APIRouter(prefix="/listings", tags=["Listings"])


@router.get(
    "/search",
    response_model=ListingSearchResponseDTO,
    response_model_exclude_unset=True,
    summary="Faceted listing search",
    description="""
    Search active listings with filters, sorting and pagination.

    ## Filters
    - Multi-value filters are comma-separated; values within one filter are OR-ed
    - Different filters are AND-ed
    - Year/price/miles: inclusive ranges
    - zip_code + radius: only listings whose dealer is within radius miles

    ## Sections
    facets, stats and buckets describe the whole filtered set (not just the page).
    Pass include_facets/include_stats/include_buckets=false to skip them.

    ## Example
    ```
    GET /v1/listings/search?make=Toyota,Honda&year_min=2020&sort_by=price&sort_order=asc
    ```
    """,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        500: {"model": ErrorResponse, "description": "Search failed"},
    },
)
def search_listings(
    query: ListingSearchQueryDTO = Depends(),
    use_case: SearchListings = Depends(get_search_listings_use_case),
) -> ListingSearchResponseDTO:
    """Search endpoint following parse → execute → map → return pattern."""
    request = ListingSearchMapper.to_domain_request(query)
    result = use_case.execute(request)
    return ListingSearchMapper.to_response(result)


@router.get(
    "/filters/options",
    response_model=FilterOptionsResponseDTO,
    summary="Selectable filter values",
    description="Every selectable value per dimension with global counts over active "
    "listings, plus global year/price/miles ranges.",
)
def get_filter_options(
    use_case: GetFilterOptions = Depends(get_filter_options_use_case),
) -> FilterOptionsResponseDTO:
    return ListingSearchMapper.to_filter_options_response(use_case.execute())


@router.get(
    "/{vin}",
    response_model=ListingDetailResponseDTO,
    summary="Listing by VIN",
    responses={
        400: {"model": ErrorResponse, "description": "Malformed VIN"},
        404: {"model": ErrorResponse, "description": "Listing not found"},
    },
)
def get_listing(
    vin: str,
    use_case: GetListingByVin = Depends(get_listing_by_vin_use_case),
) -> ListingDetailResponseDTO:
    result = use_case.execute(GetListingByVinRequest(vin=vin))
    return ListingDetailResponseDTO(data=ListingSearchMapper.to_listing_response(result.listing))


@router.get(
    "/{vin}/history",
    response_model=PriceHistoryResponseDTO,
    summary="Price history for a VIN",
    responses={
        400: {"model": ErrorResponse, "description": "Malformed VIN"},
        404: {"model": ErrorResponse, "description": "Listing not found"},
    },
)
def get_price_history(
    vin: str,
    use_case: GetListingPriceHistory = Depends(get_listing_price_history_use_case),
) -> PriceHistoryResponseDTO:
    return ListingSearchMapper.to_price_history_response(use_case.execute(vin))
