from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat

from car_search.domain.filters import DEFAULT_PER_PAGE, MAX_PER_PAGE


class DealerResponseDTO(BaseModel):
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


class ListingResponseDTO(BaseModel):
    id: str
    vin: str
    year: int
    make: str
    model: str
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
    is_certified: bool
    is_active: bool
    is_sold: bool
    image_url: str | None = None
    source: str
    source_url: str
    first_seen_at: datetime
    last_seen_at: datetime
    days_on_lot: int
    dealer: DealerResponseDTO | None = None
    distance: int | None = Field(
        default=None,
        description="Miles from the search ZIP code (only for geographic searches)",
    )


class ListingSearchQueryDTO(BaseModel):
    """
    Query parameters for listing search.

    Multi-value filters are comma-separated (``make=Toyota,Honda``). Unknown
    enumeration values and malformed booleans are ignored rather than rejected.
    """

    make: str | None = Field(default=None, examples=["Toyota,Honda"])
    model: str | None = Field(default=None, examples=["Camry,Accord"])
    trim: str | None = Field(default=None, examples=["XLE"])
    year_min: int | None = Field(default=None, examples=[2019])
    year_max: int | None = Field(default=None, examples=[2023])
    price_min: FiniteFloat | None = Field(default=None, examples=[15000])
    price_max: FiniteFloat | None = Field(default=None, examples=[30000])
    miles_min: FiniteFloat | None = Field(default=None, examples=[0])
    miles_max: FiniteFloat | None = Field(default=None, examples=[50000])
    condition: str | None = Field(
        default=None, description="Any of new, used, certified", examples=["used,certified"]
    )
    is_certified: str | None = Field(
        default=None, description="'true' or 'false'; anything else is ignored"
    )
    exterior_color: str | None = Field(default=None, examples=["White,Black"])
    interior_color: str | None = Field(default=None, examples=["Black"])
    drivetrain: str | None = Field(
        default=None, description="Any of fwd, rwd, awd, 4wd", examples=["awd,4wd"]
    )
    transmission: str | None = Field(
        default=None, description="Any of automatic, manual", examples=["automatic"]
    )
    fuel_type: str | None = Field(
        default=None, description="Any of gas, diesel, hybrid, electric", examples=["hybrid"]
    )
    dealer_type: str | None = Field(
        default=None, description="Any of franchise, independent", examples=["franchise"]
    )
    zip_code: str | None = Field(default=None, examples=["94103"])
    radius: FiniteFloat | None = Field(
        default=None,
        description="Search radius in miles (defaults to 100 when zip_code is set)",
        examples=[50],
    )
    page: int = Field(default=1, ge=1, examples=[1])
    per_page: int = Field(default=DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE, examples=[25])
    sort_by: Literal["price", "miles", "year", "days_on_lot", "distance"] = "price"
    sort_order: Literal["asc", "desc"] = "asc"
    include_facets: str | None = Field(default=None, description="'false' to skip facets")
    include_stats: str | None = Field(default=None, description="'false' to skip stats")
    include_buckets: str | None = Field(default=None, description="'false' to skip buckets")


class PageMetaDTO(BaseModel):
    page: int
    per_page: int
    total: int
    total_pages: int


class FacetValueDTO(BaseModel):
    value: str | int
    count: int


class NumericStatsDTO(BaseModel):
    min: float
    max: float
    avg: float
    median: float


class YearStatsDTO(BaseModel):
    min: int
    max: int


class SearchStatsDTO(BaseModel):
    price: NumericStatsDTO
    miles: NumericStatsDTO
    year: YearStatsDTO


class BucketDTO(BaseModel):
    label: str
    count: int
    min: int | None = None
    max: int | None = None


class SearchBucketsDTO(BaseModel):
    price: list[BucketDTO]
    miles: list[BucketDTO]
    year: list[BucketDTO]


class PerformanceDTO(BaseModel):
    query_time_ms: float
    cached_facets: bool


class ListingSearchResponseDTO(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "data": [],
                "meta": {"page": 1, "per_page": 25, "total": 0, "total_pages": 0},
                "facets": {"make": [{"value": "Toyota", "count": 12}]},
                "performance": {"query_time_ms": 18.4, "cached_facets": False},
            }
        }
    )

    success: bool = True
    data: list[ListingResponseDTO]
    meta: PageMetaDTO
    facets: dict[str, list[FacetValueDTO]] | None = None
    stats: SearchStatsDTO | None = None
    buckets: SearchBucketsDTO | None = None
    performance: PerformanceDTO


class ListingDetailResponseDTO(BaseModel):
    success: bool = True
    data: ListingResponseDTO


class PriceHistoryEntryDTO(BaseModel):
    price: int | None = None
    miles: int | None = None
    source: str | None = None
    recorded_at: datetime


class PriceHistoryResponseDTO(BaseModel):
    success: bool = True
    vin: str
    data: list[PriceHistoryEntryDTO]
