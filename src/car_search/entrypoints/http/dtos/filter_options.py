from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from car_search.entrypoints.http.dtos.listing_search import FacetValueDTO


class ValueRangeDTO(BaseModel):
    min: float | None = None
    max: float | None = None


class FilterOptionsDTO(BaseModel):
    makes: list[FacetValueDTO]
    conditions: list[FacetValueDTO]
    drivetrains: list[FacetValueDTO]
    transmissions: list[FacetValueDTO]
    fuel_types: list[FacetValueDTO]
    dealer_types: list[FacetValueDTO]
    ranges: dict[str, ValueRangeDTO]


class FilterOptionsResponseDTO(BaseModel):
    success: bool = True
    data: FilterOptionsDTO
    source: Literal["cache", "database"]


class CacheInvalidationResponseDTO(BaseModel):
    success: bool = True
    message: str
