"""Get listing by VIN use case."""

from __future__ import annotations

from dataclasses import dataclass

from car_search.domain.errors import NotFoundError, ValidationError
from car_search.domain.listing import Listing
from car_search.ports.listing_store import ListingStore

VIN_LENGTH = 17


def normalize_vin(vin: str) -> str:
    """
    Upper-case and validate a VIN.

    Raises:
        ValidationError: If the VIN is not 17 alphanumeric characters
    """
    value = vin.strip().upper()
    if len(value) != VIN_LENGTH or not (value.isascii() and value.isalnum()):
        raise ValidationError(
            errors=[
                {
                    "field": "vin",
                    "message": f"Must be {VIN_LENGTH} alphanumeric characters",
                    "code": "INVALID_VIN",
                }
            ]
        )
    return value


@dataclass(frozen=True, slots=True)
class GetListingByVinRequest:
    vin: str


@dataclass(frozen=True, slots=True)
class GetListingByVinResponse:
    listing: Listing


class GetListingByVin:
    """
    Use case for retrieving a single listing by VIN.

    Inactive and sold listings are returned too; detail pages stay reachable
    after a vehicle leaves the search index.
    """

    def __init__(self, listing_store: ListingStore) -> None:
        self._store = listing_store

    def execute(self, request: GetListingByVinRequest) -> GetListingByVinResponse:
        """
        Raises:
            ValidationError: If the VIN is malformed
            NotFoundError: If no listing has this VIN
        """
        vin = normalize_vin(request.vin)

        listing = self._store.get_by_vin(vin)
        if listing is None:
            raise NotFoundError(resource="Listing", identifier=vin)

        return GetListingByVinResponse(listing=listing)
