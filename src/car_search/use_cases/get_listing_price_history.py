"""Get listing price history use case."""

from __future__ import annotations

from dataclasses import dataclass

from car_search.domain.errors import NotFoundError
from car_search.domain.listing import PriceHistoryEntry
from car_search.ports.listing_store import ListingStore
from car_search.use_cases.get_listing_by_vin import normalize_vin


@dataclass(frozen=True, slots=True)
class GetListingPriceHistoryResponse:
    vin: str
    entries: list[PriceHistoryEntry]


class GetListingPriceHistory:
    def __init__(self, listing_store: ListingStore) -> None:
        self._store = listing_store

    def execute(self, vin: str) -> GetListingPriceHistoryResponse:
        """
        Price observations for a VIN, newest first.

        Raises:
            ValidationError: If the VIN is malformed
            NotFoundError: If no listing has this VIN
        """
        vin = normalize_vin(vin)
        if self._store.get_by_vin(vin) is None:
            raise NotFoundError(resource="Listing", identifier=vin)

        return GetListingPriceHistoryResponse(vin=vin, entries=self._store.price_history(vin))
