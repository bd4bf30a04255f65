from __future__ import annotations

from abc import ABC, abstractmethod

from car_search.domain.geo import Coordinates


class Geocoder(ABC):
    """
    Port for postal-code resolution.

    ``resolve`` never raises for an unknown code; it returns None and the caller
    searches without a geographic constraint.
    """

    @abstractmethod
    def resolve(self, zip_code: str) -> Coordinates | None: ...
