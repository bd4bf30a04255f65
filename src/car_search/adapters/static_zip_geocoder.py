from __future__ import annotations

import logging

from car_search.domain.geo import Coordinates, normalize_zip
from car_search.ports.geocoder import Geocoder

logger = logging.getLogger(__name__)


# Downtown reference points for major US metros
ZIP_COORDINATES: dict[str, Coordinates] = {
    "10001": Coordinates(lat=40.7506, lon=-73.9971),  # New York, NY
    "90001": Coordinates(lat=33.9731, lon=-118.2479),  # Los Angeles, CA
    "60601": Coordinates(lat=41.8859, lon=-87.6181),  # Chicago, IL
    "77001": Coordinates(lat=29.7589, lon=-95.3677),  # Houston, TX
    "85001": Coordinates(lat=33.4484, lon=-112.0741),  # Phoenix, AZ
    "19101": Coordinates(lat=39.9526, lon=-75.1652),  # Philadelphia, PA
    "78201": Coordinates(lat=29.4252, lon=-98.4946),  # San Antonio, TX
    "92101": Coordinates(lat=32.7157, lon=-117.1611),  # San Diego, CA
    "75201": Coordinates(lat=32.7767, lon=-96.7970),  # Dallas, TX
    "95101": Coordinates(lat=37.3382, lon=-121.8863),  # San Jose, CA
    "98101": Coordinates(lat=47.6062, lon=-122.3321),  # Seattle, WA
    "80201": Coordinates(lat=39.7392, lon=-104.9903),  # Denver, CO
    "20001": Coordinates(lat=38.9072, lon=-77.0369),  # Washington, DC
    "02101": Coordinates(lat=42.3601, lon=-71.0589),  # Boston, MA
    "33101": Coordinates(lat=25.7617, lon=-80.1918),  # Miami, FL
    "30301": Coordinates(lat=33.7490, lon=-84.3880),  # Atlanta, GA
    "48201": Coordinates(lat=42.3314, lon=-83.0458),  # Detroit, MI
    "55401": Coordinates(lat=44.9778, lon=-93.2650),  # Minneapolis, MN
    "63101": Coordinates(lat=38.6270, lon=-90.1994),  # St. Louis, MO
    "97201": Coordinates(lat=45.5152, lon=-122.6784),  # Portland, OR
}


class StaticZipGeocoder(Geocoder):
    """
    Geocoder backed by a fixed ZIP -> coordinates table.

    Accepts ZIP+4 and unpadded codes. Unknown codes resolve to None.
    """

    def __init__(self, table: dict[str, Coordinates] | None = None) -> None:
        self._table = ZIP_COORDINATES if table is None else table

    def resolve(self, zip_code: str) -> Coordinates | None:
        normalized = normalize_zip(zip_code)
        coordinates = self._table.get(normalized)
        if coordinates is None:
            logger.debug("ZIP code not in lookup table", extra={"zip_code": normalized})
        return coordinates
