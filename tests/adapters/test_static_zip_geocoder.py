"""Tests for StaticZipGeocoder."""

from __future__ import annotations

from car_search.adapters.static_zip_geocoder import ZIP_COORDINATES, StaticZipGeocoder
from car_search.domain.geo import Coordinates, is_valid_coordinates


def test_resolves_known_zip() -> None:
    assert StaticZipGeocoder().resolve("10001") == ZIP_COORDINATES["10001"]


def test_resolves_zip_plus_four() -> None:
    assert StaticZipGeocoder().resolve("98101-2345") == ZIP_COORDINATES["98101"]


def test_pads_short_zip() -> None:
    assert StaticZipGeocoder().resolve("2101") == ZIP_COORDINATES["02101"]


def test_unknown_zip_resolves_to_none() -> None:
    assert StaticZipGeocoder().resolve("99999") is None


def test_custom_table() -> None:
    geocoder = StaticZipGeocoder(table={"12345": Coordinates(lat=1.0, lon=2.0)})

    assert geocoder.resolve("12345") == Coordinates(lat=1.0, lon=2.0)
    assert geocoder.resolve("10001") is None


def test_builtin_table_has_valid_coordinates() -> None:
    assert len(ZIP_COORDINATES) == 20
    for coordinates in ZIP_COORDINATES.values():
        assert is_valid_coordinates(coordinates.lat, coordinates.lon)
