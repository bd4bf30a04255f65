from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

from car_search.domain.errors import FilterValidationError, PagingValidationError


DEFAULT_PER_PAGE = 25
MAX_PER_PAGE = 100

SORT_FIELDS = ("price", "miles", "year", "days_on_lot", "distance")
SORT_ORDERS = ("asc", "desc")

# Multi-valued dimensions: OR within a dimension, AND across dimensions
MULTI_VALUE_FIELDS = (
    "make",
    "model",
    "trim",
    "condition",
    "exterior_color",
    "interior_color",
    "drivetrain",
    "transmission",
    "fuel_type",
    "dealer_type",
)


@dataclass(frozen=True, slots=True)
class SearchFilters:
    """One search request's filter state.

    ``None`` on any dimension means "no constraint on that dimension". Multi-valued
    dimensions are tuples so the value is hashable and cannot be mutated after the
    request boundary built it.
    """

    make: tuple[str, ...] | None = None
    model: tuple[str, ...] | None = None
    trim: tuple[str, ...] | None = None
    year_min: int | None = None
    year_max: int | None = None
    price_min: float | None = None
    price_max: float | None = None
    miles_min: float | None = None
    miles_max: float | None = None
    condition: tuple[str, ...] | None = None
    is_certified: bool | None = None
    exterior_color: tuple[str, ...] | None = None
    interior_color: tuple[str, ...] | None = None
    drivetrain: tuple[str, ...] | None = None
    transmission: tuple[str, ...] | None = None
    fuel_type: tuple[str, ...] | None = None
    dealer_type: tuple[str, ...] | None = None
    zip_code: str | None = None
    radius: float | None = None

    def validate(self) -> None:
        """
        Validate filter parameters.

        Raises:
            FilterValidationError: If any range is inverted or a bound is negative
        """
        errors: list[dict[str, str]] = []

        for low_name, high_name in (
            ("year_min", "year_max"),
            ("price_min", "price_max"),
            ("miles_min", "miles_max"),
        ):
            low = getattr(self, low_name)
            high = getattr(self, high_name)
            if low is not None and high is not None and low > high:
                errors.append(
                    {
                        "field": low_name,
                        "message": f"Must be less than or equal to {high_name}",
                        "code": "INVALID_RANGE",
                    }
                )

        for name in ("price_min", "price_max", "miles_min", "miles_max"):
            value = getattr(self, name)
            if value is not None and value < 0:
                errors.append(
                    {"field": name, "message": "Must be >= 0", "code": "INVALID_VALUE"}
                )

        if self.radius is not None and self.radius <= 0:
            errors.append({"field": "radius", "message": "Must be > 0", "code": "INVALID_VALUE"})

        if errors:
            raise FilterValidationError(errors=errors)

    @property
    def has_geo_filter(self) -> bool:
        return self.zip_code is not None and self.radius is not None

    def canonical(self) -> dict[str, Any]:
        """
        Deterministic plain-dict form of the active filters.

        Unset dimensions are omitted and multi-valued dimensions are de-duplicated
        and sorted, so two logically identical filter sets produce equal dicts.
        """
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, tuple):
                value = sorted(set(value))
            result[f.name] = value
        return result

    def active_count(self) -> int:
        """Number of filter dimensions that constrain the result set."""
        count = sum(1 for name in MULTI_VALUE_FIELDS if getattr(self, name))
        for low, high in (
            ("year_min", "year_max"),
            ("price_min", "price_max"),
            ("miles_min", "miles_max"),
        ):
            if getattr(self, low) is not None or getattr(self, high) is not None:
                count += 1
        if self.is_certified is not None:
            count += 1
        if self.zip_code:
            count += 1
        return count

    def describe(self) -> str:
        """Short human-readable summary, e.g. ``make=Toyota; price<=30000``."""
        parts: list[str] = []
        for name in MULTI_VALUE_FIELDS:
            values = getattr(self, name)
            if values:
                parts.append(f"{name}={','.join(values)}")
        for label, low, high in (
            ("year", self.year_min, self.year_max),
            ("price", self.price_min, self.price_max),
            ("miles", self.miles_min, self.miles_max),
        ):
            if low is not None and high is not None:
                parts.append(f"{low}<={label}<={high}")
            elif low is not None:
                parts.append(f"{label}>={low}")
            elif high is not None:
                parts.append(f"{label}<={high}")
        if self.is_certified is not None:
            parts.append(f"is_certified={str(self.is_certified).lower()}")
        if self.zip_code:
            parts.append(f"within {self.radius} mi of {self.zip_code}")
        return "; ".join(parts) if parts else "all listings"


@dataclass(frozen=True, slots=True)
class SortSpec:
    field: str = "price"
    order: str = "asc"

    def validate(self) -> None:
        if self.field not in SORT_FIELDS:
            raise FilterValidationError(
                errors=[
                    {
                        "field": "sort_by",
                        "message": f"Must be one of {list(SORT_FIELDS)}",
                        "code": "INVALID_VALUE",
                    }
                ]
            )
        if self.order not in SORT_ORDERS:
            raise FilterValidationError(
                errors=[
                    {
                        "field": "sort_order",
                        "message": f"Must be one of {list(SORT_ORDERS)}",
                        "code": "INVALID_VALUE",
                    }
                ]
            )

    @property
    def descending(self) -> bool:
        return self.order == "desc"

    def store_order(self) -> tuple[str, bool]:
        """
        (listing column, descending) the store should order by.

        ``days_on_lot`` grows as ``first_seen_at`` shrinks, so its direction flips.
        ``distance`` cannot be computed by the store; rows arrive price-ordered and
        are re-sorted after the radius filter.
        """
        if self.field == "days_on_lot":
            return "first_seen_at", not self.descending
        if self.field == "distance":
            return "price", self.descending
        return self.field, self.descending


@dataclass(frozen=True, slots=True)
class Paging:
    page: int = 1
    per_page: int = DEFAULT_PER_PAGE

    def validate(self) -> None:
        """
        Validate paging parameters.

        Raises:
            PagingValidationError: If paging parameters are invalid
        """
        if self.page < 1:
            raise PagingValidationError("page must be >= 1")
        if self.per_page <= 0:
            raise PagingValidationError("per_page must be > 0")
        if self.per_page > MAX_PER_PAGE:
            raise PagingValidationError(f"per_page must be <= {MAX_PER_PAGE}")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page
