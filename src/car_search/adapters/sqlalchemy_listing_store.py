"""SQLAlchemy implementation of ListingStore."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from sqlalchemy import func, select
from sqlalchemy.orm import Session, contains_eager, joinedload

from car_search.domain.aggregations import FacetDimension, sort_facet_values
from car_search.domain.filters import SortSpec
from car_search.domain.listing import Dealer, Listing, PriceHistoryEntry
from car_search.domain.predicates import (
    DEALER_FIELDS,
    AtLeast,
    AtMost,
    Equals,
    OneOf,
    Predicate,
)
from car_search.domain.results import FacetValue
from car_search.infra.db.models import DealerRow, ListingRow, PriceHistoryRow
from car_search.ports.listing_store import ColumnSummary, ListingStore

if TYPE_CHECKING:
    from sqlalchemy.sql import ColumnElement, Select


class SqlAlchemyListingStore(ListingStore):
    """
    SQLAlchemy implementation of ListingStore.

    - Every query LEFT JOINs dealers, so dealer-type predicates can be applied
      uniformly and listings without a dealer survive when no dealer filter is set
    - Each call opens its own short-lived session from the factory, which makes
      the store safe to share between the search engine's worker threads
    - Converts ListingRow/DealerRow (infrastructure) to Listing/Dealer (domain)
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        """
        Initialize store with a session factory.

        Args:
            session_factory: Zero-argument callable returning a new Session
                (normally a ``sessionmaker``)
        """
        self._session_factory = session_factory

    def fetch_page(
        self,
        predicates: tuple[Predicate, ...],
        sort: SortSpec,
        limit: int | None,
        offset: int = 0,
    ) -> list[Listing]:
        column_name, descending = sort.store_order()
        column = getattr(ListingRow, column_name)

        query = (
            self._joined(select(ListingRow))
            .options(contains_eager(ListingRow.dealer))
            .where(*self._compile(predicates))
            # NULLs last in both directions, then id for a stable page boundary
            .order_by(
                column.is_(None),
                column.desc() if descending else column.asc(),
                ListingRow.id.asc(),
            )
            .offset(offset)
        )
        if limit is not None:
            query = query.limit(limit)

        with self._session_factory() as session:
            rows = session.execute(query).scalars().unique().all()
            return [self._to_domain(row) for row in rows]

    def count(self, predicates: tuple[Predicate, ...]) -> int:
        query = self._joined(select(func.count()).select_from(ListingRow)).where(
            *self._compile(predicates)
        )

        with self._session_factory() as session:
            return session.execute(query).scalar() or 0

    def facet(
        self, predicates: tuple[Predicate, ...], dimension: FacetDimension
    ) -> list[FacetValue]:
        column = self._column(dimension.name)
        count = func.count().label("count")

        query = (
            self._joined(select(column.label("value"), count).select_from(ListingRow))
            .where(*self._compile(predicates), column.is_not(None))
            .group_by(column)
            .order_by(count.desc(), column.asc())
        )
        if dimension.limit is not None:
            query = query.limit(dimension.limit)

        with self._session_factory() as session:
            rows = session.execute(query).all()

        return sort_facet_values(((row.value, row.count) for row in rows), dimension.limit)

    def summarize(self, predicates: tuple[Predicate, ...], column: str) -> ColumnSummary:
        target = self._column(column)
        query = self._joined(
            select(func.min(target), func.max(target), func.avg(target)).select_from(ListingRow)
        ).where(*self._compile(predicates), target.is_not(None))

        with self._session_factory() as session:
            low, high, avg = session.execute(query).one()

        return ColumnSummary(
            min=low,
            max=high,
            avg=float(avg) if avg is not None else None,  # Postgres AVG returns NUMERIC
        )

    def column_values(self, predicates: tuple[Predicate, ...], column: str) -> list[float]:
        target = self._column(column)
        query = (
            self._joined(select(target).select_from(ListingRow))
            .where(*self._compile(predicates), target.is_not(None))
            .order_by(target.asc())
        )

        with self._session_factory() as session:
            return list(session.execute(query).scalars().all())

    def get_by_vin(self, vin: str) -> Listing | None:
        query = (
            select(ListingRow).options(joinedload(ListingRow.dealer)).where(ListingRow.vin == vin)
        )

        with self._session_factory() as session:
            row = session.execute(query).scalar_one_or_none()
            return self._to_domain(row) if row else None

    def price_history(self, vin: str) -> list[PriceHistoryEntry]:
        query = (
            select(PriceHistoryRow)
            .where(PriceHistoryRow.vin == vin)
            .order_by(PriceHistoryRow.recorded_at.desc())
        )

        with self._session_factory() as session:
            rows = session.execute(query).scalars().all()

        return [
            PriceHistoryEntry(
                vin=row.vin,
                price=row.price,
                miles=row.miles,
                source=row.source,
                recorded_at=row.recorded_at,
            )
            for row in rows
        ]

    # ==========================================================================
    # Query building
    # ==========================================================================

    @staticmethod
    def _joined(query: Select[Any]) -> Select[Any]:
        return query.outerjoin(DealerRow, ListingRow.dealer_id == DealerRow.id)

    @staticmethod
    def _column(field: str) -> Any:
        if field in DEALER_FIELDS:
            return getattr(DealerRow, field)
        return getattr(ListingRow, field)

    @classmethod
    def _compile(cls, predicates: tuple[Predicate, ...]) -> list[ColumnElement[bool]]:
        """
        Compile domain predicates into WHERE clauses.

        Args:
            predicates: Predicate tuple from the query builder

        Returns:
            One SQL boolean expression per predicate, in the same order
        """
        clauses: list[ColumnElement[bool]] = []
        for predicate in predicates:
            column = cls._column(predicate.field)
            if isinstance(predicate, Equals):
                clauses.append(column == predicate.value)
            elif isinstance(predicate, OneOf):
                clauses.append(column.in_(predicate.values))
            elif isinstance(predicate, AtLeast):
                clauses.append(column >= predicate.bound)
            elif isinstance(predicate, AtMost):
                clauses.append(column <= predicate.bound)
            else:
                raise TypeError(f"Unsupported predicate: {predicate!r}")
        return clauses

    # ==========================================================================
    # Row conversion
    # ==========================================================================

    @staticmethod
    def _dealer_to_domain(row: DealerRow) -> Dealer:
        return Dealer(
            id=row.id,
            name=row.name,
            dealer_type=row.dealer_type,
            address=row.address,
            city=row.city,
            state=row.state,
            zip_code=row.zip_code,
            latitude=row.latitude,
            longitude=row.longitude,
            website=row.website,
        )

    def _to_domain(self, row: ListingRow) -> Listing:
        """
        Convert database model (ListingRow) to domain entity (Listing).

        Args:
            row: SQLAlchemy ListingRow with its dealer loaded

        Returns:
            Listing domain entity
        """
        return Listing(
            id=row.id,
            vin=row.vin,
            year=row.year,
            make=row.make,
            model=row.model,
            trim=row.trim,
            body_type=row.body_type,
            drivetrain=row.drivetrain,
            transmission=row.transmission,
            fuel_type=row.fuel_type,
            exterior_color=row.exterior_color,
            interior_color=row.interior_color,
            price=row.price,
            base_msrp=row.base_msrp,
            combined_msrp=row.combined_msrp,
            miles=row.miles,
            condition=row.condition,
            is_certified=bool(row.is_certified),
            is_active=bool(row.is_active),
            is_sold=bool(row.is_sold),
            first_seen_at=row.first_seen_at,
            last_seen_at=row.last_seen_at,
            source=row.source,
            source_url=row.source_url,
            image_url=row.image_url,
            dealer_id=row.dealer_id,
            dealer=self._dealer_to_domain(row.dealer) if row.dealer is not None else None,
        )
