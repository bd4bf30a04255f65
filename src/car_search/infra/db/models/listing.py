from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from car_search.infra.db.models.base import Base
from car_search.infra.db.models.dealer import DealerRow


class ListingRow(Base):
    __tablename__ = "listings"
    __table_args__ = (
        Index("ix_listings_make_model", "make", "model"),
        Index("ix_listings_active_price", "is_active", "price"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    vin: Mapped[str] = mapped_column(String(17), nullable=False, unique=True)

    year: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    make: Mapped[str] = mapped_column(String(50), nullable=False)
    model: Mapped[str] = mapped_column(String(50), nullable=False)
    trim: Mapped[str | None] = mapped_column(String(100), nullable=True)
    body_type: Mapped[str | None] = mapped_column(String(30), nullable=True)

    drivetrain: Mapped[str | None] = mapped_column(String(10), nullable=True)
    transmission: Mapped[str | None] = mapped_column(String(20), nullable=True)
    fuel_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    exterior_color: Mapped[str | None] = mapped_column(String(50), nullable=True)
    interior_color: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Whole dollars
    price: Mapped[int | None] = mapped_column(Integer, nullable=True)
    base_msrp: Mapped[int | None] = mapped_column(Integer, nullable=True)
    combined_msrp: Mapped[int | None] = mapped_column(Integer, nullable=True)

    miles: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    condition: Mapped[str | None] = mapped_column(String(20), nullable=True)  # new, used, certified
    is_certified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_sold: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    first_seen_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    last_seen_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    source: Mapped[str] = mapped_column(String(50), nullable=False)  # cars.com, autotrader, ...
    source_url: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    dealer_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("dealers.id"), nullable=True, index=True
    )
    dealer: Mapped[DealerRow | None] = relationship()

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
