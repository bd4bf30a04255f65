from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from car_search.infra.db.models.base import Base


class PriceHistoryRow(Base):
    """One row appended per observed price change of a listing."""

    __tablename__ = "listing_price_history"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    listing_id: Mapped[str] = mapped_column(String(36), ForeignKey("listings.id"), nullable=False)
    vin: Mapped[str] = mapped_column(String(17), nullable=False, index=True)

    price: Mapped[int | None] = mapped_column(Integer, nullable=True)
    miles: Mapped[int | None] = mapped_column(Integer, nullable=True)
    source: Mapped[str | None] = mapped_column(String(50), nullable=True)

    recorded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
