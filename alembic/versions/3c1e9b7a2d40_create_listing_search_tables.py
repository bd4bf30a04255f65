"""Create dealers, listings and listing_price_history

Revision ID: 3c1e9b7a2d40
Revises:
Create Date: 2026-10-19 09:12:31.402117

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "3c1e9b7a2d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "dealers",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("website", sa.Text(), nullable=True),
        sa.Column("address", sa.String(length=200), nullable=True),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("state", sa.String(length=2), nullable=True),
        sa.Column("zip_code", sa.String(length=10), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("dealer_type", sa.String(length=20), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    )

    op.create_table(
        "listings",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("vin", sa.String(length=17), nullable=False, unique=True),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("make", sa.String(length=50), nullable=False),
        sa.Column("model", sa.String(length=50), nullable=False),
        sa.Column("trim", sa.String(length=100), nullable=True),
        sa.Column("body_type", sa.String(length=30), nullable=True),
        sa.Column("drivetrain", sa.String(length=10), nullable=True),
        sa.Column("transmission", sa.String(length=20), nullable=True),
        sa.Column("fuel_type", sa.String(length=20), nullable=True),
        sa.Column("exterior_color", sa.String(length=50), nullable=True),
        sa.Column("interior_color", sa.String(length=50), nullable=True),
        sa.Column("price", sa.Integer(), nullable=True),
        sa.Column("base_msrp", sa.Integer(), nullable=True),
        sa.Column("combined_msrp", sa.Integer(), nullable=True),
        sa.Column("miles", sa.Integer(), nullable=True),
        sa.Column("condition", sa.String(length=20), nullable=True),
        sa.Column("is_certified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_sold", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("first_seen_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_seen_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("source", sa.String(length=50), nullable=False),
        sa.Column("source_url", sa.Text(), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("dealer_id", sa.String(length=36), sa.ForeignKey("dealers.id"), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    )
    op.create_index("ix_listings_make_model", "listings", ["make", "model"])
    op.create_index("ix_listings_active_price", "listings", ["is_active", "price"])
    op.create_index("ix_listings_year", "listings", ["year"])
    op.create_index("ix_listings_miles", "listings", ["miles"])
    op.create_index("ix_listings_first_seen_at", "listings", ["first_seen_at"])
    op.create_index("ix_listings_dealer_id", "listings", ["dealer_id"])

    op.create_table(
        "listing_price_history",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "listing_id", sa.String(length=36), sa.ForeignKey("listings.id"), nullable=False
        ),
        sa.Column("vin", sa.String(length=17), nullable=False),
        sa.Column("price", sa.Integer(), nullable=True),
        sa.Column("miles", sa.Integer(), nullable=True),
        sa.Column("source", sa.String(length=50), nullable=True),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_listing_price_history_vin", "listing_price_history", ["vin"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_listing_price_history_vin", table_name="listing_price_history")
    op.drop_table("listing_price_history")

    for index in (
        "ix_listings_dealer_id",
        "ix_listings_first_seen_at",
        "ix_listings_miles",
        "ix_listings_year",
        "ix_listings_active_price",
        "ix_listings_make_model",
    ):
        op.drop_index(index, table_name="listings")
    op.drop_table("listings")

    op.drop_table("dealers")
