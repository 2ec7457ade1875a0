"""Initial database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2025-05-02

Creates all initial tables for the campsite booking service:
- Users (accounts owned by the auth service)
- Campsites and equipment inventory
- Bookings and equipment attachments
- Admin notifications
"""

from typing import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all database tables."""

    # ==================== USERS ====================
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("public_id", sa.Uuid, nullable=False, unique=True, index=True),
        sa.Column("email", sa.String(255), unique=True, nullable=False, index=True),
        sa.Column("username", sa.String(100), unique=True, nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="USER"),
        sa.Column("is_active", sa.Boolean, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # ==================== INVENTORY ====================
    op.create_table(
        "campsites",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("public_id", sa.Uuid, nullable=False, unique=True, index=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("location", sa.String(255)),
        sa.Column("nightly_price", sa.Integer, nullable=False),
        sa.Column("daily_capacity", sa.Integer, nullable=False),
        sa.Column("is_active", sa.Boolean, server_default=sa.true(), index=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("daily_capacity > 0", name="ck_campsites_daily_capacity_positive"),
        sa.CheckConstraint("nightly_price >= 0", name="ck_campsites_nightly_price_non_negative"),
    )

    op.create_table(
        "equipment",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("public_id", sa.Uuid, nullable=False, unique=True, index=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("price", sa.Integer, nullable=False),
        sa.Column("stock", sa.Integer, nullable=False),
        sa.Column("is_active", sa.Boolean, server_default=sa.true(), index=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("stock >= 0", name="ck_equipment_stock_non_negative"),
        sa.CheckConstraint("price >= 0", name="ck_equipment_price_non_negative"),
    )

    # ==================== BOOKINGS ====================
    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("public_id", sa.Uuid, nullable=False, unique=True, index=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True),
        sa.Column("campsite_id", sa.Integer, sa.ForeignKey("campsites.id", ondelete="RESTRICT"), nullable=False, index=True),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=False),
        sa.Column("people_count", sa.Integer, nullable=False),
        sa.Column("total_price", sa.Integer, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING", index=True),
        sa.Column("payment_proof", sa.Text),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("end_date > start_date", name="ck_bookings_date_range"),
        sa.CheckConstraint("people_count > 0", name="ck_bookings_people_count_positive"),
        sa.CheckConstraint(
            "status IN ('PENDING', 'PAID', 'CHECK_IN', 'CHECK_OUT', 'CANCELLED')",
            name="ck_bookings_status",
        ),
    )
    op.create_index(
        "ix_bookings_campsite_status_dates",
        "bookings",
        ["campsite_id", "status", "start_date", "end_date"],
    )

    op.create_table(
        "booking_equipment",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("booking_id", sa.Integer, sa.ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("equipment_id", sa.Integer, sa.ForeignKey("equipment.id", ondelete="RESTRICT"), nullable=False, index=True),
        sa.Column("quantity", sa.Integer, nullable=False),
        sa.Column("nights", sa.Integer, nullable=False),
        sa.Column("price", sa.Integer, nullable=False),
        sa.CheckConstraint("quantity > 0", name="ck_booking_equipment_quantity_positive"),
        sa.CheckConstraint("nights > 0", name="ck_booking_equipment_nights_positive"),
    )

    # ==================== NOTIFICATIONS ====================
    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("type", sa.String(50), nullable=False, index=True),
        sa.Column("related_id", sa.Integer, sa.ForeignKey("bookings.id", ondelete="SET NULL"), index=True),
        sa.Column("is_read", sa.Boolean, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    """Drop all database tables in reverse order."""
    op.drop_table("notifications")
    op.drop_table("booking_equipment")
    op.drop_index("ix_bookings_campsite_status_dates", table_name="bookings")
    op.drop_table("bookings")
    op.drop_table("equipment")
    op.drop_table("campsites")
    op.drop_table("users")
