"""Campsite and equipment inventory models."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.database import Base

if TYPE_CHECKING:
    from app.models.booking import Booking, BookingEquipment


class Campsite(Base):
    """Campsite with a single per-day people cap."""

    __tablename__ = "campsites"
    __table_args__ = (
        CheckConstraint("daily_capacity > 0", name="ck_campsites_daily_capacity_positive"),
        CheckConstraint("nightly_price >= 0", name="ck_campsites_nightly_price_non_negative"),
    )
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    public_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, unique=True, nullable=False, default=uuid.uuid4, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    location: Mapped[str | None] = mapped_column(String(255))

    # Pricing (smallest currency unit, per person per night)
    nightly_price: Mapped[int] = mapped_column(Integer, nullable=False)
    # Max people per calendar day, same for every day
    daily_capacity: Mapped[int] = mapped_column(Integer, nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    bookings: Mapped[list["Booking"]] = relationship("Booking", back_populates="campsite")


class Equipment(Base):
    """Rentable equipment item with a finite stock."""

    __tablename__ = "equipment"
    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_equipment_stock_non_negative"),
        CheckConstraint("price >= 0", name="ck_equipment_price_non_negative"),
    )
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    public_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, unique=True, nullable=False, default=uuid.uuid4, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    # Per unit per night
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    # Max units rented out on any single day
    stock: Mapped[int] = mapped_column(Integer, nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    attachments: Mapped[list["BookingEquipment"]] = relationship(
        "BookingEquipment", back_populates="equipment"
    )
