"""Booking-related database models."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.database import Base
from app.domain.availability import nights_between
from app.domain.booking_state import BookingStatus

if TYPE_CHECKING:
    from app.models.campsite import Campsite, Equipment
    from app.models.user import User

STATUS_LITERALS = ", ".join(f"'{s.value}'" for s in BookingStatus)


class Booking(Base):
    """Campsite booking over the half-open date range [start_date, end_date)."""

    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("end_date > start_date", name="ck_bookings_date_range"),
        CheckConstraint("people_count > 0", name="ck_bookings_people_count_positive"),
        CheckConstraint(f"status IN ({STATUS_LITERALS})", name="ck_bookings_status"),
        Index("ix_bookings_campsite_status_dates", "campsite_id", "status", "start_date", "end_date"),
    )
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    public_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, unique=True, nullable=False, default=uuid.uuid4, index=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    campsite_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("campsites.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    # Dates (end exclusive)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)

    people_count: Mapped[int] = mapped_column(Integer, nullable=False)

    # Derived: nights x nightly_price x people_count + sum(equipment line prices)
    total_price: Mapped[int] = mapped_column(Integer, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=BookingStatus.PENDING.value, index=True
    )  # PENDING, PAID, CHECK_IN, CHECKOUT, CANCELLED

    # Reference returned by the upload service; admin verifies before PAID
    payment_proof: Mapped[str | None] = mapped_column(Text)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="bookings")
    campsite: Mapped["Campsite"] = relationship("Campsite", back_populates="bookings")
    equipment_items: Mapped[list["BookingEquipment"]] = relationship(
        "BookingEquipment",
        back_populates="booking",
        cascade="all, delete-orphan",
        order_by="BookingEquipment.id",
    )

    @property
    def nights(self) -> int:
        """Calculate number of nights."""
        return nights_between(self.start_date, self.end_date)


class BookingEquipment(Base):
    """Equipment rented with a booking for its first ``nights`` nights."""

    __tablename__ = "booking_equipment"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_booking_equipment_quantity_positive"),
        CheckConstraint("nights > 0", name="ck_booking_equipment_nights_positive"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    booking_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    equipment_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("equipment.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    nights: Mapped[int] = mapped_column(Integer, nullable=False)
    # Derived: equipment.price x quantity x nights
    price: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationships
    booking: Mapped["Booking"] = relationship("Booking", back_populates="equipment_items")
    equipment: Mapped["Equipment"] = relationship("Equipment", back_populates="attachments")
