"""Booking-related Pydantic schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.domain.availability import DayUsage
from app.models.booking import Booking, BookingEquipment
from app.models.campsite import Campsite, Equipment
from app.utils.dates import UtcDate

# ==================== INVENTORY ====================


class CampsiteResponse(BaseModel):
    """Schema for campsite response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None
    location: str | None
    nightly_price: int
    daily_capacity: int

    @classmethod
    def from_model(cls, campsite: Campsite) -> "CampsiteResponse":
        return cls(
            id=campsite.public_id,
            name=campsite.name,
            description=campsite.description,
            location=campsite.location,
            nightly_price=campsite.nightly_price,
            daily_capacity=campsite.daily_capacity,
        )


class DayAvailability(BaseModel):
    """Usage of one resource on one calendar day."""

    date: date
    used: int
    remaining: int

    @classmethod
    def from_usage(cls, usage: DayUsage) -> "DayAvailability":
        return cls(date=usage.day, used=usage.used, remaining=usage.remaining)


class CampsiteAvailabilityResponse(BaseModel):
    """Per-day campsite usage over [start_date, end_date)."""

    campsite_id: UUID
    start_date: date
    end_date: date
    daily_capacity: int
    # People that still fit on every night of the range
    available_capacity: int
    days: list[DayAvailability]


class EquipmentResponse(BaseModel):
    """Schema for equipment listing with availability."""

    id: UUID
    name: str
    description: str | None
    price: int
    stock: int
    available_stock: int

    @classmethod
    def from_model(cls, equipment: Equipment, available_stock: int) -> "EquipmentResponse":
        return cls(
            id=equipment.public_id,
            name=equipment.name,
            description=equipment.description,
            price=equipment.price,
            stock=equipment.stock,
            available_stock=available_stock,
        )


class EquipmentAvailabilityResponse(BaseModel):
    """Per-day equipment usage over [start_date, end_date)."""

    equipment_id: UUID
    start_date: date
    end_date: date
    stock: int
    days: list[DayAvailability]


# ==================== BOOKING REQUESTS ====================


class EquipmentItem(BaseModel):
    """One equipment line of a booking request."""

    equipment_id: UUID
    quantity: int = Field(..., gt=0)
    # Defaults to the whole stay
    nights: int | None = Field(None, gt=0)


class BookingCreate(BaseModel):
    """Schema for creating a booking."""

    campsite_id: UUID
    start_date: UtcDate
    end_date: UtcDate
    people_count: int = Field(..., gt=0)
    equipment: list[EquipmentItem] = Field(default_factory=list)


class BookingEquipmentUpdate(BaseModel):
    """Replacement set of equipment lines for a booking."""

    equipment: list[EquipmentItem] = Field(default_factory=list)


class PaymentProofCreate(BaseModel):
    """Reference to an uploaded payment proof."""

    reference: str = Field(..., min_length=1, max_length=2048)


class BookingStatusUpdate(BaseModel):
    """Admin status change. ``CHECK_OUT`` is accepted as an alias of ``CHECKOUT``."""

    status: str = Field(..., min_length=1, max_length=20)


# ==================== BOOKING RESPONSES ====================


class BookingEquipmentResponse(BaseModel):
    """Schema for an equipment attachment."""

    equipment_id: UUID
    name: str
    quantity: int
    nights: int
    price: int

    @classmethod
    def from_model(cls, item: BookingEquipment) -> "BookingEquipmentResponse":
        return cls(
            equipment_id=item.equipment.public_id,
            name=item.equipment.name,
            quantity=item.quantity,
            nights=item.nights,
            price=item.price,
        )


class BookingResponse(BaseModel):
    """Schema for booking response."""

    id: UUID
    user_id: UUID
    campsite_id: UUID
    campsite_name: str

    # Dates (end exclusive)
    start_date: date
    end_date: date
    nights: int

    people_count: int
    total_price: int
    status: str
    payment_proof: str | None

    equipment: list[BookingEquipmentResponse]

    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_model(cls, booking: Booking) -> "BookingResponse":
        return cls(
            id=booking.public_id,
            user_id=booking.user.public_id,
            campsite_id=booking.campsite.public_id,
            campsite_name=booking.campsite.name,
            start_date=booking.start_date,
            end_date=booking.end_date,
            nights=booking.nights,
            people_count=booking.people_count,
            total_price=booking.total_price,
            status=booking.status,
            payment_proof=booking.payment_proof,
            equipment=[BookingEquipmentResponse.from_model(item) for item in booking.equipment_items],
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )


class BookingListResponse(BaseModel):
    """Schema for booking list."""

    bookings: list[BookingResponse]
    total: int
