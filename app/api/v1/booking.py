"""Booking endpoints: catalogue, availability and the user's bookings."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_availability_service, get_booking_ledger, get_current_user, get_db
from app.core.exceptions import ValidationError
from app.models.campsite import Campsite
from app.models.user import User
from app.schemas.booking import (
    BookingCreate,
    BookingEquipmentUpdate,
    BookingListResponse,
    BookingResponse,
    CampsiteAvailabilityResponse,
    CampsiteResponse,
    DayAvailability,
    EquipmentAvailabilityResponse,
    EquipmentResponse,
    PaymentProofCreate,
)
from app.services.availability_service import AvailabilityService
from app.services.booking_service import BookingLedger, EquipmentRequest
from app.utils.dates import UtcDate

router = APIRouter()


# ==================== CATALOGUE ====================


@router.get("/camps", response_model=list[CampsiteResponse])
async def list_campsites(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[CampsiteResponse]:
    """List active campsites."""
    result = await db.execute(
        select(Campsite).where(Campsite.is_active.is_(True)).order_by(Campsite.id)
    )
    return [CampsiteResponse.from_model(campsite) for campsite in result.scalars().all()]


@router.get("/camps/{campsite_id}/availability", response_model=CampsiteAvailabilityResponse)
async def get_campsite_availability(
    campsite_id: UUID,
    start_date: Annotated[UtcDate, Query()],
    end_date: Annotated[UtcDate, Query()],
    availability: Annotated[AvailabilityService, Depends(get_availability_service)],
) -> CampsiteAvailabilityResponse:
    """Per-day used and remaining people for a campsite."""
    campsite = await availability.get_campsite(campsite_id)
    usage = await availability.campsite_usage(campsite, start_date, end_date)
    return CampsiteAvailabilityResponse(
        campsite_id=campsite.public_id,
        start_date=start_date,
        end_date=end_date,
        daily_capacity=campsite.daily_capacity,
        available_capacity=max(0, min(day.remaining for day in usage)),
        days=[DayAvailability.from_usage(day) for day in usage],
    )


@router.get("/equipment", response_model=list[EquipmentResponse])
async def list_equipment(
    availability: Annotated[AvailabilityService, Depends(get_availability_service)],
    start_date: Annotated[UtcDate | None, Query()] = None,
    end_date: Annotated[UtcDate | None, Query()] = None,
) -> list[EquipmentResponse]:
    """List active equipment with the stock free on the busiest day of the range."""
    if (start_date is None) != (end_date is None):
        raise ValidationError("start_date and end_date must be given together")
    overview = await availability.equipment_overview(start_date, end_date)
    return [EquipmentResponse.from_model(equipment, available) for equipment, available in overview]


@router.get("/equipment/{equipment_id}/availability", response_model=EquipmentAvailabilityResponse)
async def get_equipment_availability(
    equipment_id: UUID,
    start_date: Annotated[UtcDate, Query()],
    end_date: Annotated[UtcDate, Query()],
    availability: Annotated[AvailabilityService, Depends(get_availability_service)],
) -> EquipmentAvailabilityResponse:
    """Per-day used and remaining units for an equipment item."""
    equipment = await availability.get_equipment(equipment_id)
    usage = await availability.equipment_usage(equipment, start_date, end_date)
    return EquipmentAvailabilityResponse(
        equipment_id=equipment.public_id,
        start_date=start_date,
        end_date=end_date,
        stock=equipment.stock,
        days=[DayAvailability.from_usage(day) for day in usage],
    )


# ==================== BOOKINGS ====================


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    ledger: Annotated[BookingLedger, Depends(get_booking_ledger)],
) -> BookingResponse:
    """Create a PENDING booking; capacity is checked for every night."""
    booking = await ledger.create_booking(
        current_user,
        booking_data.campsite_id,
        booking_data.start_date,
        booking_data.end_date,
        booking_data.people_count,
        [
            EquipmentRequest(equipment_id=item.equipment_id, quantity=item.quantity, nights=item.nights)
            for item in booking_data.equipment
        ],
    )
    return BookingResponse.from_model(booking)


@router.get("/history", response_model=BookingListResponse)
async def get_booking_history(
    current_user: Annotated[User, Depends(get_current_user)],
    ledger: Annotated[BookingLedger, Depends(get_booking_ledger)],
    status_filter: str | None = Query(None, alias="status"),
) -> BookingListResponse:
    """List the current user's bookings, newest first."""
    bookings = await ledger.list_user_bookings(current_user, status_filter)
    return BookingListResponse(
        bookings=[BookingResponse.from_model(booking) for booking in bookings],
        total=len(bookings),
    )


@router.put("/{booking_id}/equipment", response_model=BookingResponse)
async def replace_booking_equipment(
    booking_id: UUID,
    update: BookingEquipmentUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    ledger: Annotated[BookingLedger, Depends(get_booking_ledger)],
) -> BookingResponse:
    """Replace the equipment of a booking and recompute its total."""
    booking = await ledger.replace_equipment(
        current_user,
        booking_id,
        [
            EquipmentRequest(equipment_id=item.equipment_id, quantity=item.quantity, nights=item.nights)
            for item in update.equipment
        ],
    )
    return BookingResponse.from_model(booking)


@router.post("/{booking_id}/payment-proof", response_model=BookingResponse)
async def add_payment_proof(
    booking_id: UUID,
    proof: PaymentProofCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    ledger: Annotated[BookingLedger, Depends(get_booking_ledger)],
) -> BookingResponse:
    """Attach an uploaded payment proof to a PENDING booking."""
    booking = await ledger.attach_payment_proof(current_user, booking_id, proof.reference)
    return BookingResponse.from_model(booking)
