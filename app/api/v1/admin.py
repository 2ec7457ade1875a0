"""Admin panel endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_booking_ledger, get_current_admin
from app.database import get_db
from app.models.user import User
from app.schemas.booking import BookingListResponse, BookingResponse, BookingStatusUpdate
from app.schemas.notification import NotificationListResponse, NotificationResponse
from app.services.booking_service import BookingLedger
from app.services.notification_service import notification_service

router = APIRouter()


# ============ BOOKINGS ============


@router.get("/bookings", response_model=BookingListResponse)
async def list_all_bookings(
    admin: Annotated[User, Depends(get_current_admin)],
    ledger: Annotated[BookingLedger, Depends(get_booking_ledger)],
    status_filter: str | None = Query(default=None, alias="status"),
) -> BookingListResponse:
    """List every booking, optionally filtered by status."""
    bookings = await ledger.list_bookings(status_filter)
    return BookingListResponse(
        bookings=[BookingResponse.from_model(booking) for booking in bookings],
        total=len(bookings),
    )


@router.put("/bookings/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: UUID,
    update: BookingStatusUpdate,
    admin: Annotated[User, Depends(get_current_admin)],
    ledger: Annotated[BookingLedger, Depends(get_booking_ledger)],
) -> BookingResponse:
    """Move a booking through its lifecycle.

    Entering PAID or CHECK_IN re-checks capacity for every night of the
    stay; a full night rejects the change with 409.
    """
    booking = await ledger.set_status(booking_id, update.status)
    return BookingResponse.from_model(booking)


# ============ INVENTORY ============


@router.delete("/equipment/{equipment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_equipment(
    equipment_id: UUID,
    admin: Annotated[User, Depends(get_current_admin)],
    ledger: Annotated[BookingLedger, Depends(get_booking_ledger)],
) -> None:
    """Deactivate equipment that no booking references."""
    await ledger.delete_equipment(equipment_id)


# ============ NOTIFICATIONS ============


@router.get("/notifications", response_model=NotificationListResponse)
async def list_notifications(
    admin: Annotated[User, Depends(get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> NotificationListResponse:
    """Latest 20 notifications and the number still unread."""
    notifications = await notification_service.list_notifications(db, limit=20)
    unread_count = await notification_service.unread_count(db)
    return NotificationListResponse(
        notifications=[NotificationResponse.from_model(n) for n in notifications],
        unread_count=unread_count,
    )


@router.put("/notifications/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_notification_read(
    notification_id: UUID,
    admin: Annotated[User, Depends(get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Mark a notification as read."""
    await notification_service.mark_as_read(db, notification_id)
