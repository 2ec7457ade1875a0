"""Pydantic schemas for API validation."""

from app.schemas.booking import (
    BookingCreate,
    BookingEquipmentResponse,
    BookingEquipmentUpdate,
    BookingListResponse,
    BookingResponse,
    BookingStatusUpdate,
    CampsiteAvailabilityResponse,
    CampsiteResponse,
    DayAvailability,
    EquipmentAvailabilityResponse,
    EquipmentItem,
    EquipmentResponse,
    PaymentProofCreate,
)
from app.schemas.notification import NotificationListResponse, NotificationResponse

__all__ = [
    # Inventory
    "CampsiteResponse",
    "CampsiteAvailabilityResponse",
    "DayAvailability",
    "EquipmentResponse",
    "EquipmentAvailabilityResponse",
    # Booking
    "BookingCreate",
    "BookingEquipmentUpdate",
    "BookingStatusUpdate",
    "EquipmentItem",
    "PaymentProofCreate",
    "BookingResponse",
    "BookingEquipmentResponse",
    "BookingListResponse",
    # Notifications
    "NotificationResponse",
    "NotificationListResponse",
]
