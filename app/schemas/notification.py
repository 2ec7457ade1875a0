"""Admin notification feed schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from app.models.notification import Notification


class NotificationResponse(BaseModel):
    """Schema for notification response."""

    id: UUID
    message: str
    type: str
    booking_id: UUID | None
    is_read: bool
    created_at: datetime

    @classmethod
    def from_model(cls, notification: Notification) -> "NotificationResponse":
        booking = notification.booking
        return cls(
            id=notification.public_id,
            message=notification.message,
            type=notification.type,
            booking_id=booking.public_id if booking else None,
            is_read=bool(notification.is_read),
            created_at=notification.created_at,
        )


class NotificationListResponse(BaseModel):
    """Schema for the latest notifications plus the unread count."""

    notifications: list[NotificationResponse]
    unread_count: int
