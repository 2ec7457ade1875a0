"""Notification side-channel for booking lifecycle events.

The admin feed row is written inside the caller's transaction so it exists
if and only if the status change commits. Admins read the feed through
`/admin/notifications` and mark entries read one at a time.
"""

from typing import Any
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import NotFoundError
from app.models.booking import Booking
from app.models.notification import Notification
from app.services.event_publisher import BOOKING_PAID


class NotificationService:
    """Service for recording notifications."""

    async def create_notification(
        self,
        db: AsyncSession,
        message: str,
        notification_type: str,
        related_id: int | None = None,
    ) -> Notification:
        """Create a notification in the current transaction.

        Args:
            db: Database session
            message: Notification text
            notification_type: Type of notification (e.g. BOOKING_PAID)
            related_id: Internal id of the related booking

        Returns:
            Notification: Created notification
        """
        notification = Notification(
            message=message,
            type=notification_type,
            related_id=related_id,
        )
        db.add(notification)
        await db.flush()
        return notification

    async def booking_paid(self, db: AsyncSession, booking: Booking) -> dict[str, Any]:
        """Record the BOOKING_PAID notification and return its event payload."""
        booking_ref = str(booking.public_id)
        message = f"Booking #{booking_ref[:8]} has been paid (status: PAID)"
        await self.create_notification(db, message, BOOKING_PAID, related_id=booking.id)
        return {"booking_ref": booking_ref, "message": message, "type": BOOKING_PAID}

    async def list_notifications(self, db: AsyncSession, limit: int = 20) -> list[Notification]:
        """Latest notifications first, with their booking loaded."""
        result = await db.execute(
            select(Notification)
            .options(selectinload(Notification.booking))
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def unread_count(self, db: AsyncSession) -> int:
        result = await db.execute(
            select(func.count()).where(Notification.is_read == False)  # noqa: E712
        )
        return result.scalar() or 0

    async def mark_as_read(self, db: AsyncSession, notification_id: UUID) -> None:
        """Mark one notification as read. Marking it twice is harmless."""
        result = await db.execute(
            update(Notification)
            .where(Notification.public_id == notification_id)
            .values(is_read=True)
        )
        if result.rowcount == 0:
            raise NotFoundError("Notification", str(notification_id))


notification_service = NotificationService()
