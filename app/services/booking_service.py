"""Booking ledger: the only writer of admitted reservations.

Every mutating operation here is a single transaction on the injected
session. Input is validated before any row lock is taken; capacity is
checked by the AdmissionController under row locks; prices are recomputed
from the locked rows; the transaction commits; only then are realtime
events published.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from app.domain.availability import nights_between, validate_range
from app.domain.booking_state import (
    BookingStatus,
    assert_booking_transition,
    is_terminal,
    newly_paid,
    parse_status,
    requires_admission,
)
from app.models.booking import Booking, BookingEquipment
from app.models.campsite import Equipment
from app.models.user import User
from app.services.admission_service import (
    AdmissionController,
    EquipmentClaim,
    validate_claims,
    validate_people_count,
)
from app.services.availability_service import AvailabilityService
from app.services.event_publisher import (
    BOOKING_CREATED,
    BOOKING_EQUIPMENT_UPDATED,
    BOOKING_PAID,
    BOOKING_STATUS_UPDATED,
    EventPublisher,
    event_publisher,
)
from app.services.notification_service import NotificationService, notification_service
from app.services.pricing_service import EquipmentLine, PricingService, pricing_service

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EquipmentRequest:
    """Client request to rent equipment, identified by its public id.

    ``nights=None`` rents for the whole stay.
    """

    equipment_id: UUID
    quantity: int
    nights: int | None = None


def validate_requests(requests: Sequence[EquipmentRequest]) -> None:
    """Shape checks that need no stored data."""
    for request in requests:
        if request.quantity <= 0:
            raise ValidationError("Equipment quantity must be greater than 0")
        if request.nights is not None and request.nights <= 0:
            raise ValidationError("Equipment nights must be greater than 0")


def booking_snapshot(booking: Booking) -> dict[str, Any]:
    """Public view of a booking for realtime subscribers (no internal ids)."""
    return {
        "id": str(booking.public_id),
        "user_id": str(booking.user.public_id),
        "campsite_id": str(booking.campsite.public_id),
        "start_date": booking.start_date,
        "end_date": booking.end_date,
        "people_count": booking.people_count,
        "total_price": booking.total_price,
        "status": booking.status,
        "equipment": [
            {
                "equipment_id": str(item.equipment.public_id),
                "quantity": item.quantity,
                "nights": item.nights,
                "price": item.price,
            }
            for item in booking.equipment_items
        ],
    }


class BookingLedger:
    """Create bookings, edit their equipment and drive their status."""

    def __init__(
        self,
        db: AsyncSession,
        publisher: EventPublisher | None = None,
        notifications: NotificationService | None = None,
        pricing: PricingService | None = None,
    ) -> None:
        self.db = db
        self.availability = AvailabilityService(db)
        self.admission = AdmissionController(db, self.availability)
        self.publisher = publisher or event_publisher
        self.notifications = notifications or notification_service
        self.pricing = pricing or pricing_service

    # ==================== READS ====================

    @staticmethod
    def _eager_options() -> list:
        return [
            selectinload(Booking.user),
            selectinload(Booking.campsite),
            selectinload(Booking.equipment_items).selectinload(BookingEquipment.equipment),
        ]

    async def _load(self, booking_id: int) -> Booking:
        result = await self.db.execute(
            select(Booking)
            .options(*self._eager_options())
            .where(Booking.id == booking_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def get_booking(self, public_id: UUID, *, lock: bool = False) -> Booking:
        query = select(Booking).options(*self._eager_options()).where(Booking.public_id == public_id)
        if lock:
            query = query.with_for_update(of=Booking).execution_options(populate_existing=True)
        result = await self.db.execute(query)
        booking = result.scalar_one_or_none()
        if not booking:
            raise NotFoundError("Booking", str(public_id))
        return booking

    async def list_user_bookings(self, user: User, status: str | None = None) -> list[Booking]:
        """Booking history of one user, newest first."""
        query = select(Booking).options(*self._eager_options()).where(Booking.user_id == user.id)
        if status:
            query = query.where(Booking.status == parse_status(status).value)
        result = await self.db.execute(query.order_by(Booking.created_at.desc(), Booking.id.desc()))
        return list(result.scalars().all())

    async def list_bookings(self, status: str | None = None) -> list[Booking]:
        """Every booking, newest first (admin view)."""
        query = select(Booking).options(*self._eager_options())
        if status:
            query = query.where(Booking.status == parse_status(status).value)
        result = await self.db.execute(query.order_by(Booking.created_at.desc(), Booking.id.desc()))
        return list(result.scalars().all())

    # ==================== HELPERS ====================

    @staticmethod
    def _assert_can_modify(user: User, booking: Booking) -> None:
        if booking.user_id != user.id and not user.is_admin:
            raise AuthorizationError("You don't have permission to modify this booking")

    async def _resolve_claims(
        self, requests: Sequence[EquipmentRequest], start: date, end: date
    ) -> list[EquipmentClaim]:
        """Translate public equipment ids and default nights; no locks taken."""
        validate_requests(requests)
        stay_nights = nights_between(start, end)
        claims = []
        for request in requests:
            equipment = await self.availability.get_equipment(request.equipment_id)
            claims.append(
                EquipmentClaim(
                    equipment_id=equipment.id,
                    quantity=request.quantity,
                    nights=stay_nights if request.nights is None else request.nights,
                )
            )
        validate_claims(claims, start, end)
        return claims

    def _price_attachments(
        self, claims: Sequence[EquipmentClaim], locked: dict[int, Equipment]
    ) -> tuple[list[BookingEquipment], list[EquipmentLine]]:
        attachments = []
        lines = []
        for claim in claims:
            line = EquipmentLine(
                unit_price=locked[claim.equipment_id].price,
                quantity=claim.quantity,
                nights=claim.nights,
            )
            lines.append(line)
            attachments.append(
                BookingEquipment(
                    equipment_id=claim.equipment_id,
                    quantity=claim.quantity,
                    nights=claim.nights,
                    price=line.price,
                )
            )
        return attachments, lines

    def _total_price(
        self, nightly_price: int, nights: int, people_count: int, lines: Sequence[EquipmentLine]
    ) -> int:
        return self.pricing.calculate_booking_total(
            nightly_price, nights, people_count, lines
        )["total_price"]

    async def _commit_and_reload(self, booking_id: int) -> Booking:
        await self.db.commit()
        return await self._load(booking_id)

    # ==================== WRITES ====================

    async def create_booking(
        self,
        user: User,
        campsite_id: UUID,
        start: date,
        end: date,
        people_count: int,
        equipment_requests: Sequence[EquipmentRequest] = (),
    ) -> Booking:
        """Admit and insert a PENDING booking with its equipment attachments.

        Raises:
            ValidationError: Bad range, people count, quantity or nights
            NotFoundError: Unknown or deactivated campsite/equipment
            CapacityExceeded: A night is already full of active bookings
        """
        validate_range(start, end)
        validate_people_count(people_count)
        campsite = await self.availability.get_campsite(campsite_id)
        claims = await self._resolve_claims(equipment_requests, start, end)

        campsite = await self.admission.admit_campsite(campsite.id, start, end, people_count)
        locked_equipment = await self.admission.admit_equipment(claims, start, end)

        attachments, lines = self._price_attachments(claims, locked_equipment)
        booking = Booking(
            user_id=user.id,
            campsite_id=campsite.id,
            start_date=start,
            end_date=end,
            people_count=people_count,
            total_price=self._total_price(
                campsite.nightly_price, nights_between(start, end), people_count, lines
            ),
            status=BookingStatus.PENDING.value,
        )
        booking.equipment_items = attachments
        self.db.add(booking)
        await self.db.flush()

        booking = await self._commit_and_reload(booking.id)
        logger.info(
            f"Booking created: booking={booking.public_id} campsite={campsite.public_id} "
            f"{start}..{end} people={people_count} total={booking.total_price}"
        )
        await self.publisher.publish(BOOKING_CREATED, booking_snapshot(booking))
        return booking

    async def replace_equipment(
        self,
        user: User,
        booking_id: UUID,
        equipment_requests: Sequence[EquipmentRequest],
    ) -> Booking:
        """Replace every equipment attachment of a booking and reprice it.

        Only the owner or an admin may edit. The booking's current
        attachments are left out of the usage the new set is checked against.
        """
        booking = await self.get_booking(booking_id)
        self._assert_can_modify(user, booking)
        if is_terminal(booking.status):
            raise ValidationError(f"Cannot edit equipment of a {booking.status} booking")
        claims = await self._resolve_claims(
            equipment_requests, booking.start_date, booking.end_date
        )

        booking = await self.get_booking(booking_id, lock=True)
        if is_terminal(booking.status):
            raise ValidationError(f"Cannot edit equipment of a {booking.status} booking")
        locked_equipment = await self.admission.admit_equipment(
            claims, booking.start_date, booking.end_date, exclude_booking_id=booking.id
        )

        booking.equipment_items.clear()
        await self.db.flush()
        attachments, lines = self._price_attachments(claims, locked_equipment)
        booking.equipment_items.extend(attachments)
        booking.total_price = self._total_price(
            booking.campsite.nightly_price, booking.nights, booking.people_count, lines
        )
        await self.db.flush()

        booking = await self._commit_and_reload(booking.id)
        logger.info(
            f"Booking equipment replaced: booking={booking.public_id} "
            f"items={len(attachments)} total={booking.total_price}"
        )
        await self.publisher.publish(BOOKING_EQUIPMENT_UPDATED, booking_snapshot(booking))
        return booking

    async def set_status(self, booking_id: UUID, new_status: str | BookingStatus) -> Booking:
        """Move a booking to ``new_status`` (admin action).

        Entering PAID or CHECK_IN from a non-active status re-admits the
        booking's people and equipment; leaving the active set always
        succeeds. Setting the current status again changes nothing.
        """
        target = parse_status(new_status)
        booking = await self.get_booking(booking_id)
        await self.admission.lock_campsite(booking.campsite_id, active_only=False)
        booking = await self.get_booking(booking_id, lock=True)
        current = parse_status(booking.status)
        if current == target:
            return booking

        assert_booking_transition(current, target)

        if requires_admission(current, target):
            await self.admission.admit_campsite(
                booking.campsite_id,
                booking.start_date,
                booking.end_date,
                booking.people_count,
                exclude_booking_id=booking.id,
            )
            claims = [
                EquipmentClaim(equipment_id=item.equipment_id, quantity=item.quantity, nights=item.nights)
                for item in booking.equipment_items
            ]
            await self.admission.admit_equipment(
                claims, booking.start_date, booking.end_date, exclude_booking_id=booking.id
            )

        booking.status = target.value
        paid_event = None
        if newly_paid(current, target):
            paid_event = await self.notifications.booking_paid(self.db, booking)
        await self.db.flush()

        booking = await self._commit_and_reload(booking.id)
        logger.info(
            f"Booking status changed: booking={booking.public_id} {current.value} -> {target.value}"
        )
        await self.publisher.publish(BOOKING_STATUS_UPDATED, booking_snapshot(booking))
        if paid_event:
            await self.publisher.publish(BOOKING_PAID, paid_event)
        return booking

    async def attach_payment_proof(self, user: User, booking_id: UUID, reference: str) -> Booking:
        """Store the uploaded payment proof reference; status stays PENDING."""
        booking = await self.get_booking(booking_id, lock=True)
        self._assert_can_modify(user, booking)
        if booking.status != BookingStatus.PENDING.value:
            raise ValidationError(
                f"Booking status is {booking.status}; payment proof can only be added while PENDING"
            )
        booking.payment_proof = reference
        await self.db.flush()
        return await self._commit_and_reload(booking.id)

    async def delete_equipment(self, equipment_id: UUID) -> Equipment:
        """Deactivate equipment that no booking references.

        Raises:
            ConflictError: The equipment is attached to at least one booking
        """
        equipment = await self.availability.get_equipment(equipment_id)
        locked = await self.admission.lock_equipment([equipment.id])
        equipment = locked[equipment.id]

        result = await self.db.execute(
            select(func.count())
            .select_from(BookingEquipment)
            .where(BookingEquipment.equipment_id == equipment.id)
        )
        if result.scalar():
            raise ConflictError("Equipment is attached to existing bookings and cannot be deleted")

        equipment.is_active = False
        await self.db.commit()
        logger.info(f"Equipment deactivated: equipment={equipment.public_id}")
        return equipment
