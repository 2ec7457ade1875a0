"""Admission control for capacity-consuming writes.

CRITICAL SECTION:
Every write that makes a booking count against campsite capacity or
equipment stock goes through this controller, inside the caller's
transaction:

1. Lock the resource row (campsite or equipment) FOR UPDATE
2. Lock the active records overlapping the requested range
3. Compute per-day usage under those locks
4. Reject at the first day where used + requested > capacity
5. Return to the caller, which writes and commits in the same transaction

Locks are always taken in the order campsite, booking rows, equipment
(ascending id), equipment attachments, so two writers never wait on each
other in opposite orders.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import CapacityExceeded, NotFoundError, ValidationError
from app.domain.availability import first_violation, nights_between, rental_window, validate_range
from app.models.campsite import Campsite, Equipment
from app.services.availability_service import AvailabilityService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EquipmentClaim:
    """Requested rental of one equipment item, resolved to its internal id."""

    equipment_id: int
    quantity: int
    nights: int


def validate_people_count(people_count: int) -> None:
    if people_count <= 0:
        raise ValidationError("people_count must be greater than 0")


def validate_claims(claims: Sequence[EquipmentClaim], start: date, end: date) -> None:
    """Input checks that must pass before any lock is taken."""
    stay_nights = nights_between(start, end)
    seen: set[int] = set()
    for claim in claims:
        if claim.quantity <= 0:
            raise ValidationError("Equipment quantity must be greater than 0")
        if claim.nights <= 0:
            raise ValidationError("Equipment nights must be greater than 0")
        if claim.nights > stay_nights:
            raise ValidationError(
                f"Equipment nights ({claim.nights}) cannot exceed the stay length ({stay_nights})"
            )
        if claim.equipment_id in seen:
            raise ValidationError("Each equipment item may appear only once per booking")
        seen.add(claim.equipment_id)


class AdmissionController:
    """Locked check-then-admit for campsite and equipment reservations."""

    def __init__(self, db: AsyncSession, availability: AvailabilityService | None = None) -> None:
        self.db = db
        self.availability = availability or AvailabilityService(db)

    async def lock_campsite(self, campsite_id: int, *, active_only: bool = True) -> Campsite:
        query = select(Campsite).where(Campsite.id == campsite_id)
        if active_only:
            query = query.where(Campsite.is_active.is_(True))
        result = await self.db.execute(
            query.with_for_update().execution_options(populate_existing=True)
        )
        campsite = result.scalar_one_or_none()
        if not campsite:
            raise NotFoundError("Campsite")
        return campsite

    async def lock_equipment(self, equipment_ids: Sequence[int]) -> dict[int, Equipment]:
        if not equipment_ids:
            return {}
        result = await self.db.execute(
            select(Equipment)
            .where(Equipment.id.in_(sorted(set(equipment_ids))), Equipment.is_active.is_(True))
            .order_by(Equipment.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        locked = {equipment.id: equipment for equipment in result.scalars().all()}
        missing = set(equipment_ids) - set(locked)
        if missing:
            raise NotFoundError("Equipment")
        return locked

    async def admit_campsite(
        self,
        campsite_id: int,
        start: date,
        end: date,
        people_count: int,
        *,
        exclude_booking_id: int | None = None,
    ) -> Campsite:
        """Admit ``people_count`` guests on every night of ``[start, end)``.

        Raises:
            ValidationError: Bad range or people count (before locking)
            NotFoundError: Campsite missing or deactivated
            CapacityExceeded: First night without room
        """
        validate_range(start, end)
        validate_people_count(people_count)

        campsite = await self.lock_campsite(campsite_id)
        usage = await self.availability.campsite_usage(
            campsite, start, end, lock=True, exclude_booking_id=exclude_booking_id
        )
        violation = first_violation(usage, people_count)
        if violation:
            logger.info(
                f"Campsite admission rejected: campsite={campsite.public_id} "
                f"day={violation.day} used={violation.used} requested={people_count}"
            )
            raise CapacityExceeded(
                resource="campsite",
                resource_id=str(campsite.public_id),
                day=violation.day,
                used=violation.used,
                remaining=violation.remaining,
                requested=people_count,
            )
        return campsite

    async def admit_equipment(
        self,
        claims: Sequence[EquipmentClaim],
        booking_start: date,
        booking_end: date,
        *,
        exclude_booking_id: int | None = None,
    ) -> dict[int, Equipment]:
        """Admit every claim over its window anchored at ``booking_start``.

        Returns the locked equipment rows keyed by internal id so the
        caller can price the attachments from the same snapshot.
        """
        validate_range(booking_start, booking_end)
        validate_claims(claims, booking_start, booking_end)

        locked = await self.lock_equipment([claim.equipment_id for claim in claims])
        for claim in sorted(claims, key=lambda c: c.equipment_id):
            equipment = locked[claim.equipment_id]
            window_start, window_end = rental_window(booking_start, claim.nights)
            usage = await self.availability.equipment_usage(
                equipment,
                window_start,
                window_end,
                lock=True,
                exclude_booking_id=exclude_booking_id,
            )
            violation = first_violation(usage, claim.quantity)
            if violation:
                logger.info(
                    f"Equipment admission rejected: equipment={equipment.public_id} "
                    f"day={violation.day} used={violation.used} requested={claim.quantity}"
                )
                raise CapacityExceeded(
                    resource="equipment",
                    resource_id=str(equipment.public_id),
                    day=violation.day,
                    used=violation.used,
                    remaining=violation.remaining,
                    requested=claim.quantity,
                )
        return locked
