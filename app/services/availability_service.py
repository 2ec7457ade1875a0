"""Availability reads against the booking store.

Display queries run without locks and may show slightly stale numbers.
The admission controller calls the same readers with ``lock=True`` inside
its transaction, after it has locked the resource row.
"""

from collections import defaultdict
from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.domain.availability import (
    DayUsage,
    Occupancy,
    daily_usage,
    peak_used,
    rental_window,
    validate_range,
)
from app.domain.booking_state import ACTIVE_STATUSES
from app.models.booking import Booking, BookingEquipment
from app.models.campsite import Campsite, Equipment

ACTIVE_STATUS_VALUES = sorted(status.value for status in ACTIVE_STATUSES)


class AvailabilityService:
    """Per-day usage of campsites and equipment."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # ==================== RESOURCE LOOKUP ====================

    async def get_campsite(self, public_id: UUID) -> Campsite:
        result = await self.db.execute(
            select(Campsite).where(Campsite.public_id == public_id, Campsite.is_active.is_(True))
        )
        campsite = result.scalar_one_or_none()
        if not campsite:
            raise NotFoundError("Campsite", str(public_id))
        return campsite

    async def get_equipment(self, public_id: UUID) -> Equipment:
        result = await self.db.execute(
            select(Equipment).where(Equipment.public_id == public_id, Equipment.is_active.is_(True))
        )
        equipment = result.scalar_one_or_none()
        if not equipment:
            raise NotFoundError("Equipment", str(public_id))
        return equipment

    # ==================== OCCUPANCY ====================

    async def campsite_occupancies(
        self,
        campsite_id: int,
        start: date,
        end: date,
        *,
        lock: bool = False,
        exclude_booking_id: int | None = None,
    ) -> list[Occupancy]:
        """Active bookings of a campsite overlapping ``[start, end)``.

        With ``lock=True`` the booking rows are selected FOR UPDATE so no
        concurrent transaction can change them until this one ends.
        """
        query = select(Booking.id, Booking.start_date, Booking.end_date, Booking.people_count).where(
            Booking.campsite_id == campsite_id,
            Booking.status.in_(ACTIVE_STATUS_VALUES),
            Booking.start_date < end,
            Booking.end_date > start,
        )
        if exclude_booking_id is not None:
            query = query.where(Booking.id != exclude_booking_id)
        if lock:
            query = query.order_by(Booking.id).with_for_update()

        result = await self.db.execute(query)
        return [
            Occupancy(start=row.start_date, end=row.end_date, quantity=row.people_count)
            for row in result.all()
        ]

    async def equipment_occupancies(
        self,
        start: date,
        end: date,
        *,
        equipment_id: int | None = None,
        lock: bool = False,
        exclude_booking_id: int | None = None,
    ) -> dict[int, list[Occupancy]]:
        """Attachments of active bookings whose rental window may touch ``[start, end)``.

        Rows are filtered on the booking span (a superset of every rental
        window) and the anchored window is applied here, so the query
        needs no dialect-specific date arithmetic.
        """
        query = (
            select(
                BookingEquipment.equipment_id,
                BookingEquipment.quantity,
                BookingEquipment.nights,
                Booking.start_date,
            )
            .join(Booking, Booking.id == BookingEquipment.booking_id)
            .where(
                Booking.status.in_(ACTIVE_STATUS_VALUES),
                Booking.start_date < end,
                Booking.end_date > start,
            )
        )
        if equipment_id is not None:
            query = query.where(BookingEquipment.equipment_id == equipment_id)
        if exclude_booking_id is not None:
            query = query.where(BookingEquipment.booking_id != exclude_booking_id)
        if lock:
            query = query.order_by(BookingEquipment.id).with_for_update(of=BookingEquipment)

        result = await self.db.execute(query)
        by_equipment: dict[int, list[Occupancy]] = defaultdict(list)
        for row in result.all():
            window_start, window_end = rental_window(row.start_date, row.nights)
            by_equipment[row.equipment_id].append(
                Occupancy(start=window_start, end=window_end, quantity=row.quantity)
            )
        return by_equipment

    # ==================== USAGE ====================

    async def campsite_usage(
        self,
        campsite: Campsite,
        start: date,
        end: date,
        *,
        lock: bool = False,
        exclude_booking_id: int | None = None,
    ) -> list[DayUsage]:
        validate_range(start, end)
        occupancies = await self.campsite_occupancies(
            campsite.id, start, end, lock=lock, exclude_booking_id=exclude_booking_id
        )
        return daily_usage(start, end, campsite.daily_capacity, occupancies)

    async def equipment_usage(
        self,
        equipment: Equipment,
        start: date,
        end: date,
        *,
        lock: bool = False,
        exclude_booking_id: int | None = None,
    ) -> list[DayUsage]:
        validate_range(start, end)
        occupancies = await self.equipment_occupancies(
            start,
            end,
            equipment_id=equipment.id,
            lock=lock,
            exclude_booking_id=exclude_booking_id,
        )
        return daily_usage(start, end, equipment.stock, occupancies.get(equipment.id, []))

    async def equipment_overview(
        self, start: date | None = None, end: date | None = None
    ) -> list[tuple[Equipment, int]]:
        """Active equipment with the stock still free on the busiest day of the range.

        Without a range the full stock is reported.
        """
        result = await self.db.execute(
            select(Equipment).where(Equipment.is_active.is_(True)).order_by(Equipment.id)
        )
        catalogue = list(result.scalars().all())
        if start is None or end is None:
            return [(equipment, equipment.stock) for equipment in catalogue]

        validate_range(start, end)
        occupancies = await self.equipment_occupancies(start, end)
        overview = []
        for equipment in catalogue:
            usage = daily_usage(start, end, equipment.stock, occupancies.get(equipment.id, []))
            overview.append((equipment, max(0, equipment.stock - peak_used(usage))))
        return overview
