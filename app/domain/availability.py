"""Day-by-day usage of a finite daily resource.

A resource is either a campsite (capacity counted in people per day) or an
equipment item (capacity counted in units per day). Every consuming record
occupies a half-open interval of calendar days ``[start, end)``; a day is used
by a record when ``start <= day < end``.

Equipment attachments do not span the whole booking: an attachment rented
for ``nights = k`` occupies ``[booking.start, booking.start + k)``, anchored at
the booking's first night.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import date, timedelta

from app.core.exceptions import ValidationError


@dataclass(frozen=True)
class Occupancy:
    """One consuming record reduced to its interval and quantity."""

    start: date
    end: date
    quantity: int

    def covers(self, day: date) -> bool:
        return self.start <= day < self.end


@dataclass(frozen=True)
class DayUsage:
    """Usage of a resource on a single calendar day."""

    day: date
    used: int
    remaining: int

    def fits(self, quantity: int) -> bool:
        return quantity <= self.remaining


def nights_between(start: date, end: date) -> int:
    """Night count of a half-open stay."""
    return (end - start).days


def validate_range(start: date, end: date) -> None:
    """Empty and inverted ranges are input errors."""
    if end <= start:
        raise ValidationError("end_date must be after start_date")


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day in ``[start, end)``."""
    validate_range(start, end)
    day = start
    while day < end:
        yield day
        day += timedelta(days=1)


def rental_window(booking_start: date, nights: int) -> tuple[date, date]:
    """Days an equipment attachment occupies: the first ``nights`` nights of the stay."""
    return booking_start, booking_start + timedelta(days=nights)


def overlaps(start: date, end: date, other_start: date, other_end: date) -> bool:
    return start < other_end and other_start < end


def daily_usage(
    start: date,
    end: date,
    capacity: int,
    occupancies: Iterable[Occupancy],
) -> list[DayUsage]:
    """Aggregate the quantity consumed on each day of ``[start, end)``.

    Returns one entry per day, in calendar order, with
    ``remaining = capacity - used``. ``remaining`` may be negative when the
    stored data already exceeds capacity (e.g. after a capacity reduction).
    """
    days = list(iter_days(start, end))
    used = dict.fromkeys(days, 0)
    for occ in occupancies:
        if not overlaps(start, end, occ.start, occ.end):
            continue
        for day in days:
            if occ.covers(day):
                used[day] += occ.quantity
    return [DayUsage(day=day, used=used[day], remaining=capacity - used[day]) for day in days]


def first_violation(usage: Iterable[DayUsage], quantity: int) -> DayUsage | None:
    """First day (in calendar order) on which ``quantity`` more units do not fit."""
    for entry in usage:
        if not entry.fits(quantity):
            return entry
    return None


def peak_used(usage: Iterable[DayUsage]) -> int:
    return max((entry.used for entry in usage), default=0)
