"""
Tests for the per-day usage calculator.

Pure functions only: half-open ranges, anchored rental windows and the
first-violation rule used by admission.
"""

from datetime import date

import pytest

from app.core.exceptions import ValidationError
from app.domain.availability import (
    DayUsage,
    Occupancy,
    daily_usage,
    first_violation,
    iter_days,
    nights_between,
    peak_used,
    rental_window,
    validate_range,
)


class TestRanges:
    """Half-open [start, end) date ranges."""

    def test_nights_between(self):
        assert nights_between(date(2025, 2, 1), date(2025, 2, 3)) == 2

    def test_iter_days_excludes_end(self):
        assert list(iter_days(date(2025, 2, 1), date(2025, 2, 3))) == [
            date(2025, 2, 1),
            date(2025, 2, 2),
        ]

    def test_iter_days_crosses_month_end(self):
        days = list(iter_days(date(2025, 2, 27), date(2025, 3, 2)))
        assert days == [date(2025, 2, 27), date(2025, 2, 28), date(2025, 3, 1)]

    @pytest.mark.parametrize(
        "start,end",
        [
            (date(2025, 2, 3), date(2025, 2, 3)),
            (date(2025, 2, 3), date(2025, 2, 1)),
        ],
    )
    def test_empty_or_inverted_range_is_invalid(self, start, end):
        with pytest.raises(ValidationError):
            validate_range(start, end)

    def test_rental_window_is_anchored_at_booking_start(self):
        assert rental_window(date(2025, 3, 1), 1) == (date(2025, 3, 1), date(2025, 3, 2))


class TestDailyUsage:
    """Aggregation of occupancies per calendar day."""

    def test_no_occupancy_leaves_full_capacity(self):
        usage = daily_usage(date(2025, 2, 1), date(2025, 2, 3), 10, [])
        assert [(u.used, u.remaining) for u in usage] == [(0, 10), (0, 10)]

    def test_departure_day_is_not_used(self):
        stay = Occupancy(start=date(2025, 2, 1), end=date(2025, 2, 3), quantity=4)
        usage = daily_usage(date(2025, 2, 1), date(2025, 2, 5), 10, [stay])
        assert [u.used for u in usage] == [4, 4, 0, 0]

    def test_overlapping_occupancies_are_summed(self):
        occupancies = [
            Occupancy(start=date(2025, 2, 1), end=date(2025, 2, 3), quantity=4),
            Occupancy(start=date(2025, 2, 2), end=date(2025, 2, 4), quantity=3),
        ]
        usage = daily_usage(date(2025, 2, 1), date(2025, 2, 4), 10, occupancies)
        assert [u.used for u in usage] == [4, 7, 3]
        assert [u.remaining for u in usage] == [6, 3, 7]

    def test_occupancy_outside_range_is_ignored(self):
        earlier = Occupancy(start=date(2025, 1, 20), end=date(2025, 1, 25), quantity=9)
        usage = daily_usage(date(2025, 2, 1), date(2025, 2, 2), 10, [earlier])
        assert usage[0].used == 0

    def test_remaining_goes_negative_when_over_capacity(self):
        stay = Occupancy(start=date(2025, 2, 1), end=date(2025, 2, 2), quantity=12)
        usage = daily_usage(date(2025, 2, 1), date(2025, 2, 2), 10, [stay])
        assert usage[0].remaining == -2

    def test_single_night_equipment_window_on_two_night_stay(self):
        window_start, window_end = rental_window(date(2025, 3, 1), 1)
        rental = Occupancy(start=window_start, end=window_end, quantity=2)
        usage = daily_usage(date(2025, 3, 1), date(2025, 3, 3), 5, [rental])
        assert [u.remaining for u in usage] == [3, 5]
        assert peak_used(usage) == 2


class TestFirstViolation:
    """Reject at the first day where used + requested > capacity."""

    def test_fits_exactly(self):
        stay = Occupancy(start=date(2025, 2, 1), end=date(2025, 2, 3), quantity=4)
        usage = daily_usage(date(2025, 2, 1), date(2025, 2, 3), 10, [stay])
        assert first_violation(usage, 6) is None

    def test_day_fits_up_to_remaining(self):
        day = DayUsage(day=date(2025, 2, 1), used=7, remaining=3)
        assert day.fits(3)
        assert not day.fits(4)

    def test_reports_earliest_violating_day(self):
        occupancies = [
            Occupancy(start=date(2025, 2, 2), end=date(2025, 2, 4), quantity=6),
            Occupancy(start=date(2025, 2, 3), end=date(2025, 2, 4), quantity=2),
        ]
        usage = daily_usage(date(2025, 2, 1), date(2025, 2, 4), 10, occupancies)
        violation = first_violation(usage, 5)
        assert violation is not None
        assert violation.day == date(2025, 2, 2)
        assert violation.used == 6
        assert violation.remaining == 4

    def test_peak_of_empty_usage_is_zero(self):
        assert peak_used([]) == 0
