"""Booking state machine.

Only ``PAID`` and ``CHECK_IN`` bookings consume campsite capacity and
equipment stock. A ``PENDING`` booking reserves nothing, so moving it into
the active set has to pass an admission check; moving out of the active set
always succeeds and frees capacity immediately.
"""

from enum import Enum

from app.core.exceptions import ValidationError


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    PENDING = "PENDING"
    PAID = "PAID"
    CHECK_IN = "CHECK_IN"
    CHECKOUT = "CHECKOUT"
    CANCELLED = "CANCELLED"


# Legacy spelling still found in older rows and clients
STATUS_ALIASES = {"CHECK_OUT": BookingStatus.CHECKOUT}

ACTIVE_STATUSES = frozenset({BookingStatus.PAID, BookingStatus.CHECK_IN})
TERMINAL_STATUSES = frozenset({BookingStatus.CHECKOUT, BookingStatus.CANCELLED})

BOOKING_TRANSITIONS: dict[BookingStatus, set[BookingStatus]] = {
    BookingStatus.PENDING: {BookingStatus.PAID, BookingStatus.CHECK_IN, BookingStatus.CANCELLED},
    BookingStatus.PAID: {
        BookingStatus.PENDING,
        BookingStatus.CHECK_IN,
        BookingStatus.CHECKOUT,
        BookingStatus.CANCELLED,
    },
    BookingStatus.CHECK_IN: {BookingStatus.CHECKOUT, BookingStatus.CANCELLED},
    BookingStatus.CHECKOUT: set(),
    BookingStatus.CANCELLED: set(),
}


def parse_status(value: str | BookingStatus) -> BookingStatus:
    """Normalise a status literal, accepting the legacy ``CHECK_OUT`` spelling."""
    if isinstance(value, BookingStatus):
        return value
    literal = value.strip().upper()
    if literal in STATUS_ALIASES:
        return STATUS_ALIASES[literal]
    try:
        return BookingStatus(literal)
    except ValueError:
        raise ValidationError(f"Invalid booking status: {value}")


def is_active(status: str | BookingStatus) -> bool:
    return parse_status(status) in ACTIVE_STATUSES


def is_terminal(status: str | BookingStatus) -> bool:
    return parse_status(status) in TERMINAL_STATUSES


def requires_admission(current: str | BookingStatus, target: str | BookingStatus) -> bool:
    """True when the transition starts consuming capacity."""
    return not is_active(current) and is_active(target)


def newly_paid(current: str | BookingStatus, target: str | BookingStatus) -> bool:
    return parse_status(target) == BookingStatus.PAID and parse_status(current) != BookingStatus.PAID


def assert_booking_transition(current: str | BookingStatus, target: str | BookingStatus) -> None:
    current, target = parse_status(current), parse_status(target)
    allowed = BOOKING_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise ValidationError(
            f"Invalid booking transition: {current.value} → {target.value}"
        )
