"""Calendar date parsing for API inputs."""

from datetime import UTC, date, datetime
from typing import Annotated, Any

from pydantic import BeforeValidator


def to_utc_date(value: Any) -> Any:
    """Reduce a datetime (object or ISO string) to its UTC calendar day.

    Plain dates and ``YYYY-MM-DD`` strings pass through unchanged; naive
    datetimes are taken as UTC.
    """
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, str) and "T" in value:
        moment = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    else:
        return value
    if moment.tzinfo is not None:
        moment = moment.astimezone(UTC)
    return moment.date()


UtcDate = Annotated[date, BeforeValidator(to_utc_date)]
