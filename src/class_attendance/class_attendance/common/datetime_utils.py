from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Union

from ..core.exceptions import ValidationError

DateInput = Union[date, datetime, str, None]


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def to_calendar_day(value: DateInput) -> date:
    """Truncate a date-ish value to its calendar day.

    Aware datetimes are converted to UTC before truncation so the same instant
    always lands on the same day. ``None`` means today. Strings may be a plain
    ``YYYY-MM-DD`` date or a full ISO-8601 timestamp.
    """

    if value is None:
        return now_local().date()
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return now_local().date()
        try:
            value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError(f"Invalid date: {raw!r}", field="date")
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    raise ValidationError(f"Invalid date: {value!r}", field="date")


def day_bounds(value: DateInput) -> tuple[date, date]:
    """Return ``(start, next_day)``; lookups use the half-open range."""

    start = to_calendar_day(value)
    return start, start + timedelta(days=1)


def month_key(value: date) -> str:
    # Zero padded so lexicographic order is chronological.
    return f"{value.year:04d}-{value.month:02d}"
