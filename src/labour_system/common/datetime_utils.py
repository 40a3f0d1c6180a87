from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Tuple

from ..core.exceptions import InvalidDateError


def _to_naive_utc(value: datetime) -> datetime:
    # Mongo hands back naive UTC datetimes, so everything is compared in that form.
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_datetime(value: Any, field_name: str = "date") -> datetime:
    """Parse an ISO-8601 date or datetime into a naive UTC datetime.

    Date-only strings (YYYY-MM-DD) resolve to midnight of that day.
    """
    if isinstance(value, datetime):
        return _to_naive_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if not isinstance(value, str) or not value.strip():
        raise InvalidDateError(f"Invalid {field_name}")

    text = value.strip()
    if text[-1] in "Zz":
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise InvalidDateError(f"Invalid {field_name}: {value}")
    return _to_naive_utc(parsed)


def start_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.min)


def end_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time(23, 59, 59, 999000))


def day_bounds(value: datetime) -> Tuple[datetime, datetime]:
    """[00:00:00.000, 23:59:59.999] of the given day."""
    return start_of_day(value), end_of_day(value)


def days_back(today: datetime, days: int) -> datetime:
    return start_of_day(today) - timedelta(days=days)


def isoformat(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat(timespec="milliseconds") + "Z"
    return value


def now_utc() -> datetime:
    """Current UTC time (naive).

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)
