from __future__ import annotations

from datetime import date, datetime, time, timedelta

from ..core.constants import DEFAULT_BUSINESS_DAY_CUTOFF_HOUR
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into a naive local datetime.

    Offsets are converted to local time, so clients may send either
    '2026-01-31T18:00' or '2026-01-31T09:00:00Z'.
    """

    v = (value or "").strip()
    if v.endswith("Z"):
        v = v[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(v)
    except ValueError:
        raise ValidationError(f"Invalid timestamp: {value!r}")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now().replace(microsecond=0)


def work_date_for(instant: datetime, cutoff_hour: int = DEFAULT_BUSINESS_DAY_CUTOFF_HOUR) -> date:
    """Business date an instant belongs to.

    Activity before ``cutoff_hour`` o'clock counts towards the previous day, so
    with the default cutoff of 5 an entry at 01:30 belongs to yesterday.
    A cutoff of 0 means plain calendar days.
    """

    if instant.hour < cutoff_hour:
        return instant.date() - timedelta(days=1)
    return instant.date()


def business_day_bounds(work_date: date, cutoff_hour: int = DEFAULT_BUSINESS_DAY_CUTOFF_HOUR) -> tuple[datetime, datetime]:
    """Half-open ``[start, end)`` window of a business day."""

    start = datetime.combine(work_date, time(hour=cutoff_hour))
    return start, start + timedelta(days=1)


def elapsed_seconds(start: datetime, end: datetime) -> int:
    """Whole seconds between two instants, never negative."""

    return max(0, int((end - start).total_seconds()))
