from __future__ import annotations

from bisect import bisect_right
from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..core.constants import AUTO_DAILY_MAX_DAYS, AUTO_MONTHLY_MAX_DAYS
from ..core.enums import Granularity, RangePreset
from .model import Bucket


def auto_granularity(range_start: datetime, range_end: datetime) -> Granularity:
    """Daily up to a month, monthly up to a year, yearly beyond."""

    days = (range_end - range_start).total_seconds() / 86400
    if days <= AUTO_DAILY_MAX_DAYS:
        return Granularity.DAY
    if days <= AUTO_MONTHLY_MAX_DAYS:
        return Granularity.MONTH
    return Granularity.YEAR


def _add_months(value: datetime, months: int) -> datetime:
    index = value.year * 12 + (value.month - 1) + months
    return value.replace(year=index // 12, month=index % 12 + 1)


def period_start(instant: datetime, granularity: Granularity) -> datetime:
    """Start of the calendar period containing ``instant`` (weeks start Monday)."""

    midnight = instant.replace(hour=0, minute=0, second=0, microsecond=0)
    if granularity == Granularity.DAY:
        return midnight
    if granularity == Granularity.WEEK:
        return midnight - timedelta(days=midnight.weekday())
    if granularity == Granularity.MONTH:
        return midnight.replace(day=1)
    return midnight.replace(month=1, day=1)


def next_period(start: datetime, granularity: Granularity) -> datetime:
    if granularity == Granularity.DAY:
        return start + timedelta(days=1)
    if granularity == Granularity.WEEK:
        return start + timedelta(weeks=1)
    if granularity == Granularity.MONTH:
        return _add_months(start, 1)
    return start.replace(year=start.year + 1)


def bucket_label(start: datetime, granularity: Granularity) -> str:
    if granularity == Granularity.DAY:
        return start.date().isoformat()
    if granularity == Granularity.WEEK:
        iso = start.isocalendar()
        return f"{iso[0]}-W{iso[1]:02d}"
    if granularity == Granularity.MONTH:
        return f"{start.year}-{start.month:02d}"
    return str(start.year)


def build_buckets(range_start: datetime, range_end: datetime, granularity: Granularity) -> list[Bucket]:
    buckets: list[Bucket] = []
    cursor = period_start(range_start, granularity)
    while cursor <= range_end:
        following = next_period(cursor, granularity)
        buckets.append(Bucket(label=bucket_label(cursor, granularity), start=cursor, end=following))
        cursor = following
    return buckets


def find_bucket_index(buckets: Sequence[Bucket], instant: datetime) -> Optional[int]:
    """Index of the bucket containing ``instant``, or None when outside all of them."""

    starts = [b.start for b in buckets]
    idx = bisect_right(starts, instant) - 1
    if idx < 0 or instant >= buckets[idx].end:
        return None
    return idx


def preset_range(preset: RangePreset, now: datetime) -> tuple[datetime, datetime, Granularity]:
    """Fixed reporting windows ending at ``now``, each with a forced granularity."""

    if preset == RangePreset.LAST_30_DAYS:
        return period_start(now, Granularity.DAY) - timedelta(days=29), now, Granularity.DAY
    if preset == RangePreset.LAST_12_WEEKS:
        return period_start(now, Granularity.WEEK) - timedelta(weeks=11), now, Granularity.WEEK
    if preset == RangePreset.LAST_12_MONTHS:
        return _add_months(period_start(now, Granularity.MONTH), -11), now, Granularity.MONTH
    start = period_start(now, Granularity.YEAR)
    return start.replace(year=start.year - 4), now, Granularity.YEAR
