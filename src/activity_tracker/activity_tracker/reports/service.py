from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import elapsed_seconds, now_local
from ..core.enums import Granularity, RangePreset
from ..core.exceptions import ValidationError
from ..database.unit_of_work import TransactionManager
from ..sessions.model import SessionEntry
from ..users.service import AccessPolicy
from .buckets import auto_granularity, build_buckets, find_bucket_index, preset_range
from .model import Bucket, CategoryTotal, SeriesPoint, StatsResult

logger = logging.getLogger(__name__)


def entry_seconds(entry: SessionEntry) -> Optional[int]:
    """Duration an entry contributes to reports.

    Stored duration wins; otherwise the closed interval; open entries give
    None and are left out. Bad or negative values count as zero.
    """

    if entry.duration_seconds is not None:
        try:
            return max(0, int(entry.duration_seconds))
        except (TypeError, ValueError):
            return 0
    if entry.end_time is not None:
        return elapsed_seconds(entry.start_time, entry.end_time)
    return None


def to_minutes(seconds: Any) -> int:
    return (int(seconds) + 30) // 60


def aggregate(entries: Sequence[SessionEntry], buckets: Sequence[Bucket]) -> tuple[list[SeriesPoint], list[CategoryTotal]]:
    bucket_seconds = [0] * len(buckets)
    category_seconds: dict[str, int] = {}

    for entry in entries:
        seconds = entry_seconds(entry)
        if seconds is None:
            continue

        idx = find_bucket_index(buckets, entry.start_time)
        if idx is not None:
            bucket_seconds[idx] += seconds

        name = entry.category_name_snapshot
        category_seconds[name] = category_seconds.get(name, 0) + seconds

    series = [SeriesPoint(label=b.label, total_minutes=to_minutes(s)) for b, s in zip(buckets, bucket_seconds)]
    categories = [CategoryTotal(category_name=name, minutes=to_minutes(s)) for name, s in category_seconds.items()]
    categories.sort(key=lambda c: (-c.minutes, c.category_name))
    return series, categories


class StatsService:
    """Use case: time-series and category totals over a range of users."""

    def __init__(self, tx: TransactionManager, access: AccessPolicy):
        self._tx = tx
        self._access = access

    def get_stats(
        self,
        user_ids: Sequence[int],
        range_start: datetime,
        range_end: datetime,
        granularity: Granularity | None = None,
        *,
        acting_user_id: int | None = None,
    ) -> StatsResult:
        ids = sorted({int(u) for u in user_ids})
        if not ids:
            raise ValidationError("At least one user is required")
        if range_end < range_start:
            raise ValidationError("Range end must not be before range start")
        if acting_user_id is not None:
            self._access.require_scope(int(acting_user_id), ids)

        granularity = granularity or auto_granularity(range_start, range_end)
        buckets = build_buckets(range_start, range_end, granularity)

        with self._tx.transaction(read_only=True) as uow:
            entries = uow.sessions.list_for_users_between(ids, range_start, range_end)

        series, categories = aggregate(entries, buckets)
        logger.debug("stats users=%s granularity=%s entries=%d", ids, granularity.value, len(entries))
        return StatsResult(
            granularity=granularity,
            range_start=range_start,
            range_end=range_end,
            time_series=series,
            by_category=categories,
        )

    def get_preset_stats(
        self,
        user_ids: Sequence[int],
        preset: RangePreset,
        *,
        acting_user_id: int | None = None,
        now: datetime | None = None,
    ) -> StatsResult:
        start, end, granularity = preset_range(preset, now or now_local())
        return self.get_stats(user_ids, start, end, granularity, acting_user_id=acting_user_id)
