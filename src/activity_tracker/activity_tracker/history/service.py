from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import business_day_bounds, elapsed_seconds
from ..core.constants import DEFAULT_BUSINESS_DAY_CUTOFF_HOUR
from ..database.unit_of_work import TransactionManager
from ..sessions.model import SessionEntry
from ..users.service import AccessPolicy
from .model import TimelineEntry


def _safe_seconds(value: Any) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0


def _stored_seconds(entry: SessionEntry) -> int:
    if entry.duration_seconds is not None:
        return _safe_seconds(entry.duration_seconds)
    return elapsed_seconds(entry.start_time, entry.end_time)


def reconstruct_timeline(
    entries: Sequence[SessionEntry],
    successor: Optional[SessionEntry] = None,
) -> list[TimelineEntry]:
    """Gapless view of one day's entries.

    Every entry ends where the next one starts, whatever was stored on it
    (manual backfills are stored with zero length). ``successor`` is the
    user's first entry after the day and plays that role for the day's last
    entry. Without one, the last entry keeps its stored end, or stays active
    when it is still open. Live entries that end up with no elapsed time are
    dropped unless they are the day's only entry; manual entries always stay.
    """

    ordered = sorted(entries, key=lambda e: (e.start_time, e.entry_id))
    following: list[Optional[SessionEntry]] = [*ordered[1:], successor]
    timeline: list[TimelineEntry] = []

    for entry, nxt in zip(ordered, following):
        if nxt is not None:
            end: Optional[datetime] = nxt.start_time
            seconds: Optional[int] = elapsed_seconds(entry.start_time, end)
        elif entry.end_time is not None:
            end = entry.end_time
            seconds = _stored_seconds(entry)
        else:
            end = None
            seconds = None
        timeline.append(TimelineEntry(entry=entry, effective_end=end, effective_seconds=seconds))

    if len(timeline) > 1:
        timeline = [t for t in timeline if t.is_active or t.effective_seconds or t.entry.is_manual]
    return timeline


class HistoryService:
    def __init__(
        self,
        tx: TransactionManager,
        access: AccessPolicy,
        *,
        cutoff_hour: int = DEFAULT_BUSINESS_DAY_CUTOFF_HOUR,
    ):
        self._tx = tx
        self._access = access
        self._cutoff_hour = int(cutoff_hour)

    def get_history(self, user_id: int, work_date: date, *, acting_user_id: int | None = None) -> list[TimelineEntry]:
        if acting_user_id is not None and int(acting_user_id) != int(user_id):
            self._access.require_owner_or_admin(acting_user_id=acting_user_id, owner_id=user_id)

        day_start, day_end = business_day_bounds(work_date, self._cutoff_hour)
        with self._tx.transaction(read_only=True) as uow:
            entries = uow.sessions.list_for_user_between(int(user_id), day_start, day_end)
            successor = uow.sessions.first_for_user_from(int(user_id), day_end) if entries else None
        return reconstruct_timeline(entries, successor)
