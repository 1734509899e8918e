from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol

from .model import DailyAttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[DailyAttendanceRecord]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        user_id: int,
        work_date: date,
        has_left: bool,
        left_at: Optional[datetime],
        is_fixed: bool,
        now: datetime,
    ) -> DailyAttendanceRecord:
        """Create the (user, date) record or overwrite its state."""

        raise NotImplementedError
