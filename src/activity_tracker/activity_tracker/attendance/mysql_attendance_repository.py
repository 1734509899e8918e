from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..database.mysql_base import fetchone
from .model import DailyAttendanceRecord
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    """``daily_attendance`` table, bound to the cursor of an open transaction."""

    def __init__(self, cur):
        self._cur = cur

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[DailyAttendanceRecord]:
        self._cur.execute(
            """
            SELECT attendance_id, user_id, work_date, has_left, left_at, is_fixed, created_at, updated_at
            FROM daily_attendance
            WHERE user_id=%s AND work_date=%s
            """,
            (int(user_id), work_date),
        )
        r = fetchone(self._cur)
        if not r:
            return None
        return DailyAttendanceRecord(
            attendance_id=int(r["attendance_id"]),
            user_id=int(r["user_id"]),
            work_date=r["work_date"],
            has_left=bool(r["has_left"]),
            left_at=r.get("left_at"),
            is_fixed=bool(r["is_fixed"]),
            created_at=r.get("created_at"),
            updated_at=r.get("updated_at"),
        )

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
        self._cur.execute(
            """
            INSERT INTO daily_attendance(user_id, work_date, has_left, left_at, is_fixed, created_at, updated_at)
            VALUES(%s,%s,%s,%s,%s,%s,%s)
            ON DUPLICATE KEY UPDATE
                has_left=VALUES(has_left),
                left_at=VALUES(left_at),
                is_fixed=VALUES(is_fixed),
                updated_at=VALUES(updated_at)
            """,
            (int(user_id), work_date, int(bool(has_left)), left_at, int(bool(is_fixed)), now, now),
        )
        return self.get_for_user_and_date(user_id, work_date)
