from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class DailyAttendanceRecord:
    """Domain entity: whether/when a user ended a work day.

    One row per (user, work date). ``is_fixed`` marks records written through
    the retroactive correction flow rather than the user's own leave action.
    """

    attendance_id: int
    user_id: int
    work_date: date
    has_left: bool
    left_at: Optional[datetime] = None
    is_fixed: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "date": self.work_date.isoformat(),
            "has_left": self.has_left,
            "left_at": self.left_at.isoformat() if self.left_at else None,
            "is_fixed": self.is_fixed,
        }


@dataclass(frozen=True)
class DailyStatus:
    """Read-model: does a work day still need a correction?"""

    user_id: int
    work_date: date
    has_left: bool
    has_open_entry: bool
    needs_fix: bool
    is_fixed: bool

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "date": self.work_date.isoformat(),
            "has_left": self.has_left,
            "has_open_entry": self.has_open_entry,
            "needs_fix": self.needs_fix,
            "is_fixed": self.is_fixed,
        }
