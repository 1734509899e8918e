from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization checks."""

    ADMIN = "admin"
    STAFF = "staff"


class UserStatus(str, Enum):
    ACTIVE = "active"
    DISABLED = "disabled"
    DELETED = "deleted"


class EntryKind(str, Enum):
    """Legal combinations of the manual/edited flags on a session entry."""

    LIVE = "live"
    MANUAL = "manual"
    LIVE_EDITED = "live_edited"
    MANUAL_EDITED = "manual_edited"

    @classmethod
    def from_flags(cls, *, is_manual: bool, is_edited: bool) -> "EntryKind":
        if is_manual:
            return cls.MANUAL_EDITED if is_edited else cls.MANUAL
        return cls.LIVE_EDITED if is_edited else cls.LIVE


class Granularity(str, Enum):
    """Bucket size for time-series statistics."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class RangePreset(str, Enum):
    LAST_30_DAYS = "last_30_days"
    LAST_12_WEEKS = "last_12_weeks"
    LAST_12_MONTHS = "last_12_months"
    LAST_5_YEARS = "last_5_years"
