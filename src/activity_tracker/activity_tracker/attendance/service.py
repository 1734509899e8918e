from __future__ import annotations

import logging
from datetime import date, datetime, timedelta

from ..common.datetime_utils import business_day_bounds, now_local, work_date_for
from ..core.constants import DEFAULT_BUSINESS_DAY_CUTOFF_HOUR
from ..core.exceptions import InvalidTimeError, NotFoundError
from ..database.unit_of_work import TransactionManager
from ..sessions.service import close_open_entry
from ..users.service import AccessPolicy
from .model import DailyAttendanceRecord, DailyStatus

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use case: leave for the day, resume, and retroactively fix past days.

    A record is keyed by the *business* date of an instant: with
    ``cutoff_hour=5`` anything before 05:00 still belongs to the previous day,
    so leaving at 01:30 closes yesterday's work day.
    """

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

    def work_date(self, instant: datetime) -> date:
        return work_date_for(instant, self._cutoff_hour)

    def leave(self, user_id: int, *, now: datetime | None = None) -> DailyAttendanceRecord:
        now = now or now_local()
        user = self._access.require_active(user_id)
        work_date = self.work_date(now)

        with self._tx.transaction(lock_user_id=user.user_id) as uow:
            closed = close_open_entry(uow.sessions, user.user_id, at=now, now=now)
            record = uow.attendance.upsert(
                user_id=user.user_id,
                work_date=work_date,
                has_left=True,
                left_at=now,
                is_fixed=False,
                now=now,
            )

        logger.info(
            "leave user=%s date=%s closed=%s",
            user.user_id,
            work_date.isoformat(),
            closed.entry_id if closed else None,
        )
        return record

    def resume(self, user_id: int, *, now: datetime | None = None) -> DailyAttendanceRecord:
        now = now or now_local()
        user = self._access.require_active(user_id)
        work_date = self.work_date(now)

        with self._tx.transaction(lock_user_id=user.user_id) as uow:
            existing = uow.attendance.get_for_user_and_date(user.user_id, work_date)
            if not existing:
                raise NotFoundError("No attendance record for today")
            record = uow.attendance.upsert(
                user_id=user.user_id,
                work_date=work_date,
                has_left=False,
                left_at=None,
                is_fixed=existing.is_fixed,
                now=now,
            )

        logger.info("resume user=%s date=%s", user.user_id, work_date.isoformat())
        return record

    def fix(
        self,
        user_id: int,
        target_date: date,
        leave_time: datetime,
        *,
        acting_user_id: int,
        now: datetime | None = None,
    ) -> DailyAttendanceRecord:
        now = now or now_local()
        self._access.require_owner_or_admin(acting_user_id=acting_user_id, owner_id=user_id)
        user = self._access.require_active(user_id)

        if target_date >= self.work_date(now):
            raise InvalidTimeError("Only past days can be fixed")
        if leave_time > now:
            raise InvalidTimeError("Leave time cannot be in the future")

        day_start, day_end = business_day_bounds(target_date, self._cutoff_hour)
        if leave_time < day_start:
            raise InvalidTimeError("Leave time is before the start of that day")

        with self._tx.transaction(lock_user_id=user.user_id) as uow:
            starts = [e.start_time for e in uow.sessions.list_for_user_between(user.user_id, day_start, day_end)]
            active = uow.sessions.get_open_for_user(user.user_id)
            dangling = active if active and active.start_time < day_end else None
            if dangling:
                starts.append(dangling.start_time)

            existing = uow.attendance.get_for_user_and_date(user.user_id, target_date)
            if not dangling and existing and existing.has_left:
                raise InvalidTimeError("That day already has a leave recorded and nothing left open")

            if starts and leave_time <= max(starts):
                raise InvalidTimeError("Leave time must be after the last activity of that day")

            if dangling:
                close_open_entry(uow.sessions, user.user_id, at=leave_time, now=now)
            record = uow.attendance.upsert(
                user_id=user.user_id,
                work_date=target_date,
                has_left=True,
                left_at=leave_time,
                is_fixed=True,
                now=now,
            )

        logger.info(
            "fix user=%s date=%s leave=%s by=%s closed=%s",
            user.user_id,
            target_date.isoformat(),
            leave_time.isoformat(),
            acting_user_id,
            dangling.entry_id if dangling else None,
        )
        return record

    def check_status(
        self,
        user_id: int,
        work_date: date | None = None,
        *,
        acting_user_id: int | None = None,
        now: datetime | None = None,
    ) -> DailyStatus:
        """Whether a day still has an open entry or no leave recorded.

        Defaults to the previous business day, the one a correction prompt
        is usually about. Read only.
        """

        if acting_user_id is not None and int(acting_user_id) != int(user_id):
            self._access.require_owner_or_admin(acting_user_id=acting_user_id, owner_id=user_id)

        now = now or now_local()
        if work_date is None:
            work_date = self.work_date(now) - timedelta(days=1)
        day_start, day_end = business_day_bounds(work_date, self._cutoff_hour)

        with self._tx.transaction(read_only=True) as uow:
            record = uow.attendance.get_for_user_and_date(int(user_id), work_date)
            entries = uow.sessions.list_for_user_between(int(user_id), day_start, day_end)
            active = uow.sessions.get_open_for_user(int(user_id))

        has_open_entry = bool(active and active.start_time < day_end)
        has_left = bool(record and record.has_left)
        return DailyStatus(
            user_id=int(user_id),
            work_date=work_date,
            has_left=has_left,
            has_open_entry=has_open_entry,
            needs_fix=has_open_entry or (bool(entries) and not has_left),
            is_fixed=bool(record and record.is_fixed),
        )

    def today_status(self, user_id: int, *, now: datetime | None = None) -> DailyStatus:
        now = now or now_local()
        return self.check_status(user_id, self.work_date(now), now=now)
