from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..categories.service import CategoryResolver
from ..common.datetime_utils import elapsed_seconds, now_local
from ..core.constants import DEFAULT_MONITOR_HOURS, DEFAULT_MONITOR_LIMIT
from ..core.exceptions import InvalidTimeError, NoActiveSessionError, NotFoundError
from ..database.unit_of_work import TransactionManager
from ..users.service import AccessPolicy
from .model import MonitorRow, SessionEntry
from .repository import SessionRepository

logger = logging.getLogger(__name__)


def close_open_entry(sessions: SessionRepository, user_id: int, *, at: datetime, now: datetime) -> Optional[SessionEntry]:
    """Close the user's open entry at ``at``; no-op when nothing is open.

    Must be called inside a transaction that locks ``user_id``.
    """

    active = sessions.get_open_for_user(user_id)
    if not active:
        return None
    return sessions.close(
        entry_id=active.entry_id,
        end_time=at,
        duration_seconds=elapsed_seconds(active.start_time, at),
        now=now,
    )


class SessionService:
    """Use case: open, close and switch the single active entry of a user."""

    def __init__(self, tx: TransactionManager, categories: CategoryResolver, access: AccessPolicy):
        self._tx = tx
        self._categories = categories
        self._access = access

    def get_active(self, user_id: int) -> Optional[SessionEntry]:
        with self._tx.transaction(read_only=True) as uow:
            return uow.sessions.get_open_for_user(int(user_id))

    def switch(self, user_id: int, category_id: int, *, now: datetime | None = None) -> SessionEntry:
        now = now or now_local()
        user = self._access.require_active(user_id)
        category = self._categories.resolve(category_id)

        with self._tx.transaction(lock_user_id=user.user_id) as uow:
            closed = close_open_entry(uow.sessions, user.user_id, at=now, now=now)
            entry = uow.sessions.append(
                user_id=user.user_id,
                category_id=category.category_id,
                category_name_snapshot=category.name,
                start_time=now,
                now=now,
            )

        logger.info(
            "switch user=%s closed=%s opened=%s category=%r",
            user.user_id,
            closed.entry_id if closed else None,
            entry.entry_id,
            category.name,
        )
        return entry

    def stop(self, user_id: int, *, now: datetime | None = None) -> SessionEntry:
        now = now or now_local()
        user = self._access.require_active(user_id)

        with self._tx.transaction(lock_user_id=user.user_id) as uow:
            closed = close_open_entry(uow.sessions, user.user_id, at=now, now=now)
            if not closed:
                raise NoActiveSessionError("No active session to stop")

        logger.info("stop user=%s entry=%s duration=%ss", user.user_id, closed.entry_id, closed.duration_seconds)
        return closed

    def add_manual(self, user_id: int, category_id: int, start_time: datetime, *, now: datetime | None = None) -> SessionEntry:
        """Backfill an entry that started at ``start_time``.

        Stored closed with zero duration; its real length comes from the next
        entry at read time (see ``history.service.reconstruct_timeline``).
        """

        now = now or now_local()
        if start_time >= now:
            raise InvalidTimeError("Manual entries must start in the past")
        user = self._access.require_active(user_id)
        category = self._categories.resolve(category_id)

        with self._tx.transaction(lock_user_id=user.user_id) as uow:
            entry = uow.sessions.append(
                user_id=user.user_id,
                category_id=category.category_id,
                category_name_snapshot=category.name,
                start_time=start_time,
                end_time=start_time,
                duration_seconds=0,
                is_manual=True,
                now=now,
            )

        logger.info("manual entry user=%s entry=%s start=%s", user.user_id, entry.entry_id, start_time.isoformat())
        return entry

    def edit_category(
        self,
        entry_id: int,
        new_category_id: int,
        *,
        acting_user_id: int,
        now: datetime | None = None,
    ) -> SessionEntry:
        now = now or now_local()
        existing = self._get_entry(entry_id)
        self._access.require_owner_or_admin(acting_user_id=acting_user_id, owner_id=existing.user_id)
        category = self._categories.resolve(new_category_id)

        with self._tx.transaction(lock_user_id=existing.user_id) as uow:
            if not uow.sessions.get_by_id(existing.entry_id):
                raise NotFoundError("Entry not found")
            entry = uow.sessions.update_category(
                entry_id=existing.entry_id,
                category_id=category.category_id,
                category_name_snapshot=category.name,
                now=now,
            )

        logger.info("edit entry=%s by=%s category=%r", entry.entry_id, acting_user_id, category.name)
        return entry

    def delete(self, entry_id: int, *, acting_user_id: int) -> None:
        existing = self._get_entry(entry_id)
        self._access.require_owner_or_admin(acting_user_id=acting_user_id, owner_id=existing.user_id)

        with self._tx.transaction(lock_user_id=existing.user_id) as uow:
            if not uow.sessions.delete(existing.entry_id):
                raise NotFoundError("Entry not found")

        logger.info("delete entry=%s by=%s", existing.entry_id, acting_user_id)

    def monitor(
        self,
        *,
        acting_user_id: int,
        now: datetime | None = None,
        hours: int = DEFAULT_MONITOR_HOURS,
        limit: int = DEFAULT_MONITOR_LIMIT,
    ) -> Sequence[MonitorRow]:
        """Entries created in the last ``hours`` across all users (admin only)."""

        now = now or now_local()
        self._access.require_admin(acting_user_id)
        with self._tx.transaction(read_only=True) as uow:
            return uow.sessions.list_recent(since=now - timedelta(hours=hours), limit=limit)

    def _get_entry(self, entry_id: int) -> SessionEntry:
        with self._tx.transaction(read_only=True) as uow:
            entry = uow.sessions.get_by_id(int(entry_id))
        if not entry:
            raise NotFoundError("Entry not found")
        return entry
