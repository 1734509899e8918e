from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import MonitorRow, SessionEntry


class SessionRepository(Protocol):
    """Session ledger: storage of timed entries, no business rules.

    Implementations are bound to one transaction (see ``TransactionManager``);
    the one-open-entry-per-user rule is enforced by the service using them and
    guarded again by the storage schema.
    """

    def get_by_id(self, entry_id: int) -> Optional[SessionEntry]:
        raise NotImplementedError

    def get_open_for_user(self, user_id: int) -> Optional[SessionEntry]:
        raise NotImplementedError

    def list_for_user_between(self, user_id: int, start: datetime, end: datetime) -> Sequence[SessionEntry]:
        """Entries with ``start <= start_time < end``, ``start_time`` ascending."""

        raise NotImplementedError

    def first_for_user_from(self, user_id: int, instant: datetime) -> Optional[SessionEntry]:
        """Earliest entry with ``start_time >= instant``."""

        raise NotImplementedError

    def list_for_users_between(self, user_ids: Sequence[int], start: datetime, end: datetime) -> Sequence[SessionEntry]:
        """Entries of several users with ``start <= start_time <= end``."""

        raise NotImplementedError

    def append(
        self,
        *,
        user_id: int,
        category_id: Optional[int],
        category_name_snapshot: str,
        start_time: datetime,
        end_time: Optional[datetime] = None,
        duration_seconds: Optional[int] = None,
        is_manual: bool = False,
        now: datetime,
    ) -> SessionEntry:
        raise NotImplementedError

    def close(self, *, entry_id: int, end_time: datetime, duration_seconds: int, now: datetime) -> SessionEntry:
        raise NotImplementedError

    def update_category(
        self,
        *,
        entry_id: int,
        category_id: int,
        category_name_snapshot: str,
        now: datetime,
    ) -> SessionEntry:
        """Rewrite category fields and mark the entry edited."""

        raise NotImplementedError

    def delete(self, entry_id: int) -> bool:
        raise NotImplementedError

    def list_recent(self, *, since: datetime, limit: int) -> Sequence[MonitorRow]:
        raise NotImplementedError

    def list_owned(
        self,
        *,
        user_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[MonitorRow]:
        """Entries joined with their owner, newest first; unset filters match everything."""

        raise NotImplementedError
