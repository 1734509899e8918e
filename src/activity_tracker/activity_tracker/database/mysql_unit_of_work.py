from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from ..attendance.mysql_attendance_repository import MySQLAttendanceRepository
from ..sessions.mysql_session_repository import MySQLSessionRepository
from .connection import DatabaseConnection
from .mysql_base import db_cursor
from .unit_of_work import TransactionManager


@dataclass(frozen=True)
class MySQLUnitOfWork:
    sessions: MySQLSessionRepository
    attendance: MySQLAttendanceRepository


class MySQLTransactionManager(TransactionManager):
    """Per-request transactions with a row lock on the owning user.

    ``SELECT ... FOR UPDATE`` on ``users`` makes concurrent transitions of the
    same user run one after another; the unique ``(user_id, open_marker)``
    index on ``work_sessions`` rejects a second open entry if anything bypasses
    the lock.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def transaction(self, *, lock_user_id: Optional[int] = None, read_only: bool = False) -> Iterator[MySQLUnitOfWork]:
        with db_cursor(self._conn_factory, read_only=read_only) as (_, cur):
            if lock_user_id is not None:
                cur.execute("SELECT user_id FROM users WHERE user_id=%s FOR UPDATE", (int(lock_user_id),))
                cur.fetchall()
            yield MySQLUnitOfWork(
                sessions=MySQLSessionRepository(cur),
                attendance=MySQLAttendanceRepository(cur),
            )
