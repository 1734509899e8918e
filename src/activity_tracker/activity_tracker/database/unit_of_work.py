from __future__ import annotations

from typing import ContextManager, Optional, Protocol

from ..attendance.repository import AttendanceRepository
from ..sessions.repository import SessionRepository


class UnitOfWork(Protocol):
    """Repositories that share one transaction."""

    sessions: SessionRepository
    attendance: AttendanceRepository


class TransactionManager(Protocol):
    def transaction(self, *, lock_user_id: Optional[int] = None, read_only: bool = False) -> ContextManager[UnitOfWork]:
        """Open a unit of work.

        ``lock_user_id`` serialises the block against every other transaction
        locking the same user; use it for all ledger mutations. Changes are
        committed when the block exits normally and discarded if it raises.
        """

        raise NotImplementedError
