from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..core.exceptions import ValidationError
from ..database.unit_of_work import TransactionManager
from ..sessions.model import MonitorRow
from ..users.service import AccessPolicy

logger = logging.getLogger(__name__)


class ExportService:
    """Use case: the raw ledger rows behind a work log download.

    Staff always get their own rows. Admins get one user's rows when a
    target is given and everybody's otherwise. Rows carry the snapshot
    category name and stored times, newest first; rendering them into a
    file is left to the caller.
    """

    def __init__(self, tx: TransactionManager, access: AccessPolicy):
        self._tx = tx
        self._access = access

    def export_rows(
        self,
        *,
        acting_user_id: int,
        target_user_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[MonitorRow]:
        if start and end and end < start:
            raise ValidationError("Range end must not be before range start")

        actor = self._access.require_active(acting_user_id)
        if target_user_id is None and not actor.is_admin:
            target_user_id = actor.user_id
        if target_user_id is not None:
            self._access.require_scope(actor.user_id, [target_user_id])

        with self._tx.transaction(read_only=True) as uow:
            rows = uow.sessions.list_owned(user_id=target_user_id, start=start, end=end)

        logger.info("export by=%s target=%s rows=%d", actor.user_id, target_user_id or "all", len(rows))
        return rows
