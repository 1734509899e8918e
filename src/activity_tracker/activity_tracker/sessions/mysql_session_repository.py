from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..database.mysql_base import fetchall, fetchone, in_clause
from .model import MonitorRow, SessionEntry
from .repository import SessionRepository


_COLUMNS = """
    ws.entry_id, ws.user_id, ws.category_id, ws.category_name_snapshot,
    ws.start_time, ws.end_time, ws.duration_seconds, ws.is_manual, ws.is_edited,
    ws.created_at, ws.updated_at
"""


def _row_to_entry(r: Dict[str, Any]) -> SessionEntry:
    duration = r.get("duration_seconds")
    return SessionEntry(
        entry_id=int(r["entry_id"]),
        user_id=int(r["user_id"]),
        category_id=int(r["category_id"]) if r.get("category_id") is not None else None,
        category_name_snapshot=r["category_name_snapshot"],
        start_time=r["start_time"],
        end_time=r.get("end_time"),
        duration_seconds=int(duration) if duration is not None else None,
        is_manual=bool(r.get("is_manual")),
        is_edited=bool(r.get("is_edited")),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _row_to_owned(r: Dict[str, Any]) -> MonitorRow:
    return MonitorRow(entry=_row_to_entry(r), full_name=r["full_name"], username=r["username"])


class MySQLSessionRepository(SessionRepository):
    """Ledger over the ``work_sessions`` table.

    Bound to the cursor of an open transaction: every statement issued through
    one instance commits or rolls back together.
    """

    def __init__(self, cur):
        self._cur = cur

    def get_by_id(self, entry_id: int) -> Optional[SessionEntry]:
        self._cur.execute(f"SELECT {_COLUMNS} FROM work_sessions ws WHERE ws.entry_id=%s", (int(entry_id),))
        r = fetchone(self._cur)
        return _row_to_entry(r) if r else None

    def get_open_for_user(self, user_id: int) -> Optional[SessionEntry]:
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM work_sessions ws WHERE ws.user_id=%s AND ws.end_time IS NULL",
            (int(user_id),),
        )
        r = fetchone(self._cur)
        return _row_to_entry(r) if r else None

    def list_for_user_between(self, user_id: int, start: datetime, end: datetime) -> Sequence[SessionEntry]:
        self._cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM work_sessions ws
            WHERE ws.user_id=%s AND ws.start_time >= %s AND ws.start_time < %s
            ORDER BY ws.start_time ASC, ws.entry_id ASC
            """,
            (int(user_id), start, end),
        )
        return [_row_to_entry(r) for r in fetchall(self._cur)]

    def first_for_user_from(self, user_id: int, instant: datetime) -> Optional[SessionEntry]:
        self._cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM work_sessions ws
            WHERE ws.user_id=%s AND ws.start_time >= %s
            ORDER BY ws.start_time ASC, ws.entry_id ASC
            LIMIT 1
            """,
            (int(user_id), instant),
        )
        r = fetchone(self._cur)
        return _row_to_entry(r) if r else None

    def list_for_users_between(self, user_ids: Sequence[int], start: datetime, end: datetime) -> Sequence[SessionEntry]:
        if not user_ids:
            return []
        ids = [int(u) for u in user_ids]
        self._cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM work_sessions ws
            WHERE ws.user_id IN ({in_clause(ids)}) AND ws.start_time BETWEEN %s AND %s
            ORDER BY ws.start_time ASC, ws.entry_id ASC
            """,
            (*ids, start, end),
        )
        return [_row_to_entry(r) for r in fetchall(self._cur)]

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
        self._cur.execute(
            """
            INSERT INTO work_sessions(
                user_id, category_id, category_name_snapshot, start_time, end_time,
                duration_seconds, is_manual, is_edited, created_at, updated_at
            )
            VALUES(%s,%s,%s,%s,%s,%s,%s,0,%s,%s)
            """,
            (
                int(user_id),
                category_id,
                category_name_snapshot,
                start_time,
                end_time,
                duration_seconds,
                int(bool(is_manual)),
                now,
                now,
            ),
        )
        return self.get_by_id(int(self._cur.lastrowid))

    def close(self, *, entry_id: int, end_time: datetime, duration_seconds: int, now: datetime) -> SessionEntry:
        self._cur.execute(
            """
            UPDATE work_sessions
            SET end_time=%s, duration_seconds=%s, updated_at=%s
            WHERE entry_id=%s AND end_time IS NULL
            """,
            (end_time, int(duration_seconds), now, int(entry_id)),
        )
        return self.get_by_id(entry_id)

    def update_category(
        self,
        *,
        entry_id: int,
        category_id: int,
        category_name_snapshot: str,
        now: datetime,
    ) -> SessionEntry:
        self._cur.execute(
            """
            UPDATE work_sessions
            SET category_id=%s, category_name_snapshot=%s, is_edited=1, updated_at=%s
            WHERE entry_id=%s
            """,
            (int(category_id), category_name_snapshot, now, int(entry_id)),
        )
        return self.get_by_id(entry_id)

    def delete(self, entry_id: int) -> bool:
        self._cur.execute("DELETE FROM work_sessions WHERE entry_id=%s", (int(entry_id),))
        return self._cur.rowcount > 0

    def list_recent(self, *, since: datetime, limit: int) -> Sequence[MonitorRow]:
        self._cur.execute(
            f"""
            SELECT {_COLUMNS}, u.full_name, u.username
            FROM work_sessions ws
            JOIN users u ON u.user_id = ws.user_id
            WHERE ws.created_at >= %s
            ORDER BY ws.start_time DESC, ws.entry_id DESC
            LIMIT %s
            """,
            (since, int(limit)),
        )
        return [_row_to_owned(r) for r in fetchall(self._cur)]

    def list_owned(
        self,
        *,
        user_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[MonitorRow]:
        where, params = [], []
        if user_id is not None:
            where.append("ws.user_id=%s")
            params.append(int(user_id))
        if start is not None:
            where.append("ws.start_time >= %s")
            params.append(start)
        if end is not None:
            where.append("ws.start_time <= %s")
            params.append(end)

        self._cur.execute(
            f"""
            SELECT {_COLUMNS}, u.full_name, u.username
            FROM work_sessions ws
            JOIN users u ON u.user_id = ws.user_id
            {"WHERE " + " AND ".join(where) if where else ""}
            ORDER BY ws.start_time DESC, ws.entry_id DESC
            """,
            tuple(params),
        )
        return [_row_to_owned(r) for r in fetchall(self._cur)]
