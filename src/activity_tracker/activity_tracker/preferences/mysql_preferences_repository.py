from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import UserPreferences
from .repository import PreferencesRepository


def _load(raw: Any) -> dict:
    if raw is None:
        return {}
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    if isinstance(raw, str):
        raw = json.loads(raw or "{}")
    return raw if isinstance(raw, dict) else {}


class MySQLPreferencesRepository(PreferencesRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user(self, user_id: int) -> Optional[UserPreferences]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id, preferences, updated_at FROM user_settings WHERE user_id=%s",
                (int(user_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return UserPreferences(
                user_id=int(r["user_id"]),
                preferences=_load(r.get("preferences")),
                updated_at=r.get("updated_at"),
            )

    def upsert(self, *, user_id: int, preferences: dict[str, Any], now: datetime) -> UserPreferences:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO user_settings(user_id, preferences, created_at, updated_at)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    preferences=VALUES(preferences),
                    updated_at=VALUES(updated_at)
                """,
                (int(user_id), json.dumps(preferences), now, now),
            )
        return UserPreferences(user_id=int(user_id), preferences=dict(preferences), updated_at=now)
