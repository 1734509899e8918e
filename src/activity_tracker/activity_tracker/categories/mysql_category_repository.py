from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Category
from .repository import CategoryRepository


class MySQLCategoryRepository(CategoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, category_id: int) -> Optional[Category]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT category_id, name, is_deleted FROM categories WHERE category_id=%s",
                (int(category_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Category(
                category_id=int(r["category_id"]),
                name=r["name"],
                is_deleted=bool(r["is_deleted"]),
            )
