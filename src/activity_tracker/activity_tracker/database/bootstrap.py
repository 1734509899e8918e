from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

DEMO_USERS = [
    ("Administrator", "admin", "admin"),
    ("Demo Staff", "staff", "staff"),
]

DEMO_CATEGORIES = [
    ("Email/Chat", 1),
    ("Development", 2),
    ("Meeting", 3),
    ("Documentation", 4),
    ("Sales/Visit", 5),
    ("Phone", 6),
    ("Admin work", 7),
    ("Break", 8),
    ("Away", 9),
]


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a schema file on statement-terminating semicolons.

    Statements end with ``;`` at the end of a line; ``--`` comment lines are
    skipped. Good enough for the DDL shipped in ``database/schema.sql``.
    """

    buf: list[str] = []
    for line in sql.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("--"):
            continue
        buf.append(line)
        if stripped.endswith(";"):
            stmt = "\n".join(buf).strip().rstrip(";").strip()
            buf.clear()
            if stmt:
                yield stmt
    tail = "\n".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("schema applied from %s", schema_path)


def ensure_demo_data(db_config: dict) -> None:
    """Idempotently seed demo users and the default category list."""

    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor(dictionary=True)

        for full_name, username, role in DEMO_USERS:
            cur.execute(
                """
                INSERT INTO users (full_name, username, role, status)
                VALUES (%s, %s, %s, 'active')
                ON DUPLICATE KEY UPDATE full_name=VALUES(full_name), role=VALUES(role)
                """,
                (full_name, username, role),
            )

        for name, priority in DEMO_CATEGORIES:
            cur.execute("SELECT category_id FROM categories WHERE name=%s", (name,))
            if cur.fetchone():
                continue
            cur.execute(
                "INSERT INTO categories (name, priority, is_deleted) VALUES (%s, %s, 0)",
                (name, priority),
            )

        conn.commit()
    finally:
        conn.close()
    logger.info("demo users and categories ready")


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
