from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import mysql.connector
from mysql.connector import pooling

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = 5

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "activity_tracker")),
            pool_size=int(db_config.get("pool_size", 5)),
        )

    def connect_kwargs(self) -> dict[str, Any]:
        return {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "database": self.database,
            "autocommit": False,
        }


class DatabaseConnection:
    """Process-wide source of MySQL connections.

    Each call to ``connect`` hands out a connection for one transaction;
    closing it returns it to the pool. ``pool_size=0`` opens a fresh
    connection every time.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config
        self._pool: Optional[pooling.MySQLConnectionPool] = None

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        if self._config.pool_size <= 0:
            return mysql.connector.connect(**self._config.connect_kwargs())
        if self._pool is None:
            self._pool = pooling.MySQLConnectionPool(
                pool_name="activity_tracker",
                pool_size=self._config.pool_size,
                **self._config.connect_kwargs(),
            )
            logger.info("mysql pool ready size=%s db=%s", self._config.pool_size, self._config.database)
        return self._pool.get_connection()
