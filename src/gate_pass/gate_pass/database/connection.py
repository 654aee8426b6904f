from __future__ import annotations

import logging
from dataclasses import dataclass

import mysql.connector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "gate_pass_db")),
        )


class DatabaseConnection:
    """DB connection factory owned by the application container.

    Short-lived connections are created per operation. The factory must be
    opened before use and refuses new connections once closed.
    """

    def __init__(self, config: DBConfig):
        self._config = config
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        """Check the database is reachable and start handing out connections."""
        if self._open:
            return
        probe = self._raw_connect()
        probe.close()
        self._open = True
        logger.info(
            "database ready %s@%s:%s/%s",
            self._config.user,
            self._config.host,
            self._config.port,
            self._config.database,
        )

    def close(self) -> None:
        if self._open:
            self._open = False
            logger.info("database connection factory closed")

    def connect(self):
        if not self._open:
            raise RuntimeError("DatabaseConnection is not open")
        return self._raw_connect()

    def _raw_connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
        )
