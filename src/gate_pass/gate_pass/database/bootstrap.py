from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

logger = logging.getLogger(__name__)

# Accounts every deployment starts with; students self-register.
DEFAULT_STAFF = (
    ("warden", "warden123", "warden", "Dr. Smith (Warden)"),
    ("guard", "guard123", "guard", "Security Officer"),
)


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Schema files hold plain DDL, no ';' inside literals.
    for stmt in _strip_comments(sql).split(";"):
        stmt = stmt.strip()
        if stmt:
            yield stmt


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


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
    sql = Path(schema_path).read_text(encoding="utf-8")

    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("schema applied from %s", schema_path)


def ensure_default_staff(db_config: dict) -> None:
    """Insert the default warden and guard accounts if their usernames are free."""

    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        for username, password, role, name in DEFAULT_STAFF:
            cur.execute("SELECT user_id FROM users WHERE username=%s", (username,))
            if cur.fetchone():
                continue
            cur.execute(
                "INSERT INTO users (username, password_hash, role, name) VALUES (%s, %s, %s, %s)",
                (username, generate_password_hash(password), role, name),
            )
            logger.info("created default %s account %r", role, username)
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
