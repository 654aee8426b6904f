from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector

from ..core.enums import Role
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import User
from .repository import UserRepository

_COLUMNS = """
    user_id, username, password_hash, role, name, profile_photo,
    room_no, course, batch, phone_no, parent_phone_no, created_at
"""


def row_to_user(r: dict, *, prefix: str = "") -> User:
    return User(
        user_id=int(r[f"{prefix}user_id"]),
        username=r[f"{prefix}username"],
        password_hash=r.get(f"{prefix}password_hash") or "",
        role=Role(r[f"{prefix}role"]),
        name=r[f"{prefix}name"],
        profile_photo=r.get(f"{prefix}profile_photo"),
        room_no=r.get(f"{prefix}room_no"),
        course=r.get(f"{prefix}course"),
        batch=r.get(f"{prefix}batch"),
        phone_no=r.get(f"{prefix}phone_no"),
        parent_phone_no=r.get(f"{prefix}parent_phone_no"),
        created_at=r.get(f"{prefix}created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return row_to_user(row) if row else None

    def get_by_username(self, username: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE username=%s", (username,))
            row = fetchone(cur)
            return row_to_user(row) if row else None

    def create_user(
        self,
        *,
        username: str,
        password_hash: str,
        role: Role,
        name: str,
        room_no: Optional[str] = None,
        course: Optional[str] = None,
        batch: Optional[str] = None,
        phone_no: Optional[str] = None,
        parent_phone_no: Optional[str] = None,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(username, password_hash, role, name,
                                      room_no, course, batch, phone_no, parent_phone_no)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (username, password_hash, role.value, name, room_no, course, batch, phone_no, parent_phone_no),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError("Username already exists") from e
            raise

    def list_by_role(self, role: Role) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE role=%s ORDER BY user_id", (role.value,))
            return [row_to_user(r) for r in fetchall(cur)]

    def update_profile_photo(self, user_id: int, profile_photo: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET profile_photo=%s WHERE user_id=%s", (profile_photo, int(user_id)))
            return cur.rowcount > 0
