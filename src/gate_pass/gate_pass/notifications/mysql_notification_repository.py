from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Notification
from .repository import NotificationRepository


def _row_to_notification(r: dict) -> Notification:
    return Notification(
        notification_id=int(r["notification_id"]),
        user_id=int(r["user_id"]),
        message=r["message"],
        is_read=bool(r["is_read"]),
        created_at=r.get("created_at"),
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, user_id: int, message: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO notifications(user_id, message, is_read) VALUES(%s,%s,0)",
                (int(user_id), message),
            )
            return int(cur.lastrowid)

    def get_by_id(self, notification_id: int) -> Optional[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT notification_id, user_id, message, is_read, created_at
                FROM notifications
                WHERE notification_id=%s
                """,
                (int(notification_id),),
            )
            row = fetchone(cur)
            return _row_to_notification(row) if row else None

    def list_for_user(self, user_id: int) -> Sequence[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT notification_id, user_id, message, is_read, created_at
                FROM notifications
                WHERE user_id=%s
                ORDER BY created_at DESC, notification_id DESC
                """,
                (int(user_id),),
            )
            return [_row_to_notification(r) for r in fetchall(cur)]

    def mark_read(self, notification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE notifications SET is_read=1 WHERE notification_id=%s", (int(notification_id),))
            return cur.rowcount > 0
