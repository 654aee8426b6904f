from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .database.connection import DBConfig, DatabaseConnection
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .passes.mysql_pass_repository import MySQLPassRepository
from .passes.repository import PassRepository
from .passes.service import PassService
from .users.mysql_user_repository import MySQLUserRepository
from .users.photos import PhotoStorage
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    passes_repo: PassRepository
    notifications_repo: NotificationRepository
    photo_storage: PhotoStorage

    auth_service: AuthService
    user_service: UserService
    notification_service: NotificationService
    pass_service: PassService

    conn: Optional[DatabaseConnection] = None

    def open(self) -> None:
        if self.conn is not None:
            self.conn.open()

    def close(self) -> None:
        if self.conn is not None:
            self.conn.close()


def wire_services(
    *,
    users_repo: UserRepository,
    passes_repo: PassRepository,
    notifications_repo: NotificationRepository,
    photo_storage: PhotoStorage,
    secret_key: str,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build services over any repository implementation (MySQL or in-memory)."""

    notification_service = NotificationService(notifications_repo)
    return Container(
        users_repo=users_repo,
        passes_repo=passes_repo,
        notifications_repo=notifications_repo,
        photo_storage=photo_storage,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo, photo_storage),
        notification_service=notification_service,
        pass_service=PassService(passes_repo, users_repo, notification_service, token_secret=secret_key),
        conn=conn,
    )


def build_container(*, db_config: dict, upload_folder: str | Path, secret_key: str) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    return wire_services(
        users_repo=MySQLUserRepository(conn),
        passes_repo=MySQLPassRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        photo_storage=PhotoStorage(upload_folder),
        secret_key=secret_key,
        conn=conn,
    )
