from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Notification


class NotificationRepository(Protocol):
    def create(self, *, user_id: int, message: str) -> int:
        raise NotImplementedError

    def get_by_id(self, notification_id: int) -> Optional[Notification]:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[Notification]:
        """Newest first."""

        raise NotImplementedError

    def mark_read(self, notification_id: int) -> bool:
        raise NotImplementedError
