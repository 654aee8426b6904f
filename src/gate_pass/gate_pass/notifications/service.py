from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Append-only per-user message log; only the read flag ever changes."""

    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def create(self, *, user_id: int, message: str) -> Notification:
        message = require_non_empty(message, "Message")
        notification_id = self._notifications.create(user_id=int(user_id), message=message)
        created = self._notifications.get_by_id(notification_id)
        if not created:
            raise NotFoundError("Notification not found")
        logger.debug("notification %s -> user %s", notification_id, user_id)
        return created

    def list_for_user(self, *, user_id: int) -> Sequence[Notification]:
        return self._notifications.list_for_user(int(user_id))

    def mark_read(self, *, notification_id: int, user_id: Optional[int] = None) -> Notification:
        """Set the read flag. Reading an already-read notification is a no-op.

        With ``user_id``, notifications of other users are reported as not found.
        """

        notification = self._notifications.get_by_id(int(notification_id))
        if not notification or (user_id is not None and notification.user_id != int(user_id)):
            raise NotFoundError("Notification not found")

        if not notification.is_read:
            self._notifications.mark_read(notification.notification_id)
            notification = self._notifications.get_by_id(notification.notification_id) or notification
        return notification
