from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat_or_none


@dataclass(frozen=True)
class Notification:
    notification_id: int
    user_id: int
    message: str
    is_read: bool = False
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.notification_id,
            "userId": self.user_id,
            "message": self.message,
            "isRead": self.is_read,
            "createdAt": isoformat_or_none(self.created_at),
        }
