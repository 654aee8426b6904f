from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat_or_none
from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Plain data object, no DB access. ``password_hash`` never leaves the
    server: use :meth:`to_public_dict` for responses.
    """

    user_id: int
    username: str
    password_hash: str
    role: Role
    name: str
    profile_photo: Optional[str] = None
    room_no: Optional[str] = None
    course: Optional[str] = None
    batch: Optional[str] = None
    phone_no: Optional[str] = None
    parent_phone_no: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_public_dict(self) -> dict:
        return {
            "id": self.user_id,
            "username": self.username,
            "role": self.role.value,
            "name": self.name,
            "profilePhoto": self.profile_photo,
            "roomNo": self.room_no,
            "course": self.course,
            "batch": self.batch,
            "phoneNo": self.phone_no,
            "parentPhoneNo": self.parent_phone_no,
            "createdAt": isoformat_or_none(self.created_at),
        }


@dataclass(frozen=True)
class NewStudent:
    """Validated registration data."""

    username: str
    password: str
    name: str
    room_no: Optional[str] = None
    course: Optional[str] = None
    batch: Optional[str] = None
    phone_no: Optional[str] = None
    parent_phone_no: Optional[str] = None
