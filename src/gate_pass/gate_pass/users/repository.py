from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

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
        """Insert a user and return its id; raises ConflictError on a taken username."""

        raise NotImplementedError

    def list_by_role(self, role: Role) -> Sequence[User]:
        raise NotImplementedError

    def update_profile_photo(self, user_id: int, profile_photo: Optional[str]) -> bool:
        raise NotImplementedError
