from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from werkzeug.datastructures import FileStorage
from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import (
    optional_phone,
    optional_text,
    require_max_length,
    require_min_length,
    require_non_empty,
)
from ..core.constants import (
    MAX_BATCH_LENGTH,
    MAX_COURSE_LENGTH,
    MAX_NAME_LENGTH,
    MAX_ROOM_LENGTH,
    MAX_USERNAME_LENGTH,
    MIN_PASSWORD_LENGTH,
)
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ConflictError, NotFoundError, ValidationError
from .model import NewStudent, User
from .photos import PhotoStorage
from .repository import UserRepository

logger = logging.getLogger(__name__)

# compared against when the username is unknown so both paths cost one hash check
_DUMMY_PASSWORD_HASH = generate_password_hash("gate-pass-dummy-password")


def parse_role(value: Any) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise ValidationError("Invalid role")


class AuthService:
    """Use case: authenticate user (login) and resolve the session user."""

    def __init__(self, users: UserRepository):
        self._users = users

    def login(self, username: Any, password: Any, role: Any) -> User:
        username = require_non_empty(username, "Username")
        password = require_non_empty(password, "Password")
        wanted = parse_role(role)

        user = self._users.get_by_username(username)
        try:
            ok = check_password_hash(user.password_hash if user else _DUMMY_PASSWORD_HASH, password) and bool(user)
        except ValueError:
            # unparsable stored hash
            ok = False

        if not ok:
            logger.warning("failed login for %r", username)
            raise AuthenticationError("Incorrect username or password")

        if user.role != wanted:
            logger.warning("login for %r as %s refused, account role is %s", username, wanted.value, user.role.value)
            raise AuthorizationError(f"Not authorized as a {wanted.value}")

        logger.info("user %s logged in as %s", user.user_id, user.role.value)
        return user

    def get_current_user(self, user_id: Optional[int]) -> User:
        if user_id is None:
            raise AuthenticationError("Unauthorized")
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise AuthenticationError("Unauthorized")
        return user


class UserService:
    """Use case: student self-registration and profile photos."""

    def __init__(self, users: UserRepository, photos: PhotoStorage):
        self._users = users
        self._photos = photos

    @staticmethod
    def parse_registration(payload: Mapping[str, Any]) -> NewStudent:
        if payload.get("role") not in (None, "", Role.STUDENT.value):
            raise ValidationError("Only student accounts can be registered")

        return NewStudent(
            username=require_max_length(
                require_non_empty(payload.get("username"), "Username"), "Username", MAX_USERNAME_LENGTH
            ),
            password=require_min_length(payload.get("password"), "Password", MIN_PASSWORD_LENGTH),
            name=require_max_length(require_non_empty(payload.get("name"), "Name"), "Name", MAX_NAME_LENGTH),
            room_no=require_max_length(optional_text(payload.get("roomNo")), "Room number", MAX_ROOM_LENGTH),
            course=require_max_length(optional_text(payload.get("course")), "Course", MAX_COURSE_LENGTH),
            batch=require_max_length(optional_text(payload.get("batch")), "Batch", MAX_BATCH_LENGTH),
            phone_no=optional_phone(payload.get("phoneNo"), "Phone number"),
            parent_phone_no=optional_phone(payload.get("parentPhoneNo"), "Parent phone number"),
        )

    def register(self, payload: Mapping[str, Any]) -> User:
        data = self.parse_registration(payload)

        if self._users.get_by_username(data.username):
            raise ConflictError("Username already exists")

        user_id = self._users.create_user(
            username=data.username,
            password_hash=generate_password_hash(data.password),
            role=Role.STUDENT,
            name=data.name,
            room_no=data.room_no,
            course=data.course,
            batch=data.batch,
            phone_no=data.phone_no,
            parent_phone_no=data.parent_phone_no,
        )
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        logger.info("registered student %s (%r)", user.user_id, user.username)
        return user

    def update_profile_photo(self, *, user_id: int, upload: Optional[FileStorage]) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")

        url = self._photos.save(user.user_id, upload)
        try:
            stored = self._users.update_profile_photo(user.user_id, url)
        except Exception:
            self._photos.delete(url)
            raise
        if not stored:
            self._photos.delete(url)
            raise NotFoundError("User not found")

        self._photos.delete(user.profile_photo)
        updated = self._users.get_by_id(user.user_id)
        if not updated:
            raise NotFoundError("User not found")
        return updated
