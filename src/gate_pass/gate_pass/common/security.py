"""Session helpers and role guards for route handlers.

The session holds ``user_id``, ``role`` and ``name`` after login. Guards raise
domain errors; the JSON error handler turns them into 401/403 responses.
"""

from __future__ import annotations

from functools import wraps

from flask import session

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from ..users.model import User


def start_session(user: User) -> None:
    session.clear()
    session.permanent = True
    session["user_id"] = user.user_id
    session["role"] = user.role.value
    session["name"] = user.name


def end_session() -> None:
    session.clear()


def current_user_id() -> int:
    if "user_id" not in session:
        raise AuthenticationError("Unauthorized")
    return int(session["user_id"])


def current_role() -> Role:
    try:
        return Role(session.get("role"))
    except ValueError:
        # stale or tampered session
        session.clear()
        raise AuthenticationError("Unauthorized")


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_user_id()
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = frozenset(roles)

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            current_user_id()
            if current_role() not in allowed:
                raise AuthorizationError("Forbidden")
            return view(*args, **kwargs)

        return wrapper

    return decorator
