from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for route gating."""

    STUDENT = "student"
    WARDEN = "warden"
    GUARD = "guard"


class PassStatus(str, Enum):
    """Gate pass review state. PENDING is initial, the other two are terminal."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not PassStatus.PENDING

    @property
    def holds_slot(self) -> bool:
        return self in {PassStatus.PENDING, PassStatus.APPROVED}
