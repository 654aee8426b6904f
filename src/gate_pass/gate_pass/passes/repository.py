from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import PassStatus
from .model import GatePass, NewPass, PassWithStudent


class PassRepository(Protocol):
    def create(self, *, user_id: int, new_pass: NewPass) -> int:
        """Insert a pending pass; raises DuplicateRequestError when the slot is taken."""

        raise NotImplementedError

    def get_by_id(self, pass_id: int) -> Optional[GatePass]:
        raise NotImplementedError

    def find_active_for_slot(self, *, user_id: int, out_date: date, out_time: str) -> Optional[GatePass]:
        """Pending or approved pass of the user for exactly this out date + out time."""

        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[GatePass]:
        """Newest first."""

        raise NotImplementedError

    def list_by_status(self, status: PassStatus, *, out_date: Optional[date] = None) -> Sequence[PassWithStudent]:
        """Newest first, joined with the owning student."""

        raise NotImplementedError

    def list_approved_valid_on(self, day: date) -> Sequence[PassWithStudent]:
        """Approved passes with out_date <= day <= in_date."""

        raise NotImplementedError

    def review(
        self,
        *,
        pass_id: int,
        status: PassStatus,
        warden_id: int,
        warden_note: Optional[str] = None,
    ) -> bool:
        """Move a pending pass to ``status``. False when the pass is not pending any more."""

        raise NotImplementedError
