from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import isoformat_or_none
from ..core.enums import PassStatus
from ..users.model import User


@dataclass(frozen=True)
class NewPass:
    """Validated pass request, before it gets an id and a status."""

    out_date: date
    out_time: str
    in_date: date
    in_time: str
    reason: str
    destination: str
    contact_number: str
    parent_contact_no: str


@dataclass(frozen=True)
class GatePass:
    pass_id: int
    user_id: int
    out_date: date
    out_time: str
    in_date: date
    in_time: str
    reason: str
    destination: str
    contact_number: str
    parent_contact_no: str
    status: PassStatus
    warden_id: Optional[int] = None
    warden_note: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_valid_on(self, day: date) -> bool:
        return self.status == PassStatus.APPROVED and self.out_date <= day <= self.in_date

    def to_dict(self) -> dict:
        return {
            "id": self.pass_id,
            "userId": self.user_id,
            "outDate": self.out_date.isoformat(),
            "outTime": self.out_time,
            "inDate": self.in_date.isoformat(),
            "inTime": self.in_time,
            "reason": self.reason,
            "destination": self.destination,
            "contactNumber": self.contact_number,
            "parentContactNo": self.parent_contact_no,
            "status": self.status.value,
            "wardenId": self.warden_id,
            "wardenNote": self.warden_note,
            "createdAt": isoformat_or_none(self.created_at),
            "updatedAt": isoformat_or_none(self.updated_at),
        }


@dataclass(frozen=True)
class PassWithStudent:
    """A pass joined with its owner's public profile (warden/guard views)."""

    gate_pass: GatePass
    student: User

    def to_dict(self) -> dict:
        out = self.gate_pass.to_dict()
        out["student"] = self.student.to_public_dict()
        return out
