from __future__ import annotations

import logging
from datetime import date, time
from typing import Any, Mapping, Optional, Sequence

from itsdangerous import BadSignature, URLSafeSerializer

from ..common.datetime_utils import slot_start
from ..common.validators import optional_text, require_date, require_max_length, require_non_empty, require_phone
from ..core.constants import MAX_DESTINATION_LENGTH, MAX_SLOT_LENGTH, MAX_TEXT_LENGTH, QR_TOKEN_SALT
from ..core.enums import PassStatus, Role
from ..core.exceptions import (
    AuthorizationError,
    DuplicateRequestError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from ..notifications.service import NotificationService
from ..users.repository import UserRepository
from .model import GatePass, NewPass, PassWithStudent
from .repository import PassRepository

logger = logging.getLogger(__name__)

EXPORT_FIELDS = [
    "pass_id",
    "student_name",
    "username",
    "room_no",
    "out_date",
    "out_time",
    "in_date",
    "in_time",
    "destination",
    "reason",
    "contact_number",
    "parent_contact_no",
    "status",
    "warden_note",
]


# leading characters a spreadsheet treats as the start of a formula
_FORMULA_PREFIXES = ("=", "+", "-", "@", "\t", "\r")


def _csv_text(value: Optional[str]) -> str:
    if not value:
        return ""
    return "'" + value if value.startswith(_FORMULA_PREFIXES) else value


def parse_id(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} is invalid")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise ValidationError(f"{field_name} is invalid")


def parse_status(value: Any) -> PassStatus:
    try:
        return PassStatus(value)
    except ValueError:
        raise ValidationError("Invalid pass status")


def _slot_sort_key(item: PassWithStudent):
    start = slot_start(item.gate_pass.out_time)
    return (start is None, start or time.min, item.gate_pass.out_time, item.gate_pass.pass_id)


class PassService:
    """Gate pass workflow: request, review, gate verification."""

    def __init__(
        self,
        passes: PassRepository,
        users: UserRepository,
        notifications: NotificationService,
        *,
        token_secret: str,
    ):
        self._passes = passes
        self._users = users
        self._notifications = notifications
        self._tokens = URLSafeSerializer(token_secret, salt=QR_TOKEN_SALT)

    @staticmethod
    def parse_new_pass(payload: Mapping[str, Any]) -> NewPass:
        new_pass = NewPass(
            out_date=require_date(payload.get("outDate"), "Out date"),
            out_time=require_max_length(
                require_non_empty(payload.get("outTime"), "Out time"), "Out time", MAX_SLOT_LENGTH
            ),
            in_date=require_date(payload.get("inDate"), "In date"),
            in_time=require_max_length(require_non_empty(payload.get("inTime"), "In time"), "In time", MAX_SLOT_LENGTH),
            reason=require_max_length(require_non_empty(payload.get("reason"), "Reason"), "Reason", MAX_TEXT_LENGTH),
            destination=require_max_length(
                require_non_empty(payload.get("destination"), "Destination"), "Destination", MAX_DESTINATION_LENGTH
            ),
            contact_number=require_phone(payload.get("contactNumber"), "Contact number"),
            parent_contact_no=require_phone(payload.get("parentContactNo"), "Parent contact number"),
        )
        if new_pass.in_date < new_pass.out_date:
            raise ValidationError("In date cannot be before out date")
        return new_pass

    def create_pass(self, *, current_role: Role, student_id: int, payload: Mapping[str, Any]) -> GatePass:
        if current_role != Role.STUDENT:
            raise AuthorizationError("Only students can request a gate pass")

        student = self._users.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("User not found")

        new_pass = self.parse_new_pass(payload)

        existing = self._passes.find_active_for_slot(
            user_id=student.user_id,
            out_date=new_pass.out_date,
            out_time=new_pass.out_time,
        )
        if existing:
            raise DuplicateRequestError(
                "You already have a pass request for this date and time slot. "
                "Please select a different time slot."
            )

        pass_id = self._passes.create(user_id=student.user_id, new_pass=new_pass)
        created = self._passes.get_by_id(pass_id)
        if not created:
            raise NotFoundError("Pass not found")
        logger.info("student %s requested pass %s for %s %s", student.user_id, pass_id, new_pass.out_date, new_pass.out_time)

        for warden in self._users.list_by_role(Role.WARDEN):
            self._notifications.create(user_id=warden.user_id, message=f"New gate pass request from {student.name}")

        return created

    def list_for_student(self, *, student_id: int) -> Sequence[GatePass]:
        return self._passes.list_for_user(int(student_id))

    def list_by_status(self, *, status: Any, on_date: Optional[date] = None) -> Sequence[PassWithStudent]:
        """Passes in ``status`` with their students.

        Newest first; with ``on_date``, only passes leaving that day ordered by slot start.
        """

        wanted = parse_status(status)
        rows = self._passes.list_by_status(wanted, out_date=on_date)
        if on_date is None:
            return rows
        return sorted(rows, key=_slot_sort_key)

    def review_pass(
        self,
        *,
        current_role: Role,
        warden_id: int,
        pass_id: Any,
        decision: Any,
        note: Any = None,
    ) -> GatePass:
        if current_role != Role.WARDEN:
            raise AuthorizationError("Only wardens can review gate passes")

        pass_id = parse_id(pass_id, "Pass id")
        status = parse_status(decision)
        if not status.is_terminal:
            raise ValidationError("Decision must be approved or rejected")
        warden_note = require_max_length(optional_text(note), "Note", MAX_TEXT_LENGTH)

        current = self._passes.get_by_id(pass_id)
        if not current:
            raise NotFoundError("Pass not found")
        if current.status != PassStatus.PENDING:
            raise InvalidStateError("Pass is not in pending state")

        if not self._passes.review(pass_id=pass_id, status=status, warden_id=int(warden_id), warden_note=warden_note):
            # another warden got there first
            raise InvalidStateError("Pass is not in pending state")

        updated = self._passes.get_by_id(pass_id)
        if not updated:
            raise NotFoundError("Pass not found")
        logger.info("warden %s %s pass %s", warden_id, status.value, pass_id)

        message = f"Your gate pass request for {current.out_date.isoformat()} ({current.out_time}) has been {status.value}"
        if warden_note:
            message += f". Note: {warden_note}"
        self._notifications.create(user_id=current.user_id, message=message)
        return updated

    def find_for_gate(self, *, query: Any, on_date: date) -> Sequence[PassWithStudent]:
        """Approved passes valid on ``on_date`` whose student name contains
        ``query`` (case-insensitive) or whose username equals it."""

        needle = require_non_empty(query, "Search").lower()
        return [
            row
            for row in self._passes.list_approved_valid_on(on_date)
            if needle in row.student.name.lower() or needle == row.student.username.lower()
        ]

    def issue_gate_token(self, *, student_id: int, pass_id: int) -> str:
        gate_pass = self._passes.get_by_id(int(pass_id))
        if not gate_pass or gate_pass.user_id != int(student_id):
            raise NotFoundError("Pass not found")
        if gate_pass.status != PassStatus.APPROVED:
            raise InvalidStateError("Only approved passes have a gate code")
        return self._tokens.dumps({"p": gate_pass.pass_id, "u": gate_pass.user_id})

    def verify_gate_token(self, *, token: Any, on_date: date) -> PassWithStudent:
        raw = require_non_empty(token, "Pass code")
        try:
            claims = self._tokens.loads(raw)
        except BadSignature:
            logger.warning("rejected forged or corrupted gate code")
            raise ValidationError("Invalid pass code")

        gate_pass = self._passes.get_by_id(int(claims.get("p", 0)))
        if not gate_pass or gate_pass.user_id != int(claims.get("u", 0)):
            raise ValidationError("Invalid pass code")
        if not gate_pass.is_valid_on(on_date):
            raise InvalidStateError(f"No approved pass valid on {on_date.isoformat()}")

        student = self._users.get_by_id(gate_pass.user_id)
        if not student:
            raise NotFoundError("User not found")
        return PassWithStudent(gate_pass=gate_pass, student=student)

    def export_rows(self, *, status: Any, on_date: Optional[date] = None) -> list[dict]:
        out: list[dict] = []
        for row in self.list_by_status(status=status, on_date=on_date):
            p, s = row.gate_pass, row.student
            out.append(
                {
                    "pass_id": p.pass_id,
                    "student_name": _csv_text(s.name),
                    "username": _csv_text(s.username),
                    "room_no": _csv_text(s.room_no),
                    "out_date": p.out_date.isoformat(),
                    "out_time": _csv_text(p.out_time),
                    "in_date": p.in_date.isoformat(),
                    "in_time": _csv_text(p.in_time),
                    "destination": _csv_text(p.destination),
                    "reason": _csv_text(p.reason),
                    "contact_number": p.contact_number,
                    "parent_contact_no": p.parent_contact_no,
                    "status": p.status.value,
                    "warden_note": _csv_text(p.warden_note),
                }
            )
        return out
