from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import PassStatus
from ..core.exceptions import DuplicateRequestError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, normalize_mysql_date
from ..users.mysql_user_repository import row_to_user
from .model import GatePass, NewPass, PassWithStudent
from .repository import PassRepository

_PASS_COLUMNS = """
    p.pass_id, p.user_id, p.out_date, p.out_time, p.in_date, p.in_time,
    p.reason, p.destination, p.contact_number, p.parent_contact_no,
    p.status, p.warden_id, p.warden_note, p.created_at, p.updated_at
"""

_STUDENT_COLUMNS = """
    u.user_id AS s_user_id, u.username AS s_username, u.role AS s_role, u.name AS s_name,
    u.profile_photo AS s_profile_photo, u.room_no AS s_room_no, u.course AS s_course,
    u.batch AS s_batch, u.phone_no AS s_phone_no, u.parent_phone_no AS s_parent_phone_no,
    u.created_at AS s_created_at
"""


def _row_to_pass(r: dict) -> GatePass:
    return GatePass(
        pass_id=int(r["pass_id"]),
        user_id=int(r["user_id"]),
        out_date=normalize_mysql_date(r["out_date"]),
        out_time=r["out_time"],
        in_date=normalize_mysql_date(r["in_date"]),
        in_time=r["in_time"],
        reason=r["reason"],
        destination=r["destination"],
        contact_number=r["contact_number"],
        parent_contact_no=r["parent_contact_no"],
        status=PassStatus(r["status"]),
        warden_id=int(r["warden_id"]) if r.get("warden_id") is not None else None,
        warden_note=r.get("warden_note"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _row_to_joined(r: dict) -> PassWithStudent:
    return PassWithStudent(gate_pass=_row_to_pass(r), student=row_to_user(r, prefix="s_"))


class MySQLPassRepository(PassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, user_id: int, new_pass: NewPass) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO passes(
                        user_id, out_date, out_time, in_date, in_time,
                        reason, destination, contact_number, parent_contact_no, status
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(user_id),
                        new_pass.out_date,
                        new_pass.out_time,
                        new_pass.in_date,
                        new_pass.in_time,
                        new_pass.reason,
                        new_pass.destination,
                        new_pass.contact_number,
                        new_pass.parent_contact_no,
                        PassStatus.PENDING.value,
                    ),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateRequestError(
                    "You already have a pass request for this date and time slot"
                ) from e
            raise

    def get_by_id(self, pass_id: int) -> Optional[GatePass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PASS_COLUMNS} FROM passes p WHERE p.pass_id=%s", (int(pass_id),))
            row = fetchone(cur)
            return _row_to_pass(row) if row else None

    def find_active_for_slot(self, *, user_id: int, out_date: date, out_time: str) -> Optional[GatePass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PASS_COLUMNS}
                FROM passes p
                WHERE p.user_id=%s AND p.out_date=%s AND p.out_time=%s
                  AND p.status IN (%s, %s)
                LIMIT 1
                """,
                (int(user_id), out_date, out_time, PassStatus.PENDING.value, PassStatus.APPROVED.value),
            )
            row = fetchone(cur)
            return _row_to_pass(row) if row else None

    def list_for_user(self, user_id: int) -> Sequence[GatePass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PASS_COLUMNS}
                FROM passes p
                WHERE p.user_id=%s
                ORDER BY p.created_at DESC, p.pass_id DESC
                """,
                (int(user_id),),
            )
            return [_row_to_pass(r) for r in fetchall(cur)]

    def list_by_status(self, status: PassStatus, *, out_date: Optional[date] = None) -> Sequence[PassWithStudent]:
        clauses = ["p.status=%s"]
        params: list[object] = [status.value]
        if out_date is not None:
            clauses.append("p.out_date=%s")
            params.append(out_date)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PASS_COLUMNS}, {_STUDENT_COLUMNS}
                FROM passes p
                JOIN users u ON u.user_id = p.user_id
                WHERE {where}
                ORDER BY p.created_at DESC, p.pass_id DESC
                """,
                tuple(params),
            )
            return [_row_to_joined(r) for r in fetchall(cur)]

    def list_approved_valid_on(self, day: date) -> Sequence[PassWithStudent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PASS_COLUMNS}, {_STUDENT_COLUMNS}
                FROM passes p
                JOIN users u ON u.user_id = p.user_id
                WHERE p.status=%s AND p.out_date <= %s AND p.in_date >= %s
                ORDER BY p.out_date, p.pass_id
                """,
                (PassStatus.APPROVED.value, day, day),
            )
            return [_row_to_joined(r) for r in fetchall(cur)]

    def review(
        self,
        *,
        pass_id: int,
        status: PassStatus,
        warden_id: int,
        warden_note: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE passes
                SET status=%s, warden_id=%s, warden_note=%s, updated_at=CURRENT_TIMESTAMP
                WHERE pass_id=%s AND status=%s
                """,
                (status.value, int(warden_id), warden_note, int(pass_id), PassStatus.PENDING.value),
            )
            return cur.rowcount > 0
