from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta

import pytest
from werkzeug.security import generate_password_hash

from gate_pass.container import wire_services
from gate_pass.core.enums import PassStatus, Role
from gate_pass.core.exceptions import ConflictError, DuplicateRequestError
from gate_pass.main import create_app
from gate_pass.notifications.model import Notification
from gate_pass.passes.model import GatePass, NewPass, PassWithStudent
from gate_pass.users.model import User
from gate_pass.users.photos import PhotoStorage


class FakeClock:
    """Strictly increasing timestamps so newest-first ordering is deterministic."""

    def __init__(self):
        self._now = datetime(2024, 5, 1, 8, 0, 0)

    def tick(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now


class InMemoryUsers:
    def __init__(self, clock: FakeClock):
        self._clock = clock
        self._next_id = 1
        self._rows: dict[int, User] = {}

    def get_by_id(self, user_id):
        return self._rows.get(int(user_id))

    def get_by_username(self, username):
        return next((u for u in self._rows.values() if u.username == username), None)

    def create_user(self, *, username, password_hash, role, name, room_no=None, course=None, batch=None,
                    phone_no=None, parent_phone_no=None):
        if self.get_by_username(username):
            raise ConflictError("Username already exists")
        uid = self._next_id
        self._next_id += 1
        self._rows[uid] = User(
            user_id=uid,
            username=username,
            password_hash=password_hash,
            role=role,
            name=name,
            room_no=room_no,
            course=course,
            batch=batch,
            phone_no=phone_no,
            parent_phone_no=parent_phone_no,
            created_at=self._clock.tick(),
        )
        return uid

    def list_by_role(self, role):
        return [u for _, u in sorted(self._rows.items()) if u.role == role]

    def update_profile_photo(self, user_id, profile_photo):
        user = self._rows.get(int(user_id))
        if not user:
            return False
        self._rows[user.user_id] = replace(user, profile_photo=profile_photo)
        return True

    def count(self) -> int:
        return len(self._rows)

    def add(self, username: str, password: str, role: Role, name: str, **extra) -> User:
        uid = self.create_user(
            username=username,
            password_hash=generate_password_hash(password),
            role=role,
            name=name,
            **extra,
        )
        return self._rows[uid]


class InMemoryPasses:
    def __init__(self, users: InMemoryUsers, clock: FakeClock):
        self._users = users
        self._clock = clock
        self._next_id = 1
        self._rows: dict[int, GatePass] = {}

    def _newest_first(self, items):
        return sorted(items, key=lambda p: (p.created_at, p.pass_id), reverse=True)

    def _join(self, items):
        return [PassWithStudent(gate_pass=p, student=self._users.get_by_id(p.user_id)) for p in items]

    def create(self, *, user_id, new_pass: NewPass):
        if self.find_active_for_slot(user_id=user_id, out_date=new_pass.out_date, out_time=new_pass.out_time):
            raise DuplicateRequestError("You already have a pass request for this date and time slot")
        pid = self._next_id
        self._next_id += 1
        now = self._clock.tick()
        self._rows[pid] = GatePass(
            pass_id=pid,
            user_id=int(user_id),
            out_date=new_pass.out_date,
            out_time=new_pass.out_time,
            in_date=new_pass.in_date,
            in_time=new_pass.in_time,
            reason=new_pass.reason,
            destination=new_pass.destination,
            contact_number=new_pass.contact_number,
            parent_contact_no=new_pass.parent_contact_no,
            status=PassStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        return pid

    def get_by_id(self, pass_id):
        return self._rows.get(int(pass_id))

    def find_active_for_slot(self, *, user_id, out_date, out_time):
        return next(
            (
                p
                for p in self._rows.values()
                if p.user_id == int(user_id) and p.out_date == out_date and p.out_time == out_time
                and p.status.holds_slot
            ),
            None,
        )

    def list_for_user(self, user_id):
        return self._newest_first(p for p in self._rows.values() if p.user_id == int(user_id))

    def list_by_status(self, status, *, out_date=None):
        items = [p for p in self._rows.values() if p.status == status and (out_date is None or p.out_date == out_date)]
        return self._join(self._newest_first(items))

    def list_approved_valid_on(self, day):
        items = [p for p in self._rows.values() if p.is_valid_on(day)]
        return self._join(sorted(items, key=lambda p: (p.out_date, p.pass_id)))

    def review(self, *, pass_id, status, warden_id, warden_note=None):
        p = self._rows.get(int(pass_id))
        if not p or p.status != PassStatus.PENDING:
            return False
        self._rows[p.pass_id] = replace(
            p, status=status, warden_id=int(warden_id), warden_note=warden_note, updated_at=self._clock.tick()
        )
        return True

    def force_status(self, pass_id: int, status: PassStatus) -> None:
        self._rows[pass_id] = replace(self._rows[pass_id], status=status)


class InMemoryNotifications:
    def __init__(self, clock: FakeClock):
        self._clock = clock
        self._next_id = 1
        self._rows: dict[int, Notification] = {}
        self.mark_read_calls = 0

    def create(self, *, user_id, message):
        nid = self._next_id
        self._next_id += 1
        self._rows[nid] = Notification(
            notification_id=nid, user_id=int(user_id), message=message, created_at=self._clock.tick()
        )
        return nid

    def get_by_id(self, notification_id):
        return self._rows.get(int(notification_id))

    def list_for_user(self, user_id):
        items = [n for n in self._rows.values() if n.user_id == int(user_id)]
        return sorted(items, key=lambda n: (n.created_at, n.notification_id), reverse=True)

    def mark_read(self, notification_id):
        self.mark_read_calls += 1
        n = self._rows.get(int(notification_id))
        if not n:
            return False
        self._rows[n.notification_id] = replace(n, is_read=True)
        return True

    def for_user(self, user_id: int) -> list[Notification]:
        return [n for n in self._rows.values() if n.user_id == user_id]


def pass_payload(**overrides) -> dict:
    payload = {
        "outDate": "2024-05-01",
        "outTime": "9:00 AM - 10:00 AM",
        "inDate": "2024-05-01",
        "inTime": "6:00 PM",
        "reason": "Dentist appointment",
        "destination": "City Dental Clinic",
        "contactNumber": "9876543210",
        "parentContactNo": "9123456780",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def users_repo(clock):
    return InMemoryUsers(clock)


@pytest.fixture
def passes_repo(users_repo, clock):
    return InMemoryPasses(users_repo, clock)


@pytest.fixture
def notifications_repo(clock):
    return InMemoryNotifications(clock)


@pytest.fixture
def photo_storage(tmp_path):
    return PhotoStorage(tmp_path / "photos")


@pytest.fixture
def container(users_repo, passes_repo, notifications_repo, photo_storage):
    return wire_services(
        users_repo=users_repo,
        passes_repo=passes_repo,
        notifications_repo=notifications_repo,
        photo_storage=photo_storage,
        secret_key="test-secret",
    )


@pytest.fixture
def warden(users_repo):
    return users_repo.add("warden", "warden123", Role.WARDEN, "Dr. Smith (Warden)")


@pytest.fixture
def guard(users_repo):
    return users_repo.add("guard", "guard123", Role.GUARD, "Security Officer")


@pytest.fixture
def student(users_repo):
    return users_repo.add("asha", "secret123", Role.STUDENT, "Asha Rao", room_no="B-204")


@pytest.fixture
def app(container):
    app = create_app(container, settings_module="config.testing")
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(username: str, password: str, role: str):
        return client.post("/api/auth/login", json={"username": username, "password": password, "role": role})

    return _login


@pytest.fixture
def make_payload():
    return pass_payload
