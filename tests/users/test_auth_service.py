from __future__ import annotations

import pytest

from gate_pass.core.enums import Role
from gate_pass.core.exceptions import AuthenticationError, AuthorizationError, ConflictError, ValidationError


def _registration(**overrides):
    data = {
        "username": "meera",
        "password": "pa55word",
        "name": "Meera Nair",
        "roomNo": "A-101",
        "course": "B.Tech CSE",
        "batch": "2023",
        "phoneNo": "9876501234",
        "parentPhoneNo": "9876505678",
    }
    data.update(overrides)
    return data


def test_login_returns_user(container, student):
    user = container.auth_service.login("asha", "secret123", "student")
    assert user.user_id == student.user_id
    assert "password" not in user.to_public_dict()


def test_login_wrong_password_is_authentication_error(container, student):
    with pytest.raises(AuthenticationError):
        container.auth_service.login("asha", "wrong-pass", "student")


def test_login_unknown_user_is_authentication_error(container):
    with pytest.raises(AuthenticationError):
        container.auth_service.login("nobody", "whatever", "student")


def test_login_with_wrong_role_is_authorization_error(container, student):
    with pytest.raises(AuthorizationError) as exc:
        container.auth_service.login("asha", "secret123", "warden")
    assert "warden" in str(exc.value)


def test_login_with_unknown_role_is_validation_error(container, student):
    with pytest.raises(ValidationError):
        container.auth_service.login("asha", "secret123", "admin")


def test_current_user_requires_existing_user(container, student):
    assert container.auth_service.get_current_user(student.user_id).username == "asha"
    with pytest.raises(AuthenticationError):
        container.auth_service.get_current_user(None)
    with pytest.raises(AuthenticationError):
        container.auth_service.get_current_user(999)


def test_register_creates_student_with_hashed_password(container, users_repo):
    user = container.user_service.register(_registration())

    assert user.role == Role.STUDENT
    assert user.room_no == "A-101"
    assert user.password_hash != "pa55word"
    assert container.auth_service.login("meera", "pa55word", "student").user_id == user.user_id


def test_register_duplicate_username_creates_no_row(container, users_repo, student):
    before = users_repo.count()
    with pytest.raises(ConflictError):
        container.user_service.register(_registration(username="asha"))
    assert users_repo.count() == before


def test_register_cannot_pick_staff_role(container, users_repo):
    with pytest.raises(ValidationError):
        container.user_service.register(_registration(role="warden"))
    assert users_repo.count() == 0


def test_register_allows_missing_optional_fields(container):
    user = container.user_service.register({"username": "kiran", "password": "secret1", "name": "Kiran"})
    assert user.phone_no is None
    assert user.course is None


@pytest.mark.parametrize(
    "overrides",
    [
        {"username": ""},
        {"name": None},
        {"password": "123"},
        {"phoneNo": "12345"},
        {"parentPhoneNo": "not-a-phone"},
        {"username": "m" * 65},
        {"name": "N" * 121},
        {"roomNo": "R" * 33},
    ],
)
def test_register_validates_fields(container, users_repo, overrides):
    with pytest.raises(ValidationError):
        container.user_service.register(_registration(**overrides))
    assert users_repo.count() == 0


def test_unknown_username_still_checks_a_password_hash(container, monkeypatch):
    import gate_pass.users.service as user_service

    checked = []
    real_check = user_service.check_password_hash

    def spy(pwhash, password):
        checked.append(pwhash)
        return real_check(pwhash, password)

    monkeypatch.setattr(user_service, "check_password_hash", spy)

    with pytest.raises(AuthenticationError):
        container.auth_service.login("nobody", "gate-pass-dummy-password", "student")
    assert len(checked) == 1
