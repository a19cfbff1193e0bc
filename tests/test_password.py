"""
Tests for the shared password.
"""
from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi import status
from sqlalchemy import func, select

from app.core.config import settings
from app.models.credential import Credential
from app.services.credential_service import (
    CredentialService,
    check_password_strength,
    hash_password,
)


def _verify(client, password):
    response = client.post("/api/v1/password/verify", json={"password": password})
    assert response.status_code == status.HTTP_200_OK
    return response.json()["valid"]


def _update(client, old, new):
    response = client.post("/api/v1/password/update", json={"old_password": old, "new_password": new})
    assert response.status_code == status.HTTP_200_OK
    return response.json()


def test_default_password_is_valid_on_first_access(client, db_session):
    assert _verify(client, "admin") is True
    assert db_session.execute(select(func.count()).select_from(Credential)).scalar_one() == 1


def test_wrong_and_empty_passwords_are_invalid(client):
    assert _verify(client, "wrong") is False
    assert _verify(client, "") is False
    assert _verify(client, None) is False


def test_password_is_stored_hashed(client, db_session):
    _verify(client, "admin")

    stored = db_session.execute(select(Credential.value)).scalar_one()
    assert stored != "admin"
    assert stored == hash_password("admin")


def test_update_password(client):
    result = _update(client, "admin", "s3cret")

    assert result == {"success": True, "message": "Password updated successfully."}
    assert _verify(client, "s3cret") is True
    assert _verify(client, "admin") is False


def test_update_with_wrong_old_password(client):
    result = _update(client, "nope", "s3cret")

    assert result == {"success": False, "message": "The old password is not correct."}
    assert _verify(client, "admin") is True


@pytest.mark.parametrize("old,new", [("", "s3cret"), ("admin", ""), (None, "s3cret"), ("admin", None)])
def test_update_requires_both_passwords(client, old, new):
    result = _update(client, old, new)

    assert result == {"success": False, "message": "Both old and new passwords are required."}


def test_update_rejects_short_password(client):
    result = _update(client, "admin", "abc")

    assert result["success"] is False
    assert result["message"] == "New password must be at least 4 characters long."
    assert _verify(client, "admin") is True


def test_update_with_missing_fields_in_body(client):
    response = client.post("/api/v1/password/update", json={})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["success"] is False


@pytest.mark.parametrize("password,message", [
    ("abcd1!", "New password must contain at least one uppercase letter."),
    ("ABCD1!", "New password must contain at least one lowercase letter."),
    ("Abcde!", "New password must contain at least one digit."),
    ("Abcde1", "New password must contain at least one symbol."),
    ("Abcd1!", None),
])
def test_complexity_policy(monkeypatch, password, message):
    monkeypatch.setattr(settings, "PASSWORD_REQUIRE_COMPLEXITY", True)

    assert check_password_strength(password) == message


def test_complexity_policy_off_by_default():
    assert check_password_strength("aaaa") is None


def test_concurrent_first_access_creates_one_row(session_factory):
    def first_verify(_):
        db = session_factory()
        try:
            return CredentialService(db).verify("admin")
        finally:
            db.close()

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(first_verify, range(8)))

    assert all(results)
    db = session_factory()
    try:
        assert db.execute(select(func.count()).select_from(Credential)).scalar_one() == 1
    finally:
        db.close()


def test_ensure_default_does_not_overwrite_changed_password(db_session):
    service = CredentialService(db_session)
    service.ensure_default()
    assert service.update("admin", "changed").success is True

    assert service.ensure_default() == hash_password("changed")
