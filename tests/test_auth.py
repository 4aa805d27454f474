from __future__ import annotations

import pytest

from timesheet_api.core.config import settings
from timesheet_api.core.errors import Unauthorized
from timesheet_api.domains.auth.permissions import (
    PERMISSION_MATRIX,
    Action,
    authorize,
    ensure_allowed,
)
from timesheet_api.domains.auth.service import sign_in

CALLBACK_SECRET = "callback-secret"


@pytest.fixture
def callback_secret(monkeypatch):
    monkeypatch.setattr(settings, "auth_callback_secret", CALLBACK_SECRET)
    return {"X-Auth-Callback-Secret": CALLBACK_SECRET}


def test_requests_without_token_are_unauthenticated(client):
    response = client.get("/auth/session")

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_malformed_authorization_header_rejected(client):
    response = client.get("/auth/session", headers={"Authorization": "Token abc"})

    assert response.status_code == 401


def test_first_sign_in_registers_developer_with_zero_rate(client, callback_secret):
    response = client.post(
        "/auth/sessions",
        json={"email": "new@example.com", "name": "New Person"},
        headers=callback_secret,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["role"] == "developer"
    assert body["user"]["hourly_rate"] == 0
    assert body["user"]["name"] == "New Person"

    session = client.get(
        "/auth/session", headers={"Authorization": f"Bearer {body['access_token']}"}
    )
    assert session.status_code == 200
    assert session.json()["email"] == "new@example.com"


def test_repeat_sign_in_reuses_existing_user(client, callback_secret, admin):
    response = client.post(
        "/auth/sessions", json={"email": "ADMIN@example.com"}, headers=callback_secret
    )

    assert response.status_code == 201
    assert response.json()["user"]["id"] == admin.id
    assert response.json()["user"]["role"] == "admin"


def test_sign_in_requires_callback_secret(client, callback_secret):
    missing = client.post("/auth/sessions", json={"email": "x@example.com"})
    wrong = client.post(
        "/auth/sessions",
        json={"email": "x@example.com"},
        headers={"X-Auth-Callback-Secret": "nope"},
    )

    assert missing.status_code == 401
    assert wrong.status_code == 401


def test_sign_in_disabled_without_configured_secret(client):
    response = client.post(
        "/auth/sessions",
        json={"email": "x@example.com"},
        headers={"X-Auth-Callback-Secret": "anything"},
    )

    assert response.status_code == 401


def test_sign_out_revokes_token(client, developer):
    response = client.delete("/auth/sessions", headers=developer.headers)
    assert response.status_code == 204

    after = client.get("/auth/session", headers=developer.headers)
    assert after.status_code == 401


def test_expired_session_rejected(client, db_session):
    _, session = sign_in(db_session, "late@example.com", ttl_hours=-1)
    token = session.session_token

    response = client.get("/auth/session", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["error"] == "Session expired"


class _Role:
    def __init__(self, role):
        self.role = role


@pytest.mark.parametrize(
    ("role", "action", "allowed"),
    [
        ("admin", Action.MANAGE_WEEKS, True),
        ("hr", Action.MANAGE_WEEKS, False),
        ("hr", Action.REVIEW_TASKS, True),
        ("developer", Action.REVIEW_TASKS, False),
        ("developer", Action.SUBMIT_TASKS, True),
        ("hr", Action.MANAGE_INVOICES, True),
        ("developer", Action.MANAGE_INVOICES, False),
        ("developer", Action.VIEW_INVOICES, True),
        ("hr", Action.MANAGE_SCHEDULES, False),
        ("hr", Action.MANAGE_USERS, False),
        ("hr", Action.VIEW_STATS, True),
    ],
)
def test_permission_matrix(role, action, allowed):
    assert authorize(_Role(role), action) is allowed


def test_every_action_has_an_entry():
    assert set(PERMISSION_MATRIX) == set(Action)


def test_unknown_role_is_denied():
    assert authorize(_Role(None), Action.SUBMIT_TASKS) is False
    with pytest.raises(Unauthorized):
        ensure_allowed(_Role("guest"), Action.VIEW_INVOICES)
