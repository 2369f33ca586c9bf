from __future__ import annotations

import logging

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select

from conftest import signup
from tategaki.app_factory import create_app
from tategaki.clock import now_ms
from tategaki.database import session_scope
from tategaki.models.session import SessionEntry
from tategaki.models.user import UserEntry
from tategaki.services.tokens import SessionPayload, TokenCodec
from tategaki.services.users import user_store

COOKIE = "tategaki_session"


def test_signup_then_login_and_conflict(client: TestClient) -> None:
    created = signup(client, displayName="Writer")
    client.cookies.clear()
    logged_in = client.post(
        "/api/auth/login", json={"email": "a@b.com", "password": "longenough1"}
    )
    conflict = signup(client, password="anotherpass1")

    assert created.status_code == 200, created.text
    assert created.json()["user"]["displayName"] == "Writer"
    assert "passwordHash" not in created.json()["user"]
    assert logged_in.status_code == 200
    assert logged_in.json()["user"]["email"] == "a@b.com"
    assert COOKIE in logged_in.headers["set-cookie"]
    assert conflict.status_code == 409


def test_login_with_wrong_password_sets_no_cookie(client: TestClient) -> None:
    signup(client)
    client.cookies.clear()

    wrong = client.post("/api/auth/login", json={"email": "a@b.com", "password": "wrongpass1"})
    unknown = client.post(
        "/api/auth/login", json={"email": "nobody@b.com", "password": "wrongpass1"}
    )

    assert wrong.status_code == 401
    assert unknown.status_code == 401
    assert wrong.json() == unknown.json()
    assert "set-cookie" not in wrong.headers


def test_login_rejects_malformed_input(client: TestClient) -> None:
    response = client.post("/api/auth/login", json={"email": "not-an-email", "password": "x"})

    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert {"email", "password"} <= fields


def test_signup_rejects_address_with_empty_labels(client: TestClient) -> None:
    response = signup(client, email="a..b@c..com")

    assert response.status_code == 400
    assert [error["field"] for error in response.json()["errors"]] == ["email"]
    assert "set-cookie" not in response.headers
    with session_scope() as session:
        assert session.execute(select(UserEntry)).first() is None


def test_signup_normalizes_email(client: TestClient) -> None:
    response = signup(client, email="  Writer@B.com ")

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "writer@b.com"


def test_session_introspection(client: TestClient) -> None:
    anonymous = client.get("/api/auth/session")
    login = signup(client)
    current = client.get("/api/auth/session")

    assert anonymous.json() == {"user": None}
    assert current.json() == {
        "user": login.json()["user"],
        "expiresAt": login.json()["expiresAt"],
    }


def test_logout_revokes_persisted_session(client: TestClient) -> None:
    signup(client)
    token = client.cookies.get(COOKIE)

    logout = client.post("/api/auth/logout")
    client.cookies.set(COOKIE, token)
    replay = client.get("/api/auth/session")
    guarded = client.get("/api/cloud/documents")

    assert logout.status_code == 200
    assert logout.json() == {"success": True}
    assert replay.status_code == 200
    assert replay.json() == {"user": None}
    assert guarded.status_code == 401
    with session_scope() as session:
        assert session.execute(select(SessionEntry)).first() is None


def test_logout_without_session_succeeds(client: TestClient) -> None:
    response = client.post("/api/auth/logout")

    assert response.status_code == 200
    assert response.json() == {"success": True}


def test_expired_persisted_session_is_unauthenticated(client: TestClient) -> None:
    user_id = signup(client).json()["user"]["id"]
    with session_scope() as session:
        session.add(SessionEntry(id="stale", user_id=user_id, expires_at=now_ms() - 1))
    client.cookies.clear()
    client.cookies.set(COOKIE, "stale")

    response = client.get("/api/auth/session")

    assert response.json() == {"user": None}


def test_signed_backend_round_trip(signed_client: TestClient) -> None:
    login = signup(signed_client)
    token = signed_client.cookies.get(COOKIE)

    session = signed_client.get("/api/auth/session")
    signed_client.post("/api/auth/logout")
    signed_client.cookies.set(COOKIE, token)
    replay = signed_client.get("/api/auth/session")

    assert "." in token
    assert session.json()["user"]["id"] == login.json()["user"]["id"]
    # Stateless tokens stay valid until expiry; logout only drops the cookie.
    assert replay.json()["user"]["id"] == login.json()["user"]["id"]


def test_signed_backend_rejects_expired_token(signed_client: TestClient) -> None:
    user_id = signup(signed_client).json()["user"]["id"]
    expired = TokenCodec("user-test-secret").encode(
        SessionPayload(subject_id=user_id, expires_at=now_ms() - 1)
    )
    signed_client.cookies.clear()
    signed_client.cookies.set(COOKIE, expired)

    assert signed_client.get("/api/auth/session").json() == {"user": None}


def test_store_failure_returns_generic_error(
    db, test_settings, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    def unavailable(email: str):
        raise RuntimeError("db down secret-detail")

    monkeypatch.setattr(user_store, "get_by_email", unavailable)
    client = TestClient(create_app(test_settings), raise_server_exceptions=False)

    with caplog.at_level(logging.ERROR, logger="tategaki"):
        response = client.post(
            "/api/auth/login", json={"email": "a@b.com", "password": "longenough1"}
        )

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}
    assert "secret-detail" not in response.text
    assert "set-cookie" not in response.headers
    assert any(record.exc_info for record in caplog.records)


def test_guarded_route_clears_stale_cookie(client: TestClient) -> None:
    client.cookies.set(COOKIE, "no-such-session")

    stale = client.get("/api/cloud/documents")
    client.cookies.clear()
    anonymous = client.get("/api/cloud/documents")

    assert stale.status_code == 401
    assert stale.json() == {"detail": "Authentication required"}
    cleared = stale.headers["set-cookie"]
    assert cleared.startswith(f"{COOKIE}=")
    assert "max-age=0" in cleared.lower()
    assert anonymous.status_code == 401
    assert "set-cookie" not in anonymous.headers
