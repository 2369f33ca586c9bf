from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from tategaki import database
from tategaki.config import Settings
from tategaki.app_factory import create_admin_app, create_app

ADMIN_LOGIN_ID = "admin"
ADMIN_PASSWORD = "secret123"


@pytest.fixture()
def db(tmp_path: Path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    previous = database.engine
    database.bind_engine(engine)
    database.init_db()
    yield engine
    database.bind_engine(previous)
    engine.dispose()


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(
        database_url="sqlite://",
        production=False,
        log_level="WARNING",
        cors_allow_origins=["http://localhost:3000"],
        session_backend="database",
        session_secret="user-test-secret",
        user_session_ttl_seconds=3600,
        bcrypt_rounds=10,
        admin_session_secret="admin-test-secret",
        admin_login_id=ADMIN_LOGIN_ID,
        admin_login_password=ADMIN_PASSWORD,
        admin_session_ttl_seconds=3600,
        create_tables=False,
    )


@pytest.fixture()
def client(db, test_settings: Settings) -> TestClient:
    return TestClient(create_app(test_settings))


@pytest.fixture()
def signed_client(db, test_settings: Settings) -> TestClient:
    return TestClient(create_app(replace(test_settings, session_backend="signed")))


@pytest.fixture()
def admin_client(db, test_settings: Settings) -> TestClient:
    return TestClient(create_admin_app(test_settings))


def signup(client: TestClient, email: str = "a@b.com", password: str = "longenough1", **extra):
    return client.post(
        "/api/auth/login",
        json={"email": email, "password": password, "mode": "signup", **extra},
    )
