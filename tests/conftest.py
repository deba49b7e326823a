"""Shared fixtures: a temporary SQLite database and fake websocket transports."""

from __future__ import annotations

import json
import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

TEST_DB_PATH = Path(tempfile.gettempdir()) / "devquery_api_test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ["REALTIME_PING_INTERVAL_SECONDS"] = "3600"

from app.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from fastapi.testclient import TestClient  # noqa: E402

from app.infrastructure.database import Base, engine, initialize_database  # noqa: E402


class FakeTransport:
    """In-memory stand-in for a websocket that records every frame."""

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[dict] = []
        self.closed = False
        self.close_code: int | None = None

    async def send_text(self, data: str) -> None:
        if self.fail or self.closed:
            raise RuntimeError("transport is closed")
        self.sent.append(json.loads(data))

    async def close(self, code: int = 1000) -> None:
        self.closed = True
        self.close_code = code

    def events(self, event_type: str | None = None) -> list[dict]:
        if event_type is None:
            return list(self.sent)
        return [event for event in self.sent if event["type"] == event_type]


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def transport_factory():
    return FakeTransport


@pytest.fixture
def database():
    """Recreate every table around a test."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def client(database):
    from main import create_app

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(client):
    """Register an account and return ``(user_id, auth_headers)``."""

    def _make_user(username: str, *, role: str = "student", password: str = "secret123"):
        response = client.post(
            "/api/register",
            json={
                "username": username,
                "email": f"{username}@example.com",
                "password": password,
                "role": role,
            },
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return body["user"]["id"], {"Authorization": f"Bearer {body['access_token']}"}

    return _make_user
