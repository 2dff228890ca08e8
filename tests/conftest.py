from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest

_TMP_DIR = Path(tempfile.mkdtemp(prefix="scoreboard-tests-"))

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["ENV"] = "test"
os.environ["DATA_DIR"] = str(_TMP_DIR)
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'test.db'}"
os.environ["ADMIN_EMAILS"] = "admin@example.com"
os.environ["LOG_LEVEL"] = "WARNING"

from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

from scoreboard.app import app  # noqa: E402
from scoreboard.core import engine  # noqa: E402
from scoreboard.core.security import hash_password  # noqa: E402
from scoreboard.models import User  # noqa: E402
from scoreboard.services.challenges import ensure_default_slots  # noqa: E402
from scoreboard.services.seed import seed_tracks  # noqa: E402
from tests.testkit import auth_headers, register  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_db():
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        seed_tracks(session)
        ensure_default_slots(session)
    yield


@pytest.fixture
def session():
    with Session(engine) as s:
        yield s


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def make_user(session):
    def _make(username: str, role: str = "user") -> User:
        user = User(
            username=username,
            email=f"{username}@example.com",
            password_hash=hash_password("secret1"),
            role=role,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def player(client):
    """Registered regular user: ``{"user": ..., "token": ..., "headers": ...}``."""

    data = register(client, "racer")
    data["headers"] = auth_headers(data["token"])
    return data


@pytest.fixture
def admin(client):
    data = register(client, "boss", email="admin@example.com")
    data["headers"] = auth_headers(data["token"])
    return data
