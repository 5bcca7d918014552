"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import os
import sys
from pathlib import Path

# Configure before any app module reads settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["MAILGUN_API_KEY"] = ""
os.environ["MAILGUN_DOMAIN"] = ""
os.environ["SENDGRID_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app.database import Base, SessionLocal, engine  # noqa: E402
from app.main import app  # noqa: E402
from app.models.user import User, UserRole  # noqa: E402
from app.services import notifications  # noqa: E402
from app.services.auth import get_password_hash  # noqa: E402


@pytest.fixture()
def db_session():
    """Fresh schema per test on the shared in-memory SQLite engine."""

    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db_session) -> TestClient:
    """Return a test client for the FastAPI app."""

    return TestClient(app)


@pytest.fixture()
def sent_emails(monkeypatch) -> list[tuple[str, str]]:
    """Capture verification emails instead of calling Mailgun."""

    sent: list[tuple[str, str]] = []

    def _fake_send(to_email: str, code: str) -> bool:
        sent.append((to_email, code))
        return True

    monkeypatch.setattr(notifications, "send_verification_email", _fake_send)
    return sent


@pytest.fixture()
def make_user(db_session):
    """Persist a user directly, bypassing the account service."""

    def _make(email: str, password: str = "1234", role: UserRole = UserRole.Client, *, verified: bool = False) -> User:
        user = User(
            email=email,
            hashed_password=get_password_hash(password),
            role=role,
            verified=verified,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make
