"""Pytest fixtures: per-test SQLite database, recording notifier, API helpers."""
import os

# Keep the app's own engine off the working directory during tests.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from eventrsvp.database import Base, get_db
from eventrsvp.main import app
from eventrsvp.services.images import LocalImageStore, get_image_store
from eventrsvp.services.notifications import get_notifier

# Import all models so they register with Base.metadata
from eventrsvp.models.user import User              # noqa: F401
from eventrsvp.models.event import Event            # noqa: F401
from eventrsvp.models.attendee import Attendee      # noqa: F401


class RecordingNotifier:
    """Collects sent emails instead of delivering them."""

    def __init__(self):
        self.sent = []

    def send(self, to, subject, html):
        self.sent.append({"to": to, "subject": subject, "html": html})


class FailingNotifier:
    def send(self, to, subject, html):
        raise RuntimeError("mail provider down")


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """Create a fresh SQLite file engine for each test."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db(session_factory):
    """Yield a database session, closed after the test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def notifier():
    return RecordingNotifier()


@pytest.fixture(scope="function")
def client(session_factory, notifier, tmp_path):
    """FastAPI TestClient with DB, notifier and image store overridden."""

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    upload_store = LocalImageStore(str(tmp_path / "uploads"))

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_image_store] = lambda: upload_store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers: drive the API and return response JSON
# ---------------------------------------------------------------------------
def register_user(client: TestClient, name: str = "Test User", email: str = None,
                  password: str = "s3cret-pass", role: str = None) -> dict:
    """POST /api/register and return {token, user}."""
    payload = {
        "name": name,
        "email": email or f"{name.lower().replace(' ', '.')}@example.com",
        "password": password,
    }
    if role is not None:
        payload["role"] = role
    resp = client.post("/api/register", json=payload)
    assert resp.status_code == 200, resp.text
    return resp.json()


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def event_payload(**overrides) -> dict:
    payload = {
        "title": "Launch Party",
        "description": "Product launch with drinks",
        "date": "2026-12-01T18:00:00Z",
        "maxAttendees": 10,
        "location": {"address": "1 Main St", "lat": 6.43, "lng": 3.45},
    }
    payload.update(overrides)
    return payload


def create_test_event(client: TestClient, **overrides) -> dict:
    """POST /api/events and return the created event."""
    resp = client.post("/api/events", json=event_payload(**overrides))
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


def rsvp(client: TestClient, event_id: str, token: str, status: str = "Going"):
    return client.post(
        f"/api/events/{event_id}/rsvp",
        json={"status": status},
        headers=auth_header(token),
    )
