from __future__ import annotations

import os
import tempfile

import pytest
from fastapi.testclient import TestClient

# Settings are read at import time, so configure before importing the app.
_TEST_DB = os.path.join(tempfile.gettempdir(), "eventhall-test.db")
os.environ["DATABASE_URL"] = os.getenv("TEST_DATABASE_URL", f"sqlite+pysqlite:///{_TEST_DB}")
os.environ.setdefault("JWT_SECRET", "test_jwt_secret_32_chars_minimum")
os.environ.setdefault("ACCESS_TOKEN_TTL_SECONDS", "900")
os.environ.setdefault("ENV", "local")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "true")
os.environ.setdefault("CELERY_BROKER_URL", "memory://")
os.environ.setdefault("CELERY_RESULT_BACKEND", "cache+memory://")

from eventhall.db import SessionLocal, engine  # noqa: E402
from eventhall.main import app  # noqa: E402
from eventhall.models import Base, Role  # noqa: E402
from eventhall.services.roles_service import ensure_roles  # noqa: E402
from eventhall.worker.tasks import deliver_notification  # noqa: E402
from tests.factories import make_user, make_vendor  # noqa: E402


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def clean_db():
    # Fresh schema and role table for every test
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        ensure_roles(db)
        db.commit()
    finally:
        db.close()
    yield


@pytest.fixture
def outbox(monkeypatch) -> list[dict]:
    """Queued notifications, captured instead of handed to the worker."""
    sent: list[dict] = []

    def _delay(template_id, recipient, payload):
        sent.append({"template": template_id, "recipient": recipient, "payload": payload})

    monkeypatch.setattr(deliver_notification, "delay", _delay)
    return sent


@pytest.fixture
def admin(db_session):
    return make_user(db_session, "admin@example.com", Role.ADMIN, name="Admin")


@pytest.fixture
def support(db_session):
    return make_user(db_session, "support@example.com", Role.SUPPORT, name="Support")


@pytest.fixture
def vendor(db_session):
    return make_vendor(db_session, "Acme BV")


@pytest.fixture
def other_vendor(db_session):
    return make_vendor(db_session, "Globex NV")


@pytest.fixture
def seller(db_session, vendor):
    return make_user(db_session, "seller@acme.com", Role.VERKOPER, vendor=vendor, name="Seller")


@pytest.fixture
def contact(db_session, vendor):
    return make_user(
        db_session, "contact@acme.com", Role.CONTACTPERSOON, vendor=vendor, name="Contact"
    )


@pytest.fixture
def visitor(db_session):
    return make_user(db_session, "visitor@example.com", Role.USER, name="Visitor")
