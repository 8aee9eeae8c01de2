from __future__ import annotations

from dataclasses import replace

import pytest
from sqlalchemy import select

from eventhall import seed as seed_module
from eventhall.core.config import settings
from eventhall.models import Role, User
from eventhall.notifications import CONTACT_MESSAGE, NEW_USER_ACCOUNT, notify, render_notification
from eventhall.seed import seed, seed_admin
from eventhall.worker.tasks import deliver_notification


def test_new_account_mail_contains_credentials():
    subject, body = render_notification(
        NEW_USER_ACCOUNT,
        {"name": "Kim", "email": "kim@example.com", "password": "Secret123", "login_url": "http://x/login"},
    )
    assert subject == "Je account is aangemaakt"
    assert "Secret123" in body
    assert "http://x/login" in body


def test_unknown_template_is_rejected():
    with pytest.raises(ValueError):
        render_notification("nope", {})


def test_task_renders_and_reports():
    result = deliver_notification.run(
        CONTACT_MESSAGE,
        "office@example.com",
        {"name": "Eva", "email": "eva@example.com", "subject": "Hallo", "message": "Hoi"},
    )
    assert result == {"template": CONTACT_MESSAGE, "recipient": "office@example.com", "subject": "[Contact] Hallo"}


def test_notify_swallows_enqueue_failures(monkeypatch):
    def _broken(*args, **kwargs):
        raise ConnectionError("broker down")

    monkeypatch.setattr(deliver_notification, "delay", _broken)
    assert notify(CONTACT_MESSAGE, "office@example.com", {}) is False


def test_notify_queues(outbox):
    assert notify(NEW_USER_ACCOUNT, "kim@example.com", {"name": "Kim"}) is True
    assert outbox == [{"template": NEW_USER_ACCOUNT, "recipient": "kim@example.com", "payload": {"name": "Kim"}}]


def test_seed_is_idempotent(db_session, monkeypatch):
    monkeypatch.setattr(
        seed_module, "settings", replace(settings, admin_email="root@example.com", admin_password="RootPass123")
    )

    seed(db_session)
    seed(db_session)

    admins = db_session.scalars(select(User).where(User.email == "root@example.com")).all()
    assert len(admins) == 1
    assert admins[0].role_names == {Role.ADMIN}


def test_seed_admin_promotes_existing_user(db_session, visitor):
    user = seed_admin(db_session, visitor.email, "ignored-password")
    assert user.id == visitor.id
    assert user.has_role(Role.ADMIN)
