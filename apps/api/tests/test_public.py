from __future__ import annotations

from fastapi.testclient import TestClient

from eventhall.core.config import settings
from eventhall.models import EventStatus
from tests.factories import make_event


def test_public_listing_shows_published_events_only(client: TestClient, db_session):
    make_event(db_session, name="Hidden Draft")
    make_event(db_session, name="Past Fair", status=EventStatus.PUBLISHED, starts_in_days=-30)
    make_event(db_session, name="Summer Fair", status=EventStatus.PUBLISHED)

    resp = client.get("/v1/public/events")
    assert resp.status_code == 200
    assert [e["name"] for e in resp.json()] == ["Past Fair", "Summer Fair"]
    assert "id" not in resp.json()[0]

    upcoming = client.get("/v1/public/events", params={"upcoming": "true"})
    assert [e["name"] for e in upcoming.json()] == ["Summer Fair"]


def test_public_event_by_slug(client: TestClient, db_session):
    make_event(db_session, name="Winter Fair", status=EventStatus.PUBLISHED)
    make_event(db_session, name="Secret Fair")

    resp = client.get("/v1/public/events/winter-fair")
    assert resp.status_code == 200
    assert resp.json()["slug"] == "winter-fair"

    assert client.get("/v1/public/events/secret-fair").status_code == 404


def test_contact_form_queues_mail(client: TestClient, outbox):
    resp = client.post(
        "/v1/public/contact",
        json={"name": "Eva", "email": "eva@example.com", "subject": "Stand prices", "message": "Hoi!"},
    )
    assert resp.status_code == 202
    assert resp.json()["status"] == "accepted"
    assert outbox[0]["template"] == "contact_message"
    assert outbox[0]["recipient"] == settings.contact_recipient


def test_contact_form_validates_input(client: TestClient, outbox):
    resp = client.post(
        "/v1/public/contact",
        json={"name": "Eva", "email": "not-an-email", "subject": "", "message": "x"},
    )
    assert resp.status_code == 422
    errors = resp.json()["detail"]["errors"]
    assert "email" in errors
    assert "subject" in errors
    assert outbox == []
