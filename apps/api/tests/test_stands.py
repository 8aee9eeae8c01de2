from __future__ import annotations

from fastapi.testclient import TestClient

from tests.factories import auth_headers, make_event, make_stand


def test_support_creates_stand_and_duplicate_name_is_refused(client: TestClient, db_session, support):
    event = make_event(db_session)

    resp = client.post(
        "/v1/stands",
        json={"event_id": event.id, "name": "A1", "size_sqm": 12, "price_eur": "450.00"},
        headers=auth_headers(support),
    )
    assert resp.status_code == 201
    assert resp.json()["price_eur"] == "450.00"
    assert resp.json()["vendor_id"] is None

    dup = client.post(
        "/v1/stands", json={"event_id": event.id, "name": "A1"}, headers=auth_headers(support)
    )
    assert dup.status_code == 422
    assert dup.json()["detail"]["code"] == "stand_name_taken"


def test_same_name_allowed_in_another_event(client: TestClient, db_session, support):
    first = make_event(db_session, name="First")
    second = make_event(db_session, name="Second")
    make_stand(db_session, first, "A1")

    resp = client.post(
        "/v1/stands", json={"event_id": second.id, "name": "A1"}, headers=auth_headers(support)
    )
    assert resp.status_code == 201


def test_seller_cannot_create_stand(client: TestClient, db_session, seller):
    event = make_event(db_session)
    resp = client.post(
        "/v1/stands", json={"event_id": event.id, "name": "B1"}, headers=auth_headers(seller)
    )
    assert resp.status_code == 403


def test_vendor_assigned_once_per_event(client: TestClient, db_session, support, vendor):
    event = make_event(db_session)
    a1 = make_stand(db_session, event, "A1", vendor=vendor)
    a2 = make_stand(db_session, event, "A2")

    resp = client.post(
        f"/v1/stands/{a2.id}/vendor", json={"vendor_id": vendor.id}, headers=auth_headers(support)
    )
    assert resp.status_code == 422
    assert resp.json()["detail"]["code"] == "vendor_has_stand"

    resp = client.post(
        f"/v1/stands/{a1.id}/vendor", json={"vendor_id": vendor.id}, headers=auth_headers(support)
    )
    assert resp.status_code == 422
    assert resp.json()["detail"]["code"] == "stand_already_assigned"


def test_assign_and_remove_vendor(client: TestClient, db_session, support, vendor):
    event = make_event(db_session)
    stand = make_stand(db_session, event)

    resp = client.post(
        f"/v1/stands/{stand.id}/vendor", json={"vendor_id": vendor.id}, headers=auth_headers(support)
    )
    assert resp.status_code == 200
    assert resp.json()["vendor_id"] == vendor.id

    resp = client.delete(f"/v1/stands/{stand.id}/vendor", headers=auth_headers(support))
    assert resp.status_code == 200
    assert resp.json()["vendor_id"] is None

    resp = client.delete(f"/v1/stands/{stand.id}/vendor", headers=auth_headers(support))
    assert resp.status_code == 422
    assert resp.json()["detail"]["code"] == "stand_not_assigned"


def test_stand_cannot_move_between_events(client: TestClient, db_session, support):
    event = make_event(db_session, name="First")
    other = make_event(db_session, name="Second")
    stand = make_stand(db_session, event)

    resp = client.patch(
        f"/v1/stands/{stand.id}", json={"event_id": other.id}, headers=auth_headers(support)
    )
    assert resp.status_code == 422
    assert "event_id" in resp.json()["detail"]["errors"]


def test_delete_refused_while_vendor_assigned(client: TestClient, db_session, admin, vendor):
    event = make_event(db_session)
    taken = make_stand(db_session, event, "A1", vendor=vendor)
    free = make_stand(db_session, event, "A2")

    resp = client.delete(f"/v1/stands/{taken.id}", headers=auth_headers(admin))
    assert resp.status_code == 422
    assert resp.json()["detail"]["code"] == "stand_has_vendor"

    resp = client.delete(f"/v1/stands/{free.id}", headers=auth_headers(admin))
    assert resp.status_code == 204


def test_support_cannot_delete_stand(client: TestClient, db_session, support):
    stand = make_stand(db_session, make_event(db_session))
    resp = client.delete(f"/v1/stands/{stand.id}", headers=auth_headers(support))
    assert resp.status_code == 403


def test_vendor_roles_see_only_their_stands(client: TestClient, db_session, contact, vendor, other_vendor):
    event = make_event(db_session)
    own = make_stand(db_session, event, "A1", vendor=vendor)
    foreign = make_stand(db_session, event, "A2", vendor=other_vendor)
    make_stand(db_session, event, "A3")

    resp = client.get("/v1/stands", headers=auth_headers(contact))
    assert resp.status_code == 200
    assert [s["id"] for s in resp.json()["items"]] == [own.id]

    assert client.get(f"/v1/stands/{foreign.id}", headers=auth_headers(contact)).status_code == 404


def test_available_filter(client: TestClient, db_session, support, vendor):
    event = make_event(db_session)
    make_stand(db_session, event, "A1", vendor=vendor)
    make_stand(db_session, event, "A2")

    resp = client.get(
        "/v1/stands", params={"event_id": event.id, "available": "true"}, headers=auth_headers(support)
    )
    assert [s["name"] for s in resp.json()["items"]] == ["A2"]


def test_bulk_create_skips_existing_names(client: TestClient, db_session, support):
    event = make_event(db_session)
    make_stand(db_session, event, "B2")

    resp = client.post(
        "/v1/stands/bulk",
        json={"event_id": event.id, "prefix": "B", "start": 1, "end": 4},
        headers=auth_headers(support),
    )
    assert resp.status_code == 201
    assert resp.json() == {"created": ["B1", "B3", "B4"], "skipped": ["B2"]}


def test_bulk_create_rejects_inverted_range(client: TestClient, db_session, support):
    event = make_event(db_session)
    resp = client.post(
        "/v1/stands/bulk",
        json={"event_id": event.id, "prefix": "C", "start": 5, "end": 2},
        headers=auth_headers(support),
    )
    assert resp.status_code == 422
