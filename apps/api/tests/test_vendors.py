from __future__ import annotations

from fastapi.testclient import TestClient
from sqlalchemy import func, select

from eventhall.auth.password import verify_password
from eventhall.models import ContactPerson, Role, TicketStatus, User, Vendor, VendorStatus
from tests.factories import (
    auth_headers,
    make_event,
    make_stand,
    make_ticket,
    make_user,
    make_vendor,
)


def test_admin_creates_vendor_with_sales_account(client: TestClient, db_session, admin, outbox):
    resp = client.post(
        "/v1/vendors",
        json={
            "company_name": "Initech",
            "billing_email": "billing@initech.com",
            "user_email": "Rep@Initech.com",
            "user_name": "Peter",
            "user_password": "SalesPass123",
        },
        headers=auth_headers(admin),
    )
    assert resp.status_code == 201
    vendor_id = resp.json()["id"]

    user = db_session.scalar(select(User).where(User.email == "rep@initech.com"))
    assert user is not None
    assert user.vendor_id == vendor_id
    assert user.role_names == {Role.VERKOPER}
    assert verify_password("SalesPass123", user.password_hash)

    assert [m["template"] for m in outbox] == ["new_user_account"]
    assert outbox[0]["recipient"] == "rep@initech.com"
    assert outbox[0]["payload"]["password"] == "SalesPass123"


def test_existing_user_is_linked_not_duplicated(client: TestClient, db_session, admin, visitor, outbox):
    resp = client.post(
        "/v1/vendors",
        json={
            "company_name": "Hooli",
            "billing_email": "billing@hooli.com",
            "user_email": visitor.email,
        },
        headers=auth_headers(admin),
    )
    assert resp.status_code == 201

    db_session.expire_all()
    user = db_session.get(User, visitor.id)
    assert user.vendor_id == resp.json()["id"]
    assert user.role_names == {Role.USER, Role.VERKOPER}
    assert db_session.scalar(select(func.count()).select_from(User)) == 2
    assert outbox == []


def test_user_of_another_vendor_rolls_back_creation(client: TestClient, db_session, admin, seller):
    resp = client.post(
        "/v1/vendors",
        json={
            "company_name": "Umbrella",
            "billing_email": "billing@umbrella.com",
            "user_email": seller.email,
        },
        headers=auth_headers(admin),
    )
    assert resp.status_code == 422
    assert resp.json()["detail"]["code"] == "user_linked_to_other_vendor"
    assert db_session.scalar(select(Vendor).where(Vendor.company_name == "Umbrella")) is None


def test_seller_sees_only_own_vendor(client: TestClient, seller, vendor, other_vendor):
    resp = client.get("/v1/vendors", headers=auth_headers(seller))
    assert resp.status_code == 200
    assert [v["id"] for v in resp.json()["items"]] == [vendor.id]

    assert client.get(f"/v1/vendors/{other_vendor.id}", headers=auth_headers(seller)).status_code == 404
    assert client.get(f"/v1/vendors/{vendor.id}", headers=auth_headers(seller)).status_code == 200


def test_contact_person_role_cannot_list_vendors(client: TestClient, contact):
    assert client.get("/v1/vendors", headers=auth_headers(contact)).status_code == 403


def test_seller_cannot_edit_own_vendor(client: TestClient, seller, vendor):
    resp = client.patch(
        f"/v1/vendors/{vendor.id}", json={"company_name": "Renamed"}, headers=auth_headers(seller)
    )
    assert resp.status_code == 403


def test_list_filters(client: TestClient, db_session, support):
    with_stand = make_vendor(db_session, "Stark Industries")
    make_vendor(db_session, "Wayne Enterprises", status=VendorStatus.CONFIRMED)
    make_stand(db_session, make_event(db_session), vendor=with_stand)

    resp = client.get("/v1/vendors", params={"with_stands": "true"}, headers=auth_headers(support))
    assert [v["company_name"] for v in resp.json()["items"]] == ["Stark Industries"]

    resp = client.get("/v1/vendors", params={"search": "wayne"}, headers=auth_headers(support))
    assert [v["company_name"] for v in resp.json()["items"]] == ["Wayne Enterprises"]


def test_delete_refused_with_stands_or_contacts(client: TestClient, db_session, admin, vendor, other_vendor):
    make_stand(db_session, make_event(db_session), vendor=vendor)
    db_session.add(ContactPerson(vendor_id=other_vendor.id, name="Jan", email="jan@globex.com"))
    db_session.commit()

    resp = client.delete(f"/v1/vendors/{vendor.id}", headers=auth_headers(admin))
    assert resp.status_code == 422
    assert resp.json()["detail"]["code"] == "vendor_has_stands"

    resp = client.delete(f"/v1/vendors/{other_vendor.id}", headers=auth_headers(admin))
    assert resp.status_code == 422
    assert resp.json()["detail"]["code"] == "vendor_has_contact_persons"


def test_delete_removes_or_unlinks_users(client: TestClient, db_session, admin, vendor):
    idle = make_user(db_session, "idle@acme.com", Role.VERKOPER, vendor=vendor)
    buyer = make_user(db_session, "buyer@acme.com", Role.VERKOPER, vendor=vendor)
    make_ticket(db_session, buyer, make_event(db_session), status=TicketStatus.PAID)
    idle_id, buyer_id, vendor_id = idle.id, buyer.id, vendor.id

    resp = client.delete(f"/v1/vendors/{vendor_id}", headers=auth_headers(admin))
    assert resp.status_code == 200
    assert resp.json() == {"id": vendor_id, "deleted_users": [idle_id], "unlinked_users": [buyer_id]}

    db_session.expire_all()
    assert db_session.get(User, idle_id) is None
    assert db_session.get(User, buyer_id).vendor_id is None
    assert db_session.get(Vendor, vendor_id) is None


def test_delete_keeps_last_admin_linked_to_vendor(client: TestClient, db_session, vendor):
    boss = make_user(db_session, "boss@acme.com", Role.ADMIN, vendor=vendor, name="Boss")
    boss_id, vendor_id = boss.id, vendor.id

    resp = client.delete(f"/v1/vendors/{vendor_id}", headers=auth_headers(boss_id))
    assert resp.status_code == 200
    assert resp.json() == {"id": vendor_id, "deleted_users": [], "unlinked_users": [boss_id]}

    db_session.expire_all()
    survivor = db_session.get(User, boss_id)
    assert survivor is not None
    assert survivor.vendor_id is None
    assert survivor.has_role(Role.ADMIN)


def test_delete_removes_one_of_two_linked_admins(client: TestClient, db_session, vendor):
    first = make_user(db_session, "first@acme.com", Role.ADMIN, vendor=vendor)
    second = make_user(db_session, "second@acme.com", Role.ADMIN, vendor=vendor)
    first_id, second_id = first.id, second.id

    resp = client.delete(f"/v1/vendors/{vendor.id}", headers=auth_headers(first_id))
    assert resp.status_code == 200
    body = resp.json()
    assert len(body["deleted_users"]) == 1
    assert len(body["unlinked_users"]) == 1
    assert set(body["deleted_users"] + body["unlinked_users"]) == {first_id, second_id}

    db_session.expire_all()
    admins = db_session.scalars(select(User).where(User.roles.any(name=Role.ADMIN.value))).all()
    assert len(admins) == 1
