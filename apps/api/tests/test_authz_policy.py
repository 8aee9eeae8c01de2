from __future__ import annotations

from types import SimpleNamespace

import pytest
from sqlalchemy import select

from eventhall.auth.principal import Principal, principal_for
from eventhall.authz.policy import can
from eventhall.authz.resources import Action, Resource, resource_for
from eventhall.authz.scoping import Scope, scope_for, scoped_select
from eventhall.models import (
    ContactPerson,
    Event,
    EventStatus,
    Role,
    Stand,
    SupportTicket,
    SupportTicketStatus,
    Ticket,
    TicketStatus,
    User,
    Vendor,
)
from tests.factories import make_event, make_stand, make_support_ticket, make_ticket, make_user

ADMIN = Principal(user_id=1, roles=frozenset({Role.ADMIN}))
SUPPORT = Principal(user_id=2, roles=frozenset({Role.SUPPORT}))
SELLER = Principal(user_id=3, roles=frozenset({Role.VERKOPER}), vendor_id=10)
CONTACT = Principal(user_id=4, roles=frozenset({Role.CONTACTPERSOON}), vendor_id=10)
VISITOR = Principal(user_id=5, roles=frozenset({Role.USER}))
ANONYMOUS = Principal.anonymous()
ORPHAN_SELLER = Principal(user_id=6, roles=frozenset({Role.VERKOPER}))


def record(**fields):
    return SimpleNamespace(**fields)


@pytest.mark.parametrize(
    "principal, resource, allowed",
    [
        (ADMIN, Resource.USER, True),
        (SUPPORT, Resource.USER, True),
        (SELLER, Resource.USER, False),
        (SELLER, Resource.VENDOR, True),
        (CONTACT, Resource.VENDOR, False),
        (CONTACT, Resource.CONTACT_PERSON, False),
        (CONTACT, Resource.STAND, True),
        (CONTACT, Resource.EVENT, True),
        (VISITOR, Resource.EVENT, False),
        (VISITOR, Resource.TICKET, True),
        (VISITOR, Resource.SUPPORT_TICKET, True),
        (ANONYMOUS, Resource.TICKET, False),
        (ANONYMOUS, Resource.SUPPORT_TICKET, False),
        (ANONYMOUS, Resource.EVENT, False),
    ],
)
def test_view_any_role_gate(principal, resource, allowed):
    assert can(principal, Action.VIEW_ANY, resource) is allowed


def test_only_staff_create_stands_and_only_admin_creates_events():
    assert can(ADMIN, Action.CREATE, Resource.STAND)
    assert can(SUPPORT, Action.CREATE, Resource.STAND)
    assert not can(SELLER, Action.CREATE, Resource.STAND)

    assert can(ADMIN, Action.CREATE, Resource.EVENT)
    assert not can(SUPPORT, Action.CREATE, Resource.EVENT)
    assert not can(SUPPORT, Action.DELETE, Resource.STAND, record(vendor_id=None))


def test_vendor_scope_rules():
    assert scope_for(ADMIN, Resource.STAND) == Scope.everything()
    assert scope_for(SELLER, Resource.STAND).matches(record(vendor_id=10))
    assert not scope_for(SELLER, Resource.STAND).matches(record(vendor_id=11))
    assert scope_for(SELLER, Resource.VENDOR).matches(record(id=10))
    assert scope_for(CONTACT, Resource.VENDOR).is_empty


def test_vendor_role_without_vendor_sees_nothing():
    assert scope_for(ORPHAN_SELLER, Resource.STAND).is_empty
    assert scope_for(ORPHAN_SELLER, Resource.VENDOR).is_empty
    assert not can(ORPHAN_SELLER, Action.VIEW, Resource.STAND, record(vendor_id=None))


def test_event_view_follows_publication_for_vendor_roles():
    published = record(status=EventStatus.PUBLISHED)
    draft = record(status=EventStatus.DRAFT)

    assert can(CONTACT, Action.VIEW, Resource.EVENT, published)
    assert not can(CONTACT, Action.VIEW, Resource.EVENT, draft)
    assert can(SUPPORT, Action.VIEW, Resource.EVENT, draft)


def test_ticket_owner_may_edit_only_while_pending():
    own_pending = record(user_id=VISITOR.user_id, status=TicketStatus.PENDING)
    own_paid = record(user_id=VISITOR.user_id, status=TicketStatus.PAID)
    foreign = record(user_id=99, status=TicketStatus.PENDING)

    assert can(VISITOR, Action.EDIT, Resource.TICKET, own_pending)
    assert not can(VISITOR, Action.EDIT, Resource.TICKET, own_paid)
    assert not can(VISITOR, Action.VIEW, Resource.TICKET, foreign)
    assert can(SUPPORT, Action.EDIT, Resource.TICKET, own_paid)
    assert not can(VISITOR, Action.DELETE, Resource.TICKET, own_pending)


def test_support_ticket_vendor_visibility_and_edit_window():
    colleague_ticket = record(user_id=99, vendor_id=10, status=SupportTicketStatus.OPEN)
    own_resolved = record(user_id=CONTACT.user_id, vendor_id=10, status=SupportTicketStatus.RESOLVED)
    own_open = record(user_id=CONTACT.user_id, vendor_id=10, status=SupportTicketStatus.IN_PROGRESS)

    assert can(CONTACT, Action.VIEW, Resource.SUPPORT_TICKET, colleague_ticket)
    assert not can(CONTACT, Action.EDIT, Resource.SUPPORT_TICKET, colleague_ticket)
    assert can(CONTACT, Action.EDIT, Resource.SUPPORT_TICKET, own_open)
    assert not can(CONTACT, Action.EDIT, Resource.SUPPORT_TICKET, own_resolved)

    assert not can(VISITOR, Action.VIEW, Resource.SUPPORT_TICKET, colleague_ticket)


def test_record_actions_require_a_record():
    with pytest.raises(ValueError):
        can(ADMIN, Action.EDIT, Resource.EVENT)


def test_scope_rejects_null_conditions():
    with pytest.raises(ValueError):
        Scope.where(vendor_id=None)


def test_scope_union():
    combined = Scope.where(user_id=1).union(Scope.where(vendor_id=2))
    assert combined.matches(record(user_id=3, vendor_id=2))
    assert not combined.matches(record(user_id=3, vendor_id=4))
    assert Scope.nothing().union(Scope.everything()) == Scope.everything()


VISIBILITY_MODELS = [Event, Stand, Vendor, ContactPerson, Ticket, SupportTicket, User]
VISIBILITY_PRINCIPALS = ["admin", "support", "seller", "contact", "visitor", "orphan_seller", "no_roles", "anonymous"]


@pytest.fixture
def populated(db_session, admin, support, seller, contact, visitor, vendor, other_vendor):
    rival = make_user(db_session, "rival@globex.com", Role.VERKOPER, vendor=other_vendor)
    orphan = make_user(db_session, "orphan@acme.com", Role.VERKOPER)

    draft = make_event(db_session, name="Draft Fair")
    published = make_event(db_session, name="Open Fair", status=EventStatus.PUBLISHED)
    make_stand(db_session, published, "A1", vendor=vendor)
    make_stand(db_session, published, "B1", vendor=other_vendor)
    make_stand(db_session, draft, "C1")

    db_session.add_all(
        [
            ContactPerson(vendor_id=vendor.id, name="Anna", email="anna@acme.com"),
            ContactPerson(vendor_id=other_vendor.id, name="Bert", email="bert@globex.com"),
        ]
    )
    db_session.commit()

    for user in (visitor, seller, rival):
        make_ticket(db_session, user, published)
        make_support_ticket(db_session, user)
    make_support_ticket(db_session, contact)

    return {
        "admin": principal_for(admin),
        "support": principal_for(support),
        "seller": principal_for(seller),
        "contact": principal_for(contact),
        "visitor": principal_for(visitor),
        "orphan_seller": principal_for(orphan),
        "no_roles": Principal(user_id=visitor.id),
        "anonymous": Principal.anonymous(),
    }


@pytest.mark.parametrize("model", VISIBILITY_MODELS, ids=lambda m: m.__name__)
@pytest.mark.parametrize("who", VISIBILITY_PRINCIPALS)
def test_view_rule_matches_scoped_list(db_session, populated, model, who):
    principal = populated[who]
    resource = resource_for(model)

    everything = db_session.scalars(select(model)).all()
    viewable = {row.id for row in everything if can(principal, Action.VIEW, resource, row)}
    listed = {row.id for row in db_session.scalars(scoped_select(principal, model)).all()}

    assert viewable == listed
