from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from eventhall.auth.jwt import create_access_token
from eventhall.auth.password import hash_password
from eventhall.models import (
    Event,
    EventStatus,
    Role,
    Stand,
    SupportTicket,
    SupportTicketStatus,
    Ticket,
    TicketStatus,
    TicketType,
    User,
    Vendor,
)
from eventhall.models.ticket import compute_total
from eventhall.services.events_service import unique_slug
from eventhall.services.roles_service import replace_roles

PASSWORD = "StrongPass123"


def auth_headers(user_or_id) -> dict[str, str]:
    user_id = getattr(user_or_id, "id", user_or_id)
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


def in_days(days: float) -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=days)


def make_user(
    db,
    email: str,
    *roles: Role,
    vendor: Vendor | None = None,
    name: str = "Test User",
    password: str = PASSWORD,
) -> User:
    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        vendor_id=vendor.id if vendor else None,
    )
    db.add(user)
    replace_roles(db, user, roles or (Role.USER,))
    db.commit()
    db.refresh(user)
    return user


def make_vendor(db, company_name: str = "Acme BV", **fields) -> Vendor:
    slug = company_name.split()[0].lower()
    fields.setdefault("billing_email", f"billing@{slug}.com")
    vendor = Vendor(company_name=company_name, **fields)
    db.add(vendor)
    db.commit()
    db.refresh(vendor)
    return vendor


def make_event(
    db,
    name: str = "Spring Fair",
    status: EventStatus = EventStatus.DRAFT,
    capacity: int | None = None,
    starts_in_days: float = 10,
) -> Event:
    event = Event(
        name=name,
        slug=unique_slug(db, name),
        status=status,
        starts_at=in_days(starts_in_days),
        ends_at=in_days(starts_in_days + 1),
        capacity=capacity,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


def make_stand(db, event: Event, name: str = "A1", vendor: Vendor | None = None) -> Stand:
    stand = Stand(event_id=event.id, name=name, vendor_id=vendor.id if vendor else None)
    db.add(stand)
    db.commit()
    db.refresh(stand)
    return stand


def make_ticket(
    db,
    user: User,
    event: Event,
    quantity: int = 1,
    unit_price: str = "10.00",
    status: TicketStatus = TicketStatus.PENDING,
    type: TicketType = TicketType.REGULAR,
) -> Ticket:
    ticket = Ticket(
        user_id=user.id,
        event_id=event.id,
        type=type,
        quantity=quantity,
        unit_price=Decimal(unit_price),
        total_price=compute_total(quantity, unit_price),
        status=status,
    )
    db.add(ticket)
    db.commit()
    db.refresh(ticket)
    return ticket


def make_support_ticket(
    db,
    user: User,
    subject: str = "Power outlet broken",
    status: SupportTicketStatus = SupportTicketStatus.OPEN,
) -> SupportTicket:
    ticket = SupportTicket(
        user_id=user.id,
        vendor_id=user.vendor_id,
        subject=subject,
        description="The outlet at our stand does not work.",
        status=status,
    )
    db.add(ticket)
    db.commit()
    db.refresh(ticket)
    return ticket
