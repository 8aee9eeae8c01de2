from __future__ import annotations

import re
import unicodedata
from datetime import datetime
from decimal import Decimal
from typing import Any

import structlog
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from eventhall.api.v1.schemas.events import EventCreate, EventUpdate
from eventhall.auth.principal import Principal
from eventhall.authz.policy import authorize, load_authorized
from eventhall.authz.resources import Action, Resource
from eventhall.authz.scoping import get_scoped, scoped_select
from eventhall.models import Event, EventStatus, Stand, Ticket, TicketStatus
from eventhall.services.common import Page, as_utc, commit_or_conflict, like, paginate, utcnow
from eventhall.services.exceptions import (
    BusinessRuleError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

logger = structlog.get_logger()


def slugify(value: str) -> str:
    ascii_value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", ascii_value.lower()).strip("-")
    return slug or "event"


def unique_slug(db: Session, name: str, exclude_id: int | None = None) -> str:
    base_slug = slugify(name)
    candidate = base_slug
    counter = 1
    while True:
        stmt = select(Event.id).where(Event.slug == candidate)
        if exclude_id is not None:
            stmt = stmt.where(Event.id != exclude_id)
        if db.scalar(stmt) is None:
            return candidate
        candidate = f"{base_slug}-{counter}"
        counter += 1


def _stand_count(db: Session, event_id: Any) -> int:
    return int(db.scalar(select(func.count()).select_from(Stand).where(Stand.event_id == event_id)) or 0)


def _check_dates(starts_at: datetime | None, ends_at: datetime | None) -> None:
    starts_at, ends_at = as_utc(starts_at), as_utc(ends_at)
    if starts_at and ends_at and ends_at < starts_at:
        raise ValidationError("invalid_dates", "ends_at must be after starts_at", field="ends_at")


def list_events(
    db: Session,
    principal: Principal,
    *,
    status: EventStatus | None = None,
    search: str | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    page: int = 1,
    page_size: int = 25,
) -> Page[Event]:
    authorize(principal, Action.VIEW_ANY, Resource.EVENT)

    stmt = scoped_select(principal, Event)
    if status is not None:
        stmt = stmt.where(Event.status == status)
    if search:
        term = like(search)
        stmt = stmt.where(or_(Event.name.ilike(term), Event.description.ilike(term)))
    if date_from is not None:
        stmt = stmt.where(Event.starts_at >= as_utc(date_from))
    if date_to is not None:
        stmt = stmt.where(Event.ends_at <= as_utc(date_to))

    return paginate(db, stmt.order_by(Event.starts_at, Event.id), page, page_size)


def get_event(db: Session, principal: Principal, event_id: Any) -> Event:
    return load_authorized(db, principal, Event, event_id)


def create_event(db: Session, principal: Principal, payload: EventCreate) -> Event:
    authorize(principal, Action.CREATE, Resource.EVENT)
    _check_dates(payload.starts_at, payload.ends_at)

    if payload.status == EventStatus.PUBLISHED:
        # A brand-new event has no stands yet.
        raise BusinessRuleError("event_without_stands", "cannot publish event without stands")

    event = Event(
        name=payload.name,
        slug=unique_slug(db, payload.name),
        status=payload.status,
        starts_at=as_utc(payload.starts_at),
        ends_at=as_utc(payload.ends_at),
        location=payload.location,
        capacity=payload.capacity,
        description=payload.description,
    )
    db.add(event)
    commit_or_conflict(db, "event slug already exists")
    db.refresh(event)

    logger.info("event_created", event_id=event.id, slug=event.slug, by_user=principal.user_id)
    return event


def update_event(db: Session, principal: Principal, event_id: Any, patch: EventUpdate) -> Event:
    event = load_authorized(db, principal, Event, event_id, Action.EDIT)

    patch_data = patch.model_dump(exclude_unset=True)
    for key in ("name", "starts_at", "ends_at", "status"):
        # Required columns cannot be cleared.
        if key in patch_data and patch_data[key] is None:
            patch_data.pop(key)

    _check_dates(
        patch_data.get("starts_at", event.starts_at),
        patch_data.get("ends_at", event.ends_at),
    )

    if (
        patch_data.get("status") == EventStatus.PUBLISHED
        and event.status != EventStatus.PUBLISHED
        and _stand_count(db, event.id) == 0
    ):
        raise BusinessRuleError("event_without_stands", "cannot publish event without stands")

    if "name" in patch_data and patch_data["name"] != event.name:
        event.slug = unique_slug(db, patch_data["name"], exclude_id=event.id)

    for key, value in patch_data.items():
        if key in ("starts_at", "ends_at"):
            value = as_utc(value)
        setattr(event, key, value)

    commit_or_conflict(db, "event slug already exists")
    db.refresh(event)

    logger.info("event_updated", event_id=event.id, fields=sorted(patch_data), by_user=principal.user_id)
    return event


def delete_event(db: Session, principal: Principal, event_id: Any) -> str:
    """Delete an event, or archive it when stands or tickets still refer to it.

    Returns ``"deleted"`` or ``"archived"``.
    """
    event = load_authorized(db, principal, Event, event_id, Action.DELETE)

    paid = db.scalar(
        select(func.count())
        .select_from(Ticket)
        .where(Ticket.event_id == event.id, Ticket.status == TicketStatus.PAID)
    )
    if paid:
        raise ConflictError("event_has_paid_tickets", "cannot delete event with paid tickets")

    has_tickets = db.scalar(select(Ticket.id).where(Ticket.event_id == event.id).limit(1)) is not None
    if has_tickets or _stand_count(db, event.id) > 0:
        event.status = EventStatus.ARCHIVED
        outcome = "archived"
    else:
        db.delete(event)
        outcome = "deleted"

    commit_or_conflict(db)
    logger.info("event_deleted", event_id=event_id, outcome=outcome, by_user=principal.user_id)
    return outcome


def publish_event(db: Session, principal: Principal, event_id: Any) -> Event:
    event = load_authorized(db, principal, Event, event_id, Action.EDIT)

    if event.status == EventStatus.PUBLISHED:
        raise BusinessRuleError("event_already_published", "event is already published")
    if _stand_count(db, event.id) == 0:
        raise BusinessRuleError("event_without_stands", "cannot publish event without stands")

    event.status = EventStatus.PUBLISHED
    commit_or_conflict(db)
    db.refresh(event)

    logger.info("event_published", event_id=event.id, by_user=principal.user_id)
    return event


def event_statistics(db: Session, principal: Principal, event_id: Any) -> dict[str, Any]:
    if not principal.is_staff:
        raise PermissionDeniedError("unauthorized", "unauthorized")
    event = get_scoped(db, principal, Event, event_id)

    total_stands = _stand_count(db, event.id)
    occupied_stands = int(
        db.scalar(
            select(func.count())
            .select_from(Stand)
            .where(Stand.event_id == event.id, Stand.vendor_id.is_not(None))
        )
        or 0
    )
    paid_quantity, paid_revenue = db.execute(
        select(
            func.coalesce(func.sum(Ticket.quantity), 0),
            func.coalesce(func.sum(Ticket.total_price), 0),
        ).where(Ticket.event_id == event.id, Ticket.status == TicketStatus.PAID)
    ).one()
    pending_tickets = int(
        db.scalar(
            select(func.count())
            .select_from(Ticket)
            .where(Ticket.event_id == event.id, Ticket.status == TicketStatus.PENDING)
        )
        or 0
    )

    return {
        "event_id": event.id,
        "total_stands": total_stands,
        "occupied_stands": occupied_stands,
        "available_stands": total_stands - occupied_stands,
        "paid_tickets": int(paid_quantity),
        "paid_revenue": Decimal(str(paid_revenue)).quantize(Decimal("0.01")),
        "pending_tickets": pending_tickets,
    }


def list_public_events(db: Session, *, upcoming_only: bool = False, limit: int | None = None) -> list[Event]:
    stmt = select(Event).where(Event.status == EventStatus.PUBLISHED)
    if upcoming_only:
        stmt = stmt.where(Event.starts_at >= utcnow())
    stmt = stmt.order_by(Event.starts_at, Event.id)
    if limit is not None:
        stmt = stmt.limit(limit)
    return list(db.scalars(stmt).all())


def get_public_event(db: Session, slug: str) -> Event:
    event = db.scalar(
        select(Event).where(Event.slug == slug, Event.status == EventStatus.PUBLISHED)
    )
    if event is None:
        raise NotFoundError("event_not_found", "event not found")
    return event
