from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

import structlog
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from eventhall.api.v1.schemas.tickets import TicketCreate, TicketUpdate
from eventhall.auth.principal import Principal
from eventhall.authz.policy import authorize, load_authorized
from eventhall.authz.resources import Action, Resource
from eventhall.authz.scoping import scoped_select
from eventhall.models import Event, EventStatus, Ticket, TicketStatus, TicketType, User
from eventhall.models.ticket import CENT, compute_total
from eventhall.services.common import Page, as_utc, commit_or_conflict, paginate
from eventhall.services.exceptions import (
    BusinessRuleError,
    NotFoundError,
    PermissionDeniedError,
)

logger = structlog.get_logger()

# Status changes support staff may make; admins may set any status.
ALLOWED_TRANSITIONS: dict[TicketStatus, frozenset[TicketStatus]] = {
    TicketStatus.PENDING: frozenset({TicketStatus.PAID, TicketStatus.CANCELLED}),
    TicketStatus.PAID: frozenset({TicketStatus.CANCELLED}),
    TicketStatus.CANCELLED: frozenset(),
}


def _paid_quantity(db: Session, event_id: Any) -> int:
    return int(
        db.scalar(
            select(func.coalesce(func.sum(Ticket.quantity), 0)).where(
                Ticket.event_id == event_id, Ticket.status == TicketStatus.PAID
            )
        )
        or 0
    )


def list_tickets(
    db: Session,
    principal: Principal,
    *,
    status: TicketStatus | None = None,
    type: TicketType | None = None,
    event_id: int | None = None,
    user_id: int | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    page: int = 1,
    page_size: int = 25,
) -> Page[Ticket]:
    authorize(principal, Action.VIEW_ANY, Resource.TICKET)

    stmt = scoped_select(principal, Ticket)
    if status is not None:
        stmt = stmt.where(Ticket.status == status)
    if type is not None:
        stmt = stmt.where(Ticket.type == type)
    if event_id is not None:
        stmt = stmt.where(Ticket.event_id == event_id)
    if user_id is not None:
        stmt = stmt.where(Ticket.user_id == user_id)
    if date_from is not None:
        stmt = stmt.where(Ticket.created_at >= as_utc(date_from))
    if date_to is not None:
        stmt = stmt.where(Ticket.created_at <= as_utc(date_to))

    return paginate(db, stmt.order_by(Ticket.created_at.desc(), Ticket.id.desc()), page, page_size)


def get_ticket(db: Session, principal: Principal, ticket_id: Any) -> Ticket:
    return load_authorized(db, principal, Ticket, ticket_id)


def create_ticket(db: Session, principal: Principal, payload: TicketCreate) -> Ticket:
    authorize(principal, Action.CREATE, Resource.TICKET)

    event = db.get(Event, payload.event_id)
    if event is None:
        raise NotFoundError("event_not_found", "event not found")
    if event.status != EventStatus.PUBLISHED:
        raise BusinessRuleError("event_not_on_sale", "event is not available for ticket sales")

    if event.capacity is not None:
        sold = _paid_quantity(db, event.id)
        if sold + payload.quantity > event.capacity:
            raise BusinessRuleError(
                "capacity_exceeded",
                "not enough tickets available",
                available=max(event.capacity - sold, 0),
            )

    if principal.is_staff:
        owner_id = payload.user_id or principal.user_id
        status = payload.status or TicketStatus.PENDING
        if owner_id != principal.user_id and db.get(User, owner_id) is None:
            raise NotFoundError("user_not_found", "user not found")
    else:
        owner_id = principal.user_id
        status = TicketStatus.PENDING

    ticket = Ticket(
        user_id=owner_id,
        event_id=event.id,
        type=payload.type,
        quantity=payload.quantity,
        unit_price=payload.unit_price,
        status=status,
    )
    ticket.recompute_total()
    db.add(ticket)
    commit_or_conflict(db)
    db.refresh(ticket)

    logger.info(
        "ticket_created",
        ticket_id=ticket.id,
        user_id=ticket.user_id,
        event_id=ticket.event_id,
        quantity=ticket.quantity,
        total_price=str(ticket.total_price),
    )
    return ticket


def update_ticket(db: Session, principal: Principal, ticket_id: Any, patch: TicketUpdate) -> Ticket:
    ticket = load_authorized(db, principal, Ticket, ticket_id, Action.EDIT)

    patch_data = {k: v for k, v in patch.model_dump(exclude_unset=True).items() if v is not None}
    if not principal.is_staff:
        patch_data.pop("status", None)

    if ticket.status == TicketStatus.PAID and not principal.is_admin:
        raise BusinessRuleError("ticket_paid", "cannot modify paid tickets")

    new_status = patch_data.get("status")
    if new_status is not None and new_status != ticket.status and not principal.is_admin:
        if new_status not in ALLOWED_TRANSITIONS[ticket.status]:
            raise BusinessRuleError(
                "invalid_status_transition",
                f"cannot change ticket from {ticket.status.value} to {new_status.value}",
            )

    for key, value in patch_data.items():
        setattr(ticket, key, value)
    ticket.recompute_total()

    commit_or_conflict(db)
    db.refresh(ticket)

    logger.info("ticket_updated", ticket_id=ticket.id, fields=sorted(patch_data), by_user=principal.user_id)
    return ticket


def delete_ticket(db: Session, principal: Principal, ticket_id: Any) -> str:
    """Paid tickets are cancelled instead of deleted. Returns the outcome."""
    ticket = load_authorized(db, principal, Ticket, ticket_id, Action.DELETE)

    if ticket.status == TicketStatus.PAID:
        ticket.status = TicketStatus.CANCELLED
        outcome = "cancelled"
    else:
        db.delete(ticket)
        outcome = "deleted"

    commit_or_conflict(db)
    logger.info("ticket_removed", ticket_id=ticket_id, outcome=outcome, by_user=principal.user_id)
    return outcome


def mark_paid(db: Session, principal: Principal, ticket_id: Any) -> Ticket:
    if not principal.is_staff:
        raise PermissionDeniedError("unauthorized", "unauthorized")
    ticket = load_authorized(db, principal, Ticket, ticket_id, Action.EDIT)

    if ticket.status == TicketStatus.PAID:
        raise BusinessRuleError("ticket_already_paid", "ticket is already paid")
    if ticket.status == TicketStatus.CANCELLED:
        raise BusinessRuleError("ticket_cancelled", "cannot mark cancelled ticket as paid")

    ticket.status = TicketStatus.PAID
    commit_or_conflict(db)
    db.refresh(ticket)

    logger.info("ticket_marked_paid", ticket_id=ticket.id, by_user=principal.user_id)
    return ticket


def cancel_ticket(db: Session, principal: Principal, ticket_id: Any) -> Ticket:
    # Owners may cancel their own ticket in any state; scope already limits
    # non-staff to their own tickets.
    ticket = load_authorized(db, principal, Ticket, ticket_id)

    if ticket.status == TicketStatus.CANCELLED:
        raise BusinessRuleError("ticket_already_cancelled", "ticket is already cancelled")

    ticket.status = TicketStatus.CANCELLED
    commit_or_conflict(db)
    db.refresh(ticket)

    logger.info("ticket_cancelled", ticket_id=ticket.id, by_user=principal.user_id)
    return ticket


def pricing_quote(quantity: int, unit_price: Decimal) -> dict[str, Any]:
    total = compute_total(quantity, unit_price)
    whole, cents = f"{total:.2f}".split(".")
    formatted = f"€{int(whole):,}".replace(",", ".") + f",{cents}"
    return {
        "quantity": quantity,
        "unit_price": Decimal(unit_price).quantize(CENT),
        "total_price": total,
        "formatted_total": formatted,
    }


def ticket_statistics(
    db: Session,
    principal: Principal,
    *,
    event_id: int | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
) -> dict[str, Any]:
    if not principal.is_staff:
        raise PermissionDeniedError("unauthorized", "unauthorized")

    filters = []
    if event_id is not None:
        filters.append(Ticket.event_id == event_id)
    if date_from is not None:
        filters.append(Ticket.created_at >= as_utc(date_from))
    if date_to is not None:
        filters.append(Ticket.created_at <= as_utc(date_to))

    def _breakdown(column) -> list[dict[str, Any]]:
        rows = db.execute(
            select(
                column,
                func.coalesce(func.sum(Ticket.quantity), 0),
                func.coalesce(func.sum(Ticket.total_price), 0),
            )
            .where(*filters)
            .group_by(column)
            .order_by(column)
        ).all()
        return [
            {"key": key.value, "quantity": int(qty), "revenue": _money(revenue)}
            for key, qty, revenue in rows
        ]

    by_status = _breakdown(Ticket.status)
    revenue_by_status = {row["key"]: row["revenue"] for row in by_status}

    return {
        "total_quantity": sum(row["quantity"] for row in by_status),
        "paid_revenue": revenue_by_status.get(TicketStatus.PAID.value, _money(0)),
        "pending_revenue": revenue_by_status.get(TicketStatus.PENDING.value, _money(0)),
        "by_status": by_status,
        "by_type": _breakdown(Ticket.type),
    }


def _money(value: Any) -> Decimal:
    return Decimal(str(value)).quantize(CENT)
