from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy.orm import Session

from eventhall.api.v1.schemas.tickets import SupportTicketCreate, SupportTicketUpdate
from eventhall.auth.principal import Principal
from eventhall.authz.policy import authorize, load_authorized
from eventhall.authz.resources import Action, Resource
from eventhall.authz.scoping import scoped_select
from eventhall.models import SupportTicket, SupportTicketPriority, SupportTicketStatus
from eventhall.models.ticket import RESOLVED_STATUSES
from eventhall.services.common import Page, commit_or_conflict, like, paginate, utcnow

logger = structlog.get_logger()


def apply_status(ticket: SupportTicket, status: SupportTicketStatus) -> None:
    """Set the status and keep ``resolved_at`` in step with it."""
    ticket.status = status
    if status in RESOLVED_STATUSES:
        if ticket.resolved_at is None:
            ticket.resolved_at = utcnow()
    else:
        ticket.resolved_at = None


def list_support_tickets(
    db: Session,
    principal: Principal,
    *,
    status: SupportTicketStatus | None = None,
    priority: SupportTicketPriority | None = None,
    vendor_id: int | None = None,
    search: str | None = None,
    page: int = 1,
    page_size: int = 25,
) -> Page[SupportTicket]:
    authorize(principal, Action.VIEW_ANY, Resource.SUPPORT_TICKET)

    stmt = scoped_select(principal, SupportTicket)
    if status is not None:
        stmt = stmt.where(SupportTicket.status == status)
    if priority is not None:
        stmt = stmt.where(SupportTicket.priority == priority)
    if vendor_id is not None:
        stmt = stmt.where(SupportTicket.vendor_id == vendor_id)
    if search:
        stmt = stmt.where(SupportTicket.subject.ilike(like(search)))

    return paginate(
        db, stmt.order_by(SupportTicket.created_at.desc(), SupportTicket.id.desc()), page, page_size
    )


def get_support_ticket(db: Session, principal: Principal, ticket_id: Any) -> SupportTicket:
    return load_authorized(db, principal, SupportTicket, ticket_id)


def create_support_ticket(db: Session, principal: Principal, payload: SupportTicketCreate) -> SupportTicket:
    authorize(principal, Action.CREATE, Resource.SUPPORT_TICKET)

    ticket = SupportTicket(
        user_id=principal.user_id,
        vendor_id=principal.vendor_id,
        subject=payload.subject,
        description=payload.description,
        priority=payload.priority,
    )
    requested = payload.status if principal.is_staff and payload.status else SupportTicketStatus.OPEN
    apply_status(ticket, requested)

    db.add(ticket)
    commit_or_conflict(db)
    db.refresh(ticket)

    logger.info(
        "support_ticket_created",
        support_ticket_id=ticket.id,
        user_id=ticket.user_id,
        vendor_id=ticket.vendor_id,
        priority=ticket.priority.value,
    )
    return ticket


def update_support_ticket(
    db: Session, principal: Principal, ticket_id: Any, patch: SupportTicketUpdate
) -> SupportTicket:
    ticket = load_authorized(db, principal, SupportTicket, ticket_id, Action.EDIT)

    patch_data = {k: v for k, v in patch.model_dump(exclude_unset=True).items() if v is not None}
    status = patch_data.pop("status", None)
    if status is not None and not principal.is_staff:
        status = None

    for key, value in patch_data.items():
        setattr(ticket, key, value)
    if status is not None:
        apply_status(ticket, status)

    commit_or_conflict(db)
    db.refresh(ticket)

    logger.info(
        "support_ticket_updated",
        support_ticket_id=ticket.id,
        status=ticket.status.value,
        by_user=principal.user_id,
    )
    return ticket


def delete_support_ticket(db: Session, principal: Principal, ticket_id: Any) -> None:
    ticket = load_authorized(db, principal, SupportTicket, ticket_id, Action.DELETE)
    db.delete(ticket)
    commit_or_conflict(db)
    logger.info("support_ticket_deleted", support_ticket_id=ticket_id, by_user=principal.user_id)
