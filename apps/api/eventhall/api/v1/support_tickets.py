from __future__ import annotations

from fastapi import APIRouter, Query, Response, status

from eventhall.api.v1.schemas import (
    PageOut,
    SupportTicketCreate,
    SupportTicketOut,
    SupportTicketUpdate,
)
from eventhall.auth.deps import CurrentPrincipal, DBSession
from eventhall.models import SupportTicketPriority, SupportTicketStatus
from eventhall.services import support_tickets_service

router = APIRouter(prefix="/support-tickets", tags=["support-tickets"])


@router.get("", response_model=PageOut[SupportTicketOut])
def list_support_tickets(
    db: DBSession,
    principal: CurrentPrincipal,
    status_: SupportTicketStatus | None = Query(default=None, alias="status"),
    priority: SupportTicketPriority | None = None,
    vendor_id: int | None = None,
    search: str | None = Query(default=None, min_length=1),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=25, ge=1, le=100),
):
    return support_tickets_service.list_support_tickets(
        db,
        principal,
        status=status_,
        priority=priority,
        vendor_id=vendor_id,
        search=search,
        page=page,
        page_size=page_size,
    )


@router.post("", response_model=SupportTicketOut, status_code=status.HTTP_201_CREATED)
def create_support_ticket(payload: SupportTicketCreate, db: DBSession, principal: CurrentPrincipal):
    return support_tickets_service.create_support_ticket(db, principal, payload)


@router.get("/{ticket_id}", response_model=SupportTicketOut)
def get_support_ticket(ticket_id: int, db: DBSession, principal: CurrentPrincipal):
    return support_tickets_service.get_support_ticket(db, principal, ticket_id)


@router.patch("/{ticket_id}", response_model=SupportTicketOut)
def update_support_ticket(
    ticket_id: int, payload: SupportTicketUpdate, db: DBSession, principal: CurrentPrincipal
):
    return support_tickets_service.update_support_ticket(db, principal, ticket_id, payload)


@router.delete("/{ticket_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_support_ticket(ticket_id: int, db: DBSession, principal: CurrentPrincipal):
    support_tickets_service.delete_support_ticket(db, principal, ticket_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
