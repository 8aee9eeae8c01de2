from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Query, status

from eventhall.api.v1.schemas import (
    PageOut,
    PricingQuoteIn,
    PricingQuoteOut,
    TicketCreate,
    TicketDeleteOut,
    TicketOut,
    TicketStatisticsOut,
    TicketUpdate,
)
from eventhall.auth.deps import CurrentPrincipal, DBSession
from eventhall.models import TicketStatus, TicketType
from eventhall.services import tickets_service

router = APIRouter(prefix="/tickets", tags=["tickets"])


@router.get("", response_model=PageOut[TicketOut])
def list_tickets(
    db: DBSession,
    principal: CurrentPrincipal,
    status_: TicketStatus | None = Query(default=None, alias="status"),
    type_: TicketType | None = Query(default=None, alias="type"),
    event_id: int | None = None,
    user_id: int | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=25, ge=1, le=100),
):
    return tickets_service.list_tickets(
        db,
        principal,
        status=status_,
        type=type_,
        event_id=event_id,
        user_id=user_id,
        date_from=date_from,
        date_to=date_to,
        page=page,
        page_size=page_size,
    )


@router.post("", response_model=TicketOut, status_code=status.HTTP_201_CREATED)
def create_ticket(payload: TicketCreate, db: DBSession, principal: CurrentPrincipal):
    return tickets_service.create_ticket(db, principal, payload)


@router.post("/pricing", response_model=PricingQuoteOut)
def pricing_quote(payload: PricingQuoteIn):
    return tickets_service.pricing_quote(payload.quantity, payload.unit_price)


@router.get("/statistics", response_model=TicketStatisticsOut)
def ticket_statistics(
    db: DBSession,
    principal: CurrentPrincipal,
    event_id: int | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
):
    return tickets_service.ticket_statistics(
        db, principal, event_id=event_id, date_from=date_from, date_to=date_to
    )


@router.get("/{ticket_id}", response_model=TicketOut)
def get_ticket(ticket_id: int, db: DBSession, principal: CurrentPrincipal):
    return tickets_service.get_ticket(db, principal, ticket_id)


@router.patch("/{ticket_id}", response_model=TicketOut)
def update_ticket(ticket_id: int, payload: TicketUpdate, db: DBSession, principal: CurrentPrincipal):
    return tickets_service.update_ticket(db, principal, ticket_id, payload)


@router.delete("/{ticket_id}", response_model=TicketDeleteOut)
def delete_ticket(ticket_id: int, db: DBSession, principal: CurrentPrincipal):
    outcome = tickets_service.delete_ticket(db, principal, ticket_id)
    return TicketDeleteOut(id=ticket_id, outcome=outcome)


@router.post("/{ticket_id}/mark-paid", response_model=TicketOut)
def mark_paid(ticket_id: int, db: DBSession, principal: CurrentPrincipal):
    return tickets_service.mark_paid(db, principal, ticket_id)


@router.post("/{ticket_id}/cancel", response_model=TicketOut)
def cancel_ticket(ticket_id: int, db: DBSession, principal: CurrentPrincipal):
    return tickets_service.cancel_ticket(db, principal, ticket_id)
