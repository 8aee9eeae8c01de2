from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Query, status

from eventhall.api.v1.schemas import (
    EventCreate,
    EventDeleteOut,
    EventOut,
    EventStatisticsOut,
    EventUpdate,
    PageOut,
)
from eventhall.auth.deps import CurrentPrincipal, DBSession
from eventhall.models import EventStatus
from eventhall.services import events_service

router = APIRouter(prefix="/events", tags=["events"])


@router.get("", response_model=PageOut[EventOut])
def list_events(
    db: DBSession,
    principal: CurrentPrincipal,
    status_: EventStatus | None = Query(default=None, alias="status"),
    search: str | None = Query(default=None, min_length=1),
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=25, ge=1, le=100),
):
    return events_service.list_events(
        db,
        principal,
        status=status_,
        search=search,
        date_from=date_from,
        date_to=date_to,
        page=page,
        page_size=page_size,
    )


@router.post("", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventCreate, db: DBSession, principal: CurrentPrincipal):
    return events_service.create_event(db, principal, payload)


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: int, db: DBSession, principal: CurrentPrincipal):
    return events_service.get_event(db, principal, event_id)


@router.patch("/{event_id}", response_model=EventOut)
def update_event(event_id: int, payload: EventUpdate, db: DBSession, principal: CurrentPrincipal):
    return events_service.update_event(db, principal, event_id, payload)


@router.delete("/{event_id}", response_model=EventDeleteOut)
def delete_event(event_id: int, db: DBSession, principal: CurrentPrincipal):
    outcome = events_service.delete_event(db, principal, event_id)
    return EventDeleteOut(id=event_id, outcome=outcome)


@router.post("/{event_id}/publish", response_model=EventOut)
def publish_event(event_id: int, db: DBSession, principal: CurrentPrincipal):
    return events_service.publish_event(db, principal, event_id)


@router.get("/{event_id}/statistics", response_model=EventStatisticsOut)
def event_statistics(event_id: int, db: DBSession, principal: CurrentPrincipal):
    return events_service.event_statistics(db, principal, event_id)
