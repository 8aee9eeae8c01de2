from __future__ import annotations

import structlog
from fastapi import APIRouter, Query, status

from eventhall.api.v1.schemas import ContactFormIn, MessageOut, PublicEventOut
from eventhall.auth.deps import DBSession
from eventhall.core.config import settings
from eventhall.notifications import CONTACT_MESSAGE, notify
from eventhall.services import events_service

logger = structlog.get_logger()

router = APIRouter(prefix="/public", tags=["public"])


@router.get("/events", response_model=list[PublicEventOut])
def list_published_events(
    db: DBSession,
    upcoming: bool = False,
    limit: int | None = Query(default=None, ge=1, le=100),
):
    return events_service.list_public_events(db, upcoming_only=upcoming, limit=limit)


@router.get("/events/{slug}", response_model=PublicEventOut)
def get_published_event(slug: str, db: DBSession):
    return events_service.get_public_event(db, slug)


@router.post("/contact", response_model=MessageOut, status_code=status.HTTP_202_ACCEPTED)
def submit_contact_form(payload: ContactFormIn):
    queued = notify(CONTACT_MESSAGE, settings.contact_recipient, payload.model_dump())
    logger.info("contact_form_submitted", email=payload.email, queued=queued)
    return MessageOut(status="accepted", message="message sent")
