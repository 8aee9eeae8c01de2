from __future__ import annotations

from fastapi import APIRouter, Query, Response, status

from eventhall.api.v1.schemas import (
    ContactAccountCreate,
    ContactPersonCreate,
    ContactPersonOut,
    ContactPersonUpdate,
    PageOut,
)
from eventhall.auth.deps import CurrentPrincipal, DBSession
from eventhall.services import contact_persons_service

router = APIRouter(prefix="/contact-persons", tags=["contact-persons"])


@router.get("", response_model=PageOut[ContactPersonOut])
def list_contact_persons(
    db: DBSession,
    principal: CurrentPrincipal,
    vendor_id: int | None = None,
    search: str | None = Query(default=None, min_length=1),
    is_primary: bool | None = None,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=25, ge=1, le=100),
):
    return contact_persons_service.list_contact_persons(
        db,
        principal,
        vendor_id=vendor_id,
        search=search,
        is_primary=is_primary,
        page=page,
        page_size=page_size,
    )


@router.post("", response_model=ContactPersonOut, status_code=status.HTTP_201_CREATED)
def create_contact_person(payload: ContactPersonCreate, db: DBSession, principal: CurrentPrincipal):
    return contact_persons_service.create_contact_person(db, principal, payload)


@router.get("/{contact_id}", response_model=ContactPersonOut)
def get_contact_person(contact_id: int, db: DBSession, principal: CurrentPrincipal):
    return contact_persons_service.get_contact_person(db, principal, contact_id)


@router.patch("/{contact_id}", response_model=ContactPersonOut)
def update_contact_person(
    contact_id: int, payload: ContactPersonUpdate, db: DBSession, principal: CurrentPrincipal
):
    return contact_persons_service.update_contact_person(db, principal, contact_id, payload)


@router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_contact_person(contact_id: int, db: DBSession, principal: CurrentPrincipal):
    contact_persons_service.delete_contact_person(db, principal, contact_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{contact_id}/account", response_model=ContactPersonOut)
def create_account(
    contact_id: int, payload: ContactAccountCreate, db: DBSession, principal: CurrentPrincipal
):
    return contact_persons_service.create_account(
        db, principal, contact_id, password=payload.password, send=payload.send_credentials
    )


@router.delete("/{contact_id}/account", response_model=ContactPersonOut)
def unlink_account(contact_id: int, db: DBSession, principal: CurrentPrincipal):
    return contact_persons_service.unlink_account(db, principal, contact_id)
