from __future__ import annotations

from fastapi import APIRouter, Query, Response, status

from eventhall.api.v1.schemas import (
    PageOut,
    StandAssignVendorIn,
    StandBulkCreate,
    StandBulkOut,
    StandCreate,
    StandOut,
    StandUpdate,
)
from eventhall.auth.deps import CurrentPrincipal, DBSession
from eventhall.services import stands_service

router = APIRouter(prefix="/stands", tags=["stands"])


@router.get("", response_model=PageOut[StandOut])
def list_stands(
    db: DBSession,
    principal: CurrentPrincipal,
    event_id: int | None = None,
    vendor_id: int | None = None,
    available: bool | None = None,
    search: str | None = Query(default=None, min_length=1),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=25, ge=1, le=100),
):
    return stands_service.list_stands(
        db,
        principal,
        event_id=event_id,
        vendor_id=vendor_id,
        available=available,
        search=search,
        page=page,
        page_size=page_size,
    )


@router.post("", response_model=StandOut, status_code=status.HTTP_201_CREATED)
def create_stand(payload: StandCreate, db: DBSession, principal: CurrentPrincipal):
    return stands_service.create_stand(db, principal, payload)


@router.post("/bulk", response_model=StandBulkOut, status_code=status.HTTP_201_CREATED)
def bulk_create_stands(payload: StandBulkCreate, db: DBSession, principal: CurrentPrincipal):
    return stands_service.bulk_create_stands(db, principal, payload)


@router.get("/{stand_id}", response_model=StandOut)
def get_stand(stand_id: int, db: DBSession, principal: CurrentPrincipal):
    return stands_service.get_stand(db, principal, stand_id)


@router.patch("/{stand_id}", response_model=StandOut)
def update_stand(stand_id: int, payload: StandUpdate, db: DBSession, principal: CurrentPrincipal):
    return stands_service.update_stand(db, principal, stand_id, payload)


@router.delete("/{stand_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_stand(stand_id: int, db: DBSession, principal: CurrentPrincipal):
    stands_service.delete_stand(db, principal, stand_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{stand_id}/vendor", response_model=StandOut)
def assign_vendor(
    stand_id: int, payload: StandAssignVendorIn, db: DBSession, principal: CurrentPrincipal
):
    return stands_service.assign_vendor(db, principal, stand_id, payload.vendor_id)


@router.delete("/{stand_id}/vendor", response_model=StandOut)
def remove_vendor(stand_id: int, db: DBSession, principal: CurrentPrincipal):
    return stands_service.remove_vendor(db, principal, stand_id)
