from __future__ import annotations

from fastapi import APIRouter, Query, status

from eventhall.api.v1.schemas import PageOut, VendorCreate, VendorDeleteOut, VendorOut, VendorUpdate
from eventhall.auth.deps import CurrentPrincipal, DBSession
from eventhall.models import VendorStatus
from eventhall.services import vendors_service

router = APIRouter(prefix="/vendors", tags=["vendors"])


@router.get("", response_model=PageOut[VendorOut])
def list_vendors(
    db: DBSession,
    principal: CurrentPrincipal,
    search: str | None = Query(default=None, min_length=1),
    status_: VendorStatus | None = Query(default=None, alias="status"),
    with_stands: bool | None = None,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=25, ge=1, le=100),
):
    return vendors_service.list_vendors(
        db,
        principal,
        search=search,
        status=status_,
        with_stands=with_stands,
        page=page,
        page_size=page_size,
    )


@router.post("", response_model=VendorOut, status_code=status.HTTP_201_CREATED)
def create_vendor(payload: VendorCreate, db: DBSession, principal: CurrentPrincipal):
    return vendors_service.create_vendor(db, principal, payload)


@router.get("/{vendor_id}", response_model=VendorOut)
def get_vendor(vendor_id: int, db: DBSession, principal: CurrentPrincipal):
    return vendors_service.get_vendor(db, principal, vendor_id)


@router.patch("/{vendor_id}", response_model=VendorOut)
def update_vendor(vendor_id: int, payload: VendorUpdate, db: DBSession, principal: CurrentPrincipal):
    return vendors_service.update_vendor(db, principal, vendor_id, payload)


@router.delete("/{vendor_id}", response_model=VendorDeleteOut)
def delete_vendor(vendor_id: int, db: DBSession, principal: CurrentPrincipal):
    return vendors_service.delete_vendor(db, principal, vendor_id)
