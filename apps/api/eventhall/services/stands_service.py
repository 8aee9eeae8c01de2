from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from eventhall.api.v1.schemas.stands import StandBulkCreate, StandCreate, StandUpdate
from eventhall.auth.principal import Principal
from eventhall.authz.policy import authorize, load_authorized
from eventhall.authz.resources import Action, Resource
from eventhall.authz.scoping import scoped_select
from eventhall.models import Event, Stand, Vendor
from eventhall.services.common import Page, commit_or_conflict, like, paginate
from eventhall.services.exceptions import BusinessRuleError, NotFoundError, ValidationError

logger = structlog.get_logger()


def _require_event(db: Session, event_id: Any) -> Event:
    event = db.get(Event, event_id)
    if event is None:
        raise NotFoundError("event_not_found", "event not found")
    return event


def _require_vendor(db: Session, vendor_id: Any) -> Vendor:
    vendor = db.get(Vendor, vendor_id)
    if vendor is None:
        raise NotFoundError("vendor_not_found", "vendor not found")
    return vendor


def _check_name_free(db: Session, event_id: Any, name: str, exclude_id: int | None = None) -> None:
    stmt = select(Stand.id).where(Stand.event_id == event_id, Stand.name == name)
    if exclude_id is not None:
        stmt = stmt.where(Stand.id != exclude_id)
    if db.scalar(stmt) is not None:
        raise BusinessRuleError("stand_name_taken", "stand number already exists for this event")


def _check_vendor_free(db: Session, event_id: Any, vendor_id: Any, exclude_id: int | None = None) -> None:
    stmt = select(Stand.id).where(Stand.event_id == event_id, Stand.vendor_id == vendor_id)
    if exclude_id is not None:
        stmt = stmt.where(Stand.id != exclude_id)
    if db.scalar(stmt) is not None:
        raise BusinessRuleError(
            "vendor_has_stand", "vendor is already assigned to another stand in this event"
        )


def list_stands(
    db: Session,
    principal: Principal,
    *,
    event_id: int | None = None,
    vendor_id: int | None = None,
    available: bool | None = None,
    search: str | None = None,
    page: int = 1,
    page_size: int = 25,
) -> Page[Stand]:
    authorize(principal, Action.VIEW_ANY, Resource.STAND)

    stmt = scoped_select(principal, Stand)
    if event_id is not None:
        stmt = stmt.where(Stand.event_id == event_id)
    if vendor_id is not None:
        stmt = stmt.where(Stand.vendor_id == vendor_id)
    if available is True:
        stmt = stmt.where(Stand.vendor_id.is_(None))
    elif available is False:
        stmt = stmt.where(Stand.vendor_id.is_not(None))
    if search:
        term = like(search)
        stmt = stmt.where(or_(Stand.name.ilike(term), Stand.location.ilike(term)))

    return paginate(db, stmt.order_by(Stand.name, Stand.id), page, page_size)


def get_stand(db: Session, principal: Principal, stand_id: Any) -> Stand:
    return load_authorized(db, principal, Stand, stand_id)


def create_stand(db: Session, principal: Principal, payload: StandCreate) -> Stand:
    authorize(principal, Action.CREATE, Resource.STAND)

    event = _require_event(db, payload.event_id)
    _check_name_free(db, event.id, payload.name)
    if payload.vendor_id is not None:
        _require_vendor(db, payload.vendor_id)
        _check_vendor_free(db, event.id, payload.vendor_id)

    stand = Stand(**payload.model_dump())
    db.add(stand)
    commit_or_conflict(db, "stand conflicts with an existing stand")
    db.refresh(stand)

    logger.info("stand_created", stand_id=stand.id, event_id=event.id, by_user=principal.user_id)
    return stand


def update_stand(db: Session, principal: Principal, stand_id: Any, patch: StandUpdate) -> Stand:
    stand = load_authorized(db, principal, Stand, stand_id, Action.EDIT)

    patch_data = patch.model_dump(exclude_unset=True)
    new_event_id = patch_data.pop("event_id", None)
    if new_event_id is not None and new_event_id != stand.event_id:
        raise ValidationError("event_immutable", "a stand cannot move to another event", field="event_id")
    if "name" in patch_data and patch_data["name"] is None:
        patch_data.pop("name")
    if "is_reserved" in patch_data and patch_data["is_reserved"] is None:
        patch_data.pop("is_reserved")

    if "name" in patch_data and patch_data["name"] != stand.name:
        _check_name_free(db, stand.event_id, patch_data["name"], exclude_id=stand.id)

    new_vendor_id = patch_data.get("vendor_id")
    if new_vendor_id is not None and new_vendor_id != stand.vendor_id:
        _require_vendor(db, new_vendor_id)
        _check_vendor_free(db, stand.event_id, new_vendor_id, exclude_id=stand.id)

    for key, value in patch_data.items():
        setattr(stand, key, value)

    commit_or_conflict(db, "stand conflicts with an existing stand")
    db.refresh(stand)

    logger.info("stand_updated", stand_id=stand.id, fields=sorted(patch_data), by_user=principal.user_id)
    return stand


def delete_stand(db: Session, principal: Principal, stand_id: Any) -> None:
    stand = load_authorized(db, principal, Stand, stand_id, Action.DELETE)

    if stand.vendor_id is not None:
        raise BusinessRuleError(
            "stand_has_vendor", "cannot delete stand with assigned vendor; remove vendor first"
        )

    db.delete(stand)
    commit_or_conflict(db)
    logger.info("stand_deleted", stand_id=stand_id, by_user=principal.user_id)


def assign_vendor(db: Session, principal: Principal, stand_id: Any, vendor_id: int) -> Stand:
    stand = load_authorized(db, principal, Stand, stand_id, Action.EDIT)

    if stand.vendor_id is not None:
        raise BusinessRuleError("stand_already_assigned", "stand is already assigned to a vendor")
    _require_vendor(db, vendor_id)
    _check_vendor_free(db, stand.event_id, vendor_id, exclude_id=stand.id)

    stand.vendor_id = vendor_id
    commit_or_conflict(db, "vendor is already assigned to another stand in this event")
    db.refresh(stand)

    logger.info("stand_vendor_assigned", stand_id=stand.id, vendor_id=vendor_id, by_user=principal.user_id)
    return stand


def remove_vendor(db: Session, principal: Principal, stand_id: Any) -> Stand:
    stand = load_authorized(db, principal, Stand, stand_id, Action.EDIT)

    if stand.vendor_id is None:
        raise BusinessRuleError("stand_not_assigned", "stand has no assigned vendor")

    previous = stand.vendor_id
    stand.vendor_id = None
    commit_or_conflict(db)
    db.refresh(stand)

    logger.info("stand_vendor_removed", stand_id=stand.id, vendor_id=previous, by_user=principal.user_id)
    return stand


def bulk_create_stands(db: Session, principal: Principal, payload: StandBulkCreate) -> dict[str, list[str]]:
    authorize(principal, Action.CREATE, Resource.STAND)
    event = _require_event(db, payload.event_id)

    wanted = [f"{payload.prefix}{n}" for n in range(payload.start, payload.end + 1)]
    existing = set(
        db.scalars(select(Stand.name).where(Stand.event_id == event.id, Stand.name.in_(wanted))).all()
    )

    created: list[str] = []
    skipped: list[str] = []
    for name in wanted:
        if name in existing:
            skipped.append(name)
            continue
        db.add(
            Stand(
                event_id=event.id,
                name=name,
                location=payload.location,
                size_sqm=payload.size_sqm,
                price_eur=payload.price_eur,
            )
        )
        created.append(name)

    commit_or_conflict(db, "stand number already exists for this event")

    logger.info(
        "stands_bulk_created",
        event_id=event.id,
        created_count=len(created),
        skipped_count=len(skipped),
        by_user=principal.user_id,
    )
    return {"created": created, "skipped": skipped}
