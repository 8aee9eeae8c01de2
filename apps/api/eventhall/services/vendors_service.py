from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from eventhall.api.v1.schemas.vendors import VendorCreate, VendorUpdate
from eventhall.auth.principal import Principal
from eventhall.authz.policy import authorize, load_authorized
from eventhall.authz.resources import Action, Resource
from eventhall.authz.scoping import scoped_select
from eventhall.models import ContactPerson, Role, Stand, Ticket, User, Vendor, VendorStatus
from eventhall.services.common import Page, commit_or_conflict, like, paginate
from eventhall.services.exceptions import BusinessRuleError
from eventhall.services.roles_service import admin_count
from eventhall.services.users_service import provision_account, send_credentials

logger = structlog.get_logger()

_ACCOUNT_FIELDS = {"user_email", "user_name", "user_password"}


def list_vendors(
    db: Session,
    principal: Principal,
    *,
    search: str | None = None,
    status: VendorStatus | None = None,
    with_stands: bool | None = None,
    page: int = 1,
    page_size: int = 25,
) -> Page[Vendor]:
    authorize(principal, Action.VIEW_ANY, Resource.VENDOR)

    stmt = scoped_select(principal, Vendor)
    if search:
        term = like(search)
        stmt = stmt.where(or_(Vendor.company_name.ilike(term), Vendor.billing_email.ilike(term)))
    if status is not None:
        stmt = stmt.where(Vendor.status == status)
    if with_stands is True:
        stmt = stmt.where(Vendor.stands.any())
    elif with_stands is False:
        stmt = stmt.where(~Vendor.stands.any())

    return paginate(db, stmt.order_by(Vendor.company_name, Vendor.id), page, page_size)


def get_vendor(db: Session, principal: Principal, vendor_id: Any) -> Vendor:
    return load_authorized(db, principal, Vendor, vendor_id)


def create_vendor(db: Session, principal: Principal, payload: VendorCreate) -> Vendor:
    """Create a vendor and, when ``user_email`` is given, its sales-rep login.

    Vendor, user and role grant commit together or not at all.
    """
    authorize(principal, Action.CREATE, Resource.VENDOR)

    vendor = Vendor(**payload.model_dump(exclude=_ACCOUNT_FIELDS))
    db.add(vendor)

    account = None
    try:
        db.flush()
        if payload.user_email:
            account = provision_account(
                db,
                email=payload.user_email,
                name=payload.user_name or payload.company_name,
                role=Role.VERKOPER,
                vendor_id=vendor.id,
                password=payload.user_password,
            )
    except Exception:
        db.rollback()
        raise

    commit_or_conflict(db, "vendor account conflicts with an existing record")
    db.refresh(vendor)

    logger.info(
        "vendor_created",
        vendor_id=vendor.id,
        account_user_id=account.user.id if account else None,
        account_created=bool(account and account.created),
        by_user=principal.user_id,
    )
    if account is not None and account.created:
        send_credentials(account.user, account.password)
    return vendor


def update_vendor(db: Session, principal: Principal, vendor_id: Any, patch: VendorUpdate) -> Vendor:
    vendor = load_authorized(db, principal, Vendor, vendor_id, Action.EDIT)

    patch_data = patch.model_dump(exclude_unset=True)
    for key in ("company_name", "billing_email", "status"):
        if key in patch_data and patch_data[key] is None:
            patch_data.pop(key)

    for key, value in patch_data.items():
        setattr(vendor, key, value)

    commit_or_conflict(db)
    db.refresh(vendor)

    logger.info("vendor_updated", vendor_id=vendor.id, fields=sorted(patch_data), by_user=principal.user_id)
    return vendor


def delete_vendor(db: Session, principal: Principal, vendor_id: Any) -> dict[str, Any]:
    """Delete a vendor with no stands and no contact persons.

    Linked users without tickets are deleted unless that would remove the
    last admin; the others are unlinked.
    """
    vendor = load_authorized(db, principal, Vendor, vendor_id, Action.DELETE)

    if db.scalar(select(Stand.id).where(Stand.vendor_id == vendor.id).limit(1)) is not None:
        raise BusinessRuleError("vendor_has_stands", "cannot delete vendor with assigned stands")
    if db.scalar(select(ContactPerson.id).where(ContactPerson.vendor_id == vendor.id).limit(1)) is not None:
        raise BusinessRuleError(
            "vendor_has_contact_persons", "cannot delete vendor with contact persons; remove them first"
        )

    deleted_users: list[int] = []
    unlinked_users: list[int] = []
    admins_left = admin_count(db)
    for user in db.scalars(select(User).where(User.vendor_id == vendor.id)).all():
        has_tickets = db.scalar(select(Ticket.id).where(Ticket.user_id == user.id).limit(1)) is not None
        last_admin = user.has_role(Role.ADMIN) and admins_left <= 1
        if has_tickets or last_admin:
            user.vendor_id = None
            unlinked_users.append(user.id)
        else:
            if user.has_role(Role.ADMIN):
                admins_left -= 1
            db.delete(user)
            deleted_users.append(user.id)

    db.delete(vendor)
    commit_or_conflict(db)

    logger.info(
        "vendor_deleted",
        vendor_id=vendor_id,
        deleted_users=deleted_users,
        unlinked_users=unlinked_users,
        by_user=principal.user_id,
    )
    return {"id": vendor.id, "deleted_users": deleted_users, "unlinked_users": unlinked_users}
