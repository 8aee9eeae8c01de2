from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog
from sqlalchemy import delete, func, or_, select
from sqlalchemy.orm import Session

from eventhall.api.v1.schemas.users import UserCreate, UserUpdate
from eventhall.auth.password import generate_password, hash_password
from eventhall.auth.principal import Principal
from eventhall.authz.policy import authorize, load_authorized
from eventhall.authz.resources import Action, Resource
from eventhall.authz.scoping import scoped_select
from eventhall.core.config import settings
from eventhall.models import (
    Role,
    RoleRecord,
    SupportTicket,
    Ticket,
    TicketStatus,
    User,
    Vendor,
)
from eventhall.notifications import NEW_USER_ACCOUNT, notify
from eventhall.services.common import Page, commit_or_conflict, like, paginate
from eventhall.services.exceptions import BusinessRuleError, NotFoundError, ValidationError
from eventhall.services.roles_service import admin_count, grant_role, replace_roles

logger = structlog.get_logger()


@dataclass
class ProvisionedAccount:
    user: User
    created: bool
    # Plain password for the credentials mail; only set for new accounts.
    password: str | None = None


def normalize_email(email: str) -> str:
    return email.strip().lower()


def find_user_by_email(db: Session, email: str, exclude_id: int | None = None) -> User | None:
    stmt = select(User).where(func.lower(User.email) == normalize_email(email))
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)
    return db.scalar(stmt)


def provision_account(
    db: Session,
    *,
    email: str,
    name: str,
    role: Role,
    vendor_id: int,
    password: str | None = None,
) -> ProvisionedAccount:
    """Link or create the login account for a vendor-side record.

    An existing user with the email is linked to the vendor (if it has none)
    and granted ``role`` once. A user already tied to another vendor is
    refused. Only flushes; the caller owns the transaction.
    """
    existing = find_user_by_email(db, email)
    if existing is not None:
        if existing.vendor_id is not None and existing.vendor_id != vendor_id:
            raise BusinessRuleError(
                "user_linked_to_other_vendor",
                "a user with this email is already linked to another vendor",
            )
        existing.vendor_id = vendor_id
        grant_role(db, existing, role)
        db.flush()
        return ProvisionedAccount(user=existing, created=False)

    plain = password or generate_password()
    user = User(
        name=name,
        email=normalize_email(email),
        password_hash=hash_password(plain),
        vendor_id=vendor_id,
    )
    db.add(user)
    grant_role(db, user, role)
    db.flush()
    return ProvisionedAccount(user=user, created=True, password=plain)


def send_credentials(user: User, password: str) -> bool:
    return notify(
        NEW_USER_ACCOUNT,
        user.email,
        {
            "name": user.name,
            "email": user.email,
            "password": password,
            "login_url": settings.login_url,
        },
    )


def _require_vendor(db: Session, vendor_id: Any) -> None:
    if db.get(Vendor, vendor_id) is None:
        raise NotFoundError("vendor_not_found", "vendor not found")


def _check_email_free(db: Session, email: str, exclude_id: int | None = None) -> None:
    if find_user_by_email(db, email, exclude_id=exclude_id) is not None:
        raise ValidationError("email_taken", "email has already been taken", field="email")


def list_users(
    db: Session,
    principal: Principal,
    *,
    role: Role | None = None,
    search: str | None = None,
    page: int = 1,
    page_size: int = 25,
) -> Page[User]:
    authorize(principal, Action.VIEW_ANY, Resource.USER)

    stmt = scoped_select(principal, User)
    if role is not None:
        stmt = stmt.where(User.roles.any(RoleRecord.name == role.value))
    if search:
        term = like(search)
        stmt = stmt.where(or_(User.name.ilike(term), User.email.ilike(term)))

    return paginate(db, stmt.order_by(User.name, User.id), page, page_size)


def get_user(db: Session, principal: Principal, user_id: Any) -> User:
    return load_authorized(db, principal, User, user_id)


def create_user(db: Session, principal: Principal, payload: UserCreate) -> User:
    authorize(principal, Action.CREATE, Resource.USER)

    _check_email_free(db, payload.email)
    if payload.vendor_id is not None:
        _require_vendor(db, payload.vendor_id)

    plain = payload.password or generate_password()
    user = User(
        name=payload.name,
        email=normalize_email(payload.email),
        password_hash=hash_password(plain),
        vendor_id=payload.vendor_id,
    )
    db.add(user)
    replace_roles(db, user, payload.roles)
    commit_or_conflict(db, "email has already been taken")
    db.refresh(user)

    logger.info(
        "user_created",
        user_id=user.id,
        roles=sorted(r.value for r in user.role_names),
        by_user=principal.user_id,
    )
    if payload.send_credentials:
        send_credentials(user, plain)
    return user


def update_user(db: Session, principal: Principal, user_id: Any, patch: UserUpdate) -> User:
    user = load_authorized(db, principal, User, user_id, Action.EDIT)

    patch_data = patch.model_dump(exclude_unset=True)
    for key in ("name", "email", "password", "roles"):
        if key in patch_data and patch_data[key] is None:
            patch_data.pop(key)

    if "email" in patch_data:
        _check_email_free(db, patch_data["email"], exclude_id=user.id)
        user.email = normalize_email(patch_data["email"])
    if "name" in patch_data:
        user.name = patch_data["name"]
    if "password" in patch_data:
        user.password_hash = hash_password(patch_data["password"])
    if "vendor_id" in patch_data:
        if patch_data["vendor_id"] is not None:
            _require_vendor(db, patch_data["vendor_id"])
        user.vendor_id = patch_data["vendor_id"]
    if "roles" in patch_data:
        if (
            user.has_role(Role.ADMIN)
            and Role.ADMIN not in patch_data["roles"]
            and admin_count(db) <= 1
        ):
            raise BusinessRuleError("last_admin", "cannot remove the admin role from the last admin")
        replace_roles(db, user, patch_data["roles"])

    commit_or_conflict(db, "email has already been taken")
    db.refresh(user)

    logger.info(
        "user_updated",
        user_id=user.id,
        fields=sorted(k for k in patch_data if k != "password"),
        password_changed="password" in patch_data,
        by_user=principal.user_id,
    )
    return user

def delete_user(db: Session, principal: Principal, user_id: Any) -> None:
    user = load_authorized(db, principal, User, user_id, Action.DELETE)

    # These hold for admins as well.
    paid = db.scalar(
        select(Ticket.id).where(Ticket.user_id == user.id, Ticket.status == TicketStatus.PAID).limit(1)
    )
    if paid is not None:
        raise BusinessRuleError("user_has_paid_tickets", "cannot delete a user with paid tickets")
    if user.has_role(Role.ADMIN) and admin_count(db) <= 1:
        raise BusinessRuleError("last_admin", "cannot delete the last admin")
    if user.vendor_id is not None:
        raise BusinessRuleError("user_linked_to_vendor", "cannot delete a user linked to a vendor")

    db.execute(delete(Ticket).where(Ticket.user_id == user.id))
    db.execute(delete(SupportTicket).where(SupportTicket.user_id == user.id))
    db.delete(user)
    commit_or_conflict(db)

    logger.info("user_deleted", user_id=user_id, by_user=principal.user_id)


def reset_password(
    db: Session,
    principal: Principal,
    user_id: Any,
    password: str | None = None,
    send: bool = True,
) -> User:
    user = load_authorized(db, principal, User, user_id, Action.EDIT)

    plain = password or generate_password()
    user.password_hash = hash_password(plain)
    commit_or_conflict(db)

    logger.info("user_password_reset", user_id=user.id, generated=password is None, by_user=principal.user_id)
    if send:
        send_credentials(user, plain)
    return user
