from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session

from eventhall.api.v1.schemas.vendors import ContactPersonCreate, ContactPersonUpdate
from eventhall.auth.principal import Principal
from eventhall.authz.policy import authorize, load_authorized
from eventhall.authz.resources import Action, Resource
from eventhall.authz.scoping import scoped_select
from eventhall.models import ContactPerson, Role, User, Vendor
from eventhall.services.common import Page, commit_or_conflict, like, paginate
from eventhall.services.exceptions import BusinessRuleError, NotFoundError, ValidationError
from eventhall.services.users_service import (
    ProvisionedAccount,
    find_user_by_email,
    normalize_email,
    provision_account,
    send_credentials,
)

logger = structlog.get_logger()


def ensure_single_primary(db: Session, contact: ContactPerson) -> None:
    """Clear ``is_primary`` on the vendor's other contacts when ``contact`` is primary.

    Runs inside the caller's transaction, before its commit.
    """
    if not contact.is_primary:
        return
    db.flush()
    db.execute(
        update(ContactPerson)
        .where(
            ContactPerson.vendor_id == contact.vendor_id,
            ContactPerson.id != contact.id,
            ContactPerson.is_primary.is_(True),
        )
        .values(is_primary=False)
        .execution_options(synchronize_session="fetch")
    )


def _check_email_free(db: Session, email: str, exclude_id: int | None = None) -> None:
    stmt = select(ContactPerson.id).where(func.lower(ContactPerson.email) == normalize_email(email))
    if exclude_id is not None:
        stmt = stmt.where(ContactPerson.id != exclude_id)
    if db.scalar(stmt) is not None:
        raise ValidationError(
            "email_taken", "a contact person with this email already exists", field="email"
        )


def list_contact_persons(
    db: Session,
    principal: Principal,
    *,
    vendor_id: int | None = None,
    search: str | None = None,
    is_primary: bool | None = None,
    page: int = 1,
    page_size: int = 25,
) -> Page[ContactPerson]:
    authorize(principal, Action.VIEW_ANY, Resource.CONTACT_PERSON)

    stmt = scoped_select(principal, ContactPerson)
    if vendor_id is not None:
        stmt = stmt.where(ContactPerson.vendor_id == vendor_id)
    if search:
        term = like(search)
        stmt = stmt.where(
            or_(
                ContactPerson.name.ilike(term),
                ContactPerson.email.ilike(term),
                ContactPerson.phone.ilike(term),
            )
        )
    if is_primary is not None:
        stmt = stmt.where(ContactPerson.is_primary.is_(is_primary))

    return paginate(db, stmt.order_by(ContactPerson.name, ContactPerson.id), page, page_size)


def get_contact_person(db: Session, principal: Principal, contact_id: Any) -> ContactPerson:
    return load_authorized(db, principal, ContactPerson, contact_id)


def _provision_for(db: Session, contact: ContactPerson, password: str | None) -> ProvisionedAccount:
    account = provision_account(
        db,
        email=contact.email,
        name=contact.name,
        role=Role.CONTACTPERSOON,
        vendor_id=contact.vendor_id,
        password=password,
    )
    contact.user_id = account.user.id
    return account


def create_contact_person(db: Session, principal: Principal, payload: ContactPersonCreate) -> ContactPerson:
    authorize(principal, Action.CREATE, Resource.CONTACT_PERSON)

    if db.get(Vendor, payload.vendor_id) is None:
        raise NotFoundError("vendor_not_found", "vendor not found")
    _check_email_free(db, payload.email)

    contact = ContactPerson(
        vendor_id=payload.vendor_id,
        name=payload.name,
        email=normalize_email(payload.email),
        phone=payload.phone,
        role_label=payload.role_label,
        is_primary=payload.is_primary,
    )
    db.add(contact)

    account = None
    try:
        db.flush()
        if payload.create_user_account or payload.user_password:
            account = _provision_for(db, contact, payload.user_password)
        ensure_single_primary(db, contact)
    except Exception:
        db.rollback()
        raise

    commit_or_conflict(db, "a contact person with this email already exists")
    db.refresh(contact)

    logger.info(
        "contact_person_created",
        contact_person_id=contact.id,
        vendor_id=contact.vendor_id,
        has_user_account=contact.user_id is not None,
        by_user=principal.user_id,
    )
    if account is not None and account.created:
        send_credentials(account.user, account.password)
    return contact


def update_contact_person(
    db: Session, principal: Principal, contact_id: Any, patch: ContactPersonUpdate
) -> ContactPerson:
    contact = load_authorized(db, principal, ContactPerson, contact_id, Action.EDIT)

    patch_data = patch.model_dump(exclude_unset=True)
    for key in ("name", "email", "is_primary"):
        if key in patch_data and patch_data[key] is None:
            patch_data.pop(key)

    if "email" in patch_data:
        patch_data["email"] = normalize_email(patch_data["email"])
        if patch_data["email"] != contact.email:
            _check_email_free(db, patch_data["email"], exclude_id=contact.id)
            if contact.user_id is not None:
                # The linked login follows the contact's address.
                clash = find_user_by_email(db, patch_data["email"], exclude_id=contact.user_id)
                if clash is not None:
                    raise ValidationError("email_taken", "email has already been taken", field="email")
                linked = db.get(User, contact.user_id)
                if linked is not None:
                    linked.email = patch_data["email"]

    for key, value in patch_data.items():
        setattr(contact, key, value)
    ensure_single_primary(db, contact)

    commit_or_conflict(db, "a contact person with this email already exists")
    db.refresh(contact)

    logger.info(
        "contact_person_updated",
        contact_person_id=contact.id,
        fields=sorted(patch_data),
        by_user=principal.user_id,
    )
    return contact


def delete_contact_person(db: Session, principal: Principal, contact_id: Any) -> None:
    contact = load_authorized(db, principal, ContactPerson, contact_id, Action.DELETE)

    if contact.user_id is not None:
        raise BusinessRuleError(
            "contact_has_account", "cannot delete contact person with a linked user account; unlink it first"
        )

    db.delete(contact)
    commit_or_conflict(db)
    logger.info("contact_person_deleted", contact_person_id=contact_id, by_user=principal.user_id)


def create_account(
    db: Session,
    principal: Principal,
    contact_id: Any,
    password: str | None = None,
    send: bool = True,
) -> ContactPerson:
    contact = load_authorized(db, principal, ContactPerson, contact_id, Action.EDIT)

    if contact.user_id is not None:
        raise BusinessRuleError("contact_has_account", "contact person already has a user account")

    try:
        account = _provision_for(db, contact, password)
    except Exception:
        db.rollback()
        raise

    commit_or_conflict(db, "email has already been taken")
    db.refresh(contact)

    logger.info(
        "contact_person_account_created",
        contact_person_id=contact.id,
        user_id=contact.user_id,
        account_created=account.created,
        by_user=principal.user_id,
    )
    if send and account.created:
        send_credentials(account.user, account.password)
    return contact


def unlink_account(db: Session, principal: Principal, contact_id: Any) -> ContactPerson:
    contact = load_authorized(db, principal, ContactPerson, contact_id, Action.EDIT)

    if contact.user_id is None:
        raise BusinessRuleError("contact_without_account", "contact person has no user account")

    previous = contact.user_id
    contact.user_id = None
    commit_or_conflict(db)
    db.refresh(contact)

    logger.info(
        "contact_person_account_unlinked",
        contact_person_id=contact.id,
        user_id=previous,
        by_user=principal.user_id,
    )
    return contact
