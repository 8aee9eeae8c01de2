"""
Central role-based policy engine.

Every decision is a pure function of the principal and the record's own
fields. ``can_view`` delegates to the row scope so that a record is visible
exactly when the scoped list query would return it.
"""

from __future__ import annotations

from typing import Any, TypeVar

from sqlalchemy.orm import Session

from eventhall.auth.principal import Principal
from eventhall.authz.resources import Action, Resource, resource_for
from eventhall.authz.scoping import get_scoped, scope_for
from eventhall.models import Role, SupportTicketStatus, TicketStatus
from eventhall.services.exceptions import PermissionDeniedError

ALL_ROLES = tuple(Role)

ModelT = TypeVar("ModelT")


class Policy:
    resource: Resource

    # Role sets per action; subclasses override the record-level hooks when
    # a rule depends on the record itself.
    view_any_roles: tuple[Role, ...] = ()
    create_roles: tuple[Role, ...] = (Role.ADMIN,)
    edit_roles: tuple[Role, ...] = (Role.ADMIN,)
    delete_roles: tuple[Role, ...] = (Role.ADMIN,)

    def can_view_any(self, principal: Principal) -> bool:
        return principal.has_any(*self.view_any_roles)

    def can_view(self, principal: Principal, record: Any) -> bool:
        return scope_for(principal, self.resource).matches(record)

    def can_create(self, principal: Principal) -> bool:
        return principal.has_any(*self.create_roles)

    def can_edit(self, principal: Principal, record: Any) -> bool:
        return principal.has_any(*self.edit_roles)

    def can_delete(self, principal: Principal, record: Any) -> bool:
        return principal.has_any(*self.delete_roles)


class EventPolicy(Policy):
    resource = Resource.EVENT
    view_any_roles = (Role.ADMIN, Role.SUPPORT, Role.VERKOPER, Role.CONTACTPERSOON)


class StandPolicy(Policy):
    resource = Resource.STAND
    view_any_roles = (Role.ADMIN, Role.SUPPORT, Role.VERKOPER, Role.CONTACTPERSOON)
    create_roles = (Role.ADMIN, Role.SUPPORT)
    edit_roles = (Role.ADMIN, Role.SUPPORT)


class VendorPolicy(Policy):
    resource = Resource.VENDOR
    view_any_roles = (Role.ADMIN, Role.SUPPORT, Role.VERKOPER)


class ContactPersonPolicy(Policy):
    resource = Resource.CONTACT_PERSON
    view_any_roles = (Role.ADMIN, Role.SUPPORT, Role.VERKOPER)


class TicketPolicy(Policy):
    resource = Resource.TICKET

    def can_view_any(self, principal: Principal) -> bool:
        return principal.is_authenticated

    def can_create(self, principal: Principal) -> bool:
        return principal.is_authenticated

    def can_edit(self, principal: Principal, record: Any) -> bool:
        if principal.is_staff:
            return True
        return (
            principal.is_authenticated
            and record.user_id == principal.user_id
            and record.status == TicketStatus.PENDING
        )


EDITABLE_SUPPORT_STATUSES = frozenset({SupportTicketStatus.OPEN, SupportTicketStatus.IN_PROGRESS})


class SupportTicketPolicy(Policy):
    resource = Resource.SUPPORT_TICKET
    view_any_roles = ALL_ROLES

    def can_view_any(self, principal: Principal) -> bool:
        return principal.is_authenticated and principal.has_any(*self.view_any_roles)

    def can_create(self, principal: Principal) -> bool:
        return principal.is_authenticated

    def can_edit(self, principal: Principal, record: Any) -> bool:
        if principal.is_staff:
            return True
        return (
            principal.is_authenticated
            and record.user_id == principal.user_id
            and record.status in EDITABLE_SUPPORT_STATUSES
        )


class UserPolicy(Policy):
    resource = Resource.USER
    view_any_roles = (Role.ADMIN, Role.SUPPORT)


POLICIES: dict[Resource, Policy] = {
    policy.resource: policy
    for policy in (
        EventPolicy(),
        StandPolicy(),
        VendorPolicy(),
        ContactPersonPolicy(),
        TicketPolicy(),
        SupportTicketPolicy(),
        UserPolicy(),
    )
}


def policy_for(resource: Resource) -> Policy:
    return POLICIES[resource]


def can(principal: Principal, action: Action, resource: Resource, record: Any = None) -> bool:
    policy = policy_for(resource)
    if action is Action.VIEW_ANY:
        return policy.can_view_any(principal)
    if action is Action.CREATE:
        return policy.can_create(principal)

    if record is None:
        raise ValueError(f"{action.value} on {resource.value} needs a record")
    if action is Action.VIEW:
        return policy.can_view(principal, record)
    if action is Action.EDIT:
        return policy.can_edit(principal, record)
    if action is Action.DELETE:
        return policy.can_delete(principal, record)
    raise ValueError(f"unknown action: {action}")


def authorize(principal: Principal, action: Action, resource: Resource, record: Any = None) -> None:
    if not can(principal, action, resource, record):
        raise PermissionDeniedError("unauthorized", "unauthorized")


def load_authorized(
    db: Session,
    principal: Principal,
    model: type[ModelT],
    record_id: Any,
    action: Action = Action.VIEW,
) -> ModelT:
    """Role gate, then scoped lookup, then the record-level rule for ``action``.

    Denied role gates and record rules raise 403; ids outside the principal's
    scope raise 404.
    """
    resource = resource_for(model)
    authorize(principal, Action.VIEW_ANY, resource)
    record = get_scoped(db, principal, model, record_id)
    if action is not Action.VIEW:
        authorize(principal, action, resource, record)
    return record
