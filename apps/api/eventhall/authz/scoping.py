"""
Row-level scoping.

A principal's scope for a resource type is the set of rows it may see. The
same ``Scope`` value renders to a SQL clause for list/show queries and
evaluates against a loaded record for single-record policy checks, so the
two can never disagree.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeVar

from sqlalchemy import Select, false, or_, select, true
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from eventhall.auth.principal import Principal
from eventhall.authz.resources import Resource, resource_for
from eventhall.models import EventStatus, Role
from eventhall.services.exceptions import NotFoundError

ModelT = TypeVar("ModelT")


@dataclass(frozen=True)
class Scope:
    unrestricted: bool = False
    # OR of (attribute, value) equality conditions; empty means "match nothing"
    any_of: tuple[tuple[str, Any], ...] = ()

    @classmethod
    def everything(cls) -> Scope:
        return cls(unrestricted=True)

    @classmethod
    def nothing(cls) -> Scope:
        return cls()

    @classmethod
    def where(cls, **conditions: Any) -> Scope:
        if any(value is None for value in conditions.values()):
            # Comparing against NULL would widen the scope (IS NULL), never narrow it.
            raise ValueError("scope conditions must not be None")
        return cls(any_of=tuple(conditions.items()))

    def union(self, other: Scope) -> Scope:
        if self.unrestricted or other.unrestricted:
            return Scope.everything()
        return Scope(any_of=self.any_of + other.any_of)

    @property
    def is_empty(self) -> bool:
        return not self.unrestricted and not self.any_of

    def matches(self, record: Any) -> bool:
        if self.unrestricted:
            return True
        return any(getattr(record, attr) == value for attr, value in self.any_of)

    def clause(self, model: type) -> ColumnElement[bool]:
        if self.unrestricted:
            return true()
        if not self.any_of:
            return false()
        return or_(*(getattr(model, attr) == value for attr, value in self.any_of))


def _vendor_scope(principal: Principal, attr: str = "vendor_id") -> Scope:
    if principal.vendor_id is None:
        return Scope.nothing()
    return Scope.where(**{attr: principal.vendor_id})


def _own_rows(principal: Principal) -> Scope:
    if not principal.is_authenticated:
        return Scope.nothing()
    return Scope.where(user_id=principal.user_id)


def scope_for(principal: Principal, resource: Resource) -> Scope:
    if principal.is_staff:
        return Scope.everything()

    if resource is Resource.EVENT:
        if principal.is_vendor_affiliated:
            return Scope.where(status=EventStatus.PUBLISHED)
        return Scope.nothing()

    if resource is Resource.STAND:
        if principal.is_vendor_affiliated:
            return _vendor_scope(principal)
        return Scope.nothing()

    if resource is Resource.VENDOR:
        if principal.has_any(Role.VERKOPER):
            return _vendor_scope(principal, attr="id")
        return Scope.nothing()

    if resource is Resource.CONTACT_PERSON:
        if principal.has_any(Role.VERKOPER):
            return _vendor_scope(principal)
        return Scope.nothing()

    if resource is Resource.TICKET:
        return _own_rows(principal)

    if resource is Resource.SUPPORT_TICKET:
        scope = _own_rows(principal)
        if principal.is_vendor_affiliated:
            scope = scope.union(_vendor_scope(principal))
        return scope

    return Scope.nothing()


def scoped_select(principal: Principal, model: type[ModelT]) -> Select[tuple[ModelT]]:
    scope = scope_for(principal, resource_for(model))
    return select(model).where(scope.clause(model))


def get_scoped(db: Session, principal: Principal, model: type[ModelT], record_id: Any) -> ModelT:
    """Load one row by id through the principal's scope.

    Rows outside the scope are reported exactly like missing rows.
    """
    record = db.scalar(scoped_select(principal, model).where(model.id == record_id))
    if record is None:
        raise NotFoundError(f"{resource_for(model).value}_not_found", "not found")
    return record
