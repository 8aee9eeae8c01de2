from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from eventhall.models import Role, RoleRecord, User


def get_or_create_role(db: Session, role: Role) -> RoleRecord:
    record = db.scalar(select(RoleRecord).where(RoleRecord.name == role.value))
    if record is None:
        record = RoleRecord(name=role.value)
        db.add(record)
        db.flush()
    return record


def ensure_roles(db: Session) -> list[RoleRecord]:
    return [get_or_create_role(db, role) for role in Role]


def grant_role(db: Session, user: User, role: Role) -> bool:
    """Give ``user`` the role unless it already has it. Does not commit."""
    if user.has_role(role):
        return False
    user.roles.append(get_or_create_role(db, role))
    return True


def replace_roles(db: Session, user: User, roles: Iterable[Role]) -> None:
    user.roles = [get_or_create_role(db, role) for role in dict.fromkeys(roles)]


def admin_count(db: Session) -> int:
    return int(
        db.scalar(
            select(func.count())
            .select_from(User)
            .where(User.roles.any(RoleRecord.name == Role.ADMIN.value))
        )
        or 0
    )

