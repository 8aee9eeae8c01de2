from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from eventhall.models.base import Base, IdPrimaryKeyMixin, TimestampMixin

if TYPE_CHECKING:
    from eventhall.models.vendor import Vendor


class Role(str, Enum):
    ADMIN = "admin"
    SUPPORT = "support"
    VERKOPER = "verkoper"
    CONTACTPERSOON = "contactpersoon"
    USER = "user"


STAFF_ROLES = frozenset({Role.ADMIN, Role.SUPPORT})
VENDOR_ROLES = frozenset({Role.VERKOPER, Role.CONTACTPERSOON})


user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class RoleRecord(Base, IdPrimaryKeyMixin):
    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)


class User(Base, IdPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False, index=True)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    vendor_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("vendors.id", ondelete="SET NULL"), nullable=True, index=True
    )

    roles: Mapped[list[RoleRecord]] = relationship(secondary=user_roles, lazy="selectin")
    vendor: Mapped[Vendor | None] = relationship(back_populates="users")

    @property
    def role_names(self) -> frozenset[Role]:
        return frozenset(Role(r.name) for r in self.roles)

    def has_role(self, role: Role) -> bool:
        return role in self.role_names
