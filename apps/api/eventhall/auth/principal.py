from __future__ import annotations

from dataclasses import dataclass, field

from eventhall.models.user import STAFF_ROLES, VENDOR_ROLES, Role, User


@dataclass(frozen=True)
class Principal:
    """Who is asking: user id, role set and optional vendor affiliation.

    Every policy decision, scoped query and service call receives one of
    these explicitly. An anonymous principal has no id and no roles.
    """

    user_id: int | None = None
    roles: frozenset[Role] = field(default_factory=frozenset)
    vendor_id: int | None = None

    @classmethod
    def anonymous(cls) -> Principal:
        return cls()

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def has_any(self, *roles: Role) -> bool:
        return any(role in self.roles for role in roles)

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles

    @property
    def is_staff(self) -> bool:
        return bool(self.roles & STAFF_ROLES)

    @property
    def is_vendor_affiliated(self) -> bool:
        return bool(self.roles & VENDOR_ROLES)


def principal_for(user: User) -> Principal:
    return Principal(user_id=user.id, roles=user.role_names, vendor_id=user.vendor_id)
