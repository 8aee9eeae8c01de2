from __future__ import annotations

from pydantic import EmailStr, Field, field_validator

from eventhall.api.v1.schemas.common import SchemaBase, TimestampsOut
from eventhall.models.user import Role


class UserCreate(SchemaBase):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str | None = Field(default=None, min_length=8)
    roles: list[Role] = Field(default_factory=lambda: [Role.USER])
    vendor_id: int | None = None
    send_credentials: bool = True


class UserUpdate(SchemaBase):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=8)
    roles: list[Role] | None = None
    vendor_id: int | None = None


class UserOut(TimestampsOut, SchemaBase):
    id: int
    name: str
    email: str
    vendor_id: int | None = None
    roles: list[Role]

    @field_validator("roles", mode="before")
    @classmethod
    def _role_names(cls, value):
        return sorted(getattr(r, "name", r) for r in value)


class PasswordResetIn(SchemaBase):
    password: str | None = Field(default=None, min_length=8)
    send_credentials: bool = True


class LoginIn(SchemaBase):
    email: EmailStr
    password: str


class TokenOut(SchemaBase):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class MeOut(SchemaBase):
    user_id: int
    name: str
    email: str
    roles: list[Role]
    vendor_id: int | None = None


class ContactFormIn(SchemaBase):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    subject: str = Field(min_length=1, max_length=255)
    message: str = Field(min_length=1, max_length=5000)
