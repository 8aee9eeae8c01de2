from __future__ import annotations

from pydantic import EmailStr, Field

from eventhall.api.v1.schemas.common import SchemaBase, TimestampsOut
from eventhall.models.vendor import VendorStatus


class VendorCreate(SchemaBase):
    company_name: str = Field(min_length=1, max_length=255)
    status: VendorStatus = VendorStatus.PROSPECT
    vat_number: str | None = Field(default=None, max_length=50)
    kvk_number: str | None = Field(default=None, max_length=50)
    billing_email: EmailStr
    website: str | None = Field(default=None, max_length=255)
    billing_address: str | None = None
    notes: str | None = None

    # Optional login account for the vendor's sales rep
    user_email: EmailStr | None = None
    user_name: str | None = Field(default=None, max_length=255)
    user_password: str | None = Field(default=None, min_length=8)


class VendorUpdate(SchemaBase):
    company_name: str | None = Field(default=None, min_length=1, max_length=255)
    status: VendorStatus | None = None
    vat_number: str | None = Field(default=None, max_length=50)
    kvk_number: str | None = Field(default=None, max_length=50)
    billing_email: EmailStr | None = None
    website: str | None = Field(default=None, max_length=255)
    billing_address: str | None = None
    notes: str | None = None


class VendorOut(TimestampsOut, SchemaBase):
    id: int
    company_name: str
    status: VendorStatus
    vat_number: str | None = None
    kvk_number: str | None = None
    billing_email: str
    website: str | None = None
    billing_address: str | None = None
    notes: str | None = None


class VendorDeleteOut(SchemaBase):
    id: int
    deleted_users: list[int]
    unlinked_users: list[int]


class ContactPersonCreate(SchemaBase):
    vendor_id: int
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=50)
    role_label: str | None = Field(default=None, max_length=100)
    is_primary: bool = False
    create_user_account: bool = False
    user_password: str | None = Field(default=None, min_length=8)


class ContactPersonUpdate(SchemaBase):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50)
    role_label: str | None = Field(default=None, max_length=100)
    is_primary: bool | None = None


class ContactPersonOut(TimestampsOut, SchemaBase):
    id: int
    vendor_id: int
    name: str
    email: str
    phone: str | None = None
    role_label: str | None = None
    is_primary: bool
    user_id: int | None = None


class ContactAccountCreate(SchemaBase):
    password: str | None = Field(default=None, min_length=8)
    send_credentials: bool = True
