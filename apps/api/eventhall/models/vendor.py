from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from eventhall.models.base import Base, IdPrimaryKeyMixin, TimestampMixin, str_enum

if TYPE_CHECKING:
    from eventhall.models.stand import Stand
    from eventhall.models.user import User


class VendorStatus(str, Enum):
    PROSPECT = "prospect"
    CONFIRMED = "confirmed"
    BLACKLISTED = "blacklisted"


class Vendor(Base, IdPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "vendors"

    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[VendorStatus] = mapped_column(
        str_enum(VendorStatus, "vendor_status"),
        nullable=False,
        default=VendorStatus.PROSPECT,
    )
    vat_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    kvk_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    billing_email: Mapped[str] = mapped_column(String(320), nullable=False)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    billing_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    users: Mapped[list[User]] = relationship(back_populates="vendor")
    contact_persons: Mapped[list[ContactPerson]] = relationship(back_populates="vendor")
    stands: Mapped[list[Stand]] = relationship(back_populates="vendor")


class ContactPerson(Base, IdPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "contact_people"

    vendor_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("vendors.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    role_label: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    vendor: Mapped[Vendor] = relationship(back_populates="contact_persons")
