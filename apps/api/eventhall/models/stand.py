from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from eventhall.models.base import Base, IdPrimaryKeyMixin, TimestampMixin

if TYPE_CHECKING:
    from eventhall.models.event import Event
    from eventhall.models.vendor import Vendor


class Stand(Base, IdPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "stands"
    __table_args__ = (
        UniqueConstraint("event_id", "name", name="uq_stands_event_name"),
        # NULL vendor_ids are distinct, so any number of stands can be available.
        UniqueConstraint("event_id", "vendor_id", name="uq_stands_event_vendor"),
    )

    event_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    vendor_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("vendors.id", ondelete="SET NULL"), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    size_sqm: Mapped[int | None] = mapped_column(Integer, nullable=True)
    price_eur: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    is_reserved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    event: Mapped[Event] = relationship(back_populates="stands")
    vendor: Mapped[Vendor | None] = relationship(back_populates="stands")
