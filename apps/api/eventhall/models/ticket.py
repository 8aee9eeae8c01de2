from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import TYPE_CHECKING

import sqlalchemy as sa
from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from eventhall.models.base import Base, IdPrimaryKeyMixin, TimestampMixin, str_enum

if TYPE_CHECKING:
    from eventhall.models.event import Event

CENT = Decimal("0.01")


class TicketType(str, Enum):
    REGULAR = "regular"
    VIP = "vip"


class TicketStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


def compute_total(quantity: int, unit_price: Decimal | float | str) -> Decimal:
    return (Decimal(quantity) * Decimal(str(unit_price))).quantize(CENT, rounding=ROUND_HALF_UP)


class Ticket(Base, IdPrimaryKeyMixin, TimestampMixin):
    """An event ticket purchase (not a support ticket)."""

    __tablename__ = "tickets"
    __table_args__ = (sa.Index("ix_tickets_event_status", "event_id", "status"),)

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    event_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[TicketType] = mapped_column(
        str_enum(TicketType, "ticket_type"), nullable=False, default=TicketType.REGULAR
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    status: Mapped[TicketStatus] = mapped_column(
        str_enum(TicketStatus, "ticket_status"), nullable=False, default=TicketStatus.PENDING
    )

    event: Mapped[Event] = relationship(back_populates="tickets")

    def recompute_total(self) -> None:
        self.total_price = compute_total(self.quantity, self.unit_price)


class SupportTicketStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class SupportTicketPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


RESOLVED_STATUSES = frozenset({SupportTicketStatus.RESOLVED, SupportTicketStatus.CLOSED})


class SupportTicket(Base, IdPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "support_tickets"
    __table_args__ = (sa.Index("ix_support_tickets_vendor_status", "vendor_id", "status"),)

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    vendor_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("vendors.id", ondelete="SET NULL"), nullable=True
    )
    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[SupportTicketStatus] = mapped_column(
        str_enum(SupportTicketStatus, "support_ticket_status"),
        nullable=False,
        default=SupportTicketStatus.OPEN,
    )
    priority: Mapped[SupportTicketPriority] = mapped_column(
        str_enum(SupportTicketPriority, "support_ticket_priority"),
        nullable=False,
        default=SupportTicketPriority.NORMAL,
    )
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
