from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from eventhall.api.v1.schemas.common import SchemaBase, TimestampsOut
from eventhall.models.ticket import (
    SupportTicketPriority,
    SupportTicketStatus,
    TicketStatus,
    TicketType,
)

MAX_TICKET_QUANTITY = 10


class TicketCreate(SchemaBase):
    event_id: int
    type: TicketType = TicketType.REGULAR
    quantity: int = Field(ge=1, le=MAX_TICKET_QUANTITY)
    unit_price: Decimal = Field(ge=0, decimal_places=2)
    user_id: int | None = None
    status: TicketStatus | None = None


class TicketUpdate(SchemaBase):
    type: TicketType | None = None
    quantity: int | None = Field(default=None, ge=1, le=MAX_TICKET_QUANTITY)
    unit_price: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    status: TicketStatus | None = None


class TicketOut(TimestampsOut, SchemaBase):
    id: int
    user_id: int
    event_id: int
    type: TicketType
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    status: TicketStatus


class TicketDeleteOut(SchemaBase):
    id: int
    outcome: str


class PricingQuoteIn(SchemaBase):
    quantity: int = Field(ge=1)
    unit_price: Decimal = Field(ge=0)


class PricingQuoteOut(SchemaBase):
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    formatted_total: str


class TicketBreakdownOut(SchemaBase):
    key: str
    quantity: int
    revenue: Decimal


class TicketStatisticsOut(SchemaBase):
    total_quantity: int
    paid_revenue: Decimal
    pending_revenue: Decimal
    by_status: list[TicketBreakdownOut]
    by_type: list[TicketBreakdownOut]


class SupportTicketCreate(SchemaBase):
    subject: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    priority: SupportTicketPriority = SupportTicketPriority.NORMAL
    status: SupportTicketStatus | None = None


class SupportTicketUpdate(SchemaBase):
    subject: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, min_length=1)
    priority: SupportTicketPriority | None = None
    status: SupportTicketStatus | None = None


class SupportTicketOut(TimestampsOut, SchemaBase):
    id: int
    user_id: int
    vendor_id: int | None = None
    subject: str
    description: str
    status: SupportTicketStatus
    priority: SupportTicketPriority
    resolved_at: datetime | None = None
