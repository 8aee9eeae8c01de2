from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import Field

from eventhall.api.v1.schemas.common import SchemaBase, TimestampsOut, TZAwareMixin
from eventhall.models.event import EventStatus


class EventCreate(TZAwareMixin, SchemaBase):
    name: str = Field(min_length=1, max_length=255)
    starts_at: datetime
    ends_at: datetime
    location: str | None = Field(default=None, max_length=255)
    capacity: int | None = Field(default=None, ge=1)
    description: str | None = None
    status: EventStatus = EventStatus.DRAFT


class EventUpdate(TZAwareMixin, SchemaBase):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    location: str | None = Field(default=None, max_length=255)
    capacity: int | None = Field(default=None, ge=1)
    description: str | None = None
    status: EventStatus | None = None


class EventOut(TimestampsOut, SchemaBase):
    id: int
    name: str
    slug: str
    status: EventStatus
    starts_at: datetime
    ends_at: datetime
    location: str | None = None
    capacity: int | None = None
    description: str | None = None


class PublicEventOut(TimestampsOut, SchemaBase):
    name: str
    slug: str
    starts_at: datetime
    ends_at: datetime
    location: str | None = None
    description: str | None = None


class EventDeleteOutcome(str, Enum):
    DELETED = "deleted"
    ARCHIVED = "archived"


class EventDeleteOut(SchemaBase):
    id: int
    outcome: EventDeleteOutcome


class EventStatisticsOut(SchemaBase):
    event_id: int
    total_stands: int
    occupied_stands: int
    available_stands: int
    paid_tickets: int
    paid_revenue: Decimal
    pending_tickets: int
