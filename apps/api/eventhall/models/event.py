from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from eventhall.models.base import Base, IdPrimaryKeyMixin, TimestampMixin, str_enum

if TYPE_CHECKING:
    from eventhall.models.stand import Stand
    from eventhall.models.ticket import Ticket


class EventStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class Event(Base, IdPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "events"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # Public URLs use the slug; see events_service.unique_slug
    slug: Mapped[str] = mapped_column(String(280), unique=True, nullable=False, index=True)
    status: Mapped[EventStatus] = mapped_column(
        str_enum(EventStatus, "event_status"),
        nullable=False,
        default=EventStatus.DRAFT,
        index=True,
    )
    starts_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ends_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    capacity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    stands: Mapped[list[Stand]] = relationship(back_populates="event")
    tickets: Mapped[list[Ticket]] = relationship(back_populates="event")
