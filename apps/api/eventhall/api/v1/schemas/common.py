from __future__ import annotations

from datetime import datetime, timezone
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")


def _ensure_tzaware(value: datetime | None) -> datetime | None:
    if value is None:
        return value
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        raise ValueError("datetime must be timezone-aware")
    return value


class SchemaBase(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra="ignore")


class TZAwareMixin(BaseModel):
    @field_validator("starts_at", "ends_at", mode="after", check_fields=False)
    @classmethod
    def _validate_tzaware(cls, value: datetime | None) -> datetime | None:
        return _ensure_tzaware(value)


class TimestampsOut(BaseModel):
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator(
        "created_at",
        "updated_at",
        "starts_at",
        "ends_at",
        "resolved_at",
        mode="after",
        check_fields=False,
    )
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        # SQLite round-trips timezone-aware columns as naive UTC.
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class PageOut(SchemaBase, Generic[T]):
    items: list[T]
    page: int = Field(ge=1)
    page_size: int = Field(ge=1)
    total: int = Field(ge=0)


class MessageOut(SchemaBase):
    status: str
    message: str | None = None
