from __future__ import annotations

from decimal import Decimal

from pydantic import Field, model_validator

from eventhall.api.v1.schemas.common import SchemaBase, TimestampsOut

MAX_BULK_STANDS = 500


class StandCreate(SchemaBase):
    event_id: int
    name: str = Field(min_length=1, max_length=50)
    vendor_id: int | None = None
    location: str | None = Field(default=None, max_length=255)
    size_sqm: int | None = Field(default=None, ge=1)
    price_eur: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    is_reserved: bool = False


class StandUpdate(SchemaBase):
    event_id: int | None = None
    name: str | None = Field(default=None, min_length=1, max_length=50)
    vendor_id: int | None = None
    location: str | None = Field(default=None, max_length=255)
    size_sqm: int | None = Field(default=None, ge=1)
    price_eur: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    is_reserved: bool | None = None


class StandOut(TimestampsOut, SchemaBase):
    id: int
    event_id: int
    vendor_id: int | None = None
    name: str
    location: str | None = None
    size_sqm: int | None = None
    price_eur: Decimal | None = None
    is_reserved: bool


class StandAssignVendorIn(SchemaBase):
    vendor_id: int


class StandBulkCreate(SchemaBase):
    event_id: int
    prefix: str = Field(default="", max_length=10)
    start: int = Field(ge=1)
    end: int = Field(ge=1)
    location: str | None = Field(default=None, max_length=255)
    size_sqm: int | None = Field(default=None, ge=1)
    price_eur: Decimal | None = Field(default=None, ge=0, decimal_places=2)

    @model_validator(mode="after")
    def _validate_range(self):
        if self.end < self.start:
            raise ValueError("end must be greater than or equal to start")
        if self.end - self.start + 1 > MAX_BULK_STANDS:
            raise ValueError(f"at most {MAX_BULK_STANDS} stands per batch")
        return self


class StandBulkOut(SchemaBase):
    created: list[str]
    skipped: list[str]
