from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventhall.services.exceptions import ConflictError

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 100


class Page(Generic[T]):
    # FastAPI deep-copies dataclass responses, so this stays a plain class.
    def __init__(self, items: list[T], page: int, page_size: int, total: int) -> None:
        self.items = items
        self.page = page
        self.page_size = page_size
        self.total = total


def paginate(db: Session, stmt: Select[Any], page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> Page:
    page = max(page, 1)
    page_size = min(max(page_size, 1), MAX_PAGE_SIZE)

    total = db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery())) or 0
    items = db.scalars(stmt.offset((page - 1) * page_size).limit(page_size)).all()
    return Page(items=list(items), page=page, page_size=page_size, total=int(total))


def commit_or_conflict(db: Session, message: str = "conflicting record") -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("conflict", message) from exc


def like(term: str) -> str:
    return f"%{term.strip().lower()}%"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes for timezone-aware columns; those are UTC.
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
