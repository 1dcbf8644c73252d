"""Shared schema building blocks."""

from __future__ import annotations

import math
import re
from datetime import date, datetime, time, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class ApiModel(BaseModel):
    """Base for all API payloads.

    JSON uses camelCase; request bodies also accept the snake_case names.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(ApiModel):
    message: str


class Pagination(ApiModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, *, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if limit else 0)


def parse_record_date(value: Any) -> Any:
    """Turn a date-only record date into start of day UTC.

    Used as a ``mode="before"`` validator; any other value is left for
    pydantic's own datetime parsing.
    """
    if isinstance(value, str) and _DATE_ONLY.match(value):
        return datetime.combine(date.fromisoformat(value), time.min, tzinfo=timezone.utc)
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    return value


def as_utc(value: datetime | None) -> datetime | None:
    """Normalize a parsed datetime to UTC; naive values are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
