"""Dispatch schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from areca.schemas.common import ApiModel, as_utc, parse_record_date


class DispatchCreate(ApiModel):
    dispatched_kg: float = Field(..., gt=0)
    dispatch_date: datetime
    notes: str | None = None

    @field_validator("dispatch_date", mode="before")
    @classmethod
    def _parse_date(cls, value):
        return parse_record_date(value)

    @field_validator("dispatch_date")
    @classmethod
    def _to_utc(cls, value):
        return as_utc(value)


class DispatchOut(ApiModel):
    id: str
    dispatched_kg: float
    dispatch_date: datetime
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class DispatchMessageResponse(ApiModel):
    message: str
    dispatch: DispatchOut


class DispatchListResponse(ApiModel):
    dispatches: list[DispatchOut]
