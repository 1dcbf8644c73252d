"""Work record schemas.

Record dates accept ``YYYY-MM-DD`` (start of day UTC) or a full ISO datetime.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from areca.schemas.common import ApiModel, Pagination, as_utc, parse_record_date
from areca.schemas.employee import EmployeeSummary

MAX_KILOGRAMS = 9999.999


class WorkRecordCreate(ApiModel):
    employee_id: str = Field(..., min_length=1)
    date: datetime
    kilograms: float = Field(..., ge=0, le=MAX_KILOGRAMS)
    notes: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value):
        return parse_record_date(value)

    @field_validator("date")
    @classmethod
    def _to_utc(cls, value):
        return as_utc(value)


class WorkRecordUpdate(ApiModel):
    date: datetime | None = None
    kilograms: float | None = Field(default=None, ge=0, le=MAX_KILOGRAMS)
    notes: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value):
        return parse_record_date(value)

    @field_validator("date")
    @classmethod
    def _to_utc(cls, value):
        return as_utc(value)


class WorkRecordOut(ApiModel):
    id: str
    employee_id: str
    date: datetime
    kilograms: float
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
    employee: EmployeeSummary


class WorkRecordResponse(ApiModel):
    work_record: WorkRecordOut


class WorkRecordMessageResponse(ApiModel):
    message: str
    work_record: WorkRecordOut


class WorkRecordListResponse(ApiModel):
    work_records: list[WorkRecordOut]
    pagination: Pagination
