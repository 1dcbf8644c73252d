"""Employee request and response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from areca.schemas.common import ApiModel, Pagination


class EmployeeCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=100)
    special_notes: str | None = None


class EmployeeUpdate(ApiModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    special_notes: str | None = None
    is_active: bool | None = None


class EmployeeOut(ApiModel):
    id: str
    name: str
    special_notes: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class EmployeeSummary(ApiModel):
    """Employee reference embedded in work records and payments."""

    id: str
    name: str


class EmployeeResponse(ApiModel):
    employee: EmployeeOut


class EmployeeMessageResponse(ApiModel):
    message: str
    employee: EmployeeOut


class EmployeeListResponse(ApiModel):
    employees: list[EmployeeOut]
    pagination: Pagination
