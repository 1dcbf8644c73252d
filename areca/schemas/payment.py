"""Payment and payment status schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from areca.db.models import PaymentStatus
from areca.schemas.common import ApiModel
from areca.schemas.employee import EmployeeSummary


class PaymentCreate(ApiModel):
    employee_id: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    notes: str | None = None


class PaymentUpdate(ApiModel):
    status: PaymentStatus
    notes: str | None = None


class PaymentOut(ApiModel):
    id: str
    employee_id: str
    amount: float
    status: PaymentStatus
    paid_at: datetime | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
    employee: EmployeeSummary


class PaymentResponse(ApiModel):
    payment: PaymentOut


class PaymentMessageResponse(ApiModel):
    message: str
    payment: PaymentOut


class PaymentListResponse(ApiModel):
    payments: list[PaymentOut]


class PaymentStatusSummaryOut(ApiModel):
    """Unpaid work of one employee since their latest payment."""

    employee_id: str
    employee_name: str
    has_payment: bool
    payment_status: str = Field(..., description="Latest payment status, or NONE.")
    last_payment_date: datetime | None = None
    paid_at: datetime | None = None
    total_kilograms: float
    pending_kilograms: float
    has_new_records_after_payment: bool


class PaymentStatusResponse(ApiModel):
    payment_status: list[PaymentStatusSummaryOut]
