"""Dashboard metrics schema."""

from __future__ import annotations

from areca.schemas.common import ApiModel


class DashboardStats(ApiModel):
    total_employees: int
    active_employees: int
    total_work_records: int
    total_kilograms: float
    today_kilograms: float
    payment_rate: float
    total_paid: float
    pending_payments: float
    total_dispatched_kg: float
    pending_kilograms: float
    employees_awaiting_payment: int
