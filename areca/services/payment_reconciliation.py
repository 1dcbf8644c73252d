"""Payment reconciliation: unpaid kilograms per employee.

A pure computation over snapshots that the caller loaded in batch (one query
per collection, already scoped to a single owner). Nothing here touches the
database or reads the clock, so the same inputs always produce the same
summaries.

Watermark rule: the *latest* payment of an employee is the one with the
greatest ``created_at`` whatever its status. When it carries a ``paid_at``,
only work records created strictly after that instant are pending; when it
does not (e.g. a PENDING payment), every record of the employee is pending.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Protocol, Sequence

NO_PAYMENT_STATUS = "NONE"


class EmployeeLike(Protocol):
    id: str
    name: str


class WorkRecordLike(Protocol):
    employee_id: str
    kilograms: float
    created_at: datetime


class PaymentLike(Protocol):
    employee_id: str
    status: object
    paid_at: datetime | None
    created_at: datetime


@dataclass(frozen=True)
class PaymentStatusSummary:
    """Unpaid-work summary of one employee."""

    employee_id: str
    employee_name: str
    has_payment: bool
    payment_status: str
    total_kilograms: float
    pending_kilograms: float
    has_new_records_after_payment: bool
    last_payment_date: datetime | None = None
    paid_at: datetime | None = None


def _status_name(status: object) -> str:
    # PaymentStatus is a str enum; plain strings pass through unchanged
    return getattr(status, "value", status)  # type: ignore[return-value]


def _latest_payments(payments: Iterable[PaymentLike]) -> dict[str, PaymentLike]:
    latest: dict[str, PaymentLike] = {}
    for payment in payments:
        current = latest.get(payment.employee_id)
        if current is None or payment.created_at > current.created_at:
            latest[payment.employee_id] = payment
    return latest


def summarize_employee(
    employee: EmployeeLike,
    records: Sequence[WorkRecordLike],
    latest_payment: PaymentLike | None,
) -> PaymentStatusSummary:
    """Build the summary of one employee from its records and latest payment."""
    total = sum(record.kilograms for record in records)

    if latest_payment is not None and latest_payment.paid_at is not None:
        watermark = latest_payment.paid_at
        pending = [record for record in records if record.created_at > watermark]
    else:
        pending = list(records)

    return PaymentStatusSummary(
        employee_id=employee.id,
        employee_name=employee.name,
        has_payment=latest_payment is not None,
        payment_status=_status_name(latest_payment.status) if latest_payment else NO_PAYMENT_STATUS,
        total_kilograms=total,
        pending_kilograms=sum(record.kilograms for record in pending),
        has_new_records_after_payment=bool(pending),
        last_payment_date=latest_payment.created_at if latest_payment else None,
        paid_at=latest_payment.paid_at if latest_payment else None,
    )


def reconcile_payment_status(
    employees: Sequence[EmployeeLike],
    work_records: Iterable[WorkRecordLike],
    payments: Iterable[PaymentLike],
) -> list[PaymentStatusSummary]:
    """Compute one summary per employee, in the order employees were given.

    Args:
        employees: Employees of one owner.
        work_records: All work records of that owner.
        payments: All payment events of that owner.

    Returns:
        Exactly one PaymentStatusSummary per employee, including employees
        without work records (zero totals, nothing pending).
    """
    records_by_employee: dict[str, list[WorkRecordLike]] = defaultdict(list)
    for record in work_records:
        records_by_employee[record.employee_id].append(record)

    latest_by_employee = _latest_payments(payments)

    return [
        summarize_employee(
            employee,
            records_by_employee.get(employee.id, []),
            latest_by_employee.get(employee.id),
        )
        for employee in employees
    ]
