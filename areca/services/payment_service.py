"""Owner-scoped payments and the payment status report."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from areca.core.errors import NotFoundAppError
from areca.db.base import utcnow
from areca.db.models import Employee, Payment, PaymentStatus, WorkRecord
from areca.schemas.payment import PaymentCreate, PaymentUpdate
from areca.services.base import OwnedResourceService, storage_errors
from areca.services.employee_service import EmployeeService
from areca.services.payment_reconciliation import PaymentStatusSummary, reconcile_payment_status

logger = logging.getLogger(__name__)


class PaymentService(OwnedResourceService):
    def __init__(self, db: Session, owner_id: str, *, clock: Callable[[], datetime] = utcnow) -> None:
        super().__init__(db, owner_id)
        self._clock = clock

    def list(self) -> list[Payment]:
        with storage_errors(self.db, "Failed to fetch payments", operation="payments.list"):
            payments = self.db.scalars(
                select(Payment)
                .options(joinedload(Payment.employee))
                .where(Payment.owner_id == self.owner_id)
                .order_by(Payment.created_at.desc())
            ).all()
        return list(payments)

    def get(self, payment_id: str) -> Payment:
        with storage_errors(self.db, "Failed to fetch payment", operation="payments.get"):
            payment = self.db.scalar(
                select(Payment)
                .options(joinedload(Payment.employee))
                .where(Payment.id == payment_id, Payment.owner_id == self.owner_id)
            )
        if payment is None:
            raise NotFoundAppError(
                code="payment_not_found",
                message="Payment not found",
                details={"resource": "payment", "resource_id": payment_id},
            )
        return payment

    def create(self, payload: PaymentCreate) -> Payment:
        """Record a payment owed to an employee; it starts as PENDING."""
        return self._record(
            payload,
            status=PaymentStatus.PENDING,
            operation="payments.create",
            message="Failed to create payment",
        )

    def mark_paid(self, payload: PaymentCreate) -> Payment:
        """Record a settled payment, moving the employee's watermark to now."""
        return self._record(
            payload,
            status=PaymentStatus.PAID,
            operation="payments.mark_paid",
            message="Failed to mark as paid",
        )

    def update(self, payment_id: str, payload: PaymentUpdate) -> Payment:
        """Change status and notes; switching to PAID stamps ``paid_at``."""
        payment = self.get(payment_id)
        with storage_errors(self.db, "Failed to update payment", operation="payments.update"):
            payment.status = payload.status
            if "notes" in payload.model_fields_set:
                payment.notes = payload.notes
            if payload.status == PaymentStatus.PAID:
                payment.paid_at = self._clock()
            self.db.commit()
        logger.info(
            "payment.updated",
            extra={"payment_id": payment.id, "status": payment.status.value},
        )
        return payment

    def delete(self, payment_id: str) -> None:
        payment = self.get(payment_id)
        with storage_errors(self.db, "Failed to delete payment", operation="payments.delete"):
            self.db.delete(payment)
            self.db.commit()
        logger.info("payment.deleted", extra={"payment_id": payment_id})

    def payment_status(self) -> list[PaymentStatusSummary]:
        """Pending kilograms of every active employee since their last payment.

        Loads the three inputs with one query each, then reconciles in memory.
        """
        with storage_errors(self.db, "Failed to fetch payment status", operation="payments.status"):
            employees = self.db.scalars(
                select(Employee)
                .where(Employee.owner_id == self.owner_id, Employee.is_active == True)  # noqa: E712
                .order_by(Employee.created_at)
            ).all()
            work_records = self.db.scalars(
                select(WorkRecord).where(WorkRecord.owner_id == self.owner_id)
            ).all()
            payments = self.db.scalars(
                select(Payment).where(Payment.owner_id == self.owner_id)
            ).all()

        summaries = reconcile_payment_status(employees, work_records, payments)
        logger.info(
            "payment_status.computed",
            extra={
                "owner_id": self.owner_id,
                "employees": len(employees),
                "work_records": len(work_records),
                "payments": len(payments),
                "awaiting_payment": sum(1 for s in summaries if s.has_new_records_after_payment),
            },
        )
        return summaries

    def _record(
        self,
        payload: PaymentCreate,
        *,
        status: PaymentStatus,
        operation: str,
        message: str,
    ) -> Payment:
        employee = EmployeeService(self.db, self.owner_id).get(payload.employee_id)
        payment = Payment(
            owner_id=self.owner_id,
            employee=employee,
            amount=payload.amount,
            status=status,
            paid_at=self._clock() if status == PaymentStatus.PAID else None,
            notes=payload.notes,
        )
        with storage_errors(self.db, message, operation=operation):
            self.db.add(payment)
            self.db.commit()
        logger.info(
            "payment.recorded",
            extra={"payment_id": payment.id, "employee_id": employee.id, "status": status.value},
        )
        return payment
