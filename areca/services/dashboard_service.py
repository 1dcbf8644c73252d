"""Aggregated metrics for the dashboard."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from areca.db.base import utcnow
from areca.db.models import Dispatch, Employee, Payment, PaymentStatus, WorkRecord
from areca.schemas.dashboard import DashboardStats
from areca.services.base import OwnedResourceService, storage_errors
from areca.services.configuration_service import ConfigurationService
from areca.services.payment_service import PaymentService
from areca.services.work_record_service import utc_day_bounds

logger = logging.getLogger(__name__)


class DashboardService(OwnedResourceService):
    def __init__(self, db: Session, owner_id: str, *, clock: Callable[[], datetime] = utcnow) -> None:
        super().__init__(db, owner_id)
        self._clock = clock

    def stats(self) -> DashboardStats:
        """Compute the dashboard figures of the owner.

        ``pendingPayments`` is the money owed overall (all kilograms at the
        current rate minus what was paid); ``pendingKilograms`` and
        ``employeesAwaitingPayment`` come from the payment status report.
        """
        start, end = utc_day_bounds(self._clock().date())

        with storage_errors(self.db, "Failed to fetch dashboard data", operation="dashboard.stats"):
            total_employees = self._scalar(
                select(func.count()).select_from(Employee).where(Employee.owner_id == self.owner_id)
            )
            active_employees = self._scalar(
                select(func.count())
                .select_from(Employee)
                .where(Employee.owner_id == self.owner_id, Employee.is_active == True)  # noqa: E712
            )
            total_work_records = self._scalar(
                select(func.count()).select_from(WorkRecord).where(WorkRecord.owner_id == self.owner_id)
            )
            total_kilograms = self._scalar(
                select(func.coalesce(func.sum(WorkRecord.kilograms), 0.0)).where(
                    WorkRecord.owner_id == self.owner_id
                )
            )
            today_kilograms = self._scalar(
                select(func.coalesce(func.sum(WorkRecord.kilograms), 0.0)).where(
                    WorkRecord.owner_id == self.owner_id,
                    WorkRecord.date >= start,
                    WorkRecord.date < end,
                )
            )
            total_paid = self._scalar(
                select(func.coalesce(func.sum(Payment.amount), 0.0)).where(
                    Payment.owner_id == self.owner_id, Payment.status == PaymentStatus.PAID
                )
            )
            total_dispatched = self._scalar(
                select(func.coalesce(func.sum(Dispatch.dispatched_kg), 0.0)).where(
                    Dispatch.owner_id == self.owner_id
                )
            )

        rate = ConfigurationService(self.db, self.owner_id).payment_rate()
        summaries = PaymentService(self.db, self.owner_id, clock=self._clock).payment_status()

        return DashboardStats(
            total_employees=int(total_employees),
            active_employees=int(active_employees),
            total_work_records=int(total_work_records),
            total_kilograms=float(total_kilograms),
            today_kilograms=float(today_kilograms),
            payment_rate=rate,
            total_paid=float(total_paid),
            pending_payments=float(total_kilograms) * rate - float(total_paid),
            total_dispatched_kg=float(total_dispatched),
            pending_kilograms=sum(s.pending_kilograms for s in summaries),
            employees_awaiting_payment=sum(1 for s in summaries if s.has_new_records_after_payment),
        )

    def _scalar(self, statement):
        return self.db.scalar(statement) or 0
