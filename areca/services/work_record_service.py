"""Owner-scoped work records (kilograms collected per employee and day)."""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy import func, select
from sqlalchemy.orm import joinedload

from areca.core.errors import NotFoundAppError
from areca.db.models import WorkRecord
from areca.schemas.work_record import WorkRecordCreate, WorkRecordUpdate
from areca.services.base import OwnedResourceService, storage_errors
from areca.services.employee_service import EmployeeService

logger = logging.getLogger(__name__)


def utc_day_bounds(day: date) -> tuple[datetime, datetime]:
    """Half-open ``[start, end)`` interval covering ``day`` in UTC."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


class WorkRecordService(OwnedResourceService):
    def list(
        self,
        *,
        employee_id: str | None = None,
        day: date | None = None,
        page: int = 1,
        limit: int = 50,
    ) -> tuple[list[WorkRecord], int]:
        """Return one page of records ordered by record date, newest first."""
        conditions = [WorkRecord.owner_id == self.owner_id]
        if employee_id:
            conditions.append(WorkRecord.employee_id == employee_id)
        if day is not None:
            start, end = utc_day_bounds(day)
            conditions.extend([WorkRecord.date >= start, WorkRecord.date < end])

        with storage_errors(self.db, "Failed to fetch work records", operation="work_records.list"):
            total = self.db.scalar(select(func.count()).select_from(WorkRecord).where(*conditions)) or 0
            records = self.db.scalars(
                select(WorkRecord)
                .options(joinedload(WorkRecord.employee))
                .where(*conditions)
                .order_by(WorkRecord.date.desc(), WorkRecord.created_at.desc())
                .offset((page - 1) * limit)
                .limit(limit)
            ).all()
        return list(records), total

    def get(self, record_id: str) -> WorkRecord:
        """Raises NotFoundAppError when the record is not owned by the caller."""
        with storage_errors(self.db, "Failed to fetch work record", operation="work_records.get"):
            record = self.db.scalar(
                select(WorkRecord)
                .options(joinedload(WorkRecord.employee))
                .where(WorkRecord.id == record_id, WorkRecord.owner_id == self.owner_id)
            )
        if record is None:
            raise NotFoundAppError(
                code="work_record_not_found",
                message="Work record not found",
                details={"resource": "work_record", "resource_id": record_id},
            )
        return record

    def create(self, payload: WorkRecordCreate) -> WorkRecord:
        employee = EmployeeService(self.db, self.owner_id).get(payload.employee_id)
        record = WorkRecord(
            owner_id=self.owner_id,
            employee=employee,
            date=payload.date,
            kilograms=payload.kilograms,
            notes=payload.notes,
        )
        with storage_errors(self.db, "Failed to create work record", operation="work_records.create"):
            self.db.add(record)
            self.db.commit()
        logger.info(
            "work_record.created",
            extra={"work_record_id": record.id, "employee_id": employee.id, "kilograms": record.kilograms},
        )
        return record

    def update(self, record_id: str, payload: WorkRecordUpdate) -> WorkRecord:
        record = self.get(record_id)
        changes = {
            field: value
            for field, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or field == "notes"
        }
        with storage_errors(self.db, "Failed to update work record", operation="work_records.update"):
            for field, value in changes.items():
                setattr(record, field, value)
            self.db.commit()
        logger.info("work_record.updated", extra={"work_record_id": record.id, "fields": sorted(changes)})
        return record

    def delete(self, record_id: str) -> None:
        record = self.get(record_id)
        with storage_errors(self.db, "Failed to delete work record", operation="work_records.delete"):
            self.db.delete(record)
            self.db.commit()
        logger.info("work_record.deleted", extra={"work_record_id": record_id})
