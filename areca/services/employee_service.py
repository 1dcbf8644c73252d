"""Owner-scoped employee management."""

from __future__ import annotations

import logging

from sqlalchemy import func, or_, select

from areca.core.errors import NotFoundAppError
from areca.db.models import Employee
from areca.schemas.employee import EmployeeCreate, EmployeeUpdate
from areca.services.base import OwnedResourceService, storage_errors

logger = logging.getLogger(__name__)


def employee_not_found(employee_id: str) -> NotFoundAppError:
    return NotFoundAppError(
        code="employee_not_found",
        message="Employee not found",
        details={"resource": "employee", "resource_id": employee_id},
    )


def _contains_pattern(text: str) -> str:
    escaped = text.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class EmployeeService(OwnedResourceService):
    def list(
        self,
        *,
        search: str | None = None,
        is_active: bool | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Employee], int]:
        """Return one page of employees (newest first) and the total count.

        Args:
            search: Case-insensitive substring matched against name and notes.
            is_active: Restrict to active or inactive employees.
            page: 1-based page number.
            limit: Page size.
        """
        conditions = [Employee.owner_id == self.owner_id]
        if search:
            pattern = _contains_pattern(search)
            conditions.append(
                or_(
                    func.lower(Employee.name).like(pattern, escape="\\"),
                    func.lower(Employee.special_notes).like(pattern, escape="\\"),
                )
            )
        if is_active is not None:
            conditions.append(Employee.is_active == is_active)

        with storage_errors(self.db, "Failed to fetch employees", operation="employees.list"):
            total = self.db.scalar(select(func.count()).select_from(Employee).where(*conditions)) or 0
            employees = self.db.scalars(
                select(Employee)
                .where(*conditions)
                .order_by(Employee.created_at.desc())
                .offset((page - 1) * limit)
                .limit(limit)
            ).all()
        return list(employees), total

    def get(self, employee_id: str) -> Employee:
        """Fetch an employee owned by the caller.

        Raises:
            NotFoundAppError: If it does not exist or belongs to someone else.
        """
        with storage_errors(self.db, "Failed to fetch employee", operation="employees.get"):
            employee = self.db.scalar(
                select(Employee).where(Employee.id == employee_id, Employee.owner_id == self.owner_id)
            )
        if employee is None:
            raise employee_not_found(employee_id)
        return employee

    def create(self, payload: EmployeeCreate) -> Employee:
        employee = Employee(
            owner_id=self.owner_id,
            name=payload.name,
            special_notes=payload.special_notes,
        )
        with storage_errors(self.db, "Failed to create employee", operation="employees.create"):
            self.db.add(employee)
            self.db.commit()
        logger.info("employee.created", extra={"employee_id": employee.id, "owner_id": self.owner_id})
        return employee

    def update(self, employee_id: str, payload: EmployeeUpdate) -> Employee:
        employee = self.get(employee_id)
        changes = {
            field: value
            for field, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or field == "special_notes"
        }
        with storage_errors(self.db, "Failed to update employee", operation="employees.update"):
            for field, value in changes.items():
                setattr(employee, field, value)
            self.db.commit()
        logger.info("employee.updated", extra={"employee_id": employee.id, "fields": sorted(changes)})
        return employee

    def delete(self, employee_id: str) -> None:
        """Delete an employee together with its work records and payments."""
        employee = self.get(employee_id)
        with storage_errors(self.db, "Failed to delete employee", operation="employees.delete"):
            self.db.delete(employee)
            self.db.commit()
        logger.info("employee.deleted", extra={"employee_id": employee_id})
