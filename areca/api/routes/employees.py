from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from areca.core.auth import CurrentUser, DbSession
from areca.core.rate_limit import rate_limit
from areca.schemas.common import MessageResponse, Pagination
from areca.schemas.employee import (
    EmployeeCreate,
    EmployeeListResponse,
    EmployeeMessageResponse,
    EmployeeOut,
    EmployeeResponse,
    EmployeeUpdate,
)
from areca.services.employee_service import EmployeeService

router = APIRouter(
    prefix="/api/employees",
    tags=["Employees"],
    dependencies=[Depends(rate_limit("employee"))],
)


@router.get("", response_model=EmployeeListResponse)
def list_employees(
    user: CurrentUser,
    db: DbSession,
    search: str | None = Query(None, max_length=100),
    is_active: bool | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> EmployeeListResponse:
    """List the caller's employees, newest first, with optional filters."""
    employees, total = EmployeeService(db, user.id).list(
        search=search, is_active=is_active, page=page, limit=limit
    )
    return EmployeeListResponse(
        employees=[EmployeeOut.model_validate(e) for e in employees],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.post("", response_model=EmployeeMessageResponse, status_code=status.HTTP_201_CREATED)
def create_employee(payload: EmployeeCreate, user: CurrentUser, db: DbSession) -> EmployeeMessageResponse:
    employee = EmployeeService(db, user.id).create(payload)
    return EmployeeMessageResponse(
        message="Employee created successfully", employee=EmployeeOut.model_validate(employee)
    )


@router.get("/{employee_id}", response_model=EmployeeResponse)
def get_employee(employee_id: str, user: CurrentUser, db: DbSession) -> EmployeeResponse:
    employee = EmployeeService(db, user.id).get(employee_id)
    return EmployeeResponse(employee=EmployeeOut.model_validate(employee))


@router.put("/{employee_id}", response_model=EmployeeMessageResponse)
def update_employee(
    employee_id: str, payload: EmployeeUpdate, user: CurrentUser, db: DbSession
) -> EmployeeMessageResponse:
    employee = EmployeeService(db, user.id).update(employee_id, payload)
    return EmployeeMessageResponse(
        message="Employee updated successfully", employee=EmployeeOut.model_validate(employee)
    )


@router.delete("/{employee_id}", response_model=MessageResponse)
def delete_employee(employee_id: str, user: CurrentUser, db: DbSession) -> MessageResponse:
    """Delete an employee along with its work records and payments."""
    EmployeeService(db, user.id).delete(employee_id)
    return MessageResponse(message="Employee deleted successfully")
