from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from areca.core.auth import CurrentUser, DbSession
from areca.core.rate_limit import rate_limit
from areca.schemas.common import MessageResponse, Pagination
from areca.schemas.work_record import (
    WorkRecordCreate,
    WorkRecordListResponse,
    WorkRecordMessageResponse,
    WorkRecordOut,
    WorkRecordResponse,
    WorkRecordUpdate,
)
from areca.services.work_record_service import WorkRecordService

router = APIRouter(
    prefix="/api/work-records",
    tags=["Work records"],
    dependencies=[Depends(rate_limit("work_record"))],
)


@router.get("", response_model=WorkRecordListResponse)
def list_work_records(
    user: CurrentUser,
    db: DbSession,
    employee_id: str | None = Query(None),
    day: date | None = Query(None, alias="date", description="Record date (YYYY-MM-DD, UTC)"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
) -> WorkRecordListResponse:
    records, total = WorkRecordService(db, user.id).list(
        employee_id=employee_id, day=day, page=page, limit=limit
    )
    return WorkRecordListResponse(
        work_records=[WorkRecordOut.model_validate(r) for r in records],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.post("", response_model=WorkRecordMessageResponse, status_code=status.HTTP_201_CREATED)
def create_work_record(payload: WorkRecordCreate, user: CurrentUser, db: DbSession) -> WorkRecordMessageResponse:
    """Log kilograms collected by one of the caller's employees.

    Raises:
        NotFoundAppError: 404 ``employee_not_found`` for an employee of another owner.
    """
    record = WorkRecordService(db, user.id).create(payload)
    return WorkRecordMessageResponse(
        message="Work record created successfully", work_record=WorkRecordOut.model_validate(record)
    )


@router.get("/{record_id}", response_model=WorkRecordResponse)
def get_work_record(record_id: str, user: CurrentUser, db: DbSession) -> WorkRecordResponse:
    record = WorkRecordService(db, user.id).get(record_id)
    return WorkRecordResponse(work_record=WorkRecordOut.model_validate(record))


@router.put("/{record_id}", response_model=WorkRecordMessageResponse)
def update_work_record(
    record_id: str, payload: WorkRecordUpdate, user: CurrentUser, db: DbSession
) -> WorkRecordMessageResponse:
    record = WorkRecordService(db, user.id).update(record_id, payload)
    return WorkRecordMessageResponse(
        message="Work record updated successfully", work_record=WorkRecordOut.model_validate(record)
    )


@router.delete("/{record_id}", response_model=MessageResponse)
def delete_work_record(record_id: str, user: CurrentUser, db: DbSession) -> MessageResponse:
    WorkRecordService(db, user.id).delete(record_id)
    return MessageResponse(message="Work record deleted successfully")
