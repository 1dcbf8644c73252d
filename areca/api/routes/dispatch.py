from __future__ import annotations

from fastapi import APIRouter, Depends, status

from areca.core.auth import CurrentUser, DbSession
from areca.core.rate_limit import rate_limit
from areca.schemas.dispatch import DispatchCreate, DispatchListResponse, DispatchMessageResponse, DispatchOut
from areca.services.dispatch_service import DispatchService

router = APIRouter(
    prefix="/api/dispatch",
    tags=["Dispatch"],
    dependencies=[Depends(rate_limit("api"))],
)


@router.post("", response_model=DispatchMessageResponse, status_code=status.HTTP_201_CREATED)
def create_dispatch(payload: DispatchCreate, user: CurrentUser, db: DbSession) -> DispatchMessageResponse:
    dispatch = DispatchService(db, user.id).create(payload)
    return DispatchMessageResponse(
        message="Dispatch recorded successfully", dispatch=DispatchOut.model_validate(dispatch)
    )


@router.get("", response_model=DispatchListResponse)
def list_dispatches(user: CurrentUser, db: DbSession) -> DispatchListResponse:
    dispatches = DispatchService(db, user.id).list()
    return DispatchListResponse(dispatches=[DispatchOut.model_validate(d) for d in dispatches])
