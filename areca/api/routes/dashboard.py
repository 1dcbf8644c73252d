from __future__ import annotations

from fastapi import APIRouter, Depends

from areca.core.auth import CurrentUser, DbSession
from areca.core.rate_limit import rate_limit
from areca.schemas.dashboard import DashboardStats
from areca.services.dashboard_service import DashboardService

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardStats, dependencies=[Depends(rate_limit("api"))])
def get_dashboard(user: CurrentUser, db: DbSession) -> DashboardStats:
    """Aggregated figures for the caller's dashboard (``today`` is the UTC day)."""
    return DashboardService(db, user.id).stats()
