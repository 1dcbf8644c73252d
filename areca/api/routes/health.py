from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from areca.core.auth import DbSession
from areca.db.session import ping

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness check.

    Returns a simple status response to verify the API process is up. Used by
    load balancers and monitoring systems.

    Returns:
        dict: A dictionary with a single "status" key set to "ok".
    """

    return {"status": "ok"}


@router.get("/health/ready")
def readiness_check(db: DbSession) -> JSONResponse:
    """Readiness check: the database must answer ``SELECT 1``.

    Returns:
        200 ``{"status": "healthy", "database": "connected"}`` or
        503 ``{"status": "unhealthy", "database": "disconnected"}``.
    """
    try:
        ping(db)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("health.database_unreachable", extra={"error_type": type(exc).__name__})
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "database": "disconnected"},
        )
    return JSONResponse(status_code=200, content={"status": "healthy", "database": "connected"})
