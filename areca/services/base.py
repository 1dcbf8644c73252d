"""Shared helpers for database-backed services."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from areca.core.errors import StorageAppError

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(db: Session, message: str, *, operation: str) -> Iterator[None]:
    """Translate SQLAlchemy failures into StorageAppError.

    The session is rolled back so the request-scoped session stays usable by
    the exception handlers and dependency cleanup.

    Args:
        db: Active session.
        message: Client-facing message, e.g. ``"Failed to fetch employees"``.
        operation: Dot-namespaced name used in the log event.

    Raises:
        StorageAppError: Wrapping the original SQLAlchemyError.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(
            "storage.failed",
            extra={"operation": operation, "error_type": type(exc).__name__},
        )
        raise StorageAppError(code="storage_error", message=message) from exc


class OwnedResourceService:
    """Base for services whose queries are scoped to one owner."""

    def __init__(self, db: Session, owner_id: str) -> None:
        self.db = db
        self.owner_id = owner_id
