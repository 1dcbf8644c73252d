"""Owner-scoped dispatch log (kilograms shipped out)."""

from __future__ import annotations

import logging

from sqlalchemy import select

from areca.db.models import Dispatch
from areca.schemas.dispatch import DispatchCreate
from areca.services.base import OwnedResourceService, storage_errors

logger = logging.getLogger(__name__)


class DispatchService(OwnedResourceService):
    def list(self) -> list[Dispatch]:
        with storage_errors(self.db, "Failed to fetch dispatches", operation="dispatch.list"):
            dispatches = self.db.scalars(
                select(Dispatch)
                .where(Dispatch.owner_id == self.owner_id)
                .order_by(Dispatch.created_at.desc())
            ).all()
        return list(dispatches)

    def create(self, payload: DispatchCreate) -> Dispatch:
        dispatch = Dispatch(
            owner_id=self.owner_id,
            dispatched_kg=payload.dispatched_kg,
            dispatch_date=payload.dispatch_date,
            notes=payload.notes,
        )
        with storage_errors(self.db, "Failed to save dispatch record", operation="dispatch.create"):
            self.db.add(dispatch)
            self.db.commit()
        logger.info(
            "dispatch.created",
            extra={"dispatch_id": dispatch.id, "dispatched_kg": dispatch.dispatched_kg},
        )
        return dispatch
