"""Per-owner key/value configuration."""

from __future__ import annotations

import logging
import math

from sqlalchemy import select
from sqlalchemy.orm import Session

from areca.core.config import settings
from areca.core.errors import ValidationAppError
from areca.db.models import Configuration
from areca.schemas.configuration import PAYMENT_RATE_KEY, ConfigurationUpsert
from areca.services.base import OwnedResourceService, storage_errors

logger = logging.getLogger(__name__)


def parse_payment_rate(value: str) -> float | None:
    """Return the rate as a float, or None when it is not a non-negative number."""
    try:
        rate = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(rate) or math.isinf(rate) or rate < 0:
        return None
    return rate


class ConfigurationService(OwnedResourceService):
    def __init__(self, db: Session, owner_id: str, *, default_rate: float | None = None) -> None:
        super().__init__(db, owner_id)
        self.default_rate = (
            default_rate if default_rate is not None else settings.app.default_payment_rate_per_kg
        )

    def list(self) -> list[Configuration]:
        with storage_errors(self.db, "Failed to fetch configurations", operation="configurations.list"):
            configurations = self.db.scalars(
                select(Configuration)
                .where(Configuration.owner_id == self.owner_id)
                .order_by(Configuration.key)
            ).all()
        return list(configurations)

    def get_value(self, key: str) -> str | None:
        with storage_errors(self.db, "Failed to fetch configurations", operation="configurations.get"):
            return self.db.scalar(
                select(Configuration.value).where(
                    Configuration.owner_id == self.owner_id, Configuration.key == key
                )
            )

    def upsert(self, payload: ConfigurationUpsert) -> Configuration:
        """Create or replace the value stored under ``payload.key``.

        Raises:
            ValidationAppError: If ``payment_rate_per_kg`` is not a
                non-negative number.
        """
        if payload.key == PAYMENT_RATE_KEY and parse_payment_rate(payload.value) is None:
            raise ValidationAppError(
                code="invalid_payment_rate",
                message="Payment rate must be a valid positive number",
                details={"field": "value"},
            )

        with storage_errors(self.db, "Failed to update configuration", operation="configurations.upsert"):
            configuration = self.db.scalar(
                select(Configuration).where(
                    Configuration.owner_id == self.owner_id, Configuration.key == payload.key
                )
            )
            if configuration is None:
                configuration = Configuration(owner_id=self.owner_id, key=payload.key, value=payload.value)
                self.db.add(configuration)
            else:
                configuration.value = payload.value
            if payload.description is not None:
                configuration.description = payload.description
            self.db.commit()

        logger.info("configuration.updated", extra={"key": payload.key, "owner_id": self.owner_id})
        return configuration

    def payment_rate(self) -> float:
        """Configured rate per kilogram, falling back to the default."""
        stored = self.get_value(PAYMENT_RATE_KEY)
        if stored is None:
            return self.default_rate
        rate = parse_payment_rate(stored)
        if rate is None:
            logger.warning("configuration.invalid_payment_rate", extra={"owner_id": self.owner_id})
            return self.default_rate
        return rate
