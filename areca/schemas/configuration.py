"""Per-owner configuration schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from areca.schemas.common import ApiModel

PAYMENT_RATE_KEY = "payment_rate_per_kg"


class ConfigurationUpsert(ApiModel):
    key: str = Field(..., min_length=1, max_length=100)
    value: str = Field(..., max_length=500)
    description: str | None = Field(default=None, max_length=255)

    @field_validator("value", mode="before")
    @classmethod
    def _stringify(cls, value):
        # numbers are accepted and stored as text
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class ConfigurationOut(ApiModel):
    id: str
    key: str
    value: str
    description: str | None = None
    created_at: datetime
    updated_at: datetime


class ConfigurationMessageResponse(ApiModel):
    message: str
    configuration: ConfigurationOut


class ConfigurationListResponse(ApiModel):
    configurations: list[ConfigurationOut]
