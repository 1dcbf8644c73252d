from __future__ import annotations

from fastapi import APIRouter, Depends

from areca.core.auth import CurrentUser, DbSession
from areca.core.rate_limit import rate_limit
from areca.schemas.configuration import (
    ConfigurationListResponse,
    ConfigurationMessageResponse,
    ConfigurationOut,
    ConfigurationUpsert,
)
from areca.services.configuration_service import ConfigurationService

router = APIRouter(
    prefix="/api/configurations",
    tags=["Configuration"],
    dependencies=[Depends(rate_limit("api"))],
)


@router.get("", response_model=ConfigurationListResponse)
def list_configurations(user: CurrentUser, db: DbSession) -> ConfigurationListResponse:
    configurations = ConfigurationService(db, user.id).list()
    return ConfigurationListResponse(
        configurations=[ConfigurationOut.model_validate(c) for c in configurations]
    )


@router.put("", response_model=ConfigurationMessageResponse)
def upsert_configuration(
    payload: ConfigurationUpsert, user: CurrentUser, db: DbSession
) -> ConfigurationMessageResponse:
    """Create or update one configuration key of the caller.

    Raises:
        ValidationAppError: 400 when ``payment_rate_per_kg`` is not a
            non-negative number.
    """
    configuration = ConfigurationService(db, user.id).upsert(payload)
    return ConfigurationMessageResponse(
        message="Configuration updated successfully",
        configuration=ConfigurationOut.model_validate(configuration),
    )
