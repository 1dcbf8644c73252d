"""Bearer session authentication.

Clients send ``Authorization: Bearer <token>`` where the token was returned
by register or login. The token is opaque; it is looked up by its SHA-256 in
the sessions table.

Route dependencies run in declaration order, so routes list the rate limit
dependency first and an exhausted quota is rejected before any session lookup.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from areca.core.errors import AuthenticationAppError
from areca.db.models import User
from areca.db.session import get_db
from areca.services.auth_service import AuthService

logger = logging.getLogger(__name__)

_BEARER_PREFIX = "bearer "


def parse_bearer_token(authorization: str | None) -> str:
    """Extract the token from an Authorization header value.

    Examples:
        >>> parse_bearer_token("Bearer abc")
        'abc'

    Raises:
        AuthenticationAppError: If the header is missing or not a bearer
            credential.
    """
    if not authorization:
        raise AuthenticationAppError(code="missing_token", message="Authentication required")

    if not authorization.lower().startswith(_BEARER_PREFIX):
        raise AuthenticationAppError(
            code="invalid_token",
            message="Invalid or expired token",
            details={"hint": "Use the 'Authorization: Bearer <token>' header"},
        )

    token = authorization[len(_BEARER_PREFIX):].strip()
    if not token:
        raise AuthenticationAppError(code="missing_token", message="Authentication required")
    return token


def get_bearer_token(
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """FastAPI dependency returning the raw bearer token of the request."""
    try:
        return parse_bearer_token(authorization)
    except AuthenticationAppError as exc:
        logger.warning("auth.rejected", extra={"reason": exc.code})
        raise


def get_current_user(
    token: Annotated[str, Depends(get_bearer_token)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """FastAPI dependency resolving the authenticated user.

    Usage:
        @router.get("/me")
        def me(user: Annotated[User, Depends(get_current_user)]): ...

    Raises:
        AuthenticationAppError: 401 for missing, invalid or expired tokens.
    """
    try:
        user = AuthService(db).authenticate(token)
    except AuthenticationAppError as exc:
        logger.warning("auth.rejected", extra={"reason": exc.code})
        raise
    logger.debug("auth.success", extra={"user_id": user.id})
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
DbSession = Annotated[Session, Depends(get_db)]
