"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses. Each subclass carries
the HTTP status it maps to.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    code: str
    message: str
    hint: str
    field: str
    resource: str
    resource_id: str
    retry_after: int
    request_id: str
    errors: list[dict[str, Any]]
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    status_code: ClassVar[int] = 400

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class ConflictAppError(AppError):
    """Raised when a unique resource already exists (e.g. duplicate email)."""


class AuthenticationAppError(AppError):
    """Raised when the caller cannot be authenticated."""

    status_code: ClassVar[int] = 401


class PermissionAppError(AppError):
    """Raised when an authenticated caller is not allowed to act."""

    status_code: ClassVar[int] = 403


class NotFoundAppError(AppError):
    """Raised when an owner-scoped resource does not exist."""

    status_code: ClassVar[int] = 404


class PayloadTooLargeAppError(AppError):
    """Raised when an upload exceeds the configured size limit."""

    status_code: ClassVar[int] = 413


class StorageAppError(AppError):
    """Raised when the database cannot serve a request.

    Rendered as ``{"error": message}`` with HTTP 500.
    """

    status_code: ClassVar[int] = 500


class RateLimitExceededError(AppError):
    """Raised by the rate limit dependency when a quota is exhausted.

    Not a fault: a designed outcome rendered as HTTP 429 with a retry hint.
    """

    status_code: ClassVar[int] = 429

    def __init__(self, message: str, retry_after: int, headers: dict[str, str] | None = None) -> None:
        super().__init__(
            code="rate_limit_exceeded",
            message=message,
            details={"retry_after": retry_after},
        )
        self.retry_after = retry_after
        self.headers = headers or {}
