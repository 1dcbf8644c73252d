"""Global exception handlers for consistent error responses.

This module provides FastAPI exception handlers that intercept all errors
(domain and unexpected) and return consistent JSON responses with proper
HTTP status codes and traceability.

Design:
- AppError subclasses → the status declared on the subclass (400, 401, 403, 404)
- RateLimitExceededError → 429 with ``{"error", "retryAfter"}`` body
- StorageAppError → 500 with ``{"error"}`` body
- RequestValidationError → 400 with the offending fields
- Unexpected Exception → generic 500 (safety net)
"""

import logging

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from areca.core.errors import AppError, RateLimitExceededError, StorageAppError
from areca.core.logging import get_request_id

logger = logging.getLogger(__name__)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors with consistent JSON format.

    All responses include:
    - error.code: Machine-readable error code
    - error.message: Human-readable message
    - error.request_id: For distributed tracing
    - error.details: Optional structured context

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with the status declared by the error class.
    """
    status_code = exc.status_code

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
            "request_path": request.url.path,
            "request_id": get_request_id(),
        }
    )

    error_content = {
        "code": exc.code,
        "message": exc.message,
        "request_id": get_request_id(),
    }

    if exc.details:
        error_content["details"] = exc.details

    return JSONResponse(
        status_code=status_code,
        content={"error": jsonable_encoder(error_content)},
    )


async def rate_limit_error_handler(request: Request, exc: RateLimitExceededError) -> JSONResponse:
    """Render an exhausted quota as HTTP 429 with a retry hint."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "retryAfter": exc.retry_after},
        headers=exc.headers or None,
    )


async def storage_error_handler(request: Request, exc: StorageAppError) -> JSONResponse:
    """Render a storage failure as HTTP 500 without leaking driver details."""
    logger.error(
        "storage_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "cause": type(exc.__cause__).__name__ if exc.__cause__ else None,
            "request_path": request.url.path,
            "request_id": get_request_id(),
        },
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies/params as 400 with per-field errors."""
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in exc.errors()
    ]
    logger.info(
        "request_validation_failed",
        extra={
            "request_path": request.url.path,
            "error_count": len(errors),
            "request_id": get_request_id(),
        },
    )
    return JSONResponse(
        status_code=400,
        content={
            "error": {
                "code": "validation_failed",
                "message": "Validation failed",
                "request_id": get_request_id(),
                "details": {"errors": errors},
            }
        },
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Logs detailed information for debugging while returning a generic
    message. No stack traces reach the client.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        }
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "internal_server_error",
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": get_request_id(),
            }
        },
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with FastAPI app.

    Starlette resolves handlers by walking the exception's MRO, so the more
    specific AppError subclasses win over the AppError handler.

    Args:
        app: FastAPI application instance.
    """
    app.exception_handler(RateLimitExceededError)(rate_limit_error_handler)
    app.exception_handler(StorageAppError)(storage_error_handler)
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(Exception)(general_exception_handler)
