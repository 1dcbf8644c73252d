"""HTTP middleware for request ID propagation and access logging.

Every request/response pair carries a correlation ID:
- The incoming ``X-Request-ID`` header (name set by ``LOG_REQUEST_ID_HEADER``)
  is reused, otherwise a UUID is generated
- The ID is stored in contextvars so every log record of the request has it
- The ID and the total duration are echoed in the response headers
- One ``http.request_completed`` event is logged per request

Usage:
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request, Response

from areca.core.config import settings
from areca.core.logging import clear_request_id, set_request_id

logger = logging.getLogger(__name__)


async def request_id_middleware(request: Request, call_next) -> Response:
    """Attach a request ID to the context, the logs and the response.

    Args:
        request: The incoming HTTP request object.
        call_next: The next middleware/route handler in the stack.

    Returns:
        Response: The downstream response with ``X-Request-ID`` and
            ``X-Request-Duration-ms`` headers added.
    """
    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        route = request.scope.get("route")
        logger.info(
            "http.request_completed",
            extra={
                "method": request.method,
                "route": getattr(route, "path", request.url.path),
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )
    finally:
        clear_request_id()

    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response
