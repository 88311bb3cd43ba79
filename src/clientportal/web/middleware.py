"""Request logging middleware for the client portal.

Every request gets a correlation ID (taken from X-Correlation-ID or freshly
generated) that is bound to the structlog context for the duration of the
request and echoed back in the response headers.

Unhandled exceptions are logged here and turned into a 500 response
envelope, so callers always receive the same response shape.
"""

from __future__ import annotations

import time
import uuid
from typing import TYPE_CHECKING, Any

from starlette.middleware.base import BaseHTTPMiddleware

from clientportal.logging import clear_request_context, get_logger, set_correlation_id
from clientportal.web.responses import fail

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from starlette.requests import Request
    from starlette.responses import Response

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
IDENTITY_HEADER = "X-User-Email"


def _request_fields(request: Request) -> dict[str, Any]:
    return {
        "method": request.method,
        "path": request.url.path,
        "authenticated": bool(request.headers.get(IDENTITY_HEADER)),
    }


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request with its outcome, duration and correlation ID."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        set_correlation_id(correlation_id)
        fields = _request_fields(request)
        started = time.perf_counter()

        logger.debug("request_started", **fields)

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "request_failed",
                **fields,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
                error=str(exc),
                exc_info=True,
            )
            response = fail(str(exc) or "Internal server error", 500)
        else:
            log = logger.warning if response.status_code >= 400 else logger.info
            log(
                "request_completed",
                **fields,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
        finally:
            clear_request_context()

        response.headers[CORRELATION_HEADER] = correlation_id
        return response
