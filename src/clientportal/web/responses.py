"""Uniform response envelope and exception handlers.

Every route answers ``{"success", "message", "data", "statusCode"}``,
whether it succeeded or failed.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi import status as http_status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from clientportal.errors import PortalError
from clientportal.logging import get_logger

logger = get_logger(__name__)


def envelope(
    success: bool,
    message: str,
    data: Any = None,
    status_code: int = http_status.HTTP_200_OK,
) -> JSONResponse:
    """Wrap a payload in the response envelope."""
    return JSONResponse(
        status_code=status_code,
        content={
            "success": success,
            "message": message,
            "data": jsonable_encoder(data),
            "statusCode": status_code,
        },
    )


def ok(
    data: Any = None,
    message: str = "Success",
    status_code: int = http_status.HTTP_200_OK,
) -> JSONResponse:
    return envelope(True, message, data, status_code)


def fail(message: str, status_code: int, data: Any = None) -> JSONResponse:
    return envelope(False, message, data, status_code)


async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "request_rejected",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=exc.message,
        status_code=exc.status_code,
    )
    return fail(exc.message, exc.status_code)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{location}: {first.get('msg')}" if location else str(first.get("msg", "Invalid request"))
    logger.warning("request_validation_failed", path=request.url.path, error=message)
    return fail(message, http_status.HTTP_400_BAD_REQUEST)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return fail(str(exc.detail), exc.status_code)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        error=str(exc),
        exc_info=True,
    )
    return fail(str(exc) or "Internal server error", http_status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error as the response envelope."""
    app.add_exception_handler(PortalError, portal_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_error_handler)
