"""
church_api.api.error_handlers

Global exception handlers.

Responsibilities:
- Render `ChurchApiError` subclasses as `{"message": ...}` with their HTTP status.
- Render request validation failures as 400 with field-level details.
- Catch-all: log the cause, never leak it to the client.
"""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from church_api.errors import ChurchApiError
from church_api.observability.logging import get_logger

log = get_logger(__name__)

INTERNAL_MESSAGE = "Internal server error"
_LOCATIONS = ("body", "query", "path", "header")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ChurchApiError, _church_api_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(Exception, _unhandled_error)


async def _church_api_error(request: Request, exc: ChurchApiError) -> JSONResponse:
    level = log.error if exc.http_status >= 500 else log.info
    level("request_failed", code=exc.code, status=exc.http_status, error=exc.message)
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"] if loc not in _LOCATIONS),
            "message": e["msg"],
        }
        for e in exc.errors()
    ]
    log.info("request_invalid", errors=details)
    message = "Invalid request"
    if details and details[0]["field"]:
        message = f"{details[0]['field']}: {details[0]['message']}"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": message, "errors": details},
    )


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    log.exception("unhandled_exception", error_type=type(exc).__name__)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": INTERNAL_MESSAGE},
    )
