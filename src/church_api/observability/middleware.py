"""
church_api.observability.middleware

Per-request logging context.

Responsibilities:
- Accept a caller-supplied `x-request-id` (bounded length) or mint one.
- Bind request id, path and method into structlog contextvars; the auth layer
  adds caller id and role once a token resolves.
- Log one `request_completed` line per request, or `request_unhandled_exception` when the
  handler chain raises past the error handlers.
"""

from __future__ import annotations

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

log = structlog.get_logger(__name__)

MAX_REQUEST_ID_LENGTH = 128


def _request_id(request: Request) -> str:
    supplied = request.headers.get("x-request-id", "").strip()
    if supplied and len(supplied) <= MAX_REQUEST_ID_LENGTH:
        return supplied
    return str(uuid.uuid4())


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = _request_id(request)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=request.url.path,
            method=request.method,
        )
        started = time.perf_counter()
        try:
            response: Response = await call_next(request)
        except Exception:
            log.exception(
                "request_unhandled_exception",
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise
        else:
            level = log.warning if response.status_code >= 500 else log.info
            level(
                "request_completed",
                status=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
        finally:
            structlog.contextvars.clear_contextvars()

        response.headers["x-request-id"] = request_id
        return response
