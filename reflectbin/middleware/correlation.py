"""
Middleware for assigning correlation IDs to incoming requests.

This module defines a Starlette `BaseHTTPMiddleware` subclass that injects a
request ID into a context variable for each request.  `RequestIdLogFilter`
copies that value onto every log record so log lines from one request can be
grouped.  The ID is also returned to clients via the `X-Request-ID` response
header; a well-formed inbound `X-Request-ID` is reused rather than replaced.
"""
from __future__ import annotations

import contextvars
import logging
import re
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

# Context variable to hold the current request ID
request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)

_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,128}$")


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Middleware that sets a request ID for each request."""

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        incoming = request.headers.get("x-request-id", "")
        rid = incoming if _VALID_REQUEST_ID.match(incoming) else str(uuid.uuid4())
        token = request_id_ctx.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)
        response.headers.setdefault("X-Request-ID", rid)
        return response


class RequestIdLogFilter(logging.Filter):
    """Stamp `record.request_id` with the current request ID (or "-")."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx.get(None) or "-"
        return True
