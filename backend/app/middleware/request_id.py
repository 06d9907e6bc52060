"""
Layerpost Backend — Request ID Middleware
==========================================

What:  Assigns a correlation ID to every request, exposes it to loggers via a
       ContextVar, and returns it in the X-Request-ID response header.
Who:   Outermost middleware in the pipeline, so every later stage (access log,
       controllers, error envelopes) sees the same ID.

Client-supplied IDs are honoured when they are short and made of safe
characters; anything else is replaced with a fresh ID so log lines cannot be
forged through the header.
"""

import logging
import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on the same thread each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def new_request_id() -> str:
    # 8 hex chars are enough to correlate log lines and stay readable
    return uuid.uuid4().hex[:8]


class RequestIDFilter(logging.Filter):
    """Adds `request_id` to every log record so formats can reference it."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get("") or "-"
        return True


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        incoming = request.headers.get(REQUEST_ID_HEADER, "")
        rid = incoming if _VALID_REQUEST_ID.match(incoming) else new_request_id()

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
