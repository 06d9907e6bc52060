"""
Layerpost Backend — Body Decoding Middleware
=============================================

What:  Turns the raw body of POST/PUT/PATCH requests into plain data and
       stores it on `request.state.payload`.
Why:   Controllers receive a ready dict instead of the Request object, which
       keeps transport handling out of every layer below the pipeline.

Supported content types:
    application/json                    → json.loads (must be valid JSON)
    application/x-www-form-urlencoded   → dict of fields (last value wins)
    empty body                          → None
    anything else                       → None (left undecoded)

Failures short-circuit with the JSON error envelope:
    400 invalid_payload   body is not valid JSON / not valid UTF-8
    413 invalid_payload   body larger than MAX_BODY_SIZE

Starlette replays a body consumed here to downstream handlers, so routes
that declare a body parameter still work.
"""

import json
import logging
from typing import Any, Optional
from urllib.parse import parse_qsl

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.exceptions import PayloadError, error_body
from app.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

DECODED_METHODS = {"POST", "PUT", "PATCH"}


class BodyDecoderMiddleware(BaseHTTPMiddleware):

    def __init__(self, app, max_body_size: int = 1_048_576, **kwargs):
        super().__init__(app, **kwargs)
        self.max_body_size = max_body_size

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request.state.payload = None
        if request.method not in DECODED_METHODS:
            return await call_next(request)

        try:
            self._check_declared_length(request)
            raw = await request.body()
            if len(raw) > self.max_body_size:
                raise self._too_large(len(raw))
            request.state.payload = decode_body(raw, request.headers.get("content-type", ""))
        except PayloadError as e:
            logger.warning("Rejected request body on %s: %s", request.url.path, e.message)
            return JSONResponse(
                status_code=e.status_code,
                content=error_body(e, request_id=request_id_var.get("") or None),
            )

        return await call_next(request)

    def _check_declared_length(self, request: Request) -> None:
        # Reject before reading when the client announces an oversized body
        declared = request.headers.get("content-length")
        if declared and declared.isdigit() and int(declared) > self.max_body_size:
            raise self._too_large(int(declared))

    def _too_large(self, size: int) -> PayloadError:
        return PayloadError(
            message=f"Request body too large ({size} bytes, max {self.max_body_size})",
            status_code=413,
            context={"max_body_size": self.max_body_size},
        )


def decode_body(raw: bytes, content_type: str) -> Optional[Any]:
    """
    Decode a raw request body according to its Content-Type.

    Raises:
        PayloadError: the body claims to be JSON or form data but is not.
    """
    if not raw:
        return None

    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type == "application/json" or media_type.endswith("+json"):
        try:
            return json.loads(raw)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise PayloadError(
                message="Request body is not valid JSON",
                context={"reason": str(e)},
            ) from e

    if media_type == "application/x-www-form-urlencoded":
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise PayloadError(message="Form body is not valid UTF-8") from e
        return dict(parse_qsl(text, keep_blank_values=True))

    return None
