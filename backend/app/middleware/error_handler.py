"""
Layerpost Backend — Terminal Error Handler
===========================================

What:  Last-resort handler for exceptions no route or registered exception
       handler dealt with. Renders them as a 500 JSON error envelope.
When:  Registered first, so it sits innermost in the user middleware stack and
       runs after every other pipeline stage.

Double-response guard:
    A plain ASGI middleware (not BaseHTTPMiddleware) so it can watch the
    `http.response.start` message. If the response has already started when
    the exception arrives, a second response is impossible: the exception is
    re-raised (forwarded) to the outer layers instead.
"""

import logging

from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.exceptions import error_body
from app.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


class ErrorHandlerMiddleware:

    def __init__(self, app: ASGIApp, expose_errors: bool = False):
        self.app = app
        self.expose_errors = expose_errors

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            if response_started:
                logger.error(
                    "Error after response started on %s; forwarding",
                    scope.get("path", ""),
                    exc_info=True,
                )
                raise

            logger.error(
                "Unexpected error on %s: %s",
                scope.get("path", ""),
                str(exc),
                exc_info=True,
            )
            response = JSONResponse(
                status_code=500,
                content=error_body(
                    exc,
                    request_id=request_id_var.get("") or None,
                    expose_details=self.expose_errors,
                ),
            )
            await response(scope, receive, send)
