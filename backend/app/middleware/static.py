"""
Layerpost Backend — Static Asset Stage
=======================================

What:  Serves files under `/static/` from STATIC_DIR before any other stage.
Why:   Asset hits need no request ID, access log, compression or body
       decoding. An `app.mount()` would sit behind the whole middleware stack,
       so the assets are answered here instead, as the outermost stage.
How:   Plain ASGI wrapper around Starlette's StaticFiles. The prefix is moved
       from `path` into `root_path`, the same split a Mount performs.
"""

import logging

from starlette.exceptions import HTTPException
from starlette.responses import JSONResponse
from starlette.staticfiles import StaticFiles
from starlette.types import ASGIApp, Receive, Scope, Send

from app.exceptions import NotFoundError, error_body

logger = logging.getLogger(__name__)


class StaticAssetsMiddleware:

    def __init__(self, app: ASGIApp, directory: str, prefix: str = "/static"):
        self.app = app
        self.prefix = prefix.rstrip("/")
        self.files = StaticFiles(directory=directory)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        path = scope.get("path", "") if scope["type"] == "http" else ""
        if not path.startswith(self.prefix + "/"):
            await self.app(scope, receive, send)
            return

        relative = path[len(self.prefix):]
        child_scope = dict(scope)
        child_scope["path"] = relative
        child_scope["root_path"] = scope.get("root_path", "") + self.prefix

        try:
            await self.files(child_scope, receive, send)
        except HTTPException as exc:
            if exc.status_code == 404:
                content = error_body(NotFoundError(resource="file", resource_id=relative.lstrip("/")))
            else:
                logger.warning("Static request %s %s rejected: %s", scope.get("method"), path, exc.detail)
                content = {"error": "http_error", "message": exc.detail, "details": None, "request_id": None}
            response = JSONResponse(status_code=exc.status_code, content=content)
            await response(scope, receive, send)
