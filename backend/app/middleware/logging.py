"""
Layerpost Backend — Request Logging Middleware
===============================================

What:  One access-log line per request with method, path, status, duration
       and client address.
Why:   Uvicorn's access log has no request-ID correlation and no duration;
       it is disabled by the bootstrapper in favour of this one.
When:  Runs inside RequestIDMiddleware, so `request_id_var` is already set.

Log level follows the response status:
    5xx → ERROR, 4xx → WARNING, everything else → INFO

Not logged: request bodies (may contain personal data), health probes
(high volume, low value). Static assets never reach this stage.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("layerpost.access")

UNLOGGED_PREFIXES = ("/health",)


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path.startswith(UNLOGGED_PREFIXES):
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        rid = request_id_var.get("")

        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "%s %s raised after %.1fms [%s] from %s",
                method, path, duration_ms, rid, client_ip,
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms from %s",
            method,
            path,
            status,
            duration_ms,
            client_ip,
            extra={
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
