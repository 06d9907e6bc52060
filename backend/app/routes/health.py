"""
Layerpost Backend — Health Check Route
=======================================

What:  GET /health for container probes and load balancers.
How:   Runs SELECT 1 on the shared engine. The database is the only critical
       dependency, so the service is healthy exactly when it is reachable.

Status levels:
    healthy:   database reachable (HTTP 200)
    unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app import __version__
from app.schemas.post import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(request: Request):
    db_status = "connected"
    overall = "healthy"

    try:
        async with request.app.state.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    health = HealthResponse(
        status=overall,
        version=__version__,
        environment=request.app.state.settings.app_env,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(
        status_code=200 if overall == "healthy" else 503,
        content=health.model_dump(),
    )
