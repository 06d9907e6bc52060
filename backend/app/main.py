"""
Layerpost Backend — FastAPI Application Factory & Entry Point
==============================================================

What:  Logging setup, app factory and the `layerpost` console entry point.
How:   `run()` loads Settings, configures logging and hands control to the
       Bootstrapper, which calls `create_app(settings, engine)` only after the
       database connection succeeded.

Application Layout:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │  state: settings, engine, session_factory           │
    │                                                     │
    │  Pipeline (app.loaders.http):                        │
    │  Static → RequestID → Logging → GZip → Body → Errors│
    │                                                     │
    │  Routes: /api/posts, /health, /, /static            │
    │                                                     │
    │  Exception Handlers:                                │
    │  ValidationError→400 │ NotFound→404 │ App→status    │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  handled by the Bootstrapper (connect, build, serve)
    Shutdown: lifespan disposes the engine
"""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import AsyncGenerator, List

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as SettingsValidationError
from sqlalchemy.ext.asyncio import AsyncEngine

from app import __version__
from app.config import Settings
from app.database import create_session_factory
from app.exceptions import LayerpostError, error_body
from app.loaders.bootstrap import Bootstrapper
from app.loaders.http import load_http
from app.middleware.request_id import RequestIDFilter, request_id_var

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s [%(request_id)s] %(message)s"
LOG_FILE_NAME = "layerpost.log"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(settings: Settings) -> None:
    """
    Configure the root logger once at startup.

    Handlers:
        - stdout (containers capture it)
        - rotating file in LOG_DIR (10 MB x 5), skipped when LOG_DIR is empty

    Both handlers carry RequestIDFilter, so `%(request_id)s` is available
    to every log line.
    """
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if settings.log_dir:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_dir / LOG_FILE_NAME,
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.addFilter(RequestIDFilter())

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=handlers,
        force=True,
    )

    # Third-party loggers are noisy at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    logger.info("=" * 60)
    logger.info("Layerpost %s ready (env=%s)", __version__, settings.app_env)
    logger.info("=" * 60)

    yield

    logger.info("Layerpost shutting down...")
    await app.state.engine.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """
    Render application exceptions raised outside the controllers.

    Controllers map ServiceResults themselves; these handlers cover errors
    raised directly in routes and dependencies (e.g. NotFoundError from the
    index page). Anything unhandled falls through to ErrorHandlerMiddleware.
    """

    @app.exception_handler(LayerpostError)
    async def handle_app_error(request: Request, exc: LayerpostError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, exc.code, exc.message, exc.context)
        else:
            logger.warning("[%s] %s: %s", rid, exc.code, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(
                exc,
                request_id=rid or None,
                expose_details=not settings.is_production,
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Settings, engine: AsyncEngine) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Frozen application settings.
        engine:   Connected async engine shared by all requests.
    """
    app = FastAPI(
        title="Layerpost API",
        description="Layered controller/service/repository API for posts.",
        version=__version__,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        openapi_url=None if settings.is_production else "/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    register_exception_handlers(app, settings)
    load_http(app, settings)
    return app


# ══════════════════════════════════════════════════════════════════════════
# Entry Point
# ══════════════════════════════════════════════════════════════════════════

def run() -> None:
    """Console entry point: exits with status 1 when startup is aborted."""
    try:
        settings = Settings()
    except SettingsValidationError as e:
        logging.basicConfig(level=logging.ERROR)
        logger.error("Configuration error: %s", str(e))
        sys.exit(1)

    setup_logging(settings)
    logger.info("Layerpost %s starting up...", __version__)

    bootstrapper = Bootstrapper(settings, app_factory=create_app)
    started = asyncio.run(bootstrapper.serve())
    if not started:
        sys.exit(1)
