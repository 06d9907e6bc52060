"""
Layerpost Backend — HTTP Pipeline Loader
=========================================

What:  Assembles the request pipeline on a FastAPI instance: static assets,
       middleware, routes and the terminal error handler.
Who:   Called by `app.main.create_app()`; the bootstrapper only reaches it
       after the database connection succeeded.

Order matters. Starlette runs the LAST added middleware FIRST, so stages are
added innermost first:

    add ErrorHandler   → runs last, right before the routes
    add BodyDecoder
    add GZip
    add RequestLogging
    add RequestID
    add StaticAssets   → runs first; answers /static/* without the rest
"""

import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware

from app.config import Settings
from app.middleware.body_decoder import BodyDecoderMiddleware
from app.middleware.error_handler import ErrorHandlerMiddleware
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware
from app.middleware.static import StaticAssetsMiddleware
from app.routes import health, pages, posts

logger = logging.getLogger(__name__)


def load_http(app: FastAPI, settings: Settings) -> FastAPI:
    """Attach the full pipeline to `app` and return it."""
    # StaticFiles refuses a missing directory, so create it up front
    static_dir = Path(settings.static_dir)
    static_dir.mkdir(parents=True, exist_ok=True)

    # ── Middleware (innermost first) ──────────────────────────────────────
    app.add_middleware(ErrorHandlerMiddleware, expose_errors=not settings.is_production)
    app.add_middleware(BodyDecoderMiddleware, max_body_size=settings.max_body_size)
    # Small responses are not worth compressing
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(StaticAssetsMiddleware, directory=str(static_dir))

    # ── Routes ────────────────────────────────────────────────────────────
    app.include_router(posts.router)
    app.include_router(health.router)
    if settings.view_engine == "html":
        app.include_router(pages.router)

    logger.debug(
        "HTTP pipeline loaded: static=%s view_engine=%s",
        static_dir.resolve(),
        settings.view_engine,
    )
    return app
