"""
Layerpost Backend — Entry Bootstrapper
=======================================

What:  Drives startup: database connection first, then the HTTP listener.
Why:   The listener must never accept traffic without a working store.

State machine:

    NOT_STARTED ──(connect ok, app built)──▶ RUNNING
         │
         └──(bad URL, missing driver or connect failed)──▶ TERMINATED_ON_ERROR
                                                        (listener never built)

The app factory and engine factory are injected so the sequence can be
exercised without a real database or socket.
"""

import asyncio
import enum
import logging
from typing import Callable, Optional

import uvicorn
from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from app.config import Settings
from app.database import connect_database, create_engine

logger = logging.getLogger(__name__)

# Failures that mean "no usable store": bad URL, missing driver, refused or
# timed-out connection. asyncio.TimeoutError is not an OSError before 3.11.
STARTUP_ERRORS = (SQLAlchemyError, ImportError, OSError, asyncio.TimeoutError)

AppFactory = Callable[[Settings, AsyncEngine], FastAPI]
EngineFactory = Callable[[Settings], AsyncEngine]


class ServerState(str, enum.Enum):
    NOT_STARTED = "not-started"
    RUNNING = "running"
    TERMINATED_ON_ERROR = "terminated-on-error"


class Bootstrapper:
    """
    Connects the database, builds the app and serves it with uvicorn.

    Attributes:
        state:  current ServerState
        app:    the FastAPI instance once built, else None
        engine: the shared AsyncEngine once the connection succeeded
    """

    def __init__(
        self,
        settings: Settings,
        app_factory: AppFactory,
        engine_factory: EngineFactory = create_engine,
    ):
        self.settings = settings
        self.app_factory = app_factory
        self.engine_factory = engine_factory
        self.state = ServerState.NOT_STARTED
        self.app: Optional[FastAPI] = None
        self.engine: Optional[AsyncEngine] = None

    async def prepare(self) -> Optional[FastAPI]:
        """
        Connect to the database and build the application.

        Returns:
            The FastAPI app, or None when the connection failed (state is then
            TERMINATED_ON_ERROR and nothing else was constructed).
        """
        if self.state != ServerState.NOT_STARTED:
            raise RuntimeError(f"Bootstrapper already used (state={self.state.value})")

        engine: Optional[AsyncEngine] = None
        try:
            # A malformed URL or a missing driver fails here, before any I/O
            engine = self.engine_factory(self.settings)
            await connect_database(engine)
        except STARTUP_ERRORS as e:
            logger.error("Database connection failed: %s: %s", type(e).__name__, str(e))
            logger.error("Startup aborted; the HTTP listener was not started.")
            self.state = ServerState.TERMINATED_ON_ERROR
            if engine is not None:
                await engine.dispose()
            return None

        self.engine = engine
        self.app = self.app_factory(self.settings, engine)
        self.state = ServerState.RUNNING
        return self.app

    async def serve(self) -> bool:
        """Run until uvicorn exits. Returns False when startup was aborted."""
        app = await self.prepare()
        if app is None:
            return False

        logger.info(
            "Listening on http://%s:%d (env=%s)",
            self.settings.host,
            self.settings.port,
            self.settings.app_env,
        )
        config = uvicorn.Config(
            app,
            host=self.settings.host,
            port=self.settings.port,
            log_level=self.settings.log_level.lower(),
            # RequestLoggingMiddleware writes the access log
            access_log=False,
        )
        await uvicorn.Server(config).serve()
        return True
