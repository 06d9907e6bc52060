"""
Layerpost Backend — Database Engine & Session Management
=========================================================

What:  Async SQLAlchemy engine construction, session factory, request-scoped
       session dependency and the startup connection check.
Why:   Keeps every piece of connection handling in one module; the engine is
       built from an explicit Settings value instead of module import state.
Who:   The bootstrapper builds and checks the engine; route dependencies open
       one session per request from `app.state.session_factory`.

Connection Strategy:
    One engine per process, shared by all requests. PostgreSQL (asyncpg) uses
    a bounded pool; SQLite (aiosqlite) uses a single static connection so an
    in-memory database survives between sessions.

    The DB_AUTO_RECONNECT flag maps to `pool_pre_ping`: stale pooled
    connections are replaced before use. There is no other reconnect policy.
"""

import logging
from typing import Any, AsyncGenerator, Dict

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from app.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all ORM models; its metadata drives table creation."""
    pass


# ── Engine & Session Factory ──────────────────────────────────────────────
def create_engine(settings: Settings) -> AsyncEngine:
    """
    Build the async engine for `settings.database_url`.

    Creating the engine does not open a connection; `connect_database()`
    does that during startup.
    """
    options: Dict[str, Any] = {
        "pool_pre_ping": settings.db_auto_reconnect,
        # SQL echo only when debugging; it is very noisy
        "echo": settings.log_level == "DEBUG",
    }
    if settings.is_sqlite:
        options["poolclass"] = StaticPool
    else:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_recycle=3600,
        )
    return create_async_engine(settings.database_url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: attributes stay readable after commit without
    # a lazy reload outside the session
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def connect_database(engine: AsyncEngine) -> None:
    """
    Open a connection, run a probe query and ensure the tables exist.

    Raises whatever the driver raises (SQLAlchemyError or OSError) so the
    bootstrapper can decide to abort startup.
    """
    # Importing the models registers their tables on Base.metadata
    from app.models import post  # noqa: F401

    async with engine.begin() as conn:
        await conn.execute(text("SELECT 1"))
        await conn.run_sync(Base.metadata.create_all)

    logger.info(
        "Database connection established: %s",
        engine.url.render_as_string(hide_password=True),
    )


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides one database session per request.

    Commits when the handler finishes without raising, rolls back and
    re-raises otherwise. The session is always closed.
    """
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
