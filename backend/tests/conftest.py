"""
Layerpost Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── settings: frozen Settings pointing at in-memory SQLite and tmp dirs
    ├── engine: connected async engine with tables created
    ├── db_session: real AsyncSession on that engine
    ├── mock_db_session: AsyncMock session (no database at all)
    ├── mock_repository: AsyncMock repository for service tests
    ├── app / test_client: FastAPI app + HTTPX AsyncClient over ASGITransport
    └── sample_post_data: attribute bag shaped like a stored Post
"""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from app.config import Settings
from app.database import connect_database, create_engine, create_session_factory
from app.main import create_app


# ══════════════════════════════════════════════════════════════════════════
# Configuration & Database
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def settings(tmp_path):
    """
    Settings isolated from the developer's environment.

    In-memory SQLite (StaticPool keeps one shared connection), log and
    static directories under pytest's tmp_path.
    """
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite:///:memory:",
        app_env="test",
        log_level="WARNING",
        log_dir=str(tmp_path / "logs"),
        static_dir=str(tmp_path / "public"),
        view_engine="html",
        max_body_size=2048,
    )


@pytest_asyncio.fixture
async def engine(settings):
    """Connected engine with the posts table created."""
    engine = create_engine(settings)
    await connect_database(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    session_factory = create_session_factory(engine)
    async with session_factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.flush.side_effect = SQLAlchemyError("boom")
        await Repository(Post, mock_db_session).create({...})
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.get = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_repository():
    """Stand-in for Repository(Post, session); every operation is an AsyncMock."""
    repository = MagicMock()
    repository.create = AsyncMock()
    repository.get = AsyncMock()
    repository.list = AsyncMock()
    repository.count = AsyncMock()
    repository.update = AsyncMock()
    repository.delete = AsyncMock()
    return repository


@pytest.fixture
def sample_post_data():
    """Attribute bag shaped like a stored Post row."""
    now = datetime.now(timezone.utc)
    return SimpleNamespace(
        id=uuid4(),
        title="Layered architecture",
        content="Controllers, services and repositories.",
        author="sam",
        created_at=now,
        updated_at=now,
    )


# ══════════════════════════════════════════════════════════════════════════
# HTTP
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app(settings, engine):
    return create_app(settings, engine)


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
