"""
Layerpost Backend — Logging & App Factory Tests
================================================
"""

import logging
from logging.handlers import RotatingFileHandler

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import LOG_FILE_NAME, create_app, setup_logging
from app.middleware.request_id import RequestIDFilter, request_id_var


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


class TestSetupLogging:

    def test_file_handler_written_to_log_dir(self, settings, tmp_path, restore_root_logger):
        setup_logging(settings)

        file_handlers = [
            h for h in restore_root_logger.handlers if isinstance(h, RotatingFileHandler)
        ]
        assert len(file_handlers) == 1
        assert (tmp_path / "logs" / LOG_FILE_NAME).exists()
        assert restore_root_logger.level == logging.WARNING

    def test_every_handler_carries_request_id(self, settings, restore_root_logger):
        setup_logging(settings)

        for handler in restore_root_logger.handlers:
            assert any(isinstance(f, RequestIDFilter) for f in handler.filters)


class TestRequestIDFilter:

    def test_fills_current_request_id(self):
        record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)
        token = request_id_var.set("abc123")
        try:
            RequestIDFilter().filter(record)
        finally:
            request_id_var.reset(token)
        assert record.request_id == "abc123"

    def test_placeholder_outside_requests(self):
        record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)
        RequestIDFilter().filter(record)
        assert record.request_id == "-"


class TestCreateApp:

    @pytest.mark.asyncio
    async def test_state_is_wired(self, settings, engine):
        app = create_app(settings, engine)

        assert app.state.settings is settings
        assert app.state.engine is engine
        assert app.state.session_factory is not None

    @pytest.mark.asyncio
    async def test_docs_disabled_in_production(self, settings, engine):
        production = settings.model_copy(update={"app_env": "production"})

        app = create_app(production, engine)

        assert app.docs_url is None
        assert app.openapi_url is None

    @pytest.mark.asyncio
    async def test_index_page_absent_without_html_views(self, settings, engine, tmp_path):
        no_views = settings.model_copy(update={"view_engine": "none"})
        app = create_app(no_views, engine)
        (tmp_path / "public" / "index.html").write_text("<h1>Layerpost</h1>")

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            index = await client.get("/")
            posts = await client.get("/api/posts")

        assert index.status_code == 404
        assert "Layerpost" not in index.text
        assert posts.status_code == 200
