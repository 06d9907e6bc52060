"""
Layerpost Backend — Settings Tests
===================================

What we test:
    ✅ Literal defaults when no environment is set
    ✅ Environment variables override defaults (case-insensitive)
    ✅ Invalid values are rejected at construction
    ✅ Settings are read-only after construction
"""

import pytest
from pydantic import ValidationError

from app.config import Settings

ENV_VARS = [
    "DATABASE_URL", "PORT", "HOST", "APP_ENV", "LOG_DIR", "LOG_LEVEL",
    "VIEW_ENGINE", "STATIC_DIR", "DB_AUTO_RECONNECT", "MAX_BODY_SIZE",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestDefaults:

    def test_literal_defaults(self, clean_env):
        settings = Settings(_env_file=None)

        assert settings.database_url.startswith("postgresql+asyncpg://")
        assert settings.port == 8000
        assert settings.app_env == "development"
        assert settings.log_dir == "./logs"
        assert settings.view_engine == "html"
        assert settings.db_auto_reconnect is True
        assert settings.is_production is False
        assert settings.is_sqlite is False


class TestEnvironmentOverrides:

    def test_env_vars_override_defaults(self, clean_env):
        clean_env.setenv("DATABASE_URL", "sqlite+aiosqlite:///./dev.db")
        clean_env.setenv("PORT", "9001")
        clean_env.setenv("APP_ENV", "Production")
        clean_env.setenv("LOG_DIR", "/var/log/layerpost")
        clean_env.setenv("VIEW_ENGINE", "NONE")
        clean_env.setenv("DB_AUTO_RECONNECT", "false")

        settings = Settings(_env_file=None)

        assert settings.is_sqlite is True
        assert settings.port == 9001
        assert settings.app_env == "production"
        assert settings.is_production is True
        assert settings.log_dir == "/var/log/layerpost"
        assert settings.view_engine == "none"
        assert settings.db_auto_reconnect is False

    def test_log_level_is_normalised(self, clean_env):
        clean_env.setenv("LOG_LEVEL", "debug")
        assert Settings(_env_file=None).log_level == "DEBUG"


class TestValidation:

    def test_invalid_log_level_rejected(self, clean_env):
        clean_env.setenv("LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_invalid_view_engine_rejected(self, clean_env):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, view_engine="handlebars")

    def test_invalid_app_env_rejected(self, clean_env):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, app_env="staging")

    def test_port_out_of_range_rejected(self, clean_env):
        clean_env.setenv("PORT", "70000")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)


class TestImmutability:

    def test_settings_are_frozen(self, clean_env):
        settings = Settings(_env_file=None)
        with pytest.raises(ValidationError):
            settings.port = 1234
        assert settings.port == 8000
