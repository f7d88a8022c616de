"""Tests for Settings: environment parsing and startup validation."""

from __future__ import annotations

import importlib

import pytest

from kitchen.kernel.table_store import MemoryTableStore
from kitchen_api.config import Settings
from kitchen_api.db import open_store


class TestFromEnv:
    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.DATABASE_URL == ""
        assert settings.TABLE_NAME == "table_entities"
        assert settings.UPDATE_MAX_ATTEMPTS == 1
        assert settings.LOG_LEVEL == "INFO"
        assert settings.uses_memory_store

    def test_reads_values(self):
        settings = Settings.from_env(
            {
                "DATABASE_URL": "postgresql://localhost/kitchen",
                "TABLE_NAME": "meals",
                "DB_POOL_MAX_SIZE": "5",
                "DB_COMMAND_TIMEOUT": "2.5",
                "UPDATE_MAX_ATTEMPTS": "3",
                "LOG_LEVEL": "debug",
            }
        )
        assert settings.UPDATE_MAX_ATTEMPTS == 3
        assert settings.LOG_LEVEL == "DEBUG"
        assert not settings.uses_memory_store

        config = settings.table_store_config()
        assert config.dsn == "postgresql://localhost/kitchen"
        assert config.table_name == "meals"
        assert config.max_pool_size == 5
        assert config.command_timeout == 2.5

    def test_non_numeric_value(self):
        with pytest.raises(RuntimeError, match="UPDATE_MAX_ATTEMPTS"):
            Settings.from_env({"UPDATE_MAX_ATTEMPTS": "often"})


class TestValidate:
    def test_max_attempts_must_be_positive(self):
        with pytest.raises(RuntimeError):
            Settings(UPDATE_MAX_ATTEMPTS=0)

    def test_pool_bounds(self):
        with pytest.raises(RuntimeError):
            Settings(DB_POOL_MIN_SIZE=10, DB_POOL_MAX_SIZE=5)

    def test_production_requires_database(self):
        with pytest.raises(RuntimeError, match="DATABASE_URL"):
            Settings(ENVIRONMENT="production")

    def test_production_with_database(self):
        assert Settings(ENVIRONMENT="production", DATABASE_URL="postgresql://db/kitchen").ENVIRONMENT == "production"


async def test_open_store_without_database_url_is_memory():
    store = await open_store(Settings())
    assert isinstance(store, MemoryTableStore)


class TestAppFactory:
    def test_import_reads_no_settings(self, monkeypatch):
        """Importing the app module must not validate the environment."""
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.delenv("DATABASE_URL", raising=False)

        from kitchen_api import main

        importlib.reload(main)
        assert not hasattr(main, "app")

        with pytest.raises(RuntimeError, match="DATABASE_URL"):
            main.create_app()

    def test_factory_reads_environment(self, monkeypatch):
        monkeypatch.setenv("UPDATE_MAX_ATTEMPTS", "3")
        monkeypatch.delenv("ENVIRONMENT", raising=False)

        from kitchen_api.main import create_app

        assert create_app().state.settings.UPDATE_MAX_ATTEMPTS == 3
