"""
Kitchen API settings, read from environment variables.

Read from environment when the app is created. Never hardcode secrets.
The Settings object is passed explicitly to whatever needs it; there is no
module-level instance.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from kitchen.kernel.postgres_store import TableStoreConfig


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "")
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from None


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name, "")
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number, got {raw!r}") from None


class Settings:
    """Application settings from environment variables."""

    def __init__(
        self,
        *,
        DATABASE_URL: str = "",
        TABLE_NAME: str = "table_entities",
        DB_POOL_MIN_SIZE: int = 2,
        DB_POOL_MAX_SIZE: int = 20,
        DB_COMMAND_TIMEOUT: float = 60.0,
        UPDATE_MAX_ATTEMPTS: int = 1,
        LOG_LEVEL: str = "INFO",
        ENVIRONMENT: str = "development",
    ):
        # Storage. Empty DATABASE_URL means in-memory tables (local development).
        self.DATABASE_URL = DATABASE_URL
        self.TABLE_NAME = TABLE_NAME
        self.DB_POOL_MIN_SIZE = DB_POOL_MIN_SIZE
        self.DB_POOL_MAX_SIZE = DB_POOL_MAX_SIZE
        self.DB_COMMAND_TIMEOUT = DB_COMMAND_TIMEOUT

        # Read-modify-write attempts per request. 1 = conflicts are returned, never retried.
        self.UPDATE_MAX_ATTEMPTS = UPDATE_MAX_ATTEMPTS

        # Application
        self.LOG_LEVEL = LOG_LEVEL.upper()
        self.ENVIRONMENT = ENVIRONMENT

        self.validate()

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if env is None else env
        return cls(
            DATABASE_URL=env.get("DATABASE_URL", ""),
            TABLE_NAME=env.get("TABLE_NAME", "table_entities"),
            DB_POOL_MIN_SIZE=_int(env, "DB_POOL_MIN_SIZE", 2),
            DB_POOL_MAX_SIZE=_int(env, "DB_POOL_MAX_SIZE", 20),
            DB_COMMAND_TIMEOUT=_float(env, "DB_COMMAND_TIMEOUT", 60.0),
            UPDATE_MAX_ATTEMPTS=_int(env, "UPDATE_MAX_ATTEMPTS", 1),
            LOG_LEVEL=env.get("LOG_LEVEL", "INFO"),
            ENVIRONMENT=env.get("ENVIRONMENT", "development"),
        )

    def validate(self) -> None:
        if self.UPDATE_MAX_ATTEMPTS < 1:
            raise RuntimeError("UPDATE_MAX_ATTEMPTS must be at least 1")
        if self.DB_POOL_MIN_SIZE < 0 or self.DB_POOL_MAX_SIZE < max(self.DB_POOL_MIN_SIZE, 1):
            raise RuntimeError("DB_POOL_MAX_SIZE must be at least DB_POOL_MIN_SIZE and at least 1")
        if self.ENVIRONMENT == "production" and not self.DATABASE_URL:
            raise RuntimeError("DATABASE_URL environment variable is required in production")

    @property
    def uses_memory_store(self) -> bool:
        return not self.DATABASE_URL

    def table_store_config(self) -> TableStoreConfig:
        return TableStoreConfig(
            dsn=self.DATABASE_URL,
            table_name=self.TABLE_NAME,
            min_pool_size=self.DB_POOL_MIN_SIZE,
            max_pool_size=self.DB_POOL_MAX_SIZE,
            command_timeout=self.DB_COMMAND_TIMEOUT,
        )
