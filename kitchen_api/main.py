"""
Kitchen FastAPI application.

Entry point for the API server: `uvicorn --factory kitchen_api.main:create_app`.
Settings are read when the factory runs, never at import.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from kitchen.kernel.engine import UpdateEngine
from kitchen.kernel.table_store import TableStore
from kitchen_api.config import Settings
from kitchen_api.db import open_store
from kitchen_api.routes import meals as meal_routes

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(settings: Settings | None = None, store: TableStore | None = None) -> FastAPI:
    """
    Build the application.

    With a store given (tests), the engine is wired immediately. Otherwise the
    store is opened at startup from settings and closed at shutdown.
    """
    if settings is None:
        settings = Settings.from_env()
        configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Startup: open the table store unless one was injected.
        Shutdown: close what startup opened.
        """
        opened: TableStore | None = None
        if app.state.engine is None:
            opened = await open_store(settings)
            app.state.engine = UpdateEngine(opened, max_attempts=settings.UPDATE_MAX_ATTEMPTS)
            logger.info("Table store opened")

        yield

        if opened is not None:
            await opened.close()
            app.state.engine = None
            logger.info("Table store closed")

    app = FastAPI(
        title="Kitchen",
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = (
        UpdateEngine(store, max_attempts=settings.UPDATE_MAX_ATTEMPTS) if store is not None else None
    )

    # Register routes
    app.include_router(meal_routes.router)

    @app.get("/health")
    async def health():
        """Health check endpoint for uptime monitoring."""
        return {"status": "ok"}

    return app

