"""
Pytest configuration and fixtures for Kitchen API tests.

The app is built with an injected MemoryTableStore, so no database is needed.
ASGITransport does not run the lifespan; create_app wires the engine eagerly
when a store is given.
"""

from __future__ import annotations

import httpx
import pytest
import pytest_asyncio

from kitchen.kernel.engine import UpdateEngine
from kitchen.kernel.table_store import MemoryTableStore
from kitchen_api.config import Settings
from kitchen_api.main import create_app


@pytest.fixture
def store():
    return MemoryTableStore()


@pytest.fixture
def engine(store):
    return UpdateEngine(store)


@pytest.fixture
def app(store):
    return create_app(Settings(), store=store)


@pytest_asyncio.fixture
async def async_client(app):
    """Async HTTP client against the ASGI app."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
