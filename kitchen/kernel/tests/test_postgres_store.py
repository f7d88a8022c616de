"""
Tests for PostgresTableStore adapter.

Requires a running Postgres instance. The fixture creates its own table; each
test writes to a fresh collection so runs do not interfere.
"""

import os
import uuid
from functools import partial

import asyncpg
import pytest

from kitchen.kernel import policies
from kitchen.kernel.engine import UpdateEngine
from kitchen.kernel.postgres_store import PostgresTableStore
from kitchen.kernel.table_store import KeyPredicate, StoreStatus
from kitchen.kernel.tests.factories import make_recipe
from kitchen.kernel.types import Collection, Reason, Recipe

TEST_TABLE = "kitchen_test_entities"


@pytest.fixture
async def db_pool():
    """Create a connection pool for tests."""
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        pytest.skip("DATABASE_URL not set")

    pool = await asyncpg.create_pool(database_url)
    async with pool.acquire() as conn:
        await conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {TEST_TABLE} (
                collection text NOT NULL,
                key text NOT NULL,
                blob text NOT NULL,
                etag text NOT NULL,
                PRIMARY KEY (collection, key)
            )
            """
        )
    yield pool
    await pool.close()


@pytest.fixture
def store(db_pool):
    return PostgresTableStore(db_pool, TEST_TABLE)


@pytest.fixture
def collection():
    return f"Recipes-{uuid.uuid4().hex}"


def test_rejects_unsafe_table_name():
    with pytest.raises(ValueError):
        PostgresTableStore(pool=None, table_name="entities; DROP TABLE x")


class TestPostgresTableStore:
    """Same outcome classification as the memory store."""

    async def test_insert_and_get(self, store, collection):
        assert (await store.insert(collection, "Pasta", "{}")).succeeded
        entity = await store.get(collection, "Pasta")
        assert entity.blob == "{}"
        assert entity.etag

    async def test_get_nonexistent(self, store, collection):
        assert await store.get(collection, "Pasta") is None

    async def test_duplicate_insert_conflicts(self, store, collection):
        await store.insert(collection, "Pasta", "{}")
        outcome = await store.insert(collection, "Pasta", "{}")
        assert outcome.status is StoreStatus.CONFLICT

    async def test_conditioned_put(self, store, collection):
        await store.insert(collection, "Pasta", "v1")
        etag = (await store.get(collection, "Pasta")).etag

        assert (await store.put(collection, "Pasta", "v2", etag)).succeeded
        stale = await store.put(collection, "Pasta", "v3", etag)

        assert stale.status is StoreStatus.CONFLICT
        assert (await store.get(collection, "Pasta")).blob == "v2"

    async def test_put_missing_is_not_found(self, store, collection):
        outcome = await store.put(collection, "Pasta", "v1", "etag")
        assert outcome.status is StoreStatus.NOT_FOUND

    async def test_delete(self, store, collection):
        await store.insert(collection, "Pasta", "{}")
        assert (await store.delete(collection, "Pasta")).succeeded
        assert (await store.delete(collection, "Pasta")).status is StoreStatus.NOT_FOUND

    async def test_prefix_query_is_literal_and_ordered(self, store, collection):
        for key in ["Pasta_2", "Pasta", "Pastas", "Soup"]:
            await store.insert(collection, key, "{}")

        matched = await store.query(collection, KeyPredicate(prefix="Pasta_"))
        everything = await store.query(collection, KeyPredicate())

        assert [e.key for e in matched] == ["Pasta_2"]
        assert [e.key for e in everything] == ["Pasta", "Pasta_2", "Pastas", "Soup"]


class TestEngineOnPostgres:
    async def test_update_round_trip(self, store, collection):
        recipes = Collection(table=collection, label="recipe", model=Recipe)
        engine = UpdateEngine(store)

        await engine.insert(recipes, make_recipe("Pasta"))
        result = await engine.update(recipes, "Pasta", partial(policies.rename, new_name="Pasta al forno"), "Rename")

        assert result.ok
        assert (await engine.find_exact(recipes, "Pasta")).entities[0].name == "Pasta al forno"
        assert (await engine.remove(recipes, "Ghost")).reason == Reason.NOT_FOUND
