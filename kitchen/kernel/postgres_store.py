"""
PostgresTableStore adapter for the Kitchen kernel.

Implements the TableStore protocol on top of a single Postgres table:

    collection text, key text, blob text, etag text,
    PRIMARY KEY (collection, key)

Creating the table is the deployment's job; this adapter only reads and writes rows.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

import asyncpg

from kitchen.kernel.table_store import (
    OK,
    KeyPredicate,
    StoredEntity,
    StoreOutcome,
    TableStore,
    conflict,
    fault,
    new_etag,
    not_found,
)

logger = logging.getLogger(__name__)

TABLE_NAME_PATTERN = re.compile(r"^[a-z_][a-z0-9_]{0,62}$")

# Driver errors that mean "the write did not happen"; everything else propagates.
STORAGE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


@dataclass(frozen=True)
class TableStoreConfig:
    """Everything needed to reach the table. Passed in explicitly, never read from globals."""

    dsn: str
    table_name: str = "table_entities"
    min_pool_size: int = 2
    max_pool_size: int = 20
    command_timeout: float = 60.0


class PostgresTableStore(TableStore):
    """Postgres-backed table storage, one row per aggregate."""

    def __init__(self, pool: asyncpg.Pool, table_name: str = "table_entities"):
        if not TABLE_NAME_PATTERN.match(table_name):
            raise ValueError(f"Invalid table name: {table_name!r}")
        self.pool = pool
        self.table = table_name

    @classmethod
    async def connect(cls, config: TableStoreConfig) -> PostgresTableStore:
        """Open a pool for config and wrap it."""
        pool = await asyncpg.create_pool(
            dsn=config.dsn,
            min_size=config.min_pool_size,
            max_size=config.max_pool_size,
            command_timeout=config.command_timeout,
        )
        return cls(pool, config.table_name)

    async def get(self, collection: str, key: str) -> StoredEntity | None:
        """Fetch a row. Returns None if not found."""
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT key, blob, etag FROM {self.table} WHERE collection = $1 AND key = $2",  # nosec B608
                collection,
                key,
            )
            return StoredEntity(key=row["key"], blob=row["blob"], etag=row["etag"]) if row else None

    async def put(self, collection: str, key: str, blob: str, expected_etag: str) -> StoreOutcome:
        """Conditioned replace: only writes if the stored etag still equals expected_etag."""
        try:
            async with self.pool.acquire() as conn:
                async with conn.transaction():
                    result = await conn.execute(
                        f"""
                        UPDATE {self.table}
                        SET blob = $3, etag = $4
                        WHERE collection = $1 AND key = $2 AND etag = $5
                        """,  # nosec B608
                        collection,
                        key,
                        blob,
                        new_etag(),
                        expected_etag,
                    )
                    if result == "UPDATE 1":
                        return OK

                    exists = await conn.fetchval(
                        f"SELECT 1 FROM {self.table} WHERE collection = $1 AND key = $2",  # nosec B608
                        collection,
                        key,
                    )
        except STORAGE_ERRORS as e:
            logger.exception("Replace of '%s' in '%s' failed", key, collection)
            return fault(f"Replace failed: {e}")

        if exists is None:
            return not_found(f"No entity '{key}' in '{collection}'")
        return conflict(f"Version tag mismatch for '{key}' in '{collection}'", status_code=412)

    async def insert(self, collection: str, key: str, blob: str) -> StoreOutcome:
        try:
            async with self.pool.acquire() as conn:
                result = await conn.execute(
                    f"""
                    INSERT INTO {self.table} (collection, key, blob, etag)
                    VALUES ($1, $2, $3, $4)
                    ON CONFLICT (collection, key) DO NOTHING
                    """,  # nosec B608
                    collection,
                    key,
                    blob,
                    new_etag(),
                )
        except STORAGE_ERRORS as e:
            logger.exception("Insert of '%s' in '%s' failed", key, collection)
            return fault(f"Insert failed: {e}")

        if result == "INSERT 0 1":
            return OK
        return conflict(f"Entity '{key}' already exists in '{collection}'")

    async def delete(self, collection: str, key: str) -> StoreOutcome:
        try:
            async with self.pool.acquire() as conn:
                result = await conn.execute(
                    f"DELETE FROM {self.table} WHERE collection = $1 AND key = $2",  # nosec B608
                    collection,
                    key,
                )
        except STORAGE_ERRORS as e:
            logger.exception("Delete of '%s' in '%s' failed", key, collection)
            return fault(f"Delete failed: {e}")

        if result == "DELETE 1":
            return OK
        return not_found(f"No entity '{key}' in '{collection}'")

    async def query(self, collection: str, predicate: KeyPredicate) -> list[StoredEntity]:
        sql = f"SELECT key, blob, etag FROM {self.table} WHERE collection = $1"  # nosec B608
        args: list[str] = [collection]
        if predicate.exact is not None:
            sql += " AND key = $2"
            args.append(predicate.exact)
        elif predicate.prefix is not None:
            sql += " AND left(key, length($2)) = $2"
            args.append(predicate.prefix)
        sql += " ORDER BY key"

        async with self.pool.acquire() as conn:
            rows = await conn.fetch(sql, *args)
            return [StoredEntity(key=r["key"], blob=r["blob"], etag=r["etag"]) for r in rows]

    async def close(self) -> None:
        """Close the connection pool."""
        await self.pool.close()
