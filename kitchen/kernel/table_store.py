"""
Kitchen Kernel — Table Store

Key/value table storage for serialized aggregates. Every stored entity carries an
opaque version tag (etag) that changes on each write; replaces are conditioned on
the tag the caller read.

Adapters classify their own outcomes into StoreOutcome. Callers never inspect
driver exceptions or messages.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum


class StoreStatus(Enum):
    OK = "ok"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    FAULT = "fault"


@dataclass(frozen=True)
class StoreOutcome:
    """Tagged result of a write. status_code follows HTTP semantics (2xx = success)."""

    status: StoreStatus
    status_code: int
    detail: str = ""

    @property
    def succeeded(self) -> bool:
        return 200 <= self.status_code < 300


OK = StoreOutcome(StoreStatus.OK, 204)


def conflict(detail: str, status_code: int = 409) -> StoreOutcome:
    return StoreOutcome(StoreStatus.CONFLICT, status_code, detail)


def not_found(detail: str) -> StoreOutcome:
    return StoreOutcome(StoreStatus.NOT_FOUND, 404, detail)


def fault(detail: str, status_code: int = 500) -> StoreOutcome:
    return StoreOutcome(StoreStatus.FAULT, status_code, detail)


@dataclass(frozen=True)
class StoredEntity:
    key: str
    blob: str
    etag: str


@dataclass(frozen=True)
class KeyPredicate:
    """
    Key filter for query().

    exact set   → only that key
    prefix set  → keys starting with prefix
    neither     → every key (full scan)
    """

    exact: str | None = None
    prefix: str | None = None

    def matches(self, key: str) -> bool:
        if self.exact is not None:
            return key == self.exact
        if self.prefix is not None:
            return key.startswith(self.prefix)
        return True


ALL_KEYS = KeyPredicate()


def new_etag() -> str:
    return uuid.uuid4().hex


# ---------------------------------------------------------------------------
# Storage protocol
# ---------------------------------------------------------------------------


class TableStore:
    """
    Abstract storage interface.
    Implement with Postgres for production, or in-memory for tests.
    """

    async def get(self, collection: str, key: str) -> StoredEntity | None:
        """Fetch one entity and its version tag. Returns None if not found."""
        raise NotImplementedError

    async def put(self, collection: str, key: str, blob: str, expected_etag: str) -> StoreOutcome:
        """Replace an existing entity, only if its version tag is still expected_etag."""
        raise NotImplementedError

    async def insert(self, collection: str, key: str, blob: str) -> StoreOutcome:
        """Create a new entity. CONFLICT if the key already exists."""
        raise NotImplementedError

    async def delete(self, collection: str, key: str) -> StoreOutcome:
        """Delete an entity unconditionally. NOT_FOUND if absent."""
        raise NotImplementedError

    async def query(self, collection: str, predicate: KeyPredicate) -> list[StoredEntity]:
        """All entities whose key matches predicate, ordered by key."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release any underlying resources."""


class MemoryTableStore(TableStore):
    """In-memory storage for testing and local development."""

    def __init__(self) -> None:
        self.tables: dict[str, dict[str, StoredEntity]] = {}

    def _table(self, collection: str) -> dict[str, StoredEntity]:
        return self.tables.setdefault(collection, {})

    async def get(self, collection: str, key: str) -> StoredEntity | None:
        return self._table(collection).get(key)

    async def put(self, collection: str, key: str, blob: str, expected_etag: str) -> StoreOutcome:
        table = self._table(collection)
        current = table.get(key)
        if current is None:
            return not_found(f"No entity '{key}' in '{collection}'")
        if current.etag != expected_etag:
            return conflict(f"Version tag mismatch for '{key}' in '{collection}'", status_code=412)
        table[key] = StoredEntity(key=key, blob=blob, etag=new_etag())
        return OK

    async def insert(self, collection: str, key: str, blob: str) -> StoreOutcome:
        table = self._table(collection)
        if key in table:
            return conflict(f"Entity '{key}' already exists in '{collection}'")
        table[key] = StoredEntity(key=key, blob=blob, etag=new_etag())
        return OK

    async def delete(self, collection: str, key: str) -> StoreOutcome:
        if self._table(collection).pop(key, None) is None:
            return not_found(f"No entity '{key}' in '{collection}'")
        return OK

    async def query(self, collection: str, predicate: KeyPredicate) -> list[StoredEntity]:
        table = self._table(collection)
        return [table[k] for k in sorted(table) if predicate.matches(k)]
