"""
Kitchen Kernel — Update Engine

Sits between the pure policies and the table store. Owns the read-modify-write
cycle for aggregates:

  1. fetch blob + version tag
  2. decode
  3. apply the policy (pure)
  4. encode + replace conditioned on the version tag from step 1
  5. classify the store outcome

There is no locking. Two concurrent cycles on the same key race; the loser's
replace carries a stale tag and comes back as ConcurrentModification. With
max_attempts > 1 the whole cycle is re-run on that outcome only.

Every public method returns an OperationResult. Nothing raises across this boundary.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from kitchen.kernel.codec import AggregateCodec, CodecError
from kitchen.kernel.table_store import ALL_KEYS, KeyPredicate, StoredEntity, StoreOutcome, StoreStatus, TableStore
from kitchen.kernel.types import Collection, OperationResult, PolicyResult, Reason

logger = logging.getLogger(__name__)

Mutation = Callable[[Any], PolicyResult]


class OperationFailed(Exception):
    """Internal short-circuit; always converted to an OperationResult before returning."""

    def __init__(self, reason: Reason, message: str):
        super().__init__(message)
        self.result = OperationResult.failure(reason, message)


def _title(label: str) -> str:
    return label[:1].upper() + label[1:]


class UpdateEngine:
    """
    Read-modify-write over a TableStore, plus the plain lookups, insert and remove
    so callers never touch the store directly.
    """

    def __init__(self, store: TableStore, max_attempts: int = 1):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._store = store
        self._max_attempts = max_attempts
        self._codecs: dict[str, AggregateCodec] = {}

    @property
    def store(self) -> TableStore:
        return self._store

    def codec(self, collection: Collection) -> AggregateCodec:
        if collection.table not in self._codecs:
            self._codecs[collection.table] = AggregateCodec(collection.model)
        return self._codecs[collection.table]

    # -- IO wrappers --

    async def _get(self, collection: Collection, key: str, action: str) -> StoredEntity | None:
        try:
            return await self._store.get(collection.table, key)
        except Exception:
            logger.exception("%s failed reading '%s' from '%s'", action, key, collection.table)
            raise OperationFailed(Reason.FAULT, f"{action} failed: could not read from storage.") from None

    async def _query(self, collection: Collection, predicate: KeyPredicate, action: str) -> list[StoredEntity]:
        try:
            return await self._store.query(collection.table, predicate)
        except Exception:
            logger.exception("%s failed querying '%s'", action, collection.table)
            raise OperationFailed(Reason.FAULT, f"{action} failed: could not read from storage.") from None

    async def _write(self, action: str, write: Callable[[], Awaitable[StoreOutcome]]) -> StoreOutcome:
        try:
            return await write()
        except Exception:
            logger.exception("%s failed writing to storage", action)
            raise OperationFailed(Reason.FAULT, f"{action} failed: could not write to storage.") from None

    def _decode(self, collection: Collection, entity: StoredEntity, action: str) -> Any:
        try:
            return self.codec(collection).deserialize(entity.blob)
        except CodecError as e:
            logger.warning("%s failed in deserialization of '%s': %s", action, entity.key, e)
            raise OperationFailed(
                Reason.CORRUPT_DATA,
                f"{action} failed: stored {collection.label} '{entity.key}' could not be read.",
            ) from None

    # -- update --

    async def update(self, collection: Collection, key: str, mutate: Mutation, action: str) -> OperationResult:
        """
        Load the aggregate stored under key, apply mutate, and write it back
        conditioned on the version tag that was read.

        action is a human description ("Add ingredient 'Tomato' to recipe 'Pasta'")
        used for messages and logs.
        """
        attempt = 0
        try:
            while True:
                attempt += 1
                entity = await self._get(collection, key, action)
                if entity is None:
                    raise OperationFailed(
                        Reason.NOT_FOUND,
                        f"{action} failed since there is no {collection.label} with name: '{key}'.",
                    )
                aggregate = self._decode(collection, entity, action)

                result = mutate(aggregate)
                if not result.applied:
                    raise OperationFailed(result.reason or Reason.VALIDATION_ERROR, f"{action} failed: {result.error}")

                blob = self.codec(collection).serialize(result.aggregate)
                outcome = await self._write(
                    action,
                    lambda: self._store.put(collection.table, key, blob, entity.etag),
                )

                if outcome.succeeded:
                    message = f"{action} was successful."
                    logger.info(message)
                    return OperationResult.success(message, [result.aggregate])

                if outcome.status is StoreStatus.CONFLICT:
                    if attempt < self._max_attempts:
                        logger.info(
                            "%s hit a concurrent write (attempt %d/%d), retrying", action, attempt, self._max_attempts
                        )
                        continue
                    raise OperationFailed(
                        Reason.CONCURRENT_MODIFICATION,
                        f"{action} failed: {collection.label} '{key}' was modified by someone else.",
                    )

                if outcome.status is StoreStatus.NOT_FOUND:
                    raise OperationFailed(
                        Reason.NOT_FOUND,
                        f"{action} failed since {collection.label} '{key}' was removed.",
                    )

                raise OperationFailed(
                    Reason.FAULT,
                    f"{action} failed.\nHTTP Status: '{outcome.status_code}'.",
                )
        except OperationFailed as e:
            logger.warning(e.result.message)
            return e.result

    # -- insert / remove --

    async def insert(self, collection: Collection, aggregate: Any) -> OperationResult:
        """Store a new aggregate under its name. Conflict if the name is taken."""
        key = aggregate.name
        action = f"Insert {collection.label} '{key}'"
        blob = self.codec(collection).serialize(aggregate)
        try:
            outcome = await self._write(action, lambda: self._store.insert(collection.table, key, blob))
        except OperationFailed as e:
            logger.warning(e.result.message)
            e.result.entities = [aggregate]
            return e.result

        if outcome.succeeded:
            message = f"{_title(collection.label)} '{key}' successfully inserted."
            logger.info(message)
            return OperationResult.success(message, [aggregate])

        if outcome.status is StoreStatus.CONFLICT:
            message = f"Insert failed due to conflicting keys, a {collection.label} with name '{key}' already exists."
            reason = Reason.CONFLICT
        else:
            message = f"Could not insert {collection.label} '{key}'.\nHTTP Status: '{outcome.status_code}'."
            reason = Reason.FAULT
        logger.warning(message)
        return OperationResult.failure(reason, message, [aggregate])

    async def remove(self, collection: Collection, key: str) -> OperationResult:
        """Delete the aggregate stored under key. NotFound if absent."""
        action = f"Remove {collection.label} '{key}'"
        try:
            outcome = await self._write(action, lambda: self._store.delete(collection.table, key))
        except OperationFailed as e:
            logger.warning(e.result.message)
            return e.result

        if outcome.succeeded:
            message = f"{_title(collection.label)} '{key}' successfully removed."
            logger.info(message)
            return OperationResult.success(message)

        if outcome.status is StoreStatus.NOT_FOUND:
            message = f"Remove failed since a {collection.label} with name '{key}' could not be found."
            reason = Reason.NOT_FOUND
        else:
            message = f"Could not remove {collection.label} '{key}'.\nHTTP Status: '{outcome.status_code}'."
            reason = Reason.FAULT
        logger.warning(message)
        return OperationResult.failure(reason, message)

    # -- lookups --

    async def find_exact(self, collection: Collection, key: str) -> OperationResult:
        """Point lookup by storage key."""
        action = f"Get {collection.label} '{key}'"
        try:
            entity = await self._get(collection, key, action)
            if entity is None:
                raise OperationFailed(
                    Reason.NOT_FOUND,
                    f"Could not find any {collection.label} with Name: '{key}'.",
                )
            aggregate = self._decode(collection, entity, action)
        except OperationFailed as e:
            logger.warning(e.result.message)
            return e.result
        return OperationResult.success(f"Successfully retrieved {collection.label} '{key}'.", [aggregate])

    async def find_matching(self, collection: Collection, partial_key: str) -> OperationResult:
        """Every aggregate whose key starts with partial_key. An empty match is still a success."""
        logger.info("Trying to find %ss with Name: '%s'.", collection.label, partial_key)
        return await self._find(collection, KeyPredicate(prefix=partial_key), f"Find {collection.label}s")

    async def list_all(self, collection: Collection) -> OperationResult:
        return await self._find(collection, ALL_KEYS, f"List {collection.label}s")

    async def _find(self, collection: Collection, predicate: KeyPredicate, action: str) -> OperationResult:
        try:
            entities = await self._query(collection, predicate, action)
            aggregates = [self._decode(collection, e, action) for e in entities]
        except OperationFailed as e:
            logger.warning(e.result.message)
            return e.result
        return OperationResult.success(f"Successfully retrieved {collection.label}s.", aggregates)
