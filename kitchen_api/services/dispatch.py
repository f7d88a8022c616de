"""
Shared dispatcher plumbing: strict body decoding, action lookup, field checks,
Find semantics, and the reason → HTTP status mapping.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from enum import StrEnum
from typing import Any, TypeVar

from pydantic import ValidationError

from kitchen.kernel.engine import UpdateEngine
from kitchen.kernel.types import Collection, OperationResult, PolicyResult, Reason
from kitchen_api.models.commands import Command

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=Command)
E = TypeVar("E", bound=StrEnum)

SERVER_SIDE_REASONS = {Reason.CORRUPT_DATA, Reason.FAULT}


class CommandDecodeError(Exception):
    """Request body is not a well-formed command (bad JSON, not an object, wrong field type)."""

    pass


def decode_command(body: bytes | str, model: type[C]) -> C:
    """
    Parse a raw request body into a command model.

    A missing optional field is fine and comes back as None/empty. Malformed JSON
    or a present field of the wrong type raises CommandDecodeError.
    """
    try:
        payload = json.loads(body)
    except ValueError as e:
        raise CommandDecodeError(f"Request body is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise CommandDecodeError("Request body must be a JSON object.")

    try:
        return model.model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0]
        where = ".".join(str(p) for p in first["loc"])
        raise CommandDecodeError(f"Invalid field '{where}': {first['msg']}.") from e


def parse_action(raw: str | None, actions: type[E]) -> E | str | None:
    """The matching action member, the raw string if it is unknown, or None if absent."""
    if raw is None:
        return None
    try:
        return actions(raw)
    except ValueError:
        return raw


def present(value: str | None) -> bool:
    return value is not None and value.strip() != ""


def invalid(message: str) -> OperationResult:
    """A request rejected before it reaches the engine."""
    logger.warning(message)
    return OperationResult.failure(Reason.VALIDATION_ERROR, message)


def unsupported_action(action: str | None) -> OperationResult:
    if action is None:
        return invalid("No Action specified.")
    return invalid(f"Unknown Action: '{action}'.")


def build(aggregate: Any, add: Callable[[Any, Any], PolicyResult], children: Iterable[Any]) -> PolicyResult:
    """
    Fold an add-policy over children, starting from aggregate.
    Used on insert so a new aggregate obeys the same uniqueness rules as later adds.
    """
    result = PolicyResult(aggregate=aggregate, applied=True)
    for child in children:
        result = add(result.aggregate, child)
        if not result.applied:
            return result
    return result


async def find(engine: UpdateEngine, collection: Collection, name: str | None) -> OperationResult:
    """
    No name (or a blank one) → every aggregate in the collection.
    A name → every aggregate whose name starts with it.
    Finding nothing is reported as an error.
    """
    if not present(name):
        logger.info("No name specified, trying to return all %ss.", collection.label)
        result = await engine.list_all(collection)
        if result.ok and not result.entities:
            message = f"Could not find any {collection.label}s at all."
            logger.warning(message)
            return OperationResult.failure(Reason.NOT_FOUND, message)
        if result.ok:
            result.message = f"Successfully retrieved all {collection.label}s."
        return result

    result = await engine.find_matching(collection, name)
    if result.ok and not result.entities:
        message = f"Could not find any {collection.label}s with Name: '{name}'."
        logger.warning(message)
        return OperationResult.failure(Reason.NOT_FOUND, message)
    return result


def status_for(result: OperationResult) -> int:
    """
    200 on success. Storage and data faults are 500; everything the client can
    fix (validation, missing, duplicate, conflict) is 400.
    """
    if result.ok:
        return 200
    if result.reason in SERVER_SIDE_REASONS:
        return 500
    return 400
