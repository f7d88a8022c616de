"""
Kitchen Kernel — Aggregate Codec

Aggregate <-> stored text. JSON with PascalCase field names.
"""

from __future__ import annotations

from typing import Generic

from pydantic import ValidationError

from kitchen.kernel.types import A


class CodecError(Exception):
    """Stored text exists but does not decode into the aggregate type."""

    pass


class AggregateCodec(Generic[A]):
    def __init__(self, model: type[A]):
        self.model = model

    def serialize(self, aggregate: A) -> str:
        return aggregate.model_dump_json(by_alias=True)

    def deserialize(self, text: str) -> A:
        try:
            return self.model.model_validate_json(text)
        except ValidationError as e:
            raise CodecError(f"Invalid {self.model.__name__} blob: {e}") from e
