"""Response envelope shared by every collection endpoint."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal

from kitchen.kernel.types import Menu, OperationResult, Recipe, ShoppingList


class OperationResponse(BaseModel):
    """
    What every endpoint returns.

    Exactly one of success_message / error_message is set.
    """

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)

    entities: list[Recipe | Menu | ShoppingList] = Field(default_factory=list)
    success_message: str | None = None
    error_message: str | None = None

    @classmethod
    def from_result(cls, result: OperationResult) -> OperationResponse:
        """Convert an engine/dispatcher result to the public envelope."""
        if result.ok:
            return cls(entities=result.entities, success_message=result.message)
        return cls(entities=result.entities, error_message=result.message)
