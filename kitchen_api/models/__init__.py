"""
Pydantic models for the Kitchen API.

Request commands and the response envelope. No imports from db or routes.
"""

from kitchen_api.models.commands import (
    MenuAction,
    MenuCommand,
    RecipeAction,
    RecipeCommand,
    ShoppingListAction,
    ShoppingListCommand,
)
from kitchen_api.models.envelope import OperationResponse

__all__ = [
    "RecipeAction",
    "RecipeCommand",
    "MenuAction",
    "MenuCommand",
    "ShoppingListAction",
    "ShoppingListCommand",
    "OperationResponse",
]
