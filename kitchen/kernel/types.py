"""
Kitchen Kernel — Shared Types

Domain aggregates (Recipe, Menu, ShoppingList) and the result types that bind
the policies, the update engine, and the dispatcher together.

Aggregates are immutable pydantic models. Their JSON form uses PascalCase field
names and enum case names ("Piece", "Monday"), which is also the stored blob
format.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, StrEnum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal

# ---------------------------------------------------------------------------
# Failure reasons
# ---------------------------------------------------------------------------


class Reason(StrEnum):
    """Why an operation did not succeed."""

    NOT_FOUND = "NotFound"
    CONFLICT = "Conflict"
    CONCURRENT_MODIFICATION = "ConcurrentModification"
    DUPLICATE_CHILD = "DuplicateChild"
    CHILD_NOT_FOUND = "ChildNotFound"
    CORRUPT_DATA = "CorruptData"
    VALIDATION_ERROR = "ValidationError"
    FAULT = "Fault"


# ---------------------------------------------------------------------------
# Domain model
# ---------------------------------------------------------------------------


class DomainModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        frozen=True,
    )


class RecipeUnit(str, Enum):
    PIECE = "Piece"
    TEASPOON = "Teaspoon"
    TABLESPOON = "Tablespoon"
    DECILITER = "Deciliter"
    LITER = "Liter"
    GRAM = "Gram"
    HECTOGRAM = "Hectogram"
    KILOGRAM = "Kilogram"
    NOT_DEFINED = "NotDefined"


class WeekDay(str, Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


class Quantity(DomainModel):
    # Non-finite amounts would serialize as null and never decode again.
    amount: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    unit: RecipeUnit = RecipeUnit.NOT_DEFINED


class Product(DomainModel):
    name: str
    link: str | None = None
    comments: list[str] = Field(default_factory=list)


class Ingredient(DomainModel):
    """A product paired with a quantity. Unique within a recipe by product name."""

    product: Product
    quantity: Quantity = Field(default_factory=Quantity)


class Recipe(DomainModel):
    name: str
    link: str | None = None
    portions: int = Field(default=0, ge=0)
    ingredients: list[Ingredient] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    comments: list[str] = Field(default_factory=list)


class MenuItem(DomainModel):
    """A recipe reference placed on a week day. Unique by (recipe_name, week_day)."""

    recipe_name: str
    week_day: WeekDay


class Menu(DomainModel):
    name: str
    items: list[MenuItem] = Field(default_factory=list)


class ShoppingItem(DomainModel):
    name: str
    item: Ingredient
    comments: list[str] = Field(default_factory=list)


class ShoppingList(DomainModel):
    name: str
    items: list[ShoppingItem] = Field(default_factory=list)


Aggregate = Recipe | Menu | ShoppingList
A = TypeVar("A", Recipe, Menu, ShoppingList)


@dataclass(frozen=True)
class Collection(Generic[A]):
    """A named table of one aggregate type, keyed by aggregate name."""

    table: str
    label: str
    model: type[A]


RECIPES: Collection[Recipe] = Collection(table="Recipes", label="recipe", model=Recipe)
MENUS: Collection[Menu] = Collection(table="Menus", label="menu", model=Menu)
SHOPPING_LISTS: Collection[ShoppingList] = Collection(
    table="ShoppingLists",
    label="shopping list",
    model=ShoppingList,
)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass
class PolicyResult:
    """
    Result of applying one mutation policy to an in-memory aggregate.
    Policies never raise; they always return one of these.
    """

    aggregate: Any
    applied: bool
    reason: Reason | None = None
    error: str | None = None


@dataclass
class OperationResult:
    """
    Outcome of one engine operation.
    Exactly one of a success message (ok=True) or an error message (ok=False).
    """

    ok: bool
    message: str
    reason: Reason | None = None
    entities: list[Any] = field(default_factory=list)

    @classmethod
    def success(cls, message: str, entities: list[Any] | None = None) -> OperationResult:
        return cls(ok=True, message=message, entities=entities or [])

    @classmethod
    def failure(cls, reason: Reason, message: str, entities: list[Any] | None = None) -> OperationResult:
        return cls(ok=False, message=message, reason=reason, entities=entities or [])
