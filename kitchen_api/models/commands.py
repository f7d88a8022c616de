"""
Command envelopes: what clients POST to each collection endpoint.

One flat JSON object per request: an "Action" tag plus whichever fields that
action needs. Field names are PascalCase. Unknown fields are ignored; known
fields with the wrong type are a decode error, never silently defaulted.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal

from kitchen.kernel.types import Ingredient, MenuItem, Product, Quantity, ShoppingItem, WeekDay


class RecipeAction(StrEnum):
    FIND_RECIPE = "FindRecipe"
    GET_RECIPE = "GetRecipe"
    INSERT_RECIPE = "InsertRecipe"
    REMOVE_RECIPE = "RemoveRecipe"
    CHANGE_RECIPE_NAME = "ChangeRecipeName"
    UPDATE_RECIPE_LINK = "UpdateRecipeLink"
    CHANGE_RECIPE_PORTIONS = "ChangeRecipePortions"
    UPDATE_RECIPE_BASE_INFO = "UpdateRecipeBaseInfo"
    ADD_INGREDIENT_TO_RECIPE = "AddIngredientToRecipe"
    ADD_INSTRUCTION_TO_RECIPE = "AddInstructionToRecipe"
    ADD_COMMENT_TO_RECIPE = "AddCommentToRecipe"
    REMOVE_INGREDIENT_FROM_RECIPE = "RemoveIngredientFromRecipe"
    REMOVE_INSTRUCTION_FROM_RECIPE = "RemoveInstructionFromRecipe"
    REMOVE_COMMENT_FROM_RECIPE = "RemoveCommentFromRecipe"


class MenuAction(StrEnum):
    FIND_MENU = "FindMenu"
    GET_MENU = "GetMenu"
    INSERT_MENU = "InsertMenu"
    REMOVE_MENU = "RemoveMenu"
    CHANGE_MENU_NAME = "ChangeMenuName"
    ADD_ITEM_TO_MENU = "AddItemToMenu"
    REMOVE_ITEM_FROM_MENU = "RemoveItemFromMenu"


class ShoppingListAction(StrEnum):
    FIND_SHOPPING_LIST = "FindShoppingList"
    GET_SHOPPING_LIST = "GetShoppingList"
    INSERT_SHOPPING_LIST = "InsertShoppingList"
    REMOVE_SHOPPING_LIST = "RemoveShoppingList"
    CHANGE_SHOPPING_LIST_NAME = "ChangeShoppingListName"
    ADD_ITEM_TO_SHOPPING_LIST = "AddItemToShoppingList"
    REMOVE_ITEM_FROM_SHOPPING_LIST = "RemoveItemFromShoppingList"
    ADD_COMMENT_TO_SHOPPING_ITEM = "AddCommentToShoppingItem"
    REMOVE_COMMENT_FROM_SHOPPING_ITEM = "RemoveCommentFromShoppingItem"


class Command(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        extra="ignore",
    )

    action: str | None = None


class RecipeCommand(Command):
    """Fields for POST /api/recipes."""

    recipe_name: str | None = None
    new_recipe_name: str | None = None
    ingredient_name: str | None = None

    # Recipe body (InsertRecipe, UpdateRecipeBaseInfo)
    name: str | None = None
    link: str | None = None
    portions: int | None = Field(default=None, ge=0)
    ingredients: list[Ingredient] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    comments: list[str] = Field(default_factory=list)

    # Single children (Add*/Remove*)
    product: Product | None = None
    quantity: Quantity | None = None
    instruction: str | None = None
    comment: str | None = None


class MenuCommand(Command):
    """Fields for POST /api/menus."""

    menu_name: str | None = None
    new_menu_name: str | None = None

    # Menu body (InsertMenu)
    name: str | None = None
    items: list[MenuItem] = Field(default_factory=list)

    # Menu item (AddItemToMenu, RemoveItemFromMenu)
    recipe_name: str | None = None
    week_day: WeekDay | None = None


class ShoppingListCommand(Command):
    """Fields for POST /api/shopping-lists."""

    shopping_list_name: str | None = None
    new_shopping_list_name: str | None = None

    # Shopping list body (InsertShoppingList)
    name: str | None = None
    items: list[ShoppingItem] = Field(default_factory=list)

    # Shopping item (AddItemToShoppingList, RemoveItemFromShoppingList, *ShoppingItem)
    item_name: str | None = None
    product: Product | None = None
    quantity: Quantity | None = None
    comments: list[str] = Field(default_factory=list)
    comment: str | None = None
