"""
Kitchen Kernel — Mutation Policies

Pure functions: (aggregate, input) → PolicyResult
No side effects. No IO. Deterministic.

Each policy owns one business rule (duplicate or absence check) and the exact
change applied to an in-memory aggregate. The input aggregate is never modified;
a changed aggregate is a new model.

Child uniqueness keys:
  ingredients     product name
  instructions    full text
  comments        full text
  menu items      (recipe name, week day)
  shopping items  item name
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from kitchen.kernel.types import (
    Aggregate,
    Ingredient,
    Menu,
    MenuItem,
    PolicyResult,
    Reason,
    Recipe,
    ShoppingItem,
    ShoppingList,
    WeekDay,
)

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _reject(aggregate: Any, reason: Reason, msg: str) -> PolicyResult:
    return PolicyResult(aggregate=aggregate, applied=False, reason=reason, error=msg)


def _ok(aggregate: Any) -> PolicyResult:
    return PolicyResult(aggregate=aggregate, applied=True)


def _add_child(
    aggregate: Any,
    field: str,
    child: Any,
    matches: Callable[[Any], bool],
    what: str,
    owner: str,
) -> PolicyResult:
    """Append child to aggregate.<field> unless an existing child matches its key."""
    children = getattr(aggregate, field)
    if any(matches(c) for c in children):
        return _reject(aggregate, Reason.DUPLICATE_CHILD, f"{what} already exists in {owner}.")
    return _ok(aggregate.model_copy(update={field: [*children, child]}))


def _remove_child(
    aggregate: Any,
    field: str,
    matches: Callable[[Any], bool],
    what: str,
    owner: str,
) -> PolicyResult:
    """Drop the matching entry from aggregate.<field>; every other entry keeps its place."""
    children = getattr(aggregate, field)
    for i, c in enumerate(children):
        if matches(c):
            return _ok(aggregate.model_copy(update={field: children[:i] + children[i + 1 :]}))
    return _reject(aggregate, Reason.CHILD_NOT_FOUND, f"{what} not found in {owner}.")


def _recipe(recipe: Recipe) -> str:
    return f"recipe '{recipe.name}'"


def _menu(menu: Menu) -> str:
    return f"menu '{menu.name}'"


def _shopping_list(shopping_list: ShoppingList) -> str:
    return f"shopping list '{shopping_list.name}'"


# ---------------------------------------------------------------------------
# Root fields
# ---------------------------------------------------------------------------


def rename(aggregate: Aggregate, new_name: str) -> PolicyResult:
    """
    Replace the name field. The storage key is not touched: the engine writes
    back under the key it loaded from.
    """
    return _ok(aggregate.model_copy(update={"name": new_name}))


def change_link(recipe: Recipe, link: str | None) -> PolicyResult:
    return _ok(recipe.model_copy(update={"link": link}))


def change_portions(recipe: Recipe, portions: int) -> PolicyResult:
    return _ok(recipe.model_copy(update={"portions": portions}))


def update_base_info(recipe: Recipe, name: str, portions: int, link: str | None) -> PolicyResult:
    """Name, portions and link in one write."""
    return _ok(recipe.model_copy(update={"name": name, "portions": portions, "link": link}))


# ---------------------------------------------------------------------------
# Recipe children
# ---------------------------------------------------------------------------


def add_ingredient(recipe: Recipe, ingredient: Ingredient) -> PolicyResult:
    name = ingredient.product.name
    return _add_child(
        recipe,
        "ingredients",
        ingredient,
        lambda i: i.product.name == name,
        f"Ingredient '{name}'",
        _recipe(recipe),
    )


def remove_ingredient(recipe: Recipe, product_name: str) -> PolicyResult:
    return _remove_child(
        recipe,
        "ingredients",
        lambda i: i.product.name == product_name,
        f"Ingredient '{product_name}'",
        _recipe(recipe),
    )


def add_instruction(recipe: Recipe, instruction: str) -> PolicyResult:
    return _add_child(
        recipe,
        "instructions",
        instruction,
        lambda i: i == instruction,
        f"Instruction '{instruction}'",
        _recipe(recipe),
    )


def remove_instruction(recipe: Recipe, instruction: str) -> PolicyResult:
    return _remove_child(
        recipe,
        "instructions",
        lambda i: i == instruction,
        f"Instruction '{instruction}'",
        _recipe(recipe),
    )


def add_comment(recipe: Recipe, comment: str) -> PolicyResult:
    return _add_child(
        recipe,
        "comments",
        comment,
        lambda c: c == comment,
        f"Comment '{comment}'",
        _recipe(recipe),
    )


def remove_comment(recipe: Recipe, comment: str) -> PolicyResult:
    return _remove_child(
        recipe,
        "comments",
        lambda c: c == comment,
        f"Comment '{comment}'",
        _recipe(recipe),
    )


# ---------------------------------------------------------------------------
# Menu items
# ---------------------------------------------------------------------------


def add_menu_item(menu: Menu, item: MenuItem) -> PolicyResult:
    return _add_child(
        menu,
        "items",
        item,
        lambda m: m.recipe_name == item.recipe_name and m.week_day == item.week_day,
        f"Recipe '{item.recipe_name}' on {item.week_day.value}",
        _menu(menu),
    )


def remove_menu_item(menu: Menu, recipe_name: str, week_day: WeekDay) -> PolicyResult:
    """Removes the item matching both recipe name and week day; items sharing only one of them stay."""
    return _remove_child(
        menu,
        "items",
        lambda m: m.recipe_name == recipe_name and m.week_day == week_day,
        f"Recipe '{recipe_name}' on {week_day.value}",
        _menu(menu),
    )


# ---------------------------------------------------------------------------
# Shopping items
# ---------------------------------------------------------------------------


def add_shopping_item(shopping_list: ShoppingList, item: ShoppingItem) -> PolicyResult:
    return _add_child(
        shopping_list,
        "items",
        item,
        lambda s: s.name == item.name,
        f"Item '{item.name}'",
        _shopping_list(shopping_list),
    )


def remove_shopping_item(shopping_list: ShoppingList, item_name: str) -> PolicyResult:
    return _remove_child(
        shopping_list,
        "items",
        lambda s: s.name == item_name,
        f"Item '{item_name}'",
        _shopping_list(shopping_list),
    )


def _update_shopping_item(
    shopping_list: ShoppingList,
    item_name: str,
    change: Callable[[ShoppingItem], PolicyResult],
) -> PolicyResult:
    for i, item in enumerate(shopping_list.items):
        if item.name == item_name:
            result = change(item)
            if not result.applied:
                return _reject(shopping_list, result.reason, result.error)
            items = [*shopping_list.items]
            items[i] = result.aggregate
            return _ok(shopping_list.model_copy(update={"items": items}))
    return _reject(
        shopping_list,
        Reason.CHILD_NOT_FOUND,
        f"Item '{item_name}' not found in {_shopping_list(shopping_list)}.",
    )


def add_shopping_item_comment(shopping_list: ShoppingList, item_name: str, comment: str) -> PolicyResult:
    return _update_shopping_item(
        shopping_list,
        item_name,
        lambda item: _add_child(
            item,
            "comments",
            comment,
            lambda c: c == comment,
            f"Comment '{comment}'",
            f"item '{item_name}'",
        ),
    )


def remove_shopping_item_comment(shopping_list: ShoppingList, item_name: str, comment: str) -> PolicyResult:
    return _update_shopping_item(
        shopping_list,
        item_name,
        lambda item: _remove_child(
            item,
            "comments",
            lambda c: c == comment,
            f"Comment '{comment}'",
            f"item '{item_name}'",
        ),
    )
