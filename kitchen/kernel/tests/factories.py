"""Concise builders for kernel tests."""

from __future__ import annotations

from kitchen.kernel.types import (
    Ingredient,
    Menu,
    MenuItem,
    Product,
    Quantity,
    Recipe,
    RecipeUnit,
    ShoppingItem,
    ShoppingList,
    WeekDay,
)


def ingredient(name: str, amount: float = 1.0, unit: RecipeUnit = RecipeUnit.PIECE) -> Ingredient:
    return Ingredient(product=Product(name=name), quantity=Quantity(amount=amount, unit=unit))


def make_recipe(name: str = "Pasta", portions: int = 4, **fields) -> Recipe:
    return Recipe(name=name, portions=portions, **fields)


def menu_item(recipe_name: str, week_day: WeekDay) -> MenuItem:
    return MenuItem(recipe_name=recipe_name, week_day=week_day)


def make_menu(name: str = "Week 12", items: list[MenuItem] | None = None) -> Menu:
    return Menu(name=name, items=items or [])


def shopping_item(name: str, amount: float = 1.0, unit: RecipeUnit = RecipeUnit.PIECE, comments=None) -> ShoppingItem:
    return ShoppingItem(name=name, item=ingredient(name, amount, unit), comments=comments or [])


def make_shopping_list(name: str = "Saturday", items: list[ShoppingItem] | None = None) -> ShoppingList:
    return ShoppingList(name=name, items=items or [])
