"""
Recipe command dispatcher.

Decodes a POST /api/recipes body, checks the fields its Action needs, and hands
the matching policy to the update engine.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from functools import partial

from kitchen.kernel import policies
from kitchen.kernel.engine import UpdateEngine
from kitchen.kernel.types import RECIPES, Ingredient, OperationResult, Quantity, Reason, Recipe
from kitchen_api.models.commands import RecipeAction, RecipeCommand
from kitchen_api.services.dispatch import (
    CommandDecodeError,
    build,
    decode_command,
    find,
    invalid,
    parse_action,
    present,
    unsupported_action,
)

logger = logging.getLogger(__name__)

Handler = Callable[[UpdateEngine, RecipeCommand], Awaitable[OperationResult]]


async def dispatch_recipe_command(engine: UpdateEngine, body: bytes | str) -> OperationResult:
    """Run one recipe command. Never raises; every outcome is an OperationResult."""
    logger.info("Recipes received a command")
    try:
        cmd = decode_command(body, RecipeCommand)
    except CommandDecodeError as e:
        return invalid(str(e))

    action = parse_action(cmd.action, RecipeAction)
    handler = _HANDLERS.get(action) if isinstance(action, RecipeAction) else None
    if handler is None:
        return unsupported_action(action)
    return await handler(engine, cmd)


# ---------------------------------------------------------------------------
# Lookups, insert, remove
# ---------------------------------------------------------------------------


async def _find(engine: UpdateEngine, cmd: RecipeCommand) -> OperationResult:
    return await find(engine, RECIPES, cmd.recipe_name)


async def _get(engine: UpdateEngine, cmd: RecipeCommand) -> OperationResult:
    if not present(cmd.recipe_name):
        return invalid("Could not Get recipe without a 'RecipeName'.")
    return await engine.find_exact(RECIPES, cmd.recipe_name)


async def _insert(engine: UpdateEngine, cmd: RecipeCommand) -> OperationResult:
    if not present(cmd.name):
        return invalid("Could not Insert recipe without a 'Name'.")
    if not all(present(i.product.name) for i in cmd.ingredients):
        return invalid("Invalid ingredient.")
    if not all(present(i) for i in cmd.instructions):
        return invalid("Invalid instruction.")
    if not all(present(c) for c in cmd.comments):
        return invalid("Invalid comment.")

    recipe = Recipe(name=cmd.name, link=cmd.link, portions=cmd.portions or 0)
    for add, children in (
        (policies.add_ingredient, cmd.ingredients),
        (policies.add_instruction, cmd.instructions),
        (policies.add_comment, cmd.comments),
    ):
        result = build(recipe, add, children)
        if not result.applied:
            logger.warning(result.error)
            return OperationResult.failure(result.reason or Reason.VALIDATION_ERROR, result.error or "")
        recipe = result.aggregate

    return await engine.insert(RECIPES, recipe)


async def _remove(engine: UpdateEngine, cmd: RecipeCommand) -> OperationResult:
    if not present(cmd.recipe_name):
        return invalid("Could not Remove recipe without a 'RecipeName'.")
    return await engine.remove(RECIPES, cmd.recipe_name)


# ---------------------------------------------------------------------------
# Root fields
# ---------------------------------------------------------------------------


async def _change_name(engine: UpdateEngine, cmd: RecipeCommand) -> OperationResult:
    if not present(cmd.recipe_name):
        return invalid("No recipe to change found.")
    if not present(cmd.new_recipe_name):
        return invalid("No new recipe name specified.")
    return await engine.update(
        RECIPES,
        cmd.recipe_name,
        partial(policies.rename, new_name=cmd.new_recipe_name),
        f"Change name of recipe '{cmd.recipe_name}' to '{cmd.new_recipe_name}'",
    )


async def _update_link(engine: UpdateEngine, cmd: RecipeCommand) -> OperationResult:
    if not present(cmd.recipe_name):
        return invalid("No recipe specified.")
    if cmd.link is None:
        return invalid("No link specified.")
    return await engine.update(
        RECIPES,
        cmd.recipe_name,
        partial(policies.change_link, link=cmd.link),
        f"Update link of recipe '{cmd.recipe_name}'",
    )


async def _change_portions(engine: UpdateEngine, cmd: RecipeCommand) -> OperationResult:
    if not present(cmd.recipe_name):
        return invalid("No recipe specified.")
    if cmd.portions is None:
        return invalid("No portions specified.")
    return await engine.update(
        RECIPES,
        cmd.recipe_name,
        partial(policies.change_portions, portions=cmd.portions),
        f"Change portions of recipe '{cmd.recipe_name}' to {cmd.portions}",
    )


async def _update_base_info(engine: UpdateEngine, cmd: RecipeCommand) -> OperationResult:
    if not present(cmd.recipe_name):
        return invalid("No recipe specified.")
    if not present(cmd.name):
        return invalid("No recipe name specified.")
    if cmd.portions is None:
        return invalid("No portions specified.")
    return await engine.update(
        RECIPES,
        cmd.recipe_name,
        partial(policies.update_base_info, name=cmd.name, portions=cmd.portions, link=cmd.link),
        f"Update base info of recipe '{cmd.recipe_name}'",
    )


# ---------------------------------------------------------------------------
# Children
# ---------------------------------------------------------------------------


async def _add_ingredient(engine: UpdateEngine, cmd: RecipeCommand) -> OperationResult:
    if cmd.product is None or not present(cmd.product.name):
        return invalid("Invalid ingredient.")
    if not present(cmd.recipe_name):
        return invalid("No recipe specified.")
    ingredient = Ingredient(product=cmd.product, quantity=cmd.quantity or Quantity())
    return await engine.update(
        RECIPES,
        cmd.recipe_name,
        partial(policies.add_ingredient, ingredient=ingredient),
        f"Add ingredient '{ingredient.product.name}' to recipe '{cmd.recipe_name}'",
    )


async def _add_instruction(engine: UpdateEngine, cmd: RecipeCommand) -> OperationResult:
    if not present(cmd.instruction):
        return invalid("Invalid instruction.")
    if not present(cmd.recipe_name):
        return invalid("No recipe specified.")
    return await engine.update(
        RECIPES,
        cmd.recipe_name,
        partial(policies.add_instruction, instruction=cmd.instruction),
        f"Add instruction '{cmd.instruction}' to recipe '{cmd.recipe_name}'",
    )


async def _add_comment(engine: UpdateEngine, cmd: RecipeCommand) -> OperationResult:
    if not present(cmd.comment):
        return invalid("Invalid comment.")
    if not present(cmd.recipe_name):
        return invalid("No recipe specified.")
    return await engine.update(
        RECIPES,
        cmd.recipe_name,
        partial(policies.add_comment, comment=cmd.comment),
        f"Add comment '{cmd.comment}' to recipe '{cmd.recipe_name}'",
    )


async def _remove_ingredient(engine: UpdateEngine, cmd: RecipeCommand) -> OperationResult:
    if not present(cmd.ingredient_name):
        return invalid("Invalid ingredient.")
    if not present(cmd.recipe_name):
        return invalid("No recipe specified.")
    return await engine.update(
        RECIPES,
        cmd.recipe_name,
        partial(policies.remove_ingredient, product_name=cmd.ingredient_name),
        f"Remove ingredient '{cmd.ingredient_name}' from recipe '{cmd.recipe_name}'",
    )


async def _remove_instruction(engine: UpdateEngine, cmd: RecipeCommand) -> OperationResult:
    if not present(cmd.instruction):
        return invalid("Invalid instruction.")
    if not present(cmd.recipe_name):
        return invalid("No recipe specified.")
    return await engine.update(
        RECIPES,
        cmd.recipe_name,
        partial(policies.remove_instruction, instruction=cmd.instruction),
        f"Remove instruction '{cmd.instruction}' from recipe '{cmd.recipe_name}'",
    )


async def _remove_comment(engine: UpdateEngine, cmd: RecipeCommand) -> OperationResult:
    if not present(cmd.comment):
        return invalid("Invalid comment.")
    if not present(cmd.recipe_name):
        return invalid("No recipe specified.")
    return await engine.update(
        RECIPES,
        cmd.recipe_name,
        partial(policies.remove_comment, comment=cmd.comment),
        f"Remove comment '{cmd.comment}' from recipe '{cmd.recipe_name}'",
    )


_HANDLERS: dict[RecipeAction, Handler] = {
    RecipeAction.FIND_RECIPE: _find,
    RecipeAction.GET_RECIPE: _get,
    RecipeAction.INSERT_RECIPE: _insert,
    RecipeAction.REMOVE_RECIPE: _remove,
    RecipeAction.CHANGE_RECIPE_NAME: _change_name,
    RecipeAction.UPDATE_RECIPE_LINK: _update_link,
    RecipeAction.CHANGE_RECIPE_PORTIONS: _change_portions,
    RecipeAction.UPDATE_RECIPE_BASE_INFO: _update_base_info,
    RecipeAction.ADD_INGREDIENT_TO_RECIPE: _add_ingredient,
    RecipeAction.ADD_INSTRUCTION_TO_RECIPE: _add_instruction,
    RecipeAction.ADD_COMMENT_TO_RECIPE: _add_comment,
    RecipeAction.REMOVE_INGREDIENT_FROM_RECIPE: _remove_ingredient,
    RecipeAction.REMOVE_INSTRUCTION_FROM_RECIPE: _remove_instruction,
    RecipeAction.REMOVE_COMMENT_FROM_RECIPE: _remove_comment,
}
