"""Shopping list command dispatcher (POST /api/shopping-lists)."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from functools import partial

from kitchen.kernel import policies
from kitchen.kernel.engine import UpdateEngine
from kitchen.kernel.types import (
    SHOPPING_LISTS,
    Ingredient,
    OperationResult,
    Quantity,
    Reason,
    ShoppingItem,
    ShoppingList,
)
from kitchen_api.models.commands import ShoppingListAction, ShoppingListCommand
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

Handler = Callable[[UpdateEngine, ShoppingListCommand], Awaitable[OperationResult]]


async def dispatch_shopping_list_command(engine: UpdateEngine, body: bytes | str) -> OperationResult:
    """Run one shopping list command. Never raises; every outcome is an OperationResult."""
    logger.info("ShoppingLists received a command")
    try:
        cmd = decode_command(body, ShoppingListCommand)
    except CommandDecodeError as e:
        return invalid(str(e))

    action = parse_action(cmd.action, ShoppingListAction)
    handler = _HANDLERS.get(action) if isinstance(action, ShoppingListAction) else None
    if handler is None:
        return unsupported_action(action)
    return await handler(engine, cmd)


async def _find(engine: UpdateEngine, cmd: ShoppingListCommand) -> OperationResult:
    return await find(engine, SHOPPING_LISTS, cmd.shopping_list_name)


async def _get(engine: UpdateEngine, cmd: ShoppingListCommand) -> OperationResult:
    if not present(cmd.shopping_list_name):
        return invalid("Could not Get shopping list without a 'ShoppingListName'.")
    return await engine.find_exact(SHOPPING_LISTS, cmd.shopping_list_name)


async def _insert(engine: UpdateEngine, cmd: ShoppingListCommand) -> OperationResult:
    if not present(cmd.name):
        return invalid("Could not Insert shopping list without a 'Name'.")
    for item in cmd.items:
        if not present(item.name):
            return invalid("Invalid shopping item.")
        if not present(item.item.product.name):
            return invalid("Invalid product.")
    result = build(ShoppingList(name=cmd.name), policies.add_shopping_item, cmd.items)
    if not result.applied:
        logger.warning(result.error)
        return OperationResult.failure(result.reason or Reason.VALIDATION_ERROR, result.error or "")
    return await engine.insert(SHOPPING_LISTS, result.aggregate)


async def _remove(engine: UpdateEngine, cmd: ShoppingListCommand) -> OperationResult:
    if not present(cmd.shopping_list_name):
        return invalid("Could not Remove shopping list without a 'ShoppingListName'.")
    return await engine.remove(SHOPPING_LISTS, cmd.shopping_list_name)


async def _change_name(engine: UpdateEngine, cmd: ShoppingListCommand) -> OperationResult:
    if not present(cmd.shopping_list_name):
        return invalid("No shopping list to change found.")
    if not present(cmd.new_shopping_list_name):
        return invalid("No new shopping list name specified.")
    return await engine.update(
        SHOPPING_LISTS,
        cmd.shopping_list_name,
        partial(policies.rename, new_name=cmd.new_shopping_list_name),
        f"Change name of shopping list '{cmd.shopping_list_name}' to '{cmd.new_shopping_list_name}'",
    )


async def _add_item(engine: UpdateEngine, cmd: ShoppingListCommand) -> OperationResult:
    if not present(cmd.item_name):
        return invalid("Invalid shopping item.")
    if cmd.product is None or not present(cmd.product.name):
        return invalid("Invalid product.")
    if not present(cmd.shopping_list_name):
        return invalid("No shopping list specified.")
    item = ShoppingItem(
        name=cmd.item_name,
        item=Ingredient(product=cmd.product, quantity=cmd.quantity or Quantity()),
        comments=cmd.comments,
    )
    return await engine.update(
        SHOPPING_LISTS,
        cmd.shopping_list_name,
        partial(policies.add_shopping_item, item=item),
        f"Add item '{item.name}' to shopping list '{cmd.shopping_list_name}'",
    )


async def _remove_item(engine: UpdateEngine, cmd: ShoppingListCommand) -> OperationResult:
    if not present(cmd.item_name):
        return invalid("Invalid shopping item.")
    if not present(cmd.shopping_list_name):
        return invalid("No shopping list specified.")
    return await engine.update(
        SHOPPING_LISTS,
        cmd.shopping_list_name,
        partial(policies.remove_shopping_item, item_name=cmd.item_name),
        f"Remove item '{cmd.item_name}' from shopping list '{cmd.shopping_list_name}'",
    )


def _check_item_comment(cmd: ShoppingListCommand) -> OperationResult | None:
    if not present(cmd.comment):
        return invalid("Invalid comment.")
    if not present(cmd.item_name):
        return invalid("Invalid shopping item.")
    if not present(cmd.shopping_list_name):
        return invalid("No shopping list specified.")
    return None


async def _add_item_comment(engine: UpdateEngine, cmd: ShoppingListCommand) -> OperationResult:
    error = _check_item_comment(cmd)
    if error is not None:
        return error
    return await engine.update(
        SHOPPING_LISTS,
        cmd.shopping_list_name,
        partial(policies.add_shopping_item_comment, item_name=cmd.item_name, comment=cmd.comment),
        f"Add comment '{cmd.comment}' to item '{cmd.item_name}' in shopping list '{cmd.shopping_list_name}'",
    )


async def _remove_item_comment(engine: UpdateEngine, cmd: ShoppingListCommand) -> OperationResult:
    error = _check_item_comment(cmd)
    if error is not None:
        return error
    return await engine.update(
        SHOPPING_LISTS,
        cmd.shopping_list_name,
        partial(policies.remove_shopping_item_comment, item_name=cmd.item_name, comment=cmd.comment),
        f"Remove comment '{cmd.comment}' from item '{cmd.item_name}' in shopping list '{cmd.shopping_list_name}'",
    )


_HANDLERS: dict[ShoppingListAction, Handler] = {
    ShoppingListAction.FIND_SHOPPING_LIST: _find,
    ShoppingListAction.GET_SHOPPING_LIST: _get,
    ShoppingListAction.INSERT_SHOPPING_LIST: _insert,
    ShoppingListAction.REMOVE_SHOPPING_LIST: _remove,
    ShoppingListAction.CHANGE_SHOPPING_LIST_NAME: _change_name,
    ShoppingListAction.ADD_ITEM_TO_SHOPPING_LIST: _add_item,
    ShoppingListAction.REMOVE_ITEM_FROM_SHOPPING_LIST: _remove_item,
    ShoppingListAction.ADD_COMMENT_TO_SHOPPING_ITEM: _add_item_comment,
    ShoppingListAction.REMOVE_COMMENT_FROM_SHOPPING_ITEM: _remove_item_comment,
}
