"""Menu command dispatcher (POST /api/menus)."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from functools import partial

from kitchen.kernel import policies
from kitchen.kernel.engine import UpdateEngine
from kitchen.kernel.types import MENUS, Menu, MenuItem, OperationResult, Reason
from kitchen_api.models.commands import MenuAction, MenuCommand
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

Handler = Callable[[UpdateEngine, MenuCommand], Awaitable[OperationResult]]


async def dispatch_menu_command(engine: UpdateEngine, body: bytes | str) -> OperationResult:
    """Run one menu command. Never raises; every outcome is an OperationResult."""
    logger.info("Menus received a command")
    try:
        cmd = decode_command(body, MenuCommand)
    except CommandDecodeError as e:
        return invalid(str(e))

    action = parse_action(cmd.action, MenuAction)
    handler = _HANDLERS.get(action) if isinstance(action, MenuAction) else None
    if handler is None:
        return unsupported_action(action)
    return await handler(engine, cmd)


async def _find(engine: UpdateEngine, cmd: MenuCommand) -> OperationResult:
    return await find(engine, MENUS, cmd.menu_name)


async def _get(engine: UpdateEngine, cmd: MenuCommand) -> OperationResult:
    if not present(cmd.menu_name):
        return invalid("Could not Get menu without a 'MenuName'.")
    return await engine.find_exact(MENUS, cmd.menu_name)


async def _insert(engine: UpdateEngine, cmd: MenuCommand) -> OperationResult:
    if not present(cmd.name):
        return invalid("Could not Insert menu without a 'Name'.")
    if not all(present(i.recipe_name) for i in cmd.items):
        return invalid("No recipe specified.")
    result = build(Menu(name=cmd.name), policies.add_menu_item, cmd.items)
    if not result.applied:
        logger.warning(result.error)
        return OperationResult.failure(result.reason or Reason.VALIDATION_ERROR, result.error or "")
    return await engine.insert(MENUS, result.aggregate)


async def _remove(engine: UpdateEngine, cmd: MenuCommand) -> OperationResult:
    if not present(cmd.menu_name):
        return invalid("Could not Remove menu without a 'MenuName'.")
    return await engine.remove(MENUS, cmd.menu_name)


async def _change_name(engine: UpdateEngine, cmd: MenuCommand) -> OperationResult:
    if not present(cmd.menu_name):
        return invalid("No menu to change found.")
    if not present(cmd.new_menu_name):
        return invalid("No new menu name specified.")
    return await engine.update(
        MENUS,
        cmd.menu_name,
        partial(policies.rename, new_name=cmd.new_menu_name),
        f"Change name of menu '{cmd.menu_name}' to '{cmd.new_menu_name}'",
    )


def _menu_item(cmd: MenuCommand) -> MenuItem | OperationResult:
    if not present(cmd.recipe_name):
        return invalid("No recipe specified.")
    if cmd.week_day is None:
        return invalid("No week day specified.")
    if not present(cmd.menu_name):
        return invalid("No menu specified.")
    return MenuItem(recipe_name=cmd.recipe_name, week_day=cmd.week_day)


async def _add_item(engine: UpdateEngine, cmd: MenuCommand) -> OperationResult:
    item = _menu_item(cmd)
    if isinstance(item, OperationResult):
        return item
    return await engine.update(
        MENUS,
        cmd.menu_name,
        partial(policies.add_menu_item, item=item),
        f"Add recipe '{item.recipe_name}' on {item.week_day.value} to menu '{cmd.menu_name}'",
    )


async def _remove_item(engine: UpdateEngine, cmd: MenuCommand) -> OperationResult:
    item = _menu_item(cmd)
    if isinstance(item, OperationResult):
        return item
    return await engine.update(
        MENUS,
        cmd.menu_name,
        partial(policies.remove_menu_item, recipe_name=item.recipe_name, week_day=item.week_day),
        f"Remove recipe '{item.recipe_name}' on {item.week_day.value} from menu '{cmd.menu_name}'",
    )


_HANDLERS: dict[MenuAction, Handler] = {
    MenuAction.FIND_MENU: _find,
    MenuAction.GET_MENU: _get,
    MenuAction.INSERT_MENU: _insert,
    MenuAction.REMOVE_MENU: _remove,
    MenuAction.CHANGE_MENU_NAME: _change_name,
    MenuAction.ADD_ITEM_TO_MENU: _add_item,
    MenuAction.REMOVE_ITEM_FROM_MENU: _remove_item,
}
