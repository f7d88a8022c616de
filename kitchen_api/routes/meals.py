"""Collection endpoints. One POST per collection, with the Action tag in the body."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from kitchen.kernel.engine import UpdateEngine
from kitchen.kernel.types import OperationResult
from kitchen_api.models.envelope import OperationResponse
from kitchen_api.services import dispatch_menu_command, dispatch_recipe_command, dispatch_shopping_list_command
from kitchen_api.services.dispatch import status_for

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["meals"])


def get_engine(request: Request) -> UpdateEngine:
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise RuntimeError("engine not initialized. Check app startup wiring.")
    return engine


def _respond(result: OperationResult) -> JSONResponse:
    status_code = status_for(result)
    if result.ok:
        logger.info("Request succeeded: %s", result.message)
    else:
        logger.warning("Request failed (%s): %s", result.reason, result.message)
    body = OperationResponse.from_result(result).model_dump(mode="json", by_alias=True)
    return JSONResponse(content=body, status_code=status_code)


@router.post("/recipes")
async def recipes(request: Request, engine: UpdateEngine = Depends(get_engine)) -> JSONResponse:
    """Recipe commands: Find, Get, Insert, Remove, rename, field edits, ingredients/instructions/comments."""
    return _respond(await dispatch_recipe_command(engine, await request.body()))


@router.post("/menus")
async def menus(request: Request, engine: UpdateEngine = Depends(get_engine)) -> JSONResponse:
    """Menu commands: Find, Get, Insert, Remove, rename, menu items."""
    return _respond(await dispatch_menu_command(engine, await request.body()))


@router.post("/shopping-lists")
async def shopping_lists(request: Request, engine: UpdateEngine = Depends(get_engine)) -> JSONResponse:
    """Shopping list commands: Find, Get, Insert, Remove, rename, items and item comments."""
    return _respond(await dispatch_shopping_list_command(engine, await request.body()))
