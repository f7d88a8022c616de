"""
Kernel test configuration.

Kernel tests run on MemoryTableStore with function-scoped fixtures.
PostgresTableStore tests that need DATABASE_URL are skipped automatically when not set.
"""

import pytest

from kitchen.kernel.engine import UpdateEngine
from kitchen.kernel.table_store import MemoryTableStore
from kitchen.kernel.tests.factories import make_menu, make_recipe, make_shopping_list
from kitchen.kernel.types import MENUS, RECIPES, SHOPPING_LISTS


@pytest.fixture
def store():
    return MemoryTableStore()


@pytest.fixture
def engine(store):
    return UpdateEngine(store)


@pytest.fixture
async def pasta(engine):
    """Engine with an empty 'Pasta' recipe stored."""
    result = await engine.insert(RECIPES, make_recipe("Pasta", portions=4))
    assert result.ok
    return result.entities[0]


@pytest.fixture
async def week_menu(engine):
    result = await engine.insert(MENUS, make_menu("Week 12"))
    assert result.ok
    return result.entities[0]


@pytest.fixture
async def saturday_list(engine):
    result = await engine.insert(SHOPPING_LISTS, make_shopping_list("Saturday"))
    assert result.ok
    return result.entities[0]
