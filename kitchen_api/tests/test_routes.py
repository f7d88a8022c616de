"""Integration tests for the collection endpoints over ASGI."""

from __future__ import annotations

import httpx
import pytest

from kitchen.kernel.table_store import StoredEntity
from kitchen_api.config import Settings
from kitchen_api.main import create_app

ENVELOPE_KEYS = {"Entities", "SuccessMessage", "ErrorMessage"}


class TestEnvelope:
    async def test_insert_returns_entity_in_pascal_case(self, async_client):
        res = await async_client.post(
            "/api/recipes",
            json={
                "Action": "InsertRecipe",
                "Name": "Pasta",
                "Portions": 4,
                "Ingredients": [{"Product": {"Name": "Tomato"}, "Quantity": {"Amount": 2, "Unit": "Gram"}}],
            },
        )
        assert res.status_code == 200
        data = res.json()
        assert set(data) == ENVELOPE_KEYS
        assert data["SuccessMessage"] == "Recipe 'Pasta' successfully inserted."
        assert data["ErrorMessage"] is None
        assert data["Entities"][0]["Name"] == "Pasta"
        assert data["Entities"][0]["Ingredients"][0]["Quantity"] == {"Amount": 2.0, "Unit": "Gram"}

    async def test_failure_carries_error_message_only(self, async_client):
        res = await async_client.post("/api/menus", json={"Action": "GetMenu", "MenuName": "Week 1"})
        assert res.status_code == 400
        data = res.json()
        assert data["SuccessMessage"] is None
        assert data["ErrorMessage"] == "Could not find any menu with Name: 'Week 1'."
        assert data["Entities"] == []

    async def test_insert_conflict_echoes_rejected_entity(self, async_client):
        payload = {"Action": "InsertShoppingList", "Name": "Saturday"}
        await async_client.post("/api/shopping-lists", json=payload)
        res = await async_client.post("/api/shopping-lists", json=payload)
        assert res.status_code == 400
        assert res.json()["Entities"][0]["Name"] == "Saturday"


class TestStatusCodes:
    async def test_malformed_json_is_400(self, async_client):
        res = await async_client.post(
            "/api/recipes",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )
        assert res.status_code == 400
        assert res.json()["ErrorMessage"].startswith("Request body is not valid JSON")

    async def test_missing_action_is_400(self, async_client):
        res = await async_client.post("/api/shopping-lists", json={})
        assert res.status_code == 400
        assert res.json()["ErrorMessage"] == "No Action specified."

    async def test_corrupt_data_is_500(self, store, async_client):
        store.tables["Recipes"] = {"Broken": StoredEntity(key="Broken", blob="<html>", etag="e1")}
        res = await async_client.post("/api/recipes", json={"Action": "GetRecipe", "RecipeName": "Broken"})
        assert res.status_code == 500
        assert res.json()["ErrorMessage"]

    async def test_full_menu_flow(self, async_client):
        steps = [
            {"Action": "InsertMenu", "Name": "Week 12"},
            {"Action": "AddItemToMenu", "MenuName": "Week 12", "RecipeName": "Pasta", "WeekDay": "Monday"},
            {"Action": "ChangeMenuName", "MenuName": "Week 12", "NewMenuName": "Week 13"},
        ]
        for step in steps:
            res = await async_client.post("/api/menus", json=step)
            assert res.status_code == 200, res.json()

        res = await async_client.post("/api/menus", json={"Action": "FindMenu"})
        menu = res.json()["Entities"][0]
        assert menu == {"Name": "Week 13", "Items": [{"RecipeName": "Pasta", "WeekDay": "Monday"}]}


class TestAppWiring:
    async def test_health(self, async_client):
        res = await async_client.get("/health")
        assert res.json() == {"status": "ok"}

    async def test_engine_missing_raises(self):
        """Without an injected store and without lifespan the engine is never wired."""
        app = create_app(Settings())
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
            with pytest.raises(RuntimeError):
                await client.post("/api/recipes", json={"Action": "FindRecipe"})

    async def test_lifespan_opens_memory_store_without_database_url(self):
        app = create_app(Settings())
        async with app.router.lifespan_context(app):
            assert app.state.engine is not None
        assert app.state.engine is None
