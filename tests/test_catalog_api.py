"""Widget and palette catalog endpoints."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.api


async def test_list_widgets_hides_system_widgets(client: AsyncClient):
    resp = await client.get("/api/v1/widgets")
    assert resp.status_code == 200
    types = {w["type"] for w in resp.json()}
    assert {"text", "form", "productGrid"} <= types
    assert "header-layout" not in types

    resp = await client.get("/api/v1/widgets?includeSystem=true")
    assert "header-layout" in {w["type"] for w in resp.json()}


async def test_widget_entries_carry_schema(client: AsyncClient):
    text = next(w for w in (await client.get("/api/v1/widgets")).json() if w["type"] == "text")
    assert text["defaultProps"]["allowHtml"] is False
    assert "allowHtml" in text["propsSchema"]["properties"]


async def test_list_palettes(client: AsyncClient):
    resp = await client.get("/api/v1/palettes")
    palettes = {p["id"]: p for p in resp.json()}
    assert palettes["ocean"]["colors"]["primary"] == "#006994"
    assert len(palettes["ocean"]["colors"]) == 28
