"""Tests for the menu catalog"""

from decimal import Decimal

import pytest
from httpx import AsyncClient

from app.services.catalog import get_price_if_available


@pytest.mark.asyncio
async def test_price_lookup(test_db, test_menu_items):
    assert await get_price_if_available(test_db, test_menu_items["chicken_rice"]) == Decimal("5.00")
    assert await get_price_if_available(test_db, test_menu_items["chilli_crab"]) is None
    assert await get_price_if_available(test_db, 9999) is None


@pytest.mark.asyncio
async def test_public_menu_hides_unavailable(client: AsyncClient, test_menu_items):
    response = await client.get("/api/menu")

    assert response.status_code == 200
    items = response.json()
    assert [i["name_en"] for i in items] == ["Iced Lemon Tea", "Hainanese Chicken Rice"]
    assert items[0]["price"] == 3.5
    assert "is_available" not in items[0]


@pytest.mark.asyncio
async def test_public_menu_by_category(client: AsyncClient, test_menu_items):
    response = await client.get("/api/menu", params={"category": "Drinks"})

    assert [i["name_en"] for i in response.json()] == ["Iced Lemon Tea"]


@pytest.mark.asyncio
async def test_menu_admin_is_admin_only(authenticated_client: AsyncClient, test_menu_items):
    response = await authenticated_client.get("/api/menu/admin")

    assert response.status_code == 403
    assert response.json()["detail"] == "Admin only"


@pytest.mark.asyncio
async def test_menu_admin_crud(admin_client: AsyncClient, test_menu_items):
    listing = await admin_client.get("/api/menu/admin")
    assert listing.status_code == 200
    assert len(listing.json()) == 3

    created = await admin_client.post(
        "/api/menu/admin",
        json={"name_en": "Kopi", "name_cn": "咖啡", "price": "1.80", "category": "Drinks"},
    )
    assert created.status_code == 201
    item = created.json()
    assert item["price"] == 1.8
    assert item["is_available"] is True

    updated = await admin_client.put(f"/api/menu/admin/{item['id']}", json={"price": "2.00"})
    assert updated.status_code == 200
    assert updated.json()["price"] == 2.0
    assert updated.json()["name_en"] == "Kopi"

    removed = await admin_client.delete(f"/api/menu/admin/{item['id']}")
    assert removed.json() == {"ok": True}

    public = await admin_client.get("/api/menu", params={"category": "Drinks"})
    assert [i["name_en"] for i in public.json()] == ["Iced Lemon Tea"]

    assert (await admin_client.delete("/api/menu/admin/9999")).status_code == 404
