"""Tests for health endpoints and error rendering"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_path_validation_is_a_400(client: AsyncClient):
    response = await client.get("/api/orders/not-a-number")

    assert response.status_code == 400
    body = response.json()
    assert body["detail"] == "Validation failed"
    assert body["errors"][0]["loc"] == ["path", "order_id"]
