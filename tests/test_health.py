"""Health endpoint tests."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health(client: AsyncClient) -> None:
    """GET /api/health returns 200 with OK status."""
    response = await client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "OK"
    assert data["message"]


@pytest.mark.asyncio
async def test_readiness(client: AsyncClient, store_backend: str) -> None:
    """GET /api/ready checks the store; Redis is reported as disabled when unset."""
    response = await client.get("/api/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["checks"]["store"] == "ok"
    assert data["checks"]["redis"] == "disabled"


@pytest.mark.asyncio
async def test_version(client: AsyncClient, store_backend: str) -> None:
    """GET /api/version returns version, environment and backend."""
    response = await client.get("/api/version")
    assert response.status_code == 200
    data = response.json()
    assert data["version"] == "0.1.0"
    assert "environment" in data
    assert data["store_backend"] == store_backend
