"""Middleware tests: request ID, rate limiting, CORS, error handling."""

from __future__ import annotations

from typing import Any

import pytest
from httpx import AsyncClient


class FakePipeline:
    def __init__(self, counters: dict[str, int]) -> None:
        self._counters = counters
        self._ops: list[tuple[str, str]] = []

    def incr(self, key: str) -> FakePipeline:
        self._ops.append(("incr", key))
        return self

    def expire(self, key: str, _seconds: int) -> FakePipeline:
        self._ops.append(("expire", key))
        return self

    async def execute(self) -> list[Any]:
        results: list[Any] = []
        for op, key in self._ops:
            if op == "incr":
                self._counters[key] = self._counters.get(key, 0) + 1
                results.append(self._counters[key])
            else:
                results.append(True)
        return results


class FakeRedis:
    def __init__(self) -> None:
        self.counters: dict[str, int] = {}

    def pipeline(self) -> FakePipeline:
        return FakePipeline(self.counters)


@pytest.fixture
def fake_redis(monkeypatch: pytest.MonkeyPatch) -> FakeRedis:
    redis = FakeRedis()
    monkeypatch.setattr("skillswap.middleware.rate_limit.get_redis", lambda: redis)
    return redis


@pytest.mark.asyncio
async def test_request_id_generated(client: AsyncClient) -> None:
    """Request ID is auto-generated when not provided."""
    response = await client.get("/api/health")
    assert "x-request-id" in response.headers
    assert len(response.headers["x-request-id"]) == 32


@pytest.mark.asyncio
async def test_request_id_preserved(client: AsyncClient) -> None:
    """Custom request ID is echoed back in response."""
    response = await client.get("/api/health", headers={"X-Request-Id": "test-abc-123"})
    assert response.headers["x-request-id"] == "test-abc-123"


@pytest.mark.asyncio
async def test_no_rate_limit_headers_without_redis(client: AsyncClient) -> None:
    """Without Redis the limiter steps aside entirely."""
    response = await client.get("/api/version")
    assert response.status_code == 200
    assert "x-ratelimit-limit" not in response.headers


@pytest.mark.asyncio
async def test_rate_limit_headers(client: AsyncClient, fake_redis: FakeRedis) -> None:
    """Rate limit headers are present on non-exempt endpoints."""
    response = await client.get("/api/version")
    assert response.headers["x-ratelimit-limit"] == "100"
    assert response.headers["x-ratelimit-remaining"] == "99"


@pytest.mark.asyncio
async def test_rate_limit_blocks_excess(client: AsyncClient, fake_redis: FakeRedis) -> None:
    """101st request in a window returns 429 with Retry-After header."""
    for _ in range(100):
        await client.get("/api/version")
    response = await client.get("/api/version")
    assert response.status_code == 429
    assert "retry-after" in response.headers
    assert response.headers["x-ratelimit-remaining"] == "0"
    assert "message" in response.json()


@pytest.mark.asyncio
async def test_health_exempt_from_rate_limit(client: AsyncClient, fake_redis: FakeRedis) -> None:
    """Health probes never touch the counters."""
    for _ in range(150):
        response = await client.get("/api/health")
        assert response.status_code == 200
    assert fake_redis.counters == {}


@pytest.mark.asyncio
async def test_rate_limit_counts_per_forwarded_ip(client: AsyncClient, fake_redis: FakeRedis) -> None:
    await client.get("/api/version", headers={"X-Forwarded-For": "10.0.0.1, 172.16.0.1"})
    await client.get("/api/version", headers={"X-Forwarded-For": "10.0.0.2"})
    assert len(fake_redis.counters) == 2
    assert any(key.startswith("ratelimit:10.0.0.1:") for key in fake_redis.counters)


@pytest.mark.asyncio
async def test_cors_preflight(client: AsyncClient) -> None:
    response = await client.options(
        "/api/health",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert response.headers.get("access-control-allow-origin") == "http://localhost:3000"


@pytest.mark.asyncio
async def test_unknown_route_returns_message(client: AsyncClient) -> None:
    response = await client.get("/api/nonexistent")
    assert response.status_code == 404
    assert "message" in response.json()


@pytest.mark.asyncio
async def test_validation_error_format(client: AsyncClient) -> None:
    """Schema failures are 400 with a message and per-field errors."""
    response = await client.post("/api/auth/register", json={"email": "not-an-email"})
    assert response.status_code == 400
    data = response.json()
    assert data["message"] == "Validation error"
    fields = {error["field"] for error in data["errors"]}
    assert {"name", "email", "password"} <= fields
