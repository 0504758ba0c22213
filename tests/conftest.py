"""Shared test fixtures.

API tests run once per store backend: ``json`` against a temp data directory
and ``sql`` against a temp SQLite file.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from skillswap.auth.jwt import reset_keys
from skillswap.config import Settings, get_settings
from skillswap.main import create_app
from skillswap.store import RecordStore, close_store, init_store

TEST_PASSWORD = "pw123456"

RegisterFn = Callable[..., Awaitable[dict[str, Any]]]


def _configure(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, backend: str) -> Settings:
    monkeypatch.setenv("SKILLSWAP_STORE_BACKEND", backend)
    monkeypatch.setenv("SKILLSWAP_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("SKILLSWAP_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'skillswap.db'}")
    monkeypatch.setenv("SKILLSWAP_UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.setenv("SKILLSWAP_JWT_SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")
    monkeypatch.setenv("SKILLSWAP_JWT_ALGORITHM", "HS256")
    monkeypatch.setenv("SKILLSWAP_LOG_FORMAT", "console")
    for name in ("SKILLSWAP_REDIS_URL", "SKILLSWAP_ADMIN_EMAIL", "SKILLSWAP_ADMIN_PASSWORD"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    reset_keys()
    return get_settings()


@pytest.fixture(params=["json", "sql"])
def store_backend(request: pytest.FixtureRequest) -> str:
    """Backend under test."""
    return request.param


@pytest.fixture
def test_settings(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, store_backend: str
) -> Generator[Settings, None, None]:
    """Settings pointed at a per-test data directory and database."""
    yield _configure(monkeypatch, tmp_path, store_backend)
    get_settings.cache_clear()
    reset_keys()


@pytest_asyncio.fixture
async def store(test_settings: Settings) -> AsyncGenerator[RecordStore, None]:
    """An initialized, empty record store."""
    record_store = await init_store(test_settings)
    yield record_store
    await close_store()


@pytest_asyncio.fixture
async def client(store: RecordStore) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to a fresh app and store."""
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def register(client: AsyncClient) -> RegisterFn:
    """Register a user through the API.

    Returns a dict with ``id``, ``token``, ``headers`` and the ``user`` body.
    """

    async def _register(name: str = "Alice", email: str | None = None, password: str = TEST_PASSWORD) -> dict[str, Any]:
        email = email or f"{name.lower().replace(' ', '.')}@example.com"
        response = await client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
        assert response.status_code == 201, response.text
        data = response.json()
        return {
            "id": data["user"]["id"],
            "email": email,
            "password": password,
            "token": data["token"],
            "headers": {"Authorization": f"Bearer {data['token']}"},
            "user": data["user"],
        }

    return _register


@pytest.fixture
def make_admin(store: RecordStore) -> Callable[[str], Awaitable[None]]:
    """Promote a user to admin directly in the store."""

    async def _make_admin(user_id: str) -> None:
        await store.users.update(user_id, {"is_admin": True})

    return _make_admin


@pytest_asyncio.fixture
async def alice(register: RegisterFn) -> dict[str, Any]:
    return await register("Alice")


@pytest_asyncio.fixture
async def bob(register: RegisterFn) -> dict[str, Any]:
    return await register("Bob")


@pytest_asyncio.fixture
async def admin(register: RegisterFn, make_admin: Callable[[str], Awaitable[None]]) -> dict[str, Any]:
    user = await register("Admin User", email="admin@example.com")
    await make_admin(user["id"])
    return user


SWAP_TERMS = {
    "skill_offered": {"name": "Python", "description": "Backend development"},
    "skill_requested": {"name": "Guitar", "description": "Beginner chords"},
}


@pytest.fixture
def create_swap(client: AsyncClient) -> Callable[..., Awaitable[dict[str, Any]]]:
    """Create a swap from ``requester`` to ``provider`` and return its JSON."""

    async def _create(requester: dict[str, Any], provider: dict[str, Any], **overrides: Any) -> dict[str, Any]:
        body = {"provider_id": provider["id"], **SWAP_TERMS, **overrides}
        response = await client.post("/api/swaps", json=body, headers=requester["headers"])
        assert response.status_code == 201, response.text
        return response.json()["swap"]

    return _create


@pytest.fixture
def set_status(client: AsyncClient) -> Callable[..., Awaitable[Any]]:
    """PUT a status change as ``actor``; returns the raw response."""

    async def _set(actor: dict[str, Any], swap_id: str, status: str) -> Any:
        return await client.put(f"/api/swaps/{swap_id}/status", json={"status": status}, headers=actor["headers"])

    return _set
