"""Admin reports."""

from datetime import timedelta

from httpx import AsyncClient

from skillswap.store import RecordStore
from skillswap.store.records import utcnow


class TestReports:
    async def test_users_report(self, client: AsyncClient, store: RecordStore, alice: dict, bob: dict, admin: dict):
        await client.put("/api/users/profile", headers=alice["headers"], json={
            "skills_offered": [{"name": "Python"}, {"name": "Go"}],
            "is_public": False,
        })
        await store.users.update(bob["id"], {"is_banned": True})

        response = await client.get("/api/admin/reports/users", headers=admin["headers"])
        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "users"
        assert data["generated_at"]
        assert data["report"] == {
            "total_users": 3,
            "public_profiles": 2,
            "banned_users": 1,
            "avg_skills_offered": 0.7,
            "avg_skills_wanted": 0.0,
        }

    async def test_swaps_report(self, client: AsyncClient, create_swap, set_status, alice: dict, bob: dict, admin: dict):
        first = await create_swap(alice, bob)
        await create_swap(bob, alice)
        await set_status(bob, first["id"], "accepted")

        response = await client.get("/api/admin/reports/swaps", headers=admin["headers"])
        assert response.json()["report"] == [
            {"status": "accepted", "count": 1},
            {"status": "pending", "count": 1},
        ]

    async def test_activity_report(self, client: AsyncClient, create_swap, alice: dict, bob: dict, admin: dict):
        await create_swap(alice, bob)
        await create_swap(bob, alice)
        response = await client.get("/api/admin/reports/activity", headers=admin["headers"])
        assert response.json()["report"] == [{"date": utcnow().date().isoformat(), "swaps_created": 2}]

    async def test_date_range_needs_both_ends(self, client: AsyncClient, create_swap, alice: dict, bob: dict, admin: dict):
        await create_swap(alice, bob)
        future = (utcnow() + timedelta(days=30)).date().isoformat()

        only_start = await client.get(
            "/api/admin/reports/activity", params={"start_date": future}, headers=admin["headers"]
        )
        assert len(only_start.json()["report"]) == 1

        both = await client.get(
            "/api/admin/reports/activity",
            params={"start_date": future, "end_date": future},
            headers=admin["headers"],
        )
        assert both.json()["report"] == []

    async def test_date_range_includes_end_day(self, client: AsyncClient, create_swap, alice: dict, bob: dict, admin: dict):
        await create_swap(alice, bob)
        today = utcnow().date().isoformat()
        response = await client.get(
            "/api/admin/reports/swaps",
            params={"start_date": today, "end_date": today},
            headers=admin["headers"],
        )
        assert response.json()["report"] == [{"status": "pending", "count": 1}]

    async def test_unknown_type(self, client: AsyncClient, admin: dict):
        response = await client.get("/api/admin/reports/revenue", headers=admin["headers"])
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid report type"

    async def test_bad_date(self, client: AsyncClient, admin: dict):
        response = await client.get(
            "/api/admin/reports/users",
            params={"start_date": "yesterday", "end_date": "today"},
            headers=admin["headers"],
        )
        assert response.status_code == 400
