"""Tests for skill suggestions, popularity and stats."""

from httpx import AsyncClient


async def _skills(client: AsyncClient, user: dict, offered: list[str], wanted: list[str]) -> None:
    response = await client.put("/api/users/profile", headers=user["headers"], json={
        "skills_offered": [{"name": n} for n in offered],
        "skills_wanted": [{"name": n} for n in wanted],
    })
    assert response.status_code == 200, response.text


class TestSuggestions:
    async def test_short_query_returns_nothing(self, client: AsyncClient, alice: dict):
        await _skills(client, alice, ["Python"], [])
        response = await client.get("/api/skills/suggestions", params={"q": "p"})
        assert response.status_code == 200
        assert response.json() == {"suggestions": []}

    async def test_missing_query_returns_nothing(self, client: AsyncClient):
        response = await client.get("/api/skills/suggestions")
        assert response.json() == {"suggestions": []}

    async def test_distinct_matches_in_first_seen_order(self, client: AsyncClient, alice: dict, bob: dict):
        await _skills(client, alice, ["Python", "Photography"], ["Piano"])
        await _skills(client, bob, ["Python"], ["Photoshop"])
        response = await client.get("/api/skills/suggestions", params={"q": "PH"})
        assert response.json()["suggestions"] == ["Photography", "Photoshop"]

    async def test_capped_at_ten(self, client: AsyncClient, alice: dict):
        await _skills(client, alice, [f"Skill {i}" for i in range(15)], [])
        response = await client.get("/api/skills/suggestions", params={"q": "skill"})
        assert len(response.json()["suggestions"]) == 10


class TestPopular:
    async def test_ranked_by_count(self, client: AsyncClient, alice: dict, bob: dict):
        await _skills(client, alice, ["Python", "Cooking"], ["Guitar"])
        await _skills(client, bob, ["Guitar"], ["Python"])
        skills = (await client.get("/api/skills/popular")).json()["skills"]
        assert skills[:2] == [{"name": "Python", "count": 2}, {"name": "Guitar", "count": 2}]
        assert skills[2] == {"name": "Cooking", "count": 1}

    async def test_empty(self, client: AsyncClient):
        assert (await client.get("/api/skills/popular")).json() == {"skills": []}


class TestStats:
    async def test_stats(self, client: AsyncClient, alice: dict, bob: dict):
        await _skills(client, alice, ["Python", "Cooking"], ["Guitar"])
        await _skills(client, bob, ["Guitar"], [])
        stats = (await client.get("/api/skills/stats")).json()["stats"]
        assert stats == {
            "total_skills_offered": 3,
            "total_skills_wanted": 1,
            "unique_skills_count": 3,
            "average_skills_per_user": 2.0,
        }

    async def test_no_users(self, client: AsyncClient):
        stats = (await client.get("/api/skills/stats")).json()["stats"]
        assert stats["average_skills_per_user"] == 0
        assert stats["unique_skills_count"] == 0
