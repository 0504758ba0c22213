"""Tests for browsing, searching and viewing other users."""

from httpx import AsyncClient

from skillswap.store import RecordStore


async def _set_profile(client: AsyncClient, user: dict, **fields) -> None:
    response = await client.put("/api/users/profile", headers=user["headers"], json=fields)
    assert response.status_code == 200, response.text


class TestBrowse:
    async def test_lists_public_users_with_pagination(self, client: AsyncClient, alice: dict, bob: dict):
        response = await client.get("/api/users")
        assert response.status_code == 200
        data = response.json()
        assert {u["id"] for u in data["users"]} == {alice["id"], bob["id"]}
        assert data["pagination"] == {
            "current_page": 1,
            "total_pages": 1,
            "total_users": 2,
            "has_next": False,
            "has_prev": False,
        }

    async def test_public_view_hides_email(self, client: AsyncClient, alice: dict):
        user = (await client.get("/api/users")).json()["users"][0]
        assert "email" not in user
        assert "password_hash" not in user

    async def test_excludes_private_and_banned(
        self, client: AsyncClient, store: RecordStore, register, alice: dict, bob: dict
    ):
        carol = await register("Carol")
        await _set_profile(client, bob, is_public=False)
        await store.users.update(carol["id"], {"is_banned": True})
        ids = [u["id"] for u in (await client.get("/api/users")).json()["users"]]
        assert ids == [alice["id"]]

    async def test_filter_by_skill_and_location(self, client: AsyncClient, alice: dict, bob: dict):
        await _set_profile(client, alice, location="New York", skills_offered=[{"name": "Python"}])
        await _set_profile(client, bob, location="Boston", skills_wanted=[{"name": "Python Testing"}])

        by_skill = (await client.get("/api/users", params={"skill": "pyth"})).json()["users"]
        assert {u["id"] for u in by_skill} == {alice["id"], bob["id"]}

        by_location = (await client.get("/api/users", params={"location": "york"})).json()["users"]
        assert [u["id"] for u in by_location] == [alice["id"]]

    async def test_search_matches_name_or_skill(self, client: AsyncClient, alice: dict, bob: dict):
        await _set_profile(client, bob, skills_offered=[{"name": "Alchemy"}])
        found = (await client.get("/api/users", params={"search": "al"})).json()["users"]
        assert {u["id"] for u in found} == {alice["id"], bob["id"]}
        found = (await client.get("/api/users", params={"search": "bob"})).json()["users"]
        assert [u["id"] for u in found] == [bob["id"]]

    async def test_sorted_by_rating(self, client: AsyncClient, store: RecordStore, alice: dict, bob: dict):
        await store.users.update(alice["id"], {"rating": {"average": 3.5, "count": 2}})
        await store.users.update(bob["id"], {"rating": {"average": 4.8, "count": 5}})
        ids = [u["id"] for u in (await client.get("/api/users")).json()["users"]]
        assert ids == [bob["id"], alice["id"]]

    async def test_pagination_slices(self, client: AsyncClient, register):
        for name in ("Ann", "Ben", "Cid"):
            await register(name)
        data = (await client.get("/api/users", params={"page": 2, "limit": 2})).json()
        assert len(data["users"]) == 1
        assert data["pagination"]["total_pages"] == 2
        assert data["pagination"]["has_prev"] is True
        assert data["pagination"]["has_next"] is False


class TestSkillSearch:
    async def test_search_offered_skills(self, client: AsyncClient, alice: dict, bob: dict):
        await _set_profile(client, alice, skills_offered=[{"name": "Guitar"}])
        await _set_profile(client, bob, skills_wanted=[{"name": "Guitar"}])
        response = await client.get("/api/users/search/skills", params={"skill": "guit"})
        assert response.status_code == 200
        assert [u["id"] for u in response.json()["users"]] == [alice["id"]]

    async def test_missing_parameter(self, client: AsyncClient):
        response = await client.get("/api/users/search/skills")
        assert response.status_code == 400


class TestGetUser:
    async def test_public_profile(self, client: AsyncClient, alice: dict, bob: dict):
        response = await client.get(f"/api/users/{alice['id']}", headers=bob["headers"])
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["name"] == "Alice"
        assert "email" not in user

    async def test_anonymous_can_view_public_profile(self, client: AsyncClient, alice: dict):
        response = await client.get(f"/api/users/{alice['id']}")
        assert response.status_code == 200

    async def test_owner_sees_email(self, client: AsyncClient, alice: dict):
        response = await client.get(f"/api/users/{alice['id']}", headers=alice["headers"])
        assert response.json()["user"]["email"] == alice["email"]

    async def test_private_profile_hidden(self, client: AsyncClient, alice: dict, bob: dict):
        await _set_profile(client, alice, is_public=False)
        assert (await client.get(f"/api/users/{alice['id']}", headers=bob["headers"])).status_code == 403
        assert (await client.get(f"/api/users/{alice['id']}")).status_code == 403
        assert (await client.get(f"/api/users/{alice['id']}", headers=alice["headers"])).status_code == 200

    async def test_admin_sees_private_profile(self, client: AsyncClient, alice: dict, admin: dict):
        await _set_profile(client, alice, is_public=False)
        response = await client.get(f"/api/users/{alice['id']}", headers=admin["headers"])
        assert response.status_code == 200
        assert response.json()["user"]["email"] == alice["email"]

    async def test_detail_schema_is_typed(self, client: AsyncClient):
        schema = (await client.get("/openapi.json")).json()
        ok = schema["paths"]["/api/users/{user_id}"]["get"]["responses"]["200"]
        assert ok["content"]["application/json"]["schema"]["$ref"].endswith("/UserDetailResponse")
        user_field = schema["components"]["schemas"]["UserDetailResponse"]["properties"]["user"]
        refs = {option["$ref"].rsplit("/", 1)[-1] for option in user_field["anyOf"]}
        assert refs == {"UserResponse", "PublicUserResponse"}

    async def test_not_found(self, client: AsyncClient):
        response = await client.get("/api/users/doesnotexist")
        assert response.status_code == 404
