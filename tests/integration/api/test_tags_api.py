"""Integration tests for Tags API."""

from uuid import uuid4

import pytest
from httpx import AsyncClient


class TestTagsAPI:
    """Integration tests for Tag CRUD."""

    @pytest.mark.asyncio
    async def test_create_tag(self, api_client: AsyncClient):
        """Test POST /api/v1/tags."""
        response = await api_client.post(
            "/api/v1/tags",
            json={"name": "work", "color": "#10b981"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "work"
        assert data["color"] == "#10b981"
        assert "id" in data

    @pytest.mark.asyncio
    async def test_create_tag_default_color(self, api_client: AsyncClient):
        """Test creating tag with default color."""
        response = await api_client.post("/api/v1/tags", json={"name": "default-color-tag"})

        assert response.status_code == 200
        assert response.json()["color"] == "#3B82F6"

    @pytest.mark.asyncio
    async def test_empty_update_leaves_tag_untouched(self, api_client: AsyncClient):
        tag = (await api_client.post("/api/v1/tags", json={"name": "steady"})).json()

        response = await api_client.put(f"/api/v1/tags/{tag['id']}", json={})

        assert response.status_code == 200
        assert response.json() == tag

    @pytest.mark.asyncio
    async def test_create_duplicate_tag(self, api_client: AsyncClient):
        """Test creating tag with duplicate name returns 409."""
        await api_client.post("/api/v1/tags", json={"name": "duplicate-test"})
        response = await api_client.post("/api/v1/tags", json={"name": "duplicate-test"})

        assert response.status_code == 409
        assert response.json()["error_code"] == "DUPLICATE_TAG"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"name": ""},
            {"name": "x" * 51},
            {"name": "ok", "color": "blue"},
            {"name": "ok", "color": "#12345"},
        ],
    )
    async def test_create_invalid_tag_returns_400(self, api_client: AsyncClient, payload):
        response = await api_client.post("/api/v1/tags", json=payload)

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_list_tags(self, api_client: AsyncClient):
        """Test GET /api/v1/tags."""
        await api_client.post("/api/v1/tags", json={"name": "list-tag-2"})
        await api_client.post("/api/v1/tags", json={"name": "list-tag-1"})

        response = await api_client.get("/api/v1/tags")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert [t["name"] for t in body["data"]] == ["list-tag-1", "list-tag-2"]
        assert "ticket_count" not in body["data"][0]

    @pytest.mark.asyncio
    async def test_list_tags_with_counts(self, api_client: AsyncClient):
        tag = (await api_client.post("/api/v1/tags", json={"name": "counted"})).json()
        await api_client.post(
            "/api/v1/tickets", json={"title": "T1", "tag_ids": [tag["id"]]}
        )

        response = await api_client.get("/api/v1/tags", params={"with_counts": "true"})

        assert response.json()["data"][0]["ticket_count"] == 1

    @pytest.mark.asyncio
    async def test_get_tag(self, api_client: AsyncClient):
        tag = (await api_client.post("/api/v1/tags", json={"name": "fetch-me"})).json()

        response = await api_client.get(f"/api/v1/tags/{tag['id']}")

        assert response.status_code == 200
        assert response.json()["name"] == "fetch-me"

    @pytest.mark.asyncio
    async def test_get_missing_tag_returns_404(self, api_client: AsyncClient):
        response = await api_client.get(f"/api/v1/tags/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error_code"] == "TAG_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_get_tag_with_malformed_id_returns_400(self, api_client: AsyncClient):
        response = await api_client.get("/api/v1/tags/not-a-uuid")

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_tag_name(self, api_client: AsyncClient):
        """Test PUT /api/v1/tags/{id}."""
        tag = (await api_client.post("/api/v1/tags", json={"name": "old-name"})).json()

        response = await api_client.put(f"/api/v1/tags/{tag['id']}", json={"name": "new-name"})

        assert response.status_code == 200
        assert response.json()["name"] == "new-name"
        assert response.json()["color"] == "#3B82F6"

    @pytest.mark.asyncio
    async def test_update_tag_to_taken_name_returns_409(self, api_client: AsyncClient):
        await api_client.post("/api/v1/tags", json={"name": "taken"})
        tag = (await api_client.post("/api/v1/tags", json={"name": "mine"})).json()

        response = await api_client.put(f"/api/v1/tags/{tag['id']}", json={"name": "taken"})

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_delete_tag(self, api_client: AsyncClient):
        """Test DELETE /api/v1/tags/{id}."""
        tag = (await api_client.post("/api/v1/tags", json={"name": "to-delete"})).json()

        response = await api_client.delete(f"/api/v1/tags/{tag['id']}")
        assert response.status_code == 204

        missing = await api_client.get(f"/api/v1/tags/{tag['id']}")
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_missing_tag_returns_404(self, api_client: AsyncClient):
        response = await api_client.delete(f"/api/v1/tags/{uuid4()}")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_search_tags(self, api_client: AsyncClient):
        await api_client.post("/api/v1/tags", json={"name": "Backend"})
        await api_client.post("/api/v1/tags", json={"name": "ops"})

        response = await api_client.get("/api/v1/tags/search", params={"q": "back"})

        assert response.status_code == 200
        assert [t["name"] for t in response.json()["data"]] == ["Backend"]

    @pytest.mark.asyncio
    async def test_popular_and_stats(self, api_client: AsyncClient):
        used = (await api_client.post("/api/v1/tags", json={"name": "used"})).json()
        await api_client.post("/api/v1/tags", json={"name": "unused"})
        await api_client.post("/api/v1/tickets", json={"title": "T1", "tag_ids": [used["id"]]})

        popular = await api_client.get("/api/v1/tags/popular")
        stats = await api_client.get("/api/v1/tags/stats")

        assert [t["name"] for t in popular.json()["data"]] == ["used"]
        assert stats.json()["total_tags"] == 2
        assert stats.json()["unused_tags"] == 1
        assert stats.json()["total_usage"] == 1
