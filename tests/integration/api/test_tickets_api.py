"""Integration tests for Tickets API."""

from uuid import uuid4

import pytest
from httpx import AsyncClient


async def _create_ticket(client: AsyncClient, **fields) -> dict:
    payload = {"title": "Ticket"} | fields
    response = await client.post("/api/v1/tickets", json=payload)
    assert response.status_code == 200, response.text
    return response.json()


async def _create_tag(client: AsyncClient, name: str) -> dict:
    response = await client.post("/api/v1/tags", json={"name": name})
    assert response.status_code == 200, response.text
    return response.json()


class TestCreateTicket:
    @pytest.mark.asyncio
    async def test_create_then_close_scenario(self, api_client: AsyncClient):
        created = await _create_ticket(api_client, title="T1", priority="high")

        assert created["status"] == "open"
        assert created["priority"] == "high"
        assert created["tags"] == []
        assert created["resolved_at"] is None

        response = await api_client.put(
            f"/api/v1/tickets/{created['id']}", json={"status": "closed"}
        )

        assert response.status_code == 200
        updated = response.json()
        assert updated["status"] == "closed"
        assert updated["title"] == "T1"
        assert updated["priority"] == "high"
        assert updated["resolved_at"] is not None

    @pytest.mark.asyncio
    async def test_defaults_to_medium(self, api_client: AsyncClient):
        created = await _create_ticket(api_client)

        assert created["priority"] == "medium"

    @pytest.mark.asyncio
    async def test_create_with_tags(self, api_client: AsyncClient):
        bug = await _create_tag(api_client, "bug")
        api = await _create_tag(api_client, "api")

        created = await _create_ticket(api_client, tag_ids=[bug["id"], api["id"], bug["id"]])

        assert [t["name"] for t in created["tags"]] == ["api", "bug"]

    @pytest.mark.asyncio
    async def test_create_with_unknown_tag_returns_404(self, api_client: AsyncClient):
        response = await api_client.post(
            "/api/v1/tickets", json={"title": "T1", "tag_ids": [str(uuid4())]}
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "TAG_NOT_FOUND"

        listing = await api_client.get("/api/v1/tickets")
        assert listing.json()["total"] == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"title": ""},
            {"title": "x" * 256},
            {"title": "T1", "priority": "HIGHEST"},
            {"title": "T1", "assignee_id": "bob"},
            {},
        ],
    )
    async def test_invalid_payload_returns_400(self, api_client: AsyncClient, payload):
        response = await api_client.post("/api/v1/tickets", json=payload)

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"


class TestGetTicket:
    @pytest.mark.asyncio
    async def test_includes_tags_and_comments(self, api_client: AsyncClient):
        tag = await _create_tag(api_client, "bug")
        ticket = await _create_ticket(api_client, tag_ids=[tag["id"]])
        await api_client.post(
            f"/api/v1/tickets/{ticket['id']}/comments", json={"content": "first"}
        )
        await api_client.post(
            f"/api/v1/tickets/{ticket['id']}/comments", json={"content": "second"}
        )

        response = await api_client.get(f"/api/v1/tickets/{ticket['id']}")

        assert response.status_code == 200
        body = response.json()
        assert [t["name"] for t in body["tags"]] == ["bug"]
        assert [c["content"] for c in body["comments"]] == ["first", "second"]

    @pytest.mark.asyncio
    async def test_missing_ticket_returns_404(self, api_client: AsyncClient):
        response = await api_client.get(f"/api/v1/tickets/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error_code"] == "TICKET_NOT_FOUND"


class TestUpdateTicket:
    @pytest.mark.asyncio
    async def test_empty_tag_ids_clears_tags(self, api_client: AsyncClient):
        tag = await _create_tag(api_client, "bug")
        ticket = await _create_ticket(api_client, tag_ids=[tag["id"]])

        response = await api_client.put(f"/api/v1/tickets/{ticket['id']}", json={"tag_ids": []})

        assert response.status_code == 200
        assert response.json()["tags"] == []

    @pytest.mark.asyncio
    async def test_omitted_tag_ids_keeps_tags(self, api_client: AsyncClient):
        tag = await _create_tag(api_client, "bug")
        ticket = await _create_ticket(api_client, tag_ids=[tag["id"]])

        response = await api_client.put(
            f"/api/v1/tickets/{ticket['id']}", json={"title": "renamed"}
        )

        assert response.json()["title"] == "renamed"
        assert [t["name"] for t in response.json()["tags"]] == ["bug"]

    @pytest.mark.asyncio
    async def test_null_description_clears_it(self, api_client: AsyncClient):
        ticket = await _create_ticket(api_client, description="details")

        response = await api_client.put(
            f"/api/v1/tickets/{ticket['id']}", json={"description": None}
        )

        assert response.json()["description"] is None

    @pytest.mark.asyncio
    async def test_reopen_clears_resolved_at(self, api_client: AsyncClient):
        ticket = await _create_ticket(api_client)
        await api_client.put(f"/api/v1/tickets/{ticket['id']}", json={"status": "resolved"})

        response = await api_client.put(
            f"/api/v1/tickets/{ticket['id']}", json={"status": "in_progress"}
        )

        assert response.json()["status"] == "in_progress"
        assert response.json()["resolved_at"] is None

    @pytest.mark.asyncio
    async def test_invalid_status_returns_400(self, api_client: AsyncClient):
        ticket = await _create_ticket(api_client)

        response = await api_client.put(
            f"/api/v1/tickets/{ticket['id']}", json={"status": "done"}
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_missing_ticket_returns_404(self, api_client: AsyncClient):
        response = await api_client.put(f"/api/v1/tickets/{uuid4()}", json={"title": "x"})

        assert response.status_code == 404


class TestDeleteTicket:
    @pytest.mark.asyncio
    async def test_delete_removes_ticket_comments_and_links(self, api_client: AsyncClient):
        tag = await _create_tag(api_client, "bug")
        ticket = await _create_ticket(api_client, tag_ids=[tag["id"]])
        await api_client.post(
            f"/api/v1/tickets/{ticket['id']}/comments", json={"content": "bye"}
        )

        response = await api_client.delete(f"/api/v1/tickets/{ticket['id']}")
        assert response.status_code == 204

        assert (await api_client.get(f"/api/v1/tickets/{ticket['id']}")).status_code == 404
        stats = (await api_client.get("/api/db/stats")).json()
        assert stats["comments_count"] == 0
        counted = (await api_client.get("/api/v1/tags", params={"with_counts": True})).json()
        assert counted["data"][0]["ticket_count"] == 0

    @pytest.mark.asyncio
    async def test_delete_missing_ticket_returns_404(self, api_client: AsyncClient):
        response = await api_client.delete(f"/api/v1/tickets/{uuid4()}")

        assert response.status_code == 404


class TestListTickets:
    @pytest.mark.asyncio
    async def test_status_filter(self, api_client: AsyncClient):
        keep = await _create_ticket(api_client, title="open one")
        closed = await _create_ticket(api_client, title="closed one")
        await api_client.put(f"/api/v1/tickets/{closed['id']}", json={"status": "closed"})

        response = await api_client.get("/api/v1/tickets", params={"status": "open"})

        body = response.json()
        assert response.status_code == 200
        assert body["total"] == 1
        assert body["data"][0]["id"] == keep["id"]

    @pytest.mark.asyncio
    async def test_status_and_priority_intersect(self, api_client: AsyncClient):
        await _create_ticket(api_client, title="a", priority="high")
        await _create_ticket(api_client, title="b", priority="low")
        c = await _create_ticket(api_client, title="c", priority="high")
        await api_client.put(f"/api/v1/tickets/{c['id']}", json={"status": "resolved"})

        response = await api_client.get(
            "/api/v1/tickets", params={"status": "open", "priority": "high"}
        )

        assert [t["title"] for t in response.json()["data"]] == ["a"]

    @pytest.mark.asyncio
    async def test_pagination_envelope(self, api_client: AsyncClient):
        for i in range(5):
            await _create_ticket(api_client, title=f"t{i}")

        response = await api_client.get(
            "/api/v1/tickets",
            params={"limit": 2, "offset": 1, "sort_by": "title", "sort_order": "ASC"},
        )

        body = response.json()
        assert body["total"] == 5
        assert body["limit"] == 2
        assert body["offset"] == 1
        assert [t["title"] for t in body["data"]] == ["t1", "t2"]

    @pytest.mark.asyncio
    async def test_limit_is_clamped(self, api_client: AsyncClient):
        response = await api_client.get("/api/v1/tickets", params={"limit": 1000})

        assert response.status_code == 200
        assert response.json()["limit"] == 100

    @pytest.mark.asyncio
    async def test_zero_limit_rejected(self, api_client: AsyncClient):
        response = await api_client.get("/api/v1/tickets", params={"limit": 0})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_negative_offset_rejected(self, api_client: AsyncClient):
        response = await api_client.get("/api/v1/tickets", params={"offset": -1})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_sort_field_rejected(self, api_client: AsyncClient):
        response = await api_client.get("/api/v1/tickets", params={"sort_by": "password"})

        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "INVALID_FILTER"
        assert "priority" in body["details"]["allowed"]

    @pytest.mark.asyncio
    async def test_unknown_status_rejected(self, api_client: AsyncClient):
        response = await api_client.get("/api/v1/tickets", params={"status": "pending"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_tag_filter_and_embedded_tags(self, api_client: AsyncClient):
        tag = await _create_tag(api_client, "bug")
        tagged = await _create_ticket(api_client, title="tagged", tag_ids=[tag["id"]])
        await _create_ticket(api_client, title="plain")

        response = await api_client.get("/api/v1/tickets", params={"tag_id": tag["id"]})

        body = response.json()
        assert body["total"] == 1
        assert body["data"][0]["id"] == tagged["id"]
        assert body["data"][0]["tags"][0]["name"] == "bug"

    @pytest.mark.asyncio
    async def test_search_filter(self, api_client: AsyncClient):
        await _create_ticket(api_client, title="Login fails")
        await _create_ticket(api_client, title="Other", description="cannot LOGIN")
        await _create_ticket(api_client, title="Unrelated")

        response = await api_client.get("/api/v1/tickets", params={"search": "login"})

        assert response.json()["total"] == 2


class TestSearchStatsBulk:
    @pytest.mark.asyncio
    async def test_search_endpoint(self, api_client: AsyncClient):
        await _create_ticket(api_client, title="Payment timeout")
        await _create_ticket(api_client, title="Other")

        response = await api_client.get("/api/v1/tickets/search", params={"q": "PAYMENT"})

        assert response.status_code == 200
        assert [t["title"] for t in response.json()["data"]] == ["Payment timeout"]

    @pytest.mark.asyncio
    async def test_stats_endpoint(self, api_client: AsyncClient):
        await _create_ticket(api_client, priority="urgent")
        await _create_ticket(api_client, priority="urgent")

        response = await api_client.get("/api/v1/tickets/stats")

        body = response.json()
        assert body["total_by_status"] == {
            "open": 2,
            "in_progress": 0,
            "resolved": 0,
            "closed": 0,
        }
        assert body["total_by_priority"]["urgent"] == 2
        assert body["total_by_priority"]["low"] == 0

    @pytest.mark.asyncio
    async def test_bulk_status_update(self, api_client: AsyncClient):
        first = await _create_ticket(api_client, title="a")
        second = await _create_ticket(api_client, title="b")
        missing = str(uuid4())

        response = await api_client.post(
            "/api/v1/tickets/bulk-status",
            json={"ticket_ids": [first["id"], second["id"], missing], "status": "resolved"},
        )

        body = response.json()
        assert response.status_code == 200
        assert body["updated_count"] == 2
        assert body["total_count"] == 3
        assert len(body["errors"]) == 1

        fetched = (await api_client.get(f"/api/v1/tickets/{first['id']}")).json()
        assert fetched["status"] == "resolved"
