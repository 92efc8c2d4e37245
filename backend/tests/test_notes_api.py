"""
Notes API Backend - HTTP Endpoint Tests
========================================

What:  End-to-end tests of the /api/notes and /health endpoints.
How:   HTTPX AsyncClient over ASGITransport against an app whose lifespan
       opened a temporary SQLite database.
"""

from datetime import datetime

import pytest


async def _create(client, title="A", content="B"):
    response = await client.post("/api/notes", json={"title": title, "content": content})
    assert response.status_code == 201, response.text
    return response.json()


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestNoteLifecycle:
    @pytest.mark.asyncio
    async def test_create_patch_delete_scenario(self, test_client):
        created = await _create(test_client, "A", "B")
        assert created["id"] == 1
        assert created["title"] == "A"
        assert created["content"] == "B"
        assert created["created_at"] == created["updated_at"]
        assert set(created) == {"id", "title", "content", "created_at", "updated_at"}

        response = await test_client.patch("/api/notes/1", json={"title": "C"})
        assert response.status_code == 200
        patched = response.json()
        assert patched["id"] == 1
        assert patched["title"] == "C"
        assert patched["content"] == "B"
        assert patched["created_at"] == created["created_at"]
        assert _ts(patched["updated_at"]) > _ts(created["updated_at"])

        response = await test_client.delete("/api/notes/1")
        assert response.status_code == 204
        assert response.content == b""

        response = await test_client.get("/api/notes/1")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_create_returns_trimmed_values(self, test_client):
        created = await _create(test_client, "  Padded title ", "\n padded body \n")
        assert created["title"] == "Padded title"
        assert created["content"] == "padded body"

        fetched = (await test_client.get(f"/api/notes/{created['id']}")).json()
        assert fetched == created

    @pytest.mark.asyncio
    async def test_delete_twice_returns_404(self, test_client):
        created = await _create(test_client)

        assert (await test_client.delete(f"/api/notes/{created['id']}")).status_code == 204
        assert (await test_client.delete(f"/api/notes/{created['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_unknown_id(self, test_client):
        assert (await test_client.delete("/api/notes/999")).status_code == 404

    @pytest.mark.asyncio
    async def test_patch_unknown_id(self, test_client):
        response = await test_client.patch("/api/notes/999", json={"title": "x"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_ids_beyond_integer_range_are_not_found(self, test_client):
        huge = 10**20

        assert (await test_client.get(f"/api/notes/{huge}")).status_code == 404
        assert (await test_client.delete(f"/api/notes/{huge}")).status_code == 404
        response = await test_client.patch(f"/api/notes/{huge}", json={"title": "x"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_patch_validation_runs_before_existence_check(self, test_client):
        response = await test_client.patch("/api/notes/999", json={"title": ""})
        assert response.status_code == 400


class TestValidationErrors:
    @pytest.mark.asyncio
    async def test_create_reports_every_field(self, test_client):
        response = await test_client.post("/api/notes", json={"title": "", "content": "   "})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert set(body["details"]["field_errors"]) == {"title", "content"}

    @pytest.mark.asyncio
    async def test_create_title_too_long(self, test_client):
        response = await test_client.post(
            "/api/notes", json={"title": "x" * 201, "content": "ok"}
        )
        assert response.status_code == 400
        assert list(response.json()["details"]["field_errors"]) == ["title"]

    @pytest.mark.asyncio
    async def test_missing_body_is_a_form_error(self, test_client):
        response = await test_client.post("/api/notes")

        assert response.status_code == 400
        details = response.json()["details"]
        assert details["form_errors"]

    @pytest.mark.asyncio
    async def test_malformed_json(self, test_client):
        response = await test_client.post(
            "/api/notes",
            content=b'{"title": "A",',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["details"]["field_errors"] == {}

    @pytest.mark.asyncio
    async def test_patch_null_is_rejected(self, test_client):
        created = await _create(test_client)

        response = await test_client.patch(f"/api/notes/{created['id']}", json={"content": None})

        assert response.status_code == 400
        assert list(response.json()["details"]["field_errors"]) == ["content"]

    @pytest.mark.asyncio
    async def test_non_integer_id(self, test_client):
        response = await test_client.get("/api/notes/abc")
        assert response.status_code == 400
        assert "note_id" in response.json()["details"]["field_errors"]

    @pytest.mark.asyncio
    async def test_failed_validation_writes_nothing(self, test_client):
        await test_client.post("/api/notes", json={"title": "", "content": ""})

        assert (await test_client.get("/api/notes")).json() == []


class TestListNotes:
    @pytest.mark.asyncio
    async def test_empty(self, test_client):
        response = await test_client.get("/api/notes")
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_default_page_size_and_order(self, test_client):
        for i in range(12):
            await _create(test_client, f"note {i}", "x")

        rows = (await test_client.get("/api/notes")).json()

        assert len(rows) == 10
        assert rows[0]["title"] == "note 11"

    @pytest.mark.asyncio
    async def test_limit_clamp_boundaries(self, test_client):
        for i in range(105):
            await _create(test_client, f"note {i}", "x")

        async def count(limit):
            response = await test_client.get("/api/notes", params={"limit": limit})
            assert response.status_code == 200
            return len(response.json())

        assert await count(1000) == 100
        assert await count(101) == 100
        assert await count(100) == 100
        assert await count(99) == 99
        assert await count(1) == 1
        assert await count(0) == 0
        assert await count(-5) == 0

    @pytest.mark.asyncio
    async def test_negative_offset_is_clamped(self, test_client):
        for i in range(3):
            await _create(test_client, f"note {i}", "x")

        clamped = (await test_client.get("/api/notes", params={"offset": -10})).json()
        first_page = (await test_client.get("/api/notes")).json()

        assert clamped == first_page

    @pytest.mark.asyncio
    async def test_bogus_sort_matches_created_at(self, test_client):
        first = await _create(test_client, "first", "x")
        await _create(test_client, "second", "x")
        await test_client.patch(f"/api/notes/{first['id']}", json={"content": "edited"})

        bogus = (await test_client.get("/api/notes", params={"sort": "bogus"})).json()
        created = (await test_client.get("/api/notes", params={"sort": "created_at"})).json()
        updated = (await test_client.get("/api/notes", params={"sort": "updated_at"})).json()

        assert bogus == created
        assert [r["title"] for r in created] == ["second", "first"]
        assert [r["title"] for r in updated] == ["first", "second"]

    @pytest.mark.asyncio
    async def test_order_is_case_insensitive(self, test_client):
        await _create(test_client, "first", "x")
        await _create(test_client, "second", "x")

        for order in ("asc", "ASC", "Asc"):
            rows = (await test_client.get("/api/notes", params={"order": order})).json()
            assert [r["title"] for r in rows] == ["first", "second"]

    @pytest.mark.asyncio
    async def test_search(self, test_client):
        await _create(test_client, "Groceries", "Milk and eggs")
        await _create(test_client, "Work", "Quarterly report")

        rows = (await test_client.get("/api/notes", params={"q": "  MILK "})).json()

        assert [r["title"] for r in rows] == ["Groceries"]

    @pytest.mark.asyncio
    async def test_huge_offset_returns_empty_page(self, test_client):
        await _create(test_client)

        response = await test_client.get("/api/notes", params={"offset": 10**20})

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive_beyond_ascii(self, test_client):
        await _create(test_client, "Добро пожаловать", "x")

        rows = (await test_client.get("/api/notes", params={"q": "ДОБРО"})).json()

        assert [r["title"] for r in rows] == ["Добро пожаловать"]

    @pytest.mark.asyncio
    async def test_non_integer_limit(self, test_client):
        response = await test_client.get("/api/notes", params={"limit": "lots"})
        assert response.status_code == 400
        assert "limit" in response.json()["details"]["field_errors"]


class TestRequestId:
    @pytest.mark.asyncio
    async def test_generated_when_absent(self, test_client):
        response = await test_client.get("/api/notes")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_client_value_is_echoed(self, test_client):
        response = await test_client.get("/api/notes/404", headers={"X-Request-ID": "trace-123"})
        assert response.headers["X-Request-ID"] == "trace-123"
        assert response.json()["request_id"] == "trace-123"
