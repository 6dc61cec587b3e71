"""
QuickNotes Backend — HTTP Endpoint Tests
==========================================

What:  End-to-end tests of every route through the FastAPI app.
How:   HTTPX AsyncClient over ASGITransport (no server process). The app's
       NoteService runs on the ticking clock from conftest.py.

What we test:
    ✅ Status codes and bodies for each CRUD operation
    ✅ The shared error envelope for 400 / 404 / 405 / 500
    ✅ Pagination clamping and keyword search over HTTP
    ✅ X-Request-ID generation and echo
"""

import logging
from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient

from quicknotes.main import app
from quicknotes.store import get_note_store


def parse_ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


async def create_note(client, title="Title", content="Body"):
    response = await client.post("/notes", json={"title": title, "content": content})
    assert response.status_code == 201
    return response.json()


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/health")

        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/notes", headers={"X-Request-ID": "trace-123"})

        assert response.headers["X-Request-ID"] == "trace-123"


class TestCreateNote:

    @pytest.mark.asyncio
    async def test_create_returns_201(self, test_client):
        response = await test_client.post(
            "/notes", json={"title": "  Groceries ", "content": "Milk, eggs"}
        )

        assert response.status_code == 201
        body = response.json()
        assert set(body) == {"id", "title", "content", "createdAt", "updatedAt"}
        assert body["id"]
        assert body["title"] == "Groceries"
        assert body["createdAt"] == body["updatedAt"]

    @pytest.mark.asyncio
    async def test_create_empty_title(self, test_client):
        response = await test_client.post("/notes", json={"title": "", "content": "Body"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["message"] == "Invalid request data"
        assert error["details"][0]["path"] == ["title"]

    @pytest.mark.asyncio
    async def test_create_content_too_long(self, test_client):
        response = await test_client.post(
            "/notes", json={"title": "Title", "content": "x" * 10_001}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_create_without_body(self, test_client):
        response = await test_client.post("/notes")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_create_invalid_json(self, test_client):
        response = await test_client.post(
            "/notes",
            content=b'{"title": "broken"',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert isinstance(error["details"], list)


class TestGetNote:

    @pytest.mark.asyncio
    async def test_get_existing(self, test_client):
        created = await create_note(test_client)

        response = await test_client.get(f"/notes/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    async def test_get_missing(self, test_client):
        response = await test_client.get("/notes/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {
            "error": {"code": "NOTE_NOT_FOUND", "message": "Note not found", "details": None}
        }


class TestReplaceNote:

    @pytest.mark.asyncio
    async def test_put_replaces(self, test_client):
        created = await create_note(test_client, title="Old", content="Old body")

        response = await test_client.put(
            f"/notes/{created['id']}", json={"title": "New", "content": "New body"}
        )

        assert response.status_code == 200
        body = response.json()
        assert (body["title"], body["content"]) == ("New", "New body")
        assert body["createdAt"] == created["createdAt"]
        assert parse_ts(body["updatedAt"]) > parse_ts(created["updatedAt"])

    @pytest.mark.asyncio
    async def test_put_requires_both_fields(self, test_client):
        created = await create_note(test_client)

        response = await test_client.put(f"/notes/{created['id']}", json={"title": "New"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_put_missing(self, test_client):
        response = await test_client.put("/notes/nope", json={"title": "a", "content": "b"})

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOTE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_put_missing_with_invalid_body_is_404(self, test_client):
        response = await test_client.put("/notes/nope", json={})

        assert response.status_code == 404


class TestPatchNote:

    @pytest.mark.asyncio
    async def test_patch_content_only(self, test_client):
        created = await create_note(test_client, title="Keep", content="Old")

        response = await test_client.patch(f"/notes/{created['id']}", json={"content": "New"})

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Keep"
        assert body["content"] == "New"
        assert body["createdAt"] == created["createdAt"]
        assert parse_ts(body["updatedAt"]) > parse_ts(created["updatedAt"])

    @pytest.mark.asyncio
    async def test_patch_empty_body(self, test_client):
        created = await create_note(test_client)

        response = await test_client.patch(f"/notes/{created['id']}", json={})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_patch_missing(self, test_client):
        response = await test_client.patch("/notes/nope", json={"title": "x"})

        assert response.status_code == 404


class TestDeleteNote:

    @pytest.mark.asyncio
    async def test_delete_then_get(self, test_client):
        created = await create_note(test_client)

        response = await test_client.delete(f"/notes/{created['id']}")
        assert response.status_code == 200
        assert response.json() == {"deleted": True}

        response = await test_client.get(f"/notes/{created['id']}")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOTE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_delete_missing(self, test_client):
        response = await test_client.delete("/notes/nope")

        assert response.status_code == 404


class TestListNotes:

    @pytest.mark.asyncio
    async def test_list_empty(self, test_client):
        response = await test_client.get("/notes")

        assert response.status_code == 200
        assert response.json() == {
            "items": [],
            "meta": {"page": 1, "limit": 10, "total": 0, "totalPages": 1},
        }

    @pytest.mark.asyncio
    async def test_page_clamped_when_out_of_range(self, test_client):
        for i in range(3):
            await create_note(test_client, title=f"Note {i}")

        response = await test_client.get("/notes", params={"limit": 10, "page": 99})

        assert response.status_code == 200
        body = response.json()
        assert body["meta"] == {"page": 1, "limit": 10, "total": 3, "totalPages": 1}
        assert [n["title"] for n in body["items"]] == ["Note 2", "Note 1", "Note 0"]

    @pytest.mark.asyncio
    async def test_search_case_insensitive(self, test_client):
        await create_note(test_client, title="Project ABC", content="kickoff")
        await create_note(test_client, title="Groceries", content="milk")
        await create_note(test_client, title="Notes", content="remember the aBc list")

        response = await test_client.get("/notes", params={"q": "abc"})

        body = response.json()
        assert [n["title"] for n in body["items"]] == ["Notes", "Project ABC"]
        assert body["meta"]["total"] == 2

    @pytest.mark.asyncio
    async def test_pagination_limit(self, test_client):
        for i in range(5):
            await create_note(test_client, title=f"Note {i}")

        response = await test_client.get("/notes", params={"limit": 2, "page": 2})

        body = response.json()
        assert [n["title"] for n in body["items"]] == ["Note 2", "Note 1"]
        assert body["meta"] == {"page": 2, "limit": 2, "total": 5, "totalPages": 3}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params", [{"limit": 0}, {"limit": 101}, {"page": 0}, {"page": "x"}])
    async def test_invalid_query(self, test_client, params):
        response = await test_client.get("/notes", params=params)

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"][0]["path"] == [next(iter(params))]


class TestErrorEnvelope:

    @pytest.mark.asyncio
    async def test_unknown_route(self, test_client):
        response = await test_client.get("/nowhere")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_method_not_allowed(self, test_client):
        response = await test_client.delete("/notes")

        assert response.status_code == 405
        error = response.json()["error"]
        assert error["code"] == "METHOD_NOT_ALLOWED"
        assert error["details"] is None

    @pytest.mark.asyncio
    async def test_access_log_levels(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="quicknotes.access")

        await create_note(test_client)
        await test_client.get("/notes/missing")

        access = [(r.status, r.levelno) for r in caplog.records if r.name == "quicknotes.access"]
        assert access == [(201, logging.INFO), (404, logging.WARNING)]

    @pytest.mark.asyncio
    async def test_unexpected_error_is_generic_500(self, caplog):
        class BrokenStore:
            def list_all(self):
                raise RuntimeError("secret internal detail")

        caplog.set_level(logging.INFO, logger="quicknotes.access")
        app.dependency_overrides[get_note_store] = lambda: BrokenStore()
        try:
            transport = ASGITransport(app=app, raise_app_exceptions=False)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.get("/notes", headers={"X-Request-ID": "trace-500"})
        finally:
            app.dependency_overrides.clear()

        assert response.headers["X-Request-ID"] == "trace-500"

        access = [r for r in caplog.records if r.name == "quicknotes.access"]
        assert len(access) == 1
        assert access[0].levelno == logging.ERROR
        assert access[0].status == 500
        assert access[0].request_id == "trace-500"
        assert access[0].path == "/notes"

        assert response.status_code == 500
        assert response.json() == {
            "error": {
                "code": "INTERNAL_SERVER_ERROR",
                "message": "Something went wrong",
                "details": None,
            }
        }
        assert "secret" not in response.text
