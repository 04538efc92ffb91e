"""
Notes API: HTTP Endpoint Tests
==============================

What:  End-to-end tests of the /notes resource through the FastAPI app.
How:   HTTPX AsyncClient over ASGITransport; the app is served by a
       NoteService over SQLNoteRepository on a temporary SQLite file.

What we test:
    ✅ Create → get, list, update, delete happy paths with exact bodies
    ✅ 404 bodies for missing notes and for unknown routes / methods
    ✅ 400 bodies for rule violations, malformed JSON and schema mismatches
    ✅ 500 body for storage and unexpected failures never leaks the cause
    ✅ Trailing slashes are not redirected
    ✅ Access log line for successful and failed requests
    ✅ camelCase wire format, UUID v4 ids, ISO-8601 UTC timestamps
"""

import logging
import re

import pytest
from httpx import ASGITransport, AsyncClient
from unittest.mock import AsyncMock

from notes_api.exceptions import StorageError
from notes_api.main import create_app, describe_validation_errors
from notes_api.repositories.base import NoteRepository
from notes_api.services.note_service import NoteService

UUID_V4 = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")
ISO_UTC = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{6}Z$")


async def create(client, title="Note 1", content="This is note #1."):
    response = await client.post("/notes", json={"title": title, "content": content})
    assert response.status_code == 201, response.text
    return response.json()["note"]


class TestCreateAndGet:

    @pytest.mark.asyncio
    async def test_create_then_get(self, test_client):
        response = await test_client.post(
            "/notes", json={"title": "Note 1", "content": "This is note #1."}
        )

        assert response.status_code == 201
        note = response.json()["note"]
        assert note["title"] == "Note 1"
        assert note["content"] == "This is note #1."
        assert UUID_V4.match(note["id"])
        assert ISO_UTC.match(note["createdAt"])
        assert set(note) == {"id", "title", "content", "createdAt"}

        response = await test_client.get(f"/notes/{note['id']}")
        assert response.status_code == 200
        assert response.json() == {"note": note}

    @pytest.mark.asyncio
    async def test_client_supplied_id_is_ignored(self, test_client):
        response = await test_client.post(
            "/notes",
            json={"id": "mine", "createdAt": "1999-01-01T00:00:00Z", "title": "T", "content": "C"},
        )

        note = response.json()["note"]
        assert note["id"] != "mine"
        assert note["createdAt"] != "1999-01-01T00:00:00Z"

    @pytest.mark.asyncio
    async def test_get_missing_note(self, test_client):
        response = await test_client.get("/notes/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"message": "note not found"}

    @pytest.mark.asyncio
    async def test_response_carries_request_id(self, test_client):
        response = await test_client.get("/notes", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"


class TestList:

    @pytest.mark.asyncio
    async def test_list_empty(self, test_client):
        response = await test_client.get("/notes")

        assert response.status_code == 200
        assert response.json() == {"notes": []}

    @pytest.mark.asyncio
    async def test_list_after_two_creates(self, test_client):
        first = await create(test_client, title="First")
        second = await create(test_client, title="Second")

        response = await test_client.get("/notes")

        assert response.status_code == 200
        notes = response.json()["notes"]
        assert len(notes) == 2
        assert {n["id"] for n in notes} == {first["id"], second["id"]}
        assert {n["title"] for n in notes} == {"First", "Second"}


class TestUpdate:

    @pytest.mark.asyncio
    async def test_update_existing(self, test_client):
        original = await create(test_client)

        response = await test_client.put(
            f"/notes/{original['id']}", json={"title": "Updated", "content": "..."}
        )

        assert response.status_code == 200
        updated = response.json()["note"]
        assert updated["title"] == "Updated"
        assert updated["content"] == "..."
        assert updated["id"] == original["id"]
        assert updated["createdAt"] == original["createdAt"]

        response = await test_client.get(f"/notes/{original['id']}")
        assert response.json() == {"note": updated}

    @pytest.mark.asyncio
    async def test_update_cannot_change_id_or_created_at(self, test_client):
        original = await create(test_client)

        response = await test_client.put(
            f"/notes/{original['id']}",
            json={"id": "other", "createdAt": "1999-01-01T00:00:00Z", "title": "T", "content": "C"},
        )

        updated = response.json()["note"]
        assert updated["id"] == original["id"]
        assert updated["createdAt"] == original["createdAt"]

    @pytest.mark.asyncio
    async def test_update_missing(self, test_client):
        response = await test_client.put("/notes/does-not-exist", json={"title": "T", "content": "C"})

        assert response.status_code == 404
        assert response.json() == {"message": "note not found"}
        assert (await test_client.get("/notes")).json() == {"notes": []}

    @pytest.mark.asyncio
    async def test_update_empty_title_leaves_note_unchanged(self, test_client):
        original = await create(test_client)

        response = await test_client.put(
            f"/notes/{original['id']}", json={"title": "", "content": "changed"}
        )

        assert response.status_code == 400
        assert response.json() == {"message": "body not valid", "error": "title must not be empty"}
        assert (await test_client.get(f"/notes/{original['id']}")).json() == {"note": original}


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_existing(self, test_client):
        note = await create(test_client)

        response = await test_client.delete(f"/notes/{note['id']}")

        assert response.status_code == 204
        assert response.content == b""

        response = await test_client.get(f"/notes/{note['id']}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_missing(self, test_client):
        response = await test_client.delete("/notes/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"message": "note not found"}


class TestBadInput:

    @pytest.mark.asyncio
    async def test_empty_title_is_rejected_and_nothing_created(self, test_client):
        before = len((await test_client.get("/notes")).json()["notes"])

        response = await test_client.post("/notes", json={"title": "", "content": "x"})

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "body not valid"
        assert body["error"]
        assert len((await test_client.get("/notes")).json()["notes"]) == before

    @pytest.mark.asyncio
    async def test_whitespace_title_is_accepted(self, test_client):
        note = await create(test_client, title="   ")

        assert note["title"] == "   "

    @pytest.mark.asyncio
    async def test_malformed_json(self, test_client):
        response = await test_client.post(
            "/notes", content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["message"] == "body not valid"
        assert response.json()["error"]

    @pytest.mark.asyncio
    async def test_missing_field(self, test_client):
        response = await test_client.post("/notes", json={"title": "only title"})

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "body not valid"
        assert "content" in body["error"]

    @pytest.mark.asyncio
    async def test_wrong_field_type(self, test_client):
        response = await test_client.put("/notes/some-id", json={"title": 5, "content": "C"})

        assert response.status_code == 400
        assert "title" in response.json()["error"]

    def test_describe_validation_errors(self):
        errors = [
            {"loc": ("body", "title"), "msg": "Field required"},
            {"loc": (), "msg": "bad"},
        ]
        assert describe_validation_errors(errors) == "body.title: Field required; bad"


class TestUnknownRoutes:

    @pytest.mark.asyncio
    async def test_unknown_path(self, test_client):
        response = await test_client.get("/unknown")

        assert response.status_code == 404
        assert response.json() == {"message": "not found"}

    @pytest.mark.asyncio
    async def test_unsupported_method_on_known_path(self, test_client):
        response = await test_client.patch("/notes/some-id", json={"title": "T"})

        assert response.status_code == 404
        assert response.json() == {"message": "not found"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method,path", [("GET", "/notes/"), ("POST", "/notes/"), ("GET", "/unknown/")])
    async def test_trailing_slash_is_not_redirected(self, test_client, method, path):
        response = await test_client.request(method, path, json={"title": "T", "content": "C"})

        assert response.status_code == 404
        assert response.json() == {"message": "not found"}


class TestStorageFailure:

    @pytest.mark.asyncio
    async def test_storage_error_maps_to_internal_error(self):
        repository = AsyncMock(spec=NoteRepository)
        repository.list_notes.side_effect = StorageError(
            message="Could not list notes", context={"operation": "list notes"}
        )
        app = create_app(note_service=NoteService(repository))

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/notes")

        assert response.status_code == 500
        assert response.json() == {"message": "internal error"}

    @pytest.mark.asyncio
    async def test_storage_error_on_create_maps_to_internal_error(self):
        repository = AsyncMock(spec=NoteRepository)
        repository.create_note.side_effect = StorageError(message="Could not create note")
        app = create_app(note_service=NoteService(repository))

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.post("/notes", json={"title": "T", "content": "C"})

        assert response.status_code == 500
        assert response.json() == {"message": "internal error"}


class TestUnexpectedFailure:

    @pytest.mark.asyncio
    async def test_unclassified_error_is_logged_and_maps_to_internal_error(self, caplog):
        repository = AsyncMock(spec=NoteRepository)
        repository.list_notes.side_effect = RuntimeError("disk on fire")
        app = create_app(note_service=NoteService(repository))
        caplog.set_level(logging.INFO, logger="notes_api.access")

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/notes", headers={"X-Request-ID": "req-500"})

        assert response.status_code == 500
        assert response.json() == {"message": "internal error"}
        assert response.headers["X-Request-ID"] == "req-500"

        records = [r for r in caplog.records if r.name == "notes_api.access"]
        cause = [r for r in records if r.exc_info]
        assert len(cause) == 1
        assert isinstance(cause[0].exc_info[1], RuntimeError)
        access = [r for r in records if getattr(r, "status", None) == 500]
        assert len(access) == 1
        assert access[0].levelno == logging.ERROR
        assert access[0].method == "GET"
        assert access[0].path == "/notes"
        assert access[0].duration_ms >= 0

    @pytest.mark.asyncio
    async def test_successful_request_is_logged(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="notes_api.access")

        await test_client.get("/notes")

        access = [r for r in caplog.records if r.name == "notes_api.access"]
        assert len(access) == 1
        assert access[0].levelno == logging.INFO
        assert access[0].status == 200
        assert "GET /notes 200" in access[0].getMessage()
