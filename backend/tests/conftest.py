"""
Notes API: Test Configuration (conftest.py)
===========================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── memory_repository: Empty InMemoryNoteRepository
    ├── note_service: NoteService over memory_repository
    ├── sample_new_note: Fully populated NewNote
    ├── sql_engine: Async engine on a fresh SQLite file with the `note` table
    ├── sql_repository: SQLNoteRepository over sql_engine
    └── test_client: HTTPX AsyncClient talking to an app served by sql_repository
"""

import os
import tempfile

# Override settings BEFORE any notes_api import: the engine and settings
# singletons are created at import time.
os.environ["DATABASE_URL"] = (
    "sqlite+aiosqlite:///" + os.path.join(tempfile.mkdtemp(prefix="notes_api_test_"), "notes.db")
)
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from notes_api.database import Base, create_engine_from_settings, create_session_factory
from notes_api.models.note import NewNote
from notes_api.repositories.memory import InMemoryNoteRepository
from notes_api.repositories.sql import SQLNoteRepository
from notes_api.services.note_service import NoteService


@pytest.fixture
def memory_repository():
    return InMemoryNoteRepository()


@pytest.fixture
def note_service(memory_repository):
    return NoteService(memory_repository)


@pytest.fixture
def sample_new_note():
    """A NewNote as the HTTP layer would build it."""
    return NewNote(
        id="14322988-32fe-447c-ac38-06fb6c699b4a",
        title="Note 1",
        content="This is note #1.",
        created_at="2021-01-01T00:00:00.000000Z",
    )


@pytest_asyncio.fixture
async def sql_engine(tmp_path):
    """
    Async engine on a throwaway SQLite file.

    The schema is created here because migrations are an operator step the
    service itself never runs.
    """
    engine = create_engine_from_settings(f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def sql_repository(sql_engine):
    return SQLNoteRepository(create_session_factory(sql_engine), retry_max_wait=0.01)


@pytest_asyncio.fixture
async def test_client(sql_repository):
    """
    HTTPX AsyncClient routed straight into the FastAPI app (no server).

    The service is injected into create_app, so the lifespan wiring is not
    needed for tests.
    """
    from notes_api.main import create_app

    app = create_app(note_service=NoteService(sql_repository))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
