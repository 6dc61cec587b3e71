"""
QuickNotes Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Overview:
    Function-scoped (created fresh for each test):
    ├── reset_note_store (autouse): empties the process-wide store
    ├── clock: Deterministic clock that advances one second per reading
    ├── store: Isolated NoteStore for unit tests
    ├── service: NoteService wired to `clock`
    └── test_client: HTTPX AsyncClient talking to the FastAPI app
"""

import os
from datetime import datetime, timedelta, timezone

# Settings are read at import time, so the environment must be set first
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("CORS_ORIGINS", "http://localhost:3000")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from quicknotes.services.note_service import NoteService, note_service
from quicknotes.store import NoteStore, note_store


class TickingClock:
    """
    Returns a strictly increasing UTC time on every call.

    Each reading is `step` later than the previous one, so notes created one
    after another never share a timestamp.
    """

    def __init__(self, start: datetime, step: timedelta = timedelta(seconds=1)):
        self.current = start
        self.step = step
        self.calls = 0

    def __call__(self) -> datetime:
        now = self.current
        self.current += self.step
        self.calls += 1
        return now


START_TIME = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def reset_note_store():
    note_store.clear()
    yield
    note_store.clear()


@pytest.fixture
def clock():
    return TickingClock(START_TIME)


@pytest.fixture
def store():
    return NoteStore()


@pytest.fixture
def service(clock):
    counter = iter(range(1, 10_000))
    return NoteService(clock=clock, id_factory=lambda: f"note-{next(counter)}")


@pytest_asyncio.fixture
async def test_client(clock, monkeypatch):
    """
    Provides an async HTTP test client for endpoint testing.

    The app's NoteService singleton is switched to the ticking clock for the
    duration of the test.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from quicknotes.main import app

    monkeypatch.setattr(note_service, "_clock", clock)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
