"""
Global pytest fixtures for the Relink test suite.

Responsibilities:
    - Provide isolated in-memory Storage and a LinkManager wired to it
    - Provide a deterministic clock so `createdAt` ordering is predictable
    - Provide TestClients built through the app factory: anonymous and
      logged-in admin

Why an app factory?
    Using `create_app(storage=...)` gives each test fresh in-memory state,
    eliminating cross-test flakiness.
"""

import itertools

import pytest
from fastapi.testclient import TestClient

from main import create_app
from relink_platform.manager.link_manager import LinkManager
from relink_platform.storage.storage import Storage

ADMIN_PASSWORD = "correct-horse"


class SequenceIds:
    """ID strategy that hands out a fixed sequence (for collision tests)."""

    def __init__(self, *ids):
        self._ids = iter(ids)

    def generate(self) -> str:
        return next(self._ids)


@pytest.fixture
def clock():
    """Epoch-ms clock that ticks by one on every call: 1, 2, 3, ..."""
    counter = itertools.count(1)
    return lambda: next(counter)


@pytest.fixture
def storage() -> Storage:
    return Storage()


@pytest.fixture
def manager(storage: Storage, clock) -> LinkManager:
    return LinkManager(storage=storage, clock=clock)


@pytest.fixture
def app(storage: Storage, clock):
    return create_app(storage=storage, clock=clock, no_token=False)


@pytest.fixture
def client(app) -> TestClient:
    """Anonymous client on a fresh app."""
    return TestClient(app)


@pytest.fixture
def admin_client(app) -> TestClient:
    """Client that has set up the admin password and carries a session token."""
    c = TestClient(app)
    assert c.post("/api/setup", json={"password": ADMIN_PASSWORD}).status_code == 200
    token = c.post("/api/auth", json={"password": ADMIN_PASSWORD}).json()["token"]
    c.headers.update({"Authorization": f"Bearer {token}"})
    return c
