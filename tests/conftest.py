"""Pytest fixtures for catalog, session and cart tests."""

import pytest

from src.catalog.contracts.interfaces import TransportAdapter, TransportResult
from src.database.local_store import InMemoryStore
from src.session.events import EventBus
from src.utils.config_loader import MockLatencyConfig


class FakeTransport(TransportAdapter):
    """Replays canned results per (method, path) and records every call.

    A route value may be a payload (returned with status 200), a
    ``TransportResult``, or an exception instance to raise.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    async def request(self, method, path, body=None, headers=None):
        self.calls.append({"method": method, "path": path, "body": body, "headers": dict(headers or {})})
        route = self.routes.get((method, path))
        if isinstance(route, Exception):
            raise route
        if isinstance(route, TransportResult):
            return route
        return TransportResult(status=200, payload=route)


@pytest.fixture
def store():
    """In-memory durable store for tests."""
    return InMemoryStore()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def no_latency():
    return MockLatencyConfig.none()


@pytest.fixture
def fake_transport():
    return FakeTransport()
