"""
Mock catalog clients.

These clients return realistic catalog data without calling any external API.
They are used when:
- the catalog backend is not reachable or not deployed yet
- we want to exercise the UI end-to-end without external dependencies

Important:
- Mock clients must follow the SAME interface as the real HTTP clients.
- Mock clients return data shaped according to src/catalog/contracts/*

Switching to real:
Set USE_MOCK_DATA=false (or ``use_mock_data: false`` in config/client_config.yml)
and src/client.py wires clients/real_http/* instead.
"""

from .fixture_repository import FixtureResourceRepository
from .fixtures import DEFAULT_FIXTURES_PATH, load_fixtures
from .offline_transport import OfflineTransport

__all__ = ["DEFAULT_FIXTURES_PATH", "FixtureResourceRepository", "OfflineTransport", "load_fixtures"]
