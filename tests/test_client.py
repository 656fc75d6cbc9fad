import json

import pytest

from src.catalog.clients.mocks.fixture_repository import FixtureResourceRepository
from src.catalog.clients.mocks.offline_transport import OfflineTransport
from src.catalog.clients.real_http.resource_repository import HttpResourceRepository
from src.catalog.contracts.entities import EntityKind
from src.client import build_client, build_store, build_transport
from src.database.file_store import JsonFileStore
from src.database.local_store import InMemoryStore
from src.error_handler import TransportError
from src.session.session_manager import SessionState
from src.utils.config_loader import ClientConfig, MockLatencyConfig, StorageConfig


def _mock_config(**overrides):
    return ClientConfig(use_mock_data=True, mock_latency=MockLatencyConfig.none(), **overrides)


def test_mock_mode_wires_fixture_repositories(store):
    client = build_client(_mock_config(), store=store)

    assert all(isinstance(client.repository(kind), FixtureResourceRepository) for kind in EntityKind)
    assert client.repository("talleres") is client.workshops


def test_live_mode_wires_http_repositories(store, fake_transport):
    client = build_client(ClientConfig(use_mock_data=False, base_url="http://api.test"), store=store, transport=fake_transport)

    assert all(isinstance(client.repository(kind), HttpResourceRepository) for kind in EntityKind)


@pytest.mark.asyncio
async def test_envelope_shape_is_identical_across_modes(store, fake_transport):
    mock_client = build_client(_mock_config(), store=store)
    mock_listing = await mock_client.services.list_all()

    fake_transport.routes[("GET", "/services")] = {
        "ok": True,
        "data": [s.to_payload() for s in mock_listing.data],
        "msg": "Servicios",
    }
    live_client = build_client(ClientConfig(use_mock_data=False, base_url="http://api.test"), store=store, transport=fake_transport)
    live_listing = await live_client.services.list_all()

    assert type(live_listing) is type(mock_listing)
    assert live_listing.data == mock_listing.data


@pytest.mark.asyncio
async def test_live_repositories_use_the_session_token(store, fake_transport):
    fake_transport.routes[("POST", "/auth/login")] = {"ok": True, "token": "fresh"}
    fake_transport.routes[("DELETE", "/products/p1")] = {"ok": True, "msg": "deleted"}
    client = build_client(ClientConfig(use_mock_data=False, base_url="http://api.test"), store=store, transport=fake_transport)

    await client.products.delete_by_id("p1")
    await client.session.login({"email": "a@b.c", "password": "x"})
    await client.products.delete_by_id("p1")

    assert fake_transport.calls[0]["headers"] == {}
    assert fake_transport.calls[2]["headers"] == {"x-token": "fresh"}


def test_session_and_cart_share_store_under_distinct_keys(store):
    store.set("token", "persisted")
    store.set("shoppingCart", json.dumps([
        {"entityId": "prod1001", "name": "Esmalte", "unitPrice": 18000, "requestedCount": 2, "maxAvailable": 12}
    ]))

    client = build_client(_mock_config(), store=store)

    assert client.session.state is SessionState.UNVERIFIED
    assert client.cart.item_count == 2
    assert store.keys() == ["shoppingCart", "token"]


@pytest.mark.asyncio
async def test_mock_mode_without_backend_logs_in_as_false(store):
    client = build_client(_mock_config(), store=store)

    assert await client.session.login({"email": "x", "password": "wrong"}) is False
    assert store.get("token") is None


def test_custom_fixtures_path(tmp_path, store):
    path = tmp_path / "seed.json"
    path.write_text(json.dumps({"products": [{"_id": "prodX", "name": "Solo", "price": 1}]}), encoding="utf-8")

    client = build_client(_mock_config(fixtures_path=str(path)), store=store)

    assert client.products._items[0].id == "prodX"
    assert client.services._items == []


def test_build_transport_and_store_choices(tmp_path):
    assert isinstance(build_transport(_mock_config()), OfflineTransport)
    with pytest.raises(ValueError):
        build_transport(ClientConfig(use_mock_data=False))
    assert isinstance(build_store(StorageConfig(backend="memory")), InMemoryStore)
    assert isinstance(build_store(StorageConfig(backend="file", path=str(tmp_path / "s.json"))), JsonFileStore)


def test_describe_error_produces_inline_notice(store):
    client = build_client(_mock_config(), store=store)

    notice = client.describe_error(TransportError("offline"), context={"op": "list"})

    assert notice["ok"] is False
    assert "could not be reached" in notice["msg"]
    assert notice["metadata"]["context"] == {"op": "list"}
