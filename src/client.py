"""
Catalog client - wiring entry point

Builds the repositories, session manager, cart and event bus from one
ClientConfig. This is the only place that decides between mock and real
implementations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from src.catalog.clients.mocks import FixtureResourceRepository, OfflineTransport, load_fixtures
from src.catalog.clients.real_http import HttpResourceRepository, HttpxTransport
from src.catalog.contracts.entities import EntityKind
from src.catalog.contracts.interfaces import DurableStore, ResourceRepository, TransportAdapter
from src.database.file_store import JsonFileStore
from src.database.local_store import InMemoryStore
from src.error_handler import ErrorHandler
from src.session.cart import CartAggregator
from src.session.events import EventBus
from src.session.session_manager import SessionManager
from src.utils.config_loader import ClientConfig, StorageConfig, load_client_config

logger = logging.getLogger(__name__)


@dataclass
class CatalogClient:
    config: ClientConfig
    services: ResourceRepository
    products: ResourceRepository
    workshops: ResourceRepository
    session: SessionManager
    cart: CartAggregator
    bus: EventBus
    error_handler: ErrorHandler = field(default_factory=ErrorHandler)

    def repository(self, kind: EntityKind) -> ResourceRepository:
        return {
            EntityKind.SERVICES: self.services,
            EntityKind.PRODUCTS: self.products,
            EntityKind.WORKSHOPS: self.workshops,
        }[EntityKind(kind)]

    def describe_error(self, exc: Exception, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Map an exception to the ``{ok, msg}`` notice the UI renders inline."""
        return self.error_handler.handle_exception(exc, context)


def build_store(storage: StorageConfig) -> DurableStore:
    if storage.backend == "redis":
        from src.database.redis_store import RedisStore

        return RedisStore(url=storage.redis_url)
    if storage.backend == "file":
        return JsonFileStore(Path(storage.path))
    return InMemoryStore()


def build_transport(config: ClientConfig) -> TransportAdapter:
    if config.base_url:
        return HttpxTransport(config.base_url, timeout_seconds=config.timeout_seconds)
    if config.use_mock_data:
        logger.info("No backend URL configured; auth requests will fail as offline")
        return OfflineTransport()
    raise ValueError("CATALOG_API_URL is not configured.")


def build_client(
    config: Optional[ClientConfig] = None,
    *,
    transport: Optional[TransportAdapter] = None,
    store: Optional[DurableStore] = None,
    fixtures: Optional[Dict[EntityKind, List[Dict[str, Any]]]] = None,
) -> CatalogClient:
    config = config or load_client_config()
    transport = transport or build_transport(config)
    store = store or build_store(config.storage)

    session = SessionManager(
        transport,
        store,
        token_key=config.storage.token_key,
        session_header=config.session_header,
    )

    repositories: Dict[EntityKind, ResourceRepository] = {}
    if config.use_mock_data:
        if fixtures is None:
            fixtures_path = Path(config.fixtures_path) if config.fixtures_path else None
            fixtures = load_fixtures(fixtures_path)
        for kind in EntityKind:
            repositories[kind] = FixtureResourceRepository(
                kind, seed=fixtures.get(kind, []), latency=config.mock_latency
            )
    else:
        for kind in EntityKind:
            repositories[kind] = HttpResourceRepository(
                kind,
                transport,
                token_provider=lambda: session.token,
                session_header=config.session_header,
            )

    bus = EventBus()
    cart = CartAggregator(store, bus, key=config.storage.cart_key)

    logger.info("Catalog client ready (mode=%s)", "mock" if config.use_mock_data else "live")
    return CatalogClient(
        config=config,
        services=repositories[EntityKind.SERVICES],
        products=repositories[EntityKind.PRODUCTS],
        workshops=repositories[EntityKind.WORKSHOPS],
        session=session,
        cart=cart,
        bus=bus,
    )
