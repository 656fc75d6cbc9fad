"""
Catalog layer.
This package contains all code used to read and write catalog entities
(services, products, workshops) against the backend or local fixtures.

Key rule:
- Presentation code MUST NOT call the backend directly.
- It calls the repositories built by src/client.py.
- We use MOCK repositories while the backend is unavailable and swap to
  REAL_HTTP repositories when it is.

Switching implementations:
- The selection of mock vs real repositories happens in ONE place (src/client.py).
"""

from .contracts.entities import (
    AuthResponse,
    CatalogEntity,
    Credentials,
    EntityKind,
    Product,
    RepositoryResponse,
    Service,
    UserProfile,
    Workshop,
)
from .contracts.interfaces import DurableStore, ResourceRepository, TransportAdapter, TransportResult
from .contracts.search import CatalogFilter, filter_entities

__all__ = [
    # entities
    "AuthResponse", "CatalogEntity", "Credentials", "EntityKind", "Product",
    "RepositoryResponse", "Service", "UserProfile", "Workshop",
    # interfaces
    "DurableStore", "ResourceRepository", "TransportAdapter", "TransportResult",
    # search
    "CatalogFilter", "filter_entities",
]
