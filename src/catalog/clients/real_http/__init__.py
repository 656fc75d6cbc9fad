"""
Real HTTP catalog clients.

These clients talk to the catalog backend over HTTP:
- HttpxTransport: the single place that performs network I/O
- HttpResourceRepository: CRUD for services, products and workshops

Important:
- Must implement the same interfaces as the mock clients
- Must return data shaped according to src/catalog/contracts/*

Switching:
The selection of mock vs real clients happens in src/client.py only.
"""

from .resource_repository import HttpResourceRepository
from .transport import HttpxTransport

__all__ = ["HttpResourceRepository", "HttpxTransport"]
