"""
Offline Transport (Mock).

Stands in for the HTTP transport when no backend URL is configured. Every
request fails with a network-style ``TransportError`` so the session manager
degrades exactly as it would against an unreachable server.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from src.catalog.contracts.interfaces import TransportAdapter, TransportResult
from src.error_handler import TransportError

logger = logging.getLogger(__name__)


class OfflineTransport(TransportAdapter):
    async def request(
        self,
        method: str,
        path: str,
        body: Optional[Any] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> TransportResult:
        logger.debug("[MOCK offline] Refusing %s %s, no backend configured", method, path)
        raise TransportError(f"No backend configured for {method.upper()} {path}")
