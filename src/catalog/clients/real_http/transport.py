"""
httpx-backed Transport Adapter.

Purpose:
- The ONLY place where the client opens HTTP connections to the catalog backend.
- Decodes JSON bodies and maps every failure (network, timeout, status >= 400)
  to ``TransportError`` so repositories and the session manager can decide
  which failures are expected outcomes.

Timeouts are owned here; nothing above this layer imposes its own.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from src.catalog.contracts.interfaces import TransportAdapter, TransportResult
from src.error_handler import TransportError

logger = logging.getLogger(__name__)


class HttpxTransport(TransportAdapter):
    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 15.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not base_url:
            raise ValueError("CATALOG_API_URL is not configured.")
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def request(
        self,
        method: str,
        path: str,
        body: Optional[Any] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> TransportResult:
        url = f"{self.base_url}/{path.lstrip('/')}"
        send_headers: Dict[str, str] = {"Accept": "application/json"}
        send_headers.update(headers or {})
        method = method.upper()

        logger.debug("%s %s", method, url)
        try:
            if self._client is not None:
                response = await self._client.request(method, url, json=body, headers=send_headers)
            else:
                async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                    response = await client.request(method, url, json=body, headers=send_headers)
        except httpx.TimeoutException as exc:
            logger.error("Timed out after %.1fs: %s %s", self.timeout_seconds, method, url)
            raise TransportError(f"Request timed out: {method} {path}") from exc
        except httpx.RequestError as exc:
            logger.error("Request error for %s %s: %s", method, url, exc)
            raise TransportError(f"Could not reach backend: {exc}") from exc

        payload = self._decode(response)
        if response.status_code >= 400:
            logger.error("HTTP %s from %s %s", response.status_code, method, url)
            raise TransportError(
                f"HTTP {response.status_code} for {method} {path}",
                status=response.status_code,
                payload=payload if isinstance(payload, dict) else {"body": payload},
            )
        return TransportResult(status=response.status_code, payload=payload, headers=dict(response.headers))

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except (json.JSONDecodeError, ValueError):
            return response.text
