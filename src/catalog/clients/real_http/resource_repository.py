"""
Real HTTP Resource Repository.

Used for every entity kind when the mock flag is off. Endpoints are
``/{kind}`` and ``/{kind}/{id}``; the server is the id authority.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from src.catalog.contracts.entities import (
    ENTITY_MODELS,
    CatalogEntity,
    Draft,
    EntityKind,
    RepositoryResponse,
    as_payload,
)
from src.catalog.contracts.interfaces import ResourceRepository, TransportAdapter
from src.catalog.policy.response_wrappers import normalize_envelope, unwrap_entity
from src.error_handler import TransportError

logger = logging.getLogger(__name__)


class HttpResourceRepository(ResourceRepository[CatalogEntity]):
    def __init__(
        self,
        kind: EntityKind,
        transport: TransportAdapter,
        token_provider: Callable[[], str],
        session_header: str = "x-token",
    ) -> None:
        self.kind = kind
        self.model_type = ENTITY_MODELS[kind]
        self._transport = transport
        self._token_provider = token_provider
        self._session_header = session_header

    def _headers(self) -> Dict[str, str]:
        token = self._token_provider() or ""
        return {self._session_header: token} if token else {}

    def _item_path(self, entity_id: str) -> str:
        return f"/{self.kind.value}/{entity_id}"

    def _not_found(self, entity_id: str) -> RepositoryResponse:
        logger.warning("%s %s not found on backend", self.kind.label, entity_id)
        return RepositoryResponse[self.model_type].failure(f"{self.kind.label} not found")

    async def list_all(self) -> RepositoryResponse:
        result = await self._transport.request("GET", f"/{self.kind.value}", headers=self._headers())
        return normalize_envelope(result.payload, self.model_type, fallback_msg=f"{self.kind.label}s retrieved")

    async def get_by_id(self, entity_id: str) -> Optional[CatalogEntity]:
        try:
            result = await self._transport.request("GET", self._item_path(entity_id), headers=self._headers())
        except TransportError as exc:
            if exc.is_not_found:
                return None
            raise
        return unwrap_entity(result.payload, self.model_type)

    async def create(self, draft: Draft) -> RepositoryResponse:
        result = await self._transport.request(
            "POST", f"/{self.kind.value}", body=as_payload(draft), headers=self._headers()
        )
        response = normalize_envelope(result.payload, self.model_type, fallback_msg=f"{self.kind.label} created")
        logger.info("%s created on backend ok=%s", self.kind.label, response.ok)
        return response

    async def delete_by_id(self, entity_id: str) -> RepositoryResponse:
        try:
            result = await self._transport.request("DELETE", self._item_path(entity_id), headers=self._headers())
        except TransportError as exc:
            if exc.is_not_found:
                return self._not_found(entity_id)
            raise
        response = normalize_envelope(result.payload, self.model_type, fallback_msg=f"{self.kind.label} deleted")
        logger.info("%s %s deleted on backend ok=%s", self.kind.label, entity_id, response.ok)
        return response

    async def update(self, entity_id: str, patch: Draft) -> RepositoryResponse:
        try:
            result = await self._transport.request(
                "PATCH", self._item_path(entity_id), body=as_payload(patch), headers=self._headers()
            )
        except TransportError as exc:
            if exc.is_not_found:
                return self._not_found(entity_id)
            raise
        response = normalize_envelope(result.payload, self.model_type, fallback_msg=f"{self.kind.label} updated")
        logger.info("%s %s updated on backend ok=%s", self.kind.label, entity_id, response.ok)
        return response
