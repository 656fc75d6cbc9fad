"""
Mock Resource Repository (fixture-backed).

Purpose:
- Serves one entity kind from an in-memory fixture collection so the UI keeps
  working when the catalog backend is unavailable.
- Does NOT make network calls.
- Waits a configurable latency before answering to emulate the network.

Behavior guidelines:
- Each instance owns a deep copy of its seed list; instances never share state.
- Mutations finish before the simulated latency starts, so a later operation
  always sees the result of an earlier one.
- Callers receive copies, never the stored objects.

Swap:
Replaced by clients/real_http/resource_repository.py when the mock flag is off.
"""

from __future__ import annotations

import asyncio
import copy
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from src.catalog.contracts.entities import (
    ENTITY_MODELS,
    CatalogEntity,
    Draft,
    EntityKind,
    RepositoryResponse,
    as_payload,
)
from src.catalog.contracts.interfaces import ResourceRepository
from src.utils.config_loader import MockLatencyConfig

logger = logging.getLogger(__name__)

_ID_FIELDS = ("_id", "id")


class FixtureResourceRepository(ResourceRepository[CatalogEntity]):
    def __init__(
        self,
        kind: EntityKind,
        seed: Iterable[Dict[str, Any]] = (),
        latency: Optional[MockLatencyConfig] = None,
    ) -> None:
        self.kind = kind
        self.model_type = ENTITY_MODELS[kind]
        self._latency = latency or MockLatencyConfig()
        self._items: List[CatalogEntity] = [
            self.model_type.model_validate(copy.deepcopy(item)) for item in seed
        ]
        self._last_stamp = 0
        logger.info("[MOCK %s] Repository initialised with %d fixtures", kind.value, len(self._items))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _simulate_latency(self, operation: str) -> None:
        delay_ms = getattr(self._latency, f"{operation}_ms")
        if delay_ms:
            await asyncio.sleep(delay_ms / 1000)

    def _envelope(self):
        return RepositoryResponse[self.model_type]

    def _index_of(self, entity_id: str) -> int:
        for index, item in enumerate(self._items):
            if item.id == entity_id:
                return index
        return -1

    def _new_id(self) -> str:
        stamp = max(int(time.time() * 1000), self._last_stamp + 1)
        taken = {item.id for item in self._items}
        while f"{self.kind.id_prefix}{stamp}" in taken:
            stamp += 1
        self._last_stamp = stamp
        return f"{self.kind.id_prefix}{stamp}"

    @staticmethod
    def _without_id(payload: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in payload.items() if k not in _ID_FIELDS}

    def _to_wire_keys(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        # stored entities are dumped by alias, so patch keys must use the same names
        fields = self.model_type.model_fields
        return {
            (fields[key].alias or key) if key in fields else key: value
            for key, value in payload.items()
        }

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def list_all(self) -> RepositoryResponse:
        snapshot = [item.model_copy(deep=True) for item in self._items]
        await self._simulate_latency("list")
        return self._envelope().success(snapshot, f"{self.kind.label}s loaded from mock data")

    async def get_by_id(self, entity_id: str) -> Optional[CatalogEntity]:
        index = self._index_of(entity_id)
        found = self._items[index].model_copy(deep=True) if index != -1 else None
        await self._simulate_latency("get")
        if found is None:
            logger.warning("[MOCK %s] Entity not found id=%s", self.kind.value, entity_id)
        return found

    async def create(self, draft: Draft) -> RepositoryResponse:
        now = datetime.now(timezone.utc)
        payload = self._to_wire_keys(self._without_id(as_payload(draft)))
        payload.update(self.model_type.creation_stamp(now))
        payload["_id"] = self._new_id()

        entity = self.model_type.model_validate(payload)
        self._items.append(entity)
        logger.info("[MOCK %s] Created id=%s name=%s", self.kind.value, entity.id, entity.name)

        created = entity.model_copy(deep=True)
        await self._simulate_latency("create")
        return self._envelope().success([created], f"{self.kind.label} created (mock)")

    async def delete_by_id(self, entity_id: str) -> RepositoryResponse:
        index = self._index_of(entity_id)
        if index != -1:
            del self._items[index]
            logger.info("[MOCK %s] Deleted id=%s", self.kind.value, entity_id)
            response = self._envelope().success([], f"{self.kind.label} deleted (mock)")
        else:
            logger.warning("[MOCK %s] Delete skipped, id=%s not found", self.kind.value, entity_id)
            response = self._envelope().failure(f"{self.kind.label} not found")
        await self._simulate_latency("delete")
        return response

    async def update(self, entity_id: str, patch: Draft) -> RepositoryResponse:
        index = self._index_of(entity_id)
        if index == -1:
            logger.warning("[MOCK %s] Update skipped, id=%s not found", self.kind.value, entity_id)
            await self._simulate_latency("update")
            return self._envelope().failure(f"{self.kind.label} not found")

        merged = self._items[index].model_dump(by_alias=True)
        merged.update(self._to_wire_keys(self._without_id(as_payload(patch))))
        merged.update(self.model_type.update_stamp(datetime.now(timezone.utc)))
        merged["_id"] = entity_id

        entity = self.model_type.model_validate(merged)
        self._items[index] = entity
        logger.info("[MOCK %s] Updated id=%s fields=%s", self.kind.value, entity_id, sorted(as_payload(patch)))

        updated = entity.model_copy(deep=True)
        await self._simulate_latency("update")
        return self._envelope().success([updated], f"{self.kind.label} updated (mock)")
