"""
Real Redis-backed durable store, used when REDIS_URL is set. Implements the
same interface as src.database.local_store (in-memory stub).
"""

from __future__ import annotations

from typing import Any, Optional

import redis

from src.catalog.contracts.interfaces import DurableStore
from src.error_handler import StorageError


class RedisStore(DurableStore):
    """
    Redis-backed key-value store. Keys are namespaced so several client
    profiles can share one Redis database.
    """

    def __init__(self, url: Optional[str] = None, namespace: str = "catalog-client", client: Any = None) -> None:
        if client is None:
            if not url:
                raise ValueError("REDIS_URL is not configured.")
            client = redis.from_url(url, decode_responses=True)
        self._client = client
        self._namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    def get(self, key: str) -> Optional[str]:
        try:
            raw = self._client.get(self._key(key))
        except redis.RedisError as exc:
            raise StorageError(f"Redis read failed for {key}: {exc}") from exc
        if raw is None:
            return None
        return raw.decode("utf-8") if isinstance(raw, bytes) else str(raw)

    def set(self, key: str, value: str) -> None:
        try:
            self._client.set(self._key(key), str(value))
        except redis.RedisError as exc:
            raise StorageError(f"Redis write failed for {key}: {exc}") from exc

    def remove(self, key: str) -> None:
        try:
            self._client.delete(self._key(key))
        except redis.RedisError as exc:
            raise StorageError(f"Redis delete failed for {key}: {exc}") from exc

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False
