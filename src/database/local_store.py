"""
Lightweight in-memory durable store for tests and throwaway sessions.

Implements the DurableStore interface used by the session manager and the
cart so the client can run without a writable disk or a Redis instance.
Values are lost when the process exits.
"""

from __future__ import annotations

from typing import Dict, Optional

from src.catalog.contracts.interfaces import DurableStore


class InMemoryStore(DurableStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = str(value)

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    def keys(self):
        return sorted(self._values)
