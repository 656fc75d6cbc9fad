from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Mapping, Optional

from .entities import Draft, EntityKind, EntityT, RepositoryResponse


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------

@dataclass
class TransportResult:
    status: int
    payload: Any = None
    headers: Dict[str, str] = field(default_factory=dict)


class TransportAdapter(ABC):
    """Issues requests against the backend.

    Implementations raise ``TransportError`` for network failures, timeouts and
    any response with status >= 400.
    """

    @abstractmethod
    async def request(
        self,
        method: str,
        path: str,
        body: Optional[Any] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> TransportResult:
        """Send one request and return the decoded result."""


# ---------------------------------------------------------------------------
# Durable storage
# ---------------------------------------------------------------------------

class DurableStore(ABC):
    """Persistent string key-value storage shared by session and cart."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value or None."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete ``key``. Missing keys are ignored."""


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------

class ResourceRepository(ABC, Generic[EntityT]):
    """CRUD over one catalog entity kind.

    Fixture-backed and HTTP-backed implementations return identically shaped
    results so callers never need to know which one they hold. Note that
    ``get_by_id`` returns the bare entity while every other operation returns
    an envelope.
    """

    kind: EntityKind

    @abstractmethod
    async def list_all(self) -> RepositoryResponse[EntityT]:
        """Return every entity of this kind in a success envelope."""

    @abstractmethod
    async def get_by_id(self, entity_id: str) -> Optional[EntityT]:
        """Return a single entity, or None when it does not exist."""

    @abstractmethod
    async def create(self, draft: Draft) -> RepositoryResponse[EntityT]:
        """Create an entity; the envelope carries the created entity."""

    @abstractmethod
    async def delete_by_id(self, entity_id: str) -> RepositoryResponse[EntityT]:
        """Delete an entity; a missing id yields a failure envelope."""

    @abstractmethod
    async def update(self, entity_id: str, patch: Draft) -> RepositoryResponse[EntityT]:
        """Apply a partial update; a missing id yields a failure envelope."""
