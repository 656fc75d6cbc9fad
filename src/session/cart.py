"""
Shopping cart owned by the client process and mirrored into durable storage.

The whole cart is the unit of persistence: after every accepted mutation the
complete line list is serialized and written under one key, so storage never
holds a partially updated line. The in-memory cart stays authoritative when a
write fails; the caller is told through ``CartResult.persisted``.
"""

from __future__ import annotations

import json
import logging
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from src.catalog.contracts.entities import CatalogEntity
from src.catalog.contracts.interfaces import DurableStore
from src.error_handler import StorageError

from .events import EventBus, Topic

logger = logging.getLogger(__name__)

PERSIST_ATTEMPTS = 2


class CartLine(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    entity_id: str = Field(alias="entityId", min_length=1)
    name: str = ""
    unit_price: float = Field(alias="unitPrice", ge=0)
    requested_count: int = Field(alias="requestedCount")
    max_available: int = Field(alias="maxAvailable")

    @model_validator(mode="after")
    def _count_within_cap(self) -> "CartLine":
        if not 0 < self.requested_count <= self.max_available:
            raise ValueError(
                f"requestedCount must be between 1 and {self.max_available}, got {self.requested_count}"
            )
        return self

    @property
    def subtotal(self) -> float:
        return self.unit_price * self.requested_count


class CartSnapshot(BaseModel):
    lines: List[CartLine] = Field(default_factory=list)

    @property
    def total(self) -> float:
        return sum(line.subtotal for line in self.lines)

    @property
    def item_count(self) -> int:
        return sum(line.requested_count for line in self.lines)


class CartResult(BaseModel):
    ok: bool
    line: Optional[CartLine] = None
    notice: Optional[str] = None
    persisted: bool = True


def serialize_cart(lines: List[CartLine]) -> str:
    return json.dumps([line.model_dump(by_alias=True) for line in lines])


def deserialize_cart(raw: Optional[str]) -> List[CartLine]:
    """Parse a stored cart. Unreadable documents and invalid lines are dropped."""
    if not raw:
        return []
    try:
        items = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Stored cart is not valid JSON, starting empty")
        return []
    if not isinstance(items, list):
        logger.warning("Stored cart has unexpected shape, starting empty")
        return []

    lines: List[CartLine] = []
    seen = set()
    for item in items:
        try:
            line = CartLine.model_validate(item)
        except ValidationError as exc:
            logger.warning("Dropping invalid stored cart line: %s", exc)
            continue
        if line.entity_id in seen:
            logger.warning("Dropping duplicate stored cart line for %s", line.entity_id)
            continue
        seen.add(line.entity_id)
        lines.append(line)
    return lines


class CartAggregator:
    def __init__(self, store: DurableStore, bus: EventBus, key: str = "shoppingCart") -> None:
        self._store = store
        self._bus = bus
        self.key = key
        self._lines: List[CartLine] = []
        self.restore()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def lines(self) -> List[CartLine]:
        return [line.model_copy() for line in self._lines]

    @property
    def total(self) -> float:
        return self.snapshot().total

    @property
    def item_count(self) -> int:
        return self.snapshot().item_count

    def snapshot(self) -> CartSnapshot:
        return CartSnapshot(lines=self.lines)

    def get_line(self, entity_id: str) -> Optional[CartLine]:
        index = self._index_of(entity_id)
        return self._lines[index].model_copy() if index != -1 else None

    def _index_of(self, entity_id: str) -> int:
        for index, line in enumerate(self._lines):
            if line.entity_id == entity_id:
                return index
        return -1

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def restore(self) -> CartSnapshot:
        try:
            raw = self._store.get(self.key)
        except StorageError as exc:
            logger.warning("Could not read stored cart, starting empty: %s", exc)
            raw = None
        self._lines = deserialize_cart(raw)
        logger.info("Cart restored with %d lines", len(self._lines))
        return self.snapshot()

    def _write(self, document: str) -> bool:
        for attempt in range(1, PERSIST_ATTEMPTS + 1):
            try:
                self._store.set(self.key, document)
                return True
            except StorageError as exc:
                logger.warning("Cart write attempt %d/%d failed: %s", attempt, PERSIST_ATTEMPTS, exc)
        return False

    def _commit(self, lines: List[CartLine], line: Optional[CartLine] = None) -> CartResult:
        document = serialize_cart(lines)
        self._lines = lines
        persisted = self._write(document)
        self._bus.publish(Topic.CART_CHANGED, self.snapshot())
        notice = None if persisted else "Cart updated but could not be saved on this device."
        return CartResult(
            ok=True,
            line=line.model_copy() if line is not None else None,
            notice=notice,
            persisted=persisted,
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_line(self, entity: CatalogEntity, max_available: Optional[int] = None) -> CartResult:
        """Add one unit of ``entity``. Going past the cap is refused with a notice.

        ``max_available`` only sets the cap of a new line. A line already in
        the cart keeps the cap it was created with until it is removed.
        """
        lines = self.lines
        index = self._index_of(entity.id)

        if index != -1:
            current = lines[index]
            if current.requested_count + 1 > current.max_available:
                logger.warning("Cart cap reached for %s (%d)", entity.id, current.max_available)
                return CartResult(
                    ok=False,
                    line=current,
                    notice=f"Only {current.max_available} units of {current.name or entity.id} can be added to the cart",
                )
            updated = current.model_copy(update={"requested_count": current.requested_count + 1})
            lines[index] = updated
            return self._commit(lines, updated)

        cap = entity.max_available() if max_available is None else max_available
        if cap < 1:
            logger.warning("Entity %s has no units available", entity.id)
            return CartResult(ok=False, notice=f"{entity.name} is out of stock")

        new_line = CartLine(
            entity_id=entity.id,
            name=entity.name,
            unit_price=entity.price,
            requested_count=1,
            max_available=cap,
        )
        lines.append(new_line)
        return self._commit(lines, new_line)

    def update_count(self, entity_id: str, count: int) -> CartResult:
        """Set a line to ``count`` units; 0 removes it."""
        lines = self.lines
        index = self._index_of(entity_id)
        if index == -1:
            return CartResult(ok=False, notice="Item is not in the cart")
        if count < 0:
            return CartResult(ok=False, line=lines[index], notice="Quantity cannot be negative")
        if count == 0:
            return self.remove_line(entity_id)

        current = lines[index]
        if count > current.max_available:
            logger.warning("Rejected count %d for %s, cap is %d", count, entity_id, current.max_available)
            return CartResult(
                ok=False,
                line=current,
                notice=f"Only {current.max_available} units of {current.name or entity_id} can be added to the cart",
            )
        updated = current.model_copy(update={"requested_count": count})
        lines[index] = updated
        return self._commit(lines, updated)

    def remove_line(self, entity_id: str) -> CartResult:
        lines = self.lines
        index = self._index_of(entity_id)
        if index == -1:
            return CartResult(ok=False, notice="Item is not in the cart")
        removed = lines.pop(index)
        return self._commit(lines, removed)

    def clear(self) -> CartResult:
        return self._commit([])

    def toggle_visibility(self, intent: bool) -> None:
        """Ask listeners to show or hide the cart modal. Not persisted."""
        self._bus.publish(Topic.MODAL_VISIBILITY, bool(intent))
