"""
Minimal publish/subscribe channel between the cart and presentation code.

Delivery is synchronous and best effort: a publish reaches the listeners
subscribed at that moment, and a failing listener is logged without stopping
delivery to the others.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class Topic(str, Enum):
    MODAL_VISIBILITY = "modal"   # payload: bool
    CART_CHANGED = "cart"        # payload: CartSnapshot


class Subscription:
    """Handle returned by ``EventBus.subscribe``; dispose it to stop receiving."""

    def __init__(self, bus: "EventBus", topic: Topic, listener: Listener) -> None:
        self._bus = bus
        self.topic = topic
        self._listener = listener
        self.active = True

    def dispose(self) -> None:
        if self.active:
            self._bus._unsubscribe(self.topic, self._listener)
            self.active = False

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.dispose()


class EventBus:
    def __init__(self) -> None:
        self._listeners: Dict[Topic, List[Listener]] = {}
        self._latest: Dict[Topic, Any] = {}

    def subscribe(self, topic: Topic, listener: Listener) -> Subscription:
        self._listeners.setdefault(topic, []).append(listener)
        return Subscription(self, topic, listener)

    def _unsubscribe(self, topic: Topic, listener: Listener) -> None:
        listeners = self._listeners.get(topic, [])
        if listener in listeners:
            listeners.remove(listener)

    def publish(self, topic: Topic, payload: Any = None) -> None:
        self._latest[topic] = payload
        for listener in list(self._listeners.get(topic, [])):
            try:
                listener(payload)
            except Exception:
                logger.exception("Listener failed for topic %s", topic.value)

    def latest(self, topic: Topic, default: Any = None) -> Any:
        """Last payload published on ``topic`` (not replayed to new subscribers)."""
        return self._latest.get(topic, default)

    def listener_count(self, topic: Topic) -> int:
        return len(self._listeners.get(topic, []))
