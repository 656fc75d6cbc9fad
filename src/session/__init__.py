"""
Client-side session layer: token lifecycle, shopping cart and the event bus
the cart uses to notify presentation components.
"""

from .cart import CartAggregator, CartLine, CartResult, CartSnapshot
from .events import EventBus, Subscription, Topic
from .session_manager import SessionManager, SessionState

__all__ = [
    "CartAggregator", "CartLine", "CartResult", "CartSnapshot",
    "EventBus", "Subscription", "Topic",
    "SessionManager", "SessionState",
]
