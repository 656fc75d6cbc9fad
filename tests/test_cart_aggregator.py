import json

import pytest

from src.catalog.contracts.entities import Product, Service, Workshop
from src.database.local_store import InMemoryStore
from src.error_handler import StorageError
from src.session.cart import CartAggregator, CartLine, deserialize_cart, serialize_cart
from src.session.events import Topic


class FlakyStore(InMemoryStore):
    """Fails the first ``failures`` writes, then behaves normally."""

    def __init__(self, failures):
        super().__init__()
        self.failures = failures
        self.attempts = 0

    def set(self, key, value):
        self.attempts += 1
        if self.failures > 0:
            self.failures -= 1
            raise StorageError("disk full")
        super().set(key, value)


def _product(quantity=2, pid="p1", price=45000):
    return Product(_id=pid, name="Esmalte Rojo", price=price, quantity=quantity)


def test_add_new_line_starts_at_one_and_persists(store, bus):
    cart = CartAggregator(store, bus)

    result = cart.add_line(_product())

    assert result.ok is True
    assert result.persisted is True
    assert result.line.requested_count == 1
    assert result.line.max_available == 2
    stored = json.loads(store.get("shoppingCart"))
    assert stored == [
        {"entityId": "p1", "name": "Esmalte Rojo", "unitPrice": 45000.0, "requestedCount": 1, "maxAvailable": 2}
    ]


def test_repeated_adds_never_exceed_cap(store, bus):
    cart = CartAggregator(store, bus)
    product = _product(quantity=3)

    results = [cart.add_line(product) for _ in range(7)]

    assert [r.ok for r in results] == [True, True, True, False, False, False, False]
    assert all("Only 3 units" in r.notice for r in results[3:])
    assert cart.get_line("p1").requested_count == 3
    assert json.loads(store.get("shoppingCart"))[0]["requestedCount"] == 3


def test_out_of_stock_entity_is_refused(store, bus):
    cart = CartAggregator(store, bus)

    result = cart.add_line(_product(quantity=0))

    assert result.ok is False
    assert "out of stock" in result.notice
    assert cart.lines == []
    assert store.get("shoppingCart") is None


def test_caps_by_entity_kind(store, bus):
    cart = CartAggregator(store, bus)

    cart.add_line(Service(_id="s1", name="Pedicure", price=10))
    cart.add_line(Workshop(_id="w1", name="Nail Art", price=20, capacity=4))

    assert cart.get_line("s1").max_available == 1
    assert cart.get_line("w1").max_available == 4
    assert cart.add_line(Service(_id="s1", name="Pedicure", price=10)).ok is False


def test_cap_override_applies_to_new_lines_only(store, bus):
    cart = CartAggregator(store, bus)

    cart.add_line(_product(quantity=5), max_available=1)
    again = cart.add_line(_product(quantity=5), max_available=5)

    assert again.ok is False
    assert cart.get_line("p1").max_available == 1
    assert cart.get_line("p1").requested_count == 1


def test_total_and_item_count(store, bus):
    cart = CartAggregator(store, bus)
    cart.add_line(_product(pid="a", price=1000, quantity=5))
    cart.add_line(_product(pid="a", price=1000, quantity=5))
    cart.add_line(_product(pid="b", price=250, quantity=5))

    assert cart.total == 2250
    assert cart.item_count == 3
    assert [line.entity_id for line in cart.lines] == ["a", "b"]


def test_update_count_and_remove(store, bus):
    cart = CartAggregator(store, bus)
    cart.add_line(_product(quantity=5))

    assert cart.update_count("p1", 4).ok is True
    assert cart.get_line("p1").requested_count == 4
    over = cart.update_count("p1", 6)
    assert over.ok is False
    assert cart.get_line("p1").requested_count == 4
    assert cart.update_count("p1", -1).ok is False
    assert cart.update_count("missing", 1).ok is False

    removed = cart.update_count("p1", 0)
    assert removed.ok is True
    assert cart.lines == []
    assert json.loads(store.get("shoppingCart")) == []


def test_clear_empties_cart_and_storage(store, bus):
    cart = CartAggregator(store, bus)
    cart.add_line(_product())

    cart.clear()

    assert cart.lines == []
    assert store.get("shoppingCart") == "[]"


def test_cart_restores_from_storage(bus):
    store = InMemoryStore()
    first = CartAggregator(store, bus)
    first.add_line(_product(pid="a", quantity=3))
    first.add_line(_product(pid="a", quantity=3))
    first.add_line(_product(pid="b", quantity=1))

    second = CartAggregator(store, bus)

    assert second.snapshot() == first.snapshot()
    assert second.total == first.total


def test_serialize_round_trip():
    lines = [
        CartLine(entity_id="a", name="A", unit_price=10, requested_count=2, max_available=3),
        CartLine(entity_id="b", name="B", unit_price=5.5, requested_count=1, max_available=1),
    ]

    assert deserialize_cart(serialize_cart(lines)) == lines


def test_restore_drops_invalid_and_duplicate_lines(bus):
    stored = [
        {"entityId": "a", "unitPrice": 10, "requestedCount": 2, "maxAvailable": 3},
        {"entityId": "b", "unitPrice": 10, "requestedCount": 9, "maxAvailable": 3},
        {"entityId": "a", "unitPrice": 10, "requestedCount": 1, "maxAvailable": 3},
    ]
    store = InMemoryStore({"shoppingCart": json.dumps(stored)})

    cart = CartAggregator(store, bus)

    assert [(line.entity_id, line.requested_count) for line in cart.lines] == [("a", 2)]


def test_restore_ignores_corrupt_document(bus):
    store = InMemoryStore({"shoppingCart": "{not json"})

    cart = CartAggregator(store, bus)

    assert cart.lines == []


def test_line_rejects_count_above_cap():
    with pytest.raises(ValueError):
        CartLine(entity_id="a", unit_price=1, requested_count=4, max_available=3)


def test_single_write_failure_is_retried(bus):
    store = FlakyStore(failures=1)
    cart = CartAggregator(store, bus)

    result = cart.add_line(_product())

    assert result.ok is True
    assert result.persisted is True
    assert store.attempts == 2
    assert json.loads(store.get("shoppingCart"))[0]["entityId"] == "p1"


def test_persistent_write_failure_is_reported_and_memory_kept(bus):
    store = FlakyStore(failures=5)
    cart = CartAggregator(store, bus)

    result = cart.add_line(_product())

    assert result.ok is True
    assert result.persisted is False
    assert result.notice
    assert store.attempts == 2
    assert cart.get_line("p1").requested_count == 1
    assert store.get("shoppingCart") is None


def test_mutations_publish_cart_snapshots(store, bus):
    seen = []
    bus.subscribe(Topic.CART_CHANGED, seen.append)
    cart = CartAggregator(store, bus)

    cart.add_line(_product(quantity=1))
    cart.add_line(_product(quantity=1))

    assert len(seen) == 1
    assert seen[0].item_count == 1


def test_toggle_visibility_publishes_without_persisting(store, bus):
    seen = []
    bus.subscribe(Topic.MODAL_VISIBILITY, seen.append)
    cart = CartAggregator(store, bus)

    cart.toggle_visibility(True)
    cart.toggle_visibility(False)

    assert seen == [True, False]
    assert store.keys() == []
