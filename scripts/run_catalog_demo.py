#!/usr/bin/env python3
"""
Walk through the catalog client in mock mode and print each stage to the terminal.
Lists products, creates one, searches, fills the cart and shows the stored state.

Usage (from repo root):
  python scripts/run_catalog_demo.py
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.catalog.contracts.search import filter_entities
from src.client import build_client
from src.database.local_store import InMemoryStore
from src.session.events import Topic
from src.utils.config_loader import ClientConfig, MockLatencyConfig


def setup_logging():
    """Log to terminal at INFO so every stage is visible."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


def print_stage(title: str, data: dict | list | str):
    """Print a stage header and data to the terminal."""
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)
    if isinstance(data, (dict, list)):
        print(json.dumps(data, indent=2, default=str))
    else:
        print(data)
    print()


async def main():
    setup_logging()
    store = InMemoryStore()
    config = ClientConfig(use_mock_data=True, mock_latency=MockLatencyConfig.none())
    client = build_client(config, store=store)

    client.bus.subscribe(Topic.CART_CHANGED, lambda snap: print(f"  -> cart now has {snap.item_count} items, total {snap.total}"))
    client.bus.subscribe(Topic.MODAL_VISIBILITY, lambda visible: print(f"  -> cart modal visible: {visible}"))

    listing = await client.products.list_all()
    print_stage("PRODUCTS (mock)", [p.to_payload() for p in listing.data])

    created = await client.products.create({"name": "Esmalte Rojo", "price": 45000, "quantity": 2, "category": "esmaltes"})
    print_stage("CREATE PRODUCT", created.model_dump(mode="json", by_alias=True))

    listing = await client.products.list_all()
    matches = filter_entities(listing.data, "esmalte")
    print_stage("SEARCH 'esmalte'", [p.name for p in matches])

    product = created.data[0]
    for _ in range(3):
        result = client.cart.add_line(product)
        print_stage("ADD TO CART", result.model_dump(mode="json"))
    client.cart.toggle_visibility(True)

    print_stage("STORED CART", json.loads(store.get(config.storage.cart_key) or "[]"))

    logged_in = await client.session.login({"email": "demo@example.com", "password": "demo"})
    print_stage("LOGIN WITHOUT BACKEND", {"ok": logged_in, "state": client.session.state.value})


if __name__ == "__main__":
    asyncio.run(main())
