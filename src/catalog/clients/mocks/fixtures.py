"""Seed data loader for the fixture-backed repositories."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from src.catalog.contracts.entities import EntityKind

logger = logging.getLogger(__name__)

DEFAULT_FIXTURES_PATH = Path(__file__).resolve().parent / "data" / "mock_data.json"


def load_fixtures(path: Optional[Path] = None) -> Dict[EntityKind, List[Dict[str, Any]]]:
    """Read the seed JSON and return one list of raw entities per kind.

    Kinds missing from the file get an empty list.
    """
    fixtures_path = Path(path) if path else DEFAULT_FIXTURES_PATH
    if not fixtures_path.exists():
        raise FileNotFoundError(f"Fixtures file not found: {fixtures_path}")

    with open(fixtures_path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    fixtures = {kind: list(raw.get(kind.value, [])) for kind in EntityKind}
    logger.info(
        "Loaded fixtures from %s (%s)",
        fixtures_path,
        ", ".join(f"{kind.value}={len(items)}" for kind, items in fixtures.items()),
    )
    return fixtures
