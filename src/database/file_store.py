"""
JSON file-backed durable store.

All keys live in one JSON object on disk. Every write replaces the whole file
through a temporary sibling and ``os.replace``, so readers see either the old
document or the new one, never a half-written file.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional

from src.catalog.contracts.interfaces import DurableStore
from src.error_handler import StorageError

logger = logging.getLogger(__name__)


class JsonFileStore(DurableStore):
    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable state file: %s", self.path)
            return {}
        except OSError as exc:
            raise StorageError(f"Could not read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            logger.warning("Ignoring state file with unexpected shape: %s", self.path)
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write_all(self, values: Dict[str, str]) -> None:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(values, f, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.debug("Temporary state file already gone: %s", tmp_name)
            raise StorageError(f"Could not write {self.path}: {exc}") from exc

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        values = self._read_all()
        values[key] = str(value)
        self._write_all(values)

    def remove(self, key: str) -> None:
        values = self._read_all()
        if key not in values:
            return
        del values[key]
        self._write_all(values)
