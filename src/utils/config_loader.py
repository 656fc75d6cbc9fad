"""
Configuration loader for the catalog client (mode switch, backend URL, storage).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "client_config.yml"

_TRUTHY = ("1", "true", "yes", "on")


class MockLatencyConfig(BaseModel):
    """Simulated network delay per mock operation, in milliseconds"""

    list_ms: int = Field(default=300, ge=0)
    get_ms: int = Field(default=200, ge=0)
    create_ms: int = Field(default=400, ge=0)
    delete_ms: int = Field(default=300, ge=0)
    update_ms: int = Field(default=300, ge=0)

    @classmethod
    def none(cls) -> "MockLatencyConfig":
        return cls(list_ms=0, get_ms=0, create_ms=0, delete_ms=0, update_ms=0)


class StorageConfig(BaseModel):
    """Durable storage backend shared by session and cart"""

    backend: Literal["memory", "file", "redis"] = "file"
    path: str = "data/client_state.json"
    redis_url: Optional[str] = None
    token_key: str = "token"
    cart_key: str = "shoppingCart"

    @model_validator(mode="after")
    def _keys_do_not_collide(self) -> "StorageConfig":
        if self.token_key == self.cart_key:
            raise ValueError("token_key and cart_key must be different")
        if self.backend == "redis" and not self.redis_url:
            raise ValueError("redis backend requires redis_url (or REDIS_URL)")
        return self


class ClientConfig(BaseModel):
    """Complete client configuration"""

    use_mock_data: bool = True
    base_url: str = ""
    timeout_seconds: float = Field(default=15.0, gt=0)
    session_header: str = "x-token"
    fixtures_path: Optional[str] = None
    mock_latency: MockLatencyConfig = Field(default_factory=MockLatencyConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


def _env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(data)
    storage = dict(merged.get("storage") or {})

    if os.getenv("USE_MOCK_DATA") is not None:
        merged["use_mock_data"] = os.environ["USE_MOCK_DATA"].strip().lower() in _TRUTHY
    if os.getenv("CATALOG_API_URL"):
        merged["base_url"] = os.environ["CATALOG_API_URL"]
    if os.getenv("CLIENT_STORAGE_BACKEND"):
        storage["backend"] = os.environ["CLIENT_STORAGE_BACKEND"]
    if os.getenv("CLIENT_STORAGE_PATH"):
        storage["path"] = os.environ["CLIENT_STORAGE_PATH"]
    if os.getenv("REDIS_URL"):
        storage["redis_url"] = os.environ["REDIS_URL"]

    if storage:
        merged["storage"] = storage
    return merged


def load_client_config(config_path: Optional[Path] = None) -> ClientConfig:
    """
    Load and validate the client configuration

    Args:
        config_path: Path to config file. Defaults to config/client_config.yml

    Returns:
        Validated ClientConfig object. Environment variables (and a .env file)
        override values from the YAML file; a missing file means defaults.

    Raises:
        ValidationError: If the merged config doesn't match the schema
    """
    load_dotenv()

    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    data: Dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    else:
        logger.info("Client config file not found at %s, using defaults", config_path)

    try:
        cfg = ClientConfig(**_env_overrides(data))
        logger.info("Loaded client config (mock=%s, storage=%s)", cfg.use_mock_data, cfg.storage.backend)
        return cfg
    except ValidationError as e:
        logger.error("Client config validation failed: %s", e)
        raise
