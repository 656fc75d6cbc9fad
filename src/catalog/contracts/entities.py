"""
Catalog entity contracts.

Defines the shapes shared by every repository implementation:
- the three catalog entities (services, products, workshops)
- the ``{ok, data, msg}`` envelope returned by list/create/update/delete
- the auth payloads used by the session manager

Field aliases follow the backend wire format (``_id``, ``createdAt``, ``__v``)
so payloads can be validated straight from JSON and dumped back with
``by_alias=True``.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Generic, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class EntityKind(str, Enum):
    SERVICES = "services"
    PRODUCTS = "products"
    WORKSHOPS = "talleres"

    @property
    def id_prefix(self) -> str:
        return _ID_PREFIXES[self]

    @property
    def label(self) -> str:
        return _LABELS[self]


_ID_PREFIXES = {
    EntityKind.SERVICES: "serv",
    EntityKind.PRODUCTS: "prod",
    EntityKind.WORKSHOPS: "tall",
}

_LABELS = {
    EntityKind.SERVICES: "Service",
    EntityKind.PRODUCTS: "Product",
    EntityKind.WORKSHOPS: "Workshop",
}


# ---------------------------------------------------------------------------
# Catalog entities
# ---------------------------------------------------------------------------

class CatalogEntity(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(alias="_id", min_length=1)
    name: str
    description: str = ""
    price: float = Field(default=0.0, ge=0)
    image: Optional[str] = None
    user: Optional[Any] = None           # owning user id or embedded user object

    def max_available(self) -> int:
        """Upper bound for the count of this entity in a cart."""
        return 1

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    @classmethod
    def creation_stamp(cls, now: datetime) -> Dict[str, Any]:
        """Extra fields the mock store adds when an entity is created."""
        return {}

    @classmethod
    def update_stamp(cls, now: datetime) -> Dict[str, Any]:
        """Extra fields the mock store refreshes when an entity is updated."""
        return {}


class Service(CatalogEntity):
    duration_minutes: Optional[int] = Field(default=None, alias="duration", ge=0)


class Product(CatalogEntity):
    quantity: int = Field(default=0, ge=0)   # units on hand
    category: Optional[str] = None
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")
    revision: int = Field(default=0, alias="__v", ge=0)

    def max_available(self) -> int:
        return self.quantity

    @classmethod
    def creation_stamp(cls, now: datetime) -> Dict[str, Any]:
        stamp = now.isoformat()
        return {"createdAt": stamp, "updatedAt": stamp, "__v": 0}

    @classmethod
    def update_stamp(cls, now: datetime) -> Dict[str, Any]:
        return {"updatedAt": now.isoformat()}


class Workshop(CatalogEntity):
    date: Optional[str] = None
    location: Optional[str] = None
    capacity: Optional[int] = Field(default=None, ge=0)   # seats left

    def max_available(self) -> int:
        return 1 if self.capacity is None else self.capacity


ENTITY_MODELS: Dict[EntityKind, Type[CatalogEntity]] = {
    EntityKind.SERVICES: Service,
    EntityKind.PRODUCTS: Product,
    EntityKind.WORKSHOPS: Workshop,
}

EntityT = TypeVar("EntityT", bound=CatalogEntity)

Draft = Union[Mapping[str, Any], BaseModel]


def as_payload(draft: Draft) -> Dict[str, Any]:
    """Return a plain wire-format dict for a draft given as a mapping or model."""
    if isinstance(draft, BaseModel):
        return draft.model_dump(by_alias=True, exclude_none=True)
    return dict(draft)


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------

class RepositoryResponse(BaseModel, Generic[EntityT]):
    """The ``{ok, data, msg}`` envelope. A failed envelope never carries data."""

    ok: bool
    data: List[EntityT] = Field(default_factory=list)
    msg: str

    @model_validator(mode="after")
    def _failure_has_no_data(self) -> "RepositoryResponse[EntityT]":
        if not self.ok and self.data:
            raise ValueError("a failed response must not carry data")
        return self

    @classmethod
    def success(cls, data: List[EntityT], msg: str) -> "RepositoryResponse[EntityT]":
        return cls(ok=True, data=list(data), msg=msg)

    @classmethod
    def failure(cls, msg: str) -> "RepositoryResponse[EntityT]":
        return cls(ok=False, data=[], msg=msg)


# ---------------------------------------------------------------------------
# Auth payloads
# ---------------------------------------------------------------------------

class UserProfile(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    uid: Optional[str] = Field(default=None, alias="_id")
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None


class Credentials(BaseModel):
    email: str
    password: str


class AuthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    ok: bool = False
    token: Optional[str] = None
    user_data: Optional[UserProfile] = Field(default=None, alias="userData")
    msg: str = ""
