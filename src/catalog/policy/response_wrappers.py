from __future__ import annotations

from typing import Any, Dict, List, Optional, Type

from pydantic import ValidationError

from src.catalog.contracts.entities import AuthResponse, CatalogEntity, RepositoryResponse
from src.error_handler import ResponseShapeError


def normalize_envelope(
    raw: Any,
    model_type: Type[CatalogEntity],
    *,
    fallback_msg: str,
) -> RepositoryResponse:
    """Turn a backend payload into a typed ``{ok, data, msg}`` envelope.

    Envelopes pass through with their own ``ok``/``msg``. A bare entity (as
    some PATCH handlers return) becomes a one-item success envelope, and an
    empty body becomes an empty success envelope.
    """
    envelope_type = RepositoryResponse[model_type]

    if raw is None or raw == "" or raw == {}:
        return envelope_type.success([], fallback_msg)
    if not isinstance(raw, dict):
        raise ResponseShapeError(f"Expected a JSON object, got {type(raw).__name__}.", payload=raw)

    if "ok" not in raw:
        if "_id" in raw or "id" in raw:
            return envelope_type.success([_build_entity(model_type, raw)], fallback_msg)
        return envelope_type.success([], str(_first_non_empty(raw, "msg", "message", default=fallback_msg)))

    ok = bool(raw.get("ok"))
    msg = str(_first_non_empty(raw, "msg", "message", default=fallback_msg))
    if not ok:
        return envelope_type.failure(msg)

    items = [_build_entity(model_type, item) for item in _as_list(raw.get("data"))]
    return envelope_type.success(items, msg)


def unwrap_entity(raw: Any, model_type: Type[CatalogEntity]) -> Optional[CatalogEntity]:
    """Return only the payload of a single-entity envelope, or None when empty.

    A bare entity is accepted the same way ``normalize_envelope`` accepts it.
    """
    if not isinstance(raw, dict):
        raise ResponseShapeError(f"Expected a JSON object, got {type(raw).__name__}.", payload=raw)
    if "ok" not in raw and ("_id" in raw or "id" in raw):
        return _build_entity(model_type, raw)
    if "ok" in raw and not raw.get("ok"):
        return None
    items = _as_list(raw.get("data"))
    if not items:
        return None
    return _build_entity(model_type, items[0])


def normalize_auth_response(raw: Any) -> AuthResponse:
    if raw is None:
        return AuthResponse(ok=False, msg="Empty response from auth endpoint.")
    if not isinstance(raw, dict):
        raise ResponseShapeError(f"Expected a JSON object, got {type(raw).__name__}.", payload=raw)
    try:
        return AuthResponse.model_validate(raw)
    except ValidationError as exc:
        raise ResponseShapeError(f"Auth response validation failed: {exc}", payload=raw) from exc


def _as_list(value: Any) -> List[Dict[str, Any]]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _first_non_empty(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return default


def _build_entity(model_type: Type[CatalogEntity], item: Any) -> CatalogEntity:
    if not isinstance(item, dict):
        raise ResponseShapeError(f"Expected an entity object, got {type(item).__name__}.", payload=item)
    payload = dict(item)
    if "_id" not in payload and "id" in payload:
        payload["_id"] = payload.pop("id")
    try:
        return model_type.model_validate(payload)
    except ValidationError as exc:
        raise ResponseShapeError(f"{model_type.__name__} validation failed: {exc}", payload=item) from exc
