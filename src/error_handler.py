"""Error types and notice helpers for the catalog client."""
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class ClientError(Exception):
    """Base class for every error raised by the client layer."""


class TransportError(ClientError):
    """Raised when the backend cannot be reached or answers with an error status.

    ``status`` is ``None`` for network failures and timeouts.
    """

    def __init__(self, message: str, *, status: Optional[int] = None, payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.status = status
        self.payload = payload or {}

    @property
    def is_not_found(self) -> bool:
        return self.status == 404

    @property
    def is_auth_failure(self) -> bool:
        return self.status in (401, 403)


class ResponseShapeError(ClientError):
    def __init__(self, message: str, *, payload: Optional[Any] = None) -> None:
        super().__init__(message)
        self.payload = payload


class StorageError(ClientError):
    """Raised by durable store backends when a read or write fails."""


class ErrorHandler:
    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
        if isinstance(exc, TransportError):
            if exc.status is None:
                msg = "The server could not be reached. Please check your connection and try again."
            elif exc.is_auth_failure:
                msg = "Your session has expired. Please sign in again."
            elif exc.is_not_found:
                msg = "The requested item no longer exists."
            else:
                msg = "The server could not complete the request. Please try again later."
            logger.warning("Transport failure surfaced to UI: status=%s error=%s", exc.status, exc)
        elif isinstance(exc, StorageError):
            msg = "Your changes are kept for this session but could not be saved on this device."
            logger.warning("Storage failure surfaced to UI: %s", exc)
        else:
            msg = "An unexpected error occurred. Please try again later."
            logger.error("Unhandled exception in catalog client: %s", exc, exc_info=True)
        return {
            "ok": False,
            "msg": msg,
            "metadata": {
                "error": str(exc),
                "status": getattr(exc, "status", None),
                "context": context or {},
            },
        }
