"""
Session and token lifecycle for the catalog client.

States:
    ANONYMOUS  -> no token
    UNVERIFIED -> token present, not yet confirmed by the backend
    ACTIVE     -> token confirmed, user profile populated

A token alone never makes the session ACTIVE; only a successful
``verify_token`` round-trip does. Bad credentials, rejected tokens and
network failures are reported as ``False``, never raised.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from pydantic import ValidationError

from src.catalog.contracts.entities import AuthResponse, Credentials, Draft, UserProfile, as_payload
from src.catalog.contracts.interfaces import DurableStore, TransportAdapter
from src.catalog.policy.response_wrappers import normalize_auth_response
from src.error_handler import ClientError, StorageError, TransportError

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    ANONYMOUS = "anonymous"
    UNVERIFIED = "unverified"
    ACTIVE = "active"


class SessionManager:
    def __init__(
        self,
        transport: TransportAdapter,
        store: DurableStore,
        token_key: str = "token",
        session_header: str = "x-token",
    ) -> None:
        self._transport = transport
        self._store = store
        self.token_key = token_key
        self.session_header = session_header
        self._token = ""
        self._user: Optional[UserProfile] = None
        self._state = SessionState.ANONYMOUS
        self.restore()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def user(self) -> Optional[UserProfile]:
        """A copy of the verified user, or None. Mutating it has no effect."""
        return self._user.model_copy(deep=True) if self._user is not None else None

    @property
    def token(self) -> str:
        return self._token

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is SessionState.ACTIVE

    # ------------------------------------------------------------------
    # Token persistence
    # ------------------------------------------------------------------

    def _read_persisted_token(self) -> str:
        try:
            return self._store.get(self.token_key) or ""
        except StorageError as exc:
            logger.warning("Could not read persisted token, using in-memory copy: %s", exc)
            return self._token

    def _persist_token(self, token: str) -> None:
        self._token = token
        try:
            self._store.set(self.token_key, token)
        except StorageError as exc:
            logger.warning("Token kept in memory only, persisting failed: %s", exc)

    def _forget(self) -> None:
        self._token = ""
        self._user = None
        self._state = SessionState.ANONYMOUS
        try:
            self._store.remove(self.token_key)
        except StorageError as exc:
            logger.warning("Could not remove persisted token: %s", exc)

    def restore(self) -> SessionState:
        """Pick up a token persisted by a previous run."""
        self._token = self._read_persisted_token()
        self._user = None
        self._state = SessionState.UNVERIFIED if self._token else SessionState.ANONYMOUS
        logger.info("Session restored in state %s", self._state.value)
        return self._state

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def register(self, profile: Draft) -> AuthResponse:
        """Create an account. Local session state is left untouched."""
        try:
            result = await self._transport.request("POST", "/auth/register", body=as_payload(profile))
        except TransportError as exc:
            if exc.status is not None and 400 <= exc.status < 500 and exc.payload:
                logger.warning("Registration rejected with HTTP %s", exc.status)
                response = normalize_auth_response(exc.payload)
                return response.model_copy(update={"ok": False})
            raise
        response = normalize_auth_response(result.payload)
        logger.info("Registration request finished ok=%s", response.ok)
        return response

    async def login(self, credentials: Credentials) -> bool:
        if not isinstance(credentials, Credentials):
            try:
                credentials = Credentials.model_validate(credentials)
            except ValidationError as exc:
                logger.warning("Login skipped, credentials are incomplete: %s", exc.error_count())
                return False
        try:
            result = await self._transport.request("POST", "/auth/login", body=credentials.model_dump())
            response = normalize_auth_response(result.payload)
        except ClientError as exc:
            logger.warning("Login failed: %s", exc)
            return False

        if not (response.ok and response.token):
            logger.warning("Login rejected by backend: %s", response.msg or "no token issued")
            return False

        self._persist_token(response.token)
        self._user = None
        self._state = SessionState.UNVERIFIED
        logger.info("Login succeeded, session awaiting verification")
        return True

    async def verify_token(self) -> bool:
        token = self._read_persisted_token()
        headers = {self.session_header: token}
        try:
            result = await self._transport.request("GET", "/auth/renew-token", headers=headers)
            response = normalize_auth_response(result.payload)
        except ClientError as exc:
            logger.warning("Token verification failed: %s", exc)
            self._forget()
            return False

        if not (response.ok and response.token):
            logger.warning("Token rejected by backend, clearing session")
            self._forget()
            return False

        self._user = response.user_data.model_copy(deep=True) if response.user_data else UserProfile()
        self._persist_token(response.token)
        self._state = SessionState.ACTIVE
        logger.info("Session verified for uid=%s", self._user.uid or "unknown")
        return True

    def logout(self) -> None:
        self._forget()
        logger.info("Session closed")
