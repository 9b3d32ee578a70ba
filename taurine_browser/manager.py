"""
Remote browser session manager.

``SessionManager`` owns at most one remote session at a time and exposes
its lifecycle (create, status, end) plus the operations that need a live
session (debugging endpoint, browser info, pages).

Example:
    async with SessionManager(api_key="tk_live_...") as manager:
        session = await manager.create_session({"region": "us-central"})
        ws_url = await manager.get_browser_cdp_url()
        page = await manager.create_page("https://example.com")
        ...
        await manager.close_page(page["id"])
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, Optional
from urllib.parse import quote

from pydantic import ValidationError as PydanticValidationError

from taurine_browser.activation import ActivationPoller
from taurine_browser.config import load_config
from taurine_browser.config.defaults import DEFAULT_PAGE_URL
from taurine_browser.config.options import TaurineConfig
from taurine_browser.endpoint import to_public_endpoint
from taurine_browser.errors import (
    ConfigurationError,
    EndpointFormatError,
    StateError,
    TransportError,
    ValidationError,
)
from taurine_browser.models import Session, SessionState
from taurine_browser.retry import RetryConfig, run_with_retry
from taurine_browser.transport import Transport

logger = logging.getLogger(__name__)

SESSIONS_PATH = "/v1/sessions"


def _validate_targeting(targeting: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    if targeting is None:
        return {}
    if not isinstance(targeting, Mapping):
        raise ValidationError(
            f"targeting must be a mapping, got {type(targeting).__name__}"
        )
    for key in targeting:
        if not isinstance(key, str):
            raise ValidationError(f"targeting keys must be strings, got {key!r}")
    try:
        json.dumps(dict(targeting))
    except (TypeError, ValueError) as e:
        raise ValidationError(f"targeting is not JSON serializable: {e}") from e
    return dict(targeting)


class SessionManager:
    """Lifecycle manager for a single remote browser session.

    Lifecycle calls (``create_session``, ``end_session``,
    ``terminate_session``) are serialized by an internal lock. Creating a
    session while one is owned raises StateError; end it first.
    """

    def __init__(
        self,
        config: Optional[TaurineConfig] = None,
        *,
        transport: Optional[Transport] = None,
        **overrides: Any,
    ) -> None:
        """Initialize SessionManager.

        Args:
            config: Configuration. Defaults to ``TaurineConfig()``.
            transport: Optional pre-built transport (mainly for tests).
            **overrides: Top-level config fields to override, e.g. ``api_key``.

        Raises:
            ConfigurationError: If the overrides are invalid, or no API key
                is configured and no transport was given.
        """
        config = config or TaurineConfig()
        if overrides:
            try:
                config = TaurineConfig.model_validate({**config.model_dump(), **overrides})
            except PydanticValidationError as e:
                raise ConfigurationError(f"Invalid configuration: {e}") from e
        self._config = config

        if transport is None:
            if not config.api_key:
                raise ConfigurationError(
                    "An API key is required (pass api_key= or set TAURINE_API_KEY)"
                )
            transport = Transport(
                config.api_key,
                config.api_origin,
                timeout=config.request_timeout,
            )
        self._transport = transport

        self._session: Optional[Session] = None
        self._state = SessionState.NO_SESSION
        self._lock = asyncio.Lock()

    @classmethod
    def from_env(cls, **overrides: Any) -> "SessionManager":
        """Build a manager from config files and ``TAURINE_*`` variables."""
        return cls(load_config(overrides=overrides or None))

    # Properties

    @property
    def config(self) -> TaurineConfig:
        return self._config

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session(self) -> Optional[Session]:
        """The currently owned session, if any."""
        return self._session

    @property
    def session_id(self) -> Optional[str]:
        return self._session.session_id if self._session else None

    @property
    def has_session(self) -> bool:
        return self._session is not None

    def _require_active(self) -> str:
        if self._session is None or self._state is not SessionState.ACTIVE:
            raise StateError(
                f"No active session (state: {self._state.value}); "
                "call create_session() first"
            )
        return self._session.session_id

    def _session_path(self, session_id: str, *parts: str) -> str:
        segments = [quote(session_id, safe="")] + [quote(p, safe="") for p in parts]
        return "/".join([SESSIONS_PATH] + segments)

    async def _fetch_status(self, session_id: str) -> Session:
        data = await self._transport.get(self._session_path(session_id))
        try:
            return Session.from_response(data, session_id=session_id)
        except (TypeError, ValueError) as e:
            raise TransportError(
                f"Malformed status response for session {session_id}", body=data
            ) from e

    # Lifecycle

    async def create_session(
        self,
        targeting: Optional[Mapping[str, Any]] = None,
    ) -> Session:
        """Create a session and wait until it is active.

        Args:
            targeting: Placement hints (region, os, device, ...) passed
                through to the service untouched.

        Returns:
            The activated session.

        Raises:
            StateError: If a session is already owned.
            ValidationError: If ``targeting`` is not a string-keyed mapping.
            RetryExhaustedError: If every creation attempt failed.
            ActivationTimeoutError: If the session never became active.
        """
        body = _validate_targeting(targeting)

        async with self._lock:
            if self._state not in (SessionState.NO_SESSION, SessionState.ENDED):
                raise StateError(
                    f"A session is already owned (state: {self._state.value}, "
                    f"id: {self.session_id}); call end_session() first"
                )

            self._state = SessionState.CREATING
            retry_opts = self._config.retry
            retry_config = RetryConfig(
                max_attempts=retry_opts.attempts,
                base_delay=retry_opts.base_delay,
                max_delay=retry_opts.max_delay,
                backoff=retry_opts.backoff,
            )

            try:
                created = await run_with_retry(
                    lambda: self._request_session(body), retry_config
                )
            except BaseException:
                self._state = SessionState.NO_SESSION
                raise

            self._session = created
            self._state = SessionState.AWAITING_ACTIVATION
            logger.info(f"Session {created.session_id} created (status: {created.status})")

            activation = self._config.activation
            poller = ActivationPoller(activation.timeout, activation.interval)

            try:
                active = await poller.wait(
                    lambda: self._fetch_status(created.session_id)
                )
            except BaseException as e:
                self._session = None
                self._state = SessionState.NO_SESSION
                logger.warning(
                    f"Session {created.session_id} failed to activate: "
                    f"{e.__class__.__name__}: {e}"
                )
                if activation.cleanup_on_timeout:
                    await self._cleanup(created.session_id)
                raise

            self._session = active
            self._state = SessionState.ACTIVE
            logger.info(f"Session {active.session_id} active")
            return active

    async def _request_session(self, body: dict[str, Any]) -> Session:
        data = await self._transport.post(SESSIONS_PATH, json=body)
        try:
            return Session.from_response(data)
        except (TypeError, ValueError) as e:
            raise TransportError("Malformed create-session response", body=data) from e

    async def _cleanup(self, session_id: str) -> None:
        """Best-effort termination of a session that never became active."""
        try:
            await self._transport.delete(self._session_path(session_id))
            logger.info(f"Session {session_id} cleaned up after failed activation")
        except Exception as e:
            logger.warning(f"Cleanup of session {session_id} failed: {e}")

    async def end_session(self) -> bool:
        """End the current session.

        Returns:
            True once the service acknowledged the termination.

        Raises:
            StateError: If there is no active session.
        """
        async with self._lock:
            session_id = self._require_active()
            await self._transport.delete(self._session_path(session_id))
            self._session = None
            self._state = SessionState.ENDED
            logger.info(f"Session {session_id} ended")
            return True

    async def terminate_session(self, session_id: str) -> bool:
        """End a session by id, whether or not this manager owns it.

        Useful for a session left behind by a failed activation when
        ``activation.cleanup_on_timeout`` is disabled. If ``session_id`` is
        the current session this behaves like ``end_session()``.

        Raises:
            ValidationError: If ``session_id`` is empty.
        """
        if not isinstance(session_id, str) or not session_id:
            raise ValidationError("session_id must be a non-empty string")

        async with self._lock:
            await self._transport.delete(self._session_path(session_id))
            if self.session_id == session_id:
                self._session = None
                self._state = SessionState.ENDED
            logger.info(f"Session {session_id} terminated")
            return True

    async def get_session_status(self) -> Session:
        """Fetch the current session's latest status from the service.

        The stored session is not modified.
        """
        session_id = self._require_active()
        return await self._fetch_status(session_id)

    # Browser

    async def get_browser_info(self) -> dict[str, Any]:
        """Return the remote browser's ``/json/version`` payload verbatim."""
        session_id = self._require_active()
        return await self._transport.get(self._session_path(session_id, "json", "version"))

    async def get_browser_cdp_url(self) -> str:
        """Return the public WebSocket debugging endpoint for the session.

        Raises:
            EndpointFormatError: If the browser reports no usable address.
        """
        session_id = self._require_active()
        info = await self._transport.get(self._session_path(session_id, "json", "version"))

        local_address = info.get("webSocketDebuggerUrl") if isinstance(info, dict) else None
        if not local_address:
            raise EndpointFormatError(local_address, "browser reported no webSocketDebuggerUrl")

        return to_public_endpoint(local_address, session_id, self._config.debug_host)

    # Pages

    async def list_pages(self) -> list[dict[str, Any]]:
        """Return the descriptors of all open targets."""
        session_id = self._require_active()
        return await self._transport.get(self._session_path(session_id, "json", "list"))

    async def create_page(self, url: str = DEFAULT_PAGE_URL) -> dict[str, Any]:
        """Open a new target at ``url``.

        The caller keeps the returned descriptor's id to close it later.
        """
        session_id = self._require_active()
        if not isinstance(url, str) or not url:
            raise ValidationError("url must be a non-empty string")
        return await self._transport.put(
            self._session_path(session_id, "json", "new"),
            params={"url": url},
        )

    async def close_page(self, target_id: str) -> bool:
        """Close the target with the given id."""
        session_id = self._require_active()
        if not isinstance(target_id, str) or not target_id.strip():
            raise ValidationError("target_id must be a non-empty string")
        await self._transport.delete(
            self._session_path(session_id, "json", "close", target_id)
        )
        return True

    # Context manager

    async def close(self) -> None:
        """Release the HTTP transport. Does not end the session."""
        await self._transport.close()

    async def __aenter__(self) -> "SessionManager":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        try:
            if self._config.end_on_exit and self._state is SessionState.ACTIVE:
                try:
                    await self.end_session()
                except TransportError as e:
                    logger.warning(f"Failed to end session {self.session_id} on exit: {e}")
        finally:
            await self.close()

    def __repr__(self) -> str:
        return f"<SessionManager state={self._state.value} session={self.session_id!r}>"
