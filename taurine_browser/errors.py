"""
Error types for taurine-browser.

Every failure surfaced by the library is a subclass of ``TaurineError`` so
callers can catch broadly or branch on the specific kind. HTTP failures are
mapped onto the taxonomy by ``classify_status`` at the transport boundary.
"""

from typing import Any, Optional


class TaurineError(Exception):
    """Base class for all taurine-browser errors."""


class ConfigurationError(TaurineError):
    """Configuration loading, parsing or validation error."""

    pass


class TransportError(TaurineError):
    """HTTP or network failure not covered by a more specific error.

    Attributes:
        status_code: HTTP status, or None when no response was received.
        body: Parsed response body (dict/list/str) if any.
        message: Human readable message, extracted from the body when possible.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Any = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.body = body
        super().__init__(message)

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"HTTP {self.status_code}: {self.message}"


class AuthError(TransportError):
    """The API key was rejected (401/403)."""


class NotFoundError(TransportError):
    """The session or target is unknown or has expired (404/410)."""


class ValidationError(TaurineError, ValueError):
    """Malformed caller input, e.g. an empty target id."""


class StateError(TaurineError):
    """Operation is not valid in the manager's current lifecycle state."""


class RetryExhaustedError(TaurineError):
    """An operation kept failing until all retry attempts were used up."""

    def __init__(self, attempts: int, last_error: BaseException) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Operation failed after {attempts} attempt(s): {last_error}"
        )


class ActivationTimeoutError(TaurineError, TimeoutError):
    """A session never reached the active status before the deadline."""

    def __init__(
        self,
        elapsed: float,
        last_status: Optional[str],
        session_id: Optional[str] = None,
    ) -> None:
        self.elapsed = elapsed
        self.last_status = last_status
        self.session_id = session_id
        super().__init__(
            f"Session {session_id or '<unknown>'} not active after "
            f"{elapsed:.1f}s (last status: {last_status!r})"
        )


class EndpointFormatError(TaurineError, ValueError):
    """A debugging address did not have the expected local shape."""

    def __init__(self, address: Any, reason: str) -> None:
        self.address = address
        self.reason = reason
        super().__init__(f"Unexpected debugging address {address!r}: {reason}")


def _extract_message(body: Any, default: str) -> str:
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    elif isinstance(body, str) and body.strip():
        return body.strip()[:500]
    return default


def classify_status(
    status_code: int,
    body: Any = None,
    reason: str = "",
) -> TransportError:
    """Build the typed error for a non-2xx HTTP response.

    Args:
        status_code: HTTP status code.
        body: Parsed JSON body, or raw text when the body was not JSON.
        reason: HTTP reason phrase, used when the body carries no message.

    Returns:
        An AuthError, NotFoundError or TransportError instance.
    """
    message = _extract_message(body, reason or "request failed")

    if status_code in (401, 403):
        return AuthError(message, status_code=status_code, body=body)
    if status_code in (404, 410):
        return NotFoundError(message, status_code=status_code, body=body)
    return TransportError(message, status_code=status_code, body=body)


__all__ = [
    "TaurineError",
    "ConfigurationError",
    "TransportError",
    "AuthError",
    "NotFoundError",
    "ValidationError",
    "StateError",
    "RetryExhaustedError",
    "ActivationTimeoutError",
    "EndpointFormatError",
    "classify_status",
]
