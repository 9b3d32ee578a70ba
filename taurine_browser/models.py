"""
Core data models for taurine-browser.

This module defines the data structures exchanged with the remote browser
service: sessions, their lifecycle state, and target descriptors.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class SessionStatus(str, Enum):
    """Well-known session statuses reported by the service.

    The service may report other values; ``Session.status`` is kept as a
    plain string so unknown statuses pass through untouched.
    """

    PENDING = "pending"
    ACTIVE = "active"
    ERROR = "error"
    TERMINATED = "terminated"


class SessionState(str, Enum):
    """Lifecycle state of a SessionManager.

    - NO_SESSION: nothing owned, creation allowed
    - CREATING: create request in flight (with retries)
    - AWAITING_ACTIVATION: session created, polling for ``active``
    - ACTIVE: guarded operations allowed
    - ENDED: previous session ended explicitly, creation allowed
    """

    NO_SESSION = "no_session"
    CREATING = "creating"
    AWAITING_ACTIVATION = "awaiting_activation"
    ACTIVE = "active"
    ENDED = "ended"


class Session(BaseModel):
    """A provisioned remote browser session.

    Unknown keys returned by the service are kept and exposed via
    ``metadata``.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    session_id: str = Field(..., alias="sessionId", min_length=1)
    status: str = Field(default=SessionStatus.PENDING.value)

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE.value

    @property
    def metadata(self) -> dict[str, Any]:
        """Extra fields returned by the service."""
        return dict(self.model_extra or {})

    @classmethod
    def from_response(
        cls,
        data: Any,
        session_id: Optional[str] = None,
    ) -> "Session":
        """Build a Session from a service response.

        Status responses may omit the id; ``session_id`` fills it in.
        The service has also been seen to use ``id`` instead of
        ``sessionId``.

        Args:
            data: Parsed JSON object.
            session_id: Fallback id when the payload does not carry one.

        Returns:
            Session instance.
        """
        if not isinstance(data, dict):
            raise TypeError(f"Expected a JSON object, got {type(data).__name__}")
        payload = dict(data)
        if "sessionId" not in payload:
            if "session_id" in payload:
                payload["sessionId"] = payload.pop("session_id")
            elif "id" in payload:
                payload["sessionId"] = payload.pop("id")
            elif session_id is not None:
                payload["sessionId"] = session_id
        return cls.model_validate(payload)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class TargetInfo(BaseModel):
    """Descriptor of a browsing target (tab) inside a session."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    target_id: str = Field(..., alias="id")
    type: str = "page"
    url: str = ""
    title: str = ""
    web_socket_debugger_url: Optional[str] = Field(
        default=None, alias="webSocketDebuggerUrl"
    )

    @classmethod
    def from_descriptor(cls, data: dict[str, Any]) -> "TargetInfo":
        """Parse a ``/json/new`` or ``/json/list`` descriptor."""
        payload = dict(data)
        if "id" not in payload and "targetId" in payload:
            payload["id"] = payload.pop("targetId")
        return cls.model_validate(payload)


class BrowserInfo(BaseModel):
    """Remote browser ``/json/version`` payload."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    browser: str = Field(default="", alias="Browser")
    protocol_version: str = Field(default="", alias="Protocol-Version")
    user_agent: str = Field(default="", alias="User-Agent")
    v8_version: str = Field(default="", alias="V8-Version")
    webkit_version: str = Field(default="", alias="WebKit-Version")
    web_socket_debugger_url: Optional[str] = Field(
        default=None, alias="webSocketDebuggerUrl"
    )


__all__ = [
    "SessionStatus",
    "SessionState",
    "Session",
    "TargetInfo",
    "BrowserInfo",
]
