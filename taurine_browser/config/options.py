"""
Configuration options classes for taurine-browser.

This module provides strongly-typed option classes for the session manager
with validation and type checking.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from taurine_browser.retry import BackoffStrategy

from .defaults import (
    DEFAULT_ACTIVATION_INTERVAL,
    DEFAULT_ACTIVATION_TIMEOUT,
    DEFAULT_API_ORIGIN,
    DEFAULT_CLEANUP_ON_TIMEOUT,
    DEFAULT_DEBUG_HOST,
    DEFAULT_END_ON_EXIT,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_BACKOFF,
    DEFAULT_RETRY_BASE_DELAY,
    DEFAULT_RETRY_MAX_DELAY,
)


class RetryOptions(BaseModel):
    """Session creation retry options."""

    attempts: int = Field(DEFAULT_RETRY_ATTEMPTS, ge=1, description="Maximum attempts")
    base_delay: float = Field(
        DEFAULT_RETRY_BASE_DELAY, ge=0, description="Base backoff delay in seconds"
    )
    backoff: BackoffStrategy = Field(
        BackoffStrategy(DEFAULT_RETRY_BACKOFF), description="Backoff strategy"
    )
    max_delay: float = Field(
        DEFAULT_RETRY_MAX_DELAY, ge=0, description="Upper bound for a single delay"
    )


class ActivationOptions(BaseModel):
    """Activation polling options."""

    timeout: float = Field(
        DEFAULT_ACTIVATION_TIMEOUT, ge=0, description="Activation deadline in seconds"
    )
    interval: float = Field(
        DEFAULT_ACTIVATION_INTERVAL, gt=0, description="Seconds between status polls"
    )
    cleanup_on_timeout: bool = Field(
        DEFAULT_CLEANUP_ON_TIMEOUT,
        description="End the remote session when activation fails",
    )


class TaurineConfig(BaseModel):
    """Main configuration class for a SessionManager."""

    api_key: Optional[str] = Field(None, description="Bearer token for the API")
    api_origin: str = Field(DEFAULT_API_ORIGIN, description="API origin URL")
    debug_host: str = Field(
        DEFAULT_DEBUG_HOST, description="Public host for debugging endpoints"
    )
    request_timeout: float = Field(
        DEFAULT_REQUEST_TIMEOUT, gt=0, description="HTTP request timeout in seconds"
    )
    end_on_exit: bool = Field(
        DEFAULT_END_ON_EXIT,
        description="End the active session when leaving an async with block",
    )
    retry: RetryOptions = Field(
        default_factory=RetryOptions, description="Creation retry options"
    )
    activation: ActivationOptions = Field(
        default_factory=ActivationOptions, description="Activation polling options"
    )

    @field_validator("api_origin")
    @classmethod
    def strip_origin(cls, v: str) -> str:
        """Drop trailing slashes so paths can be appended directly."""
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"api_origin must be an http(s) URL, got {v!r}")
        return v

    @field_validator("debug_host")
    @classmethod
    def check_debug_host(cls, v: str) -> str:
        v = v.strip()
        if not v or "/" in v:
            raise ValueError(f"debug_host must be a bare host name, got {v!r}")
        return v

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TaurineConfig":
        """Create configuration from dictionary."""
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary (API key excluded)."""
        return self.model_dump(mode="json", exclude_none=True, exclude={"api_key"})

    def __repr__(self) -> str:
        key = "***" if self.api_key else None
        return (
            f"TaurineConfig(api_key={key!r}, api_origin={self.api_origin!r}, "
            f"debug_host={self.debug_host!r})"
        )
