"""
taurine-browser: client for remote browser automation sessions.

Creates a remote browser session, waits for it to become active, and hands
out a public debugging endpoint that CDP tooling (Playwright, Puppeteer,
raw websockets) can connect to.

Basic usage:
    from taurine_browser import SessionManager

    async with SessionManager(api_key="tk_live_...") as manager:
        await manager.create_session({"region": "us-central", "os": "linux"})
        ws_url = await manager.get_browser_cdp_url()
        # browser = await playwright.chromium.connect_over_cdp(ws_url)

Errors:
    from taurine_browser import ActivationTimeoutError, RetryExhaustedError

    try:
        await manager.create_session()
    except RetryExhaustedError as e:
        print(f"creation failed {e.attempts} times: {e.last_error}")
    except ActivationTimeoutError as e:
        print(f"still {e.last_status} after {e.elapsed:.0f}s")
"""

__version__ = "0.1.0"
__license__ = "MIT"

from taurine_browser.errors import (
    ActivationTimeoutError,
    AuthError,
    ConfigurationError,
    EndpointFormatError,
    NotFoundError,
    RetryExhaustedError,
    StateError,
    TaurineError,
    TransportError,
    ValidationError,
    classify_status,
)

from taurine_browser.models import (
    BrowserInfo,
    Session,
    SessionState,
    SessionStatus,
    TargetInfo,
)

from taurine_browser.retry import (
    BackoffStrategy,
    RetryConfig,
    retry,
    with_retry,
)

from taurine_browser.config import (
    ActivationOptions,
    RetryOptions,
    TaurineConfig,
    load_config,
)

from taurine_browser.activation import ActivationPoller, await_active
from taurine_browser.endpoint import to_public_endpoint
from taurine_browser.transport import Transport
from taurine_browser.manager import SessionManager

__all__ = [
    "__version__",
    "__license__",
    # Errors
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
    # Models
    "Session",
    "SessionState",
    "SessionStatus",
    "TargetInfo",
    "BrowserInfo",
    # Retry
    "BackoffStrategy",
    "RetryConfig",
    "retry",
    "with_retry",
    # Config
    "TaurineConfig",
    "RetryOptions",
    "ActivationOptions",
    "load_config",
    # Components
    "ActivationPoller",
    "await_active",
    "to_public_endpoint",
    "Transport",
    "SessionManager",
]
