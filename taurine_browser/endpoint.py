"""
Debugging endpoint rewriting.

The remote browser reports its DevTools address as seen from inside its own
host, e.g. ``ws://127.0.0.1:9222/devtools/browser/<id>``. Clients reach it
through the public consumer gateway instead, scoped to the session:

    wss://<public_host>/v1/consumer/<session_id>/devtools/browser/<id>
"""

import ipaddress
from typing import Any
from urllib.parse import quote, urlsplit

from taurine_browser.config.defaults import CONSUMER_PATH_PREFIX
from taurine_browser.errors import EndpointFormatError, ValidationError

LOCAL_SCHEMES = ("ws", "wss")
LOCAL_HOSTNAMES = ("localhost", "0.0.0.0")


def _is_loopback(host: str) -> bool:
    if host in LOCAL_HOSTNAMES:
        return True
    try:
        return ipaddress.ip_address(host).is_loopback
    except ValueError:
        return False


def to_public_endpoint(local_address: Any, session_id: str, public_host: str) -> str:
    """Translate a local debugging address into the public session endpoint.

    Args:
        local_address: Address reported by the remote browser.
        session_id: Session the endpoint belongs to.
        public_host: Public routing host (no scheme, no path).

    Returns:
        Secure WebSocket URL routed through the consumer gateway.

    Raises:
        EndpointFormatError: If ``local_address`` is not a ws(s) loopback
            address with a path.
        ValidationError: If ``session_id`` or ``public_host`` is empty.
    """
    if not session_id:
        raise ValidationError("session_id must not be empty")
    if not public_host or "/" in public_host:
        raise ValidationError(f"public_host must be a bare host name, got {public_host!r}")

    if not isinstance(local_address, str) or not local_address.strip():
        raise EndpointFormatError(local_address, "expected a non-empty string")

    try:
        parts = urlsplit(local_address.strip())
        # Accessing .port validates it
        parts.port
    except ValueError as e:
        raise EndpointFormatError(local_address, str(e)) from e

    if parts.scheme.lower() not in LOCAL_SCHEMES:
        raise EndpointFormatError(local_address, f"unsupported scheme {parts.scheme!r}")

    host = (parts.hostname or "").lower()
    if not _is_loopback(host):
        raise EndpointFormatError(local_address, f"host {host!r} is not a loopback address")

    path = parts.path
    if not path or path == "/":
        raise EndpointFormatError(local_address, "missing debugger path")

    consumer_id = quote(session_id, safe="")
    endpoint = f"wss://{public_host}{CONSUMER_PATH_PREFIX}/{consumer_id}{path}"
    if parts.query:
        endpoint += f"?{parts.query}"
    return endpoint


__all__ = ["to_public_endpoint"]
