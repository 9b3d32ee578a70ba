"""
Authenticated JSON transport for the remote browser API.

Wraps an ``httpx.AsyncClient`` with bearer-token auth and maps non-2xx
responses onto the error taxonomy in ``taurine_browser.errors``. The
transport never retries; that is decided by the caller.
"""

from __future__ import annotations

import json as json_module
import logging
from typing import Any, Optional

import httpx

from taurine_browser import __version__
from taurine_browser.config.defaults import DEFAULT_API_ORIGIN, DEFAULT_REQUEST_TIMEOUT
from taurine_browser.errors import ConfigurationError, TransportError, classify_status

logger = logging.getLogger(__name__)


def _decode_body(response: httpx.Response) -> Any:
    """Parse a response body as JSON, falling back to text."""
    if not response.content:
        return None
    try:
        return response.json()
    except (json_module.JSONDecodeError, UnicodeDecodeError):
        return response.text


class Transport:
    """Async HTTP transport with bearer-token authentication.

    Example:
        async with Transport(api_key="tk_live_...") as transport:
            data = await transport.post("/v1/sessions", json={"region": "us"})
    """

    def __init__(
        self,
        api_key: str,
        api_origin: str = DEFAULT_API_ORIGIN,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        *,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize Transport.

        Args:
            api_key: Bearer token sent with every request.
            api_origin: Base URL all request paths are appended to.
            timeout: Request timeout in seconds.
            client: Optional pre-built client. It is not closed by ``close()``.
            transport: Optional httpx transport for the owned client
                (e.g. ``httpx.MockTransport`` in tests).

        Raises:
            ConfigurationError: If the API key is empty.
        """
        if not api_key or not api_key.strip():
            raise ConfigurationError("An API key is required")

        self._api_key = api_key.strip()
        self._api_origin = api_origin.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client = client
        self._owns_client = client is None

    @property
    def api_origin(self) -> str:
        return self._api_origin

    @property
    def headers(self) -> dict[str, str]:
        """Headers attached to every request."""
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
            "User-Agent": f"taurine-browser/{__version__}",
        }

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            )
            self._owns_client = True
        return self._client

    def _url(self, path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        return f"{self._api_origin}{path}"

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Perform a request and return the parsed JSON body.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE).
            path: Path relative to the API origin.
            json: Optional JSON request body.
            params: Optional query parameters.

        Returns:
            Parsed JSON body, or None for an empty body.

        Raises:
            AuthError: On 401/403.
            NotFoundError: On 404/410.
            TransportError: On any other non-2xx status, network failure,
                or a 2xx body that is not JSON.
        """
        client = self._ensure_client()
        method = method.upper()
        url = self._url(path)

        logger.debug(f"{method} {url}")

        try:
            response = await client.request(
                method,
                url,
                json=json,
                params=params,
                headers=self.headers,
            )
        except httpx.HTTPError as e:
            raise TransportError(
                f"{method} {path} failed: {e.__class__.__name__}: {e}"
            ) from e

        logger.debug(f"{method} {url} -> {response.status_code}")

        body = _decode_body(response)

        if not response.is_success:
            raise classify_status(response.status_code, body, response.reason_phrase)

        if isinstance(body, str):
            raise TransportError(
                f"{method} {path} returned a non-JSON body",
                status_code=response.status_code,
                body=body,
            )

        return body

    async def get(self, path: str, *, params: Optional[dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(
        self,
        path: str,
        *,
        json: Any = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        return await self.request("POST", path, json=json, params=params)

    async def put(
        self,
        path: str,
        *,
        json: Any = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        return await self.request("PUT", path, json=json, params=params)

    async def delete(self, path: str, *, params: Optional[dict[str, Any]] = None) -> Any:
        return await self.request("DELETE", path, params=params)

    # Lifecycle

    async def close(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> "Transport":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"<Transport origin={self._api_origin!r}>"
