"""HTTP JSON operation adapter.

Provides a zero-argument awaitable operation that fetches a URL and
resolves with the parsed JSON body. Transport errors, non-2xx responses,
and unparseable bodies all surface as exceptions, which the Invoker turns
into failure outcomes.
"""

import logging
import urllib.parse
from collections.abc import Mapping
from typing import Any

import httpx

logger = logging.getLogger(__name__)


def build_url(
    base_url: str,
    path: str = "",
    query: Mapping[str, Any] | None = None,
) -> str:
    """Construct a request URL from a base URL, a path, and query parameters.

    Args:
        base_url: Scheme and host, optionally with a base path
            (e.g., https://api.example.com/v1).
        path: Path appended to the base URL.
        query: Query parameters. None values are dropped; existing query
            parameters on the base URL are preserved.

    Returns:
        Absolute URL string.

    Raises:
        ValueError: If base_url is not an absolute http(s) URL.
    """
    parsed = urllib.parse.urlsplit(base_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"base_url must be an absolute http(s) URL, got {base_url!r}")

    full_path = parsed.path.rstrip("/")
    if path:
        full_path = f"{full_path}/{path.lstrip('/')}"

    params = urllib.parse.parse_qsl(parsed.query, keep_blank_values=True)
    if query:
        params.extend((key, str(value)) for key, value in query.items() if value is not None)

    return urllib.parse.urlunsplit(
        (parsed.scheme, parsed.netloc, full_path, urllib.parse.urlencode(params), "")
    )


class HttpJsonOperation:
    """Fetches a URL with GET and resolves with the decoded JSON body."""

    def __init__(
        self,
        url: str,
        timeout_seconds: float = 10.0,
        headers: Mapping[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize HTTP JSON operation.

        Args:
            url: Absolute URL to fetch on every invocation.
            timeout_seconds: Per-request timeout for the httpx client.
            headers: Extra request headers.
            transport: Optional httpx transport (used for testing).
        """
        if timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {timeout_seconds}")
        self.url = url
        self.client = httpx.AsyncClient(
            timeout=timeout_seconds,
            headers=dict(headers or {}),
            transport=transport,
        )
        self.request_count = 0

    async def __aenter__(self) -> "HttpJsonOperation":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.client.aclose()

    async def close(self) -> None:
        """Close the httpx client and clean up resources."""
        await self.client.aclose()

    async def __call__(self) -> Any:
        """Fetch the URL and return the parsed JSON body.

        Raises:
            httpx.HTTPError: On transport failure or non-2xx status.
            ValueError: If the body is not valid JSON.
        """
        self.request_count += 1
        logger.debug(f"GET {self.url} (request #{self.request_count})")

        response = await self.client.get(self.url)
        response.raise_for_status()

        try:
            return response.json()
        except ValueError as e:
            raise ValueError(f"Response from {self.url} is not valid JSON: {e}") from e
