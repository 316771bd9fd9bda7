"""Transport layer: the single network suspension point of an action call.

Generated actions only talk to an object satisfying :class:`Transport`.
:class:`HttpxTransport` is the default, backed by :class:`httpx.AsyncClient`;
tests and callers with special needs (custom retry, timeouts, recording)
can supply their own.

The transport performs no retries and no error mapping. Network failures
(``httpx.ConnectError``, ``httpx.TimeoutException``, ...) propagate to the
caller unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional, Protocol, runtime_checkable

import httpx


@runtime_checkable
class Response(Protocol):
    """What the hook chain needs from a response object."""

    status_code: int

    def json(self) -> Any: ...


@runtime_checkable
class Transport(Protocol):
    """A fetch-like async callable.

    ``options`` are the factory's ``fetch_opts`` (minus ``headers``),
    passed through verbatim.
    """

    async def request(
        self,
        url: str,
        method: str,
        headers: Mapping[str, str],
        body: Optional[Any] = None,
        **options: Any,
    ) -> Response: ...


class HttpxTransport:
    """Default transport over :class:`httpx.AsyncClient`.

    Args:
        client: An existing client to send requests through. The transport
            does not close a client it was given.
        **client_kwargs: Used to create a client lazily on the first
            request when *client* is ``None`` (e.g. ``timeout=10``).

    Example::

        async with HttpxTransport(timeout=5) as transport:
            response = await transport.request(
                "https://api.example.com/users", "GET", {"Accept": "application/json"}
            )
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        **client_kwargs: Any,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._client_kwargs = client_kwargs

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> HttpxTransport:
        self._ensure_client()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    async def request(
        self,
        url: str,
        method: str,
        headers: Mapping[str, str],
        body: Optional[Any] = None,
        **options: Any,
    ) -> httpx.Response:
        """Send one request and return the fully read response.

        Args:
            url: Absolute URL, query string included.
            method: HTTP method (GET, POST, PUT, PATCH, DELETE).
            headers: Final request headers.
            body: JSON-serialisable body, or ``None`` to send none.
            **options: Extra :meth:`httpx.AsyncClient.request` keyword
                arguments (``timeout``, ``follow_redirects``, ...).
        """
        client = self._ensure_client()
        kwargs: dict[str, Any] = {"headers": headers, **options}
        if body is not None:
            kwargs["json"] = body
        return await client.request(method, url, **kwargs)

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(**self._client_kwargs)
            self._owns_client = True
        return self._client
