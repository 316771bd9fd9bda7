"""Exception hierarchy for restforge.

All library errors inherit from :class:`RestforgeError`. Failures raised by
the underlying transport (``httpx.ConnectError``, timeouts, DNS errors, ...)
are deliberately *not* part of this tree: they reach the caller unmodified.

Subclass hierarchy::

    RestforgeError
    +-- MissingParameterError   (id attribute absent from call params)
    +-- ResponseError           (non-2xx response, raised by the error hook)
    |   +-- AuthError           (401 / 403)
    |   +-- NotFoundError       (404)
    |   +-- ServerError         (5xx)
    +-- ConfigError             (bad factory config or resource manifest)
"""

from __future__ import annotations

from typing import Any, Optional


class RestforgeError(Exception):
    """Base exception for all restforge errors."""


class MissingParameterError(RestforgeError):
    """Raised when a path segment cannot be resolved from the call parameters.

    Raised synchronously by :func:`~restforge.resolver.resolve`, so the
    request never reaches the transport.

    Args:
        attribute: The parameter key that was expected (e.g. ``"id"`` or
            ``"roomId"``).
    """

    def __init__(self, attribute: str) -> None:
        super().__init__(f'You must provide "{attribute}" in params')
        self.attribute = attribute


class ResponseError(RestforgeError):
    """Raised when a response is classified as a failure.

    Args:
        message: Human-readable error description.
        response: The raw transport response, kept for inspection.
        data: The decoded response body, when it could be decoded.
    """

    def __init__(
        self,
        message: str,
        response: Any = None,
        data: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.response = response
        self.data = data

    @property
    def status_code(self) -> Optional[int]:
        """HTTP status of the failed response, or ``None`` without one."""
        return getattr(self.response, "status_code", None)


class AuthError(ResponseError):
    """Raised when the API rejects the credentials (HTTP 401 / 403)."""


class NotFoundError(ResponseError):
    """Raised when the API returns HTTP 404."""


class ServerError(ResponseError):
    """Raised when the API returns an HTTP 5xx server error."""


class ConfigError(RestforgeError):
    """Raised for configuration problems (missing host, invalid manifest)."""
