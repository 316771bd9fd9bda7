"""Shared test fixtures for restforge.

Provides a fake API backed by :class:`httpx.MockTransport` that records
every request it receives, a recording transport for tests that inspect
the raw transport call, and factories wired to either of them.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from collections.abc import Mapping
from typing import Any, Callable, Optional

import httpx
import pytest

from restforge import HttpxTransport, ResourceFactory, configure

HOST = "http://api.example.com/v1"


# ---------------------------------------------------------------------------
# Fake API (network double)
# ---------------------------------------------------------------------------


@dataclass
class RecordedRequest:
    method: str
    url: str
    path: str
    query: str
    headers: dict[str, str]
    body: Any = None


@dataclass
class FakeAPI:
    """Routes ``(method, path)`` pairs to canned responses and records traffic.

    Unrouted requests get a 404 with a JSON error body.
    """

    routes: dict[tuple[str, str], tuple[int, Any]] = field(default_factory=dict)
    requests: list[RecordedRequest] = field(default_factory=list)

    def reply(self, method: str, path: str, status: int = 200, json: Any = None) -> None:
        self.routes[(method.upper(), path)] = (status, json)

    def handle(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.requests.append(
            RecordedRequest(
                method=request.method,
                url=str(request.url),
                path=request.url.path,
                query=request.url.query.decode(),
                headers=dict(request.headers),
                body=body,
            )
        )
        status, payload = self.routes.get(
            (request.method, request.url.path),
            (404, {"error": f"no route for {request.method} {request.url.path}"}),
        )
        if payload is None:
            return httpx.Response(status)
        return httpx.Response(status, json=payload)

    @property
    def last(self) -> RecordedRequest:
        assert self.requests, "no request was sent"
        return self.requests[-1]


# ---------------------------------------------------------------------------
# Recording transport (for raw transport-call assertions)
# ---------------------------------------------------------------------------


class RecordingTransport:
    """Transport double that records calls and returns a fixed response."""

    def __init__(self, response: Optional[httpx.Response] = None) -> None:
        self.response = response if response is not None else httpx.Response(200, json={})
        self.calls: list[dict[str, Any]] = []

    async def request(
        self,
        url: str,
        method: str,
        headers: Mapping[str, str],
        body: Optional[Any] = None,
        **options: Any,
    ) -> httpx.Response:
        self.calls.append(
            {"url": url, "method": method, "headers": headers, "body": body, "options": options}
        )
        return self.response


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def api() -> FakeAPI:
    return FakeAPI()


@pytest.fixture
def make_factory(api: FakeAPI) -> Callable[..., ResourceFactory]:
    """Build factories that talk to the :func:`api` fixture."""

    def _make(**kwargs: Any) -> ResourceFactory:
        client = httpx.AsyncClient(transport=httpx.MockTransport(api.handle))
        return configure(host=HOST, transport=HttpxTransport(client=client), **kwargs)

    return _make


@pytest.fixture
def factory(make_factory: Callable[..., ResourceFactory]) -> ResourceFactory:
    return make_factory()


@pytest.fixture
def recorder() -> RecordingTransport:
    return RecordingTransport()
