"""Hook chain applied to outgoing parameters and incoming responses.

Four single-argument hooks run at fixed points of every action call:

1. ``params_transform(params)`` -- after path resolution, before the
   remaining parameters are serialised.
2. ``before_error(response)`` -- receives the raw transport response and
   decides whether it is a failure. It raises to reject the call and
   returns the response (or a replacement) to let it through.
3. ``response_handler(response)`` -- decodes the response body.
4. ``before_success(data)`` -- post-processes the decoded payload.

Each hook runs at most once per call. A hook may return an awaitable, in
which case it is awaited before the next stage runs. Unset hooks fall back
to the defaults in this module, so call sites never branch on presence.
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any, Callable

from restforge.exceptions import AuthError, NotFoundError, ResponseError, ServerError

if TYPE_CHECKING:
    from restforge.models import FactoryConfig


def identity(value: Any) -> Any:
    return value


def decode_json(response: Any) -> Any:
    """Default response handler: decode the body as JSON, unconditionally."""
    return response.json()


def no_content_handler(response: Any) -> Any:
    """Response handler that maps ``204 No Content`` to an empty dict."""
    if response.status_code == 204:
        return {}
    return response.json()


def raise_for_status(response: Any) -> Any:
    """Default error hook: let 2xx through, raise for everything else."""
    if 200 <= response.status_code < 300:
        return response
    raise error_for_response(response)


def error_for_response(response: Any) -> ResponseError:
    """Build the typed :class:`ResponseError` for a failed *response*.

    The message is ``HTTP <status>: <detail>``, where the detail comes from
    a ``message``, ``error`` or ``detail`` field of a JSON body and falls
    back to the reason phrase.
    """
    status = response.status_code
    data = None
    detail = ""
    try:
        data = response.json()
    except ValueError:
        pass
    if isinstance(data, Mapping):
        detail = str(data.get("message") or data.get("error") or data.get("detail") or "")
    if not detail:
        detail = getattr(response, "reason_phrase", "") or ""

    message = f"HTTP {status}: {detail}" if detail else f"HTTP {status}"

    exc_type: type[ResponseError] = ResponseError
    if status in (401, 403):
        exc_type = AuthError
    elif status == 404:
        exc_type = NotFoundError
    elif status >= 500:
        exc_type = ServerError
    return exc_type(message, response=response, data=data)


@dataclass(frozen=True)
class Hooks:
    """The configured hook functions, with defaults filled in.

    Built once per factory and shared read-only by every generated action.
    """

    params_transform: Callable[[Any], Any] = identity
    before_error: Callable[[Any], Any] = raise_for_status
    response_handler: Callable[[Any], Any] = decode_json
    before_success: Callable[[Any], Any] = identity

    @classmethod
    def from_config(cls, config: FactoryConfig) -> Hooks:
        overrides = {
            f.name: getattr(config, f.name)
            for f in fields(cls)
            if getattr(config, f.name) is not None
        }
        return cls(**overrides)

    async def prepare(self, params: dict[str, Any]) -> Any:
        """Run the outgoing transform on the remaining call parameters."""
        return await _settle(self.params_transform(params))

    async def process(self, response: Any) -> Any:
        """Classify, decode and post-process a transport response."""
        checked = await _settle(self.before_error(response))
        if checked is None:
            # Guard-style error hooks only raise; keep the original response.
            checked = response
        data = await _settle(self.response_handler(checked))
        return await _settle(self.before_success(data))


async def _settle(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value
