"""Action generation: from declarative descriptors to callable operations.

Every resource gets the standard REST set (see :data:`STANDARD_ACTIONS`)
plus any custom actions it declares. :func:`action_descriptors` computes
that ordered set; :func:`bind_actions` turns it into :class:`Action`
callables closing over the resource descriptor, the factory config, the
hook chain and the transport.

Calling an action::

    users.update({"roomId": 1, "id": 1, "user": {"email": "e@x.com"}})

resolves the path right away (``PATCH /rooms/1/users/1``), so a missing id
raises :class:`~restforge.exceptions.MissingParameterError` before anything
is scheduled, and returns an awaitable that runs the remaining pipeline:
``params_transform`` -> serialisation -> transport -> ``before_error`` ->
``response_handler`` -> ``before_success``.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Iterable, Mapping
from typing import Any, Optional, Union

import httpx

from restforge.hooks import Hooks
from restforge.models import (
    ActionDescriptor,
    FactoryConfig,
    HTTPMethod,
    ResourceDescriptor,
    Scope,
)
from restforge.resolver import resolve
from restforge.serializer import encode_body, encode_query
from restforge.transport import Transport

logger = logging.getLogger(__name__)

DEFAULT_HEADERS: dict[str, str] = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}

STANDARD_ACTIONS: tuple[ActionDescriptor, ...] = (
    ActionDescriptor(method=HTTPMethod.GET, name="getCollection", on=Scope.COLLECTION),
    ActionDescriptor(method=HTTPMethod.GET, name="get_collection", on=Scope.COLLECTION),
    ActionDescriptor(method=HTTPMethod.GET, name="get", on=Scope.MEMBER),
    ActionDescriptor(method=HTTPMethod.POST, name="post", on=Scope.COLLECTION),
    ActionDescriptor(method=HTTPMethod.POST, name="create", on=Scope.COLLECTION),
    ActionDescriptor(method=HTTPMethod.PUT, name="put", on=Scope.MEMBER),
    ActionDescriptor(method=HTTPMethod.PATCH, name="patch", on=Scope.MEMBER),
    ActionDescriptor(method=HTTPMethod.PATCH, name="update", on=Scope.MEMBER),
    ActionDescriptor(method=HTTPMethod.DELETE, name="delete", on=Scope.MEMBER),
    ActionDescriptor(method=HTTPMethod.DELETE, name="destroy", on=Scope.MEMBER),
)
"""The REST action set every resource starts from, alias pairs included."""

_COLLECTION_ONLY = frozenset({"getCollection", "get_collection"})

RESERVED_NAMES = frozenset({"descriptor", "actions"})
"""Attribute names of :class:`~restforge.factory.ResourceClient` itself."""

CustomAction = Union[ActionDescriptor, Mapping[str, Any]]


def action_descriptors(
    singular: bool = False,
    custom_actions: Optional[Iterable[CustomAction]] = None,
) -> tuple[ActionDescriptor, ...]:
    """Return the ordered action set for a resource.

    Singular resources have no collection listing. A custom action named
    like a standard one replaces it in place; other custom actions are
    appended in declaration order. Names in :data:`RESERVED_NAMES` and
    names starting with an underscore are rejected.
    """
    actions: dict[str, ActionDescriptor] = {
        action.name: action
        for action in STANDARD_ACTIONS
        if not (singular and action.name in _COLLECTION_ONLY)
    }
    for raw in custom_actions or ():
        action = ActionDescriptor.custom(raw)
        if action.name in RESERVED_NAMES or action.name.startswith("_"):
            raise ValueError(f"action name {action.name!r} is reserved")
        actions[action.name] = action
    return tuple(actions.values())


class Action:
    """One generated operation of a resource client.

    Args:
        action: What to send: verb, scope and optional path suffix.
        resource: The resource the action belongs to.
        config: Factory configuration (host, ``fetch_opts``).
        hooks: The factory's hook chain.
        transport: Where requests are sent.
    """

    def __init__(
        self,
        action: ActionDescriptor,
        resource: ResourceDescriptor,
        config: FactoryConfig,
        hooks: Hooks,
        transport: Transport,
    ) -> None:
        self.action = action
        self.resource = resource
        self._config = config
        self._hooks = hooks
        self._transport = transport

    @property
    def name(self) -> str:
        return self.action.name

    @property
    def method(self) -> HTTPMethod:
        return self.action.method

    def __call__(
        self,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Awaitable[Any]:
        resolved = resolve(
            self.resource, params, self.action.on, self.action.path_suffix
        )
        return self._send(resolved.path, resolved.params, dict(headers or {}))

    def __repr__(self) -> str:
        return (
            f"<Action {self.resource.name}.{self.name} "
            f"{self.method.value} {self.action.on.value}>"
        )

    async def _send(
        self,
        path: str,
        params: dict[str, Any],
        headers: dict[str, str],
    ) -> Any:
        payload = await self._hooks.prepare(params)
        method = self.method
        url = f"{self._config.host}{path}"
        body: Optional[dict[str, Any]] = None

        if method.is_read:
            query = encode_query(payload)
            if query:
                url = f"{url}?{query}"
        elif payload or method is not HTTPMethod.DELETE:
            body = encode_body(payload)

        options = dict(self._config.fetch_opts)
        merged_headers = httpx.Headers(DEFAULT_HEADERS)
        merged_headers.update(options.pop("headers", None) or {})
        merged_headers.update(headers)

        logger.debug("%s %s", method.value, url)
        response = await self._transport.request(
            url, method.value, merged_headers, body, **options
        )
        logger.debug(
            "%s %s -> %s", method.value, url, getattr(response, "status_code", "?")
        )
        return await self._hooks.process(response)


def bind_actions(
    resource: ResourceDescriptor,
    config: FactoryConfig,
    hooks: Hooks,
    transport: Transport,
) -> dict[str, Action]:
    """Build the name -> :class:`Action` mapping for *resource*."""
    return {
        action.name: Action(action, resource, config, hooks, transport)
        for action in resource.actions
    }
