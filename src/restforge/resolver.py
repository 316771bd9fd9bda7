"""Path resolution for resource actions.

Turns a :class:`~restforge.models.ResourceDescriptor` plus one call's
parameters into a concrete URL path, consuming every identifying
parameter it substitutes into the path::

    /<ancestor>/<ancestorId>/.../[namespace/]<name>[/<id>][/<suffix>]

Ancestor ids are looked up under each ancestor's
:attr:`~restforge.models.ResourceDescriptor.param_key` (``roomId`` for
``rooms``); the resource's own id under its ``id_attribute``. Singular
resources never get an id segment. Resolution is a pure function: the
input mapping is copied, never modified.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import quote

from restforge.exceptions import MissingParameterError
from restforge.models import ResourceDescriptor, Scope


@dataclass(frozen=True)
class ResolvedPath:
    """Result of :func:`resolve`.

    Attributes:
        path: The URL path, always starting with ``/``.
        params: Call parameters left over once ids were consumed; these
            become the query string or request body.
    """

    path: str
    params: dict[str, Any] = field(default_factory=dict)


def resolve(
    descriptor: ResourceDescriptor,
    params: Optional[Mapping[str, Any]],
    scope: Scope,
    suffix: Optional[str] = None,
) -> ResolvedPath:
    """Resolve the URL path for one action call.

    Args:
        descriptor: The resource being addressed.
        params: The call parameters. Not modified.
        scope: ``MEMBER`` adds the resource id segment (non-singular
            resources only); ``COLLECTION`` does not.
        suffix: Optional trailing segment, used by custom actions.

    Returns:
        The path and the parameters that were not consumed.

    Raises:
        MissingParameterError: If an ancestor id or the member id is absent.
    """
    remaining = dict(params or {})
    segments: list[str] = []

    for ancestor in descriptor.ancestors():
        segments.extend(_own_segments(ancestor))
        if not ancestor.singular:
            segments.append(_take(remaining, ancestor.param_key))

    segments.extend(_own_segments(descriptor))
    if scope is Scope.MEMBER and not descriptor.singular:
        segments.append(_take(remaining, descriptor.id_attribute))
    if suffix:
        segments.append(suffix)

    return ResolvedPath(path="/" + "/".join(segments), params=remaining)


def _own_segments(descriptor: ResourceDescriptor) -> list[str]:
    if descriptor.namespace:
        return [descriptor.namespace, descriptor.name]
    return [descriptor.name]


def _take(params: dict[str, Any], key: str) -> str:
    value = params.pop(key, None)
    if value is None or value == "":
        raise MissingParameterError(key)
    return quote(str(value), safe="")
