"""Canonical Pydantic models shared across all restforge modules.

The models fall into two groups:

**Descriptor models** -- immutable values describing the shape of a REST
resource and the actions generated for it:
    :class:`HTTPMethod`, :class:`Scope`, :class:`ActionDescriptor` and
    :class:`ResourceDescriptor`.

**Configuration models** -- validated from keyword arguments or plain
mappings supplied by callers:
    :class:`ResourceOptions` and :class:`FactoryConfig`.

Mapping input accepts both the snake_case field names and their camelCase
aliases (``idAttribute``, ``nestUnder``, ``paramsTransform``, ...), so a
configuration written for a JavaScript client can be reused verbatim.
"""

from __future__ import annotations

import enum
from typing import Any, Callable, Optional

import inflect
from pydantic import BaseModel, ConfigDict, Field, field_validator

_inflector = inflect.engine()


class HTTPMethod(str, enum.Enum):
    """HTTP methods an action can be declared with."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @property
    def is_read(self) -> bool:
        """Read-style verbs carry their payload in the query string."""
        return self is HTTPMethod.GET


class Scope(str, enum.Enum):
    """Whether an action addresses one instance or the resource as a whole."""

    MEMBER = "member"
    COLLECTION = "collection"


class ActionDescriptor(BaseModel):
    """One generated operation: verb, exposed name, scope and path suffix.

    Custom actions are usually given as ``{"method": "delete", "name":
    "bulk_destroy", "on": "collection"}``; their name doubles as the trailing
    path segment unless ``path_suffix`` says otherwise.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    method: HTTPMethod
    name: str = Field(min_length=1)
    on: Scope
    path_suffix: Optional[str] = None

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value

    @classmethod
    def custom(cls, value: Any) -> ActionDescriptor:
        """Build a custom action whose name is also its path suffix."""
        if isinstance(value, ActionDescriptor):
            if value.path_suffix is None:
                return value.model_copy(update={"path_suffix": value.name})
            return value
        data = dict(value)
        data.setdefault("path_suffix", data.get("name"))
        return cls.model_validate(data)


class ResourceDescriptor(BaseModel):
    """Immutable description of one REST resource's path shape.

    ``nest_under`` points at the parent descriptor only; children are never
    recorded on the parent, so the ancestor chain is a singly-linked list
    fixed at construction time.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    singular: bool = False
    id_attribute: str = Field(default="id", min_length=1)
    namespace: Optional[str] = None
    nest_under: Optional[ResourceDescriptor] = None
    actions: tuple[ActionDescriptor, ...] = ()

    @field_validator("name")
    @classmethod
    def _clean_name(cls, value: str) -> str:
        value = value.strip("/")
        if not value:
            raise ValueError("resource name must not be empty")
        return value

    @field_validator("namespace")
    @classmethod
    def _clean_namespace(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip("/") or None

    def ancestors(self) -> list[ResourceDescriptor]:
        """Return the nesting chain, outermost ancestor first."""
        chain: list[ResourceDescriptor] = []
        parent = self.nest_under
        while parent is not None:
            chain.append(parent)
            parent = parent.nest_under
        chain.reverse()
        return chain

    @property
    def param_key(self) -> str:
        """Key a nested child expects this resource's id under.

        ``rooms`` gives ``roomId``; with ``id_attribute="slug"`` it gives
        ``roomSlug``.
        """
        singular = _inflector.singular_noun(self.name) or self.name
        attr = self.id_attribute
        return f"{singular}{attr[:1].upper()}{attr[1:]}"


class ResourceOptions(BaseModel):
    """Per-resource options accepted by :meth:`ResourceFactory.generate`.

    ``nest_under`` may be a :class:`~restforge.factory.ResourceClient` or a
    :class:`ResourceDescriptor`; the factory unwraps clients.
    """

    model_config = ConfigDict(
        populate_by_name=True, extra="forbid", arbitrary_types_allowed=True
    )

    singular: bool = False
    id_attribute: str = Field(default="id", alias="idAttribute", min_length=1)
    namespace: Optional[str] = None
    nest_under: Optional[Any] = Field(default=None, alias="nestUnder")


class FactoryConfig(BaseModel):
    """Process-wide configuration shared by every generated resource client.

    Example::

        FactoryConfig(
            host="http://api.example.com/v1",
            before_success=lambda data: {**data, "decorated": True},
            fetch_opts={"timeout": 10},
        )
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    host: str
    params_transform: Optional[Callable[..., Any]] = Field(
        default=None, alias="paramsTransform"
    )
    before_success: Optional[Callable[..., Any]] = Field(
        default=None, alias="beforeSuccess"
    )
    before_error: Optional[Callable[..., Any]] = Field(
        default=None, alias="beforeError"
    )
    response_handler: Optional[Callable[..., Any]] = Field(
        default=None, alias="responseHandler"
    )
    fetch_opts: dict[str, Any] = Field(default_factory=dict, alias="fetchOpts")

    @field_validator("host")
    @classmethod
    def _clean_host(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("host must not be empty")
        return value
