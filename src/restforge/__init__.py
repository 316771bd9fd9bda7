"""restforge -- declarative generator of RESTful API client objects.

Describe a resource (name, nesting, singularity, namespace, id attribute,
custom actions) and get back an object whose async methods build the right
HTTP request, send it, and run the response through configurable hooks.

Typical use::

    import restforge

    api = restforge.configure(host="http://api.example.com/v1")
    users = api.generate("users", {"nest_under": api.generate("rooms")})

    async with api:
        await users.update({"roomId": 1, "id": 1, "user": {"email": "e@x.com"}})
        # PATCH http://api.example.com/v1/rooms/1/users/1

Modules:
    models: Pydantic descriptor and configuration models.
    serializer: Query-string and JSON body serialisation.
    resolver: URL path resolution from descriptors and call params.
    hooks: The hook chain and its default implementations.
    actions: Standard and custom action generation.
    factory: :class:`ResourceFactory` and :class:`ResourceClient`.
    transport: The transport protocol and the httpx implementation.
    config: JSON/YAML resource manifests.
    exceptions: Exception hierarchy.
    logs: Optional Rich debug logging.
"""

import logging

from restforge.exceptions import (
    AuthError,
    ConfigError,
    MissingParameterError,
    NotFoundError,
    ResponseError,
    RestforgeError,
    ServerError,
)
from restforge.factory import ResourceClient, ResourceFactory, configure
from restforge.hooks import Hooks, no_content_handler, raise_for_status
from restforge.models import (
    ActionDescriptor,
    FactoryConfig,
    HTTPMethod,
    ResourceDescriptor,
    ResourceOptions,
    Scope,
)
from restforge.transport import HttpxTransport, Transport

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ActionDescriptor",
    "AuthError",
    "ConfigError",
    "FactoryConfig",
    "HTTPMethod",
    "Hooks",
    "HttpxTransport",
    "MissingParameterError",
    "NotFoundError",
    "ResourceClient",
    "ResourceDescriptor",
    "ResourceFactory",
    "ResourceOptions",
    "ResponseError",
    "RestforgeError",
    "Scope",
    "ServerError",
    "Transport",
    "configure",
    "no_content_handler",
    "raise_for_status",
]
