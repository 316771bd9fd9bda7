"""Resource factory: the entry point that produces resource clients.

A :class:`ResourceFactory` holds the process-wide configuration (host,
hooks, ``fetch_opts``) and a transport. Each :meth:`~ResourceFactory.generate`
call builds an independent :class:`ResourceClient`; no registry is kept.

Example::

    import restforge

    api = restforge.configure(host="http://api.example.com/v1")
    rooms = api.generate("rooms")
    users = api.generate("users", {"nest_under": rooms},
                         [{"method": "post", "name": "login", "on": "collection"}])

    async with api:
        user = await users.get({"roomId": 1, "id": 7})
        token = await users.login({"email": "e@x.com", "password": "..."})
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Optional, Union

from restforge.actions import Action, CustomAction, action_descriptors, bind_actions
from restforge.hooks import Hooks
from restforge.models import FactoryConfig, ResourceDescriptor, ResourceOptions
from restforge.transport import HttpxTransport, Transport


class ResourceClient:
    """The generated client for one resource.

    Actions are reachable as attributes (``users.get``) and by name
    (``users["bulk_destroy"]``), which also covers names that are not
    valid Python identifiers.
    ``descriptor`` and ``actions`` are properties of the client, so custom
    actions cannot use those names (see
    :data:`~restforge.actions.RESERVED_NAMES`).
    """

    def __init__(self, descriptor: ResourceDescriptor, actions: dict[str, Action]) -> None:
        self._descriptor = descriptor
        self._actions = actions

    @property
    def descriptor(self) -> ResourceDescriptor:
        return self._descriptor

    @property
    def actions(self) -> dict[str, Action]:
        return dict(self._actions)

    def __getattr__(self, name: str) -> Action:
        actions = self.__dict__.get("_actions", {})
        try:
            return actions[name]
        except KeyError:
            raise AttributeError(
                f"{type(self).__name__} for {self.__dict__.get('_descriptor')!r} "
                f"has no action {name!r}"
            ) from None

    def __getitem__(self, name: str) -> Action:
        return self._actions[name]

    def __contains__(self, name: object) -> bool:
        return name in self._actions

    def __iter__(self) -> Iterator[str]:
        return iter(self._actions)

    def __repr__(self) -> str:
        return f"<ResourceClient {self._descriptor.name} actions={list(self._actions)}>"


class ResourceFactory:
    """Produces :class:`ResourceClient` objects sharing one configuration.

    Args:
        config: The validated factory configuration.
        transport: Where requests are sent. Defaults to a
            :class:`~restforge.transport.HttpxTransport` owned (and closed)
            by this factory.
    """

    def __init__(
        self,
        config: FactoryConfig,
        transport: Optional[Transport] = None,
    ) -> None:
        self._config = config
        self._hooks = Hooks.from_config(config)
        self._owns_transport = transport is None
        self._transport: Transport = transport if transport is not None else HttpxTransport()

    @property
    def config(self) -> FactoryConfig:
        return self._config

    @property
    def hooks(self) -> Hooks:
        return self._hooks

    @property
    def transport(self) -> Transport:
        return self._transport

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> ResourceFactory:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the transport if the factory created it."""
        if self._owns_transport and isinstance(self._transport, HttpxTransport):
            await self._transport.aclose()

    # ------------------------------------------------------------------ #
    # Generation
    # ------------------------------------------------------------------ #

    def generate(
        self,
        name: str,
        options: Optional[Union[ResourceOptions, Mapping[str, Any]]] = None,
        custom_actions: Optional[Iterable[CustomAction]] = None,
    ) -> ResourceClient:
        """Build a client for the resource *name*.

        Args:
            name: Path segment of the resource (``"users"``, ``"user"``).
            options: ``singular``, ``id_attribute``, ``namespace`` and
                ``nest_under`` (a :class:`ResourceClient` or
                :class:`ResourceDescriptor`), as a model or mapping.
            custom_actions: Extra actions, e.g. ``{"method": "delete",
                "name": "bulk_destroy", "on": "collection"}``.
        """
        descriptor = self.describe(name, options, custom_actions)
        return ResourceClient(
            descriptor, bind_actions(descriptor, self._config, self._hooks, self._transport)
        )

    def describe(
        self,
        name: str,
        options: Optional[Union[ResourceOptions, Mapping[str, Any]]] = None,
        custom_actions: Optional[Iterable[CustomAction]] = None,
    ) -> ResourceDescriptor:
        """Build the :class:`ResourceDescriptor` :meth:`generate` would use."""
        if not isinstance(options, ResourceOptions):
            options = ResourceOptions.model_validate(dict(options or {}))

        parent = options.nest_under
        if isinstance(parent, ResourceClient):
            parent = parent.descriptor
        if parent is not None and not isinstance(parent, ResourceDescriptor):
            raise TypeError(
                f"nest_under must be a ResourceClient or ResourceDescriptor, "
                f"got {type(parent).__name__}"
            )

        return ResourceDescriptor(
            name=name,
            singular=options.singular,
            id_attribute=options.id_attribute,
            namespace=options.namespace,
            nest_under=parent,
            actions=action_descriptors(options.singular, custom_actions),
        )


def configure(
    config: Optional[Union[FactoryConfig, Mapping[str, Any]]] = None,
    *,
    transport: Optional[Transport] = None,
    **kwargs: Any,
) -> ResourceFactory:
    """Create a :class:`ResourceFactory`.

    Accepts a :class:`~restforge.models.FactoryConfig`, a mapping (camelCase
    keys allowed) or keyword arguments; keyword arguments win over mapping
    keys.
    """
    if not isinstance(config, FactoryConfig):
        config = FactoryConfig.model_validate(
            {**_by_field_name(config or {}), **_by_field_name(kwargs)}
        )
    elif kwargs:
        config = FactoryConfig.model_validate(
            {**config.model_dump(), **_by_field_name(kwargs)}
        )
    return ResourceFactory(config, transport=transport)


def _by_field_name(data: Mapping[str, Any]) -> dict[str, Any]:
    # camelCase and snake_case spellings of one field must not both reach validation
    aliases = {
        field.alias: name
        for name, field in FactoryConfig.model_fields.items()
        if field.alias
    }
    return {aliases.get(key, key): value for key, value in data.items()}
