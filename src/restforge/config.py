"""Resource manifests: declare a whole API in JSON or YAML.

A manifest lists the host, default ``fetch_opts`` and every resource with
its options and custom actions::

    host: http://api.example.com/v1
    fetch_opts:
      timeout: 10
    resources:
      - name: rooms
      - name: users
        nest_under: rooms
        actions:
          - {method: post, name: login, on: collection}

* :func:`load_manifest` -- read and validate a manifest file (or mapping).
* :func:`resolve_host` -- pick the effective host by precedence.
* :func:`build_resources` -- turn a manifest into a factory and clients.

Host precedence (highest wins): explicit ``host`` argument, the
``RESTFORGE_HOST`` environment variable, the manifest's ``host`` key.

``nest_under`` refers to the ``key`` of a resource declared *earlier* in
the list (``key`` defaults to ``name``), so manifest nesting is acyclic by
construction.
"""

from __future__ import annotations

import json
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from restforge.exceptions import ConfigError
from restforge.factory import ResourceClient, ResourceFactory, configure
from restforge.models import ActionDescriptor
from restforge.transport import Transport

ENV_HOST = "RESTFORGE_HOST"


class _ManifestLoader(yaml.SafeLoader):
    """SafeLoader that reads only true/false as booleans.

    YAML 1.1 also turns on/off/yes/no into booleans, which breaks the
    ``on`` key of action entries.
    """


_ManifestLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:bool"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
_ManifestLoader.add_implicit_resolver(
    "tag:yaml.org,2002:bool",
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


class ResourceSpec(BaseModel):
    """One resource entry of a manifest."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    name: str = Field(min_length=1)
    key: Optional[str] = None
    singular: bool = False
    id_attribute: str = Field(default="id", alias="idAttribute", min_length=1)
    namespace: Optional[str] = None
    nest_under: Optional[str] = Field(default=None, alias="nestUnder")
    actions: list[ActionDescriptor] = Field(default_factory=list)

    @property
    def registry_key(self) -> str:
        return self.key or self.name


class Manifest(BaseModel):
    """A validated resource manifest."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    host: Optional[str] = None
    fetch_opts: dict[str, Any] = Field(default_factory=dict, alias="fetchOpts")
    resources: list[ResourceSpec] = Field(default_factory=list)


def load_manifest(source: Union[str, Path, Mapping[str, Any]]) -> Manifest:
    """Load and validate a manifest.

    Args:
        source: Path to a ``.json``/``.yaml``/``.yml`` file, or an
            already-parsed mapping.

    Raises:
        ConfigError: If the file cannot be read or parsed, or the content
            does not validate.
    """
    if isinstance(source, Mapping):
        raw = dict(source)
    else:
        raw = _load_file(Path(source))

    try:
        return Manifest.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid resource manifest: {exc}") from exc


def resolve_host(manifest: Manifest, host: Optional[str] = None) -> str:
    """Return the effective host (argument > environment > manifest)."""
    for candidate in (host, os.environ.get(ENV_HOST), manifest.host):
        if candidate:
            return candidate
    raise ConfigError(
        f"No host configured: pass host=..., set {ENV_HOST}, or add 'host' to the manifest"
    )


def build_resources(
    manifest: Manifest,
    *,
    host: Optional[str] = None,
    transport: Optional[Transport] = None,
    **hooks: Any,
) -> tuple[ResourceFactory, dict[str, ResourceClient]]:
    """Create a factory and one client per manifest resource.

    Args:
        manifest: The validated manifest.
        host: Overrides the environment and manifest host.
        transport: Passed to the factory.
        **hooks: Hook functions (``params_transform``, ``before_success``,
            ``before_error``, ``response_handler``).

    Returns:
        The factory and a mapping of resource key to client, in manifest
        order.

    Raises:
        ConfigError: On a missing host, a duplicate key, a
            ``nest_under`` that does not name an earlier resource, or a
            reserved action name.
    """
    try:
        factory = configure(
            host=resolve_host(manifest, host),
            fetch_opts=manifest.fetch_opts,
            transport=transport,
            **hooks,
        )
    except ValidationError as exc:
        raise ConfigError(f"Invalid factory configuration: {exc}") from exc

    clients: dict[str, ResourceClient] = {}
    for spec in manifest.resources:
        key = spec.registry_key
        if key in clients:
            raise ConfigError(f"Duplicate resource key in manifest: {key!r}")

        parent = None
        if spec.nest_under is not None:
            parent = clients.get(spec.nest_under)
            if parent is None:
                raise ConfigError(
                    f"Resource {key!r} is nested under {spec.nest_under!r}, "
                    "which is not declared before it"
                )

        try:
            clients[key] = factory.generate(
                spec.name,
                {
                    "singular": spec.singular,
                    "id_attribute": spec.id_attribute,
                    "namespace": spec.namespace,
                    "nest_under": parent,
                },
                spec.actions,
            )
        except ValueError as exc:
            raise ConfigError(f"Invalid resource {key!r}: {exc}") from exc
    return factory, clients


def _load_file(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise ConfigError(f"Manifest file not found: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read manifest {path}: {exc}") from exc

    if not content.strip():
        raise ConfigError(f"Manifest file is empty: {path}")

    suffix = path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse *content* as JSON or YAML, JSON first unless hinted as YAML."""
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise ConfigError(f"Invalid JSON: {exc}") from exc
            json_error = exc
        else:
            return _require_mapping(result)

    try:
        result = yaml.load(content, Loader=_ManifestLoader)
    except yaml.YAMLError as exc:
        msg = "Failed to parse manifest as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise ConfigError(msg) from exc
    return _require_mapping(result)


def _require_mapping(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise ConfigError(f"Manifest must be a JSON/YAML object (got {kind})")
    return result
