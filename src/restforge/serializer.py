"""Query-string and request-body serialisation for call parameters.

Query strings follow the Rack/Rails convention the target backends parse:

* scalars become ``key=value``;
* sequences become one ``key[]=value`` entry per element, in order, with
  no de-duplication;
* nested mappings are flattened key by key without renaming, so
  ``{"filter": {"status": "open"}}`` serialises as ``status=open``.

Keys are emitted in the iteration order of the input mapping. Nothing here
mutates its input.

Example::

    >>> encode_query({"skills": ["Drumming", "Double Bass"]})
    'skills%5B%5D=Drumming&skills%5B%5D=Double+Bass'
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode


def query_pairs(params: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Flatten *params* into ordered ``(key, value)`` string pairs."""
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        _flatten(str(key), value, pairs)
    return pairs


def encode_query(params: Mapping[str, Any]) -> str:
    """Return the URL-encoded query string for *params* (no leading ``?``)."""
    return urlencode(query_pairs(params))


def encode_body(params: Mapping[str, Any]) -> dict[str, Any]:
    """Return a JSON-ready deep copy of *params* for a request body."""
    return {str(key): _to_json(value) for key, value in params.items()}


def _flatten(key: str, value: Any, pairs: list[tuple[str, str]]) -> None:
    if isinstance(value, Mapping):
        for sub_key, sub_value in value.items():
            _flatten(str(sub_key), sub_value, pairs)
    elif _is_sequence(value):
        for item in value:
            if isinstance(item, Mapping):
                _flatten(key, item, pairs)
            else:
                pairs.append((f"{key}[]", _scalar(item)))
    else:
        pairs.append((key, _scalar(value)))


def _scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _to_json(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(k): _to_json(v) for k, v in value.items()}
    if _is_sequence(value):
        return [_to_json(item) for item in value]
    return value


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple, set, frozenset))
