"""Dynamic value model for template contexts.

A value is one of three frozen variants:

  - `Scalar` - a string
  - `List`   - an ordered tuple of values
  - `Map`    - a str -> value mapping, insertion ordered

Contexts are `Map` instances. Plain Python data (str, list/tuple, dict) is
converted with `to_value`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Optional, Sequence, Tuple, Union

import msgspec

from tinytl.errors import EvaluationError


class Scalar(msgspec.Struct, frozen=True, tag="scalar"):
    """String leaf value."""

    value: str = ""

    def as_scalar(self) -> Optional["Scalar"]:
        return self

    def as_list(self) -> Optional["List"]:
        return None

    def as_map(self) -> Optional["Map"]:
        return None


class List(msgspec.Struct, frozen=True, tag="list"):
    """Ordered sequence of values."""

    items: Tuple["Value", ...] = ()

    def as_scalar(self) -> Optional[Scalar]:
        return None

    def as_list(self) -> Optional["List"]:
        return self

    def as_map(self) -> Optional["Map"]:
        return None

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)


class Map(msgspec.Struct, frozen=True, tag="map"):
    """Mapping from names to values. Never mutated after construction."""

    entries: Dict[str, "Value"] = msgspec.field(default_factory=dict)

    def as_scalar(self) -> Optional[Scalar]:
        return None

    def as_list(self) -> Optional[List]:
        return None

    def as_map(self) -> Optional["Map"]:
        return self

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def get(self, key: str) -> Optional["Value"]:
        return self.entries.get(key)

    def bind(self, name: str, value: "Value") -> "Map":
        """Return a shadow map with `name` bound to `value`.

        The receiver is left untouched; the new map shares child values,
        which are frozen.
        """
        entries = dict(self.entries)
        entries[name] = value
        return Map(entries)


Value = Union[Scalar, List, Map]


def to_value(obj: Any) -> Value:
    """Convert plain Python data into a `Value` tree.

    Accepts str, list/tuple, and mappings with str keys. Existing values are
    checked and returned unchanged.

    Raises:
        EvaluationError: If `obj` (or anything nested in it) has another type.
    """
    if isinstance(obj, (Scalar, List, Map)):
        _check(obj)
        return obj
    if isinstance(obj, str):
        return Scalar(obj)
    if isinstance(obj, (list, tuple)):
        return List(tuple(to_value(item) for item in obj))
    if isinstance(obj, Mapping):
        entries: dict[str, Value] = {}
        for key, item in obj.items():
            if not isinstance(key, str):
                raise EvaluationError("invalid type")
            entries[key] = to_value(item)
        return Map(entries)
    raise EvaluationError("invalid type")


def _check(value: Any) -> None:
    # Structs are not type-checked on construction.
    if isinstance(value, Scalar):
        if not isinstance(value.value, str):
            raise EvaluationError("invalid type")
    elif isinstance(value, List):
        for item in value.items:
            _check(item)
    elif isinstance(value, Map):
        for key, item in value.entries.items():
            if not isinstance(key, str):
                raise EvaluationError("invalid type")
            _check(item)
    else:
        raise EvaluationError("invalid type")


def to_context(obj: Any) -> Map:
    """Convert `obj` to a root context, which must be a map."""
    if obj is None:
        return Map()
    value = to_value(obj)
    context = value.as_map()
    if context is None:
        raise EvaluationError("context must be a map")
    return context


def resolve(context: Map, path: Sequence[str]) -> Value:
    """Resolve a dotted path like ('user', 'name') against `context`.

    Intermediate segments must exist and hold maps. A missing final segment
    resolves to a fresh empty scalar.
    """
    if not path:
        raise EvaluationError("empty reference")

    current: Map = context
    for segment in path[:-1]:
        value = current.get(segment)
        if value is None:
            raise EvaluationError(f"parameter '{segment}' not found")
        next_map = value.as_map()
        if next_map is None:
            raise EvaluationError(f"parameter '{segment}' is not a map")
        current = next_map

    value = current.get(path[-1])
    if value is None:
        return Scalar("")
    return value


def truthy(value: Value) -> bool:
    """Truthiness used by #if conditions: non-empty string, list or map."""
    if isinstance(value, Scalar):
        return value.value != ""
    if isinstance(value, (List, Map)):
        return len(value) > 0
    raise EvaluationError("invalid type")


def to_builtin(value: Value) -> Any:
    """Convert a value tree back into str / list / dict."""
    if isinstance(value, Scalar):
        return value.value
    if isinstance(value, List):
        return [to_builtin(item) for item in value.items]
    if isinstance(value, Map):
        return {key: to_builtin(item) for key, item in value.entries.items()}
    raise EvaluationError("invalid type")
