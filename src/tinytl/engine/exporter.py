"""JSON export of template contexts."""

from typing import Any

import msgspec

from tinytl.values import to_builtin, to_context


def to_json(context: Any) -> str:
    """Serialize a context (a `Map` or plain dict data) to compact JSON.

    Keys keep their insertion order; strings are escaped by msgspec.

    Raises:
        EvaluationError: If the root is not a map, or the context holds
            anything other than strings, lists and maps.

    Example:
        >>> to_json({"name": "arthur", "items": ["a", "b"]})
        '{"name":"arthur","items":["a","b"]}'
    """
    return msgspec.json.encode(to_builtin(to_context(context))).decode("utf-8")
