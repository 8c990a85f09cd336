"""Walk a decoded JSON document along a path descriptor.

Array descent rule:
    Before each key is applied, if the current node is a JSON array the
    walk first moves to the array's first element. An empty array ends the
    walk with a :class:`PathNotFoundError`, as does a missing key or a key
    applied to a scalar.

    For ``{"assets": [{"url": "X"}]}`` the descriptor ``("assets", "url")``
    resolves to ``"X"``. Only arrays met *before* a key are descended; the
    value at the end of the walk is returned as-is, arrays included.
"""

from __future__ import annotations

from typing import Any, Sequence

from plugsync.errors import PathNotFoundError

JSONValue = Any


def resolve_path(
    document: JSONValue,
    descriptor: Sequence[str],
    path_name: str = "value",
    context: str = "",
) -> JSONValue:
    """Return the node at *descriptor* inside *document*.

    Args:
        document: A value produced by ``json.loads``.
        descriptor: Keys to follow, outermost first.
        path_name: Name used in the error, e.g. ``"version"``.
        context: Included in the error, typically the request URL.

    Raises:
        PathNotFoundError: If any step cannot be taken.
    """
    node = document
    for key in descriptor:
        if isinstance(node, list):
            if not node:
                raise PathNotFoundError(path_name, key, context)
            node = node[0]
        if not isinstance(node, dict) or key not in node:
            raise PathNotFoundError(path_name, key, context)
        node = node[key]
    return node
