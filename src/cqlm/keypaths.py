"""
Copy-on-write access to nested query documents.

A keypath is an ordered sequence of keys, one per level:

    ("query", "filter")      -> document["query"]["filter"]
    ("query", "breakout", 0) -> document["query"]["breakout"][0]

Mapping levels are addressed by key, list/tuple levels by integer index.

Writes never touch the input. Each level along the path is copied, and
everything off the path is shared with the original document.

Lookups never fabricate structure: a key that does not resolve raises
KeypathError, with one exception. `update_in(..., missing_ok=True)` lets
the FINAL mapping key be absent, which is how "add a filter to a query
that has none yet" works.
"""

from collections.abc import Mapping
from typing import Any, Callable, Sequence

from cqlm.clauses import is_sequence


class KeypathError(LookupError):
    """Raised when a keypath does not resolve within a document."""

    def __init__(self, keypath: Sequence[Any], position: int, reason: str):
        self.keypath = tuple(keypath)
        self.position = position
        super().__init__(
            f"Keypath {list(self.keypath)!r} does not resolve at position {position} "
            f"(key {self.keypath[position]!r}): {reason}"
        )


_MISSING = object()


def _step(node: Any, key: Any, keypath: Sequence[Any], position: int) -> Any:
    if isinstance(node, Mapping):
        if key not in node:
            raise KeypathError(keypath, position, "no such key")
        return node[key]
    if is_sequence(node):
        if not isinstance(key, int) or isinstance(key, bool):
            raise KeypathError(keypath, position, f"sequence index must be an int, got {type(key).__name__}")
        if not -len(node) <= key < len(node):
            raise KeypathError(keypath, position, "index out of range")
        return node[key]
    raise KeypathError(keypath, position, f"cannot descend into {type(node).__name__}")


def _replace(node: Any, key: Any, value: Any) -> Any:
    if isinstance(node, Mapping):
        updated = dict(node)
        updated[key] = value
        return updated
    items = list(node)
    items[key] = value
    return tuple(items) if isinstance(node, tuple) else items


def get_in(document: Any, keypath: Sequence[Any], default: Any = _MISSING) -> Any:
    """
    Return the value at `keypath` within `document`.

    Args:
        document: Nested mapping/sequence structure
        keypath: Keys to follow, outermost first
        default: Returned instead of raising when the path does not resolve

    Raises:
        KeypathError: If the path does not resolve and no default is given
    """
    node = document
    for position, key in enumerate(keypath):
        try:
            node = _step(node, key, keypath, position)
        except KeypathError:
            if default is _MISSING:
                raise
            return default
    return node


def update_in(
    document: Any,
    keypath: Sequence[Any],
    fn: Callable[[Any], Any],
    missing_ok: bool = False,
) -> Any:
    """
    Return a new document with the value at `keypath` replaced by `fn(value)`.

    With `missing_ok=True`, an absent final mapping key is passed to `fn`
    as None and the result is stored under that key. Every other missing
    step still raises KeypathError.
    """
    keypath = tuple(keypath)
    if not keypath:
        return fn(document)

    # Resolve every parent strictly, remembering them for the rebuild.
    parents = [document]
    for position, key in enumerate(keypath[:-1]):
        parents.append(_step(parents[-1], key, keypath, position))

    last = len(keypath) - 1
    container = parents[-1]
    if missing_ok and isinstance(container, Mapping) and keypath[last] not in container:
        value = fn(None)
    else:
        value = fn(_step(container, keypath[last], keypath, last))

    for key, parent in zip(reversed(keypath), reversed(parents)):
        value = _replace(parent, key, value)
    return value


def assoc_in(document: Any, keypath: Sequence[Any], value: Any) -> Any:
    """Return a new document with `value` stored at `keypath`."""
    return update_in(document, keypath, lambda _: value, missing_ok=True)


__all__ = ["KeypathError", "get_in", "update_in", "assoc_in"]
