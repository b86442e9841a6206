"""
Generic traversal of query documents.

A query document is a tree built from three node shapes:
    - Sequence: list or tuple (clauses are sequences)
    - Mapping:  any Mapping; only its VALUES are children
    - Scalar:   anything else

`postwalk` visits every node depth-first, children before parents,
siblings left to right. It runs on an explicit stack, so deeply nested
documents do not hit the interpreter's recursion limit.

Built on it:
    - collect:    every clause matching a tag or tag set
    - rewrite:    one bottom-up substitution pass over matching clauses
    - rewrite_at: `rewrite` limited to the subtree at a keypath

IMPORTANT:
    `rewrite` is a SINGLE pass. The replacement returned for a clause is
    not examined again, even if it matches too. Callers that need a fixed
    point loop explicitly (see cqlm.simplify).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, List, Sequence

from cqlm.clauses import TagOrTags, clause_matcher, is_sequence
from cqlm.keypaths import update_in


class _Frame:
    """One node on the walk stack, with the walked values of its children so far."""

    __slots__ = ("node", "keys", "children", "walked")

    def __init__(self, node: Any):
        self.node = node
        if isinstance(node, Mapping):
            self.keys = list(node.keys())
            self.children = [node[k] for k in self.keys]
        elif is_sequence(node):
            self.keys = None
            self.children = list(node)
        else:
            self.keys = None
            self.children = []
        self.walked: List[Any] = []

    def pending(self) -> bool:
        return len(self.walked) < len(self.children)

    def next_child(self) -> Any:
        return self.children[len(self.walked)]

    def rebuild(self) -> Any:
        # Unchanged children mean an unchanged node: share it.
        if all(new is old for new, old in zip(self.walked, self.children)):
            return self.node
        if self.keys is not None:
            return dict(zip(self.keys, self.walked))
        if isinstance(self.node, tuple):
            return tuple(self.walked)
        return list(self.walked)


def postwalk(fn: Callable[[Any], Any], root: Any) -> Any:
    """
    Post-order transform of `root`.

    `fn` is called once per node, after all of that node's children have
    been walked, and receives the node rebuilt from the walked children.
    Its return value takes the node's place in the parent. The result of
    `fn` is never walked again.

    Containers whose children all come back identical are returned as the
    same object, so untouched parts of a document are shared, not copied.
    """
    stack = [_Frame(root)]
    while True:
        frame = stack[-1]
        if frame.pending():
            stack.append(_Frame(frame.next_child()))
            continue
        stack.pop()
        value = fn(frame.rebuild())
        if not stack:
            return value
        stack[-1].walked.append(value)


def collect(tag_or_tags: TagOrTags, root: Any) -> List[Any]:
    """
    Return every clause in `root` tagged with `tag_or_tags`, in post-order.

    Nested matches are all included, inner ones before the clause that
    contains them. Returns an empty list when nothing matches.

        # look for field-id clauses
        collect("field-id", {"query": {"filter": ["=", ["field-id", 10], 20]}})
        # -> [["field-id", 10]]

        # look for + or - clauses
        collect({"+", "-"}, ...)
    """
    match = clause_matcher(tag_or_tags)
    instances: List[Any] = []

    def _visit(node):
        if match(node):
            instances.append(node)
        return node

    postwalk(_visit, root)
    return instances


def rewrite(tag_or_tags: TagOrTags, root: Any, f: Callable[[Any], Any]) -> Any:
    """
    Replace every clause tagged with `tag_or_tags` by `f(clause)`, in one pass.

        rewrite("field-id", {"filter": ["=", ["field-id", 10], 100]}, lambda _: 200)
        # -> {"filter": ["=", 200, 100]}

    Clauses are visited bottom-up, so `f` receives a clause whose arguments
    have already been rewritten. Whatever `f` returns is left as is.
    """
    match = clause_matcher(tag_or_tags)
    return postwalk(lambda node: f(node) if match(node) else node, root)


def rewrite_at(
    keypath: Sequence[Any],
    tag_or_tags: TagOrTags,
    root: Any,
    f: Callable[[Any], Any],
) -> Any:
    """
    `rewrite` applied only to the subtree of `root` at `keypath`.

        rewrite_at(["filter"], "field-id",
                   {"filter": ["=", ["field-id", 10], 100], "breakout": [["field-id", 100]]},
                   lambda _: 200)
        # -> {"filter": ["=", 200, 100], "breakout": [["field-id", 100]]}

    Raises:
        KeypathError: If `keypath` does not resolve within `root`
    """
    return update_in(root, keypath, lambda subtree: rewrite(tag_or_tags, subtree, f))


__all__ = ["postwalk", "collect", "rewrite", "rewrite_at"]
