"""
Clause recognition.

A clause is a sequence whose first element is a tag:

    ["=", ["field-id", 10], 20]
    ("count",)

Everything after the tag is an argument. These predicates are the only
place that decides what counts as a clause; the walker, the simplifier
and the query helpers all go through them.

Matching is defined on canonical tags, so trees written before and after
normalization match the same way.
"""

from typing import Any, Callable, Iterable, Union

from cqlm.tokens import is_token, normalize_token


TagOrTags = Union[str, Iterable[str]]


def is_sequence(x: Any) -> bool:
    """True for list/tuple nodes. Strings are scalars here, not sequences."""
    return isinstance(x, (list, tuple))


def is_clause(x: Any) -> bool:
    """
    True if `x` is a clause: a non-empty sequence with a tag in first position.

        is_clause(["count"])         -> True
        is_clause(["field-id", 10])  -> True
        is_clause([["field-id"], 1]) -> False
        is_clause("count")           -> False
    """
    return is_sequence(x) and len(x) > 0 and is_token(x[0])


def _canonical_tags(tag_or_tags: TagOrTags) -> frozenset:
    if is_token(tag_or_tags):
        return frozenset([normalize_token(tag_or_tags)])
    return frozenset(normalize_token(t) for t in tag_or_tags)


def clause_matcher(tag_or_tags: TagOrTags) -> Callable[[Any], bool]:
    """Build a one-argument predicate equivalent to `matches(tag_or_tags, x)`."""
    wanted = _canonical_tags(tag_or_tags)

    def _match(x: Any) -> bool:
        return is_clause(x) and normalize_token(x[0]) in wanted

    return _match


def matches(tag_or_tags: TagOrTags, x: Any) -> bool:
    """
    True if `x` is a clause tagged with `tag_or_tags`.

    Pass a single tag to match one kind of clause, or any collection of
    tags to match several:

        matches("count", ["count", 10])             -> True
        matches({"+", "-", "*", "/"}, ["+", 10, 20]) -> True
        matches("and", ["AND", a, b])               -> True
    """
    return clause_matcher(tag_or_tags)(x)


def clause_tag(clause: Any) -> str:
    """Canonical tag of `clause`."""
    return normalize_token(clause[0])


__all__ = ["TagOrTags", "is_sequence", "is_clause", "clause_matcher", "matches", "clause_tag"]
