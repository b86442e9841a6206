"""Functions for manipulating query documents."""

from typing import Any, Optional, Sequence

from cqlm.expressions import BooleanOperator
from cqlm.keypaths import update_in
from cqlm.simplify import simplify


# Where an outer query keeps its filter.
FILTER_KEYPATH = ("query", "filter")


def combine(*clauses: Any) -> Any:
    """
    Combine filter clauses into a single clause, without piling up `and`s
    where they can be avoided.

        combine(None, a)   -> a
        combine(a, b, b)   -> ["and", a, b]
        combine()          -> ["and"]

    Absent (None) clauses are dropped before combining.
    """
    present = [clause for clause in clauses if clause is not None]
    return simplify([BooleanOperator.AND.value, *present])


combine_filter_clauses = combine


def add_filter_clause(query: Any, keypath: Sequence[Any], new_clause: Optional[Any]) -> Any:
    """
    Add an additional filter clause to `query` at `keypath`.

    If `new_clause` is None this is a no-op and `query` itself is returned.
    Otherwise the clause already at `keypath` (if any) is combined with
    `new_clause` and the result is written to a new document; `query` is
    not modified.

        add_filter_clause({"query": {}}, FILTER_KEYPATH, ["=", ["field-id", 10], 20])
        # -> {"query": {"filter": ["=", ["field-id", 10], 20]}}

    Raises:
        KeypathError: If any key before the last one in `keypath` is missing
    """
    if new_clause is None:
        return query
    return update_in(
        query,
        keypath,
        lambda existing: combine(existing, new_clause),
        missing_ok=True,
    )


__all__ = ["FILTER_KEYPATH", "combine", "combine_filter_clauses", "add_filter_clause"]
