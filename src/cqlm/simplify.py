"""
Filter Simplifier: canonical form for compound `and`/`or`/`not` filters.

Rewrite rules, in precedence order. The first rule that applies fires,
and evaluation restarts from rule 1 on the result:

    1. Singleton unwrap     ["and", X]                -> X
    2. Flatten              ["and", A, ["and", B, C]] -> ["and", A, B, C]
    3. Deduplicate          ["or", A, A, B]           -> ["or", A, B]
    4. Double negation      ["not", ["not", A]]       -> A

When no rule applies the filter is canonical and is returned.

Only the boolean skeleton at the top of the filter is rewritten. Leaf
clauses are opaque, and arguments of a compound that are themselves
compounds of a DIFFERENT operator are left as they are.

Every rule removes at least one node from the filter tree, so the number
of steps is bounded by the tree's size. The loop enforces that bound and
raises SimplificationError rather than spin if it is ever exceeded.
"""

from collections.abc import Mapping
from typing import Any, List, Optional

from cqlm.expressions import (
    FilterExpression,
    CompoundFilter,
    NotFilter,
    classify,
    to_clause,
)
from cqlm.clauses import is_sequence
from cqlm.walk import postwalk


class SimplificationError(RuntimeError):
    """Raised when simplification fails to reach a fixed point within its bound."""
    pass


def _tree_size(clause: Any) -> int:
    count = 0

    def _count(node):
        nonlocal count
        count += 1
        return node

    postwalk(_count, clause)
    return count


def _structural_key(arg: Any) -> Any:
    """
    Type-strict equality key for a filter argument.

    Scalars compare equal only when their types match as well, so 1, 1.0
    and True stay distinct arguments. Sequence keys carry list vs tuple.
    """

    def _key(node):
        if isinstance(node, Mapping):
            return ("mapping", dict(node))
        if is_sequence(node):
            return ("sequence", type(node), tuple(node))
        return ("scalar", type(node), node)

    return postwalk(_key, arg)


def _distinct(args) -> List[Any]:
    # Arguments are often unhashable lists, so keys are compared, not hashed.
    seen_keys: List[Any] = []
    distinct: List[Any] = []
    for arg in args:
        key = _structural_key(arg)
        if key not in seen_keys:
            seen_keys.append(key)
            distinct.append(arg)
    return distinct


def _step(expr: FilterExpression) -> Optional[FilterExpression]:
    """Apply the first rule that fires, or return None at a fixed point."""
    if isinstance(expr, CompoundFilter):
        args = expr.args

        if len(args) == 1:
            return classify(args[0])

        nested = [classify(arg) for arg in args]
        if any(isinstance(n, CompoundFilter) and n.operator is expr.operator for n in nested):
            spliced: List[Any] = []
            for arg, n in zip(args, nested):
                if isinstance(n, CompoundFilter) and n.operator is expr.operator:
                    spliced.extend(n.args)
                else:
                    spliced.append(arg)
            return CompoundFilter(expr.operator, tuple(spliced))

        distinct = _distinct(args)
        if len(distinct) != len(args):
            return CompoundFilter(expr.operator, tuple(distinct))

    elif isinstance(expr, NotFilter):
        inner = classify(expr.operand)
        if isinstance(inner, NotFilter):
            return classify(inner.operand)

    return None


def simplify(clause: Any) -> Any:
    """
    Simplify compound `and`, `or` and `not` filters, combining or eliminating
    them where possible.

    This also repairs compounds that are technically disallowed, such as an
    `and` with a single argument.

        simplify(["and", ["=", ["field-id", 1], 2]])
        # -> ["=", ["field-id", 1], 2]

        simplify(["or", a, ["or", b, a]])
        # -> ["or", a, b]

    Args:
        clause: A filter clause

    Returns:
        The canonical filter clause. Boolean tags come back in canonical
        spelling; leaf clauses are returned unchanged.

    Raises:
        SimplificationError: If the rewrite does not terminate within its bound
    """
    bound = _tree_size(clause) + 1
    expr = classify(clause)
    for _ in range(bound):
        rewritten = _step(expr)
        if rewritten is None:
            return to_clause(expr)
        expr = rewritten
    raise SimplificationError(
        f"Filter did not reach a fixed point after {bound} rewrite steps: {clause!r}"
    )


__all__ = ["SimplificationError", "simplify"]
