"""
Filter Expression Variants for CQLM

Inside a query document a filter is just a clause: a tag plus arguments,
with no static shape. The simplifier needs more than that. It has to know,
exhaustively, which of four kinds of filter it is looking at:

    - CompoundFilter(AND, args)
    - CompoundFilter(OR, args)
    - NotFilter(operand)
    - LeafFilter(clause)   (comparisons, field references, anything else)

`classify` converts a clause into one of these, and `to_clause` converts
back. Classification is SHALLOW: arguments stay as the clauses they were.
Only the top of the boolean skeleton is typed at any moment, which is all
a single rewrite step looks at.

ARCHITECTURAL RULE:
    Leaf filters are opaque payloads.
    Nothing here looks inside them or changes them.
"""

from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Any, Tuple

from cqlm.clauses import clause_tag, is_clause


class FilterExpression(ABC):
    """
    Base class for the filter variants.

    Structure only: the variants are immutable and carry no rewrite
    logic. Rewriting belongs in cqlm.simplify.
    """
    pass


class BooleanOperator(Enum):
    """
    Boolean combinators, valued by their canonical clause tag.

    `and`/`or` take any number of arguments.
    `not` takes exactly one.
    """

    AND = "and"
    OR = "or"
    NOT = "not"


@dataclass(frozen=True)
class CompoundFilter(FilterExpression):
    """
    An `and` or `or` of zero or more filter clauses.

    Example:
        ["and", ["=", ["field-id", 1], 2], [">", ["field-id", 3], 4]]

    Becomes:
        CompoundFilter(
            operator=BooleanOperator.AND,
            args=(["=", ["field-id", 1], 2], [">", ["field-id", 3], 4]),
        )

    An `and` with no arguments is the always-true filter.
    """

    operator: BooleanOperator
    args: Tuple[Any, ...]


@dataclass(frozen=True)
class NotFilter(FilterExpression):
    """
    Negation of a single filter clause.

    Example:
        ["not", ["is-null", ["field-id", 7]]]

    Becomes:
        NotFilter(operand=["is-null", ["field-id", 7]])
    """

    operand: Any


@dataclass(frozen=True)
class LeafFilter(FilterExpression):
    """
    Any filter that is not a well-formed boolean combinator.

    Holds the original value untouched. This includes a `not` with the
    wrong number of arguments and non-clause values found in argument
    position.
    """

    clause: Any


_COMPOUND_TAGS = {BooleanOperator.AND.value, BooleanOperator.OR.value}


def classify(clause: Any) -> FilterExpression:
    """
    Type the top node of a filter clause.

    Args:
        clause: A filter clause, in any tag spelling

    Returns:
        CompoundFilter, NotFilter or LeafFilter
    """
    if not is_clause(clause):
        return LeafFilter(clause)
    tag = clause_tag(clause)
    if tag in _COMPOUND_TAGS:
        return CompoundFilter(BooleanOperator(tag), tuple(clause[1:]))
    if tag == BooleanOperator.NOT.value and len(clause) == 2:
        return NotFilter(clause[1])
    return LeafFilter(clause)


def to_clause(expr: FilterExpression) -> Any:
    """Convert a filter variant back to its clause form, with canonical boolean tags."""
    if isinstance(expr, CompoundFilter):
        return [expr.operator.value, *expr.args]
    if isinstance(expr, NotFilter):
        return [BooleanOperator.NOT.value, expr.operand]
    if isinstance(expr, LeafFilter):
        return expr.clause
    raise TypeError(f"Unsupported FilterExpression type: {type(expr)}")


__all__ = [
    "FilterExpression",
    "BooleanOperator",
    "CompoundFilter",
    "NotFilter",
    "LeafFilter",
    "classify",
    "to_clause",
]
