"""
Canonical Query Logic Model (CQLM) Package

Primitives for recognizing, traversing and canonicalizing the tree of
tagged clauses inside a structured query document.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Query surface syntax (it does not parse text)
    - Query execution
    - The full document schema

It manipulates already-parsed trees of clauses, and every operation
returns a new value. Inputs are never mutated.
"""

from cqlm.tokens import InvalidTokenError, is_token, normalize, normalize_token
from cqlm.clauses import is_clause, matches
from cqlm.keypaths import KeypathError, assoc_in, get_in, update_in
from cqlm.walk import collect, postwalk, rewrite, rewrite_at
from cqlm.simplify import SimplificationError, simplify
from cqlm.query import FILTER_KEYPATH, add_filter_clause, combine, combine_filter_clauses

__version__ = "0.1.0"

__all__ = [
    "InvalidTokenError",
    "is_token",
    "normalize",
    "normalize_token",
    "is_clause",
    "matches",
    "KeypathError",
    "assoc_in",
    "get_in",
    "update_in",
    "collect",
    "postwalk",
    "rewrite",
    "rewrite_at",
    "SimplificationError",
    "simplify",
    "FILTER_KEYPATH",
    "add_filter_clause",
    "combine",
    "combine_filter_clauses",
]
