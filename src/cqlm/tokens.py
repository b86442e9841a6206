"""
Token Normalization for CQLM

Clause tags reach the model in whatever spelling their producer used:
    - lisp-case:            "field-id"
    - snake_case:           "field_id"
    - SCREAMING_SNAKE_CASE: "FIELD_ID"

All of them denote the same clause. This module folds every spelling into
one canonical form (lower-case, hyphen-separated) so that matching and
comparison never depend on how a document was written.

ARCHITECTURAL RULE:
    Normalization is total and idempotent on valid tokens.
    Anything that is not tag-shaped is rejected here, at the boundary.
"""

import sys
from enum import Enum
from functools import lru_cache
from typing import Any


class InvalidTokenError(ValueError):
    """Raised when a value that is not tag-shaped is normalized."""
    pass


def is_token(x: Any) -> bool:
    """
    True if `x` can serve as a clause tag.

    A tag is an atomic identifier: a non-empty string, or an Enum member
    whose value is one. Sequences, mappings and numbers never are.
    """
    if isinstance(x, Enum):
        x = x.value
    return isinstance(x, str) and x.strip() != ""


@lru_cache(maxsize=4096)
def _canonical(token: str) -> str:
    return sys.intern(token.lower().replace("_", "-"))


def normalize_token(token: Any) -> str:
    """
    Convert a token in any supported spelling to its canonical tag.

    Examples:
        normalize_token("FIELD_ID")        -> "field-id"
        normalize_token("Field_Id")        -> "field-id"
        normalize_token("mbql/Field_ID")   -> "mbql/field-id"
        normalize_token(BooleanOperator.AND) -> "and"

    Namespaced tokens ("namespace/name") keep both parts.

    Raises:
        InvalidTokenError: If `token` is not tag-shaped
    """
    if not is_token(token):
        raise InvalidTokenError(f"Not a valid clause token: {token!r}")
    if isinstance(token, Enum):
        token = token.value
    return _canonical(token)


normalize = normalize_token


__all__ = ["InvalidTokenError", "is_token", "normalize_token", "normalize"]
