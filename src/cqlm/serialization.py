"""
Serialization helpers for CQLM query documents.

Provides JSON/YAML round-trip via a plain intermediate dict representation
(dicts, lists and scalars only). Loading normalizes clause tags to their
canonical spelling by default, so documents written by different
producers compare equal once loaded.
"""
from __future__ import annotations

import json
import warnings
from collections.abc import Mapping
from typing import Any, Dict, Set

import yaml

from cqlm.clauses import is_clause, is_sequence
from cqlm.tokens import normalize_token
from cqlm.walk import postwalk


def non_canonical_tags(root: Any) -> Set[str]:
    """Tags in `root` whose spelling differs from their canonical form."""
    found: Set[str] = set()

    def _visit(node):
        if is_clause(node) and node[0] != normalize_token(node[0]):
            found.add(node[0])
        return node

    postwalk(_visit, root)
    return found


def normalize_clause_tags(root: Any) -> Any:
    """
    Rewrite every clause tag in `root` to its canonical spelling.

        normalize_clause_tags({"filter": ["AND", ["FIELD_ID", 1]]})
        # -> {"filter": ["and", ["field-id", 1]]}
    """

    def _normalize(node):
        if not is_clause(node):
            return node
        tag = normalize_token(node[0])
        if tag == node[0]:
            return node
        rebuilt = [tag, *node[1:]]
        return tuple(rebuilt) if isinstance(node, tuple) else rebuilt

    return postwalk(_normalize, root)


def _to_plain(node: Any) -> Any:
    if isinstance(node, Mapping):
        return node if type(node) is dict else dict(node)
    if is_sequence(node):
        return node if type(node) is list else list(node)
    return node


def to_plain(node: Any) -> Any:
    """`node` with every mapping as a dict and every sequence as a list."""
    return postwalk(_to_plain, node)


def query_to_dict(document: Mapping) -> Dict[str, Any]:
    if not isinstance(document, Mapping):
        raise TypeError(f"Query document must be a mapping, got {type(document)}")
    return to_plain(document)


def query_from_dict(d: Any, normalize: bool = True) -> Dict[str, Any]:
    if not isinstance(d, Mapping):
        raise TypeError(f"Query document must be a mapping, got {type(d)}")
    if not normalize:
        return dict(d)
    renamed = non_canonical_tags(d)
    if renamed:
        warnings.warn(
            f"Normalized non-canonical clause tags: {', '.join(sorted(renamed))}",
            UserWarning,
        )
    return dict(normalize_clause_tags(d))


def query_to_json(document: Mapping) -> str:
    return json.dumps(query_to_dict(document), sort_keys=True)


def query_from_json(s: str, normalize: bool = True) -> Dict[str, Any]:
    d = json.loads(s)
    return query_from_dict(d, normalize=normalize)


def query_to_yaml(document: Mapping) -> str:
    return yaml.safe_dump(query_to_dict(document))


def query_from_yaml(s: str, normalize: bool = True) -> Dict[str, Any]:
    d = yaml.safe_load(s)
    return query_from_dict(d, normalize=normalize)


__all__ = [
    "non_canonical_tags",
    "normalize_clause_tags",
    "to_plain",
    "query_to_dict",
    "query_from_dict",
    "query_to_json",
    "query_from_json",
    "query_to_yaml",
    "query_from_yaml",
]
