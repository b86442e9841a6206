"""
Query Analyzer — read-only diagnostics for CQLM query documents.

This module provides lightweight analysis of a query document:
    - Clause inventory (counts per canonical tag)
    - Clause nesting depth
    - Filter canonicality (would the simplifier change it?)
    - Tag spelling (are all tags already canonical?)
    - Warning flags for likely problems

IMPORTANT: This does NOT modify the document.
It only produces read-only reports.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Set

from cqlm.clauses import clause_tag, is_clause, is_sequence
from cqlm.keypaths import get_in
from cqlm.query import FILTER_KEYPATH
from cqlm.serialization import non_canonical_tags, to_plain
from cqlm.simplify import simplify
from cqlm.walk import collect, postwalk


MAX_FILTER_DEPTH = 5


class _Depth(int):
    """Clause depth of an already-walked container, standing in for it in its parent."""


def _clause_depth(node: Any) -> int:
    """Nesting depth of clauses in `node`; a lone clause with scalar args is 1."""

    # Scalars come back as themselves, so a walked clause still starts with its tag.
    def _measure(walked):
        if isinstance(walked, Mapping):
            children = walked.values()
        elif is_sequence(walked):
            children = walked
        else:
            return walked
        deepest = max((c for c in children if isinstance(c, _Depth)), default=0)
        return _Depth(deepest + 1 if is_clause(walked) else deepest)

    depth = postwalk(_measure, node)
    return int(depth) if isinstance(depth, _Depth) else 0


@dataclass
class QueryReport:
    """Analysis report for a query document."""

    filter_keypath: Sequence[Any]

    # Clause inventory
    clause_counts: Dict[str, int] = field(default_factory=dict)
    total_clauses: int = 0
    max_clause_depth: int = 0

    # Filter
    has_filter: bool = False
    filter_depth: int = 0
    filter_is_canonical: bool = True
    simplified_filter: Optional[Any] = None

    # Spelling
    non_canonical_tags: Set[str] = field(default_factory=set)

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_query(document: Any, filter_keypath: Sequence[Any] = FILTER_KEYPATH) -> QueryReport:
    """
    Analyze a query document.

    Args:
        document: Query document (nested mapping)
        filter_keypath: Where the document keeps its filter

    Returns:
        QueryReport with inventory, filter diagnostics and warnings
    """
    report = QueryReport(filter_keypath=tuple(filter_keypath))

    # Every sequence with a tag counts, wherever it sits.
    clauses: List[Any] = []

    def _visit(node):
        if is_clause(node):
            clauses.append(node)
        return node

    postwalk(_visit, document)
    report.clause_counts = dict(Counter(clause_tag(c) for c in clauses))
    report.total_clauses = len(clauses)
    report.max_clause_depth = _clause_depth(document)

    filter_clause = get_in(document, filter_keypath, default=None)
    if filter_clause is not None:
        report.has_filter = True
        report.filter_depth = _clause_depth(filter_clause)
        report.simplified_filter = simplify(filter_clause)
        report.filter_is_canonical = to_plain(report.simplified_filter) == to_plain(filter_clause)

    report.non_canonical_tags = non_canonical_tags(document)

    if report.has_filter and not report.filter_is_canonical:
        report.add_warning(
            f"Filter is not in canonical form; simplifies to {report.simplified_filter!r}"
        )

    if report.non_canonical_tags:
        report.add_warning(
            f"Non-canonical tag spellings: {', '.join(sorted(report.non_canonical_tags))}"
        )

    if report.filter_depth > MAX_FILTER_DEPTH:
        report.add_warning(f"High filter complexity: depth {report.filter_depth}")

    empty_compounds = [c for c in collect({"and", "or"}, filter_clause) if len(c) == 1]
    if empty_compounds:
        report.add_warning(f"Filter contains {len(empty_compounds)} empty and/or clause(s)")

    return report


__all__ = ["MAX_FILTER_DEPTH", "QueryReport", "analyze_query"]
