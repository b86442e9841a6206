"""
Tests for combining filters and adding them to query documents.
"""

import pytest
from cqlm.keypaths import KeypathError
from cqlm.query import FILTER_KEYPATH, add_filter_clause, combine, combine_filter_clauses
from cqlm.simplify import simplify


X = ["=", ["field-id", 10], 20]
Y = ["<", ["field-id", 11], 5]


class TestCombine:
    """Test building one filter from several."""

    def test_none_dropped(self):
        """combine(None, X) == simplify(X)."""
        assert combine(None, X) == simplify(X)

    def test_no_clauses(self):
        """combine() == simplify([and])."""
        assert combine() == simplify(["and"]) == ["and"]

    def test_only_none(self):
        """All-absent input behaves like no input."""
        assert combine(None, None) == ["and"]

    def test_duplicates_removed(self):
        """combine(X, Y, Y) == simplify([and X Y])."""
        assert combine(X, Y, Y) == simplify(["and", X, Y])

    def test_existing_and_flattened(self):
        """Combining into an existing and should not nest another and."""
        assert combine(["and", X, Y], ["is-null", ["field-id", 3]]) == [
            "and", X, Y, ["is-null", ["field-id", 3]],
        ]

    def test_falsy_clauses_kept(self):
        """Only None counts as absent."""
        assert combine(False, X) == ["and", False, X]

    def test_alias(self):
        """combine_filter_clauses is the same operation."""
        assert combine_filter_clauses is combine


class TestAddFilterClause:
    """Test adding filters to documents."""

    def test_none_is_noop(self):
        """Adding None returns the very same document."""
        query = {"query": {"filter": X}}
        assert add_filter_clause(query, FILTER_KEYPATH, None) is query

    def test_add_to_query_without_filter(self):
        """A query with no filter gets the new clause as its filter."""
        result = add_filter_clause({"query": {}}, ["query", "filter"], X)
        assert result == {"query": {"filter": X}}

    def test_add_same_clause_twice(self):
        """Adding an identical clause again leaves a single clause."""
        once = add_filter_clause({"query": {}}, ["query", "filter"], ["=", ["field-id", 10], 20])
        twice = add_filter_clause(once, ["query", "filter"], ["=", ["field-id", 10], 20])
        assert twice["query"]["filter"] == ["=", ["field-id", 10], 20]

    def test_add_to_existing_filter(self):
        """An existing filter is combined with the new one."""
        result = add_filter_clause({"query": {"filter": X}}, FILTER_KEYPATH, Y)
        assert result["query"]["filter"] == ["and", X, Y]

    def test_original_untouched(self):
        """The input document must not be modified."""
        query = {"query": {"filter": X, "source-table": 1}}
        add_filter_clause(query, FILTER_KEYPATH, Y)
        assert query == {"query": {"filter": X, "source-table": 1}}

    def test_other_keypath(self):
        """Any keypath addressing an optional clause works."""
        result = add_filter_clause({"outer": {"inner": {}}}, ["outer", "inner", "where"], X)
        assert result == {"outer": {"inner": {"where": X}}}

    def test_missing_parent_raises(self):
        """Intermediate levels are never fabricated."""
        with pytest.raises(KeypathError):
            add_filter_clause({}, FILTER_KEYPATH, X)
