"""
End-to-end test on the example query document.

Validates that the example builder produces the expected clauses at the
usual keypaths and that the core operations compose on it.
"""

from cqlm.examples import build_example_query
from cqlm.keypaths import get_in
from cqlm.query import FILTER_KEYPATH, add_filter_clause
from cqlm.walk import collect, rewrite_at


def test_example_query_structure():
    query = build_example_query(table_id=7)

    assert get_in(query, ["query", "source-table"]) == 7
    assert get_in(query, FILTER_KEYPATH)[0] == "and"
    assert len(collect("field-id", get_in(query, ["query", "breakout"]))) == 1


def test_example_query_pipeline():
    query = build_example_query()
    extra = ["not", ["not", ["is-null", ["field-id", 15]]]]

    once = add_filter_clause(query, FILTER_KEYPATH, extra)
    twice = add_filter_clause(once, FILTER_KEYPATH, extra)

    # Two clauses from the example plus the new one, deduplicated; negations are not simplified inside arguments
    filter_clause = get_in(twice, FILTER_KEYPATH)
    assert filter_clause[0] == "and"
    assert len(filter_clause) == 4
    assert filter_clause[-1] == extra

    # Re-point every field in the filter only
    remapped = rewrite_at(FILTER_KEYPATH, "field-id", twice, lambda c: ["field-id", c[1] + 100])
    filter_ids = [c[1] for c in collect("field-id", get_in(remapped, FILTER_KEYPATH))]
    assert all(i > 100 for i in filter_ids)
    assert collect("field-id", get_in(remapped, ["query", "breakout"])) == [["field-id", 13]]
