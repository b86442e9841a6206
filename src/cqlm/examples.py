"""
Example query document builder.

Builds a small outer query of the kind CQLM is used on: a source table,
an aggregation, a breakout and a compound filter, with clauses embedded
at the usual keypaths.
"""


def build_example_query(table_id: int = 1) -> dict:
    # Filter: (status == "open" OR status == "pending") AND total > 100
    status_filter = [
        "or",
        ["=", ["field-id", 12], "open"],
        ["=", ["field-id", 12], "pending"],
    ]
    total_filter = [">", ["field-id", 14], 100]

    return {
        "database": 1,
        "type": "query",
        "query": {
            "source-table": table_id,
            "aggregation": [["sum", ["field-id", 14]], ["count"]],
            "breakout": [["datetime-field", ["field-id", 13], "month"]],
            "filter": ["and", status_filter, total_filter],
            "order-by": [["asc", ["field-id", 13]]],
        },
    }
