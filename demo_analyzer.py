"""
Demo: Add a filter to the example query, analyze it, and output the report.
"""

from cqlm.examples import build_example_query
from cqlm.analyzer import analyze_query
from cqlm.query import FILTER_KEYPATH, add_filter_clause
from cqlm.serialization import query_to_yaml


def print_report(report):
    """Pretty-print a QueryReport."""
    print()
    print("=" * 70)
    print(f"QUERY ANALYSIS REPORT (filter at {list(report.filter_keypath)})")
    print("=" * 70)
    print()

    print("📊 CLAUSE INVENTORY")
    print(f"  Total Clauses:         {report.total_clauses}")
    print(f"  Max Clause Depth:      {report.max_clause_depth}")
    for tag, count in sorted(report.clause_counts.items()):
        print(f"    {tag}: {count}")
    print()

    print("🔎 FILTER")
    print(f"  Has Filter:            {'YES' if report.has_filter else 'NO'}")
    print(f"  Filter Depth:          {report.filter_depth}")
    print(f"  Canonical:             {'YES' if report.filter_is_canonical else 'NO'}")
    if report.has_filter:
        print(f"  Simplified:            {report.simplified_filter}")
    print()

    if report.warnings:
        print("⚠️  WARNINGS")
        for i, warning in enumerate(report.warnings, 1):
            print(f"  {i}. {warning}")
    else:
        print("✨ NO WARNINGS - Query looks clean!")
    print()


if __name__ == "__main__":
    # Build example query
    query = build_example_query(table_id=1)

    # Narrow it down, twice with the same clause
    extra = ["not", ["not", ["is-null", ["field-id", 15]]]]
    query = add_filter_clause(query, FILTER_KEYPATH, extra)
    query = add_filter_clause(query, FILTER_KEYPATH, extra)

    # Analyze it
    report = analyze_query(query)

    # Print report
    print_report(report)

    # Also save to YAML for inspection
    yaml_str = query_to_yaml(query)
    with open("example_query_output.yaml", "w") as f:
        f.write(yaml_str)
    print("✅ Query exported to example_query_output.yaml")
