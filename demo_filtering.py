#!/usr/bin/env python3
"""
Pipeline Demo: conditions → filtering → transforms → analysis

Shows the full workflow:
1. Filter example accounts and orders
2. Transform subjects that match
3. Analyze a condition
4. Serialize the parsed condition to YAML
"""

from matchbox import filter_matches, parse_condition, transform, transform_many, Options, OnMatch
from matchbox.analyzer import analyze_condition
from matchbox.examples import (
    ACTIVE_ACCOUNT_CONDITION,
    ORDER_REVIEW_CONDITION,
    build_example_accounts,
    build_example_orders,
)
from matchbox.log import configure_logging
from matchbox.serialization import condition_to_yaml


def main():
    configure_logging("info")

    print("=" * 80)
    print("PIPELINE DEMO: conditions → filtering → transforms → analysis")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Filter
    # =========================================================================
    print("\n1. FILTERING...")
    accounts = build_example_accounts()
    active = filter_matches(accounts, ACTIVE_ACCOUNT_CONDITION)
    print(f"   ✓ Accounts: {len(accounts)}, active with id > 1: {active}")

    orders = build_example_orders()
    flagged = filter_matches(orders, ORDER_REVIEW_CONDITION)
    print(f"   ✓ Orders flagged for review: {[o['id'] for o in flagged]}")

    # =========================================================================
    # STEP 2: Transform
    # =========================================================================
    print("\n2. TRANSFORMING...")
    print(f"   ✓ {transform('hello', {'all': 'hello'}, str.upper)!r}")
    print(f"   ✓ {transform('world', {'all': 'hello'}, str.upper)!r}")

    result = transform_many(
        "hello",
        [
            ({"all": "hello"}, str.upper),
            ({"=~": "HEL"}, lambda s: s + "!"),
        ],
        Options(on_match=OnMatch.CONTINUE_ALL),
    )
    print(f"   ✓ continue_all: {result.value!r} (matched={result.matched})")

    # =========================================================================
    # STEP 3: Analyze
    # =========================================================================
    print("\n3. ANALYZING CONDITION...")
    report = analyze_condition(ORDER_REVIEW_CONDITION)
    print(f"   ✓ Depth: {report.depth}")
    print(f"   ✓ Nodes: {report.node_count}")
    print(f"   ✓ Fields: {sorted(report.field_keys)}")
    print(f"   ✓ Operators: {report.operator_usage}")
    for warning in report.warnings:
        print(f"      - {warning}")

    # =========================================================================
    # STEP 4: Serialize
    # =========================================================================
    print("\n4. SERIALIZING...")
    print(condition_to_yaml(parse_condition(ORDER_REVIEW_CONDITION)))


if __name__ == "__main__":
    main()
