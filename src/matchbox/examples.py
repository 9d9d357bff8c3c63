"""
Example subjects and conditions.

Two small scenarios used by the demo script and the tests:
    - account filtering: active accounts with an id above 1
    - order review: orders with large decimal totals placed after a cutoff
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List

ACTIVE_ACCOUNT_CONDITION = {"all": {"status": "active", "id": {">": 1}}}

REVIEW_CUTOFF = datetime(2025, 1, 1, tzinfo=timezone.utc)

ORDER_REVIEW_CONDITION = {
    "all": {
        "total": {">=": Decimal("1000.00")},
        "placed_at": {">": REVIEW_CUTOFF},
        "lines": {"length": {">": 0}},
    }
}


def build_example_accounts() -> List[Dict[str, Any]]:
    return [
        {"status": "inactive", "id": 1},
        {"status": "active", "id": 2},
        {"status": "active", "id": 3},
    ]


def build_example_orders(count: int = 4) -> List[Dict[str, Any]]:
    """
    Build `count` orders. Odd orders were placed before the review cutoff.

    Totals grow by 500 and carry a different decimal scale each
    (500.0, 1000.00, 1500.000, ...).
    """
    orders = []
    for i in range(1, count + 1):
        if i % 2:
            placed_at = datetime(2024, 12, 31, tzinfo=timezone.utc)
        else:
            placed_at = datetime(2025, 1, i, tzinfo=timezone.utc)
        orders.append({
            "id": f"ORD-{i:04d}",
            "total": Decimal(f"{500 * i}." + "0" * i),
            "placed_at": placed_at,
            "lines": [{"sku": f"SKU-{n}", "qty": n} for n in range(i % 3)],
        })
    return orders
