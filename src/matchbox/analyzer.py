"""
Condition Analyzer: static diagnostics for condition trees.

This module provides lightweight analysis of conditions:
    - Nesting depth and node count
    - Field keys referenced
    - Operator and qualifier usage
    - Warning flags for parts that can never match

IMPORTANT: This module never evaluates a condition against a subject.
It only produces read-only reports.
"""

from __future__ import annotations

import sys
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, List, Optional, Set, Tuple

from matchbox.conditions import (
    Condition,
    Wildcard,
    Literal,
    Operator,
    Apply,
    FieldPath,
    Entries,
    AllOf,
    AnyOf,
    Not,
    Sequence,
)
from matchbox.config import check_max_depth, get_max_depth
from matchbox.parser import parse_condition


@dataclass
class ConditionMetrics:
    """Metrics about a single condition tree."""
    depth: int = 0
    node_count: int = 0
    field_keys: Set[Any] = field(default_factory=set)
    operators: Counter = field(default_factory=Counter)
    qualifiers: Counter = field(default_factory=Counter)
    never_matches: List[str] = field(default_factory=list)


def _analyze(root: Condition) -> ConditionMetrics:
    """
    Walk a condition tree depth-first with an explicit stack.

    Depth is the longest chain of nested nodes below the root, so a bare
    leaf has depth 0 and {"a": {"b": 1}} has depth 2.
    """
    metrics = ConditionMetrics()
    stack: List[Tuple[Condition, str, int]] = [(root, "", 0)]

    while stack:
        node, path, level = stack.pop()
        metrics.node_count += 1
        metrics.depth = max(metrics.depth, level)

        children: List[Tuple[Condition, str]] = []
        if isinstance(node, (Entries, AllOf, AnyOf, Sequence)):
            kind = {Entries: "entries", AllOf: "all", AnyOf: "any", Sequence: "sequence"}[type(node)]
            if kind in ("all", "any"):
                metrics.qualifiers[kind] += 1
            if not node.conditions:
                metrics.never_matches.append(f"{path or '<root>'}: empty {kind}")
            children = [(child, f"{path}[{index}]") for index, child in enumerate(node.conditions)]

        elif isinstance(node, Not):
            metrics.qualifiers["not"] += 1
            if isinstance(node.condition, Wildcard):
                metrics.never_matches.append(f"{path or '<root>'}: not of wildcard")
            children = [(node.condition, f"{path}[0]")]

        elif isinstance(node, FieldPath):
            metrics.field_keys.add(node.key)
            children = [(node.condition, f"{path}.{node.key}" if path else str(node.key))]

        elif isinstance(node, Apply):
            metrics.operators[node.operator] += 1

        elif isinstance(node, Operator):
            metrics.operators[node.name] += 1

        elif isinstance(node, (Wildcard, Literal)):
            # Leaves without operators
            pass

        # reversed, so children come off the stack in order
        for child, child_path in reversed(children):
            stack.append((child, child_path, level + 1))

    return metrics


@dataclass
class ConditionReport:
    """Analysis report for a condition."""

    depth: int = 0
    node_count: int = 0
    field_keys: Set[Any] = field(default_factory=set)
    operator_usage: dict = field(default_factory=dict)
    qualifier_usage: dict = field(default_factory=dict)
    max_depth: Optional[int] = None

    # Warnings and flags
    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_condition(condition: Any, engine: Any = None, max_depth: Optional[int] = None) -> ConditionReport:
    """
    Analyze a condition (raw or parsed).

    Checks for:
    - Nesting depth against the evaluation ceiling
    - Fields and operators referenced
    - Empty bodies and negated wildcards, which can never match

    Returns a ConditionReport with metrics and warnings.
    """
    max_depth = get_max_depth() if max_depth is None else check_max_depth(max_depth)

    # Parse without the evaluation ceiling so the report shows how deep the tree really is.
    node = parse_condition(condition, engine, max_depth=sys.maxsize)
    metrics = _analyze(node)

    report = ConditionReport(
        depth=metrics.depth,
        node_count=metrics.node_count,
        field_keys=metrics.field_keys,
        operator_usage=dict(metrics.operators),
        qualifier_usage=dict(metrics.qualifiers),
        max_depth=max_depth,
    )

    for location in metrics.never_matches:
        report.add_warning(f"Never matches: {location}")

    if report.depth > max_depth:
        report.add_warning(
            f"Condition depth {report.depth} exceeds evaluation ceiling {max_depth}"
        )

    return report
