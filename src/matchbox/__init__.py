"""
Matchbox: declarative predicate matching for arbitrary Python values.

A condition describes what a subject must look like. Matchbox decides
whether the subject satisfies it and, optionally, transforms the subject
only when it does.

ARCHITECTURAL GUARANTEE:
------------------------
Evaluation is pure. Nothing here performs I/O or keeps state between
calls, except the process-wide configuration which is set once at startup.

Operator semantics live in pluggable comparison engines.
The evaluator only knows the shape of conditions and subjects.
"""

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
    Qualifier,
)
from matchbox.engines import ComparisonEngine, DefaultComparisonEngine, load_engine
from matchbox.errors import (
    MatchboxError,
    ConditionError,
    ConfigurationError,
    DepthLimitExceeded,
)
from matchbox.matching import matches, filter_matches
from matchbox.model import Options, OnMatch, Selector, TransformResult
from matchbox.parser import parse_condition
from matchbox.resolver import resolve_engine
from matchbox.transform import transform, transform_many

__version__ = "0.1.0"

__all__ = [
    "Condition",
    "Wildcard",
    "Literal",
    "Operator",
    "Apply",
    "FieldPath",
    "Entries",
    "AllOf",
    "AnyOf",
    "Not",
    "Sequence",
    "Qualifier",
    "ComparisonEngine",
    "DefaultComparisonEngine",
    "load_engine",
    "MatchboxError",
    "ConditionError",
    "ConfigurationError",
    "DepthLimitExceeded",
    "matches",
    "filter_matches",
    "Options",
    "OnMatch",
    "Selector",
    "TransformResult",
    "parse_condition",
    "resolve_engine",
    "transform",
    "transform_many",
]
