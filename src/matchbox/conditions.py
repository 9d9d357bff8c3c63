"""
Condition AST for Matchbox

Callers write conditions as plain Python values (dicts, lists, strings).
The parser turns them into the immutable node types below, once per call,
against the comparison engine that call resolved.

This ensures:
    - Dispatch on node type, not on runtime inspection chains
    - One engine decides which keys are operators for the whole call
    - Serialization capability
    - A structure the analyzer can walk

ARCHITECTURAL RULE:
    Nodes carry structure only.
    Evaluation belongs in the evaluator.
    Operator semantics belong in the comparison engine.
"""

from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Any, Tuple


class Condition(ABC):
    """
    Base class for all condition nodes.

    This is intentionally minimal.
    It exists to provide type-safety for the node hierarchy
    and to let callers mix parsed nodes into raw conditions.
    """
    pass


class Qualifier(Enum):
    """
    Qualifier tokens recognized as mapping keys.

    Any other key in a mapping that holds one of these is a usage error.
    """

    ALL = "all"
    ANY = "any"
    NOT = "not"


QUALIFIER_TOKENS = frozenset(q.value for q in Qualifier)

# Bare strings that accept any subject, regardless of engine.
WILDCARD_MARKERS = ("*", "any")


@dataclass(frozen=True)
class Wildcard(Condition):
    """Accepts every subject."""
    pass


@dataclass(frozen=True)
class Literal(Condition):
    """
    Matches a subject by strict structural equality.

    Examples:
        - 1            (does not match 1.0 or True)
        - "active"
        - {"a": [1]}   (only when wrapped explicitly, see below)

    Wrapping a value in Literal forces equality even when the bare
    value would be read as an operator ("in", ">") or as a field path
    (a dict).
    """

    value: Any


@dataclass(frozen=True)
class Operator(Condition):
    """
    A bare operator atom handed to the engine as-is.

    Example:
        "is_str"  ->  Operator("is_str")
    """

    name: Any


@dataclass(frozen=True)
class Apply(Condition):
    """
    An operator application: {operator: operand}.

    Example:
        {">": 1}  ->  Apply(operator=">", operand=1)

    IMPORTANT:
        The operand is NOT parsed. It is a plain value the engine
        interprets ("length" takes a nested comparison mapping).
    """

    operator: Any
    operand: Any


@dataclass(frozen=True)
class FieldPath(Condition):
    """
    Looks up `key` in an associative subject and matches the value
    against `condition`.

    Example:
        {"status": "active"}  ->  FieldPath("status", Literal("active"))

    A missing key is a non-match, never an error. An empty list has
    no keys.
    """

    key: Any
    condition: Any


@dataclass(frozen=True)
class Entries(Condition):
    """
    A mapping with several entries. Every entry must hold.

    Example:
        {"status": "active", "id": {">": 1}}

    Becomes:
        Entries((
            FieldPath("status", Literal("active")),
            FieldPath("id", Apply(">", 1)),
        ))

    An empty mapping becomes Entries(()) and never matches.
    """

    conditions: Tuple[Any, ...]


@dataclass(frozen=True)
class AllOf(Condition):
    """
    Qualifier node: every member must hold.

    Over a non-empty plain list/tuple subject, a leaf member is tested
    against the whole sequence, then against each element.
    An empty member tuple never matches.
    """

    conditions: Tuple[Any, ...]


@dataclass(frozen=True)
class AnyOf(Condition):
    """
    Qualifier node: at least one member must hold.

    Over a non-empty plain list/tuple subject, a leaf member is tested
    against the whole sequence, then against each element.
    An empty member tuple never matches.
    """

    conditions: Tuple[Any, ...]


@dataclass(frozen=True)
class Not(Condition):
    """
    Negation: holds only when the wrapped condition evaluates to
    exactly False.
    """

    condition: Any


@dataclass(frozen=True)
class Sequence(Condition):
    """
    An ordered list or tuple of conditions.

    Against a list/tuple subject of the same length, position i of the
    subject is matched against position i of the condition. Otherwise
    every condition must hold against the whole subject.
    An empty sequence never matches.
    """

    conditions: Tuple[Any, ...]


# Qualifier members tested against a whole plain sequence, then against its elements.
# Field paths broadcast on their own.
LEAF_TYPES = (Literal, Operator, Apply)

# Applications that hold for a whole sequence almost regardless of its elements
# ([1, 2] != 1). Under a qualifier they are tested against the elements only.
NEGATED_OPERATORS = ("!=",)
