"""
Condition evaluator.

Walks a parsed condition against a subject and returns the outcome.

The walk uses an explicit stack of frames instead of Python recursion,
so deeply nested subjects cannot exhaust the interpreter stack. Each
frame combines the outcomes of its children:

    ALL  stops at the first falsy child, True when all children hold
    ANY  stops at the first truthy child, False when none holds
    NOT  inverts its single child (True only when the child is False)

Children are produced lazily, which gives short-circuit evaluation.
Nesting deeper than max_depth raises DepthLimitExceeded.

A leaf member (literal, operator atom, operator application) of a
qualifier whose subject is a non-empty plain sequence is tested against
the sequence itself first. Only when that fails is it tested against
each element, so {"all": {"length": 2}} and {"all": 1} both read
naturally on a list. A negated application ({"all": {"!=": 1}}) goes
straight to the elements.

Dispatch on node type:
    Sequence   positional against a same-length list/tuple, else conjunctive
    Wildcard   always True
    Entries    every entry holds
    AllOf      every member holds (leaf members spread over plain sequences)
    AnyOf      some member holds (leaf members spread over plain sequences)
    Not        complement of the wrapped condition
    Apply      engine.compare(subject, (operator, operand))
    FieldPath  key lookup, or broadcast over a non-empty sequence subject
    Operator   engine.compare(subject, name)
    Literal    strict structural equality
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Optional, Tuple

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
    LEAF_TYPES,
    NEGATED_OPERATORS,
)
from matchbox.errors import ConditionError, DepthLimitExceeded
from matchbox.terms import (
    is_associative,
    is_plain_sequence,
    is_sequence,
    lookup,
    strict_equal,
)

_PENDING = object()

ALL = Qualifier.ALL
ANY = Qualifier.ANY
NOT = Qualifier.NOT


@dataclass
class _Expansion:
    """A node that needs its children evaluated before it has an outcome."""

    combine: Qualifier
    children: Iterable[Tuple[Any, Condition]]
    scope: Qualifier


@dataclass(frozen=True)
class _Spread:
    """A leaf qualifier member applied to a non-empty plain sequence subject."""

    member: Condition
    combine: Qualifier
    whole: bool = True


@dataclass
class _Frame:
    combine: Qualifier
    # qualifier in effect for the children (drives field path broadcast)
    scope: Qualifier
    children: Iterator[Tuple[Any, Condition]]
    depth: int


def evaluate(subject: Any, condition: Condition, engine: Any, max_depth: int) -> Any:
    """
    Evaluate a parsed condition against `subject`.

    Returns the raw outcome (engine results are not coerced), so callers
    wanting a bool should wrap it.

    Raises:
        DepthLimitExceeded: If nesting goes deeper than max_depth
        TypeError: If the engine orders values with no defined order
    """
    stack: List[_Frame] = []
    pending: Optional[Tuple[Any, Condition, Qualifier, int]] = (subject, condition, ALL, 0)
    outcome: Any = _PENDING

    while pending is not None:
        current, node, scope, depth = pending
        pending = None
        if depth > max_depth:
            raise DepthLimitExceeded(max_depth)

        outcome = _step(current, node, scope, engine)
        if isinstance(outcome, _Expansion):
            stack.append(_Frame(outcome.combine, outcome.scope, iter(outcome.children), depth + 1))
            outcome = _PENDING

        # Fold finished outcomes into their frames until a frame needs another child.
        while stack:
            frame = stack[-1]
            if outcome is not _PENDING:
                if frame.combine is NOT:
                    stack.pop()
                    outcome = outcome is False
                    continue
                if (frame.combine is ALL and not outcome) or (frame.combine is ANY and outcome):
                    stack.pop()
                    continue

            child = next(frame.children, None)
            if child is None:
                stack.pop()
                outcome = frame.combine is ALL
                continue

            pending = (child[0], child[1], frame.scope, frame.depth)
            break

    return outcome


def _step(subject: Any, node: Condition, scope: Qualifier, engine: Any) -> Any:
    if isinstance(node, _Spread):
        return _spread(subject, node, engine)

    if isinstance(node, Sequence):
        if not node.conditions:
            return False
        if is_sequence(subject) and len(subject) == len(node.conditions):
            return _Expansion(ALL, zip(subject, node.conditions), scope)
        return _Expansion(ALL, ((subject, c) for c in node.conditions), scope)

    if isinstance(node, Wildcard):
        return True

    if isinstance(node, Entries):
        if not node.conditions:
            return False
        return _Expansion(ALL, ((subject, c) for c in node.conditions), scope)

    if isinstance(node, (AllOf, AnyOf)):
        if not node.conditions:
            return False
        combine = ALL if isinstance(node, AllOf) else ANY
        return _Expansion(combine, _qualified(subject, node.conditions, combine), combine)

    if isinstance(node, Not):
        return _Expansion(NOT, [(subject, node.condition)], scope)

    if isinstance(node, Apply):
        return engine.compare(subject, (node.operator, node.operand))

    if isinstance(node, FieldPath):
        return _field(subject, node, scope)

    if isinstance(node, Operator):
        return engine.compare(subject, node.name)

    if isinstance(node, Literal):
        return strict_equal(subject, node.value)

    raise ConditionError(f"Unsupported condition node: {type(node).__name__}")


def _qualified(subject: Any, members: Tuple[Condition, ...], combine: Qualifier) -> Iterator[Tuple[Any, Any]]:
    """Pair qualifier members with the subject, spreading leaf members over a non-empty plain sequence."""
    spread = is_plain_sequence(subject) and len(subject) > 0
    for member in members:
        if spread and isinstance(member, LEAF_TYPES):
            negated = isinstance(member, Apply) and member.operator in NEGATED_OPERATORS
            yield subject, _Spread(member, combine, whole=not negated)
        else:
            yield subject, member


def _spread(subject: Any, node: _Spread, engine: Any) -> Any:
    """Test the sequence as a whole first (unless told not to), then each of its elements."""
    if node.whole:
        try:
            whole = _step(subject, node.member, node.combine, engine)
        except TypeError:
            # no ordering between the sequence and the operand, try the elements
            whole = False
        if whole:
            return whole
    return _Expansion(node.combine, ((element, node.member) for element in subject), node.combine)


def _field(subject: Any, node: FieldPath, scope: Qualifier) -> Any:
    if is_associative(subject):
        found, value = lookup(subject, node.key)
        if not found:
            return False
        return _Expansion(ALL, [(value, node.condition)], scope)

    if is_sequence(subject):
        if not subject:
            # an empty list has no keys
            return False
        return _Expansion(scope, ((element, node) for element in subject), scope)

    if isinstance(node.condition, Literal):
        return strict_equal(subject, (node.key, node.condition.value))
    return False
