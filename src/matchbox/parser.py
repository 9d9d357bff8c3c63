"""
Condition parser (raw Python value -> condition AST).

Callers write conditions as plain values:

    {"all": {"status": "active", "id": {">": 1}}}
    {"any": ["is_none", {"length": {"==": 0}}]}
    {"not": {"deleted": True}}
    [1, "is_int", {">=": 3}]

Parsing rules:
    - Condition nodes are kept, their raw children parsed
    - Mappings: qualifier keys (all/any/not), engine operators, field paths
    - Lists and tuples become Sequence nodes
    - "*" and "any" are wildcards
    - Values the engine recognizes become Operator atoms
    - Everything else is a Literal

Which keys count as operators depends on the engine, so parsing happens
once per call against the engine that call resolved.

Nested values are parsed from an explicit stack of pending nodes, so the
nesting ceiling (max_depth) is the only limit on condition depth.
"""

from collections.abc import Hashable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Callable, List, Optional, Tuple, Union

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
    QUALIFIER_TOKENS,
    WILDCARD_MARKERS,
)
from matchbox.config import check_max_depth, get_max_depth
from matchbox.errors import ConditionError, DepthLimitExceeded


@dataclass
class _Pending:
    """A node waiting for its children to be parsed."""

    build: Callable[[List[Condition]], Condition]
    # (raw child, nesting depth) in order
    children: List[Tuple[Any, int]]
    parsed: List[Condition] = field(default_factory=list)


def parse_condition(raw: Any, engine: Any = None, max_depth: Optional[int] = None) -> Condition:
    """
    Convert a raw condition into the AST.

    Args:
        raw: Condition in plain-value form (or an AST node)
        engine: Comparison engine deciding which keys are operators.
            Resolved the usual way when omitted.
        max_depth: Nesting ceiling. The configured ceiling when omitted.

    Returns:
        Condition AST

    Raises:
        ConditionError: If the condition has a malformed shape
        ConfigurationError: If max_depth is not a positive integer
        DepthLimitExceeded: If nesting goes deeper than max_depth
    """
    if engine is None:
        from matchbox.resolver import resolve_engine
        engine = resolve_engine()
    max_depth = get_max_depth() if max_depth is None else check_max_depth(max_depth)

    stack: List[_Pending] = []
    result = _step(raw, engine, 0, max_depth)

    while True:
        if isinstance(result, _Pending):
            stack.append(result)
        elif stack:
            stack[-1].parsed.append(result)
        else:
            return result

        pending = stack[-1]
        if len(pending.parsed) < len(pending.children):
            child, depth = pending.children[len(pending.parsed)]
            result = _step(child, engine, depth, max_depth)
            continue

        stack.pop()
        result = pending.build(pending.parsed)


def _step(raw: Any, engine: Any, depth: int, max_depth: int) -> Union[Condition, _Pending]:
    """Parse one level: return a finished node, or a node waiting on its children."""
    if depth > max_depth:
        raise DepthLimitExceeded(max_depth)

    if isinstance(raw, Condition):
        return _normalize(raw, depth)

    if isinstance(raw, Mapping):
        return _parse_mapping(raw, engine, depth)

    if isinstance(raw, (list, tuple)):
        return _Pending(_sequence, [(item, depth + 1) for item in raw])

    if isinstance(raw, (set, frozenset)):
        raise ConditionError(f"Unordered collection is not a valid condition: {raw!r}")

    if isinstance(raw, Iterator):
        raise ConditionError(f"Iterator is not a valid condition, pass a list instead: {raw!r}")

    if isinstance(raw, str) and raw in WILDCARD_MARKERS:
        return Wildcard()

    if _is_operator(engine, raw):
        return Operator(raw)

    return Literal(raw)


def _sequence(parsed: List[Condition]) -> Condition:
    return Sequence(tuple(parsed))


def _entries(parsed: List[Condition]) -> Condition:
    return Entries(tuple(parsed))


def _all_of(parsed: List[Condition]) -> Condition:
    return AllOf(tuple(parsed))


def _any_of(parsed: List[Condition]) -> Condition:
    return AnyOf(tuple(parsed))


def _not(parsed: List[Condition]) -> Condition:
    return Not(parsed[0])


def _is_operator(engine: Any, key: Any) -> bool:
    if not isinstance(key, Hashable):
        return False
    try:
        return bool(engine.is_operator(key))
    except TypeError:
        # hash() failed on a tuple holding unhashable members
        return False


def _parse_mapping(raw: Mapping, engine: Any, depth: int) -> Union[Condition, _Pending]:
    keys = list(raw.keys())
    qualifier_keys = [k for k in keys if isinstance(k, str) and k in QUALIFIER_TOKENS]

    if qualifier_keys and len(qualifier_keys) != len(keys):
        others = [k for k in keys if k not in qualifier_keys]
        raise ConditionError(
            f"Qualifier keys {qualifier_keys} cannot be mixed with other keys {others}; "
            f"expected only {sorted(QUALIFIER_TOKENS)}"
        )

    if len(keys) != 1:
        # Each entry is parsed on its own, at the same depth as the mapping.
        return _Pending(_entries, [({key: value}, depth) for key, value in raw.items()])

    key, value = next(iter(raw.items()))
    return _parse_entry(key, value, engine, depth)


def _parse_entry(key: Any, value: Any, engine: Any, depth: int) -> Union[Condition, _Pending]:
    if key == Qualifier.ALL.value:
        return _Pending(_all_of, _members(value, depth + 1))
    if key == Qualifier.ANY.value:
        return _Pending(_any_of, _members(value, depth + 1))
    if key == Qualifier.NOT.value:
        return _Pending(_not, [(value, depth + 1)])
    if _is_operator(engine, key):
        return Apply(key, value)
    return _Pending(lambda parsed: FieldPath(key, parsed[0]), [(value, depth + 1)])


def _members(body: Any, depth: int) -> List[Tuple[Any, int]]:
    """
    Split a qualifier body into its members.

        {"all": {"a": 1, "b": 2}}   -> one member per entry
        {"all": [c1, c2]}           -> one member per element
        {"all": "hello"}            -> the body itself
    """
    if isinstance(body, Condition):
        return [(body, depth)]
    if isinstance(body, Mapping):
        return [({key: value}, depth) for key, value in body.items()]
    if isinstance(body, (list, tuple)):
        return [(item, depth) for item in body]
    return [(body, depth)]


def _normalize(node: Condition, depth: int) -> Union[Condition, _Pending]:
    """Parse any raw children held by a hand-built node."""
    if isinstance(node, (Wildcard, Literal, Operator, Apply)):
        return node
    if isinstance(node, (FieldPath, Not)):
        return _Pending(
            lambda parsed: replace(node, condition=parsed[0]),
            [(node.condition, depth + 1)],
        )
    if isinstance(node, (AllOf, AnyOf, Entries, Sequence)):
        return _Pending(
            lambda parsed: replace(node, conditions=tuple(parsed)),
            [(child, depth + 1) for child in node.conditions],
        )
    raise ConditionError(f"Unsupported condition node: {type(node).__name__}")
