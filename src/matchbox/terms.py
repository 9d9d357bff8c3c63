"""
Shape helpers for subjects.

The evaluator and the default engine both need to answer the same
questions about a value: is it a map, a keyword-style pair list,
a plain sequence? These answers live here so both agree.
"""

import dataclasses
from collections.abc import Mapping
from typing import Any, Tuple

_MISSING = object()


def is_key_value_sequence(subject: Any) -> bool:
    """
    True for a non-empty list of (str, value) pairs.

    Such lists are traversed like mappings:
        [("topic", "test"), ("body", "hello")]
    """
    if not isinstance(subject, list) or not subject:
        return False
    return all(
        isinstance(item, tuple) and len(item) == 2 and isinstance(item[0], str)
        for item in subject
    )


def is_record(subject: Any) -> bool:
    """True for dataclass instances (not dataclass types)."""
    return dataclasses.is_dataclass(subject) and not isinstance(subject, type)


def is_associative(subject: Any) -> bool:
    return isinstance(subject, Mapping) or is_key_value_sequence(subject) or is_record(subject)


def is_sequence(subject: Any) -> bool:
    return isinstance(subject, (list, tuple))


def is_plain_sequence(subject: Any) -> bool:
    """A list or tuple that is not a keyword-style pair list."""
    return is_sequence(subject) and not is_key_value_sequence(subject)


def lookup(subject: Any, key: Any) -> Tuple[bool, Any]:
    """
    Look up `key` in an associative subject.

    Returns (found, value). Never raises for a missing key.
    For pair lists the first matching pair wins.
    """
    if isinstance(subject, Mapping):
        try:
            value = subject.get(key, _MISSING)
        except TypeError:
            # unhashable key
            return False, None
        return (value is not _MISSING), (None if value is _MISSING else value)

    if is_key_value_sequence(subject):
        for k, v in subject:
            if k == key:
                return True, v
        return False, None

    if is_record(subject) and isinstance(key, str):
        names = {f.name for f in dataclasses.fields(subject)}
        if key in names:
            return True, getattr(subject, key)

    return False, None


def _same_kind(left: Any, right: Any) -> bool:
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return isinstance(left, type(right)) or isinstance(right, type(left))


def strict_equal(left: Any, right: Any) -> bool:
    """
    Structural equality that keeps bool, int and float apart.

        strict_equal(1, 1)        -> True
        strict_equal(1, 1.0)      -> False
        strict_equal(1, True)     -> False
        strict_equal([1], (1,))   -> False
        strict_equal({"a": [1]}, {"a": [1]}) -> True

    Walks nested containers with an explicit stack.
    """
    stack = [(left, right)]
    while stack:
        a, b = stack.pop()

        if isinstance(a, Mapping) or isinstance(b, Mapping):
            if not (isinstance(a, Mapping) and isinstance(b, Mapping)):
                return False
            if len(a) != len(b) or a.keys() != b.keys():
                return False
            stack.extend((a[k], b[k]) for k in a)
            continue

        if is_sequence(a) or is_sequence(b):
            if not (is_sequence(a) and is_sequence(b)):
                return False
            if isinstance(a, list) != isinstance(b, list) or len(a) != len(b):
                return False
            stack.extend(zip(a, b))
            continue

        if not _same_kind(a, b):
            return False
        if a != b:
            return False

    return True
