"""
Default comparison engine.

Operator families:

    Guard operators (bare atoms, some take a parameter):
        is_enum, is_str, is_bool, is_float, is_callable, ("is_callable", arity),
        is_int, is_list, is_dict, ("has_key", key), is_none, is_number,
        is_process, is_io, is_reference, is_dataclass, ("is_dataclass", cls),
        is_tuple

    Comparison operators ((operator, operand) pairs):
        ==, !=, >, <, >=, <=, =~

    General operators:
        any, *        always true
        in            membership
        length        element count of a list/tuple, checked by a nested comparison

Dispatch order inside compare():
    1. guard atoms (structural type tests)
    2. ordered domain types (datetime, Decimal) for comparison operators
    3. generic comparison operators
    4. general operators
    5. anything else -> False
"""

from __future__ import annotations

import enum
import inspect
import io
import multiprocessing.process
import re
import subprocess
import weakref
from collections.abc import Collection, Mapping
from datetime import datetime
from decimal import Decimal, InvalidOperation
from numbers import Number
from typing import Any, Callable, Dict, Optional, Tuple

from matchbox.engines.base import ComparisonEngine
from matchbox.terms import is_record, strict_equal


def _callable_with_arity(term: Any, arity: int) -> bool:
    if not callable(term):
        return False
    try:
        signature = inspect.signature(term)
    except (TypeError, ValueError):
        # builtins without introspectable signatures
        return False
    try:
        signature.bind(*([None] * arity))
    except TypeError:
        return False
    return True


def _is_int(term: Any) -> bool:
    return isinstance(term, int) and not isinstance(term, bool)


def _is_number(term: Any) -> bool:
    return isinstance(term, Number) and not isinstance(term, bool)


def _is_process(term: Any) -> bool:
    return isinstance(term, (subprocess.Popen, multiprocessing.process.BaseProcess))


GUARDS: Dict[str, Callable[[Any], bool]] = {
    "is_enum": lambda term: isinstance(term, enum.Enum),
    "is_str": lambda term: isinstance(term, str),
    "is_bool": lambda term: isinstance(term, bool),
    "is_float": lambda term: isinstance(term, float),
    "is_callable": callable,
    "is_int": _is_int,
    "is_list": lambda term: isinstance(term, list),
    "is_dict": lambda term: isinstance(term, Mapping),
    "has_key": lambda term: False,  # needs a key, see PARAMETERIZED_GUARDS
    "is_none": lambda term: term is None,
    "is_number": _is_number,
    "is_process": _is_process,
    "is_io": lambda term: isinstance(term, io.IOBase),
    "is_reference": lambda term: isinstance(term, weakref.ReferenceType),
    "is_dataclass": is_record,
    "is_tuple": lambda term: isinstance(term, tuple),
}


def _has_key(term: Any, key: Any) -> bool:
    if not isinstance(term, Mapping):
        return False
    try:
        return key in term
    except TypeError:
        return False


def _is_dataclass_of(term: Any, cls: Any) -> bool:
    return is_record(term) and isinstance(cls, type) and isinstance(term, cls)


PARAMETERIZED_GUARDS: Dict[str, Callable[[Any, Any], bool]] = {
    "is_callable": _callable_with_arity,
    "has_key": _has_key,
    "is_dataclass": _is_dataclass_of,
}

COMPARISON_OPERATORS = ("==", "!=", ">", "<", ">=", "<=", "=~")

GENERAL_OPERATORS = ("any", "*", "in", "length")

OPERATORS: Tuple[str, ...] = tuple(GUARDS) + COMPARISON_OPERATORS + GENERAL_OPERATORS

_ORDERING = {
    ">": lambda left, right: left > right,
    "<": lambda left, right: left < right,
    ">=": lambda left, right: left >= right,
    "<=": lambda left, right: left <= right,
}

# Nested comparisons allowed inside a "length" operand.
_LENGTH_OPERATORS = ("==", "!=", ">", "<", ">=", "<=", "in")


def _coerce_decimal(operand: Any) -> Optional[Decimal]:
    if isinstance(operand, Decimal):
        return operand
    if isinstance(operand, bool):
        return None
    if isinstance(operand, int):
        return Decimal(operand)
    if isinstance(operand, float):
        return Decimal(str(operand))
    if isinstance(operand, str):
        try:
            return Decimal(operand)
        except InvalidOperation:
            return None
    return None


def _coerce_datetime(operand: Any) -> Optional[datetime]:
    if isinstance(operand, datetime):
        return operand
    if isinstance(operand, str):
        try:
            return datetime.fromisoformat(operand)
        except ValueError:
            return None
    return None


def _ordered_domain(subject: Any) -> Optional[Callable[[Any], Any]]:
    """Return the operand coercion for subjects with their own total order."""
    if isinstance(subject, Decimal):
        return _coerce_decimal
    if isinstance(subject, datetime):
        return _coerce_datetime
    return None


class DefaultComparisonEngine(ComparisonEngine):
    """Implements guard checks, comparisons and general operators."""

    def operators(self) -> Tuple[str, ...]:
        return OPERATORS

    def is_operator(self, key: Any) -> bool:
        return isinstance(key, str) and key in OPERATORS

    def compare(self, subject: Any, application: Any) -> bool:
        """
        Compare `subject` against a bare operator or an (operator, operand) pair.

        Examples:
            compare("hello", ("=~", re.compile("^he")))  -> True
            compare(1, "is_int")                          -> True
            compare({"body": 1}, ("has_key", "body"))     -> True
            compare(Decimal("1.0"), ("==", Decimal("1.00"))) -> True
            compare([1, 2, 3], ("length", {">": 2}))      -> True
            compare(1, ("in", [1, 2, 3]))                 -> True
        """
        if isinstance(application, str):
            return self._compare_atom(subject, application)

        if not (isinstance(application, tuple) and len(application) == 2):
            return False

        operator, operand = application
        if not self.is_operator(operator):
            return False

        if operator in PARAMETERIZED_GUARDS:
            return PARAMETERIZED_GUARDS[operator](subject, operand)

        if operator in COMPARISON_OPERATORS:
            coerce = _ordered_domain(subject)
            if coerce is not None and operator != "=~":
                return self._compare_ordered(subject, operator, operand, coerce)
            return self._compare_generic(subject, operator, operand)

        return self._compare_general(subject, operator, operand)

    def _compare_atom(self, subject: Any, operator: str) -> bool:
        guard = GUARDS.get(operator)
        if guard is not None:
            return guard(subject)
        if operator in ("any", "*"):
            return True
        return False

    def _compare_ordered(self, subject: Any, operator: str, operand: Any, coerce: Callable[[Any], Any]) -> bool:
        other = coerce(operand)
        if other is None:
            if operator == "==":
                return False
            if operator == "!=":
                return True
            raise TypeError(
                f"'{operator}' not supported between {type(subject).__name__} "
                f"and {type(operand).__name__}"
            )
        if operator == "==":
            return subject == other
        if operator == "!=":
            return subject != other
        return _ORDERING[operator](subject, other)

    def _compare_generic(self, subject: Any, operator: str, operand: Any) -> bool:
        if operator == "==":
            return strict_equal(subject, operand)
        if operator == "!=":
            return not strict_equal(subject, operand)
        if operator == "=~":
            if not isinstance(subject, str):
                return False
            if isinstance(operand, re.Pattern):
                return operand.search(subject) is not None
            if isinstance(operand, str):
                return operand in subject
            return False
        return _ORDERING[operator](subject, operand)

    def _compare_general(self, subject: Any, operator: str, operand: Any) -> bool:
        if operator in ("any", "*"):
            return True
        if operator == "in":
            return self._member(subject, operand)
        if operator == "length":
            return self._length(subject, operand)
        return False

    def _member(self, subject: Any, operand: Any) -> bool:
        if isinstance(operand, (list, tuple)):
            return any(strict_equal(subject, item) for item in operand)
        if isinstance(operand, Collection) and not isinstance(operand, (str, bytes)):
            try:
                return subject in operand
            except TypeError:
                return False
        if isinstance(subject, (list, tuple)):
            return any(strict_equal(item, operand) for item in subject)
        return False

    def _length(self, subject: Any, operand: Any) -> bool:
        if not isinstance(subject, (list, tuple)):
            return False
        count = len(subject)

        if isinstance(operand, range):
            return count in operand
        if isinstance(operand, int) and not isinstance(operand, bool):
            return count == operand
        if isinstance(operand, Mapping) and operand:
            for nested, value in operand.items():
                if nested not in _LENGTH_OPERATORS:
                    return False
                if not self.compare(count, (nested, value)):
                    return False
            return True
        return False
