"""
Tests for the default comparison engine.
"""

import enum
import io
import multiprocessing
import re
import weakref
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from matchbox.engines import DefaultComparisonEngine


@pytest.fixture
def engine():
    return DefaultComparisonEngine()


class Color(enum.Enum):
    RED = "red"


@dataclass
class Message:
    body: str


class Holder:
    pass


class TestOperators:
    """The recognized operator list."""

    def test_operator_order(self, engine):
        assert list(engine.operators()) == [
            "is_enum", "is_str", "is_bool", "is_float", "is_callable", "is_int",
            "is_list", "is_dict", "has_key", "is_none", "is_number", "is_process",
            "is_io", "is_reference", "is_dataclass", "is_tuple",
            "==", "!=", ">", "<", ">=", "<=", "=~",
            "any", "*", "in", "length",
        ]

    def test_operator_list_is_stable(self, engine):
        assert list(engine.operators()) == list(engine.operators())

    @pytest.mark.parametrize("key", ["is_str", "==", "=~", "in", "length", "*"])
    def test_is_operator(self, engine, key):
        assert engine.is_operator(key)

    @pytest.mark.parametrize("key", ["status", "", 1, None, ("==", 1), ["in"]])
    def test_is_not_operator(self, engine, key):
        assert not engine.is_operator(key)


class TestGuards:
    """Bare guard atoms."""

    @pytest.mark.parametrize("subject,guard", [
        (Color.RED, "is_enum"),
        ("hello", "is_str"),
        (False, "is_bool"),
        (1.5, "is_float"),
        (len, "is_callable"),
        (3, "is_int"),
        ([1], "is_list"),
        ({"a": 1}, "is_dict"),
        (None, "is_none"),
        (Decimal("1.5"), "is_number"),
        (2, "is_number"),
        (io.StringIO(), "is_io"),
        (Message("hi"), "is_dataclass"),
        ((1, 2), "is_tuple"),
    ])
    def test_guard_true(self, engine, subject, guard):
        assert engine.compare(subject, guard) is True

    @pytest.mark.parametrize("subject,guard", [
        (True, "is_int"),
        (True, "is_number"),
        (1, "is_float"),
        ((1,), "is_list"),
        ([1], "is_tuple"),
        (Message, "is_dataclass"),
        ("a", "is_none"),
        ({"a": 1}, "has_key"),
    ])
    def test_guard_false(self, engine, subject, guard):
        assert engine.compare(subject, guard) is False

    def test_process(self, engine):
        assert engine.compare(multiprocessing.Process(target=print), "is_process")

    def test_reference(self, engine):
        holder = Holder()
        assert engine.compare(weakref.ref(holder), "is_reference")
        assert not engine.compare(holder, "is_reference")

    @pytest.mark.parametrize("marker", ["any", "*"])
    def test_always_true_atoms(self, engine, marker):
        assert engine.compare(object(), marker)


class TestParameterizedGuards:
    """Guards that take an operand."""

    def test_callable_arity(self, engine):
        assert engine.compare(lambda x: x, ("is_callable", 1))
        assert not engine.compare(lambda: None, ("is_callable", 1))
        assert engine.compare(lambda *args: None, ("is_callable", 3))

    def test_has_key(self, engine):
        assert engine.compare({"body": 1}, ("has_key", "body"))
        assert not engine.compare({"body": 1}, ("has_key", "topic"))
        assert not engine.compare(["body"], ("has_key", "body"))

    def test_dataclass_of(self, engine):
        assert engine.compare(Message("hi"), ("is_dataclass", Message))
        assert not engine.compare(Message("hi"), ("is_dataclass", Holder))
        assert not engine.compare({"body": "hi"}, ("is_dataclass", Message))


class TestComparisons:
    """Comparison operators on generic values."""

    def test_equality_is_strict(self, engine):
        assert engine.compare(1, ("==", 1))
        assert not engine.compare(1, ("==", 1.0))
        assert not engine.compare(1, ("==", True))
        assert engine.compare(1, ("!=", 1.0))

    def test_ordering(self, engine):
        assert engine.compare(2, (">", 1))
        assert engine.compare(1, ("<", 2))
        assert engine.compare(2, (">=", 2))
        assert engine.compare(2, ("<=", 2))
        assert engine.compare("hello", (">", "h"))

    def test_ordering_without_defined_order_raises(self, engine):
        with pytest.raises(TypeError):
            engine.compare(1, (">", "a"))

    def test_regex_pattern(self, engine):
        assert engine.compare("hello", ("=~", re.compile("^he")))
        assert not engine.compare("hello", ("=~", re.compile("^lo")))

    def test_regex_substring(self, engine):
        assert engine.compare("hello", ("=~", "ell"))
        assert not engine.compare("hello", ("=~", "xyz"))

    def test_regex_non_string_subject(self, engine):
        assert engine.compare(5, ("=~", "5")) is False


class TestOrderedDomains:
    """Dates and decimals compare by value, not by structure."""

    def test_decimal_scale_ignored(self, engine):
        assert engine.compare(Decimal("1.0"), ("==", Decimal("1.00")))
        assert engine.compare(Decimal("1.50"), (">", Decimal("1.4")))

    def test_decimal_operand_coercion(self, engine):
        assert engine.compare(Decimal("2.00"), ("==", 2))
        assert engine.compare(Decimal("2.5"), ("<", "3"))
        assert engine.compare(Decimal("1.5"), ("==", 1.5))

    def test_decimal_uncoercible_operand(self, engine):
        assert engine.compare(Decimal("1"), ("==", "abc")) is False
        assert engine.compare(Decimal("1"), ("!=", "abc")) is True
        with pytest.raises(TypeError):
            engine.compare(Decimal("1"), (">", "abc"))

    def test_datetime(self, engine):
        early = datetime(2024, 1, 1, tzinfo=timezone.utc)
        late = datetime(2025, 1, 1, tzinfo=timezone.utc)
        assert engine.compare(late, (">", early))
        assert engine.compare(early, ("<", late))
        assert engine.compare(late, ("==", late.astimezone(timezone(timedelta(hours=2)))))

    def test_datetime_iso_operand(self, engine):
        late = datetime(2025, 1, 1, tzinfo=timezone.utc)
        assert engine.compare(late, (">", "2024-06-01T00:00:00+00:00"))

    def test_naive_and_aware_do_not_order(self, engine):
        aware = datetime(2025, 1, 1, tzinfo=timezone.utc)
        naive = datetime(2025, 1, 1)
        assert engine.compare(aware, ("==", naive)) is False
        with pytest.raises(TypeError):
            engine.compare(aware, (">", naive))


class TestGeneralOperators:
    """in, length, any and *."""

    def test_in_operand_collection(self, engine):
        assert engine.compare(1, ("in", [1, 2, 3]))
        assert not engine.compare(1.0, ("in", [1, 2, 3]))
        assert engine.compare("a", ("in", {"a", "b"}))
        assert engine.compare(2, ("in", range(5)))

    def test_in_subject_collection(self, engine):
        assert engine.compare([1, 2, 3], ("in", 1))
        assert not engine.compare([1, 2, 3], ("in", 4))

    def test_in_unrelated(self, engine):
        assert engine.compare(1, ("in", 1)) is False

    def test_length_nested(self, engine):
        assert engine.compare([1, 2, 3], ("length", {">": 2}))
        assert engine.compare([1, 2, 3], ("length", {">": 1, "<": 4}))
        assert not engine.compare([1, 2, 3], ("length", {">": 3}))
        assert engine.compare([1, 2], ("length", {"in": [2, 4]}))

    def test_length_int_and_range(self, engine):
        assert engine.compare((1, 2), ("length", 2))
        assert engine.compare([1, 2], ("length", range(1, 3)))

    def test_length_rejects_unknown_shapes(self, engine):
        assert not engine.compare("abc", ("length", 3))
        assert not engine.compare([1], ("length", {"=~": 1}))
        assert not engine.compare([1], ("length", {}))

    def test_any_pair(self, engine):
        assert engine.compare(None, ("*", "ignored"))


class TestUnsupported:
    """Unknown applications are non-matches."""

    @pytest.mark.parametrize("application", [
        "unknown",
        ("unknown", 1),
        ("==",),
        ["==", 1],
        42,
    ])
    def test_returns_false(self, engine, application):
        assert engine.compare(1, application) is False
