"""
Tests for the condition parser (raw Python value -> AST).

We need to:
1. Recognize qualifiers, operators and field paths in mappings
2. Turn lists and tuples into sequences
3. Tell operator atoms, wildcards and literals apart
4. Reject malformed shapes immediately
"""

import pytest
from matchbox.conditions import (
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
from matchbox.engines import ComparisonEngine, DefaultComparisonEngine
from matchbox.errors import ConditionError, ConfigurationError, DepthLimitExceeded
from matchbox.parser import parse_condition

ENGINE = DefaultComparisonEngine()


def parse(raw, **kwargs):
    return parse_condition(raw, ENGINE, **kwargs)


class EqualityOnlyEngine(ComparisonEngine):
    def operators(self):
        return ("==",)

    def compare(self, subject, application):
        return isinstance(application, tuple) and application[0] == "==" and subject == application[1]


class TestMappings:
    """Mapping conditions."""

    def test_empty_mapping(self):
        """An empty mapping never matches, so it parses to empty Entries."""
        assert parse({}) == Entries(())

    def test_field_path(self):
        assert parse({"status": "active"}) == FieldPath("status", Literal("active"))

    def test_operator_application(self):
        assert parse({">": 1}) == Apply(">", 1)

    def test_operand_not_parsed(self):
        assert parse({"length": {">": 2}}) == Apply("length", {">": 2})

    def test_several_entries(self):
        result = parse({"status": "active", "id": {">": 1}})
        assert result == Entries((
            FieldPath("status", Literal("active")),
            FieldPath("id", Apply(">", 1)),
        ))

    def test_all_qualifier_splits_mapping_body(self):
        result = parse({"all": {"status": "active", "id": {">": 1}}})
        assert result == AllOf((
            FieldPath("status", Literal("active")),
            FieldPath("id", Apply(">", 1)),
        ))

    def test_any_qualifier_splits_list_body(self):
        assert parse({"any": [1, "is_str"]}) == AnyOf((Literal(1), Operator("is_str")))

    def test_scalar_qualifier_body(self):
        assert parse({"all": "hello"}) == AllOf((Literal("hello"),))

    def test_not(self):
        assert parse({"not": {"deleted": True}}) == Not(FieldPath("deleted", Literal(True)))

    def test_several_qualifiers(self):
        result = parse({"all": [1], "not": 2})
        assert result == Entries((AllOf((Literal(1),)), Not(Literal(2))))

    def test_mixed_qualifier_and_field_keys_rejected(self):
        with pytest.raises(ConditionError):
            parse({"all": {"a": 1}, "status": "active"})

    def test_operator_keys_depend_on_engine(self):
        """">" is a field key for an engine that does not know it."""
        result = parse_condition({">": 1}, EqualityOnlyEngine())
        assert result == FieldPath(">", Literal(1))


class TestScalarsAndSequences:
    """Bare values and ordered collections."""

    def test_literal(self):
        assert parse("hello") == Literal("hello")

    def test_operator_atom(self):
        assert parse("is_str") == Operator("is_str")

    @pytest.mark.parametrize("marker", ["*", "any"])
    def test_wildcards(self, marker):
        assert parse(marker) == Wildcard()

    def test_wildcard_independent_of_engine(self):
        assert parse_condition("*", EqualityOnlyEngine()) == Wildcard()

    def test_list_becomes_sequence(self):
        assert parse([1, "is_int"]) == Sequence((Literal(1), Operator("is_int")))

    def test_tuple_becomes_sequence(self):
        assert parse((1, 2)) == Sequence((Literal(1), Literal(2)))

    def test_none_is_literal(self):
        assert parse(None) == Literal(None)

    @pytest.mark.parametrize("raw", [{1, 2}, frozenset([1]), iter([1, 2]), (x for x in [1])])
    def test_malformed_shapes_rejected(self, raw):
        with pytest.raises(ConditionError):
            parse(raw)


class TestNodes:
    """Hand-built nodes are accepted and normalized."""

    def test_literal_wrapper_forces_equality(self):
        assert parse(Literal("in")) == Literal("in")

    def test_raw_children_parsed(self):
        result = parse(FieldPath("a", {">": 1}))
        assert result == FieldPath("a", Apply(">", 1))

    def test_nodes_inside_raw_conditions(self):
        result = parse({"all": [Literal({"a": 1})]})
        assert result == AllOf((Literal({"a": 1}),))


class TestDepth:
    """Nesting ceiling."""

    def test_within_ceiling(self):
        assert parse({"a": {"b": 1}}, max_depth=5) == FieldPath("a", FieldPath("b", Literal(1)))

    def test_beyond_ceiling(self):
        condition = 1
        for _ in range(20):
            condition = {"a": condition}
        with pytest.raises(DepthLimitExceeded):
            parse(condition, max_depth=10)

    def test_at_ceiling(self):
        condition = 1
        for _ in range(10):
            condition = {"a": condition}
        assert isinstance(parse(condition, max_depth=10), FieldPath)
        with pytest.raises(DepthLimitExceeded):
            parse({"wrap": condition}, max_depth=10)

    def test_far_past_interpreter_recursion(self):
        condition = 1
        for _ in range(5000):
            condition = {"all": [condition]}
        node = parse(condition, max_depth=6000)
        levels = 0
        while isinstance(node, AllOf):
            node = node.conditions[0]
            levels += 1
        assert levels == 5000
        assert node == Literal(1)

    def test_entries_keep_mapping_depth(self):
        """Entries of one mapping sit at the same depth as the mapping."""
        assert parse({"a": 1, "b": 2}, max_depth=1) == Entries((
            FieldPath("a", Literal(1)),
            FieldPath("b", Literal(2)),
        ))

    @pytest.mark.parametrize("max_depth", [0, -3, False, "10"])
    def test_invalid_ceiling(self, max_depth):
        with pytest.raises(ConfigurationError):
            parse(1, max_depth=max_depth)
