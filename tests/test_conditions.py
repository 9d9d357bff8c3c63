"""
Tests for the condition AST.

These tests verify:
    - Nodes can be created and compared
    - Nodes are immutable
    - Every node is a Condition
"""

import pytest
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


class TestLeafNodes:
    """Test leaf nodes."""

    def test_literal_holds_value(self):
        lit = Literal("active")
        assert lit.value == "active"

    def test_literal_immutable(self):
        """Literals should be immutable."""
        lit = Literal(5)
        with pytest.raises(AttributeError):
            lit.value = 10

    def test_operator_holds_name(self):
        assert Operator("is_str").name == "is_str"

    def test_apply_keeps_operand_raw(self):
        """Operands are plain values, never parsed."""
        node = Apply("length", {">": 2})
        assert node.operand == {">": 2}

    def test_wildcards_are_equal(self):
        assert Wildcard() == Wildcard()


class TestCompositeNodes:
    """Test nodes that wrap other conditions."""

    def test_field_path(self):
        node = FieldPath("status", Literal("active"))
        assert node.key == "status"
        assert node.condition == Literal("active")

    def test_qualifiers_hold_tuples(self):
        members = (Literal(1), Operator("is_int"))
        assert AllOf(members).conditions == members
        assert AnyOf(members).conditions == members

    def test_structural_equality(self):
        left = Entries((FieldPath("a", Literal(1)), Not(Wildcard())))
        right = Entries((FieldPath("a", Literal(1)), Not(Wildcard())))
        assert left == right

    def test_sequence_immutable(self):
        seq = Sequence((Literal(1),))
        with pytest.raises(AttributeError):
            seq.conditions = ()

    @pytest.mark.parametrize("node", [
        Wildcard(),
        Literal(1),
        Operator("is_int"),
        Apply(">", 1),
        FieldPath("a", Literal(1)),
        Entries(()),
        AllOf(()),
        AnyOf(()),
        Not(Wildcard()),
        Sequence(()),
    ])
    def test_every_node_is_a_condition(self, node):
        assert isinstance(node, Condition)


def test_qualifier_tokens():
    assert QUALIFIER_TOKENS == {"all", "any", "not"}
    assert Qualifier("all") is Qualifier.ALL


def test_wildcard_markers():
    assert "*" in WILDCARD_MARKERS
    assert "any" in WILDCARD_MARKERS
