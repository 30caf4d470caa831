"""Tests for node types and templates."""

import pytest

from funnelgraph.exceptions import UnknownNodeTypeError
from funnelgraph.templates import (
    FALLBACK_COLOR,
    NODE_TEMPLATES,
    REPEATABLE_TYPES,
    TERMINAL_TYPES,
    NodeType,
    color_for,
    parse_node_type,
    template_for,
)


class TestNodeTemplates:
    def test_every_type_has_a_template(self):
        assert set(NODE_TEMPLATES) == set(NodeType)
        for node_type, template in NODE_TEMPLATES.items():
            assert template.type is node_type

    def test_palette_order(self):
        assert [t.value for t in NODE_TEMPLATES] == [
            "salesPage",
            "orderPage",
            "upsell",
            "downsell",
            "thankYou",
        ]

    def test_template_defaults(self):
        sales = NODE_TEMPLATES[NodeType.SALES_PAGE]
        assert sales.label == "Sales Page"
        assert sales.button_label == "Buy Now"
        assert sales.color == "#3b82f6"

        thank_you = NODE_TEMPLATES[NodeType.THANK_YOU]
        assert thank_you.label == "Thank You"
        assert thank_you.button_label == "Continue"

    def test_templates_are_immutable(self):
        with pytest.raises(AttributeError):
            NODE_TEMPLATES[NodeType.UPSELL].label = "Changed"

    def test_repeatable_and_terminal_sets(self):
        assert REPEATABLE_TYPES == {NodeType.UPSELL, NodeType.DOWNSELL}
        assert TERMINAL_TYPES == {NodeType.THANK_YOU}


class TestParseNodeType:
    def test_accepts_enum(self):
        assert parse_node_type(NodeType.UPSELL) is NodeType.UPSELL

    def test_accepts_wire_name(self):
        assert parse_node_type("orderPage") is NodeType.ORDER_PAGE

    def test_unknown_raises(self):
        with pytest.raises(UnknownNodeTypeError) as exc_info:
            parse_node_type("checkout")

        assert exc_info.value.node_type == "checkout"
        assert "Unknown node type" in str(exc_info.value)
        assert "salesPage" in str(exc_info.value)

    def test_unknown_is_value_error(self):
        with pytest.raises(ValueError):
            parse_node_type(None)

    def test_template_for_string(self):
        assert template_for("downsell").label == "Downsell"


class TestColorFor:
    def test_known_type(self):
        assert color_for(NodeType.DOWNSELL) == "#ef4444"
        assert color_for("thankYou") == "#8b5cf6"

    def test_unknown_type_falls_back(self):
        assert color_for("mystery") == FALLBACK_COLOR == "#999"
