"""Tests for auto-incrementing labels and counters."""

import pytest

from funnelgraph.graph.labels import Counters, label_number, next_label, reconcile_counters
from funnelgraph.graph.model import FunnelNode, FunnelNodeData
from funnelgraph.templates import NodeType


def _node(node_id: str, node_type: NodeType, label: str) -> FunnelNode:
    return FunnelNode(id=node_id, data=FunnelNodeData.from_template(node_type, label))


class TestNextLabel:
    def test_first_upsell_is_numbered_one(self):
        label, counters = next_label(NodeType.UPSELL, Counters())
        assert label == "Upsell 1"
        assert counters == Counters(upsell=1)

    def test_numbers_keep_increasing(self):
        counters = Counters()
        labels = []
        for _ in range(3):
            label, counters = next_label(NodeType.UPSELL, counters)
            labels.append(label)
        assert labels == ["Upsell 1", "Upsell 2", "Upsell 3"]

    def test_types_count_independently(self):
        _, counters = next_label(NodeType.UPSELL, Counters())
        label, counters = next_label(NodeType.DOWNSELL, counters)
        assert label == "Downsell 1"
        assert counters == Counters(upsell=1, downsell=1)

    @pytest.mark.parametrize(
        "node_type, expected",
        [
            (NodeType.SALES_PAGE, "Sales Page"),
            (NodeType.ORDER_PAGE, "Order Page"),
            (NodeType.THANK_YOU, "Thank You"),
        ],
    )
    def test_non_repeatable_uses_template_label(self, node_type, expected):
        counters = Counters(upsell=4, downsell=2)
        label, updated = next_label(node_type, counters)
        assert label == expected
        assert updated is counters

    def test_input_counters_not_mutated(self):
        original = Counters(upsell=2)
        next_label(NodeType.UPSELL, original)
        assert original.upsell == 2


class TestCounters:
    def test_round_trip_dict(self):
        counters = Counters(upsell=3, downsell=1)
        assert Counters.from_dict(counters.to_dict()) == counters
        assert counters.to_dict() == {"upsell": 3, "downsell": 1}

    def test_missing_keys_read_as_zero(self):
        assert Counters.from_dict({"upsell": 2}) == Counters(upsell=2, downsell=0)

    @pytest.mark.parametrize("bad", [None, [], "3", {"upsell": "3"}, {"upsell": -1}, {"upsell": True}])
    def test_invalid_values_read_as_zero(self, bad):
        assert Counters.from_dict(bad).upsell == 0

    def test_at_least_never_lowers(self):
        counters = Counters(upsell=5)
        assert counters.at_least(NodeType.UPSELL, 3).upsell == 5
        assert counters.at_least(NodeType.UPSELL, 8).upsell == 8


class TestReconcileCounters:
    def test_label_number(self):
        assert label_number(NodeType.UPSELL, "Upsell 12") == 12
        assert label_number(NodeType.UPSELL, "Upsell") is None
        assert label_number(NodeType.UPSELL, "Premium Upsell 3") is None
        assert label_number(NodeType.SALES_PAGE, "Sales Page 2") is None

    def test_raises_to_highest_imported_number(self):
        nodes = [
            _node("a", NodeType.UPSELL, "Upsell 5"),
            _node("b", NodeType.UPSELL, "Upsell 2"),
            _node("c", NodeType.DOWNSELL, "Downsell 3"),
        ]
        assert reconcile_counters(Counters(), nodes) == Counters(upsell=5, downsell=3)

    def test_keeps_higher_existing_counters(self):
        nodes = [_node("a", NodeType.UPSELL, "Upsell 5")]
        assert reconcile_counters(Counters(upsell=9), nodes) == Counters(upsell=9)

    def test_renamed_labels_ignored(self):
        nodes = [_node("a", NodeType.UPSELL, "VIP offer")]
        assert reconcile_counters(Counters(upsell=1), nodes) == Counters(upsell=1)

    def test_label_of_other_type_ignored(self):
        # An order page labelled like an upsell does not advance upsell numbering
        nodes = [_node("a", NodeType.ORDER_PAGE, "Upsell 7")]
        assert reconcile_counters(Counters(), nodes) == Counters()
