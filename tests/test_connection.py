"""Tests for connection rules."""

import pytest

from funnelgraph.graph.connection import TERMINAL_SOURCE_REASON, can_connect
from funnelgraph.graph.model import FunnelNode, FunnelNodeData
from funnelgraph.templates import NodeType


@pytest.fixture
def nodes():
    return {
        node_type.value: FunnelNode(id=node_type.value, data=FunnelNodeData.from_template(node_type))
        for node_type in NodeType
    }


class TestCanConnect:
    @pytest.mark.parametrize("target", [t.value for t in NodeType])
    def test_thank_you_cannot_be_source(self, nodes, target):
        decision = can_connect(nodes, "thankYou", target)
        assert not decision.allowed
        assert decision.reason == TERMINAL_SOURCE_REASON == "terminal node cannot have outgoing connections"

    @pytest.mark.parametrize(
        "source",
        [t.value for t in NodeType if t is not NodeType.THANK_YOU],
    )
    def test_other_sources_allowed(self, nodes, source):
        decision = can_connect(nodes, source, "thankYou")
        assert decision.allowed
        assert decision.reason is None
        assert bool(decision) is True

    def test_self_loop_allowed(self, nodes):
        assert can_connect(nodes, "upsell", "upsell").allowed

    def test_thank_you_may_be_target(self, nodes):
        assert can_connect(nodes, "orderPage", "thankYou").allowed

    def test_unknown_source(self, nodes):
        decision = can_connect(nodes, "ghost", "orderPage")
        assert not decision
        assert decision.reason == "unknown source node 'ghost'"

    def test_unknown_target(self, nodes):
        decision = can_connect(nodes, "salesPage", "ghost")
        assert not decision
        assert decision.reason == "unknown target node 'ghost'"
