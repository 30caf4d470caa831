"""Tests for the JSON funnel document format."""

from __future__ import annotations

import json

import pytest

from funnelgraph.exceptions import DocumentError
from funnelgraph.graph.labels import Counters
from funnelgraph.graph.model import FunnelEdge, FunnelNode, FunnelNodeData, Position
from funnelgraph.persistence.document import (
    deserialize,
    dump_counters,
    dumps,
    load_counters,
    loads,
    serialize,
)
from funnelgraph.templates import NodeType

# A document as the browser editor exports it
EXPORTED = {
    "nodes": [
        {
            "id": "salesPage-1700000000000",
            "type": "funnel",
            "position": {"x": 120, "y": 45.5},
            "data": {"label": "Sales Page", "type": "salesPage", "buttonLabel": "Buy Now", "icon": "📄"},
            "measured": {"width": 180, "height": 90},
        },
        {
            "id": "upsell-1700000000001",
            "type": "funnel",
            "position": {"x": 300, "y": 45},
            "data": {"label": "Upsell 3", "type": "upsell", "buttonLabel": "Yes, Add This!", "icon": "⬆️"},
        },
    ],
    "edges": [
        {
            "id": "xy-edge__salesPage-1700000000000-upsell-1700000000001",
            "source": "salesPage-1700000000000",
            "target": "upsell-1700000000001",
            "type": "smoothstep",
            "animated": True,
            "markerEnd": {"type": "arrowclosed"},
        }
    ],
}


class TestDeserialize:
    def test_reads_exported_document(self):
        doc = deserialize(EXPORTED)

        assert [n.id for n in doc.nodes] == ["salesPage-1700000000000", "upsell-1700000000001"]
        sales = doc.nodes[0]
        assert sales.type is NodeType.SALES_PAGE
        assert sales.position == Position(120, 45.5)
        assert sales.data.button_label == "Buy Now"
        assert doc.nodes[1].label == "Upsell 3"
        assert doc.edges[0].source == "salesPage-1700000000000"

    def test_round_trip_keeps_renderer_keys(self):
        assert serialize(*_parts(deserialize(EXPORTED))) == EXPORTED

    def test_missing_optional_fields_default_from_template(self):
        doc = deserialize({"nodes": [{"id": "t", "data": {"type": "thankYou"}}], "edges": []})
        node = doc.nodes[0]
        assert node.label == "Thank You"
        assert node.data.button_label == "Continue"
        assert node.position == Position(0, 0)

    def test_empty_document(self):
        doc = deserialize({"nodes": [], "edges": []})
        assert doc.nodes == () and doc.edges == ()

    @pytest.mark.parametrize(
        "document, fragment",
        [
            ([], "expected a JSON object"),
            ({"edges": []}, "missing 'nodes'"),
            ({"nodes": []}, "missing 'edges'"),
            ({"nodes": {}, "edges": []}, "'nodes' must be a list"),
            ({"nodes": [], "edges": "x"}, "'edges' must be a list"),
            ({"nodes": ["x"], "edges": []}, "node must be an object"),
            ({"nodes": [{"data": {"type": "upsell"}}], "edges": []}, "'id' must be a non-empty string"),
            ({"nodes": [{"id": "a"}], "edges": []}, "'data' must be an object"),
            ({"nodes": [{"id": "a", "data": {"type": "popup"}}], "edges": []}, "unknown node type 'popup'"),
            (
                {"nodes": [{"id": "a", "data": {"type": "upsell", "label": 3}}], "edges": []},
                "'label' must be a string",
            ),
            (
                {"nodes": [{"id": "a", "position": {"x": "1"}, "data": {"type": "upsell"}}], "edges": []},
                "'x' must be a number",
            ),
            ({"nodes": [], "edges": [{"id": "e", "source": "a"}]}, "'target' must be a non-empty string"),
        ],
    )
    def test_malformed_documents(self, document, fragment):
        with pytest.raises(DocumentError) as exc_info:
            deserialize(document)
        assert fragment in exc_info.value.reason

    def test_error_reports_path(self):
        document = {
            "nodes": [
                {"id": "a", "data": {"type": "upsell"}},
                {"id": "b", "data": {"type": "nope"}},
            ],
            "edges": [],
        }
        with pytest.raises(DocumentError) as exc_info:
            deserialize(document)
        assert exc_info.value.path == "nodes[1].data.type"
        assert "nodes[1].data.type" in str(exc_info.value)

    def test_duplicate_node_ids(self):
        node = {"id": "a", "data": {"type": "upsell"}}
        with pytest.raises(DocumentError, match="duplicate node id 'a'"):
            deserialize({"nodes": [node, node], "edges": []})

    def test_duplicate_edge_ids(self):
        nodes = [{"id": "a", "data": {"type": "upsell"}}]
        edge = {"id": "e", "source": "a", "target": "a"}
        with pytest.raises(DocumentError, match="duplicate edge id 'e'"):
            deserialize({"nodes": nodes, "edges": [edge, edge]})

    def test_dangling_edge(self):
        nodes = [{"id": "a", "data": {"type": "upsell"}}]
        with pytest.raises(DocumentError) as exc_info:
            deserialize({"nodes": nodes, "edges": [{"id": "e", "source": "a", "target": "z"}]})
        assert exc_info.value.path == "edges[0].target"

    def test_terminal_source_is_accepted(self):
        nodes = [
            {"id": "t", "data": {"type": "thankYou"}},
            {"id": "s", "data": {"type": "salesPage"}},
        ]
        doc = deserialize({"nodes": nodes, "edges": [{"id": "e", "source": "t", "target": "s"}]})
        assert len(doc.edges) == 1


class TestLoadsDumps:
    def test_loads_rejects_invalid_json(self):
        with pytest.raises(DocumentError, match="not valid JSON"):
            loads("{nodes: ")

    def test_loads_accepts_bytes(self):
        assert len(loads(json.dumps(EXPORTED).encode("utf-8")).nodes) == 2

    def test_dumps_is_pretty_and_keeps_icons(self):
        node = FunnelNode(id="u", data=FunnelNodeData.from_template(NodeType.UPSELL, "Upsell 1"))
        text = dumps([node], [])
        assert text.startswith('{\n  "nodes": [')
        assert "⬆️" in text
        assert json.loads(text)["nodes"][0]["data"]["buttonLabel"] == "Yes, Add This!"

    def test_edges_serialize_in_order(self):
        nodes = [FunnelNode(id="a", data=FunnelNodeData.from_template(NodeType.UPSELL))]
        edges = [FunnelEdge("e2", "a", "a"), FunnelEdge("e1", "a", "a")]
        assert [e["id"] for e in serialize(nodes, edges)["edges"]] == ["e2", "e1"]


class TestCountersDocument:
    def test_round_trip(self):
        counters = Counters(upsell=4, downsell=2)
        assert json.loads(dump_counters(counters)) == {"upsell": 4, "downsell": 2}
        assert load_counters(dump_counters(counters)) == counters

    def test_missing_slot(self):
        assert load_counters(None) == Counters()

    def test_corrupt_slot(self, caplog):
        assert load_counters("{oops") == Counters()
        assert "not valid JSON" in caplog.text


def _parts(doc):
    return doc.nodes, doc.edges
