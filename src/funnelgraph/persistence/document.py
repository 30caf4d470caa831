"""JSON document format for saved and exported funnels.

Shape::

    {
      "nodes": [{"id": ..., "position": {"x": ..., "y": ...},
                 "data": {"label": ..., "type": ..., "buttonLabel": ..., "icon": ...}}],
      "edges": [{"id": ..., "source": ..., "target": ...}]
    }

Keys the core does not know about (renderer node type, edge styling,
selection flags) are carried through untouched.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from numbers import Real
from typing import TYPE_CHECKING, Any

from funnelgraph.exceptions import DocumentError, UnknownNodeTypeError
from funnelgraph.graph.labels import Counters
from funnelgraph.graph.model import FunnelEdge, FunnelNode, FunnelNodeData, Position
from funnelgraph.templates import parse_node_type, template_for

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

_NODE_KEYS = {"id", "position", "data"}
_DATA_KEYS = {"label", "type", "buttonLabel", "icon"}
_EDGE_KEYS = {"id", "source", "target"}


@dataclass(frozen=True)
class FunnelDocument:
    """A parsed, structurally sound funnel document."""

    nodes: tuple[FunnelNode, ...] = ()
    edges: tuple[FunnelEdge, ...] = ()


def serialize(nodes: Iterable[FunnelNode], edges: Iterable[FunnelEdge]) -> dict[str, Any]:
    """Convert nodes and edges to a JSON-compatible document."""
    return {
        "nodes": [_node_to_dict(n) for n in nodes],
        "edges": [_edge_to_dict(e) for e in edges],
    }


def dumps(nodes: Iterable[FunnelNode], edges: Iterable[FunnelEdge]) -> str:
    """Serialize to pretty-printed JSON text (export format)."""
    return json.dumps(serialize(nodes, edges), indent=2, ensure_ascii=False)


def deserialize(document: Any) -> FunnelDocument:
    """Validate and convert a decoded JSON document.

    Nothing is returned unless the whole document is sound, so callers can
    keep their current graph when this raises.

    Raises:
        DocumentError: If the document is malformed
    """
    if not isinstance(document, dict):
        raise DocumentError(f"expected a JSON object, got {type(document).__name__}")
    for key in ("nodes", "edges"):
        if key not in document:
            raise DocumentError(f"missing '{key}'")
        if not isinstance(document[key], list):
            raise DocumentError(f"'{key}' must be a list", path=key)

    nodes = [_node_from_dict(raw, f"nodes[{i}]") for i, raw in enumerate(document["nodes"])]
    edges = [_edge_from_dict(raw, f"edges[{i}]") for i, raw in enumerate(document["edges"])]

    node_ids: set[str] = set()
    for i, node in enumerate(nodes):
        if node.id in node_ids:
            raise DocumentError(f"duplicate node id '{node.id}'", path=f"nodes[{i}].id")
        node_ids.add(node.id)

    edge_ids: set[str] = set()
    for i, edge in enumerate(edges):
        if edge.id in edge_ids:
            raise DocumentError(f"duplicate edge id '{edge.id}'", path=f"edges[{i}].id")
        edge_ids.add(edge.id)
        for end in ("source", "target"):
            endpoint = getattr(edge, end)
            if endpoint not in node_ids:
                raise DocumentError(f"unknown node '{endpoint}'", path=f"edges[{i}].{end}")

    return FunnelDocument(nodes=tuple(nodes), edges=tuple(edges))


def loads(text: str | bytes) -> FunnelDocument:
    """Parse JSON text into a funnel document.

    Raises:
        DocumentError: If the text is not JSON or the document is malformed
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DocumentError(f"not valid JSON ({e})") from e
    return deserialize(data)


def dump_counters(counters: Counters) -> str:
    """Serialize counters to their own storage slot."""
    return json.dumps(counters.to_dict())


def load_counters(text: str | None) -> Counters:
    """Read counters from storage. Unreadable values start from zero."""
    if text is None:
        return Counters()
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        logger.warning("Stored counters are not valid JSON, starting from zero")
        return Counters()
    return Counters.from_dict(data)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _node_to_dict(node: FunnelNode) -> dict[str, Any]:
    data = {
        "label": node.data.label,
        "type": node.data.type.value,
        "buttonLabel": node.data.button_label,
        "icon": node.data.icon,
    }
    data.update((k, v) for k, v in node.data.extra.items() if k not in _DATA_KEYS)
    result: dict[str, Any] = {"id": node.id}
    result.update((k, v) for k, v in node.extra.items() if k not in _NODE_KEYS)
    result["position"] = {"x": node.position.x, "y": node.position.y}
    result["data"] = data
    return result


def _edge_to_dict(edge: FunnelEdge) -> dict[str, Any]:
    result: dict[str, Any] = {"id": edge.id, "source": edge.source, "target": edge.target}
    result.update((k, v) for k, v in edge.extra.items() if k not in _EDGE_KEYS)
    return result


def _require_str(raw: dict[str, Any], key: str, path: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value:
        raise DocumentError(f"'{key}' must be a non-empty string", path=f"{path}.{key}")
    return value


def _optional_str(raw: dict[str, Any], key: str, default: str, path: str) -> str:
    value = raw.get(key, default)
    if not isinstance(value, str):
        raise DocumentError(f"'{key}' must be a string", path=f"{path}.{key}")
    return value


def _position_from(raw: Any, path: str) -> Position:
    if raw is None:
        return Position()
    if not isinstance(raw, dict):
        raise DocumentError("position must be an object", path=path)
    coords = []
    for axis in ("x", "y"):
        value = raw.get(axis, 0)
        # bool is a Real subclass
        if isinstance(value, bool) or not isinstance(value, Real):
            raise DocumentError(f"'{axis}' must be a number", path=f"{path}.{axis}")
        coords.append(value)
    return Position(*coords)


def _node_from_dict(raw: Any, path: str) -> FunnelNode:
    if not isinstance(raw, dict):
        raise DocumentError("node must be an object", path=path)
    node_id = _require_str(raw, "id", path)

    data = raw.get("data")
    if not isinstance(data, dict):
        raise DocumentError("'data' must be an object", path=f"{path}.data")
    try:
        node_type = parse_node_type(data.get("type"))
    except UnknownNodeTypeError as e:
        raise DocumentError(f"unknown node type {e.node_type!r}", path=f"{path}.data.type") from e

    template = template_for(node_type)
    data_path = f"{path}.data"
    payload = FunnelNodeData(
        label=_optional_str(data, "label", template.label, data_path),
        type=node_type,
        button_label=_optional_str(data, "buttonLabel", template.button_label, data_path),
        icon=_optional_str(data, "icon", template.icon, data_path),
        extra={k: v for k, v in data.items() if k not in _DATA_KEYS},
    )
    return FunnelNode(
        id=node_id,
        data=payload,
        position=_position_from(raw.get("position"), f"{path}.position"),
        extra={k: v for k, v in raw.items() if k not in _NODE_KEYS},
    )


def _edge_from_dict(raw: Any, path: str) -> FunnelEdge:
    if not isinstance(raw, dict):
        raise DocumentError("edge must be an object", path=path)
    return FunnelEdge(
        id=_require_str(raw, "id", path),
        source=_require_str(raw, "source", path),
        target=_require_str(raw, "target", path),
        extra={k: v for k, v in raw.items() if k not in _EDGE_KEYS},
    )
