"""Node and edge records held by the funnel graph.

The core only reads the four semantic node fields (label, type, button
label, icon) plus edge endpoints. Anything else a renderer attaches
(node ``type: "funnel"``, selection state, edge styling) is kept in an
opaque ``extra`` mapping and written back unchanged on export.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping

from funnelgraph.templates import NodeType, template_for

_EMPTY: Mapping[str, Any] = MappingProxyType({})


def _freeze(extra: Mapping[str, Any] | None) -> Mapping[str, Any]:
    if not extra:
        return _EMPTY
    return MappingProxyType(dict(extra))


@dataclass(frozen=True)
class Position:
    """Canvas coordinates. Owned by the renderer, never interpreted by the core."""

    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class FunnelNodeData:
    """Semantic payload of a funnel node."""

    label: str
    type: NodeType
    button_label: str
    icon: str
    extra: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra", _freeze(self.extra))

    @classmethod
    def from_template(cls, node_type: NodeType, label: str | None = None) -> FunnelNodeData:
        """Build a payload from the type's template, optionally overriding the label."""
        template = template_for(node_type)
        return cls(
            label=template.label if label is None else label,
            type=template.type,
            button_label=template.button_label,
            icon=template.icon,
        )


@dataclass(frozen=True)
class FunnelNode:
    """A typed step in the funnel."""

    id: str
    data: FunnelNodeData
    position: Position = field(default_factory=Position)
    extra: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra", _freeze(self.extra))

    @property
    def type(self) -> NodeType:
        return self.data.type

    @property
    def label(self) -> str:
        return self.data.label

    def with_label(self, label: str) -> FunnelNode:
        """Return a copy with a new label."""
        return replace(self, data=replace(self.data, label=label))


@dataclass(frozen=True)
class FunnelEdge:
    """A directed connection from ``source`` to ``target``."""

    id: str
    source: str
    target: str
    extra: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra", _freeze(self.extra))

    def touches(self, node_ids: set[str] | frozenset[str]) -> bool:
        """True if either endpoint is in ``node_ids``."""
        return self.source in node_ids or self.target in node_ids
