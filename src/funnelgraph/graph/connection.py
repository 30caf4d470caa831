"""Connection rules checked whenever an edge is proposed.

Only one connection is ever refused: an edge leaving a terminal (thank-you)
page. Everything else, including parallel edges, self-loops and fan-out,
is accepted here and surfaced as a validation warning instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping

from funnelgraph.templates import TERMINAL_TYPES

if TYPE_CHECKING:
    from funnelgraph.graph.model import FunnelNode

TERMINAL_SOURCE_REASON = "terminal node cannot have outgoing connections"


@dataclass(frozen=True)
class ConnectionDecision:
    """Outcome of a connection check.

    Attributes:
        allowed: True if the edge may be created
        reason: Why the edge was refused (None when allowed)
    """

    allowed: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOWED = ConnectionDecision(allowed=True)


def can_connect(
    nodes: Mapping[str, FunnelNode],
    source: str,
    target: str,
) -> ConnectionDecision:
    """Decide whether an edge ``source -> target`` may be added.

    Args:
        nodes: Map of node id -> node for the current graph
        source: Proposed source node id
        target: Proposed target node id
    """
    source_node = nodes.get(source)
    if source_node is None:
        return ConnectionDecision(False, f"unknown source node '{source}'")
    if target not in nodes:
        return ConnectionDecision(False, f"unknown target node '{target}'")
    if source_node.type in TERMINAL_TYPES:
        return ConnectionDecision(False, TERMINAL_SOURCE_REASON)
    return ALLOWED
