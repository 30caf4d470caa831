"""Event types emitted by the funnel graph store."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from funnelgraph.graph.validation import ValidationReport


def _now() -> float:
    """Current timestamp."""
    return time.time()


@dataclass(frozen=True)
class BaseEvent:
    """Base class for all graph events.

    Attributes:
        revision: Graph revision after the change (unchanged for rejections).
        timestamp: Unix timestamp when the event was created.
    """

    revision: int
    timestamp: float = field(default_factory=_now)


@dataclass(frozen=True)
class NodeAddedEvent(BaseEvent):
    """Emitted after a node is inserted.

    Attributes:
        node_id: Id of the new node.
        node_type: Wire name of the node type.
        label: Generated label.
    """

    node_id: str = ""
    node_type: str = ""
    label: str = ""


@dataclass(frozen=True)
class NodeUpdatedEvent(BaseEvent):
    """Emitted after a node label is edited."""

    node_id: str = ""
    label: str = ""


@dataclass(frozen=True)
class NodesDeletedEvent(BaseEvent):
    """Emitted after nodes are removed together with their edges.

    Attributes:
        node_ids: Ids of removed nodes, in graph order.
        edge_ids: Ids of edges removed because they touched a removed node.
    """

    node_ids: tuple[str, ...] = ()
    edge_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class EdgeAddedEvent(BaseEvent):
    """Emitted after an edge is inserted."""

    edge_id: str = ""
    source: str = ""
    target: str = ""


@dataclass(frozen=True)
class EdgeRemovedEvent(BaseEvent):
    """Emitted after a single edge is removed."""

    edge_id: str = ""


@dataclass(frozen=True)
class GraphReplacedEvent(BaseEvent):
    """Emitted after the whole graph is replaced (import, load or clear)."""

    node_count: int = 0
    edge_count: int = 0


@dataclass(frozen=True)
class ConnectionRejectedEvent(BaseEvent):
    """Emitted when a proposed edge is refused. The graph is unchanged.

    Attributes:
        source: Proposed source node id.
        target: Proposed target node id.
        reason: Why the connection was refused.
    """

    source: str = ""
    target: str = ""
    reason: str = ""


@dataclass(frozen=True)
class ValidationEvent(BaseEvent):
    """Emitted after every committed mutation with the fresh validation report."""

    report: ValidationReport | None = None


Event = Union[
    NodeAddedEvent,
    NodeUpdatedEvent,
    NodesDeletedEvent,
    EdgeAddedEvent,
    EdgeRemovedEvent,
    GraphReplacedEvent,
    ConnectionRejectedEvent,
    ValidationEvent,
]

# Events that follow a committed change to nodes or edges
MutationEvent = Union[
    NodeAddedEvent,
    NodeUpdatedEvent,
    NodesDeletedEvent,
    EdgeAddedEvent,
    EdgeRemovedEvent,
    GraphReplacedEvent,
]
