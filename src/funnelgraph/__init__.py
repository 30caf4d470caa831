"""Funnelgraph - model, validate and persist sales funnel graphs."""

from funnelgraph.events import (
    BaseEvent,
    ConnectionRejectedEvent,
    EdgeAddedEvent,
    EdgeRemovedEvent,
    Event,
    EventDispatcher,
    EventProcessor,
    GraphReplacedEvent,
    NodeAddedEvent,
    NodesDeletedEvent,
    NodeUpdatedEvent,
    TypedEventProcessor,
    ValidationEvent,
)
from funnelgraph.exceptions import (
    DocumentError,
    DuplicateIdError,
    FunnelError,
    UnknownNodeError,
    UnknownNodeTypeError,
)
from funnelgraph.graph import (
    ConnectionDecision,
    Counters,
    Deletion,
    EdgeResult,
    FunnelEdge,
    FunnelGraph,
    FunnelNode,
    FunnelNodeData,
    Issue,
    Position,
    Severity,
    ValidationReport,
    ValidationStatus,
    can_connect,
    next_label,
    validate,
)
from funnelgraph.panel import RichIssuePanel, issue_panel_lines
from funnelgraph.persistence import (
    AutosaveProcessor,
    DiskStorage,
    FunnelDocument,
    InMemoryStorage,
    StorageBackend,
    deserialize,
    serialize,
)
from funnelgraph.session import EditorSession, RenderState
from funnelgraph.templates import NODE_TEMPLATES, NodeTemplate, NodeType, color_for

__all__ = [
    # Node types
    "NodeType",
    "NodeTemplate",
    "NODE_TEMPLATES",
    "color_for",
    # Graph
    "FunnelGraph",
    "FunnelNode",
    "FunnelNodeData",
    "FunnelEdge",
    "Position",
    "EdgeResult",
    "Deletion",
    "Counters",
    "next_label",
    "ConnectionDecision",
    "can_connect",
    # Validation
    "Issue",
    "Severity",
    "ValidationReport",
    "ValidationStatus",
    "validate",
    "issue_panel_lines",
    "RichIssuePanel",
    # Session and persistence
    "EditorSession",
    "RenderState",
    "FunnelDocument",
    "serialize",
    "deserialize",
    "StorageBackend",
    "InMemoryStorage",
    "DiskStorage",
    "AutosaveProcessor",
    # Errors
    "FunnelError",
    "UnknownNodeTypeError",
    "UnknownNodeError",
    "DuplicateIdError",
    "DocumentError",
    # Events
    "BaseEvent",
    "Event",
    "EventDispatcher",
    "EventProcessor",
    "TypedEventProcessor",
    "NodeAddedEvent",
    "NodeUpdatedEvent",
    "NodesDeletedEvent",
    "EdgeAddedEvent",
    "EdgeRemovedEvent",
    "GraphReplacedEvent",
    "ConnectionRejectedEvent",
    "ValidationEvent",
]
