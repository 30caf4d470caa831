"""Graph package - funnel graph store, connection rules, labels and validation."""

from funnelgraph.graph.connection import ConnectionDecision, can_connect
from funnelgraph.graph.core import Deletion, EdgeResult, FunnelGraph, GraphSnapshot
from funnelgraph.graph.labels import Counters, next_label, reconcile_counters
from funnelgraph.graph.model import FunnelEdge, FunnelNode, FunnelNodeData, Position
from funnelgraph.graph.validation import (
    Issue,
    Severity,
    ValidationReport,
    ValidationStatus,
    summarize,
    validate,
)

__all__ = [
    "ConnectionDecision",
    "Counters",
    "Deletion",
    "EdgeResult",
    "FunnelEdge",
    "FunnelGraph",
    "FunnelNode",
    "FunnelNodeData",
    "GraphSnapshot",
    "Issue",
    "Position",
    "Severity",
    "ValidationReport",
    "ValidationStatus",
    "can_connect",
    "next_label",
    "reconcile_counters",
    "summarize",
    "validate",
]
