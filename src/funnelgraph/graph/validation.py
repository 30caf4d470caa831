"""Structural checks over a funnel graph.

Validation is advisory: it never raises and never blocks a mutation. It is
a pure function of the node and edge lists, so calling it twice on the
same graph yields the same issues in the same order.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

import networkx as nx

from funnelgraph.templates import NodeType

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from funnelgraph.graph.model import FunnelEdge, FunnelNode


class Severity(str, Enum):
    """How serious an issue is.

    Values:
        WARNING: Advisory, the funnel is probably incomplete.
        ERROR: Structural problem, e.g. a page nothing links to or from.
    """

    WARNING = "warning"
    ERROR = "error"


class ValidationStatus(str, Enum):
    """What the issue panel should show.

    Values:
        EMPTY: No nodes yet, prompt the user to start building.
        OK: Nodes exist and no issues were found.
        ISSUES: At least one issue was found.
    """

    EMPTY = "empty"
    OK = "ok"
    ISSUES = "issues"


@dataclass(frozen=True)
class Issue:
    """A single validation finding."""

    severity: Severity
    message: str
    node_id: str | None = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR


@dataclass(frozen=True)
class ValidationReport:
    """Complete, untruncated validation output plus the panel state."""

    status: ValidationStatus
    issues: tuple[Issue, ...] = ()

    @property
    def errors(self) -> tuple[Issue, ...]:
        return tuple(i for i in self.issues if i.severity is Severity.ERROR)

    @property
    def warnings(self) -> tuple[Issue, ...]:
        return tuple(i for i in self.issues if i.severity is Severity.WARNING)

    @property
    def has_errors(self) -> bool:
        return any(i.is_error for i in self.issues)


def build_nx_graph(nodes: Iterable[FunnelNode], edges: Iterable[FunnelEdge]) -> nx.MultiDiGraph:
    """Build a multigraph keyed by edge id.

    Edges whose endpoints are not among ``nodes`` are skipped.
    """
    graph = nx.MultiDiGraph()
    for node in nodes:
        graph.add_node(node.id)
    for edge in edges:
        if edge.source in graph and edge.target in graph:
            graph.add_edge(edge.source, edge.target, key=edge.id)
    return graph


def validate(nodes: Sequence[FunnelNode], edges: Iterable[FunnelEdge]) -> list[Issue]:
    """Run all structural checks.

    Per-node issues come first, in node order, followed by sales-page
    fan-out warnings, also in node order.
    """
    graph = build_nx_graph(nodes, edges)
    issues: list[Issue] = []
    for node in nodes:
        issue = _check_node(node, graph.in_degree(node.id), graph.out_degree(node.id))
        if issue is not None:
            issues.append(issue)
    issues.extend(_check_sales_page_fan_out(nodes, graph))
    return issues


def summarize(nodes: Sequence[FunnelNode], issues: Sequence[Issue]) -> ValidationReport:
    """Wrap an issue list with the panel status for ``nodes``."""
    if not nodes:
        return ValidationReport(ValidationStatus.EMPTY)
    if not issues:
        return ValidationReport(ValidationStatus.OK)
    return ValidationReport(ValidationStatus.ISSUES, tuple(issues))


def _check_node(node: FunnelNode, incoming: int, outgoing: int) -> Issue | None:
    """At most one issue per node. Orphan beats missing-incoming beats missing-outgoing."""
    label = node.label
    if node.type is NodeType.SALES_PAGE:
        # Entry point, no incoming edge needed
        if not outgoing:
            return Issue(Severity.WARNING, f'"{label}" has no outgoing connection', node.id)
        return None

    if node.type is NodeType.THANK_YOU:
        # Terminal, no outgoing edge allowed
        if not incoming:
            return Issue(Severity.WARNING, f'"{label}" has no incoming connection', node.id)
        return None

    if not incoming and not outgoing:
        return Issue(Severity.ERROR, f'"{label}" is orphaned (no connections)', node.id)
    if not incoming:
        return Issue(Severity.WARNING, f'"{label}" has no incoming connection', node.id)
    if not outgoing:
        return Issue(Severity.WARNING, f'"{label}" has no outgoing connection', node.id)
    return None


def _check_sales_page_fan_out(nodes: Sequence[FunnelNode], graph: nx.MultiDiGraph) -> list[Issue]:
    """A sales page normally leads to exactly one next step."""
    return [
        Issue(
            Severity.WARNING,
            f'"{node.label}" has multiple outgoing connections (typically should have one)',
            node.id,
        )
        for node in nodes
        if node.type is NodeType.SALES_PAGE and graph.out_degree(node.id) > 1
    ]
