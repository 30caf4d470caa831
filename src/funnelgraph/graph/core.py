"""FunnelGraph store: nodes, edges and label counters for one editing session."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

import networkx as nx

from funnelgraph.events.dispatcher import EventDispatcher
from funnelgraph.events.types import (
    ConnectionRejectedEvent,
    EdgeAddedEvent,
    EdgeRemovedEvent,
    GraphReplacedEvent,
    NodeAddedEvent,
    NodesDeletedEvent,
    NodeUpdatedEvent,
    ValidationEvent,
)
from funnelgraph.exceptions import DuplicateIdError, UnknownNodeError
from funnelgraph.graph.connection import can_connect
from funnelgraph.graph.labels import Counters, next_label, reconcile_counters
from funnelgraph.graph.model import FunnelEdge, FunnelNode, FunnelNodeData, Position
from funnelgraph.graph.validation import Issue, ValidationReport, summarize, validate
from funnelgraph.templates import parse_node_type

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from funnelgraph.events.processor import EventProcessor
    from funnelgraph.events.types import MutationEvent
    from funnelgraph.templates import NodeType

logger = logging.getLogger(__name__)

Validator = Callable[["Sequence[FunnelNode]", "Sequence[FunnelEdge]"], "list[Issue]"]
IdFactory = Callable[[str], str]


def random_id(prefix: str) -> str:
    """Default id factory: ``<prefix>-<12 hex chars>``."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class EdgeResult:
    """Outcome of ``FunnelGraph.add_edge``.

    Attributes:
        edge: The inserted edge, or None if the connection was refused
        reason: Why the connection was refused (None on success)
    """

    edge: FunnelEdge | None = None
    reason: str | None = None

    @property
    def accepted(self) -> bool:
        return self.edge is not None


@dataclass(frozen=True)
class GraphSnapshot:
    """Consistent view of the graph at one revision."""

    nodes: tuple[FunnelNode, ...]
    edges: tuple[FunnelEdge, ...]
    counters: Counters
    report: ValidationReport
    revision: int


@dataclass(frozen=True)
class Deletion:
    """Ids removed by ``FunnelGraph.delete_nodes``."""

    node_ids: tuple[str, ...] = ()
    edge_ids: tuple[str, ...] = ()


class FunnelGraph:
    """Mutable funnel graph with push validation.

    Holds nodes and edges in insertion order, mirrored into a NetworkX
    multigraph keyed by edge id, plus the label counters. Every committed
    mutation bumps ``revision``, recomputes the issue list with the
    validator, then emits the mutation event and a ``ValidationEvent`` to
    the registered processors. Mutation, validation and dispatch run
    under one re-entrant lock, so no other mutation can slip in between a
    change and the validation of that change.

    Attributes:
        nodes: Nodes in insertion order
        edges: Edges in insertion order
        counters: Current label counters
        issues: Issues for the current graph
        report: Issues plus panel status
        revision: Number of committed mutations

    Example:
        >>> graph = FunnelGraph()
        >>> sales = graph.add_node("salesPage")
        >>> order = graph.add_node("orderPage")
        >>> graph.add_edge(sales.id, order.id).accepted
        True
        >>> [i.message for i in graph.issues]
        ['"Order Page" has no outgoing connection']
    """

    def __init__(
        self,
        *,
        counters: Counters | None = None,
        processors: list[EventProcessor] | None = None,
        strict_events: bool = False,
        id_factory: IdFactory | None = None,
        validator: Validator = validate,
    ) -> None:
        """Create an empty graph.

        Args:
            counters: Label counters restored from storage
            processors: Event processors notified after each change
            strict_events: If True, processor exceptions propagate
            id_factory: Callable taking an id prefix and returning a new id
            validator: Function computing issues from nodes and edges
        """
        self._nodes: dict[str, FunnelNode] = {}
        self._edges: dict[str, FunnelEdge] = {}
        self._nx_graph = nx.MultiDiGraph()
        self._counters = counters or Counters()
        self._dispatcher = EventDispatcher(processors, strict=strict_events)
        self._id_factory = id_factory or random_id
        self._validator = validator
        self._lock = threading.RLock()
        self._revision = 0
        self._issues: tuple[Issue, ...] = ()
        self._report = summarize((), ())

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def nodes(self) -> tuple[FunnelNode, ...]:
        with self._lock:
            return tuple(self._nodes.values())

    @property
    def edges(self) -> tuple[FunnelEdge, ...]:
        with self._lock:
            return tuple(self._edges.values())

    @property
    def counters(self) -> Counters:
        return self._counters

    @property
    def issues(self) -> tuple[Issue, ...]:
        return self._issues

    @property
    def report(self) -> ValidationReport:
        return self._report

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def is_empty(self) -> bool:
        return not self._nodes

    @property
    def nx_graph(self) -> nx.MultiDiGraph:
        """Copy of the underlying NetworkX graph (edge keys are edge ids)."""
        with self._lock:
            return self._nx_graph.copy()

    def snapshot(self) -> GraphSnapshot:
        """Read nodes, edges, counters and issues atomically."""
        with self._lock:
            return GraphSnapshot(
                nodes=self.nodes,
                edges=self.edges,
                counters=self._counters,
                report=self._report,
                revision=self._revision,
            )

    def get_node(self, node_id: str) -> FunnelNode:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise UnknownNodeError(node_id) from None

    def get_edge(self, edge_id: str) -> FunnelEdge | None:
        return self._edges.get(edge_id)

    def edges_of(self, node_id: str) -> tuple[FunnelEdge, ...]:
        """Edges whose source or target is ``node_id``."""
        return tuple(e for e in self.edges if e.touches({node_id}))

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    # ------------------------------------------------------------------
    # Processors
    # ------------------------------------------------------------------

    def add_processor(self, processor: EventProcessor) -> None:
        """Register a processor for subsequent events."""
        self._dispatcher.add(processor)

    def remove_processor(self, processor: EventProcessor) -> None:
        self._dispatcher.remove(processor)

    def shutdown(self) -> None:
        """Shut down all registered processors."""
        self._dispatcher.shutdown()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_node(
        self,
        node_type: NodeType | str,
        position: Position | None = None,
        *,
        extra: Mapping[str, Any] | None = None,
    ) -> FunnelNode:
        """Create a node with a generated label and a fresh id.

        Raises:
            UnknownNodeTypeError: If ``node_type`` is not a known type
        """
        resolved = parse_node_type(node_type)
        with self._lock:
            label, counters = next_label(resolved, self._counters)
            node = FunnelNode(
                id=self._fresh_id(resolved.value, self._nodes),
                data=FunnelNodeData.from_template(resolved, label),
                position=position or Position(),
                extra=extra,
            )
            self._counters = counters
            self._nodes[node.id] = node
            self._nx_graph.add_node(node.id)
            logger.debug("Added node %s (%s)", node.id, label)
            self._commit(
                NodeAddedEvent(
                    revision=self._revision + 1,
                    node_id=node.id,
                    node_type=resolved.value,
                    label=label,
                )
            )
            return node

    def add_edge(
        self,
        source: str,
        target: str,
        *,
        extra: Mapping[str, Any] | None = None,
    ) -> EdgeResult:
        """Connect ``source`` to ``target`` if the connection rules allow it.

        A refused connection leaves the graph untouched and returns the
        reason instead of raising.
        """
        with self._lock:
            decision = can_connect(self._nodes, source, target)
            if not decision.allowed:
                logger.info("Rejected connection %s -> %s: %s", source, target, decision.reason)
                self._dispatcher.emit(
                    ConnectionRejectedEvent(
                        revision=self._revision,
                        source=source,
                        target=target,
                        reason=decision.reason or "",
                    )
                )
                return EdgeResult(reason=decision.reason)

            edge = FunnelEdge(
                id=self._fresh_id("e", self._edges),
                source=source,
                target=target,
                extra=extra,
            )
            self._edges[edge.id] = edge
            self._nx_graph.add_edge(source, target, key=edge.id)
            logger.debug("Added edge %s: %s -> %s", edge.id, source, target)
            self._commit(
                EdgeAddedEvent(
                    revision=self._revision + 1,
                    edge_id=edge.id,
                    source=source,
                    target=target,
                )
            )
            return EdgeResult(edge=edge)

    def delete_nodes(self, node_ids: Iterable[str]) -> Deletion:
        """Remove nodes and every edge touching them in one step.

        Unknown ids are ignored. Nothing is emitted if no known id was given.
        """
        with self._lock:
            requested = set(node_ids)
            targets = [nid for nid in self._nodes if nid in requested]
            unknown = requested.difference(targets)
            if unknown:
                logger.warning("Ignoring unknown node ids on delete: %s", sorted(unknown))
            if not targets:
                return Deletion()

            incident = {
                key
                for _, _, key in self._nx_graph.in_edges(targets, keys=True)
            }
            incident.update(key for _, _, key in self._nx_graph.out_edges(targets, keys=True))
            edge_ids = tuple(eid for eid in self._edges if eid in incident)

            for eid in edge_ids:
                del self._edges[eid]
            for nid in targets:
                del self._nodes[nid]
            self._nx_graph.remove_nodes_from(targets)

            deletion = Deletion(node_ids=tuple(targets), edge_ids=edge_ids)
            logger.debug(
                "Deleted %d node(s) and %d edge(s)", len(deletion.node_ids), len(deletion.edge_ids)
            )
            self._commit(
                NodesDeletedEvent(
                    revision=self._revision + 1,
                    node_ids=deletion.node_ids,
                    edge_ids=deletion.edge_ids,
                )
            )
            return deletion

    def remove_edge(self, edge_id: str) -> bool:
        """Remove one edge. Returns False if no such edge exists."""
        with self._lock:
            edge = self._edges.pop(edge_id, None)
            if edge is None:
                return False
            self._nx_graph.remove_edge(edge.source, edge.target, key=edge_id)
            logger.debug("Removed edge %s", edge_id)
            self._commit(EdgeRemovedEvent(revision=self._revision + 1, edge_id=edge_id))
            return True

    def update_label(self, node_id: str, label: str) -> FunnelNode:
        """Change a node's label, keeping its position in node order.

        A numbered label such as "Upsell 9" raises the counters like an
        import would, so later drops continue after it.

        Raises:
            UnknownNodeError: If ``node_id`` is not in the graph
        """
        with self._lock:
            node = self.get_node(node_id).with_label(label)
            self._nodes[node_id] = node
            self._counters = reconcile_counters(self._counters, (node,))
            self._commit(NodeUpdatedEvent(revision=self._revision + 1, node_id=node_id, label=label))
            return node

    def replace_all(self, nodes: Iterable[FunnelNode], edges: Iterable[FunnelEdge]) -> None:
        """Swap in a whole new graph, e.g. from an imported document.

        Connections are taken as-is (the terminal-node rule is not
        re-applied), but every edge must reference a node in ``nodes`` and
        ids must be unique. Counters are raised to cover numbered labels in
        the new nodes and never lowered.

        Raises:
            DuplicateIdError: If two nodes or two edges share an id
            UnknownNodeError: If an edge references a missing node
        """
        new_nodes = _index(nodes, "node")
        new_edges = _index(edges, "edge")
        for edge in new_edges.values():
            for endpoint in (edge.source, edge.target):
                if endpoint not in new_nodes:
                    raise UnknownNodeError(
                        endpoint, f"Edge '{edge.id}' references unknown node '{endpoint}'"
                    )

        with self._lock:
            self._nodes = new_nodes
            self._edges = new_edges
            self._nx_graph = nx.MultiDiGraph()
            self._nx_graph.add_nodes_from(new_nodes)
            for edge in new_edges.values():
                self._nx_graph.add_edge(edge.source, edge.target, key=edge.id)
            self._counters = reconcile_counters(self._counters, new_nodes.values())
            logger.info("Replaced graph: %d node(s), %d edge(s)", len(new_nodes), len(new_edges))
            self._commit(
                GraphReplacedEvent(
                    revision=self._revision + 1,
                    node_count=len(new_nodes),
                    edge_count=len(new_edges),
                )
            )

    def clear(self) -> None:
        """Remove every node and edge. Counters are kept."""
        self.replace_all((), ())

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _fresh_id(self, prefix: str, taken: Mapping[str, Any]) -> str:
        candidate = self._id_factory(prefix)
        while candidate in taken:
            candidate = self._id_factory(prefix)
        return candidate

    def _commit(self, event: MutationEvent) -> None:
        """Bump the revision, revalidate, then notify processors. Caller holds the lock."""
        self._revision = event.revision
        nodes = self.nodes
        self._issues = tuple(self._validator(nodes, self.edges))
        self._report = summarize(nodes, self._issues)
        self._dispatcher.emit(event)
        self._dispatcher.emit(ValidationEvent(revision=self._revision, report=self._report))


def _index(items: Iterable[Any], kind: str) -> dict[str, Any]:
    """Map id -> item, raising on repeated ids."""
    result: dict[str, Any] = {}
    for item in items:
        if item.id in result:
            raise DuplicateIdError(kind, item.id)
        result[item.id] = item
    return result
