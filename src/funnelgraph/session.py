"""EditorSession: the boundary between a canvas renderer and the funnel core.

A renderer forwards user gestures (drop, connect, delete, import) to the
session and redraws from ``snapshot()``. The session owns the graph,
restores it from storage on start and autosaves after every change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from funnelgraph.exceptions import DocumentError
from funnelgraph.graph.core import FunnelGraph
from funnelgraph.persistence.autosave import AutosaveProcessor
from funnelgraph.persistence.document import dumps, load_counters, loads
from funnelgraph.persistence.storage import COUNTERS_KEY, STATE_KEY, InMemoryStorage
from funnelgraph.templates import NODE_TEMPLATES, color_for

if TYPE_CHECKING:
    from collections.abc import Iterable

    from funnelgraph.events.processor import EventProcessor
    from funnelgraph.graph.core import Deletion, EdgeResult, IdFactory
    from funnelgraph.graph.model import FunnelEdge, FunnelNode, Position
    from funnelgraph.graph.validation import Issue, ValidationReport
    from funnelgraph.persistence.storage import StorageBackend
    from funnelgraph.templates import NodeTemplate, NodeType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderState:
    """Everything a renderer needs to draw the canvas and the issue panel.

    Attributes:
        nodes: Nodes in insertion order
        edges: Edges in insertion order
        node_colors: Map of node id -> display color for its type
        report: Validation issues and panel status
        revision: Graph revision this state was taken at
    """

    nodes: tuple[FunnelNode, ...]
    edges: tuple[FunnelEdge, ...]
    node_colors: dict[str, str]
    report: ValidationReport
    revision: int

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    @property
    def issues(self) -> tuple[Issue, ...]:
        return self.report.issues


class EditorSession:
    """One editing session over a funnel graph.

    Args:
        storage: Storage backend for the graph and counter slots.
            Defaults to a fresh InMemoryStorage.
        processors: Extra event processors (e.g. RichIssuePanel)
        id_factory: Override node/edge id generation
        autosave: If False, changes are not written to storage

    Example:
        >>> session = EditorSession()
        >>> first = session.drop("upsell")
        >>> first.label
        'Upsell 1'
        >>> session.snapshot().report.status.value
        'issues'
    """

    def __init__(
        self,
        storage: StorageBackend | None = None,
        *,
        processors: list[EventProcessor] | None = None,
        id_factory: IdFactory | None = None,
        autosave: bool = True,
    ) -> None:
        self.storage = storage if storage is not None else InMemoryStorage()
        stored_counters = load_counters(self.storage.get(COUNTERS_KEY))
        self.graph = FunnelGraph(counters=stored_counters, id_factory=id_factory)
        self._restore()
        self._autosave: AutosaveProcessor | None = None
        if autosave:
            self._autosave = AutosaveProcessor(self.graph, self.storage, saved_counters=stored_counters)
            self.graph.add_processor(self._autosave)
            if self.graph.counters != stored_counters:
                # Restored labels raised the counters past the stored slot
                self._autosave.save()
        for processor in processors or ():
            self.graph.add_processor(processor)

    @staticmethod
    def palette() -> tuple[NodeTemplate, ...]:
        """Node templates in palette order."""
        return tuple(NODE_TEMPLATES.values())

    # ------------------------------------------------------------------
    # Gestures
    # ------------------------------------------------------------------

    def drop(self, node_type: NodeType | str, position: Position | None = None) -> FunnelNode:
        """Add a node of ``node_type`` where it was dropped.

        Raises:
            UnknownNodeTypeError: If ``node_type`` is not a palette type
        """
        return self.graph.add_node(node_type, position)

    def connect(self, source: str, target: str) -> EdgeResult:
        """Try to connect two nodes. Check ``.accepted`` / ``.reason`` on the result."""
        return self.graph.add_edge(source, target)

    def delete_nodes(self, node_ids: Iterable[str]) -> Deletion:
        return self.graph.delete_nodes(node_ids)

    def remove_edge(self, edge_id: str) -> bool:
        return self.graph.remove_edge(edge_id)

    def rename(self, node_id: str, label: str) -> FunnelNode:
        return self.graph.update_label(node_id, label)

    def clear(self) -> None:
        """Remove all nodes and edges. Label numbering continues where it was."""
        self.graph.clear()

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------

    def import_document(self, text: str | bytes) -> RenderState:
        """Replace the graph with an exported document.

        The current graph and counters are untouched if the document is
        rejected.

        Raises:
            DocumentError: If the text is not a valid funnel document
        """
        document = loads(text)
        self.graph.replace_all(document.nodes, document.edges)
        logger.info(
            "Imported funnel with %d node(s) and %d edge(s)",
            len(document.nodes),
            len(document.edges),
        )
        return self.snapshot()

    def export_document(self) -> str:
        """Current graph as pretty-printed JSON."""
        return dumps(self.graph.nodes, self.graph.edges)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def snapshot(self) -> RenderState:
        view = self.graph.snapshot()
        return RenderState(
            nodes=view.nodes,
            edges=view.edges,
            node_colors={n.id: color_for(n.type) for n in view.nodes},
            report=view.report,
            revision=view.revision,
        )

    def close(self) -> None:
        """Flush processors at the end of the session."""
        self.graph.shutdown()

    def _restore(self) -> None:
        """Load the saved graph. A corrupt slot is logged and ignored."""
        text = self.storage.get(STATE_KEY)
        if text is None:
            return
        try:
            document = loads(text)
        except DocumentError:
            logger.error("Failed to load saved funnel, starting empty", exc_info=True)
            return
        self.graph.replace_all(document.nodes, document.edges)
        logger.info("Restored funnel with %d node(s)", len(document.nodes))
