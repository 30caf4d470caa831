"""Write the graph and counters to storage after every change."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from funnelgraph.events.processor import TypedEventProcessor
from funnelgraph.persistence.document import dump_counters, dumps
from funnelgraph.persistence.storage import COUNTERS_KEY, STATE_KEY

if TYPE_CHECKING:
    from funnelgraph.events.types import ValidationEvent
    from funnelgraph.graph.core import FunnelGraph
    from funnelgraph.graph.labels import Counters
    from funnelgraph.persistence.storage import StorageBackend

logger = logging.getLogger(__name__)


class AutosaveProcessor(TypedEventProcessor):
    """Persists the graph document and counters into their storage slots.

    Saves on each ``ValidationEvent``, which the graph emits once per
    committed mutation. Counters are only rewritten when they changed.
    The empty graph is saved too, so deleting every node sticks across
    reloads.
    """

    def __init__(
        self,
        graph: FunnelGraph,
        storage: StorageBackend,
        *,
        saved_counters: Counters | None = None,
    ) -> None:
        """Create a processor saving ``graph`` into ``storage``.

        Args:
            graph: Graph to save
            storage: Backend holding the state and counters slots
            saved_counters: Counters currently in the counters slot. Defaults
                to the graph's counters, i.e. assumes the slot is current.
        """
        self._graph = graph
        self._storage = storage
        self._saved_counters = graph.counters if saved_counters is None else saved_counters
        self.saves = 0

    def on_validation(self, event: ValidationEvent) -> None:
        self.save()

    def save(self) -> None:
        """Write the current state now."""
        self._storage.set(STATE_KEY, dumps(self._graph.nodes, self._graph.edges))
        counters = self._graph.counters
        if counters != self._saved_counters:
            self._storage.set(COUNTERS_KEY, dump_counters(counters))
            self._saved_counters = counters
        self.saves += 1
        logger.debug("Autosaved revision %d", self._graph.revision)
