"""Event processor base classes."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from funnelgraph.events.types import (
        ConnectionRejectedEvent,
        EdgeAddedEvent,
        EdgeRemovedEvent,
        Event,
        GraphReplacedEvent,
        NodeAddedEvent,
        NodesDeletedEvent,
        NodeUpdatedEvent,
        ValidationEvent,
    )


# Mapping from event class name to handler method name.
_EVENT_METHOD_MAP: dict[str, str] = {
    "NodeAddedEvent": "on_node_added",
    "NodeUpdatedEvent": "on_node_updated",
    "NodesDeletedEvent": "on_nodes_deleted",
    "EdgeAddedEvent": "on_edge_added",
    "EdgeRemovedEvent": "on_edge_removed",
    "GraphReplacedEvent": "on_graph_replaced",
    "ConnectionRejectedEvent": "on_connection_rejected",
    "ValidationEvent": "on_validation",
}


class EventProcessor:
    """Base class for event consumers.

    Subclass and override ``on_event`` to receive all events,
    or use ``TypedEventProcessor`` for per-type dispatch.
    """

    def on_event(self, event: Event) -> None:
        """Called for every event. Override in subclasses."""

    def shutdown(self) -> None:
        """Called once when the editing session ends. Override to flush buffers."""


class TypedEventProcessor(EventProcessor):
    """Dispatches ``on_event`` to typed handler methods automatically.

    Override any of the ``on_*`` methods below to handle specific event types.
    Unhandled event types are silently ignored.
    """

    def on_event(self, event: Event) -> None:
        method_name = _EVENT_METHOD_MAP.get(type(event).__name__)
        if method_name is not None:
            method = getattr(self, method_name, None)
            if method is not None:
                method(event)

    def on_node_added(self, event: NodeAddedEvent) -> None: ...
    def on_node_updated(self, event: NodeUpdatedEvent) -> None: ...
    def on_nodes_deleted(self, event: NodesDeletedEvent) -> None: ...
    def on_edge_added(self, event: EdgeAddedEvent) -> None: ...
    def on_edge_removed(self, event: EdgeRemovedEvent) -> None: ...
    def on_graph_replaced(self, event: GraphReplacedEvent) -> None: ...
    def on_connection_rejected(self, event: ConnectionRejectedEvent) -> None: ...
    def on_validation(self, event: ValidationEvent) -> None: ...
