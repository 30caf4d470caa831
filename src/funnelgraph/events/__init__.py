"""Event system for observing funnel graph changes."""

from funnelgraph.events.dispatcher import EventDispatcher
from funnelgraph.events.processor import EventProcessor, TypedEventProcessor
from funnelgraph.events.types import (
    BaseEvent,
    ConnectionRejectedEvent,
    EdgeAddedEvent,
    EdgeRemovedEvent,
    Event,
    GraphReplacedEvent,
    MutationEvent,
    NodeAddedEvent,
    NodesDeletedEvent,
    NodeUpdatedEvent,
    ValidationEvent,
)

__all__ = [
    # Event types
    "BaseEvent",
    "ConnectionRejectedEvent",
    "EdgeAddedEvent",
    "EdgeRemovedEvent",
    "Event",
    "GraphReplacedEvent",
    "MutationEvent",
    "NodeAddedEvent",
    "NodesDeletedEvent",
    "NodeUpdatedEvent",
    "ValidationEvent",
    # Processor interfaces
    "EventProcessor",
    "TypedEventProcessor",
    # Dispatcher
    "EventDispatcher",
]
