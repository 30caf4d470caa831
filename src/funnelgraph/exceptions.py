"""Exceptions for funnel graph editing and persistence."""

from __future__ import annotations

from typing import Any


class FunnelError(Exception):
    """Base class for all funnelgraph errors."""


class UnknownNodeTypeError(FunnelError, ValueError):
    """A node type string is not one of the known funnel page types.

    Attributes:
        node_type: The rejected type value
        message: Human-readable error message
    """

    def __init__(self, node_type: Any, message: str | None = None) -> None:
        self.node_type = node_type
        self.message = message or self._default_message()
        super().__init__(self.message)

    def _default_message(self) -> str:
        from funnelgraph.templates import NodeType

        known = ", ".join(t.value for t in NodeType)
        return (
            f"Unknown node type: {self.node_type!r}\n\n"
            f"  -> Known types: {known}\n\n"
            f"How to fix:\n"
            f"  Use one of the palette types listed above"
        )


class UnknownNodeError(FunnelError, KeyError):
    """An operation referenced a node id that is not in the graph.

    Attributes:
        node_id: The missing node id
        message: Human-readable error message
    """

    def __init__(self, node_id: str, message: str | None = None) -> None:
        self.node_id = node_id
        self.message = message or f"Node '{node_id}' is not in the graph"
        super().__init__(self.message)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.message


class DocumentError(FunnelError):
    """A funnel document could not be parsed or failed structural checks.

    Raised by the persistence layer before any state is touched, so the
    in-memory graph is always left as it was.

    Attributes:
        reason: Short description of what is wrong
        path: Location inside the document (e.g. ``nodes[2].data.type``)
        message: Human-readable error message
    """

    def __init__(self, reason: str, *, path: str | None = None) -> None:
        self.reason = reason
        self.path = path
        self.message = self._default_message()
        super().__init__(self.message)

    def _default_message(self) -> str:
        location = f" at {self.path}" if self.path else ""
        return (
            f"Invalid funnel document{location}: {self.reason}\n\n"
            f"How to fix:\n"
            f"  Export the funnel again, or correct the JSON by hand so it has\n"
            f"  'nodes' and 'edges' lists"
        )


class DuplicateIdError(FunnelError, ValueError):
    """Two nodes or two edges share the same id.

    Attributes:
        kind: ``"node"`` or ``"edge"``
        item_id: The repeated id
    """

    def __init__(self, kind: str, item_id: str) -> None:
        self.kind = kind
        self.item_id = item_id
        self.message = (
            f"Duplicate {kind} id: '{item_id}'\n\n"
            f"  -> Every {kind} in a funnel needs its own id\n\n"
            f"How to fix:\n"
            f"  Rename one of the {kind}s that share '{item_id}'"
        )
        super().__init__(self.message)
