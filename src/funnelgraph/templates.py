"""Funnel page types and their static templates."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from funnelgraph.exceptions import UnknownNodeTypeError

FALLBACK_COLOR = "#999"


class NodeType(str, Enum):
    """The five kinds of funnel page.

    Values are the wire names used in exported documents.
    """

    SALES_PAGE = "salesPage"
    ORDER_PAGE = "orderPage"
    UPSELL = "upsell"
    DOWNSELL = "downsell"
    THANK_YOU = "thankYou"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class NodeTemplate:
    """Defaults applied to a freshly dropped node of one type."""

    type: NodeType
    label: str
    button_label: str
    icon: str
    color: str
    description: str


# Palette order
NODE_TEMPLATES: dict[NodeType, NodeTemplate] = {
    NodeType.SALES_PAGE: NodeTemplate(
        type=NodeType.SALES_PAGE,
        label="Sales Page",
        button_label="Buy Now",
        icon="📄",
        color="#3b82f6",
        description="Landing page to sell your product",
    ),
    NodeType.ORDER_PAGE: NodeTemplate(
        type=NodeType.ORDER_PAGE,
        label="Order Page",
        button_label="Complete Order",
        icon="🛒",
        color="#10b981",
        description="Checkout page for customer details",
    ),
    NodeType.UPSELL: NodeTemplate(
        type=NodeType.UPSELL,
        label="Upsell",
        button_label="Yes, Add This!",
        icon="⬆️",
        color="#f59e0b",
        description="Offer additional products",
    ),
    NodeType.DOWNSELL: NodeTemplate(
        type=NodeType.DOWNSELL,
        label="Downsell",
        button_label="Get This Instead",
        icon="⬇️",
        color="#ef4444",
        description="Alternative offer if upsell declined",
    ),
    NodeType.THANK_YOU: NodeTemplate(
        type=NodeType.THANK_YOU,
        label="Thank You",
        button_label="Continue",
        icon="✅",
        color="#8b5cf6",
        description="Order confirmation page",
    ),
}

# Types whose labels get an auto-incrementing numeric suffix
REPEATABLE_TYPES: frozenset[NodeType] = frozenset({NodeType.UPSELL, NodeType.DOWNSELL})

# Types that may never be the source of an edge
TERMINAL_TYPES: frozenset[NodeType] = frozenset({NodeType.THANK_YOU})


def parse_node_type(value: Any) -> NodeType:
    """Coerce a NodeType or its wire string, raising UnknownNodeTypeError."""
    if isinstance(value, NodeType):
        return value
    try:
        return NodeType(value)
    except ValueError:
        raise UnknownNodeTypeError(value) from None


def template_for(node_type: NodeType | str) -> NodeTemplate:
    """Return the template for a node type."""
    return NODE_TEMPLATES[parse_node_type(node_type)]


def color_for(node_type: Any) -> str:
    """Display color for a node type, falling back to grey for unknown types."""
    try:
        return template_for(node_type).color
    except UnknownNodeTypeError:
        return FALLBACK_COLOR
