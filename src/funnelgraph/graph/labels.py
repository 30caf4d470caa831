"""Auto-incrementing labels for repeatable node types.

Upsell and downsell pages are numbered ("Upsell 1", "Upsell 2", ...). The
numbering state is an explicit ``Counters`` value threaded through every
node creation and persisted in its own storage slot, so numbers keep
increasing across restarts and after the graph is cleared.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Mapping

from funnelgraph.templates import NODE_TEMPLATES, REPEATABLE_TYPES, NodeType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from funnelgraph.graph.model import FunnelNode

_FIELDS: dict[NodeType, str] = {
    NodeType.UPSELL: "upsell",
    NodeType.DOWNSELL: "downsell",
}


@dataclass(frozen=True)
class Counters:
    """Highest sequence number handed out per repeatable type.

    Counters only ever move forward: ``bump`` and ``at_least`` never return
    a smaller value than the current one.
    """

    upsell: int = 0
    downsell: int = 0

    def get(self, node_type: NodeType) -> int:
        return getattr(self, _FIELDS[node_type])

    def bump(self, node_type: NodeType) -> Counters:
        """Return counters with ``node_type`` advanced by one."""
        name = _FIELDS[node_type]
        return replace(self, **{name: getattr(self, name) + 1})

    def at_least(self, node_type: NodeType, value: int) -> Counters:
        """Return counters where ``node_type`` is no lower than ``value``."""
        name = _FIELDS[node_type]
        return replace(self, **{name: max(getattr(self, name), value)})

    def to_dict(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in _FIELDS.values()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> Counters:
        """Read a stored counters mapping. Missing or invalid entries read as 0."""
        if not isinstance(data, Mapping):
            return cls()
        values = {}
        for name in _FIELDS.values():
            raw = data.get(name)
            # bool is an int subclass but never a valid count
            if isinstance(raw, int) and not isinstance(raw, bool) and raw > 0:
                values[name] = raw
        return cls(**values)


def next_label(node_type: NodeType, counters: Counters) -> tuple[str, Counters]:
    """Label for a new node of ``node_type`` and the counters after creating it.

    Repeatable types get ``"<template label> <n>"`` with a freshly bumped
    counter. Every other type gets its template label and leaves the
    counters untouched.
    """
    template = NODE_TEMPLATES[node_type]
    if node_type not in REPEATABLE_TYPES:
        return template.label, counters
    updated = counters.bump(node_type)
    return f"{template.label} {updated.get(node_type)}", updated


def label_number(node_type: NodeType, label: str) -> int | None:
    """Extract the sequence number from a generated label, if it has one."""
    if node_type not in REPEATABLE_TYPES:
        return None
    pattern = rf"{re.escape(NODE_TEMPLATES[node_type].label)} (\d+)"
    match = re.fullmatch(pattern, label.strip())
    return int(match.group(1)) if match else None


def reconcile_counters(counters: Counters, nodes: Iterable[FunnelNode]) -> Counters:
    """Raise counters to cover every numbered label among ``nodes``.

    Used after importing a document so the next generated label cannot
    repeat one that is already on the canvas.
    """
    result = counters
    for node in nodes:
        number = label_number(node.type, node.label)
        if number is not None:
            result = result.at_least(node.type, number)
    return result
