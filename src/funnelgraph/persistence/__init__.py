"""Persistence - JSON documents, storage slots and autosave."""

from funnelgraph.persistence.autosave import AutosaveProcessor
from funnelgraph.persistence.document import (
    FunnelDocument,
    deserialize,
    dump_counters,
    dumps,
    load_counters,
    loads,
    serialize,
)
from funnelgraph.persistence.storage import (
    COUNTERS_KEY,
    STATE_KEY,
    DiskStorage,
    InMemoryStorage,
    StorageBackend,
)

__all__ = [
    "AutosaveProcessor",
    "COUNTERS_KEY",
    "DiskStorage",
    "FunnelDocument",
    "InMemoryStorage",
    "STATE_KEY",
    "StorageBackend",
    "deserialize",
    "dump_counters",
    "dumps",
    "load_counters",
    "loads",
    "serialize",
]
