"""Key-value storage slots for the editor's saved state.

Provides a protocol for storage backends and two implementations:
- InMemoryStorage: dict-based, lives for the session's lifetime
- DiskStorage: wraps diskcache.Cache (optional dependency), persists across restarts

The graph document and the label counters live in separate slots so the
counters survive independently of the graph.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Protocol

logger = logging.getLogger(__name__)

STATE_KEY = "funnel-builder-state"
COUNTERS_KEY = "funnel-counters"

DEFAULT_STORAGE_DIR = "~/.cache/funnelgraph"


class StorageBackend(Protocol):
    """Protocol for storage backends.

    Implementations must provide get(), set() and delete().
    """

    def get(self, key: str) -> str | None:
        """Return the stored text, or None if the slot is empty."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store text in a slot, replacing any previous value."""
        ...

    def delete(self, key: str) -> None:
        """Empty a slot. Missing slots are ignored."""
        ...


class InMemoryStorage:
    """Dict-based storage.

    Example:
        >>> storage = InMemoryStorage()
        >>> storage.set("funnel-counters", '{"upsell": 2, "downsell": 0}')
        >>> storage.get("funnel-counters")
        '{"upsell": 2, "downsell": 0}'
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial) if initial else {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class DiskStorage:
    """Persistent storage using diskcache.

    Requires ``pip install funnelgraph[cache]`` (installs diskcache).

    Args:
        directory: Path to the storage directory.
        **kwargs: Additional arguments passed to ``diskcache.Cache``.

    Example:
        >>> storage = DiskStorage("/tmp/funnel-state")
        >>> storage.set("funnel-builder-state", '{"nodes": [], "edges": []}')
        >>> storage.get("funnel-builder-state")
        '{"nodes": [], "edges": []}'
    """

    def __init__(self, directory: str = DEFAULT_STORAGE_DIR, **kwargs: Any) -> None:
        try:
            import diskcache
        except ImportError:
            raise ImportError(
                "diskcache is required for DiskStorage. Install it with: pip install 'funnelgraph[cache]'"
            ) from None

        self.directory = os.path.expanduser(directory)
        self._cache = diskcache.Cache(self.directory, **kwargs)

    def get(self, key: str) -> str | None:
        value = self._cache.get(key, default=None)
        if value is not None and not isinstance(value, str):
            logger.warning("Storage slot %s holds %s, not text - ignoring", key, type(value).__name__)
            return None
        return value

    def set(self, key: str, value: str) -> None:
        self._cache.set(key, value)

    def delete(self, key: str) -> None:
        self._cache.delete(key)

    def close(self) -> None:
        self._cache.close()
