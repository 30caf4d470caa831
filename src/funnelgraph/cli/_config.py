"""Project-level configuration from pyproject.toml.

Reads the [tool.funnelgraph] section to provide the storage directory
and issue-panel settings for the CLI.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from funnelgraph.panel import DEFAULT_MAX_ISSUES
from funnelgraph.persistence.storage import DEFAULT_STORAGE_DIR

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FunnelConfig:
    """Configuration from [tool.funnelgraph] in pyproject.toml."""

    storage_dir: str = DEFAULT_STORAGE_DIR
    max_issues: int = DEFAULT_MAX_ISSUES


def find_pyproject(start: Path | None = None) -> Path | None:
    """Walk up from start directory to find pyproject.toml."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def load_config(start: Path | None = None) -> FunnelConfig:
    """Load [tool.funnelgraph] from the nearest pyproject.toml.

    Returns default config if no pyproject.toml or no [tool.funnelgraph] section.
    """
    path = find_pyproject(start)
    if path is None:
        return FunnelConfig()

    if sys.version_info >= (3, 11):
        import tomllib
    else:
        try:
            import tomli as tomllib
        except ImportError:
            return FunnelConfig()

    with open(path, "rb") as f:
        data = tomllib.load(f)

    section = data.get("tool", {}).get("funnelgraph", {})
    if not section:
        return FunnelConfig()

    max_issues = section.get("max_issues", DEFAULT_MAX_ISSUES)
    if isinstance(max_issues, bool) or not isinstance(max_issues, int) or max_issues < 1:
        logger.warning("Ignoring invalid max_issues=%r in %s", max_issues, path)
        max_issues = DEFAULT_MAX_ISSUES

    return FunnelConfig(
        storage_dir=section.get("storage_dir", DEFAULT_STORAGE_DIR),
        max_issues=max_issues,
    )
