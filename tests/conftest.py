"""Shared fixtures for funnelgraph tests."""

from __future__ import annotations

import itertools

import pytest


class SequentialIds:
    """Deterministic id factory: ``salesPage-1``, ``e-2``, ..."""

    def __init__(self) -> None:
        self._counter = itertools.count(1)

    def __call__(self, prefix: str) -> str:
        return f"{prefix}-{next(self._counter)}"


@pytest.fixture
def seq_ids() -> SequentialIds:
    return SequentialIds()
