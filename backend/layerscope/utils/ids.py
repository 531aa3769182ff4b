"""Identifier providers for synthesized output nodes.

The engine never generates ids itself; it asks an IdProvider. Production code
uses random ids, tests inject SequentialIdProvider for reproducible trees.
"""

from __future__ import annotations

import itertools
import uuid
from typing import Protocol


class IdProvider(Protocol):
    def __call__(self) -> str: ...


class UuidIdProvider:
    """Short random ids, e.g. ``node-3f9a1c2b``."""

    def __init__(self, prefix: str = "node") -> None:
        self.prefix = prefix

    def __call__(self) -> str:
        return f"{self.prefix}-{uuid.uuid4().hex[:8]}"


class SequentialIdProvider:
    """Deterministic ids: ``node-1``, ``node-2``, ..."""

    def __init__(self, prefix: str = "node", start: int = 1) -> None:
        self.prefix = prefix
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self.prefix}-{next(self._counter)}"
