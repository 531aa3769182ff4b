"""Exceptions raised at the LayerScope boundary."""

from __future__ import annotations


class LayerScopeError(Exception):
    """Base class for errors surfaced by the inference engine."""


class InvalidBoundsError(LayerScopeError, ValueError):
    """Bounds contain non-finite values or inverted edges."""


class InferenceDepthError(LayerScopeError, RuntimeError):
    """Structure expansion went deeper than the configured maximum."""

    def __init__(self, depth: int, max_depth: int) -> None:
        super().__init__(f"Structure depth {depth} exceeds max_depth={max_depth}")
        self.depth = depth
        self.max_depth = max_depth
