"""Axis-aligned rectangle helpers. Leaf module, no engine imports."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from layerscope.errors import InvalidBoundsError


@dataclass(frozen=True)
class Bounds:
    """Rectangle in document pixels. Origin is top-left, y grows downward."""

    top: float
    left: float
    right: float
    bottom: float

    def __post_init__(self) -> None:
        values = (self.top, self.left, self.right, self.bottom)
        if not all(math.isfinite(v) for v in values):
            raise InvalidBoundsError(f"Non-finite bounds: {values}")
        if self.right < self.left or self.bottom < self.top:
            raise InvalidBoundsError(f"Inverted bounds: {values}")

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


ZERO_BOUNDS = Bounds(0.0, 0.0, 0.0, 0.0)


def horizontal_gap(a: Bounds, b: Bounds) -> float:
    """Distance between the x-extents; 0 when they overlap."""
    if a.right < b.left:
        return b.left - a.right
    if b.right < a.left:
        return a.left - b.right
    return 0.0


def vertical_gap(a: Bounds, b: Bounds) -> float:
    """Distance between the y-extents; 0 when they overlap."""
    if a.bottom < b.top:
        return b.top - a.bottom
    if b.bottom < a.top:
        return a.top - b.bottom
    return 0.0


def min_distance(a: Bounds, b: Bounds) -> float:
    """Euclidean length of the (horizontal, vertical) gap vector."""
    return math.hypot(horizontal_gap(a, b), vertical_gap(a, b))


def vertical_overlap(a: Bounds, b: Bounds) -> float:
    return max(0.0, min(a.bottom, b.bottom) - max(a.top, b.top))


def smart_distance(a: Bounds, b: Bounds) -> float:
    """Separation along the meaningful axis: vertical first, then horizontal."""
    vertical = vertical_gap(a, b)
    if vertical > 0:
        return vertical
    return horizontal_gap(a, b)


def merge_bounds(*bounds: Bounds) -> Bounds:
    """Union bounding box. No arguments gives ZERO_BOUNDS."""
    if not bounds:
        return ZERO_BOUNDS
    return Bounds(
        top=min(b.top for b in bounds),
        left=min(b.left for b in bounds),
        right=max(b.right for b in bounds),
        bottom=max(b.bottom for b in bounds),
    )


def center(bounds: Bounds) -> tuple[float, float]:
    """(x, y) center point."""
    return (bounds.left + bounds.width / 2, bounds.top + bounds.height / 2)


def contains(outer: Bounds, inner: Bounds) -> bool:
    return (
        outer.left <= inner.left
        and outer.top <= inner.top
        and outer.right >= inner.right
        and outer.bottom >= inner.bottom
    )


def bounds_array(bounds: Sequence[Bounds]) -> NDArray[np.float64]:
    """Nx4 array of (top, left, right, bottom)."""
    if not bounds:
        return np.empty((0, 4))
    return np.array([(b.top, b.left, b.right, b.bottom) for b in bounds], dtype=np.float64)


def gap_matrix(bounds: Sequence[Bounds]) -> NDArray[np.float64]:
    """Pairwise min_distance for every pair of rectangles.

    Same metric as min_distance, vectorised with numpy broadcasting.
    """
    arr = bounds_array(bounds)
    if len(arr) == 0:
        return np.empty((0, 0))
    top, left, right, bottom = arr[:, 0], arr[:, 1], arr[:, 2], arr[:, 3]

    h_gap = np.maximum(
        0.0,
        np.maximum(left[:, None], left[None, :]) - np.minimum(right[:, None], right[None, :]),
    )
    v_gap = np.maximum(
        0.0,
        np.maximum(top[:, None], top[None, :]) - np.minimum(bottom[:, None], bottom[None, :]),
    )
    return np.sqrt(h_gap**2 + v_gap**2)
