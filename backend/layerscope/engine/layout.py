"""Flex layout inference — direction, wrap and gap from sibling geometry.

Two strategies:

- ``geometric`` (default): any pair of children sharing enough vertical
  overlap makes the container a row; wrap is detected by a line sweep.
- ``scored``: row/column/wrap are scored as fractions of agreeing pairs and
  blended with gap consistency; the winning score becomes Layout.confidence.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

import numpy as np

from layerscope.engine.config import DEFAULT_CONFIG, InferenceConfig
from layerscope.engine.nodes import Layout
from layerscope.utils.geometry import Bounds, horizontal_gap, vertical_gap, vertical_overlap

logger = logging.getLogger(__name__)

ROW = "row"
COLUMN = "column"


class Positioned(Protocol):
    """Anything with bounds; input layers and output nodes both qualify."""

    bounds: Bounds | None


def _is_visible(child: Positioned) -> bool:
    b = child.bounds
    return getattr(child, "visible", True) and b is not None and b.width > 0 and b.height > 0


def visible_children(children: Sequence[Positioned]) -> list[Positioned]:
    return [c for c in children if _is_visible(c)]


def default_layout() -> Layout:
    return Layout(direction=COLUMN, wrap="nowrap", gap=0.0, justify_content="flex-start", align_items="stretch")


def _shares_row(a: Bounds, b: Bounds, overlap_ratio: float) -> bool:
    return vertical_overlap(a, b) > min(a.height, b.height) * overlap_ratio


def detect_flex_direction(
    children: Sequence[Positioned],
    overlap_ratio: float = DEFAULT_CONFIG.row_overlap_ratio,
) -> str:
    """``row`` as soon as one pair shares a line, otherwise ``column``."""
    n = len(children)
    for i in range(n - 1):
        for j in range(i + 1, n):
            if _shares_row(children[i].bounds, children[j].bounds, overlap_ratio):
                return ROW
    return COLUMN


def _count_lines(children: Sequence[Positioned]) -> int:
    ordered = sorted(children, key=lambda c: c.bounds.top)
    lines = 1
    line_top = ordered[0].bounds.top
    line_bottom = ordered[0].bounds.bottom
    for child in ordered[1:]:
        b = child.bounds
        midline = line_top + (line_bottom - line_top) / 2
        if b.top > midline:
            lines += 1
            line_top, line_bottom = b.top, b.bottom
        else:
            line_bottom = max(line_bottom, b.bottom)
    return lines


def detect_wrap(children: Sequence[Positioned]) -> bool:
    """True when a row's children sit on more than one line. Needs 3+ children."""
    if len(children) < 3:
        return False
    return _count_lines(children) > 1


def _axis_gaps(children: Sequence[Positioned], direction: str) -> list[float]:
    if direction == ROW:
        ordered = sorted(children, key=lambda c: c.bounds.left)
        measure = horizontal_gap
    else:
        ordered = sorted(children, key=lambda c: c.bounds.top)
        measure = vertical_gap
    gaps = [measure(a.bounds, b.bounds) for a, b in zip(ordered, ordered[1:])]
    return [g for g in gaps if g > 0]


def calculate_gap(children: Sequence[Positioned], direction: str) -> float:
    """Median of the positive gaps between consecutive children.

    The median keeps one oversized gap from skewing the result:
    gaps [10, 12, 11, 90] give 11.5.
    """
    gaps = _axis_gaps(children, direction)
    if len(gaps) < 2:
        return 0.0
    return float(np.median(gaps))


def _flex_alignment(direction: str) -> tuple[str, str]:
    if direction == ROW:
        return "space-between", "flex-start"
    return "flex-start", "stretch"


# ---------------------------------------------------------------------------
# Scored strategy
# ---------------------------------------------------------------------------


def score_row(children: Sequence[Positioned], overlap_ratio: float = DEFAULT_CONFIG.row_overlap_ratio) -> float:
    """Fraction of pairs sharing a line."""
    n = len(children)
    comparisons = n * (n - 1) // 2
    if comparisons == 0:
        return 0.0
    hits = sum(
        1
        for i in range(n - 1)
        for j in range(i + 1, n)
        if _shares_row(children[i].bounds, children[j].bounds, overlap_ratio)
    )
    return hits / comparisons


def score_column(children: Sequence[Positioned]) -> float:
    """Fraction of consecutive children (input order) stacked top to bottom."""
    if len(children) < 2:
        return 0.0
    stacked = sum(1 for a, b in zip(children, children[1:]) if a.bounds.bottom <= b.bounds.top)
    return stacked / (len(children) - 1)


def score_wrap(children: Sequence[Positioned]) -> float:
    if len(children) < 3:
        return 0.0
    lines = _count_lines(children)
    if lines <= 1:
        return 0.0
    return min(1.0, (lines - 1) / (len(children) - 1))


def score_gap_consistency(children: Sequence[Positioned], direction: str) -> float:
    """1.0 for perfectly even spacing, falling with gap variance. 0.5 if unknown."""
    if len(children) < 3:
        return 0.5
    gaps = np.array(_axis_gaps(children, direction))
    if len(gaps) < 2:
        return 0.5
    avg = float(np.mean(gaps))
    variance = float(np.var(gaps))
    return max(0.0, 1.0 - variance / (avg * avg + 1))


def _scored_direction(children: Sequence[Positioned], config: InferenceConfig) -> tuple[str, bool, float]:
    row = score_row(children, config.row_overlap_ratio) * 0.5 + score_gap_consistency(children, ROW) * 0.3
    column = score_column(children) * 0.5 + score_gap_consistency(children, COLUMN) * 0.3
    wrap = score_wrap(children) * 0.4

    direction, confidence = (ROW, row) if row > column else (COLUMN, column)
    return direction, direction == ROW and wrap > 0.3, round(confidence, 2)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def calculate_layout(
    children: Sequence[Positioned],
    config: InferenceConfig = DEFAULT_CONFIG,
    direction: str | None = None,
) -> Layout:
    """Infer the flex layout of a container from its children.

    Passing ``direction`` skips direction detection; wrap and gap are still
    derived from geometry.
    """
    visible = visible_children(children)
    if len(visible) < 2:
        layout = default_layout()
        if direction is not None:
            layout.direction = direction
            layout.justify_content, layout.align_items = _flex_alignment(direction)
        return layout

    confidence: float | None = None
    if direction is not None:
        wrap = direction == ROW and detect_wrap(visible)
    elif config.layout_strategy == "scored":
        direction, wrap, confidence = _scored_direction(visible, config)
    else:
        direction = detect_flex_direction(visible, config.row_overlap_ratio)
        wrap = direction == ROW and detect_wrap(visible)

    justify, align = _flex_alignment(direction)
    layout = Layout(
        direction=direction,
        wrap="wrap" if wrap else "nowrap",
        gap=calculate_gap(visible, direction),
        justify_content=justify,
        align_items=align,
        confidence=confidence,
    )
    logger.debug(
        "Layout for %d children: %s/%s gap=%.1f", len(visible), layout.direction, layout.wrap, layout.gap
    )
    return layout
