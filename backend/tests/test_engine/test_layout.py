"""Tests for flex layout inference."""

import pytest

from layerscope.engine.config import InferenceConfig
from layerscope.engine.layout import (
    COLUMN,
    ROW,
    calculate_gap,
    calculate_layout,
    detect_flex_direction,
    detect_wrap,
    score_column,
    score_gap_consistency,
    score_row,
)
from tests.conftest import box, image, shape


def _shapes(*boxes):
    return [shape(f"s{i}", b) for i, b in enumerate(boxes)]


STACKED = _shapes(box(0, 0, 100, 50), box(60, 0, 100, 110), box(130, 0, 100, 180))
IN_A_ROW = _shapes(box(0, 0, 50, 50), box(0, 60, 110, 50), box(10, 120, 170, 60))
GRID = _shapes(box(0, 0, 50, 50), box(0, 60, 110, 50), box(60, 0, 50, 110), box(60, 60, 110, 110))


def test_stacked_is_column():
    assert detect_flex_direction(STACKED) == COLUMN


def test_overlapping_is_row():
    assert detect_flex_direction(IN_A_ROW) == ROW


def test_column_layout():
    layout = calculate_layout(STACKED)
    assert layout.direction == "column"
    assert layout.wrap == "nowrap"
    assert layout.gap == 15
    assert layout.justify_content == "flex-start"
    assert layout.align_items == "stretch"
    assert layout.confidence is None


def test_row_layout():
    layout = calculate_layout(IN_A_ROW)
    assert layout.direction == "row"
    assert layout.wrap == "nowrap"
    assert layout.gap == 10
    assert layout.justify_content == "space-between"
    assert layout.align_items == "flex-start"


def test_median_gap_ignores_outlier():
    children = _shapes(
        box(0, 0, 10, 10),
        box(0, 20, 30, 10),
        box(0, 42, 52, 10),
        box(0, 63, 73, 10),
        box(0, 163, 173, 10),
    )
    assert calculate_gap(children, ROW) == pytest.approx(11.5)


def test_gap_needs_two_positive_gaps():
    children = _shapes(box(0, 0, 10, 10), box(0, 30, 40, 10))
    assert calculate_gap(children, ROW) == 0


def test_gap_sorts_along_axis():
    children = _shapes(box(0, 100, 110, 10), box(0, 0, 10, 10), box(0, 40, 50, 10))
    assert calculate_gap(children, ROW) == 40


def test_grid_wraps():
    assert detect_wrap(GRID)
    layout = calculate_layout(GRID)
    assert layout.direction == "row"
    assert layout.wrap == "wrap"


def test_wrap_needs_three_children():
    assert not detect_wrap(_shapes(box(0, 0, 50, 50), box(100, 0, 50, 150)))


def test_single_child_gets_default():
    layout = calculate_layout(_shapes(box(0, 0, 100, 100)))
    assert layout.direction == "column"
    assert layout.wrap == "nowrap"
    assert layout.gap == 0


def test_invisible_children_ignored():
    children = [
        shape("a", box(0, 0, 50, 50)),
        image("hidden", box(0, 60, 110, 50), visible=False),
        shape("empty", box(0, 200, 200, 50)),
    ]
    layout = calculate_layout(children)
    assert layout.direction == "column"
    assert layout.gap == 0


def test_forced_direction():
    layout = calculate_layout(STACKED, direction=ROW)
    assert layout.direction == "row"
    assert layout.justify_content == "space-between"
    assert layout.wrap == "wrap"


def test_forced_direction_with_one_child():
    layout = calculate_layout(_shapes(box(0, 0, 10, 10)), direction=ROW)
    assert layout.direction == "row"
    assert layout.justify_content == "space-between"


def test_scores():
    assert score_row(IN_A_ROW) == 1.0
    assert score_row(STACKED) == 0.0
    assert score_column(STACKED) == 1.0
    assert score_column(IN_A_ROW) == 0.0
    assert score_gap_consistency(IN_A_ROW, ROW) == 1.0
    assert score_gap_consistency(IN_A_ROW[:2], ROW) == 0.5


def test_scored_strategy_reports_confidence():
    config = InferenceConfig(layout_strategy="scored")
    layout = calculate_layout(IN_A_ROW, config)
    assert layout.direction == "row"
    assert layout.wrap == "nowrap"
    assert layout.confidence == pytest.approx(0.8)


def test_scored_strategy_column():
    config = InferenceConfig(layout_strategy="scored")
    layout = calculate_layout(STACKED, config)
    assert layout.direction == "column"
    assert layout.confidence is not None
