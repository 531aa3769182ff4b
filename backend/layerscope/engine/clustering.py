"""Spatial clustering — proximity grouping and row segmentation.

Layers are linked when the gap between their boxes is within a threshold;
clusters are the connected components of that graph. Clusters are then
segmented into rows by vertical overlap.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Sequence
from functools import cmp_to_key

import numpy as np

from layerscope.engine.config import DEFAULT_CONFIG, InferenceConfig
from layerscope.engine.nodes import Cluster, LayerNode, RepeatingPattern
from layerscope.utils.geometry import ZERO_BOUNDS, Bounds, gap_matrix, merge_bounds, vertical_overlap

logger = logging.getLogger(__name__)


def filter_valid_layers(layers: Iterable[LayerNode]) -> list[LayerNode]:
    """Drop invisible layers and layers without a positive-area box."""
    valid = []
    for layer in layers:
        if layer.is_renderable:
            valid.append(layer)
        else:
            logger.debug("Skipping layer %s (visible=%s, bounds=%s)", layer.id, layer.visible, layer.bounds)
    return valid


def cluster_by_proximity(
    layers: Sequence[LayerNode],
    threshold: float = DEFAULT_CONFIG.proximity_threshold,
) -> list[Cluster]:
    """Partition the renderable ``layers`` into proximity clusters.

    Invisible layers and layers without a positive-area box are left out.
    Two layers are neighbours when their min_distance is <= threshold.
    Components are expanded breadth-first from each unvisited layer in input
    order, so cluster order and member order are deterministic.
    """
    layers = filter_valid_layers(layers)
    n = len(layers)
    if n == 0:
        return []
    if n == 1:
        return [[layers[0]]]

    dmat = gap_matrix([layer.bounds for layer in layers])
    adjacency = dmat <= threshold
    np.fill_diagonal(adjacency, False)

    visited = np.zeros(n, dtype=bool)
    clusters: list[Cluster] = []

    for seed in range(n):
        if visited[seed]:
            continue
        visited[seed] = True
        members = [seed]
        queue = deque([seed])
        while queue:
            current = queue.popleft()
            for neighbor in np.flatnonzero(adjacency[current]):
                if not visited[neighbor]:
                    visited[neighbor] = True
                    members.append(int(neighbor))
                    queue.append(int(neighbor))
        clusters.append([layers[i] for i in members])

    logger.debug("Clustered %d layers into %d clusters (threshold=%.1f)", n, len(clusters), threshold)
    return clusters


def calculate_cluster_bounds(cluster: Sequence[LayerNode]) -> Bounds:
    """Union box of every member that has bounds."""
    boxes = [layer.bounds for layer in cluster if layer.bounds is not None]
    if not boxes:
        return ZERO_BOUNDS
    return merge_bounds(*boxes)


def detect_container_boundaries(
    clusters: Sequence[Cluster],
    canvas_width: float | None = None,
    config: InferenceConfig = DEFAULT_CONFIG,
) -> list[list[Cluster]]:
    """Segment clusters into rows, top to bottom.

    ``canvas_width`` is accepted for API compatibility; row segmentation is
    purely overlap-based and does not read it.
    """
    if not clusters:
        return []
    ordered = sorted(clusters, key=lambda c: calculate_cluster_bounds(c).top)
    return group_into_rows(ordered, config.row_overlap_ratio)


def group_into_rows(
    clusters: Sequence[Cluster],
    overlap_ratio: float = DEFAULT_CONFIG.row_overlap_ratio,
) -> list[list[Cluster]]:
    """Greedy single pass: a cluster joins the open row when its vertical
    overlap with the row exceeds ``overlap_ratio`` of the smaller height.

    Expects clusters sorted by top.
    """
    rows: list[list[Cluster]] = []
    current_row: list[Cluster] = []
    row_bounds: Bounds | None = None

    for cluster in clusters:
        cb = calculate_cluster_bounds(cluster)
        if row_bounds is None:
            current_row = [cluster]
            row_bounds = cb
            continue

        overlap = vertical_overlap(row_bounds, cb)
        min_height = min(row_bounds.height, cb.height)
        if overlap > min_height * overlap_ratio:
            current_row.append(cluster)
            row_bounds = merge_bounds(row_bounds, cb)
        else:
            rows.append(current_row)
            current_row = [cluster]
            row_bounds = cb

    if current_row:
        rows.append(current_row)
    return rows


def sort_by_reading_order(
    layers: Sequence[LayerNode],
    tolerance: float = DEFAULT_CONFIG.reading_order_tolerance,
) -> list[LayerNode]:
    """Top-to-bottom, then left-to-right for tops within ``tolerance``."""

    def compare(a: LayerNode, b: LayerNode) -> float:
        y_diff = a.bounds.top - b.bounds.top
        if abs(y_diff) > tolerance:
            return y_diff
        return a.bounds.left - b.bounds.left

    return sorted(layers, key=cmp_to_key(compare))


def measure_repetition(
    clusters: Sequence[Cluster],
    tolerance: float = DEFAULT_CONFIG.repeat_tolerance,
) -> RepeatingPattern:
    """Do the clusters share a common size (cards, list items)?

    Repeating when there are at least two clusters and every width and height
    is within ``tolerance`` of the respective average.
    """
    if len(clusters) < 2:
        return RepeatingPattern(is_repeating=False, count=len(clusters))

    boxes = [calculate_cluster_bounds(c) for c in clusters]
    widths = np.array([b.width for b in boxes])
    heights = np.array([b.height for b in boxes])
    avg_w = float(np.mean(widths))
    avg_h = float(np.mean(heights))

    is_repeating = bool(
        np.all(np.abs(widths - avg_w) < avg_w * tolerance)
        and np.all(np.abs(heights - avg_h) < avg_h * tolerance)
    )
    return RepeatingPattern(
        is_repeating=is_repeating,
        count=len(clusters),
        avg_width=round(avg_w, 2),
        avg_height=round(avg_h, 2),
    )
