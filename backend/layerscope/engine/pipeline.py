"""Pipeline orchestrator — flat layers in, structure tree out.

    flatten → filter → cluster → rows → classify / sub-cluster → layout

Tree expansion runs on an explicit work stack bounded by
``InferenceConfig.max_depth``; exceeding it raises InferenceDepthError.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from layerscope.engine.clustering import (
    calculate_cluster_bounds,
    cluster_by_proximity,
    detect_container_boundaries,
    filter_valid_layers,
    sort_by_reading_order,
)
from layerscope.engine.config import InferenceConfig
from layerscope.engine.inference import classify_single_layer, detect_repeating_patterns, infer_widget_type
from layerscope.engine.layout import COLUMN, ROW, calculate_layout
from layerscope.engine.nodes import (
    Cluster,
    GroupLayer,
    LayerNode,
    OutputNode,
    TextLayer,
    WidgetInference,
    WidgetType,
)
from layerscope.errors import InferenceDepthError
from layerscope.utils.geometry import ZERO_BOUNDS, Bounds, merge_bounds
from layerscope.utils.ids import IdProvider, UuidIdProvider

logger = logging.getLogger(__name__)


def flatten_layers(layers: Iterable[LayerNode]) -> list[LayerNode]:
    """Leaves only, in document order. Groups with children are dissolved."""
    flat: list[LayerNode] = []
    stack = list(reversed(list(layers)))
    while stack:
        layer = stack.pop()
        if isinstance(layer, GroupLayer) and layer.children:
            stack.extend(reversed(layer.children))
        else:
            flat.append(layer)
    return flat


@dataclass
class _Task:
    """One unit of tree expansion: a cluster, or a row of several clusters."""

    clusters: list[Cluster]
    depth: int
    parent: list[OutputNode | None]
    index: int

    @property
    def is_row(self) -> bool:
        return len(self.clusters) > 1


class Pipeline:
    """Infers a widget tree from positioned layers."""

    def __init__(
        self,
        config: InferenceConfig | None = None,
        id_provider: IdProvider | None = None,
    ) -> None:
        self.config = config or InferenceConfig()
        self.new_id = id_provider or UuidIdProvider()

    def run(self, layers: Sequence[LayerNode], canvas_width: float | None = None) -> OutputNode:
        """Convert ``layers`` (flat or nested) into a single-root tree.

        ``canvas_width`` is accepted but not used by row segmentation.
        """
        start = time.perf_counter()

        flat = flatten_layers(layers)
        valid = filter_valid_layers(flat)
        logger.info("Pipeline: %d leaves, %d valid (canvas_width=%s)", len(flat), len(valid), canvas_width)

        if not valid:
            root = self._container("Root Container", ZERO_BOUNDS, confidence=0.0)
            root.layout = calculate_layout([], self.config)
            return root

        clusters = cluster_by_proximity(valid, self.config.proximity_threshold)
        rows = detect_container_boundaries(clusters, canvas_width, self.config)
        logger.debug("  %d clusters in %d rows", len(clusters), len(rows))

        forced: dict[int, str] = {}
        results = self._expand(rows, forced)

        if len(results) == 1:
            root = results[0]
        else:
            root = self._container(
                "Root Container",
                merge_bounds(*(node.bounds for node in results)),
                children=results,
            )
            forced[id(root)] = COLUMN

        self._assign_layouts(root, forced)

        elapsed = (time.perf_counter() - start) * 1000
        logger.info("Pipeline complete: %d nodes in %.1fms", root.node_count, elapsed)
        return root

    # ------------------------------------------------------------------
    # Tree expansion
    # ------------------------------------------------------------------

    def _expand(self, rows: list[list[Cluster]], forced: dict[int, str]) -> list[OutputNode]:
        results: list[OutputNode | None] = [None] * len(rows)
        stack = [_Task(row, 0, results, i) for i, row in reversed(list(enumerate(rows)))]

        while stack:
            task = stack.pop()
            if task.depth > self.config.max_depth:
                raise InferenceDepthError(task.depth, self.config.max_depth)

            if task.is_row:
                node, children = self._row_container(task.clusters)
                forced[id(node)] = ROW
            else:
                node, children = self._cluster_node(task.clusters[0])

            task.parent[task.index] = node
            if children:
                node.children = [None] * len(children)
                for i in reversed(range(len(children))):
                    stack.append(_Task([children[i]], task.depth + 1, node.children, i))

        return results

    def _cluster_node(self, cluster: Cluster) -> tuple[OutputNode, list[Cluster]]:
        """Classify one cluster. Returns the node and any sub-clusters still to expand."""
        inference = infer_widget_type(cluster, self.config)

        if len(cluster) == 1:
            return self._layer_node(cluster[0], inference), []

        node = self._classified_node(inference, calculate_cluster_bounds(cluster))
        if inference.widget_type != WidgetType.CONTAINER:
            node.children = self._leaf_nodes(cluster)
            return node, []

        sub_clusters = cluster_by_proximity(cluster, self.config.sub_cluster_threshold)
        if len(sub_clusters) > 1:
            return node, sub_clusters
        node.children = self._leaf_nodes(cluster)
        return node, []

    def _row_container(self, clusters: list[Cluster]) -> tuple[OutputNode, list[Cluster]]:
        pattern = detect_repeating_patterns(clusters, self.config)
        bounds = calculate_cluster_bounds([layer for cluster in clusters for layer in cluster])
        node = self._container("Card Row" if pattern.is_repeating else "Row Container", bounds)
        if pattern.is_repeating:
            node.pattern = pattern
        return node, list(clusters)

    # ------------------------------------------------------------------
    # Node builders
    # ------------------------------------------------------------------

    def _container(
        self,
        name: str,
        bounds: Bounds,
        children: list[OutputNode] | None = None,
        confidence: float = 0.5,
    ) -> OutputNode:
        return OutputNode(
            id=self.new_id(),
            name=name,
            widget_type=WidgetType.CONTAINER,
            bounds=bounds,
            confidence=confidence,
            children=children or [],
        )

    def _classified_node(self, inference: WidgetInference, bounds: Bounds) -> OutputNode:
        return OutputNode(
            id=self.new_id(),
            name=f"Smart {inference.widget_type.value}",
            widget_type=inference.widget_type,
            bounds=bounds,
            confidence=inference.confidence,
            composite_data=inference.composite_data,
        )

    def _layer_node(self, layer: LayerNode, inference: WidgetInference | None = None) -> OutputNode:
        inference = inference or classify_single_layer(layer, self.config)
        return OutputNode(
            id=layer.id,
            name=layer.name,
            widget_type=inference.widget_type,
            bounds=layer.bounds,
            confidence=inference.confidence,
            source_layer_id=layer.id,
            text_style=layer.style if isinstance(layer, TextLayer) else None,
        )

    def _leaf_nodes(self, cluster: Cluster) -> list[OutputNode]:
        ordered = sort_by_reading_order(cluster, self.config.reading_order_tolerance)
        return [self._layer_node(layer) for layer in ordered]

    def _assign_layouts(self, root: OutputNode, forced: dict[int, str]) -> None:
        for node in root.iter_nodes():
            if node.is_container:
                node.layout = calculate_layout(node.children, self.config, direction=forced.get(id(node)))


def create_pipeline(
    config: InferenceConfig | None = None,
    id_provider: IdProvider | None = None,
) -> Pipeline:
    """Factory function for creating a pipeline instance."""
    return Pipeline(config=config, id_provider=id_provider)
