"""Classification of documents that already carry their own grouping.

Where the pipeline discards the source grouping and infers structure from
geometry, this keeps the designer's groups and only assigns widget types:
layer names first (``btn-signup``, ``card_3``, ``title``), then layer kind and
shape. Each group is then checked for a composite pattern among its
classified children, with suppression when a child is already a finished
widget.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from layerscope.engine.config import DEFAULT_CONFIG, InferenceConfig
from layerscope.engine.inference import SUPPRESSING_TYPES, infer_group_type, is_button_shape
from layerscope.engine.layout import calculate_layout
from layerscope.engine.nodes import (
    COMPOSITE_WIDGETS,
    CompositeData,
    GroupLayer,
    ImageLayer,
    LayerNode,
    OutputNode,
    ShapeLayer,
    TextLayer,
    WidgetType,
)
from layerscope.engine.relations import describe_relation
from layerscope.engine.text_roles import classify_text_roles, pick_image
from layerscope.errors import InferenceDepthError
from layerscope.utils.geometry import ZERO_BOUNDS, Bounds, merge_bounds
from layerscope.utils.ids import IdProvider, UuidIdProvider

logger = logging.getLogger(__name__)


def _name_pattern(keywords: str) -> re.Pattern[str]:
    # Keyword must not run on into another word: "p-2" is a paragraph, "photo" is not.
    return re.compile(rf"^({keywords})(?![a-z])", re.IGNORECASE)


# Checked in order; first match wins.
NAME_PATTERNS: list[tuple[WidgetType, re.Pattern[str]]] = [
    (WidgetType.BUTTON, _name_pattern(r"btn|button|cta|action")),
    (WidgetType.HEADING, _name_pattern(r"heading|title|h[1-6]|headline|header")),
    (WidgetType.ICON_BOX, _name_pattern(r"icon[-_]?box|feature[-_]?box|service")),
    (WidgetType.IMAGE_BOX, _name_pattern(r"image[-_]?box|card|product|item|blog[-_]?post")),
    (WidgetType.ICON_LIST, _name_pattern(r"icon[-_]?list|list|menu|nav|features|bullets")),
    (WidgetType.TEXT_EDITOR, _name_pattern(r"text|paragraph|desc|description|body|content|p")),
    (WidgetType.IMAGE, _name_pattern(r"img|image|photo|picture|pic|banner|hero")),
    (WidgetType.CONTAINER, _name_pattern(r"container|section|row|wrapper|box|group|block")),
]

_HEADING_KEYWORDS = ("title", "heading", "header", "headline", "name")
_BUTTON_KEYWORDS = ("btn", "button", "cta", "click", "submit", "action")

_NAMED_CONFIDENCE = 0.95


def match_name(name: str) -> WidgetType | None:
    for widget, pattern in NAME_PATTERNS:
        if pattern.match(name):
            return widget
    return None


def determine_widget_type(layer: LayerNode, config: InferenceConfig = DEFAULT_CONFIG) -> tuple[WidgetType, float]:
    """Widget type from the layer's own name, kind and shape."""
    name = (layer.name or "").lower()
    named = match_name(name)
    if named is not None:
        return named, _NAMED_CONFIDENCE

    if isinstance(layer, GroupLayer):
        return WidgetType.CONTAINER, 0.5

    if isinstance(layer, TextLayer):
        if layer.style.font_size >= config.heading_font_size or any(k in name for k in _HEADING_KEYWORDS):
            return WidgetType.HEADING, 0.9
        return WidgetType.TEXT_EDITOR, 0.9

    if isinstance(layer, (ImageLayer, ShapeLayer)):
        if any(k in name for k in _BUTTON_KEYWORDS) or is_button_shape(layer, config):
            return WidgetType.BUTTON, 0.7
        return WidgetType.IMAGE, 0.85

    return WidgetType.CONTAINER, 0.3


def extract_group_composite_data(
    children: Sequence[LayerNode],
    widget_type: WidgetType,
    config: InferenceConfig = DEFAULT_CONFIG,
) -> CompositeData:
    """Title, description and image of a composite group, via text roles.

    Icon lists also get every visible text child as a list item.
    """
    texts = [c for c in children if isinstance(c, TextLayer) and c.visible]
    roles = classify_text_roles(texts, config)
    data = CompositeData(
        title=roles.heading.text if roles.heading else "",
        description=roles.description.text if roles.description else "",
    )
    if widget_type == WidgetType.ICON_LIST:
        data.list_items = [t.text or t.name for t in texts]
    image = pick_image([c for c in children if c.visible])
    if image is not None:
        data.image_ref = image.id
        relation = describe_relation(image, texts)
        if relation is not None:
            data.image_direction = relation.direction
    return data


class GroupClassifier:
    """Classifies a grouped layer tree without re-clustering it."""

    def __init__(
        self,
        config: InferenceConfig | None = None,
        id_provider: IdProvider | None = None,
    ) -> None:
        self.config = config or InferenceConfig()
        self.new_id = id_provider or UuidIdProvider()

    def classify(self, layers: Sequence[LayerNode]) -> OutputNode:
        nodes = [n for n in (self._classify_layer(layer, 0) for layer in layers) if n is not None]
        if len(nodes) == 1:
            return nodes[0]

        bounds = merge_bounds(*(n.bounds for n in nodes)) if nodes else ZERO_BOUNDS
        root = OutputNode(
            id=self.new_id(),
            name="Root Container",
            widget_type=WidgetType.CONTAINER,
            bounds=bounds,
            confidence=0.5 if nodes else 0.0,
            children=nodes,
        )
        root.layout = calculate_layout(nodes, self.config)
        logger.info("Classified %d top-level layers into %d nodes", len(layers), root.node_count)
        return root

    def _classify_layer(self, layer: LayerNode, depth: int) -> OutputNode | None:
        if depth > self.config.max_depth:
            raise InferenceDepthError(depth, self.config.max_depth)
        if not layer.visible:
            return None

        widget, confidence = determine_widget_type(layer, self.config)
        children: list[OutputNode] = []
        if isinstance(layer, GroupLayer):
            for child in layer.children:
                node = self._classify_layer(child, depth + 1)
                if node is not None:
                    children.append(node)

        bounds = self._bounds_of(layer, children)
        if bounds is None:
            logger.debug("Skipping layer %s without usable bounds", layer.id)
            return None

        node = OutputNode(
            id=layer.id,
            name=layer.name,
            widget_type=widget,
            bounds=bounds,
            confidence=confidence,
            children=children,
            source_layer_id=layer.id,
            text_style=layer.style if isinstance(layer, TextLayer) else None,
        )

        if isinstance(layer, GroupLayer) and children:
            if widget in COMPOSITE_WIDGETS:
                if any(c.widget_type in SUPPRESSING_TYPES for c in children):
                    logger.debug("Group %s holds finished widgets, not a %s", layer.id, widget.value)
                    node.widget_type = WidgetType.CONTAINER
                    node.confidence = 0.5
            else:
                group_type, group_confidence = infer_group_type([c.widget_type for c in children])
                if widget == WidgetType.CONTAINER and group_type != WidgetType.CONTAINER:
                    node.widget_type = group_type
                    node.confidence = group_confidence

        if node.widget_type in COMPOSITE_WIDGETS and isinstance(layer, GroupLayer):
            node.composite_data = extract_group_composite_data(layer.children, node.widget_type, self.config)
        if node.is_container:
            node.layout = calculate_layout(children, self.config)
        return node

    @staticmethod
    def _bounds_of(layer: LayerNode, children: list[OutputNode]) -> Bounds | None:
        if layer.bounds is not None and not layer.bounds.is_empty:
            return layer.bounds
        if children:
            return merge_bounds(*(c.bounds for c in children))
        return None


def classify_layers(
    layers: Sequence[LayerNode],
    config: InferenceConfig | None = None,
    id_provider: IdProvider | None = None,
) -> OutputNode:
    return GroupClassifier(config, id_provider).classify(layers)
