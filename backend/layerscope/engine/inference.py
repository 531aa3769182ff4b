"""Structure inference engine — what widget does a cluster of layers form?

Single layers are classified by kind and shape. Multi-layer clusters are
tallied (images split into icon-sized and regular, texts into headings and
body) and matched against composite patterns in a fixed order:

    1. regular image + heading             → image-box  (0.85)
    2. icon image + heading + body text    → icon-box   (0.80)
    3. button-shaped member + one text     → button     (0.75)
    4. three or more texts, no image       → icon-list  (0.70)
    5. anything else                       → container  (0.50)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from layerscope.engine.clustering import measure_repetition
from layerscope.engine.config import DEFAULT_CONFIG, InferenceConfig
from layerscope.engine.nodes import (
    Cluster,
    CompositeData,
    ImageLayer,
    LayerNode,
    RepeatingPattern,
    ShapeLayer,
    TextLayer,
    WidgetInference,
    WidgetType,
)
from layerscope.engine.relations import describe_relation
from layerscope.engine.text_roles import pick_image

logger = logging.getLogger(__name__)

# Children of these types keep a parent group from collapsing into a composite.
SUPPRESSING_TYPES = frozenset(
    {
        WidgetType.IMAGE_BOX,
        WidgetType.ICON_BOX,
        WidgetType.ICON_LIST,
        WidgetType.CONTAINER,
        WidgetType.BUTTON,
    }
)


@dataclass
class Composition:
    headings: list[TextLayer] = field(default_factory=list)
    body_texts: list[TextLayer] = field(default_factory=list)
    images: list[LayerNode] = field(default_factory=list)
    icons: list[LayerNode] = field(default_factory=list)
    has_button_shape: bool = False

    @property
    def has_image(self) -> bool:
        return bool(self.images)

    @property
    def has_small_image(self) -> bool:
        return bool(self.icons)

    @property
    def has_heading(self) -> bool:
        return bool(self.headings)

    @property
    def has_text(self) -> bool:
        return bool(self.body_texts)

    @property
    def text_count(self) -> int:
        return len(self.headings) + len(self.body_texts)

    @property
    def image_count(self) -> int:
        return len(self.images) + len(self.icons)


def is_button_shape(layer: LayerNode, config: InferenceConfig = DEFAULT_CONFIG) -> bool:
    """Wide, short and small: width ≤ 300, height ≤ 80, aspect ratio 2–6."""
    b = layer.bounds
    if b is None or b.width <= 0 or b.height <= 0:
        return False
    ratio = b.width / b.height
    return (
        b.width <= config.button_max_width
        and b.height <= config.button_max_height
        and config.button_aspect_min <= ratio <= config.button_aspect_max
    )


def _is_heading_text(layer: TextLayer, config: InferenceConfig) -> bool:
    return layer.style.font_size >= config.heading_font_size


def classify_single_layer(layer: LayerNode, config: InferenceConfig = DEFAULT_CONFIG) -> WidgetInference:
    if isinstance(layer, TextLayer):
        widget = WidgetType.HEADING if _is_heading_text(layer, config) else WidgetType.TEXT_EDITOR
        return WidgetInference(widget, 0.9, [layer])
    if is_button_shape(layer, config):
        return WidgetInference(WidgetType.BUTTON, 0.7, [layer])
    if isinstance(layer, (ImageLayer, ShapeLayer)):
        return WidgetInference(WidgetType.IMAGE, 0.85, [layer])
    return WidgetInference(WidgetType.CONTAINER, 0.3, [layer])


def analyze_composition(cluster: Iterable[LayerNode], config: InferenceConfig = DEFAULT_CONFIG) -> Composition:
    comp = Composition()
    for layer in cluster:
        if isinstance(layer, TextLayer):
            if _is_heading_text(layer, config):
                comp.headings.append(layer)
            else:
                comp.body_texts.append(layer)
        elif isinstance(layer, (ImageLayer, ShapeLayer)):
            b = layer.bounds
            if b is not None and b.width <= config.icon_max_size and b.height <= config.icon_max_size:
                comp.icons.append(layer)
            else:
                comp.images.append(layer)
            if is_button_shape(layer, config):
                comp.has_button_shape = True
    return comp


def _title_of(layer: TextLayer) -> str:
    return layer.text or layer.name


def _composite_data(comp: Composition, images: Sequence[LayerNode]) -> CompositeData:
    data = CompositeData()
    if comp.headings:
        data.title = _title_of(comp.headings[0])
    if comp.body_texts:
        data.description = _title_of(comp.body_texts[0])
    image = pick_image(images)
    if image is not None:
        data.image_ref = image.id
        relation = describe_relation(image, comp.headings + comp.body_texts)
        if relation is not None:
            data.image_direction = relation.direction
    return data


def extract_image_box_data(comp: Composition) -> CompositeData:
    return _composite_data(comp, comp.images)


def extract_icon_box_data(comp: Composition) -> CompositeData:
    return _composite_data(comp, comp.icons)


def infer_widget_type(cluster: Sequence[LayerNode], config: InferenceConfig = DEFAULT_CONFIG) -> WidgetInference:
    """Classify a cluster of layers into a widget hypothesis."""
    if not cluster:
        return WidgetInference(WidgetType.CONTAINER, 0.0, [])
    if len(cluster) == 1:
        return classify_single_layer(cluster[0], config)

    layers = list(cluster)
    comp = analyze_composition(layers, config)

    if comp.has_image and comp.has_heading:
        return WidgetInference(WidgetType.IMAGE_BOX, 0.85, layers, extract_image_box_data(comp))

    if comp.has_small_image and comp.has_heading and comp.has_text:
        return WidgetInference(WidgetType.ICON_BOX, 0.8, layers, extract_icon_box_data(comp))

    if comp.has_button_shape and comp.text_count == 1:
        texts = comp.headings + comp.body_texts
        return WidgetInference(WidgetType.BUTTON, 0.75, layers, CompositeData(title=_title_of(texts[0])))

    if comp.text_count >= 3 and not comp.has_image:
        items = [_title_of(t) for t in layers if isinstance(t, TextLayer)]
        return WidgetInference(WidgetType.ICON_LIST, 0.7, layers, CompositeData(list_items=items))

    return WidgetInference(WidgetType.CONTAINER, 0.5, layers)


def detect_composite_widget(child_types: Iterable[WidgetType]) -> WidgetType | None:
    """Composite type formed by already-classified children, if any.

    A group holding finished widgets (cards, lists, buttons, containers)
    never collapses into a composite itself.
    """
    types = [WidgetType(t) for t in child_types]
    if not types:
        return None
    if any(t in SUPPRESSING_TYPES for t in types):
        return None

    has_image = WidgetType.IMAGE in types
    has_heading = WidgetType.HEADING in types
    has_text = WidgetType.TEXT_EDITOR in types
    text_count = sum(1 for t in types if t in (WidgetType.HEADING, WidgetType.TEXT_EDITOR))

    if has_image and has_heading:
        return WidgetType.IMAGE_BOX
    if text_count >= 3 and not has_image:
        return WidgetType.ICON_LIST
    if has_heading and has_text and not has_image:
        return WidgetType.ICON_BOX
    return None


_GROUP_CONFIDENCE = {
    WidgetType.IMAGE_BOX: 0.85,
    WidgetType.ICON_BOX: 0.8,
    WidgetType.ICON_LIST: 0.7,
}


def infer_group_type(child_types: Sequence[WidgetType]) -> tuple[WidgetType, float]:
    """Widget type and confidence for a group of classified children."""
    composite = detect_composite_widget(child_types)
    if composite is None:
        return WidgetType.CONTAINER, 0.5 if child_types else 0.0
    return composite, _GROUP_CONFIDENCE[composite]


def detect_repeating_patterns(
    clusters: Sequence[Cluster],
    config: InferenceConfig = DEFAULT_CONFIG,
) -> RepeatingPattern:
    """Annotate similar-sized clusters (cards). Never changes structure."""
    pattern = measure_repetition(clusters, config.repeat_tolerance)
    if pattern.is_repeating:
        pattern.widget_type = infer_widget_type(clusters[0], config).widget_type
        logger.debug("Repeating pattern: %d x %s", pattern.count, pattern.widget_type.value)
    return pattern


def score_composite_match(
    cluster: Sequence[LayerNode],
    widget_type: WidgetType,
    config: InferenceConfig = DEFAULT_CONFIG,
) -> float:
    """Confidence that ``cluster`` is a ``widget_type``; 0 when inference disagrees."""
    inferred = infer_widget_type(cluster, config)
    return inferred.confidence if inferred.widget_type == widget_type else 0.0
