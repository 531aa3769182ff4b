"""Engine data model.

Input layers are a tagged union of frozen dataclasses (TextLayer | ImageLayer |
ShapeLayer | GroupLayer). The engine never mutates them; it builds new
OutputNode trees.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Union

from layerscope.utils.geometry import Bounds


class LayerKind(str, enum.Enum):
    TEXT = "text"
    IMAGE = "image"
    SHAPE = "shape"
    GROUP = "group"


class WidgetType(str, enum.Enum):
    CONTAINER = "container"
    HEADING = "heading"
    TEXT_EDITOR = "text-editor"
    BUTTON = "button"
    IMAGE = "image"
    IMAGE_BOX = "image-box"
    ICON_BOX = "icon-box"
    ICON_LIST = "icon-list"


COMPOSITE_WIDGETS = frozenset({WidgetType.IMAGE_BOX, WidgetType.ICON_BOX, WidgetType.ICON_LIST})


# ---------------------------------------------------------------------------
# Input layers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextStyle:
    text: str = ""
    font_size: float = 16.0
    font_family: str = "Arial"
    color: str = "#000000"
    alignment: str = "left"
    font_weight: str = "normal"
    line_height: str = "normal"
    letter_spacing: str = "normal"

    @classmethod
    def fallback(cls, text: str = "") -> TextStyle:
        """Neutral style used when a text layer arrives without one."""
        return cls(text=text)

    @property
    def is_bold(self) -> bool:
        return self.font_weight.lower() in ("bold", "bolder", "600", "700", "800", "900")


@dataclass(frozen=True)
class _LayerBase:
    id: str
    name: str = ""
    bounds: Bounds | None = None
    visible: bool = True

    @property
    def is_renderable(self) -> bool:
        """Visible with a positive-area box."""
        return self.visible and self.bounds is not None and not self.bounds.is_empty


@dataclass(frozen=True)
class TextLayer(_LayerBase):
    text_style: TextStyle | None = None

    @property
    def kind(self) -> LayerKind:
        return LayerKind.TEXT

    @property
    def style(self) -> TextStyle:
        if self.text_style is not None:
            return self.text_style
        return TextStyle.fallback()

    @property
    def text(self) -> str:
        return self.style.text


@dataclass(frozen=True)
class ImageLayer(_LayerBase):
    @property
    def kind(self) -> LayerKind:
        return LayerKind.IMAGE


@dataclass(frozen=True)
class ShapeLayer(_LayerBase):
    @property
    def kind(self) -> LayerKind:
        return LayerKind.SHAPE


@dataclass(frozen=True)
class GroupLayer(_LayerBase):
    children: tuple[LayerNode, ...] = ()

    @property
    def kind(self) -> LayerKind:
        return LayerKind.GROUP


LayerNode = Union[TextLayer, ImageLayer, ShapeLayer, GroupLayer]

# A flat, unordered set of layers judged spatially related.
Cluster = list[LayerNode]


# ---------------------------------------------------------------------------
# Inference results
# ---------------------------------------------------------------------------


@dataclass
class CompositeData:
    title: str = ""
    description: str = ""
    image_ref: str | None = None
    # Image placement relative to the text block (row, row-reverse, column, column-reverse)
    image_direction: str | None = None
    list_items: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "image_ref": self.image_ref,
            "image_direction": self.image_direction,
            "list_items": list(self.list_items),
        }


@dataclass
class WidgetInference:
    widget_type: WidgetType
    confidence: float
    source_layers: list[LayerNode] = field(default_factory=list)
    composite_data: CompositeData | None = None


@dataclass
class Layout:
    direction: str = "column"
    wrap: str = "nowrap"
    gap: float = 0.0
    justify_content: str = "flex-start"
    align_items: str = "stretch"
    confidence: float | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "direction": self.direction,
            "wrap": self.wrap,
            "gap": self.gap,
            "justify_content": self.justify_content,
            "align_items": self.align_items,
        }
        if self.confidence is not None:
            data["confidence"] = self.confidence
        return data


@dataclass
class RepeatingPattern:
    is_repeating: bool = False
    count: int = 0
    avg_width: float = 0.0
    avg_height: float = 0.0
    widget_type: WidgetType | None = None


@dataclass
class OutputNode:
    """A node of the inferred structure tree."""

    id: str
    name: str
    widget_type: WidgetType
    bounds: Bounds
    confidence: float = 0.0
    children: list[OutputNode] = field(default_factory=list)
    layout: Layout | None = None
    composite_data: CompositeData | None = None
    # Set when the node stands for exactly one input layer
    source_layer_id: str | None = None
    text_style: TextStyle | None = None
    pattern: RepeatingPattern | None = None

    @property
    def is_container(self) -> bool:
        return self.widget_type == WidgetType.CONTAINER

    def iter_nodes(self):
        """Pre-order traversal, iterative."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    @property
    def node_count(self) -> int:
        return sum(1 for _ in self.iter_nodes())
