"""Relational positioning between an image and its text block."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from layerscope.engine.nodes import LayerNode
from layerscope.utils.geometry import Bounds, center, merge_bounds, smart_distance

LEFT = "left"
RIGHT = "right"
TOP = "top"
BOTTOM = "bottom"
OVERLAPPING = "overlapping"

_FLEX_BY_POSITION = {
    LEFT: "row",
    RIGHT: "row-reverse",
    TOP: "column",
    BOTTOM: "column-reverse",
}


@dataclass
class Relation:
    position: str
    direction: str
    distance: float


def get_relative_position(image_bounds: Bounds, text_bounds: Bounds) -> str:
    """Where the image center sits relative to the text rectangle.

    Horizontal placement wins over vertical: a center left of the text is
    ``left`` even when it is also above it.
    """
    cx, cy = center(image_bounds)
    if cx < text_bounds.left:
        return LEFT
    if cx > text_bounds.right:
        return RIGHT
    if cy < text_bounds.top:
        return TOP
    if cy > text_bounds.bottom:
        return BOTTOM
    return OVERLAPPING


def infer_flex_direction(image_bounds: Bounds, text_bounds: Bounds) -> str:
    position = get_relative_position(image_bounds, text_bounds)
    return _FLEX_BY_POSITION.get(position, "row")


def describe_relation(image: LayerNode, texts: Sequence[LayerNode]) -> Relation | None:
    """Position, flex direction and separation of an image versus its texts."""
    text_boxes = [t.bounds for t in texts if t.bounds is not None]
    if image.bounds is None or not text_boxes:
        return None
    block = merge_bounds(*text_boxes)
    position = get_relative_position(image.bounds, block)
    return Relation(
        position=position,
        direction=_FLEX_BY_POSITION.get(position, "row"),
        distance=smart_distance(image.bounds, block),
    )


__all__ = [
    "Relation",
    "describe_relation",
    "get_relative_position",
    "infer_flex_direction",
    "smart_distance",
]
