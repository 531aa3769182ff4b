"""Shared test fixtures and layer builders."""

from __future__ import annotations

import pytest

from layerscope.engine.config import InferenceConfig
from layerscope.engine.nodes import GroupLayer, ImageLayer, ShapeLayer, TextLayer, TextStyle
from layerscope.utils.geometry import Bounds
from layerscope.utils.ids import SequentialIdProvider


def box(top: float, left: float, right: float, bottom: float) -> Bounds:
    return Bounds(top=top, left=left, right=right, bottom=bottom)


def text(
    id: str,
    bounds: Bounds | None,
    font_size: float = 16,
    name: str = "",
    content: str = "",
    weight: str = "normal",
    visible: bool = True,
) -> TextLayer:
    style = TextStyle(text=content or id, font_size=font_size, font_weight=weight)
    return TextLayer(id=id, name=name, bounds=bounds, visible=visible, text_style=style)


def image(id: str, bounds: Bounds | None, name: str = "", visible: bool = True) -> ImageLayer:
    return ImageLayer(id=id, name=name, bounds=bounds, visible=visible)


def shape(id: str, bounds: Bounds | None, name: str = "", visible: bool = True) -> ShapeLayer:
    return ShapeLayer(id=id, name=name, bounds=bounds, visible=visible)


def group(id: str, children, name: str = "", bounds: Bounds | None = None, visible: bool = True) -> GroupLayer:
    return GroupLayer(id=id, name=name, bounds=bounds, visible=visible, children=tuple(children))


def card(prefix: str, left: float, top: float = 100) -> list:
    """Image with a heading 10px below it: one image-box worth of layers."""
    return [
        image(f"{prefix}-img", box(top, left, left + 200, top + 100)),
        text(f"{prefix}-title", box(top + 110, left, left + 200, top + 140), font_size=24),
    ]


def landing_page() -> list:
    """Page heading above a row of three identical cards, 50px apart."""
    return [
        text("hero", box(0, 0, 400, 40), font_size=32, content="Welcome"),
        *card("c1", 0),
        *card("c2", 250),
        *card("c3", 500),
    ]


# JSON form of a small page for API tests
LANDING_PAGE_JSON = [
    {
        "kind": "text",
        "id": "hero",
        "name": "Headline",
        "bounds": {"top": 0, "left": 0, "right": 400, "bottom": 40},
        "text_style": {"text": "Welcome", "font_size": 32},
    },
    {
        "kind": "group",
        "id": "cards",
        "name": "Cards",
        "bounds": {"top": 100, "left": 0, "right": 450, "bottom": 240},
        "children": [
            {
                "kind": "group",
                "id": "card-a",
                "children": [
                    {"kind": "image", "id": "c1-img", "bounds": {"top": 100, "left": 0, "right": 200, "bottom": 200}},
                    {
                        "kind": "text",
                        "id": "c1-title",
                        "bounds": {"top": 210, "left": 0, "right": 200, "bottom": 240},
                        "text_style": {"text": "First", "font_size": 24},
                    },
                ],
            },
            {
                "kind": "group",
                "id": "card-b",
                "children": [
                    {"kind": "image", "id": "c2-img", "bounds": {"top": 100, "left": 250, "right": 450, "bottom": 200}},
                    {
                        "kind": "text",
                        "id": "c2-title",
                        "bounds": {"top": 210, "left": 250, "right": 450, "bottom": 240},
                        "text_style": {"text": "Second", "font_size": 24},
                    },
                ],
            },
        ],
    },
]


@pytest.fixture
def seq_ids() -> SequentialIdProvider:
    return SequentialIdProvider()


@pytest.fixture
def config() -> InferenceConfig:
    return InferenceConfig()
