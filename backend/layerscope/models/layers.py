"""Input layer schemas.

Layers arrive as JSON with a ``kind`` discriminator and are converted into the
engine's frozen dataclasses by ``to_engine()``. Coordinates are checked by
``Bounds`` itself, which rejects non-finite values and inverted boxes.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from layerscope.engine.nodes import GroupLayer, ImageLayer, LayerNode, ShapeLayer, TextLayer, TextStyle
from layerscope.utils.geometry import Bounds


class BoundsModel(BaseModel):
    top: float
    left: float
    right: float
    bottom: float

    def to_engine(self) -> Bounds:
        return Bounds(top=self.top, left=self.left, right=self.right, bottom=self.bottom)

    @classmethod
    def from_bounds(cls, bounds: Bounds) -> BoundsModel:
        return cls(top=bounds.top, left=bounds.left, right=bounds.right, bottom=bounds.bottom)


class TextStyleModel(BaseModel):
    text: str = ""
    font_size: float = Field(default=16.0, gt=0, allow_inf_nan=False)
    font_family: str = "Arial"
    color: str = "#000000"
    alignment: str = "left"
    font_weight: str = "normal"
    line_height: str = "normal"
    letter_spacing: str = "normal"

    def to_engine(self) -> TextStyle:
        return TextStyle(**self.model_dump())

    @classmethod
    def from_style(cls, style: TextStyle) -> TextStyleModel:
        return cls(
            text=style.text,
            font_size=style.font_size,
            font_family=style.font_family,
            color=style.color,
            alignment=style.alignment,
            font_weight=style.font_weight,
            line_height=style.line_height,
            letter_spacing=style.letter_spacing,
        )


class _LayerModel(BaseModel):
    id: str = Field(..., description="Stable layer identifier")
    name: str = ""
    bounds: BoundsModel | None = None
    visible: bool = True

    def _common(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "bounds": self.bounds.to_engine() if self.bounds is not None else None,
            "visible": self.visible,
        }


class TextLayerModel(_LayerModel):
    kind: Literal["text"] = "text"
    text_style: TextStyleModel | None = None

    def to_engine(self) -> LayerNode:
        style = self.text_style.to_engine() if self.text_style is not None else None
        return TextLayer(text_style=style, **self._common())


class ImageLayerModel(_LayerModel):
    kind: Literal["image"] = "image"

    def to_engine(self) -> LayerNode:
        return ImageLayer(**self._common())


class ShapeLayerModel(_LayerModel):
    kind: Literal["shape"] = "shape"

    def to_engine(self) -> LayerNode:
        return ShapeLayer(**self._common())


class GroupLayerModel(_LayerModel):
    kind: Literal["group"] = "group"
    children: list[LayerModel] = Field(default_factory=list)

    def to_engine(self) -> LayerNode:
        return GroupLayer(children=tuple(c.to_engine() for c in self.children), **self._common())


LayerModel = Annotated[
    Union[TextLayerModel, ImageLayerModel, ShapeLayerModel, GroupLayerModel],
    Field(discriminator="kind"),
]

GroupLayerModel.model_rebuild()
