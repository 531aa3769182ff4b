"""Serialized form of the inferred structure tree."""

from __future__ import annotations

from pydantic import BaseModel, Field

from layerscope.engine.nodes import CompositeData, Layout, OutputNode, RepeatingPattern
from layerscope.models.layers import BoundsModel, TextStyleModel


class LayoutModel(BaseModel):
    direction: str = "column"
    wrap: str = "nowrap"
    gap: float = 0.0
    justify_content: str = "flex-start"
    align_items: str = "stretch"
    confidence: float | None = None

    @classmethod
    def from_layout(cls, layout: Layout) -> LayoutModel:
        return cls(**layout.to_dict())


class CompositeDataModel(BaseModel):
    title: str = ""
    description: str = ""
    image_ref: str | None = None
    image_direction: str | None = None
    list_items: list[str] = Field(default_factory=list)

    @classmethod
    def from_data(cls, data: CompositeData) -> CompositeDataModel:
        return cls(**data.to_dict())


class PatternModel(BaseModel):
    count: int
    avg_width: float
    avg_height: float
    widget_type: str | None = None

    @classmethod
    def from_pattern(cls, pattern: RepeatingPattern) -> PatternModel:
        return cls(
            count=pattern.count,
            avg_width=pattern.avg_width,
            avg_height=pattern.avg_height,
            widget_type=pattern.widget_type.value if pattern.widget_type else None,
        )


class OutputNodeModel(BaseModel):
    id: str
    name: str
    widget_type: str
    bounds: BoundsModel
    confidence: float = 0.0
    children: list[OutputNodeModel] = Field(default_factory=list)
    layout: LayoutModel | None = None
    composite_data: CompositeDataModel | None = None
    source_layer_id: str | None = None
    text_style: TextStyleModel | None = None
    pattern: PatternModel | None = None

    @classmethod
    def from_node(cls, node: OutputNode) -> OutputNodeModel:
        return cls(
            id=node.id,
            name=node.name,
            widget_type=node.widget_type.value,
            bounds=BoundsModel.from_bounds(node.bounds),
            confidence=node.confidence,
            children=[cls.from_node(child) for child in node.children],
            layout=LayoutModel.from_layout(node.layout) if node.layout else None,
            composite_data=CompositeDataModel.from_data(node.composite_data) if node.composite_data else None,
            source_layer_id=node.source_layer_id,
            text_style=TextStyleModel.from_style(node.text_style) if node.text_style else None,
            pattern=PatternModel.from_pattern(node.pattern) if node.pattern else None,
        )


OutputNodeModel.model_rebuild()
