"""API request models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from layerscope.models.layers import BoundsModel, LayerModel


class ConvertRequest(BaseModel):
    layers: list[LayerModel] = Field(..., description="Top-level layers, flat or nested")
    canvas_width: float | None = Field(default=None, gt=0, description="Document width in px")
    mode: Literal["infer", "preserve"] = Field(
        default="infer",
        description="infer: rebuild structure from geometry; preserve: keep the document's groups",
    )
    proximity_threshold: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    layout_strategy: Literal["geometric", "scored"] | None = None


class LayoutRequest(BaseModel):
    children: list[BoundsModel] = Field(..., description="Bounding boxes of the container's children")
    direction: Literal["row", "column"] | None = Field(
        default=None,
        description="Force a direction instead of detecting it",
    )
    layout_strategy: Literal["geometric", "scored"] | None = None
