"""API response models."""

from __future__ import annotations

from pydantic import BaseModel

from layerscope.models.tree import OutputNodeModel


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    env: str = "development"
    widget_types: list[str] = []


class ConvertResponse(BaseModel):
    root: OutputNodeModel
    node_count: int = 0
    processing_time_ms: float = 0.0
