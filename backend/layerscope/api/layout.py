"""POST /api/layout — flex layout for a single container's children."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from layerscope.dependencies import get_inference_config
from layerscope.engine.config import InferenceConfig
from layerscope.engine.layout import calculate_layout
from layerscope.engine.nodes import ShapeLayer
from layerscope.models.requests import LayoutRequest
from layerscope.models.tree import LayoutModel

router = APIRouter()


@router.post("/layout", response_model=LayoutModel)
async def layout(
    req: LayoutRequest,
    base_config: InferenceConfig = Depends(get_inference_config),
) -> LayoutModel:
    config = base_config.with_overrides(layout_strategy=req.layout_strategy)
    children = [ShapeLayer(id=f"child-{i}", bounds=b.to_engine()) for i, b in enumerate(req.children)]
    return LayoutModel.from_layout(calculate_layout(children, config, direction=req.direction))
