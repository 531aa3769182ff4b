"""POST /api/convert — layers in, structure tree out."""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends

from layerscope.dependencies import get_id_provider, get_inference_config
from layerscope.engine.classifier import classify_layers
from layerscope.engine.config import InferenceConfig
from layerscope.engine.pipeline import create_pipeline
from layerscope.models.requests import ConvertRequest
from layerscope.models.responses import ConvertResponse
from layerscope.models.tree import OutputNodeModel
from layerscope.utils.ids import IdProvider

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/convert", response_model=ConvertResponse)
def convert(
    req: ConvertRequest,
    base_config: InferenceConfig = Depends(get_inference_config),
    id_provider: IdProvider = Depends(get_id_provider),
) -> ConvertResponse:
    start = time.perf_counter()

    config = base_config.with_overrides(
        proximity_threshold=req.proximity_threshold,
        layout_strategy=req.layout_strategy,
    )
    layers = [layer.to_engine() for layer in req.layers]

    if req.mode == "preserve":
        root = classify_layers(layers, config, id_provider)
    else:
        root = create_pipeline(config, id_provider).run(layers, canvas_width=req.canvas_width)

    elapsed = (time.perf_counter() - start) * 1000
    logger.info("convert mode=%s: %d layers -> %d nodes in %.1fms", req.mode, len(layers), root.node_count, elapsed)

    return ConvertResponse(
        root=OutputNodeModel.from_node(root),
        node_count=root.node_count,
        processing_time_ms=round(elapsed, 1),
    )
