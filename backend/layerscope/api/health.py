"""Health check + meta endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from layerscope.config import Settings
from layerscope.dependencies import get_settings
from layerscope.engine.nodes import WidgetType
from layerscope.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(settings: Settings = Depends(get_settings)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version="0.1.0",
        env=settings.layerscope_env,
        widget_types=[w.value for w in WidgetType],
    )
