"""FastAPI dependency injection."""

from __future__ import annotations

from layerscope.config import Settings, settings
from layerscope.engine.config import InferenceConfig
from layerscope.utils.ids import IdProvider, UuidIdProvider


def get_settings() -> Settings:
    return settings


def get_inference_config() -> InferenceConfig:
    return InferenceConfig(
        proximity_threshold=settings.proximity_threshold,
        max_depth=settings.max_depth,
        layout_strategy=settings.layout_strategy,
    )


def get_id_provider() -> IdProvider:
    return UuidIdProvider()
