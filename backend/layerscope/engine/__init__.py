"""LayerScope structure inference engine."""

from layerscope.engine.classifier import classify_layers
from layerscope.engine.config import InferenceConfig
from layerscope.engine.nodes import Layout, OutputNode, WidgetType
from layerscope.engine.pipeline import Pipeline, create_pipeline

__all__ = [
    "classify_layers",
    "InferenceConfig",
    "Layout",
    "OutputNode",
    "WidgetType",
    "Pipeline",
    "create_pipeline",
]
