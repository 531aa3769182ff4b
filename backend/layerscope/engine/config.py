"""Inference configuration — every heuristic threshold, passed per call."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal

LayoutStrategy = Literal["geometric", "scored"]


@dataclass(frozen=True)
class InferenceConfig:
    """Thresholds for clustering, classification and layout inference."""

    # Proximity clustering (px)
    proximity_threshold: float = 20.0
    sub_cluster_ratio: float = 0.6  # tighter threshold inside a container

    # Two boxes share a row when vertical overlap > ratio * smaller height
    row_overlap_ratio: float = 0.3

    # Widget classification
    heading_font_size: float = 24.0
    button_max_width: float = 300.0
    button_max_height: float = 80.0
    button_aspect_min: float = 2.0
    button_aspect_max: float = 6.0
    icon_max_size: float = 100.0

    # Text role classifier: single-candidate heading cutoff
    role_heading_font_size: float = 18.0

    # Repeating pattern: size within ±20% of the average
    repeat_tolerance: float = 0.2

    # Reading order: tops closer than this count as the same line (px)
    reading_order_tolerance: float = 20.0

    # Structure expansion guard
    max_depth: int = 32

    layout_strategy: LayoutStrategy = "geometric"

    @property
    def sub_cluster_threshold(self) -> float:
        return self.proximity_threshold * self.sub_cluster_ratio

    def with_overrides(self, **overrides) -> InferenceConfig:
        """Copy with the non-None overrides applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


DEFAULT_CONFIG = InferenceConfig()
