"""Text role classifier — which text is the heading, which the description.

Each candidate gets an additive score from its name, font size, weight,
length and line count. Highest score is the heading, lowest the description.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from layerscope.engine.config import DEFAULT_CONFIG, InferenceConfig
from layerscope.engine.nodes import ImageLayer, LayerNode, ShapeLayer, TextLayer

logger = logging.getLogger(__name__)

HEADING_NAME_RE = re.compile(r"^(heading|title|h[1-6]|headline|header|name)[-_]?", re.IGNORECASE)
DESCRIPTION_NAME_RE = re.compile(
    r"^(desc|description|text|paragraph|body|content|subtitle|sub[-_]?title|info)[-_]?",
    re.IGNORECASE,
)
IMAGE_NAME_RE = re.compile(r"^(img|image|photo|picture|pic|icon|logo|thumb|thumbnail)[-_]?", re.IGNORECASE)


@dataclass
class TextRoles:
    heading: TextLayer | None = None
    description: TextLayer | None = None


@dataclass
class _Scored:
    layer: TextLayer
    score: int
    top: float


def score_text_layer(layer: TextLayer) -> int:
    style = layer.style
    name = layer.name or ""
    score = 0

    if HEADING_NAME_RE.match(name):
        score += 50
    if DESCRIPTION_NAME_RE.match(name):
        score -= 50

    if style.font_size >= 24:
        score += 30
    elif style.font_size >= 20:
        score += 20
    elif style.font_size >= 18:
        score += 10
    elif style.font_size <= 14:
        score -= 20

    if style.is_bold:
        score += 15

    text = style.text
    if len(text) <= 50:
        score += 10
    elif len(text) > 100:
        score -= 15

    lines = text.count("\n") + 1
    if lines == 1:
        score += 10
    elif lines > 2:
        score -= 10

    return score


def classify_text_roles(
    layers: Sequence[TextLayer],
    config: InferenceConfig = DEFAULT_CONFIG,
) -> TextRoles:
    """Assign heading/description among text layers that belong together."""
    if not layers:
        return TextRoles()

    if len(layers) == 1:
        layer = layers[0]
        if layer.style.font_size >= config.role_heading_font_size or HEADING_NAME_RE.match(layer.name or ""):
            return TextRoles(heading=layer)
        return TextRoles(description=layer)

    scored = [
        _Scored(layer=l, score=score_text_layer(l), top=l.bounds.top if l.bounds is not None else 0.0)
        for l in layers
    ]
    # Stable sort: equal scores keep input order
    scored.sort(key=lambda s: s.score, reverse=True)

    best = scored[0].score
    if scored[1].score == best:
        tied = sorted((s for s in scored if s.score == best), key=lambda s: s.top)
        roles = TextRoles(heading=tied[0].layer, description=tied[-1].layer)
    else:
        roles = TextRoles(heading=scored[0].layer, description=scored[-1].layer)

    logger.debug(
        "Text roles: heading=%s description=%s (scores %s)",
        roles.heading.id if roles.heading else None,
        roles.description.id if roles.description else None,
        [s.score for s in scored],
    )
    return roles


def pick_image(layers: Sequence[LayerNode]) -> LayerNode | None:
    """First image-like layer whose name says image/icon/logo, else the first one."""
    images = [l for l in layers if isinstance(l, (ImageLayer, ShapeLayer))]
    if not images:
        return None
    for layer in images:
        if IMAGE_NAME_RE.match(layer.name or ""):
            return layer
    return images[0]
