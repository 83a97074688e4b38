"""
Layer composition for the density map.

Turns the two datasets and the current ``VisualParameters`` into an
ordered tuple of ``LayerInstruction``s for the renderer:

  1. frame
  2. global density   (stroke only, weight 0.2, stroke = opacity - skew)
  3. local density    (fill + stroke, fill = stroke = opacity + skew)
  4. local points     (only when ``show_points``)
  5. emotion labels
  6. emotion dots

Skew moves the two density opacities in opposite directions, so a
single control shifts emphasis between the local and global clouds
without touching the bandwidth.  Post-skew opacities are passed on
unclamped; ``chart_density`` clamps them when drawing.

``compose_layers`` is pure: identical inputs give equal output.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .constants import (
    GLOBAL_LAYER_WEIGHT, LOCAL_LAYER_WEIGHT, DENSITY_THRESHOLDS,
    POINT_RADIUS, POINT_FILL_OPACITY, POINT_STROKE_OPACITY, POINT_COLOR,
)
from .data_model import Dataset, Scope
from .visual_params import VisualParameters


class LayerKind(str, Enum):
    FRAME = 'frame'
    DENSITY = 'density'
    DOTS = 'dots'
    TEXT = 'text'


@dataclass(frozen=True)
class LayerInstruction:
    """One renderable layer.

    Parameters
    ----------
    kind : LayerKind
        What the renderer should draw.
    name : str
        Stable layer identifier, e.g. ``"local-density"``.
    scope : Scope or None
        Dataset the layer draws from; ``None`` for the frame and the
        annotation layers.
    weight : float
        Density multiplier (density layers only).
    bandwidth : float
        Smoothing radius in canvas pixels (density layers only).
    thresholds : int
        Number of contour levels (density layers only).
    opacity : float
        Base opacity of the whole layer.
    fill_opacity, stroke_opacity : float or None
        ``None`` when the layer has no fill / no stroke.
    fill, stroke : str or None
        ``"density"`` to colour by density, a colour name, or ``None``.
    radius : float
        Dot radius in points (dot layers only).
    active : bool
        Inactive layers are carried for completeness but not drawn.
    """
    kind: LayerKind
    name: str
    scope: Optional[Scope] = None
    weight: float = 1.0
    bandwidth: float = 0.0
    thresholds: int = 0
    opacity: float = 1.0
    fill_opacity: Optional[float] = None
    stroke_opacity: Optional[float] = None
    fill: Optional[str] = None
    stroke: Optional[str] = None
    radius: float = 0.0
    active: bool = True


FRAME_LAYER = LayerInstruction(kind=LayerKind.FRAME, name='frame')
EMOTION_LABEL_LAYER = LayerInstruction(kind=LayerKind.TEXT, name='emotion-labels')
EMOTION_DOT_LAYER = LayerInstruction(
    kind=LayerKind.DOTS, name='emotion-dots', fill='annotation',
)


def compose_layers(
    local: Dataset,
    global_: Dataset,
    params: VisualParameters,
) -> Tuple[LayerInstruction, ...]:
    """Build the render instructions for one frame.

    The datasets are accepted so that the signature mirrors what the
    renderer receives; only their scopes are referenced here.
    """
    opacity = params.opacity
    skew = params.skew
    bandwidth = params.bandwidth

    global_density = LayerInstruction(
        kind=LayerKind.DENSITY,
        name='global-density',
        scope=global_.scope,
        weight=GLOBAL_LAYER_WEIGHT,
        bandwidth=bandwidth,
        thresholds=DENSITY_THRESHOLDS,
        stroke='density',
        stroke_opacity=opacity - skew,
    )
    local_density = LayerInstruction(
        kind=LayerKind.DENSITY,
        name='local-density',
        scope=local.scope,
        weight=LOCAL_LAYER_WEIGHT,
        bandwidth=bandwidth,
        thresholds=DENSITY_THRESHOLDS,
        opacity=1.0,
        fill='density',
        fill_opacity=opacity + skew,
        stroke='density',
        stroke_opacity=opacity + skew,
    )

    layers = [FRAME_LAYER, global_density, local_density]
    if params.show_points:
        layers.append(LayerInstruction(
            kind=LayerKind.DOTS,
            name='local-points',
            scope=local.scope,
            fill=POINT_COLOR,
            stroke=POINT_COLOR,
            fill_opacity=POINT_FILL_OPACITY,
            stroke_opacity=POINT_STROKE_OPACITY,
            radius=POINT_RADIUS,
        ))
    layers.append(EMOTION_LABEL_LAYER)
    layers.append(EMOTION_DOT_LAYER)
    return tuple(layers)


def density_layers(instructions) -> Tuple[LayerInstruction, ...]:
    return tuple(i for i in instructions if i.kind is LayerKind.DENSITY)
