"""
Reference annotations ("emotions") drawn over the heatmap.

Nine fixed labelled points on the unit square, each with one active
colour representation.  The catalog is built once at import time and
never changes.
"""

import colorsys
from typing import Tuple

from .data_model import AnnotationColor, ColorSource, ReferenceAnnotation


EMOTIONS: Tuple[ReferenceAnnotation, ...] = (
    ReferenceAnnotation('joy', AnnotationColor.rgb(255, 248, 77), (0.97, 0.56)),
    ReferenceAnnotation('excited', AnnotationColor.rgb(242, 136, 38), (0.845, 0.86)),
    ReferenceAnnotation('alarmed', AnnotationColor.rgb(210, 37, 25), (0.46, 0.945)),
    ReferenceAnnotation('annoyed', AnnotationColor.rgb(182, 18, 67), (0.28, 0.83)),
    ReferenceAnnotation('anxious', AnnotationColor.rgb(239, 92, 180), (0.14, 0.105)),
    ReferenceAnnotation('bored', AnnotationColor.rgb(99, 26, 192), (0.33, 0.105)),
    ReferenceAnnotation('serious', AnnotationColor.rgb(43, 48, 170), (0.61, 0.17)),
    ReferenceAnnotation('relaxed', AnnotationColor.rgb(26, 179, 192), (0.855, 0.17)),
    ReferenceAnnotation('neutral', AnnotationColor.rgb(128, 128, 128), (0.5, 0.5)),
)


def annotations() -> Tuple[ReferenceAnnotation, ...]:
    """Return the constant, ordered annotation catalog."""
    return EMOTIONS


def find_annotation(name: str) -> ReferenceAnnotation:
    for ann in EMOTIONS:
        if ann.name == name:
            return ann
    raise KeyError(name)


def _rgb_channels(color: AnnotationColor) -> Tuple[int, int, int]:
    """Resolve either representation to 0–255 RGB channels."""
    if color.source is ColorSource.RGB:
        r, g, b = color.values
        return int(r), int(g), int(b)
    hue, sat, light = color.values
    # colorsys orders the arguments hue, lightness, saturation
    r, g, b = colorsys.hls_to_rgb(hue / 360.0, light, sat)
    return round(r * 255), round(g * 255), round(b * 255)


def to_display_color(annotation: ReferenceAnnotation) -> str:
    """Format the annotation colour as ``"rgb(r, g, b)"``.

    Examples
    --------
    >>> to_display_color(find_annotation('neutral'))
    'rgb(128, 128, 128)'
    """
    r, g, b = _rgb_channels(annotation.color)
    return f"rgb({r}, {g}, {b})"


def to_mpl_color(annotation: ReferenceAnnotation) -> Tuple[float, float, float]:
    """Annotation colour as a matplotlib RGB tuple in ``[0, 1]``."""
    r, g, b = _rgb_channels(annotation.color)
    return r / 255.0, g / 255.0, b / 255.0
