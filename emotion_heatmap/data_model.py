"""
Data model for the Session Emotion Heatmap.

Immutable dataclasses representing parsed session samples and the
static reference annotations.  Datasets are built once by
``data_loader`` and never mutated; a reload replaces the whole dataset.

Coordinates are expected in ``[0, 1]`` but are stored as received.
Consumers (grid binning, the renderer's axis clamp) are responsible for
handling values outside the unit square.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Tuple

import numpy as np


class Scope(str, Enum):
    """Which session population a sample belongs to."""
    LOCAL = 'local'
    GLOBAL = 'global'

    @classmethod
    def parse(cls, text) -> 'Scope':
        """Parse a scope string case-insensitively.

        Raises ``ValueError`` for anything other than ``local``/``global``.
        """
        if isinstance(text, Scope):
            return text
        try:
            return cls(str(text).strip().lower())
        except ValueError:
            raise ValueError(f"unknown scope: {text!r}") from None


@dataclass(frozen=True)
class SamplePoint:
    """A single session-position sample.

    Parameters
    ----------
    x, y : float
        Normalised position, nominally in ``[0, 1]``.
    scope : Scope
        Population the sample belongs to.
    """
    x: float
    y: float
    scope: Scope


@dataclass(frozen=True)
class Dataset:
    """An ordered, scope-homogeneous sequence of samples.

    Parameters
    ----------
    scope : Scope
        Scope shared by every point.
    points : tuple of SamplePoint
        Samples in source order.
    source : str
        Path or URL the samples were read from (informational only).
    """
    scope: Scope
    points: Tuple[SamplePoint, ...] = ()
    source: str = field(default='', compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'points', tuple(self.points))
        for pt in self.points:
            if pt.scope is not self.scope:
                raise ValueError(
                    f"{self.scope.value} dataset cannot hold a "
                    f"{pt.scope.value} sample"
                )

    @classmethod
    def empty(cls, scope: Scope) -> 'Dataset':
        return cls(scope=scope)

    @classmethod
    def from_xy(cls, scope: Scope, coords, source: str = '') -> 'Dataset':
        """Build a dataset from an iterable of ``(x, y)`` pairs."""
        return cls(
            scope=scope,
            points=tuple(SamplePoint(float(x), float(y), scope) for x, y in coords),
            source=source,
        )

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[SamplePoint]:
        return iter(self.points)

    @property
    def xs(self) -> np.ndarray:
        return np.fromiter((p.x for p in self.points), dtype=float, count=len(self.points))

    @property
    def ys(self) -> np.ndarray:
        return np.fromiter((p.y for p in self.points), dtype=float, count=len(self.points))


class ColorSource(str, Enum):
    """Which representation an annotation colour is stored in."""
    RGB = 'rgb'
    HSL = 'hsl'


@dataclass(frozen=True)
class AnnotationColor:
    """A colour with exactly one active representation.

    ``values`` is ``(r, g, b)`` with 0–255 ints for ``RGB``, or
    ``(hue_degrees, saturation, lightness)`` with saturation and
    lightness in ``[0, 1]`` for ``HSL``.
    """
    source: ColorSource
    values: Tuple[float, float, float]

    @classmethod
    def rgb(cls, r: int, g: int, b: int) -> 'AnnotationColor':
        for channel in (r, g, b):
            if not 0 <= channel <= 255:
                raise ValueError(f"RGB channel out of range: {channel}")
        return cls(ColorSource.RGB, (int(r), int(g), int(b)))

    @classmethod
    def hsl(cls, hue: float, saturation: float, lightness: float) -> 'AnnotationColor':
        if not (0.0 <= saturation <= 1.0 and 0.0 <= lightness <= 1.0):
            raise ValueError(
                f"HSL saturation/lightness must be in [0, 1], got "
                f"({saturation}, {lightness})"
            )
        return cls(ColorSource.HSL, (float(hue) % 360.0, float(saturation), float(lightness)))


@dataclass(frozen=True)
class ReferenceAnnotation:
    """A labelled point of interest drawn over the heatmap.

    Parameters
    ----------
    name : str
        Label text, e.g. ``"joy"``.
    color : AnnotationColor
        Dot colour.
    position : (float, float)
        ``(x, y)`` in the unit square.
    """
    name: str
    color: AnnotationColor
    position: Tuple[float, float]
