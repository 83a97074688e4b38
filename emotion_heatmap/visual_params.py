"""
Visual parameters for the density rendering.

A small mutable value object behind the control surface.  Setters clamp
finite out-of-range input to the nearest bound instead of rejecting it,
since every intermediate slider position must be representable.  After
storing a changed value each setter notifies the registered listeners.
"""

import logging
import math

from .constants import (
    OPACITY_RANGE, BANDWIDTH_RANGE, SKEW_RANGE, DEFAULT_SHOW_POINTS,
)

logger = logging.getLogger(__name__)


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp *value* into ``[lo, hi]``.

    Raises ``ValueError`` for NaN, which has no nearest bound.
    """
    value = float(value)
    if math.isnan(value):
        raise ValueError("parameter value must not be NaN")
    return min(max(value, lo), hi)


class VisualParameters:
    """Opacity, bandwidth, skew and point-visibility settings."""

    def __init__(
        self,
        opacity: float = OPACITY_RANGE[3],
        bandwidth: float = BANDWIDTH_RANGE[3],
        skew: float = SKEW_RANGE[3],
        show_points: bool = DEFAULT_SHOW_POINTS,
    ):
        self._opacity = clamp(opacity, OPACITY_RANGE[0], OPACITY_RANGE[1])
        self._bandwidth = clamp(bandwidth, BANDWIDTH_RANGE[0], BANDWIDTH_RANGE[1])
        self._skew = clamp(skew, SKEW_RANGE[0], SKEW_RANGE[1])
        self._show_points = bool(show_points)
        self._listeners = []

    def __repr__(self):
        return (
            f"VisualParameters(opacity={self._opacity}, "
            f"bandwidth={self._bandwidth}, skew={self._skew}, "
            f"show_points={self._show_points})"
        )

    # ── Listeners ────────────────────────────────────────────────────

    def add_listener(self, callback) -> None:
        """Register ``callback(params)`` to run after every change."""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _changed(self, name: str, value) -> None:
        logger.debug("Parameter %s set to %s", name, value)
        for callback in list(self._listeners):
            callback(self)

    # ── Properties ───────────────────────────────────────────────────

    @property
    def opacity(self) -> float:
        return self._opacity

    @opacity.setter
    def opacity(self, value: float) -> None:
        value = clamp(value, OPACITY_RANGE[0], OPACITY_RANGE[1])
        if value != self._opacity:
            self._opacity = value
            self._changed('opacity', value)

    @property
    def bandwidth(self) -> float:
        return self._bandwidth

    @bandwidth.setter
    def bandwidth(self, value: float) -> None:
        value = clamp(value, BANDWIDTH_RANGE[0], BANDWIDTH_RANGE[1])
        if value != self._bandwidth:
            self._bandwidth = value
            self._changed('bandwidth', value)

    @property
    def skew(self) -> float:
        return self._skew

    @skew.setter
    def skew(self, value: float) -> None:
        value = clamp(value, SKEW_RANGE[0], SKEW_RANGE[1])
        if value != self._skew:
            self._skew = value
            self._changed('skew', value)

    @property
    def show_points(self) -> bool:
        return self._show_points

    @show_points.setter
    def show_points(self, value: bool) -> None:
        value = bool(value)
        if value != self._show_points:
            self._show_points = value
            self._changed('show_points', value)

    # ── Helpers ──────────────────────────────────────────────────────

    def reset(self) -> None:
        """Restore defaults, notifying listeners once if anything changed."""
        defaults = (OPACITY_RANGE[3], BANDWIDTH_RANGE[3], SKEW_RANGE[3],
                    DEFAULT_SHOW_POINTS)
        current = (self._opacity, self._bandwidth, self._skew, self._show_points)
        if current == defaults:
            return
        self._opacity, self._bandwidth, self._skew, self._show_points = defaults
        self._changed('all', 'defaults')

    def as_dict(self) -> dict:
        return {
            'opacity': self._opacity,
            'bandwidth': self._bandwidth,
            'skew': self._skew,
            'show_points': self._show_points,
        }
