"""
Superimposed density map for the Session Emotion Heatmap.

Draws the layer instructions from ``layers.compose_layers`` onto a
matplotlib figure:

  - global and local density contours on the turbo colour scale,
    with a fixed [0, 1] intensity domain
  - optional raw-point overlay for the local dataset
  - emotion labels and coloured dots
  - colour legend and caption

Densities are binned Gaussian KDEs: samples are counted on a fine grid
and smoothed with ``scipy.ndimage.gaussian_filter``.  The bandwidth is
given in canvas pixels and converted to grid cells.
"""

import numpy as np
import matplotlib
from matplotlib.cm import ScalarMappable
from matplotlib.colors import Normalize, to_rgba
from matplotlib.figure import Figure
from scipy.ndimage import gaussian_filter

from .annotations import annotations, to_mpl_color
from .constants import (
    AXIS_DOMAIN, AXIS_TICKS, CANVAS_SIZE_PX, COLOR_DOMAIN, COLOR_SCHEME,
    COLOR_LEGEND_LABEL, DARK_COLORS, EXPORT_TEXT_COLOR, FIGURE_CAPTION,
    LABEL_OFFSET_POINTS, RENDER_RESOLUTION,
)
from .data_model import Dataset, Scope
from .grid import build_grid
from .layers import LayerKind


# Reference dot radius in points
_EMOTION_DOT_RADIUS = 3.0


def clamp_alpha(value) -> float:
    """Clamp an opacity into ``[0, 1]``; ``None`` means fully transparent."""
    if value is None:
        return 0.0
    return min(max(float(value), 0.0), 1.0)


def density_surface(
    dataset: Dataset,
    bandwidth: float,
    *,
    resolution: int = RENDER_RESOLUTION,
    canvas_px: int = CANVAS_SIZE_PX,
) -> np.ndarray:
    """Smoothed density of *dataset*, normalised to a peak of 1.

    Returns a ``(resolution, resolution)`` float array indexed
    ``[row (y), col (x)]``.  An empty dataset gives all zeros.
    """
    counts = build_grid(dataset, resolution).astype(float)
    if not counts.any():
        return counts

    sigma = bandwidth / float(canvas_px) * resolution
    smoothed = gaussian_filter(counts, sigma=sigma, mode='constant')
    peak = smoothed.max()
    if peak <= 0:
        return np.zeros_like(smoothed)
    return smoothed / peak


def _cell_centres(resolution: int) -> np.ndarray:
    lo, hi = AXIS_DOMAIN
    return lo + (np.arange(resolution) + 0.5) * (hi - lo) / resolution


def _draw_frame(ax, text_color: str) -> None:
    for spine in ax.spines.values():
        spine.set_visible(True)
        spine.set_edgecolor(text_color)
        spine.set_linewidth(1.0)


def _draw_density(ax, dataset: Dataset, inst, cmap, norm) -> None:
    if dataset is None or len(dataset) == 0:
        return

    surface = density_surface(dataset, inst.bandwidth) * inst.weight
    if not surface.any():
        return

    centres = _cell_centres(surface.shape[0])
    levels = np.linspace(COLOR_DOMAIN[0], COLOR_DOMAIN[1], inst.thresholds + 1)[1:]
    # Contouring needs at least one level inside the data range
    levels = levels[levels <= surface.max()]
    if levels.size == 0:
        return

    base = clamp_alpha(inst.opacity)

    if inst.fill == 'density' and levels.size >= 2:
        ax.contourf(
            centres, centres, surface,
            levels=levels, cmap=cmap, norm=norm,
            alpha=base * clamp_alpha(inst.fill_opacity),
            zorder=2,
        )
    if inst.stroke == 'density':
        ax.contour(
            centres, centres, surface,
            levels=levels, cmap=cmap, norm=norm,
            alpha=base * clamp_alpha(inst.stroke_opacity),
            linewidths=0.6,
            zorder=3,
        )


def _draw_points(ax, dataset: Dataset, inst) -> None:
    if dataset is None or len(dataset) == 0:
        return
    lo, hi = AXIS_DOMAIN
    xs = np.clip(dataset.xs, lo, hi)
    ys = np.clip(dataset.ys, lo, hi)
    ax.scatter(
        xs, ys,
        s=(2 * inst.radius) ** 2,
        facecolors=[to_rgba(inst.fill, clamp_alpha(inst.fill_opacity))],
        edgecolors=[to_rgba(inst.stroke, clamp_alpha(inst.stroke_opacity))],
        linewidths=0.5,
        zorder=4,
    )


def _draw_emotion_labels(ax, text_color: str) -> None:
    for ann in annotations():
        ax.annotate(
            ann.name,
            xy=ann.position,
            xytext=(0, LABEL_OFFSET_POINTS),
            textcoords='offset points',
            ha='center', va='bottom',
            fontsize=8, color=text_color,
            zorder=6,
        )


def _draw_emotion_dots(ax) -> None:
    anns = annotations()
    ax.scatter(
        [a.position[0] for a in anns],
        [a.position[1] for a in anns],
        c=[to_mpl_color(a) for a in anns],
        s=(2 * _EMOTION_DOT_RADIUS) ** 2,
        edgecolors='none',
        zorder=5,
    )


def render_density_map(
    fig: Figure,
    local: Dataset,
    global_: Dataset,
    instructions,
    *,
    for_export: bool = False,
    caption: str = FIGURE_CAPTION,
) -> None:
    """Render the composited density map on *fig*.

    Parameters
    ----------
    fig : matplotlib.figure.Figure
        Figure to draw on (will be cleared).
    local, global_ : Dataset
        Raw samples; density layers smooth the points themselves, not
        the 100×100 occupancy grid.
    instructions : sequence of LayerInstruction
        Output of ``compose_layers``, drawn in order.
    for_export : bool
        If ``True``, use light-theme text colours.
    caption : str
        Caption placed under the axes.
    """
    fig.clf()
    text_color = EXPORT_TEXT_COLOR if for_export else DARK_COLORS['fg']
    datasets = {Scope.LOCAL: local, Scope.GLOBAL: global_}

    cmap = matplotlib.colormaps[COLOR_SCHEME]
    norm = Normalize(vmin=COLOR_DOMAIN[0], vmax=COLOR_DOMAIN[1], clip=True)

    ax = fig.add_subplot(111)

    for inst in instructions:
        if not inst.active:
            continue
        if inst.kind is LayerKind.FRAME:
            _draw_frame(ax, text_color)
        elif inst.kind is LayerKind.DENSITY:
            _draw_density(ax, datasets.get(inst.scope), inst, cmap, norm)
        elif inst.kind is LayerKind.DOTS:
            if inst.scope is None:
                _draw_emotion_dots(ax)
            else:
                _draw_points(ax, datasets.get(inst.scope), inst)
        elif inst.kind is LayerKind.TEXT:
            _draw_emotion_labels(ax, text_color)

    # ── Axes: fixed unit domain, 20 ticks, grid ──────────────────────
    ticks = np.linspace(AXIS_DOMAIN[0], AXIS_DOMAIN[1], AXIS_TICKS + 1)
    ax.set_xlim(*AXIS_DOMAIN)
    ax.set_ylim(*AXIS_DOMAIN)
    ax.set_xticks(ticks)
    ax.set_yticks(ticks)
    ax.tick_params(axis='x', labelrotation=90)
    ax.grid(True, linewidth=0.4, alpha=0.5, zorder=1)
    ax.set_axisbelow(True)
    ax.set_aspect('equal')
    ax.set_xlabel("x")
    ax.set_ylabel("y")

    # ── Legend ────────────────────────────────────────────────────────
    mappable = ScalarMappable(norm=norm, cmap=cmap)
    mappable.set_array([])
    fig.colorbar(mappable, ax=ax, label=COLOR_LEGEND_LABEL, fraction=0.046, pad=0.04)

    if caption:
        fig.text(
            0.5, 0.01, caption,
            ha='center', va='bottom',
            fontsize=8, style='italic', color=text_color,
        )
