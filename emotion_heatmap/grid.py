"""
Occupancy grid aggregation for the Session Emotion Heatmap.

Bins normalised samples into a fixed ``R × R`` count matrix.  Row index
comes from ``y`` and column index from ``x``:

    row = floor(y * R),  col = floor(x * R)

Indices are clipped into ``[0, R - 1]``.  A coordinate of exactly
``1.0`` therefore lands in the last row/column instead of overflowing,
and stray coordinates outside the unit square fall into the nearest
edge cell.  Every finite input point is counted exactly once; NaN or
infinite coordinates (which ``data_loader`` never produces) are skipped.
"""

from typing import Iterable, List, Sequence

import numpy as np

from .constants import GRID_RESOLUTION
from .data_model import SamplePoint


def _cell_indices(values: np.ndarray, resolution: int) -> np.ndarray:
    idx = np.floor(values * resolution).astype(np.int64)
    return np.clip(idx, 0, resolution - 1)


def build_grid(
    points: Iterable[SamplePoint],
    resolution: int = GRID_RESOLUTION,
) -> np.ndarray:
    """Count *points* per cell of a fresh ``resolution × resolution`` grid.

    Parameters
    ----------
    points : iterable of SamplePoint
        Any sequence of samples, or a ``Dataset``.  May be empty.
    resolution : int
        Cells per side (default ``GRID_RESOLUTION``).

    Returns
    -------
    numpy.ndarray
        ``int64`` array of shape ``(resolution, resolution)``.  A new
        array on every call; counting is order independent.
    """
    if resolution < 1:
        raise ValueError(f"grid resolution must be positive, got {resolution}")

    grid = np.zeros((resolution, resolution), dtype=np.int64)
    pts = list(points)
    if not pts:
        return grid

    xs = np.array([p.x for p in pts], dtype=float)
    ys = np.array([p.y for p in pts], dtype=float)
    finite = np.isfinite(xs) & np.isfinite(ys)

    rows = _cell_indices(ys[finite], resolution)
    cols = _cell_indices(xs[finite], resolution)
    # add.at accumulates repeated (row, col) pairs
    np.add.at(grid, (rows, cols), 1)
    return grid


def flatten_grid(grid: np.ndarray) -> List[int]:
    """Row-major flattening; the result has ``R * R`` entries."""
    return [int(v) for v in np.asarray(grid).ravel(order='C')]


def unflatten_grid(flat: Sequence[int], resolution: int = GRID_RESOLUTION) -> np.ndarray:
    """Rebuild the square grid produced by :func:`flatten_grid`."""
    if len(flat) != resolution * resolution:
        raise ValueError(
            f"expected {resolution * resolution} cells for a "
            f"{resolution}x{resolution} grid, got {len(flat)}"
        )
    return np.asarray(flat, dtype=np.int64).reshape((resolution, resolution))


def grid_total(grid: np.ndarray) -> int:
    return int(np.asarray(grid).sum())
