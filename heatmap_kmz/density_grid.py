from __future__ import annotations

from typing import Iterable

import numpy as np

from .models import GeoBounds, Point

# Guards the index scale against zero-span bounds
SPAN_EPSILON = 1e-9


def _grid_indices(values: np.ndarray, origin: float, span: float, resolution: int) -> np.ndarray:
    scale = (resolution - 1) / (span + SPAN_EPSILON)
    # round half up, not numpy's half-to-even
    return np.floor((values - origin) * scale + 0.5).astype(np.int64)


def accumulate_density(points: Iterable[Point], bounds: GeoBounds, resolution: int) -> np.ndarray:
    """Unweighted 2D histogram of `points` over `bounds`.

    Returns a (resolution, resolution) float64 array indexed [row, col] where
    row 0 is the southern edge. Points mapping outside [0, resolution) on
    either axis are dropped.
    """
    grid = np.zeros((resolution, resolution), dtype=np.float64)
    pts = list(points)
    if not pts:
        return grid

    lons = np.fromiter((p.longitude for p in pts), dtype=np.float64, count=len(pts))
    lats = np.fromiter((p.latitude for p in pts), dtype=np.float64, count=len(pts))

    xi = _grid_indices(lons, bounds.west, bounds.east - bounds.west, resolution)
    yi = _grid_indices(lats, bounds.south, bounds.north - bounds.south, resolution)

    inside = (xi >= 0) & (xi < resolution) & (yi >= 0) & (yi < resolution)
    np.add.at(grid, (yi[inside], xi[inside]), 1.0)
    return grid
