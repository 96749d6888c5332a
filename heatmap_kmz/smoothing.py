"""
Separable Gaussian blur for density grids.

The 2D blur is applied as a horizontal pass followed by a vertical pass over
the full grid. Each pass writes a fresh array. Samples falling outside the
grid are clamped to the nearest edge cell (edge replication), so mass near
the border is redistributed rather than lost to zero padding.
"""
from __future__ import annotations

import math
from functools import lru_cache

import numpy as np


@lru_cache(maxsize=16)
def gaussian_kernel(sigma: float) -> np.ndarray:
    """Normalized odd-length kernel with half-width ceil(3 * sigma).

    The returned array is read-only and shared between callers.
    """
    if not (sigma > 0) or not math.isfinite(sigma):
        raise ValueError(f"sigma must be a positive finite number, got {sigma!r}")
    half = int(math.ceil(3.0 * sigma))
    offsets = np.arange(-half, half + 1, dtype=np.float64)
    kernel = np.exp(-(offsets * offsets) / (2.0 * sigma * sigma))
    kernel /= kernel.sum()
    kernel.setflags(write=False)
    return kernel


def _convolve_axis(grid: np.ndarray, kernel: np.ndarray, axis: int) -> np.ndarray:
    half = len(kernel) // 2
    n = grid.shape[axis]
    pad = [(0, 0), (0, 0)]
    pad[axis] = (half, half)
    padded = np.pad(grid, pad, mode="edge")

    out = np.zeros(grid.shape, dtype=np.float64)
    for k, weight in enumerate(kernel):
        if axis == 1:
            out += weight * padded[:, k:k + n]
        else:
            out += weight * padded[k:k + n, :]
    return out


def convolve_horizontal(grid: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    return _convolve_axis(grid, kernel, axis=1)


def convolve_vertical(grid: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    return _convolve_axis(grid, kernel, axis=0)


def gaussian_smooth(grid: np.ndarray, sigma: float) -> np.ndarray:
    kernel = gaussian_kernel(float(sigma))
    return convolve_vertical(convolve_horizontal(grid, kernel), kernel)
