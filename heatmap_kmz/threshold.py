from __future__ import annotations

import math
from typing import Tuple

import numpy as np

# Saturation reference; the top 0.5% of non-zero cells are clipped
SATURATION_PERCENTILE = 0.995


def saturation_density(grid: np.ndarray, percentile: float = SATURATION_PERCENTILE) -> float:
    """Value at index floor((n - 1) * percentile) of the sorted positive cells, or 0.0."""
    positive = np.sort(grid[grid > 0], kind="mergesort")
    if positive.size == 0:
        return 0.0
    idx = int(math.floor((positive.size - 1) * percentile))
    return float(positive[idx])


def adaptive_threshold(grid: np.ndarray, threshold_ratio: float) -> Tuple[float, float]:
    """Return (cutoff, max_density) for a smoothed grid.

    Cells below `cutoff` are rendered as background.
    """
    max_density = saturation_density(grid)
    cutoff = max_density * threshold_ratio
    return cutoff, max_density
