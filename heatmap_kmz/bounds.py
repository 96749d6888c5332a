from __future__ import annotations

from typing import Sequence

import numpy as np

from .errors import EmptyInputError
from .models import GeoBounds, Point

# Fraction of each span added on both sides of the box
PADDING_RATIO = 0.02


def compute_bounds(points: Sequence[Point], padding: float = PADDING_RATIO) -> GeoBounds:
    """Padded bounding box of all points (longitude -> x, latitude -> y).

    A single distinct location yields a zero-area box; downstream stages
    accept that without dividing by zero.
    """
    if not points:
        raise EmptyInputError("Cannot compute bounds of an empty point set")

    lons = np.fromiter((p.longitude for p in points), dtype=np.float64, count=len(points))
    lats = np.fromiter((p.latitude for p in points), dtype=np.float64, count=len(points))

    xmin, xmax = float(lons.min()), float(lons.max())
    ymin, ymax = float(lats.min()), float(lats.max())
    dx = xmax - xmin
    dy = ymax - ymin

    return GeoBounds(
        north=ymax + dy * padding,
        south=ymin - dy * padding,
        east=xmax + dx * padding,
        west=xmin - dx * padding,
    )
