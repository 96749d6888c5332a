"""
Shared fixtures for the heatmap KMZ tests.
"""
import numpy as np
import pytest

from heatmap_kmz.config import ProcessingConfig
from heatmap_kmz.models import Point


@pytest.fixture
def small_config():
    """Small grid so the full pipeline runs quickly."""
    return ProcessingConfig(grid_resolution=32, blur_radius=1.5, threshold_ratio=0.3)


@pytest.fixture
def random_points():
    """Factory: n uniformly scattered points of one category inside a box."""
    def _make(category, n=100, south=-12.2, north=-12.0, west=-77.1, east=-76.9, seed=0):
        rng = np.random.default_rng(seed)
        lats = rng.uniform(south, north, n)
        lons = rng.uniform(west, east, n)
        return [Point(latitude=float(la), longitude=float(lo), category=category) for la, lo in zip(lats, lons)]
    return _make
