from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    """A validated sample. `category` is already normalized and non-empty."""
    latitude: float
    longitude: float
    category: str


@dataclass(frozen=True)
class GeoBounds:
    north: float
    south: float
    east: float
    west: float

    @property
    def width(self) -> float:
        return self.east - self.west

    @property
    def height(self) -> float:
        return self.north - self.south

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass
class RasterLayer:
    """One category's RGBA buffer (row 0 = north), size x size x 4 bytes."""
    label: str
    size: int
    pixels: bytes
    bounds: GeoBounds
    point_count: int = 0


@dataclass(frozen=True)
class EncodedLayer:
    """A layer after PNG encoding, ready to be packed into the KMZ."""
    label: str
    png: bytes
    bounds: GeoBounds
