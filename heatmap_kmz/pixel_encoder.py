from __future__ import annotations

import io

import numpy as np
from PIL import Image

from .colors import RGB, mix_with_white
from .errors import RasterEncodingError
from .models import EncodedLayer, RasterLayer

# Alpha ramps from ~30% at the cutoff to fully opaque at the saturation density
MIN_ALPHA = 77
MAX_ALPHA = 255
# Share of white blended in at the saturation density
MAX_GLOW = 0.6


def normalize_density(grid: np.ndarray, cutoff: float, max_density: float) -> np.ndarray:
    """Map densities onto [0, 1] between cutoff and max_density.

    A zero-width range yields all zeros.
    """
    span = max_density - cutoff
    if not span > 0:
        return np.zeros(grid.shape, dtype=np.float64)
    return np.clip((grid - cutoff) / span, 0.0, 1.0)


def encode_pixels(grid: np.ndarray, cutoff: float, max_density: float, base_rgb: RGB) -> bytes:
    """Render a smoothed grid into a row-major RGBA buffer.

    The grid has row 0 at the southern edge; the output has row 0 at the
    northern edge, as image coordinates expect. Cells below the cutoff are fully
    transparent, as is the whole buffer when the grid holds no density at all.
    """
    height, width = grid.shape
    rgba = np.zeros((height, width, 4), dtype=np.uint8)

    if max_density > 0:
        visible = grid >= cutoff
        norm = normalize_density(grid, cutoff, max_density)
        glow = norm * MAX_GLOW
        r, g, b = mix_with_white(base_rgb, glow)
        alpha = MIN_ALPHA + (MAX_ALPHA - MIN_ALPHA) * norm

        for channel, values in enumerate((r, g, b, alpha)):
            clipped = np.clip(np.floor(values), 0, 255).astype(np.uint8)
            rgba[..., channel] = np.where(visible, clipped, 0)

    return np.ascontiguousarray(rgba[::-1]).tobytes()


def encode_png(layer: RasterLayer) -> EncodedLayer:
    """PNG-encode a raster layer with Pillow."""
    expected = layer.size * layer.size * 4
    if len(layer.pixels) != expected:
        raise RasterEncodingError(
            layer.label, f"pixel buffer has {len(layer.pixels)} bytes, expected {expected}"
        )
    try:
        img = Image.frombytes("RGBA", (layer.size, layer.size), layer.pixels)
        buf = io.BytesIO()
        img.save(buf, format="PNG")
    except (OSError, ValueError) as e:
        raise RasterEncodingError(layer.label, str(e)) from e

    png_bytes = buf.getvalue()
    if not png_bytes:
        raise RasterEncodingError(layer.label, "codec returned no data")
    return EncodedLayer(label=layer.label, png=png_bytes, bounds=layer.bounds)
