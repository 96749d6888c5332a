"""
Per-category density heatmap pipeline.

For each category: histogram -> separable Gaussian blur -> adaptive
threshold -> RGBA pixels. All categories share one bounding box computed
over the whole batch. Categories are independent, so the batch may run on a
thread pool; the cancellation check runs between categories and a cancelled
batch returns nothing.
"""
from __future__ import annotations

from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from .bounds import compute_bounds
from .colors import BLACK, FALLBACK_COLOR, RGB, color_for_category, parse_hex_color
from .config import ProcessingConfig
from .density_grid import accumulate_density
from .errors import EmptyInputError, ProcessingCancelled, RasterEncodingError
from .kmz_writer import build_kmz
from .logging_utils import get_logger
from .models import EncodedLayer, GeoBounds, Point, RasterLayer
from .pixel_encoder import encode_pixels, encode_png
from .smoothing import gaussian_smooth
from .threshold import adaptive_threshold

logger = get_logger(__name__)

CancelCheck = Callable[[], bool]


def group_by_category(points: Sequence[Point]) -> Dict[str, List[Point]]:
    """Points per category, keys in sorted label order."""
    groups: Dict[str, List[Point]] = {}
    for p in points:
        groups.setdefault(p.category, []).append(p)
    return {k: groups[k] for k in sorted(groups)}


def resolve_color(category: str, colors: Optional[Mapping[str, str]], default: str = FALLBACK_COLOR) -> RGB:
    code = color_for_category(category, colors, default)
    rgb = parse_hex_color(code)
    if rgb is None:
        logger.warning(f"Malformed color '{code}' for layer {category}; using black.")
        return BLACK
    return rgb


def render_layer(
    label: str,
    points: Sequence[Point],
    bounds: GeoBounds,
    base_rgb: RGB,
    config: ProcessingConfig,
) -> RasterLayer:
    """Run the full single-category pipeline and return its raster."""
    res = config.grid_resolution
    grid = accumulate_density(points, bounds, res)
    heat = gaussian_smooth(grid, config.blur_radius)
    cutoff, max_density = adaptive_threshold(heat, config.threshold_ratio)
    pixels = encode_pixels(heat, cutoff, max_density, base_rgb)
    logger.debug(
        f"Layer {label}: {int(grid.sum())} binned points, cutoff={cutoff:.6g}, max={max_density:.6g}"
    )
    return RasterLayer(label=label, size=res, pixels=pixels, bounds=bounds, point_count=len(points))


def _check(should_cancel: Optional[CancelCheck]) -> None:
    if should_cancel is not None and should_cancel():
        raise ProcessingCancelled("Heatmap generation cancelled")


def generate_layers(
    points: Sequence[Point],
    config: ProcessingConfig,
    colors: Optional[Mapping[str, str]] = None,
    default_color: str = FALLBACK_COLOR,
    should_cancel: Optional[CancelCheck] = None,
    max_workers: int = 1,
) -> List[RasterLayer]:
    """Render one raster per category over the shared bounding box.

    Raises EmptyInputError before any raster work when `points` is empty and
    ProcessingCancelled when `should_cancel()` turns true between categories.
    Layers are returned sorted by label.
    """
    if not points:
        raise EmptyInputError("No points to process")

    bounds = compute_bounds(points)
    if bounds.is_degenerate:
        logger.warning("Bounding box has zero area; output will be degenerate.")
    groups = group_by_category(points)
    logger.info(f"Generating {len(groups)} layer(s) at {config.grid_resolution}x{config.grid_resolution}")

    jobs = [(label, pts, resolve_color(label, colors, default_color)) for label, pts in groups.items()]

    if max_workers <= 1:
        layers: List[RasterLayer] = []
        for label, pts, rgb in jobs:
            _check(should_cancel)
            logger.info(f"Processing layer: {label} ({len(pts)} points)...")
            layers.append(render_layer(label, pts, bounds, rgb, config))
        _check(should_cancel)
        return layers

    results: Dict[str, RasterLayer] = {}
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        pending: Dict[Future, str] = {}
        try:
            for label, pts, rgb in jobs:
                _check(should_cancel)
                logger.info(f"Processing layer: {label} ({len(pts)} points)...")
                pending[pool.submit(render_layer, label, pts, bounds, rgb, config)] = label
            while pending:
                done, _ = wait(pending, return_when=FIRST_COMPLETED)
                for fut in done:
                    label = pending.pop(fut)
                    results[label] = fut.result()
                _check(should_cancel)
        except Exception:
            for fut in pending:
                fut.cancel()
            raise
    return [results[label] for label in sorted(results)]


def encode_layers(layers: Sequence[RasterLayer], skip_failed: bool = False) -> List[EncodedLayer]:
    """PNG-encode every layer; failures propagate unless `skip_failed`."""
    encoded: List[EncodedLayer] = []
    for layer in layers:
        try:
            encoded.append(encode_png(layer))
        except RasterEncodingError as e:
            if not skip_failed:
                raise
            logger.warning(f"Skipping layer {layer.label}: {e}")
    return encoded


def build_heatmap_kmz(
    points: Sequence[Point],
    config: ProcessingConfig,
    colors: Optional[Mapping[str, str]] = None,
    default_color: str = FALLBACK_COLOR,
    folder_name: Optional[str] = None,
    should_cancel: Optional[CancelCheck] = None,
    max_workers: int = 1,
    skip_failed: bool = False,
) -> bytes:
    """Points in, KMZ bytes out."""
    layers = generate_layers(
        points,
        config,
        colors=colors,
        default_color=default_color,
        should_cancel=should_cancel,
        max_workers=max_workers,
    )
    encoded = encode_layers(layers, skip_failed=skip_failed)
    if folder_name is None:
        return build_kmz(encoded)
    return build_kmz(encoded, folder_name=folder_name)
