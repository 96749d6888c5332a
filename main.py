# Entry point: CSV gps samples -> one density heatmap overlay per category, packed as a KMZ.
from __future__ import annotations

import sys
from pathlib import Path

from heatmap_kmz.aggregator import combine
from heatmap_kmz.config import load_default_config
from heatmap_kmz.csv_parser import ParsedCSV, parse_points_csv
from heatmap_kmz.errors import HeatmapError
from heatmap_kmz.file_discovery import find_csv_files
from heatmap_kmz.heatmap import build_heatmap_kmz
from heatmap_kmz.io_utils import derive_output_path, resolve_input_paths
from heatmap_kmz.kmz_writer import write_kmz
from heatmap_kmz.logging_utils import get_logger

logger = get_logger(__name__)


def run(argv: list[str]) -> Path | None:
    """Complete processing pipeline. Returns the written KMZ path, or None."""
    inputs = resolve_input_paths(argv)
    if not inputs:
        logger.warning("No input files or folders provided. Exiting.")
        return None

    try:
        cfg = load_default_config()
    except (OSError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        return None

    logger.info("Inputs:")
    for p in inputs:
        logger.info(f"  - {p}")

    csv_files = find_csv_files(inputs)
    if not csv_files:
        logger.warning("No CSV files found in the provided inputs.")
        return None
    logger.info(f"Discovered {len(csv_files)} CSV file(s).")

    parsed_csvs: list[ParsedCSV] = []
    for csv_path in csv_files:
        try:
            logger.info(f"Parsing: {csv_path}")
            parsed = parse_points_csv(csv_path, cfg.columns)
            logger.info(f"  {len(parsed.points)} valid point(s), categories: {', '.join(sorted(parsed.categories))}")
            parsed_csvs.append(parsed)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to parse {csv_path}: {e}")

    points, summaries = combine(parsed_csvs)
    if not points:
        logger.error("No CSVs were successfully parsed.")
        return None
    logger.info(f"Total points loaded: {len(points)} from {len(summaries)} file(s)")
    for s in summaries:
        logger.info(f"  - {s.csv_name}: {s.point_count} point(s)")

    try:
        kmz_bytes = build_heatmap_kmz(
            points,
            cfg.processing,
            colors=cfg.colors,
            default_color=cfg.default_color,
            folder_name=cfg.folder_name,
            max_workers=cfg.max_workers,
            skip_failed=cfg.skip_failed_layers,
        )
    except HeatmapError as e:
        logger.error(f"Heatmap generation failed: {e}")
        return None

    out_path = derive_output_path(inputs, preferred_name=cfg.output_name)
    logger.info(f"Writing KMZ to: {out_path}")
    write_kmz(out_path, kmz_bytes)

    logger.info("Processing complete!")
    return out_path


def main() -> int:
    return 0 if run(sys.argv[1:]) is not None else 1


if __name__ == "__main__":
    sys.exit(main())
