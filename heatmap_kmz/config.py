from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Dict, Optional

import yaml

from .colors import DEFAULT_COLORS, FALLBACK_COLOR


@dataclass(frozen=True)
class ProcessingConfig:
    grid_resolution: int = 2000
    blur_radius: float = 30.0      # sigma, in grid cells
    threshold_ratio: float = 0.3   # fraction of the saturation density

    def __post_init__(self) -> None:
        if isinstance(self.grid_resolution, bool) or not isinstance(self.grid_resolution, int) \
                or self.grid_resolution < 1:
            raise ValueError(f"grid_resolution must be a positive integer, got {self.grid_resolution!r}")
        if not self.blur_radius > 0:
            raise ValueError(f"blur_radius must be positive, got {self.blur_radius!r}")
        if not 0.0 <= self.threshold_ratio <= 1.0:
            raise ValueError(f"threshold_ratio must be within [0, 1], got {self.threshold_ratio!r}")


@dataclass(frozen=True)
class CsvColumns:
    latitude: str = "gps_latitude"
    longitude: str = "gps_longitude"
    category: str = "carrier"


@dataclass
class Config:
    processing: ProcessingConfig = field(default_factory=ProcessingConfig)
    # Category label -> '#RRGGBB'
    colors: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_COLORS))
    default_color: str = FALLBACK_COLOR
    columns: CsvColumns = field(default_factory=CsvColumns)

    # Output
    folder_name: str = "Operators Density Heatmaps"
    output_name: str = "Density_Heatmaps.kmz"

    # App behavior
    max_workers: int = 1
    skip_failed_layers: bool = False


def load_config_from_yaml(path: str | None) -> Config:
    """Load a Config from YAML. If path is None, return defaults."""
    if path is None:
        return Config()

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    proc = data.get("processing", {}) or {}
    defaults = ProcessingConfig()
    processing = ProcessingConfig(
        grid_resolution=int(proc.get("grid_resolution", defaults.grid_resolution)),
        blur_radius=float(proc.get("blur_radius", defaults.blur_radius)),
        threshold_ratio=float(proc.get("threshold_ratio", defaults.threshold_ratio)),
    )

    # Overrides extend the built-in table; labels are matched upper-cased
    colors = dict(DEFAULT_COLORS)
    for label, code in (data.get("colors", {}) or {}).items():
        colors[str(label).strip().upper()] = str(code)

    column_map = dict(data.get("columns", {}) or {})
    unknown = sorted(str(k) for k in set(column_map) - {f.name for f in fields(CsvColumns)})
    if unknown:
        raise ValueError(f"Unknown key(s) under 'columns' in {path}: {', '.join(unknown)}")

    cfg = Config(
        processing=processing,
        colors=colors,
        default_color=str(data.get("default_color", FALLBACK_COLOR)),
        columns=CsvColumns(**{k: str(v) for k, v in column_map.items()}),
        folder_name=str(data.get("folder_name", "Operators Density Heatmaps")),
        output_name=str(data.get("output_name", "Density_Heatmaps.kmz")),
        max_workers=max(1, int(data.get("max_workers", 1))),
        skip_failed_layers=bool(data.get("skip_failed_layers", False)),
    )
    return cfg


def find_config_file(search_dirs: Optional[list[Path]] = None) -> Optional[Path]:
    if search_dirs is None:
        search_dirs = [Path.cwd(), Path(__file__).resolve().parent.parent]
    for d in search_dirs:
        for name in ("config.yaml", "config.yml"):
            p = d / name
            if p.is_file():
                return p
    return None


def load_default_config(search_dirs: Optional[list[Path]] = None) -> Config:
    """Load `config.yaml` or `config.yml` from CWD or project root.

    Falls back to defaults when no file is found.
    """
    p = find_config_file(search_dirs)
    if p is None:
        return Config()
    return load_config_from_yaml(str(p))
