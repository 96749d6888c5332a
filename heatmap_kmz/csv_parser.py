from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from .config import CsvColumns
from .errors import EmptyInputError
from .logging_utils import get_logger
from .models import Point

logger = get_logger(__name__)


@dataclass
class ParsedCSV:
    points: List[Point]
    source: Path
    dropped_rows: int = 0
    categories: Dict[str, int] = field(default_factory=dict)


def _norm(s: object) -> str:
    s = str(s).replace("\ufeff", "").strip().lower()
    return "".join(ch for ch in s if ch.isalnum())


def _read_frame(csv_path: Path) -> pd.DataFrame:
    # utf-8-sig with the C engine; fall back to python engine, then latin-1
    try:
        return pd.read_csv(csv_path, encoding="utf-8-sig", dtype=str, skip_blank_lines=True)
    except UnicodeDecodeError:
        return pd.read_csv(
            csv_path, encoding="latin-1", dtype=str, engine="python", on_bad_lines="skip"
        )
    except pd.errors.ParserError:
        return pd.read_csv(
            csv_path, encoding="utf-8-sig", dtype=str, engine="python", on_bad_lines="skip"
        )


def _pick(columns: List[str], wanted: str) -> Optional[str]:
    available = {_norm(c): c for c in columns}
    return available.get(_norm(wanted))


def normalize_category(value: object) -> str:
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return ""
    return str(value).strip().upper()


def points_from_frame(df: pd.DataFrame, columns: CsvColumns | None = None) -> tuple[List[Point], int]:
    """Validate a raw frame into Points; returns (points, dropped_row_count)."""
    columns = columns or CsvColumns()
    col_lat = _pick(list(df.columns), columns.latitude)
    col_lon = _pick(list(df.columns), columns.longitude)
    col_cat = _pick(list(df.columns), columns.category)
    missing = [
        name for name, col in (
            (columns.latitude, col_lat), (columns.longitude, col_lon), (columns.category, col_cat)
        ) if col is None
    ]
    if missing:
        raise ValueError(f"Missing required column(s): {', '.join(missing)}")
    if df.empty:
        return [], 0

    lat = pd.to_numeric(df[col_lat], errors="coerce")
    lon = pd.to_numeric(df[col_lon], errors="coerce")
    cat = df[col_cat].map(normalize_category)

    # NaN compares False, so missing coordinates drop out here too
    mask = (
        np.isfinite(lat) & np.isfinite(lon)
        & (lat.abs() <= 90) & (lon.abs() <= 180)
        & (cat.str.len() > 0)
    )
    points = [
        Point(latitude=float(la), longitude=float(lo), category=c)
        for la, lo, c in zip(lat[mask], lon[mask], cat[mask])
    ]
    return points, int(len(df) - mask.sum())


def parse_points_csv(csv_path: Path, columns: CsvColumns | None = None) -> ParsedCSV:
    """Read one CSV of gps samples into validated Points.

    Raises ValueError when the required columns are absent and
    EmptyInputError when no row survives validation.
    """
    csv_path = Path(csv_path)
    df = _read_frame(csv_path)
    points, dropped = points_from_frame(df, columns)
    if dropped:
        logger.warning(f"  {csv_path.name}: dropped {dropped} invalid row(s)")
    if not points:
        raise EmptyInputError(f"No valid rows found in {csv_path}")

    counts: Dict[str, int] = {}
    for p in points:
        counts[p.category] = counts.get(p.category, 0) + 1
    return ParsedCSV(points=points, source=csv_path, dropped_rows=dropped, categories=counts)
