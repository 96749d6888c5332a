from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from .csv_parser import ParsedCSV
from .models import Point


@dataclass
class SourceSummary:
    csv_name: str
    point_count: int


def combine(items: Iterable[ParsedCSV]) -> Tuple[List[Point], List[SourceSummary]]:
    """Concatenate points from several files, keeping per-file summaries in order."""
    points: List[Point] = []
    summaries: List[SourceSummary] = []
    for parsed in items:
        n = len(parsed.points)
        if n == 0:
            continue
        summaries.append(SourceSummary(
            csv_name=parsed.source.name,
            point_count=n,
        ))
        points.extend(parsed.points)
    return points, summaries
