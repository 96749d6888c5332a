from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

CSV_EXTS = {".csv"}


def _is_csv(p: Path) -> bool:
    # Ignore Mac resource fork files like ._samples.csv
    return p.is_file() and p.suffix.lower() in CSV_EXTS and not p.name.startswith("._")


def find_csv_files(roots: Iterable[Path]) -> List[Path]:
    """CSV files given directly, plus those found recursively under directories."""
    out: set[Path] = set()
    for root in roots:
        if root.is_dir():
            out.update(p.resolve() for p in root.rglob("*") if _is_csv(p))
        elif _is_csv(root):
            out.add(root.resolve())
    return sorted(out)
