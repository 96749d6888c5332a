from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List


def resolve_input_paths(argv: List[str]) -> List[Path]:
    """Return the existing files/folders named in argv.
    - If nothing is passed in, prompt for one or more paths separated by commas.
    """
    raw = argv or []
    if not raw:
        try:
            raw_text = input("Enter one or more CSV files or folders (comma-separated): ").strip()
            if raw_text:
                raw = [p.strip().strip('"') for p in raw_text.split(',') if p.strip()]
        except EOFError:
            raw = []

    unique_paths: List[Path] = []
    for p in raw:
        pp = Path(p).expanduser().resolve()
        if pp.exists() and pp not in unique_paths:
            unique_paths.append(pp)
    return unique_paths


def derive_output_path(inputs: Iterable[Path], preferred_name: str) -> Path:
    """Place the output next to the inputs.
    - One folder: inside it. One file: beside it.
    - Several: their common parent folder.
    """
    inputs = list(inputs)
    if not inputs:
        raise ValueError("No input paths provided")

    dirs = [p if p.is_dir() else p.parent for p in inputs]
    if len(set(dirs)) == 1:
        base = dirs[0]
    else:
        try:
            base = Path(os.path.commonpath([str(d) for d in dirs]))
        except ValueError:
            base = dirs[0]
    return (base / preferred_name).resolve()
