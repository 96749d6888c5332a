from __future__ import annotations

import re
from typing import Dict, Mapping, Optional, Tuple

RGB = Tuple[int, int, int]

DEFAULT_COLORS: Dict[str, str] = {
    "ENTEL": "#0057A4",
    "MOVISTAR": "#00A65A",
    "CLARO": "#D40000",
    "BITEL": "#FFD500",
}
FALLBACK_COLOR = "#808080"
BLACK: RGB = (0, 0, 0)
WHITE: RGB = (255, 255, 255)

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")


def parse_hex_color(code: object) -> Optional[RGB]:
    """'#RRGGBB' or 'RRGGBB' -> (r, g, b); None when the code is malformed."""
    if not isinstance(code, str):
        return None
    m = _HEX_RE.match(code.strip())
    if not m:
        return None
    return (int(m.group(1), 16), int(m.group(2), 16), int(m.group(3), 16))


def hex_to_rgb(code: object) -> RGB:
    rgb = parse_hex_color(code)
    return rgb if rgb is not None else BLACK


def color_for_category(
    category: str,
    colors: Optional[Mapping[str, str]] = None,
    default: str = FALLBACK_COLOR,
) -> str:
    table = DEFAULT_COLORS if colors is None else colors
    return table.get(category, default)


def mix_with_white(base: RGB, factor: float) -> Tuple[float, float, float]:
    """Lerp each channel toward 255 by `factor` (0 = base, 1 = white)."""
    r, g, b = base
    return (
        r + (WHITE[0] - r) * factor,
        g + (WHITE[1] - g) * factor,
        b + (WHITE[2] - b) * factor,
    )
