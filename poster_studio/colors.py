"""
Color parsing for layer styles.

Accepts everything Pillow's ImageColor understands (hex, named colors,
``rgb()``, ``hsl()``) plus CSS ``rgba()`` with a 0-1 alpha, e.g.
``rgba(255,255,255,0.7)``.
"""

import re
from typing import Tuple

from PIL import ImageColor

RGBA = Tuple[int, int, int, int]

CSS_RGBA = re.compile(
    r'^rgba\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d*\.?\d+)\s*\)$',
    re.IGNORECASE,
)


def parse_color(color: str) -> RGBA:
    """
    Parse a color string to an RGBA tuple.

    Raises:
        ValueError: if the string is not a color
    """
    if not isinstance(color, str):
        raise ValueError(f"Color must be a string, got {type(color).__name__}")

    match = CSS_RGBA.match(color.strip())
    if match:
        r, g, b = (int(match.group(i)) for i in (1, 2, 3))
        alpha = float(match.group(4))
        if max(r, g, b) > 255 or alpha > 1:
            raise ValueError(f"Color out of range: {color!r}")
        return (r, g, b, round(alpha * 255))

    return ImageColor.getcolor(color.strip(), "RGBA")

