"""
Font resolution for text layers.

Families are looked up as font files in the configured directories. When a
family is not installed yet, a generic system face is used instead so a
render never fails because of a missing font; a later render picks up the
real face once it is available.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from PIL import ImageFont

from .config import get_settings

logger = logging.getLogger(__name__)

FALLBACK_STACK = 'system-ui, -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif'

# Families offered to clients; must match what the font directories provide
GOOGLE_FONTS = [
    "Poppins",
    "Montserrat",
    "Inter",
    "Roboto",
    "Lato",
    "Playfair Display",
    "Oswald",
    "Bebas Neue",
    "Nunito",
    "DM Sans",
]

# Generic faces tried when a family is unavailable: (regular, bold)
SYSTEM_FONTS: List[Tuple[str, str]] = [
    ("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
     "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"),  # Linux
    ("/System/Library/Fonts/Helvetica.ttc",
     "/System/Library/Fonts/Helvetica.ttc"),  # macOS
    ("C:\\Windows\\Fonts\\arial.ttf",
     "C:\\Windows\\Fonts\\arialbd.ttf"),  # Windows
]

WEIGHT_NAMES = {
    100: "Thin",
    200: "ExtraLight",
    300: "Light",
    400: "Regular",
    500: "Medium",
    600: "SemiBold",
    700: "Bold",
    800: "ExtraBold",
    900: "Black",
}


@dataclass(frozen=True)
class FontSpec:
    """Font request of a text layer."""
    family: str
    size: float
    bold: bool = False
    italic: bool = False
    weight: Optional[int] = None

    @property
    def effective_weight(self) -> int:
        if self.weight:
            return self.weight
        return 700 if self.bold else 400

    def css(self) -> str:
        """CSS-style font shorthand, e.g. ``italic bold 48px Poppins, system-ui, ...``."""
        parts = []
        if self.italic:
            parts.append("italic")
        if self.weight:
            parts.append(str(self.weight))
        elif self.bold:
            parts.append("bold")
        parts.append(f"{self.size:g}px {self.family}, {FALLBACK_STACK}")
        return " ".join(parts)

    def style_names(self) -> List[str]:
        """Candidate file style suffixes, most specific first."""
        weight_name = WEIGHT_NAMES.get(self.effective_weight, "Regular")
        names = []
        if self.italic:
            names.append("Italic" if weight_name == "Regular" else f"{weight_name}Italic")
        names.append(weight_name)
        if weight_name != "Regular":
            names.append("Regular")
        names.append("")
        return names


class FontResolver:
    """
    Maps FontSpec values to Pillow fonts.

    Lookup order: ``<dir>/<Family>-<Style>.ttf|otf`` in each font directory,
    then the generic system stack, then Pillow's built-in face.
    """

    EXTENSIONS = (".ttf", ".otf")

    def __init__(self, font_dirs: Optional[Iterable[str]] = None):
        if font_dirs is None:
            font_dirs = get_settings().font_dirs
        self.font_dirs = [Path(d) for d in font_dirs]
        self._load = lru_cache(maxsize=128)(self._load_uncached)

    def find_font_file(self, spec: FontSpec) -> Optional[Path]:
        """Locate a file for the family, or None if it is not installed."""
        stem = spec.family.replace(" ", "")
        for directory in self.font_dirs:
            if not directory.is_dir():
                continue
            for style in spec.style_names():
                name = f"{stem}-{style}" if style else stem
                for ext in self.EXTENSIONS:
                    candidate = directory / f"{name}{ext}"
                    if candidate.is_file():
                        return candidate
        return None

    def resolve(self, spec: FontSpec) -> ImageFont.FreeTypeFont:
        return self._load(spec)

    def _load_uncached(self, spec: FontSpec) -> ImageFont.FreeTypeFont:
        path = self.find_font_file(spec)
        if path:
            try:
                return ImageFont.truetype(str(path), spec.size)
            except OSError as e:
                logger.warning(f"Failed to load font {path}: {e}")

        logger.debug(f"Font family '{spec.family}' unavailable, using generic fallback")
        for regular, bold in SYSTEM_FONTS:
            fp = bold if spec.effective_weight >= 600 else regular
            try:
                return ImageFont.truetype(fp, spec.size)
            except OSError:
                continue

        return ImageFont.load_default(spec.size)


@lru_cache
def default_resolver() -> FontResolver:
    return FontResolver()
