"""
Canvas presets and poster templates.

Templates are plain Scene values built from a few parameters, so every
poster variant goes through the same compositor:
- Campaign poster (800x1200): background, user photo, title text
- Word of the Day (1080x1350): glyph pattern, word, meaning, example
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from PIL import Image

from .models import (
    BackgroundLayer,
    GlyphDecoration,
    Gradient,
    PhotoLayer,
    PhotoTransform,
    Region,
    Scene,
    TextLayer,
)


class CanvasPreset(Enum):
    """Common poster canvas sizes."""

    CLASSIC = "classic"                 # 2:3 campaign poster
    WORD_OF_THE_DAY = "word_of_the_day" # 4:5
    IG_STORY = "ig_story"               # 9:16 vertical
    IG_FEED_SQUARE = "ig_square"        # 1:1
    IG_FEED_PORTRAIT = "ig_portrait"    # 4:5


@dataclass
class DimensionSpec:
    """Specification for canvas dimensions."""
    width: int
    height: int
    aspect_ratio: str
    description: str

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)


PRESET_DIMENSIONS = {
    CanvasPreset.CLASSIC: DimensionSpec(
        width=800, height=1200,
        aspect_ratio="2:3",
        description="Campaign poster"
    ),
    CanvasPreset.WORD_OF_THE_DAY: DimensionSpec(
        width=1080, height=1350,
        aspect_ratio="4:5",
        description="Word of the Day poster"
    ),
    CanvasPreset.IG_STORY: DimensionSpec(
        width=1080, height=1920,
        aspect_ratio="9:16",
        description="Instagram Story / Reels"
    ),
    CanvasPreset.IG_FEED_SQUARE: DimensionSpec(
        width=1080, height=1080,
        aspect_ratio="1:1",
        description="Instagram Feed (Square)"
    ),
    CanvasPreset.IG_FEED_PORTRAIT: DimensionSpec(
        width=1080, height=1350,
        aspect_ratio="4:5",
        description="Instagram Feed (Portrait)"
    ),
}


def parse_dimension_string(dim_str: str) -> Optional[Tuple[int, int]]:
    """
    Parse dimension string like "1080x1920" or "2160 x 3840".

    Returns:
        Tuple of (width, height) or None if parsing fails
    """
    match = re.match(r'^(\d+)\s*[x×]\s*(\d+)$', dim_str.strip(), re.IGNORECASE)
    if match:
        width, height = int(match.group(1)), int(match.group(2))
        if width > 0 and height > 0:
            return (width, height)
    return None


def get_dimensions(
    preset: Optional[str] = None,
    width: Optional[int] = None,
    height: Optional[int] = None
) -> Tuple[int, int]:
    """
    Get canvas dimensions from a preset name, a "WxH" string or custom values.

    Examples:
        >>> get_dimensions(preset="classic")
        (800, 1200)
        >>> get_dimensions(width=2160, height=3840)
        (2160, 3840)
    """
    if preset:
        preset_lower = preset.lower().replace("-", "_").replace(" ", "_")

        for p, spec in PRESET_DIMENSIONS.items():
            if p.value == preset_lower:
                return spec.size

        parsed = parse_dimension_string(preset_lower)
        if parsed:
            return parsed

    if width and height:
        return (width, height)

    return PRESET_DIMENSIONS[CanvasPreset.CLASSIC].size


def get_preset_options() -> list:
    """Available presets for client selection."""
    return [
        {
            "id": preset.value,
            "name": dim.description,
            "dimensions": f"{dim.width}x{dim.height}",
            "aspect_ratio": dim.aspect_ratio
        }
        for preset, dim in PRESET_DIMENSIONS.items()
    ]


# ==================== TEMPLATES ====================

WORD_COLORS = {
    "blue": "#1550B3",
    "blue_light": "#1F6BD4",
    "orange": "#F26A21",
    "white": "#FFFFFF",
    "dark": "#333333",
}

# Playful alphabet pattern behind the Word of the Day card
WORD_GLYPHS = (
    GlyphDecoration("s", 80, 160, 160, WORD_COLORS["white"], -20),
    GlyphDecoration("c", 160, 420, 250, WORD_COLORS["orange"], -10),
    GlyphDecoration("e", 80, 900, 140, WORD_COLORS["orange"], 15),
    GlyphDecoration("p", 990, 480, 180, WORD_COLORS["white"], 20),
    GlyphDecoration("u", 900, 160, 170, WORD_COLORS["orange"], 25),
    GlyphDecoration("s", 920, 880, 140, WORD_COLORS["blue_light"], -30),
    GlyphDecoration("e", 140, 1380, 160, WORD_COLORS["white"], -10),
    GlyphDecoration("p", 980, 1420, 180, WORD_COLORS["orange"], 12),
    GlyphDecoration("s", 540, 1820, 160, WORD_COLORS["white"], 0),
)


def campaign_poster_scene(
    text: str = "Your Poster Title\nYour Tagline Here",
    background: Optional[Image.Image] = None,
    photo: Optional[Image.Image] = None,
    region: Optional[Region] = None,
    transform: Optional[PhotoTransform] = None,
    text_layer: Optional[TextLayer] = None,
    size: Tuple[int, int] = (800, 1200),
) -> Scene:
    """Campaign poster: uploaded background, framed user photo, title block."""
    width, height = size
    return Scene(
        width=width,
        height=height,
        background=BackgroundLayer(
            image=background,
            gradient=Gradient(top="#0f172a", bottom="#1f2937"),
        ),
        photo=PhotoLayer(
            region=region or Region(x=200, y=300, width=400, height=400),
            transform=transform or PhotoTransform(),
            image=photo,
        ),
        texts=(text_layer or TextLayer(
            content=text,
            font_family="Poppins",
            font_size=48,
            color="#ffffff",
            bold=True,
            align="center",
            x=width / 2,
            y=150,
            line_height=1.2,
        ),),
    )


def word_of_the_day_scene(
    word: str = "Curious",
    meaning: str = "Wanting to know or learn something.",
    example: str = "The curious cat looked inside the box.",
    background: Optional[Image.Image] = None,
) -> Scene:
    """Word of the Day: the word, its meaning and an example sentence."""
    width, height = PRESET_DIMENSIONS[CanvasPreset.WORD_OF_THE_DAY].size
    center_x = width / 2
    card_y = 210

    def label(content: str, y: float, size: float, weight: int, color: str = WORD_COLORS["dark"], **kwargs) -> TextLayer:
        return TextLayer(
            content=content,
            font_family="Inter",
            font_size=size,
            weight=weight,
            color=color,
            align="center",
            x=center_x,
            y=y,
            baseline="middle",
            **kwargs,
        )

    return Scene(
        width=width,
        height=height,
        background=BackgroundLayer(
            image=background,
            fill_color=WORD_COLORS["blue"],
            decorations=WORD_GLYPHS,
        ),
        texts=(
            label(word, card_y + 450, 120, 800, WORD_COLORS["orange"]),
            label("Meaning:", card_y + 530, 40, 500),
            label(meaning, card_y + 580, 40, 700, max_width=600, line_spacing=40),
            label("Example:", card_y + 700, 40, 500),
            label(example, card_y + 750, 38, 600, max_width=700, line_spacing=25),
        ),
    )


TEMPLATES: Dict[str, Callable[..., Scene]] = {
    "campaign": campaign_poster_scene,
    "word_of_the_day": word_of_the_day_scene,
}


def get_template_options() -> list:
    return [
        {"id": name, "description": (builder.__doc__ or "").strip()}
        for name, builder in TEMPLATES.items()
    ]
