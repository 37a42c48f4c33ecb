"""
Scene data model.

A poster is described by a Scene value: a background layer, an optional
clipped photo layer and any number of text layers. Values are rebuilt on
every edit; clamping happens in ``__post_init__`` so degenerate geometry can
never reach the renderer, whether a value is constructed directly or
produced with ``dataclasses.replace``. Colors that cannot be parsed and
non-finite numbers raise ValueError at construction.
"""

import math
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, Union

from PIL import Image

from .colors import parse_color

MIN_REGION_SIZE = 10.0
MIN_PHOTO_SCALE = 0.05
MIN_FONT_SIZE = 10.0
DEFAULT_LINE_HEIGHT = 1.2

ALIGNMENTS = ("left", "center", "right")
BASELINES = ("alphabetic", "middle")


def require_finite(owner, *names: str) -> None:
    """Raise ValueError if any named attribute of ``owner`` is inf or NaN."""
    for name in names:
        value = getattr(owner, name)
        if value is not None and not math.isfinite(value):
            raise ValueError(f"{type(owner).__name__}.{name} must be finite, got {value!r}")


@dataclass
class Region:
    """Rectangle in canvas coordinates where the photo layer is clipped."""
    x: float = 200
    y: float = 300
    width: float = 400
    height: float = 400

    def __post_init__(self) -> None:
        require_finite(self, "x", "y", "width", "height")
        if self.width <= 0:
            self.width = MIN_REGION_SIZE
        if self.height <= 0:
            self.height = MIN_REGION_SIZE

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    @property
    def box(self) -> Tuple[float, float, float, float]:
        """Return (left, top, right, bottom)."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)


@dataclass
class PhotoTransform:
    """Placement of the user photo inside its region."""
    scale: float = 1.0
    offset_x: float = 0.0   # Pixels, in the rotated frame
    offset_y: float = 0.0
    rotation: float = 0.0   # Degrees, clockwise on screen

    def __post_init__(self) -> None:
        require_finite(self, "scale", "offset_x", "offset_y", "rotation")
        if self.scale <= 0:
            self.scale = MIN_PHOTO_SCALE


@dataclass
class Gradient:
    """Two-stop vertical gradient, top to bottom."""
    top: str = "#0f172a"
    bottom: str = "#1f2937"

    def __post_init__(self) -> None:
        parse_color(self.top)
        parse_color(self.bottom)


@dataclass
class GlyphDecoration:
    """A single rotated glyph drawn on a pattern background."""
    char: str
    x: float
    y: float
    size: float
    color: str
    rotation: float = 0.0  # Degrees

    def __post_init__(self) -> None:
        require_finite(self, "x", "y", "size", "rotation")
        parse_color(self.color)


@dataclass
class BackgroundLayer:
    """
    Background of the poster.

    Precedence: ``image`` (cover-fit), then ``fill_color`` with optional
    glyph ``decorations``, then ``gradient``.
    """
    image: Optional[Image.Image] = None
    gradient: Gradient = field(default_factory=Gradient)
    fill_color: Optional[str] = None
    decorations: Tuple[GlyphDecoration, ...] = ()

    def __post_init__(self) -> None:
        if self.fill_color is not None:
            parse_color(self.fill_color)


@dataclass
class PhotoLayer:
    """User photo clipped to ``region``; an empty-state frame when ``image`` is None."""
    region: Region = field(default_factory=Region)
    transform: PhotoTransform = field(default_factory=PhotoTransform)
    image: Optional[Image.Image] = None
    caption: str = "User photo here"


@dataclass
class TextLayer:
    """
    One block of poster text.

    ``x``/``y`` is the shared anchor of every line. Without ``max_width``
    each ``\\n``-separated line is drawn as-is; with it, paragraphs are
    word-wrapped against that pixel budget.
    """
    content: str
    font_family: str = "Poppins"
    font_size: float = 48
    color: str = "#ffffff"
    bold: bool = False
    italic: bool = False
    weight: Optional[int] = None        # CSS numeric weight, wins over bold
    align: str = "center"
    x: float = 400
    y: float = 150
    line_height: Optional[float] = DEFAULT_LINE_HEIGHT  # Multiplier of font_size
    max_width: Optional[float] = None   # Enables word-wrap
    line_spacing: Optional[float] = None  # Absolute px, overrides line_height
    baseline: str = "alphabetic"

    def __post_init__(self) -> None:
        require_finite(self, "font_size", "x", "y", "line_height", "max_width", "line_spacing")
        parse_color(self.color)
        if self.font_size <= 0:
            self.font_size = MIN_FONT_SIZE
        if self.align not in ALIGNMENTS:
            raise ValueError(f"Unknown alignment: {self.align!r}")
        if self.baseline not in BASELINES:
            raise ValueError(f"Unknown baseline: {self.baseline!r}")

    @property
    def paragraphs(self) -> List[str]:
        return self.content.split("\n")

    @property
    def is_blank(self) -> bool:
        return not self.content or self.content.strip() == ""

    @property
    def spacing(self) -> float:
        """Vertical advance between lines in pixels."""
        if self.line_spacing:
            return self.line_spacing
        return self.font_size * (self.line_height or DEFAULT_LINE_HEIGHT)


Layer = Union[BackgroundLayer, PhotoLayer, TextLayer]


@dataclass
class Scene:
    """Complete, declarative description of one poster at a point in time."""
    width: int
    height: int
    background: BackgroundLayer = field(default_factory=BackgroundLayer)
    photo: Optional[PhotoLayer] = None
    texts: Tuple[TextLayer, ...] = ()

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Canvas size must be positive, got {self.width}x{self.height}")
        self.texts = tuple(self.texts)

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def layers(self) -> Iterator[Layer]:
        """Layers in fixed compositing order."""
        yield self.background
        if self.photo is not None:
            yield self.photo
        yield from self.texts
