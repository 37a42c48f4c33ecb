"""
PosterSession - the edit boundary in front of the compositor.

Holds the current poster parameters and applies edits the way a form does:
numeric input that does not parse is ignored (the previous value stays),
and values that would make geometry degenerate are clamped by the model
constructors. Uploaded images are decoded here; a failed decode keeps the
previous image and records a user-visible message.
"""

import io
import logging
import math
from dataclasses import dataclass, field, fields, replace
from typing import Any, List, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from .compositor import SceneCompositor
from .export import export_png
from .models import PhotoTransform, Region, Scene, TextLayer
from .presets import campaign_poster_scene

logger = logging.getLogger(__name__)

INVALID_TYPE_MESSAGE = "Please upload a valid image file (JPEG or PNG)."
DECODE_FAILED_MESSAGE = "Failed to load the image. Please try another file."

TEXT_NUMERIC_FIELDS = {"font_size", "x", "y", "line_height", "max_width", "line_spacing"}


class ImageDecodeError(ValueError):
    """Raised when uploaded bytes cannot be used as an image."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def decode_image(data: bytes, content_type: Optional[str] = None) -> Image.Image:
    """
    Decode uploaded bytes into a Pillow image.

    Args:
        data: Raw file bytes
        content_type: MIME type reported by the client, if any

    Returns:
        Fully loaded image

    Raises:
        ImageDecodeError: with a message suitable for the user
    """
    if content_type and not content_type.startswith("image/"):
        raise ImageDecodeError(INVALID_TYPE_MESSAGE)

    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        logger.warning(f"Image decode failed: {e}")
        raise ImageDecodeError(DECODE_FAILED_MESSAGE) from e

    if image.width <= 0 or image.height <= 0:
        raise ImageDecodeError(DECODE_FAILED_MESSAGE)
    return image


def parse_number(value: Any) -> Optional[float]:
    """Parse form input as a float; None when it is not a finite number."""
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _field_names(cls) -> set:
    return {f.name for f in fields(cls)}


@dataclass
class PosterSession:
    """Current state of one poster being edited."""
    width: int = 800
    height: int = 1200
    background: Optional[Image.Image] = None
    photo: Optional[Image.Image] = None
    region: Region = field(default_factory=Region)
    transform: PhotoTransform = field(default_factory=PhotoTransform)
    texts: Optional[List[TextLayer]] = None  # Defaults to the campaign title, centered on the canvas
    error_message: str = ""

    def __post_init__(self) -> None:
        if self.texts is None:
            self.texts = list(campaign_poster_scene(size=self.size).texts)
        self.compositor = SceneCompositor()

    # ------------------------------------------------------------------
    # Numeric edits
    # ------------------------------------------------------------------

    def update_region(self, name: str, value: Any) -> Region:
        if name not in _field_names(Region):
            raise KeyError(f"Unknown region field: {name}")
        number = parse_number(value)
        if number is None:
            logger.debug(f"Ignoring non-numeric region.{name}={value!r}")
            return self.region
        self.region = replace(self.region, **{name: number})
        return self.region

    def update_transform(self, name: str, value: Any) -> PhotoTransform:
        if name not in _field_names(PhotoTransform):
            raise KeyError(f"Unknown transform field: {name}")
        number = parse_number(value)
        if number is None:
            logger.debug(f"Ignoring non-numeric transform.{name}={value!r}")
            return self.transform
        self.transform = replace(self.transform, **{name: number})
        return self.transform

    def update_text(self, index: int, name: str, value: Any) -> TextLayer:
        """Edit one field of a text layer; numeric fields are parsed, others assigned."""
        layer = self.texts[index]
        if name not in _field_names(TextLayer):
            raise KeyError(f"Unknown text field: {name}")

        if name in TEXT_NUMERIC_FIELDS:
            number = parse_number(value)
            if number is None:
                logger.debug(f"Ignoring non-numeric text.{name}={value!r}")
                return layer
            value = number

        try:
            updated = replace(layer, **{name: value})
        except ValueError as e:
            logger.debug(f"Ignoring invalid text.{name}={value!r}: {e}")
            return layer

        self.texts[index] = updated
        return updated

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def set_background_bytes(self, data: bytes, content_type: Optional[str] = None) -> bool:
        image = self._decode(data, content_type)
        if image is None:
            return False
        self.background = image
        return True

    def set_photo_bytes(self, data: bytes, content_type: Optional[str] = None) -> bool:
        image = self._decode(data, content_type)
        if image is None:
            return False
        self.photo = image
        return True

    def _decode(self, data: bytes, content_type: Optional[str]) -> Optional[Image.Image]:
        try:
            image = decode_image(data, content_type)
        except ImageDecodeError as e:
            self.error_message = e.message
            return None
        self.error_message = ""
        return image

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def build_scene(self) -> Scene:
        """Fresh Scene value from the current parameters."""
        scene = campaign_poster_scene(
            background=self.background,
            photo=self.photo,
            region=self.region,
            transform=self.transform,
            size=self.size,
        )
        return replace(scene, texts=tuple(self.texts))

    def render(self) -> Image.Image:
        return self.compositor.render(self.build_scene())

    def export(self) -> bytes:
        return export_png(self.render())
