"""
LayerRenderer - Pillow-based drawing of individual scene layers.

Handles:
1. Background (cover-fit image, gradient, or glyph pattern)
2. Photo layer (scaled, rotated, offset, clipped to its region)
3. Empty photo placeholder (dashed frame + caption)
4. Text layers (plain multi-line or word-wrapped)

Each layer is drawn into its own transparent overlay and composited onto
the canvas when its scope closes, so clip and style state never carries
over from one layer to the next.
"""

import logging
import math
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple

from PIL import Image, ImageChops, ImageDraw, ImageFont

from .colors import parse_color
from .config import get_settings
from .fonts import FontResolver, FontSpec, default_resolver
from .geometry import centered_affine_placement, cover_fit
from .models import BackgroundLayer, GlyphDecoration, PhotoLayer, Region, TextLayer
from .text_layout import Measure, PlacedLine, layout_vertical, simple_lines, wrap_and_measure

logger = logging.getLogger(__name__)

FRAME_COLOR = (255, 255, 255, 178)        # rgba(255,255,255,0.7)
PLACEHOLDER_COLOR = (255, 255, 255, 153)  # rgba(255,255,255,0.6)
CAPTION_COLOR = (255, 255, 255, 204)      # rgba(255,255,255,0.8)
FRAME_WIDTH = 2
DASH_PATTERN = (8, 6)
CAPTION_SIZE = 14
DECORATION_FAMILY = "Inter"

H_ANCHORS = {"left": "l", "center": "m", "right": "r"}
V_ANCHORS = {"alphabetic": "s", "middle": "m"}


def pixel_box(region: Region) -> Tuple[int, int, int, int]:
    """Region rounded to pixel edges: (left, top, right, bottom), right/bottom exclusive."""
    left, top, right, bottom = region.box
    return (round(left), round(top), round(right), round(bottom))


def visible_box(
    box: Tuple[int, int, int, int],
    canvas_size: Tuple[int, int],
) -> Optional[Tuple[int, int, int, int]]:
    """Intersection of a pixel box with the canvas, or None if they do not overlap."""
    left, top, right, bottom = box
    width, height = canvas_size
    clipped = (max(left, 0), max(top, 0), min(right, width), min(bottom, height))
    if clipped[2] <= clipped[0] or clipped[3] <= clipped[1]:
        return None
    return clipped


def composite_at(base: Image.Image, im: Image.Image, x: int, y: int) -> None:
    """Alpha-composite ``im`` onto ``base`` at (x, y); negative positions are cropped."""
    dest = (max(x, 0), max(y, 0))
    source = (max(-x, 0), max(-y, 0))
    if source[0] >= im.width or source[1] >= im.height:
        return
    if dest[0] >= base.width or dest[1] >= base.height:
        return
    base.alpha_composite(im, dest=dest, source=source)


def plan_text(layer: TextLayer, measure: Measure) -> List[PlacedLine]:
    """
    Compute the lines of a text layer and their vertical anchors.

    Without ``max_width`` each explicit line is placed as-is; with it, the
    paragraphs are word-wrapped and spaced with paragraph gaps.
    """
    if layer.is_blank:
        return []
    if layer.max_width:
        wrapped = wrap_and_measure(layer.content, layer.max_width, measure)
        return layout_vertical(wrapped, layer.y, layer.spacing)
    return simple_lines(layer.content, layer.y, layer.spacing)


def text_anchor(layer: TextLayer) -> str:
    return H_ANCHORS[layer.align] + V_ANCHORS[layer.baseline]


class LayerRenderer:
    """
    Draws one layer at a time onto an RGBA canvas.

    Source images referenced by layers are never modified; every resize,
    rotation or conversion works on a copy.
    """

    def __init__(self, resolver: Optional[FontResolver] = None):
        self.resolver = resolver or default_resolver()

    @contextmanager
    def layer_scope(
        self,
        canvas: Image.Image,
        clip: Optional[Tuple[int, int, int, int]] = None,
    ) -> Iterator[Image.Image]:
        """
        Yield a transparent overlay the size of the canvas.

        On normal exit the overlay is clipped to ``clip`` (left, top, right,
        bottom; right/bottom exclusive) and composited onto the canvas. If
        drawing raises, the canvas is left untouched.
        """
        overlay = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        yield overlay

        if clip is not None:
            left, top, right, bottom = clip
            mask = Image.new("L", canvas.size, 0)
            if right > left and bottom > top:
                ImageDraw.Draw(mask).rectangle([left, top, right - 1, bottom - 1], fill=255)
            overlay.putalpha(ImageChops.multiply(overlay.getchannel("A"), mask))

        canvas.alpha_composite(overlay)

    # ------------------------------------------------------------------
    # Background
    # ------------------------------------------------------------------

    def render_background(self, canvas: Image.Image, layer: BackgroundLayer) -> None:
        """Cover-fit the image, or fall back to a pattern or gradient fill."""
        if layer.image is not None:
            self.draw_cover_image(canvas, layer.image)
        elif layer.fill_color:
            self.draw_pattern(canvas, layer.fill_color, layer.decorations)
        else:
            self.draw_gradient(canvas, layer.gradient.top, layer.gradient.bottom)

    def draw_cover_image(self, canvas: Image.Image, image: Image.Image) -> None:
        width, height = canvas.size
        fit = cover_fit(width, height, image.width, image.height)
        left, top, right, bottom = fit.source_box(width, height)
        box = (max(0.0, left), max(0.0, top), min(float(image.width), right), min(float(image.height), bottom))

        source = image if image.mode == "RGBA" else image.convert("RGBA")
        logger.debug(f"Background cover-fit scale={fit.scale:.4f} box={box}")

        with self.layer_scope(canvas) as overlay:
            overlay.paste(source.resize((width, height), Image.Resampling.LANCZOS, box=box), (0, 0))

    def draw_gradient(self, canvas: Image.Image, top_color: str, bottom_color: str) -> None:
        """Vertical gradient; first row is exactly ``top_color``, last row exactly ``bottom_color``."""
        width, height = canvas.size
        c1 = parse_color(top_color)
        c2 = parse_color(bottom_color)
        span = max(height - 1, 1)

        with self.layer_scope(canvas) as overlay:
            draw = ImageDraw.Draw(overlay)
            for y in range(height):
                ratio = y / span
                color = tuple(round(a + (b - a) * ratio) for a, b in zip(c1, c2))
                draw.line([(0, y), (width - 1, y)], fill=color)

    def draw_pattern(
        self,
        canvas: Image.Image,
        fill_color: str,
        decorations: Tuple[GlyphDecoration, ...],
    ) -> None:
        with self.layer_scope(canvas) as overlay:
            overlay.paste(parse_color(fill_color), (0, 0, *canvas.size))
            for item in decorations:
                self._draw_glyph(overlay, item)

    def _draw_glyph(self, overlay: Image.Image, item: GlyphDecoration) -> None:
        font = self.resolver.resolve(FontSpec(DECORATION_FAMILY, item.size))
        side = max(2, math.ceil(item.size * 2))
        tile = Image.new("RGBA", (side, side), (0, 0, 0, 0))
        ImageDraw.Draw(tile).text((side / 2, side / 2), item.char, font=font, fill=parse_color(item.color), anchor="mm")
        if item.rotation:
            tile = tile.rotate(-item.rotation, resample=Image.Resampling.BICUBIC)
        composite_at(overlay, tile, round(item.x - side / 2), round(item.y - side / 2))

    # ------------------------------------------------------------------
    # Photo
    # ------------------------------------------------------------------

    def render_photo_layer(self, canvas: Image.Image, layer: PhotoLayer) -> None:
        if layer.image is None:
            self.draw_placeholder(canvas, layer.region, layer.caption)
            return

        self.draw_clipped_photo(canvas, layer)
        self.draw_frame(canvas, layer.region)

    def draw_clipped_photo(self, canvas: Image.Image, layer: PhotoLayer) -> None:
        """
        Draw the photo rotated about the region center and clipped to the region.

        Only the part of the source that can reach the visible region is
        resampled, so memory stays bounded by the canvas whatever the scale.
        """
        image = layer.image
        placement = centered_affine_placement(layer.region, layer.transform, image.width, image.height)
        clip = visible_box(pixel_box(layer.region), canvas.size)
        window = placement.source_window(clip, image.width, image.height) if clip else None
        if window is None:
            logger.debug("Photo does not reach the visible part of its region")
            return

        left, top, right, bottom = window
        size = (
            max(1, round((right - left) * placement.scale)),
            max(1, round((bottom - top) * placement.scale)),
        )
        photo = image.crop(window)
        if photo.mode != "RGBA":
            photo = photo.convert("RGBA")
        photo = photo.resize(size, Image.Resampling.LANCZOS)
        if layer.transform.rotation:
            photo = photo.rotate(-layer.transform.rotation, resample=Image.Resampling.BICUBIC, expand=True)

        cx, cy = placement.to_canvas((left + right) / 2, (top + bottom) / 2)
        logger.debug(
            f"Photo window {window} -> {size[0]}x{size[1]} rotation={layer.transform.rotation} "
            f"center=({cx:.1f}, {cy:.1f})"
        )

        with self.layer_scope(canvas, clip=clip) as overlay:
            composite_at(overlay, photo, round(cx - photo.width / 2), round(cy - photo.height / 2))

    def draw_frame(self, canvas: Image.Image, region: Region) -> None:
        left, top, right, bottom = pixel_box(region)
        with self.layer_scope(canvas) as overlay:
            ImageDraw.Draw(overlay).rectangle(
                [left - 1, top - 1, right, bottom], outline=FRAME_COLOR, width=FRAME_WIDTH
            )

    def draw_placeholder(self, canvas: Image.Image, region: Region, caption: str) -> None:
        """Dashed outline of the region with a centered caption."""
        left, top, right, bottom = pixel_box(region)
        cx, cy = region.center

        with self.layer_scope(canvas) as overlay:
            draw = ImageDraw.Draw(overlay)
            corners = [(left, top), (right, top), (right, bottom), (left, bottom), (left, top)]
            for start, end in zip(corners, corners[1:]):
                self._dashed_line(draw, start, end, PLACEHOLDER_COLOR)

            if caption:
                font = self.resolver.resolve(FontSpec(get_settings().default_font_family, CAPTION_SIZE))
                draw.text((cx, cy), caption, font=font, fill=CAPTION_COLOR, anchor="ms")

    @staticmethod
    def _dashed_line(
        draw: ImageDraw.ImageDraw,
        start: Tuple[int, int],
        end: Tuple[int, int],
        color: Tuple[int, int, int, int],
    ) -> None:
        (x1, y1), (x2, y2) = start, end
        length = math.hypot(x2 - x1, y2 - y1)
        if length == 0:
            return
        ux, uy = (x2 - x1) / length, (y2 - y1) / length
        on, off = DASH_PATTERN

        pos = 0.0
        while pos < length:
            seg_end = min(pos + on, length)
            draw.line(
                [(x1 + ux * pos, y1 + uy * pos), (x1 + ux * seg_end, y1 + uy * seg_end)],
                fill=color,
                width=FRAME_WIDTH,
            )
            pos += on + off

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def font_for(self, layer: TextLayer) -> ImageFont.FreeTypeFont:
        spec = FontSpec(
            family=layer.font_family,
            size=layer.font_size,
            bold=layer.bold,
            italic=layer.italic,
            weight=layer.weight,
        )
        logger.debug(f"Text font: {spec.css()}")
        return self.resolver.resolve(spec)

    def render_text_layer(self, canvas: Image.Image, layer: TextLayer) -> None:
        """Draw every line of the layer at one shared horizontal anchor."""
        if layer.is_blank:
            return

        font = self.font_for(layer)
        lines = plan_text(layer, font.getlength)
        anchor = text_anchor(layer)
        fill = parse_color(layer.color)

        with self.layer_scope(canvas) as overlay:
            draw = ImageDraw.Draw(overlay)
            for line in lines:
                if not line.text:
                    continue
                draw.text((layer.x, line.y), line.text, font=font, fill=fill, anchor=anchor)
