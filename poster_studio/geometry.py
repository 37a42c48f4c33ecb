"""
Geometry helpers for placing images on the canvas.

Handles:
1. Cover-fit scaling (fill a rectangle, crop symmetric overflow)
2. Centered affine placement of the photo inside its region
3. Screen-space rotation of points
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from .models import PhotoTransform, Region


@dataclass
class CoverFit:
    """Result of cover-fitting an image into a canvas."""
    scale: float
    draw_x: float
    draw_y: float
    draw_w: float
    draw_h: float

    def source_box(self, canvas_w: int, canvas_h: int) -> Tuple[float, float, float, float]:
        """
        Region of the source image that lands on the canvas.

        Suitable for ``Image.resize(size, box=...)``.
        """
        return (
            -self.draw_x / self.scale,
            -self.draw_y / self.scale,
            (canvas_w - self.draw_x) / self.scale,
            (canvas_h - self.draw_y) / self.scale,
        )


@dataclass
class Placement:
    """Where the photo is drawn, in the local frame of ``pivot``."""
    draw_x: float
    draw_y: float
    draw_w: float
    draw_h: float
    rotation_radians: float
    pivot: Tuple[float, float]
    scale: float = 1.0

    @property
    def image_center(self) -> Tuple[float, float]:
        """Canvas-space center of the drawn image after rotation."""
        local_x = self.draw_x + self.draw_w / 2
        local_y = self.draw_y + self.draw_h / 2
        dx, dy = rotate_point(local_x, local_y, self.rotation_radians)
        return (self.pivot[0] + dx, self.pivot[1] + dy)

    def to_canvas(self, u: float, v: float) -> Tuple[float, float]:
        """Map a point of the source image to canvas space."""
        dx, dy = rotate_point(self.draw_x + u * self.scale, self.draw_y + v * self.scale, self.rotation_radians)
        return (self.pivot[0] + dx, self.pivot[1] + dy)

    def to_source(self, x: float, y: float) -> Tuple[float, float]:
        """Map a canvas point back to source image coordinates."""
        lx, ly = rotate_point(x - self.pivot[0], y - self.pivot[1], -self.rotation_radians)
        return ((lx - self.draw_x) / self.scale, (ly - self.draw_y) / self.scale)

    def source_window(
        self,
        clip: Tuple[float, float, float, float],
        img_w: int,
        img_h: int,
        margin: int = 3,
    ) -> Optional[Tuple[int, int, int, int]]:
        """
        Integer box of the source image that can land inside ``clip``.

        ``margin`` source pixels (more when downscaling) are kept around the
        visible part for the resampling filter. Returns None when no part of
        the image reaches the clip.
        """
        left, top, right, bottom = clip
        corners = [self.to_source(x, y) for x, y in ((left, top), (right, top), (right, bottom), (left, bottom))]
        us = [u for u, _ in corners]
        vs = [v for _, v in corners]
        pad = margin * max(1.0, 1.0 / self.scale)

        box = (
            max(0, math.floor(min(us) - pad)),
            max(0, math.floor(min(vs) - pad)),
            min(img_w, math.ceil(max(us) + pad)),
            min(img_h, math.ceil(max(vs) + pad)),
        )
        if box[2] <= box[0] or box[3] <= box[1]:
            return None
        return box


def cover_fit(canvas_w: float, canvas_h: float, img_w: float, img_h: float) -> CoverFit:
    """
    Scale an image so it fully covers the canvas, centered.

    Args:
        canvas_w: Canvas width
        canvas_h: Canvas height
        img_w: Image width
        img_h: Image height

    Returns:
        CoverFit with draw_w >= canvas_w and draw_h >= canvas_h
    """
    if img_w <= 0 or img_h <= 0:
        raise ValueError(f"Image size must be positive, got {img_w}x{img_h}")

    scale = max(canvas_w / img_w, canvas_h / img_h)
    draw_w = img_w * scale
    draw_h = img_h * scale
    return CoverFit(
        scale=scale,
        draw_x=(canvas_w - draw_w) / 2,
        draw_y=(canvas_h - draw_h) / 2,
        draw_w=draw_w,
        draw_h=draw_h,
    )


def centered_affine_placement(
    region: Region,
    transform: PhotoTransform,
    img_w: float,
    img_h: float,
) -> Placement:
    """
    Place the photo centered on the region, rotated about the region center.

    The offset is applied after rotation, so it is expressed in the rotated
    frame (translate to center -> rotate -> draw at local offset).
    """
    if img_w <= 0 or img_h <= 0:
        raise ValueError(f"Image size must be positive, got {img_w}x{img_h}")

    draw_w = img_w * transform.scale
    draw_h = img_h * transform.scale
    return Placement(
        draw_x=-draw_w / 2 + transform.offset_x,
        draw_y=-draw_h / 2 + transform.offset_y,
        draw_w=draw_w,
        draw_h=draw_h,
        rotation_radians=math.radians(transform.rotation),
        pivot=region.center,
        scale=transform.scale,
    )


def rotate_point(x: float, y: float, radians: float) -> Tuple[float, float]:
    """Rotate (x, y) about the origin; positive angles turn clockwise with y pointing down."""
    cos_a = math.cos(radians)
    sin_a = math.sin(radians)
    return (x * cos_a - y * sin_a, x * sin_a + y * cos_a)
