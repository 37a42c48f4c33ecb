"""
PNG export of rendered surfaces.
"""

import io
import logging
from pathlib import Path
from typing import Optional, Union

from PIL import Image

from .config import get_settings

logger = logging.getLogger(__name__)


def export_png(surface: Image.Image, compress_level: Optional[int] = None) -> bytes:
    """
    Encode the surface as PNG.

    Lossless and deterministic: no metadata is written, so identical pixels
    give identical bytes. The surface itself is not modified.
    """
    if compress_level is None:
        compress_level = get_settings().png_compress_level

    buffer = io.BytesIO()
    surface.save(buffer, format="PNG", compress_level=compress_level)
    return buffer.getvalue()


def export_png_file(surface: Image.Image, output_path: Union[str, Path]) -> Path:
    """Write the surface to ``output_path`` as PNG."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(export_png(surface))
    logger.info(f"Exported poster to {output_path}")
    return output_path
