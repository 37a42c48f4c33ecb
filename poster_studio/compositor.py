"""
SceneCompositor - renders a Scene onto a fresh raster surface.

Workflow:
1. Allocate a cleared RGBA surface of the scene's size
2. Draw the background
3. Draw the photo layer (or its placeholder)
4. Draw each text layer in order

Every edit is followed by a full render; there is no partial redraw.
"""

import logging
from dataclasses import replace
from typing import Optional

from PIL import Image

from .fonts import FontResolver
from .models import BackgroundLayer, PhotoLayer, Scene, TextLayer
from .renderer import LayerRenderer

logger = logging.getLogger(__name__)


class SceneCompositor:
    """
    Owns the canvas lifecycle and the layer order.

    ``render`` is a pure function of the scene: the same scene (and the same
    referenced images) always yields pixel-identical output. The most recent
    surface is kept on ``surface`` for preview.
    """

    def __init__(self, resolver: Optional[FontResolver] = None):
        self.renderer = LayerRenderer(resolver)
        self.surface: Optional[Image.Image] = None

    def render(self, scene: Scene) -> Image.Image:
        """
        Render the scene.

        Args:
            scene: Scene to rasterize

        Returns:
            RGBA surface of ``scene.width x scene.height``
        """
        surface = Image.new("RGBA", scene.size, (0, 0, 0, 0))

        for layer in scene.layers:
            if isinstance(layer, BackgroundLayer):
                self._render_background(surface, layer)
            elif isinstance(layer, PhotoLayer):
                self._render_photo(surface, layer)
            else:
                self._render_text(surface, layer)

        logger.debug(f"Rendered scene {scene.width}x{scene.height} with {len(scene.texts)} text layer(s)")
        self.surface = surface
        return surface

    def _render_background(self, surface: Image.Image, layer: BackgroundLayer) -> None:
        try:
            self.renderer.render_background(surface, layer)
        except (OSError, ValueError) as e:
            if layer.image is None:
                raise
            logger.warning(f"Background image could not be drawn ({e}), using default fill")
            self.renderer.render_background(surface, replace(layer, image=None))

    def _render_photo(self, surface: Image.Image, layer: PhotoLayer) -> None:
        try:
            self.renderer.render_photo_layer(surface, layer)
        except (OSError, ValueError) as e:
            if layer.image is None:
                raise
            logger.warning(f"Photo could not be drawn ({e}), showing placeholder")
            self.renderer.render_photo_layer(surface, replace(layer, image=None))

    def _render_text(self, surface: Image.Image, layer: TextLayer) -> None:
        try:
            self.renderer.render_text_layer(surface, layer)
        except (OSError, ValueError) as e:
            logger.warning(f"Text layer {layer.content[:20]!r} could not be drawn ({e}), skipping")


def render(scene: Scene) -> Image.Image:
    """Render a scene with a throwaway compositor."""
    return SceneCompositor().render(scene)
