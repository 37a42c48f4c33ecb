# Poster Studio
# Declarative scenes in, deterministic PNG posters out

from .compositor import SceneCompositor, render
from .export import export_png, export_png_file
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
from .presets import TEMPLATES, CanvasPreset, get_dimensions, get_preset_options
from .session import ImageDecodeError, PosterSession, decode_image

__all__ = [
    "SceneCompositor",
    "render",
    "export_png",
    "export_png_file",
    "BackgroundLayer",
    "GlyphDecoration",
    "Gradient",
    "PhotoLayer",
    "PhotoTransform",
    "Region",
    "Scene",
    "TextLayer",
    "TEMPLATES",
    "CanvasPreset",
    "get_dimensions",
    "get_preset_options",
    "ImageDecodeError",
    "PosterSession",
    "decode_image",
]
