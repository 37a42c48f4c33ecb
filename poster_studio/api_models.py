"""
Poster API models for FastAPI endpoints.
"""

from typing import List, Literal, Optional

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .colors import parse_color
from .config import get_settings
from .models import (
    BackgroundLayer,
    Gradient,
    PhotoLayer,
    PhotoTransform,
    Region,
    Scene,
    TextLayer,
)
from .presets import get_dimensions


class RegionModel(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    x: float = 200
    y: float = 300
    width: float = 400
    height: float = 400


class TransformModel(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    scale: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0
    rotation: float = 0.0  # Degrees


class TextLayerModel(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    content: str = ""
    font_family: str = "Poppins"
    font_size: float = 48
    color: str = "#ffffff"
    bold: bool = False
    italic: bool = False
    weight: Optional[int] = None
    align: Literal["left", "center", "right"] = "center"
    x: float = 400
    y: float = 150
    line_height: Optional[float] = 1.2
    max_width: Optional[float] = None  # Enables word-wrap
    line_spacing: Optional[float] = None
    baseline: Literal["alphabetic", "middle"] = "alphabetic"

    @field_validator("color")
    @classmethod
    def check_color(cls, value: str) -> str:
        parse_color(value)
        return value

    def to_layer(self) -> TextLayer:
        return TextLayer(**self.model_dump())


class SceneRequest(BaseModel):
    """Request body describing a full scene."""
    preset: Optional[str] = None  # Settings.default_preset when unset; classic, word_of_the_day, ig_story, "WxH"
    width: Optional[int] = Field(default=None, gt=0)
    height: Optional[int] = Field(default=None, gt=0)
    gradient_top: str = "#0f172a"
    gradient_bottom: str = "#1f2937"
    fill_color: Optional[str] = None  # Solid background instead of gradient
    region: Optional[RegionModel] = Field(default_factory=RegionModel)  # None: no photo layer
    transform: TransformModel = Field(default_factory=TransformModel)
    photo_caption: str = "User photo here"
    texts: List[TextLayerModel] = Field(default_factory=list)

    @field_validator("gradient_top", "gradient_bottom", "fill_color")
    @classmethod
    def check_color(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            parse_color(value)
        return value

    def to_scene(
        self,
        background: Optional[Image.Image] = None,
        photo: Optional[Image.Image] = None,
    ) -> Scene:
        if self.width and self.height:
            width, height = self.width, self.height
        else:
            width, height = get_dimensions(preset=self.preset or get_settings().default_preset)

        photo_layer = None
        if self.region is not None:
            photo_layer = PhotoLayer(
                region=Region(**self.region.model_dump()),
                transform=PhotoTransform(**self.transform.model_dump()),
                image=photo,
                caption=self.photo_caption,
            )

        return Scene(
            width=width,
            height=height,
            background=BackgroundLayer(
                image=background,
                gradient=Gradient(top=self.gradient_top, bottom=self.gradient_bottom),
                fill_color=self.fill_color,
            ),
            photo=photo_layer,
            texts=tuple(t.to_layer() for t in self.texts),
        )


class TemplateRequest(BaseModel):
    """Text overrides for a named template."""
    text: Optional[str] = None
    word: Optional[str] = None
    meaning: Optional[str] = None
    example: Optional[str] = None


class PosterOptionsResponse(BaseModel):
    """Response with available poster options."""
    presets: List[dict]
    templates: List[dict]
    fonts: List[str]
