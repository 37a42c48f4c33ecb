from fastapi import FastAPI, HTTPException, File, Form, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import ValidationError
from typing import Optional
import logging

from poster_studio import SceneCompositor, export_png, TEMPLATES, get_preset_options
from poster_studio.api_models import SceneRequest, TemplateRequest, PosterOptionsResponse
from poster_studio.config import get_settings
from poster_studio.fonts import GOOGLE_FONTS
from poster_studio.presets import get_template_options
from poster_studio.session import ImageDecodeError, decode_image

settings = get_settings()

# Logging setup
logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)

app = FastAPI(title="Poster Studio", version="1.0.0")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

compositor = SceneCompositor()


def png_response(data: bytes, filename: str = "poster.png") -> Response:
    return Response(
        content=data,
        media_type="image/png",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


async def read_upload(upload: Optional[UploadFile]):
    if upload is None:
        return None
    content = await upload.read()
    if not content:
        return None
    try:
        return decode_image(content, upload.content_type)
    except ImageDecodeError as e:
        logger.warning(f"Rejected upload {upload.filename}: {e.message}")
        raise HTTPException(status_code=400, detail=e.message)


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "poster-studio"}


@app.get("/")
async def root():
    return {
        "service": "Poster Studio",
        "version": "1.0.0",
        "description": "Deterministic poster composition: background, clipped photo, text",
        "endpoints": ["/poster/options", "/poster/render", "/poster/render/upload", "/poster/templates/{name}", "/poster/templates/{name}/upload", "/health"],
    }


@app.get("/poster/options", response_model=PosterOptionsResponse)
async def get_poster_options():
    """Available canvas presets, templates and font families."""
    return PosterOptionsResponse(
        presets=get_preset_options(),
        templates=get_template_options(),
        fonts=GOOGLE_FONTS,
    )


@app.post("/poster/render")
async def render_poster(request: SceneRequest):
    """Render a scene described entirely by JSON (no uploaded images)."""
    try:
        scene = request.to_scene()
        logger.info(f"Rendering scene {scene.width}x{scene.height}, texts={len(scene.texts)}")
        return png_response(export_png(compositor.render(scene)))
    except ValueError as e:
        logger.error(f"Invalid scene: {e}")
        raise HTTPException(status_code=422, detail=str(e))


@app.post("/poster/render/upload")
async def render_poster_upload(
    scene: str = Form("{}"),
    background: Optional[UploadFile] = File(None),
    photo: Optional[UploadFile] = File(None),
):
    """
    Render a scene with uploaded background and/or user photo.

    Args:
        scene: SceneRequest as a JSON string
        background: Optional background image (cover-fit)
        photo: Optional user photo (clipped to the region)
    """
    try:
        request = SceneRequest.model_validate_json(scene)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))

    background_image = await read_upload(background)
    photo_image = await read_upload(photo)

    try:
        built = request.to_scene(background=background_image, photo=photo_image)
        logger.info(
            f"Rendering uploaded scene {built.width}x{built.height}, "
            f"background={'yes' if background_image else 'no'}, photo={'yes' if photo_image else 'no'}"
        )
        return png_response(export_png(compositor.render(built)))
    except ValueError as e:
        logger.error(f"Invalid scene: {e}")
        raise HTTPException(status_code=422, detail=str(e))


def render_template_png(name: str, overrides: dict) -> Response:
    builder = TEMPLATES.get(name)
    if builder is None:
        raise HTTPException(status_code=404, detail=f"Unknown template: {name}")

    try:
        scene = builder(**overrides)
    except (TypeError, ValueError) as e:
        logger.error(f"Invalid overrides for template '{name}': {e}")
        raise HTTPException(status_code=422, detail=f"Invalid overrides for {name}: {e}")

    logger.info(f"Rendering template '{name}'")
    return png_response(export_png(compositor.render(scene)), filename=f"{name}.png")


@app.post("/poster/templates/{name}")
async def render_template(name: str, request: Optional[TemplateRequest] = None):
    """Render a named template, optionally overriding its text."""
    overrides = request.model_dump(exclude_none=True) if request else {}
    return render_template_png(name, overrides)


@app.post("/poster/templates/{name}/upload")
async def render_template_upload(
    name: str,
    overrides: str = Form("{}"),
    background: Optional[UploadFile] = File(None),
    photo: Optional[UploadFile] = File(None),
):
    """
    Render a named template with uploaded images.

    Args:
        overrides: TemplateRequest as a JSON string
        background: Optional background image (cover-fit)
        photo: Optional user photo, for templates that have a photo layer
    """
    if name not in TEMPLATES:
        raise HTTPException(status_code=404, detail=f"Unknown template: {name}")

    try:
        request = TemplateRequest.model_validate_json(overrides)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))

    kwargs = request.model_dump(exclude_none=True)
    background_image = await read_upload(background)
    if background_image is not None:
        kwargs["background"] = background_image
    photo_image = await read_upload(photo)
    if photo_image is not None:
        kwargs["photo"] = photo_image

    return render_template_png(name, kwargs)
