import pytest
from PIL import Image

from poster_studio.models import MIN_FONT_SIZE, MIN_PHOTO_SCALE, MIN_REGION_SIZE, PhotoTransform, Region, TextLayer
from poster_studio.session import (
    DECODE_FAILED_MESSAGE,
    INVALID_TYPE_MESSAGE,
    ImageDecodeError,
    PosterSession,
    decode_image,
    parse_number,
)


@pytest.fixture
def session(resolver):
    session = PosterSession()
    session.compositor.renderer.resolver = resolver
    return session


def test_region_clamps_non_positive_sizes():
    assert Region(0, 0, 0, -5).width == MIN_REGION_SIZE == 10
    assert Region(0, 0, 0, -5).height == 10


def test_transform_clamps_scale():
    assert PhotoTransform(scale=0).scale == MIN_PHOTO_SCALE
    assert PhotoTransform(scale=-2).scale == MIN_PHOTO_SCALE
    assert PhotoTransform(offset_x=-900).offset_x == -900


def test_text_clamps_font_size():
    assert TextLayer(content="x", font_size=0).font_size == MIN_FONT_SIZE == 10
    assert TextLayer(content="x", font_size=-12).font_size == 10


def test_text_rejects_unknown_alignment():
    with pytest.raises(ValueError):
        TextLayer(content="x", align="justify")


@pytest.mark.parametrize("value, expected", [
    ("12.5", 12.5),
    (3, 3.0),
    ("-4", -4.0),
    ("", None),
    ("abc", None),
    (None, None),
    ("nan", None),
    ("inf", None),
    ("-inf", None),
    ("1e309", None),
    (10 ** 400, None),
    (True, None),
])
def test_parse_number(value, expected):
    assert parse_number(value) == expected


def test_update_region_clamps_width(session):
    assert session.update_region("width", "0").width == 10
    assert session.update_region("height", -30).height == 10
    assert session.update_region("x", "15").x == 15


def test_update_region_ignores_non_numeric(session):
    session.update_region("width", 250)
    session.update_region("width", "wide")
    assert session.region.width == 250


def test_update_region_unknown_field(session):
    with pytest.raises(KeyError):
        session.update_region("depth", 3)


def test_update_transform(session):
    assert session.update_transform("scale", "0").scale == MIN_PHOTO_SCALE
    assert session.update_transform("rotation", "-45").rotation == -45
    session.update_transform("offset_x", "left")
    assert session.transform.offset_x == 0


def test_update_text_numeric_and_plain_fields(session):
    assert session.update_text(0, "font_size", "-1").font_size == 10
    session.update_text(0, "y", "not a number")
    assert session.texts[0].y == 150

    assert session.update_text(0, "content", "New Title").content == "New Title"
    assert session.update_text(0, "italic", True).italic is True
    assert session.update_text(0, "align", "right").align == "right"


def test_update_text_ignores_invalid_alignment(session):
    session.update_text(0, "align", "justify")
    assert session.texts[0].align == "center"


def test_decode_image_roundtrip(png_bytes):
    image = decode_image(png_bytes, "image/png")
    assert image.size == (40, 30)


def test_decode_image_rejects_wrong_type(png_bytes):
    with pytest.raises(ImageDecodeError) as exc:
        decode_image(png_bytes, "text/plain")
    assert exc.value.message == INVALID_TYPE_MESSAGE


def test_decode_image_rejects_garbage():
    with pytest.raises(ImageDecodeError) as exc:
        decode_image(b"definitely not an image", "image/png")
    assert exc.value.message == DECODE_FAILED_MESSAGE


def test_failed_upload_keeps_previous_image(session, png_bytes):
    assert session.set_photo_bytes(png_bytes, "image/png") is True
    previous = session.photo

    assert session.set_photo_bytes(b"\x00\x01", "image/png") is False
    assert session.photo is previous
    assert session.error_message == DECODE_FAILED_MESSAGE

    assert session.set_background_bytes(png_bytes, "application/pdf") is False
    assert session.background is None
    assert session.error_message == INVALID_TYPE_MESSAGE

    assert session.set_background_bytes(png_bytes) is True
    assert session.error_message == ""


def test_session_renders_after_every_edit(session, png_bytes):
    blank = session.export()
    session.set_photo_bytes(png_bytes, "image/png")
    with_photo = session.export()
    session.update_transform("rotation", 20)
    rotated = session.export()

    assert blank != with_photo != rotated
    assert session.export() == rotated


def test_build_scene_reflects_state(session):
    session.update_region("width", 120)
    scene = session.build_scene()
    assert scene.size == (800, 1200)
    assert scene.photo.region.width == 120
    assert scene.texts[0].content == "Your Poster Title\nYour Tagline Here"
    assert isinstance(session.render(), Image.Image)


@pytest.mark.parametrize("value", ["inf", "-inf", "1e309", float("nan")])
def test_non_finite_edits_are_ignored_and_render_still_works(session, value):
    session.update_region("width", 250)
    session.update_region("width", value)
    session.update_transform("scale", value)
    session.update_text(0, "y", value)

    assert session.region.width == 250
    assert session.transform.scale == 1.0
    assert session.texts[0].y == 150
    assert session.render().size == (800, 1200)


def test_update_text_color(session):
    assert session.update_text(0, "color", "rgba(255,255,255,0.7)").color == "rgba(255,255,255,0.7)"
    session.update_text(0, "color", "notacolor")
    assert session.texts[0].color == "rgba(255,255,255,0.7)"
    assert session.render().size == (800, 1200)


def test_default_title_is_centered_on_custom_width():
    session = PosterSession(width=1080, height=1350)
    assert session.texts[0].x == 540
    assert PosterSession().texts[0].x == 400


def test_explicit_texts_are_kept():
    texts = [TextLayer(content="Custom", x=10)]
    assert PosterSession(texts=texts).texts is texts


def test_extreme_transform_still_renders(session, png_bytes):
    session.set_photo_bytes(png_bytes, "image/png")
    session.update_transform("scale", "500")
    session.update_transform("offset_x", "-1e7")
    session.update_transform("rotation", "725")
    assert session.render().size == (800, 1200)
