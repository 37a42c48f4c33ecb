import pytest

from poster_studio.fonts import FontResolver, FontSpec
from poster_studio.models import GlyphDecoration
from poster_studio.presets import (
    TEMPLATES,
    campaign_poster_scene,
    get_dimensions,
    get_preset_options,
    get_template_options,
    parse_dimension_string,
    word_of_the_day_scene,
)


@pytest.mark.parametrize("preset, expected", [
    ("classic", (800, 1200)),
    ("word_of_the_day", (1080, 1350)),
    ("word-of-the-day", (1080, 1350)),
    ("ig_story", (1080, 1920)),
    ("2160x3840", (2160, 3840)),
])
def test_get_dimensions_presets(preset, expected):
    assert get_dimensions(preset=preset) == expected


def test_get_dimensions_custom_and_default():
    assert get_dimensions(width=640, height=480) == (640, 480)
    assert get_dimensions() == (800, 1200)
    assert get_dimensions(preset="unknown") == (800, 1200)


def test_parse_dimension_string():
    assert parse_dimension_string("1080 x 1350") == (1080, 1350)
    assert parse_dimension_string("1080×1350") == (1080, 1350)
    assert parse_dimension_string("0x100") is None
    assert parse_dimension_string("poster") is None


def test_preset_options_list_every_preset():
    ids = {p["id"] for p in get_preset_options()}
    assert {"classic", "word_of_the_day", "ig_story"} <= ids


def test_campaign_scene_defaults():
    scene = campaign_poster_scene()
    assert scene.size == (800, 1200)
    assert scene.background.image is None
    assert (scene.background.gradient.top, scene.background.gradient.bottom) == ("#0f172a", "#1f2937")
    assert scene.photo.region.box == (200, 300, 600, 700)
    assert scene.photo.image is None

    title = scene.texts[0]
    assert title.content == "Your Poster Title\nYour Tagline Here"
    assert (title.font_family, title.font_size, title.bold) == ("Poppins", 48, True)
    assert (title.align, title.x, title.y, title.line_height) == ("center", 400, 150, 1.2)


def test_campaign_scene_size_is_configurable():
    scene = campaign_poster_scene(size=(1080, 1350))
    assert scene.size == (1080, 1350)
    assert scene.texts[0].x == 540


def test_word_of_the_day_scene():
    scene = word_of_the_day_scene(word="Brave", meaning="Ready to face danger.", example="She was brave.")
    assert scene.size == (1080, 1350)
    assert scene.photo is None
    assert scene.background.fill_color == "#1550B3"
    assert all(isinstance(d, GlyphDecoration) for d in scene.background.decorations)

    word, meaning_label, meaning, example_label, example = scene.texts
    assert (word.content, word.font_size, word.weight, word.y) == ("Brave", 120, 800, 660)
    assert meaning_label.content == "Meaning:"
    assert (meaning.max_width, meaning.spacing, meaning.y) == (600, 40, 790)
    assert example_label.y == 910
    assert (example.max_width, example.spacing, example.font_size) == (700, 25, 38)
    assert all(t.baseline == "middle" and t.x == 540 for t in scene.texts)


def test_templates_registry():
    assert set(TEMPLATES) == {"campaign", "word_of_the_day"}
    assert {t["id"] for t in get_template_options()} == set(TEMPLATES)


def test_font_spec_css():
    spec = FontSpec("Poppins", 48, bold=True, italic=True)
    assert spec.css() == 'italic bold 48px Poppins, system-ui, -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif'
    assert FontSpec("Inter", 120, weight=800).css().startswith("800 120px Inter, ")
    assert FontSpec("Lato", 14).css().startswith("14px Lato, ")


def test_font_resolver_finds_family_files(tmp_path):
    (tmp_path / "PlayfairDisplay-Bold.ttf").write_bytes(b"")
    resolver = FontResolver([str(tmp_path)])

    found = resolver.find_font_file(FontSpec("Playfair Display", 30, bold=True, italic=True))
    assert found == tmp_path / "PlayfairDisplay-Bold.ttf"
    assert resolver.find_font_file(FontSpec("Oswald", 30)) is None


def test_font_resolver_falls_back_for_broken_or_missing_fonts(tmp_path):
    (tmp_path / "Poppins-Regular.ttf").write_bytes(b"not a font")
    resolver = FontResolver([str(tmp_path)])

    for spec in (FontSpec("Poppins", 20), FontSpec("Bebas Neue", 20)):
        font = resolver.resolve(spec)
        assert font.getlength("Hello") > 0
