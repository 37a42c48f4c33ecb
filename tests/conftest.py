import io

import pytest
from PIL import Image

from poster_studio.fonts import FontResolver


@pytest.fixture
def resolver(tmp_path):
    # Empty font directory: every family falls back to a generic face
    return FontResolver([str(tmp_path)])


@pytest.fixture
def red_photo():
    return Image.new("RGB", (300, 100), "#ff0000")


@pytest.fixture
def png_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (40, 30), "#00ff00").save(buffer, format="PNG")
    return buffer.getvalue()
