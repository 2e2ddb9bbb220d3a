from pathlib import Path
import numpy as np
import pytest
from PIL import Image as PILImage

from battery_icon.models.configuration import Configuration
from battery_icon.models.pixel_buffer import PixelBuffer

SIZE = 1024


def solid(width, height, rgba):
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:] = rgba
    return PixelBuffer(pixels)


def write_png(path: Path, pixels: np.ndarray) -> Path:
    PILImage.fromarray(pixels).save(path, format="PNG")
    return path


@pytest.fixture
def config():
    return Configuration()


@pytest.fixture
def transparent_canvas():
    return PixelBuffer.blank(SIZE, SIZE)


@pytest.fixture
def bolt_canvas():
    """White opaque canvas with a thin black bar standing in for the glyph."""
    canvas = solid(SIZE, SIZE, (255, 255, 255, 255))
    canvas.pixels[400:600, 500:520] = (0, 0, 0, 255)
    return canvas


@pytest.fixture
def bolt_png(tmp_path, bolt_canvas):
    return write_png(tmp_path / "bolt.png", bolt_canvas.pixels)
