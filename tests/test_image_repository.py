import os
import stat

import numpy as np
import pytest
from PIL import Image as PILImage

from battery_icon.models.errors import InputReadError, OutputWriteError
from battery_icon.repositories.image_repository import ImageRepository
from battery_icon.services.image_service import ImageService

from .conftest import solid, write_png


def test_load_rgba_keeps_channels(tmp_path):
    pixels = np.zeros((4, 6, 4), dtype=np.uint8)
    pixels[..., 0] = 10
    pixels[..., 1] = 20
    pixels[..., 2] = 30
    pixels[..., 3] = 40
    buf = ImageRepository().load_rgba(write_png(tmp_path / "a.png", pixels))
    assert (buf.width, buf.height) == (6, 4)
    assert buf.get_pixel(0, 0) == (10, 20, 30, 40)


def test_load_rgb_gets_opaque_alpha(tmp_path):
    path = tmp_path / "rgb.png"
    PILImage.new("RGB", (3, 2), (1, 2, 3)).save(path)
    buf = ImageRepository().load_rgba(path)
    assert buf.get_pixel(2, 1) == (1, 2, 3, 255)


def test_load_grayscale(tmp_path):
    path = tmp_path / "gray.png"
    PILImage.new("L", (3, 2), 77).save(path)
    assert ImageRepository().load_rgba(path).get_pixel(0, 0) == (77, 77, 77, 255)


def test_load_missing_file(tmp_path):
    with pytest.raises(InputReadError, match="Failed to read image"):
        ImageRepository().load_rgba(tmp_path / "nope.png")


def test_load_undecodable_file(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"definitely not a png")
    with pytest.raises(InputReadError):
        ImageRepository().load_rgba(path)


def test_resize_to_exact_size():
    out = ImageRepository.resize(solid(10, 20, (9, 9, 9, 255)), 7, 3)
    assert (out.width, out.height) == (7, 3)
    assert out.get_pixel(3, 1) == (9, 9, 9, 255)


def test_save_png_creates_directories(tmp_path):
    target = tmp_path / "a" / "b" / "icon.png"
    ImageRepository.save_png(solid(5, 5, (1, 2, 3, 4)), target)
    with PILImage.open(target) as im:
        assert im.mode == "RGBA"
        assert im.getpixel((0, 0)) == (1, 2, 3, 4)
    assert [p.name for p in target.parent.iterdir()] == ["icon.png"]


def test_save_png_reports_write_failure(tmp_path):
    blocker = tmp_path / "file.txt"
    blocker.write_text("x")
    with pytest.raises(OutputWriteError):
        ImageRepository.save_png(solid(2, 2, (0, 0, 0, 0)), blocker / "icon.png")


def test_load_canvas_fills_square(tmp_path):
    path = write_png(tmp_path / "wide.png", np.full((10, 40, 4), 200, dtype=np.uint8))
    canvas = ImageService().load_canvas(path, 64)
    assert (canvas.width, canvas.height) == (64, 64)
    assert canvas.get_pixel(63, 63) == (200, 200, 200, 200)


def test_saved_png_follows_umask(tmp_path):
    target = tmp_path / "icon.png"
    previous = os.umask(0o022)
    try:
        ImageRepository.save_png(solid(2, 2, (0, 0, 0, 255)), target)
    finally:
        os.umask(previous)
    assert stat.S_IMODE(target.stat().st_mode) == 0o644


def test_resize_does_not_bleed_transparent_colour():
    buf = solid(4, 4, (0, 0, 0, 0))
    buf.pixels[:, :2] = (255, 255, 255, 255)
    out = ImageRepository.resize(buf, 1, 1)
    r, g, b, a = out.get_pixel(0, 0)
    assert (r, g, b) == (255, 255, 255)
    assert a in (127, 128)


def test_resize_keeps_uniform_translucent_colour():
    out = ImageRepository.resize(solid(10, 10, (200, 100, 50, 200)), 25, 25)
    assert out.get_pixel(12, 12) == (200, 100, 50, 200)
