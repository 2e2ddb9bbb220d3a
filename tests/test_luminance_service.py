import numpy as np
import pytest

from battery_icon.services.luminance_service import LuminanceAnalyzer


def test_luminance_weights():
    assert LuminanceAnalyzer.luminance(255, 255, 255) == pytest.approx(1.0)
    assert LuminanceAnalyzer.luminance(0, 0, 0) == 0.0
    assert LuminanceAnalyzer.luminance(255, 0, 0) == pytest.approx(0.2126)
    assert LuminanceAnalyzer.luminance(0, 255, 0) == pytest.approx(0.7152)
    assert LuminanceAnalyzer.luminance(0, 0, 255) == pytest.approx(0.0722)


def test_half_transparent_pixels_are_ignored():
    assert not LuminanceAnalyzer.is_glyph_dark((0, 0, 0, 127), 0.4)
    assert LuminanceAnalyzer.is_glyph_dark((0, 0, 0, 128), 0.4)


def test_threshold_is_strict():
    # pure red sits at 0.2126
    assert not LuminanceAnalyzer.is_glyph_dark((255, 0, 0, 255), 0.2126 * 0.999)
    assert LuminanceAnalyzer.is_glyph_dark((255, 0, 0, 255), 0.25)


def test_maps_agree_with_scalar_version():
    rng = np.random.default_rng(7)
    pixels = rng.integers(0, 256, size=(16, 16, 4), dtype=np.uint8)
    lum = LuminanceAnalyzer.luminance_map(pixels)
    dark = LuminanceAnalyzer.glyph_dark_map(pixels, 0.4)
    for y in range(16):
        for x in range(16):
            r, g, b, a = (int(v) for v in pixels[y, x])
            assert lum[y, x] == LuminanceAnalyzer.luminance(r, g, b)
            assert dark[y, x] == LuminanceAnalyzer.is_glyph_dark((r, g, b, a), 0.4)


def test_visible_map():
    pixels = np.zeros((1, 3, 4), dtype=np.uint8)
    pixels[0, :, 3] = (0, 1, 255)
    assert LuminanceAnalyzer.visible_map(pixels).tolist() == [[False, True, True]]
