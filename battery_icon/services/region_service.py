from __future__ import annotations
import logging
import numpy as np

from ..models.configuration import Configuration
from ..models.geometry import BoundingBox, Rect, RegionEstimate
from ..models.pixel_buffer import PixelBuffer
from .luminance_service import LuminanceAnalyzer

logger = logging.getLogger(__name__)

INSET_FRACTION = 0.18          # scan only the central 64 % x 64 %
MIN_GLYPH_PIXELS = 500
MAX_DARK_FRACTION = 0.06
PAD_FRACTION = 0.02
MAX_BOX_AREA_FRACTION = 0.25

# Fallback placement, as fractions of the canvas.
FALLBACK_X, FALLBACK_W = 0.34, 0.32
FALLBACK_Y, FALLBACK_H = 0.24, 0.52


class RegionEstimator:
    """
    Finds the glyph (dark pixels) in the middle of the canvas and decides
    where the container silhouette should be centred.
    """

    def __init__(self, analyzer: LuminanceAnalyzer | None = None):
        self.analyzer = analyzer or LuminanceAnalyzer()

    @staticmethod
    def fallback_rect(width: int, height: int) -> Rect:
        return Rect(width * FALLBACK_X, height * FALLBACK_Y,
                    width * FALLBACK_W, height * FALLBACK_H)

    def scan(self, buffer: PixelBuffer, threshold: float):
        """
        Returns:
            (box, count, sampled): BoundingBox of the qualifying pixels
            (None if there are none), their count and the number of pixels scanned.
        """
        w, h = buffer.width, buffer.height
        x0, x1 = int(w * INSET_FRACTION), w - int(w * INSET_FRACTION)
        y0, y1 = int(h * INSET_FRACTION), h - int(h * INSET_FRACTION)
        sampled = max(0, x1 - x0) * max(0, y1 - y0)
        if sampled == 0:
            return None, 0, 0

        dark = self.analyzer.glyph_dark_map(buffer.pixels[y0:y1, x0:x1], threshold)
        count = int(np.count_nonzero(dark))
        if count == 0:
            return None, 0, sampled

        ys, xs = np.nonzero(dark)
        box = BoundingBox(int(xs.min()) + x0, int(ys.min()) + y0,
                          int(xs.max()) + x0, int(ys.max()) + y0)
        return box, count, sampled

    def estimate(self, buffer: PixelBuffer, config: Configuration) -> RegionEstimate:
        box, count, sampled = self.scan(buffer, config.glyph_threshold)
        dark_fraction = count / sampled if sampled > 0 else 1.0
        logger.debug(f"Glyph scan: box={box} count={count} sampled={sampled} "
                     f"dark_fraction={dark_fraction:.4f}")

        fallback = self.fallback_rect(buffer.width, buffer.height)

        def _fallback(reason: str) -> RegionEstimate:
            logger.info(f"Using fallback region ({reason})")
            return RegionEstimate(fallback, box, count, dark_fraction, reason)

        if count < MIN_GLYPH_PIXELS:
            return _fallback("too_few_pixels")
        if box is None or box.is_degenerate:
            return _fallback("degenerate_box")

        # Lots of dark pixels means complex art, not a thin glyph.
        if dark_fraction > MAX_DARK_FRACTION:
            return _fallback("dark_fraction")

        pad = min(buffer.width, buffer.height) * PAD_FRACTION
        rect = Rect.from_box(box).padded(pad)
        if rect.area / sampled > MAX_BOX_AREA_FRACTION:
            return _fallback("box_too_large")

        logger.info(f"Glyph region detected: x={rect.x:.1f} y={rect.y:.1f} "
                    f"w={rect.width:.1f} h={rect.height:.1f} ({count} px)")
        return RegionEstimate(rect, box, count, dark_fraction)
