from __future__ import annotations
import logging
import numpy as np

from ..models.configuration import Configuration
from ..models.errors import InvalidArgumentError
from ..models.mask import Mask
from ..models.pixel_buffer import PixelBuffer
from .luminance_service import ALPHA_EPSILON, LuminanceAnalyzer

logger = logging.getLogger(__name__)


class Compositor:
    """
    Paints a black, variably opaque container behind the glyph.

    • Glyph pixels (luminance below the threshold) are never touched.
    • Transparent pixels are never touched.
    • Alpha is kept; only RGB is scaled toward black.
    """

    def __init__(self, analyzer: LuminanceAnalyzer | None = None):
        self.analyzer = analyzer or LuminanceAnalyzer()

    def paint_map(self, buffer: PixelBuffer, mask: Mask, config: Configuration):
        """
        Returns:
            (paint, strength): bool (H, W) of pixels to darken and the
            float (H, W) blend factor m.
        """
        coverage = mask.coverage()
        strength = np.clip(coverage * config.battery_alpha, 0.0, 1.0)

        visible = self.analyzer.visible_map(buffer.pixels)
        glyph = self.analyzer.luminance_map(buffer.pixels) < config.glyph_threshold
        paint = visible & ~glyph & (coverage > ALPHA_EPSILON) & (strength > ALPHA_EPSILON)
        return paint, strength

    def composite(self, buffer: PixelBuffer, mask: Mask, config: Configuration) -> PixelBuffer:
        """Blend `mask` into `buffer` in place and return it."""
        if (mask.width, mask.height) != (buffer.width, buffer.height):
            raise InvalidArgumentError(f"Mask {mask.width}x{mask.height} does not match "
                             f"buffer {buffer.width}x{buffer.height}")

        paint, strength = self.paint_map(buffer, mask, config)
        if not paint.any():
            logger.info("Compositor: nothing to paint")
            return buffer

        rgb = buffer.pixels[:, :, :3]
        inv = (1.0 - strength[paint])[:, None]
        rgb[paint] = (rgb[paint].astype(np.float64) * inv).astype(np.uint8)

        logger.info(f"Compositor: darkened {int(paint.sum())} pixels")
        return buffer
