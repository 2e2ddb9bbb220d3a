from __future__ import annotations
import logging
import numpy as np

from ..models.pixel_buffer import PixelBuffer
from .luminance_service import LuminanceAnalyzer

logger = logging.getLogger(__name__)

MIN_BACKGROUND_DELTA = 0.05


def flood_fill(candidates: np.ndarray, seeds) -> np.ndarray:
    """
    4-connected flood fill over `candidates` starting from `seeds`.

    Uses an explicit stack and a visited map, so every pixel is pushed at
    most once and the stack never holds more than H*W entries.

    Args:
        candidates (np.ndarray): (H, W) bool, pixels the fill may enter.
        seeds: iterable of (x, y).
    Returns:
        (np.ndarray): (H, W) bool, pixels reached.
    """
    h, w = candidates.shape
    allowed = candidates.ravel().tolist()
    visited = bytearray(h * w)
    stack = []

    def push(x, y):
        if x < 0 or x >= w or y < 0 or y >= h:
            return
        p = y * w + x
        if visited[p] or not allowed[p]:
            return
        visited[p] = 1
        stack.append(p)

    for x, y in seeds:
        push(x, y)

    while stack:
        p = stack.pop()
        y, x = divmod(p, w)
        push(x + 1, y)
        push(x - 1, y)
        push(x, y + 1)
        push(x, y - 1)

    return np.frombuffer(bytes(visited), dtype=np.uint8).reshape(h, w).astype(bool)


class BackgroundSegmenter:
    """
    Separates an auxiliary silhouette from its own background.

    • Background luminance is estimated from the four corners.
    • Bright-enough opaque pixels are background candidates.
    • Only candidates connected to a corner are background; bright regions
      enclosed by the silhouette stay foreground.
    """

    def __init__(self, analyzer: LuminanceAnalyzer | None = None):
        self.analyzer = analyzer or LuminanceAnalyzer()

    @staticmethod
    def corners(width: int, height: int):
        return [(0, 0), (width - 1, 0), (0, height - 1), (width - 1, height - 1)]

    def background_cutoff(self, scratch: PixelBuffer, battery_threshold: float) -> float:
        corner_lums = [self.analyzer.luminance(*scratch.get_pixel(x, y)[:3])
                       for x, y in self.corners(scratch.width, scratch.height)]
        bg_lum = sum(corner_lums) / len(corner_lums)
        delta = max(MIN_BACKGROUND_DELTA, 1.0 - battery_threshold)
        return max(0.0, bg_lum - delta)

    def background_like(self, scratch: PixelBuffer, cutoff: float) -> np.ndarray:
        visible = self.analyzer.visible_map(scratch.pixels)
        return visible & (self.analyzer.luminance_map(scratch.pixels) >= cutoff)

    def background_map(self, scratch: PixelBuffer, battery_threshold: float) -> np.ndarray:
        """(H, W) bool: pixels confirmed as background."""
        cutoff = self.background_cutoff(scratch, battery_threshold)
        candidates = self.background_like(scratch, cutoff)
        background = flood_fill(candidates, self.corners(scratch.width, scratch.height))
        logger.debug(f"Background cutoff={cutoff:.3f} candidates={int(candidates.sum())} "
                     f"filled={int(background.sum())}")
        return background

    def foreground_alpha(self, scratch: PixelBuffer, battery_threshold: float) -> np.ndarray:
        """
        Returns uint8 (H, W): the scratch alpha on silhouette pixels, 0 elsewhere.
        """
        background = self.background_map(scratch, battery_threshold)
        foreground = self.analyzer.visible_map(scratch.pixels) & ~background
        return np.where(foreground, scratch.alpha, 0).astype(np.uint8)
