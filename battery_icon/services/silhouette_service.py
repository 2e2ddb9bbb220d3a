from __future__ import annotations
import logging
import math
import numpy as np
import cv2

from ..models.configuration import Configuration, SilhouetteKind
from ..models.geometry import Rect
from ..models.mask import Mask
from .image_service import ImageService
from .segmentation_service import BackgroundSegmenter

logger = logging.getLogger(__name__)

# ── Synthetic battery proportions (empirically tuned) ───────────────
BODY_MAX_W, BODY_SCALE_W = 0.72, 1.55
BODY_MAX_H, BODY_SCALE_H = 0.80, 1.85
BODY_DROP = 0.06               # downward shift, fraction of body height
CORNER_RADIUS = 0.14           # fraction of min(body w, body h)
NUB_W, NUB_H = 0.28, 0.10      # fractions of body w / h
NUB_RADIUS = 0.5               # fraction of the body corner radius
NUB_OVERLAP = 0.15             # fraction of nub height inside the body

# ── Image-derived silhouette fit ────────────────────────────────────
IMAGE_MAX_EXTENT = 0.80        # fraction of canvas
IMAGE_SCALE_W = 1.60           # relative to region width
IMAGE_MIN_H = 0.52             # relative to region height
IMAGE_LIFT = 0.05              # upward shift, fraction of draw height


def _round_half_away(v: float) -> int:
    return int(math.floor(abs(v) + 0.5)) * (1 if v >= 0 else -1)


def fill_rounded_rect(alpha: np.ndarray, rect: Rect, radius: float, value: int = 255) -> None:
    """Rasterise a filled rounded rectangle into a (H, W) uint8 array in place."""
    x0, y0 = _round_half_away(rect.x), _round_half_away(rect.y)
    x1, y1 = _round_half_away(rect.max_x) - 1, _round_half_away(rect.max_y) - 1
    if x1 < x0 or y1 < y0:
        return

    r = max(0, int(min(radius, (x1 - x0 + 1) / 2.0, (y1 - y0 + 1) / 2.0)))
    cv2.rectangle(alpha, (x0 + r, y0), (x1 - r, y1), value, thickness=-1)
    cv2.rectangle(alpha, (x0, y0 + r), (x1, y1 - r), value, thickness=-1)
    if r > 0:
        for cx, cy in ((x0 + r, y0 + r), (x1 - r, y0 + r), (x0 + r, y1 - r), (x1 - r, y1 - r)):
            cv2.circle(alpha, (cx, cy), r, value, thickness=-1, lineType=cv2.LINE_AA)


class SyntheticSilhouette:
    """Rounded battery body with a terminal nub on top."""

    kind = SilhouetteKind.SYNTHETIC

    @staticmethod
    def shapes(region: Rect, width: int, height: int):
        """
        Returns:
            (body, body_radius, nub, nub_radius) in canvas coordinates.
        """
        body_w = min(width * BODY_MAX_W, region.width * BODY_SCALE_W)
        body_h = min(height * BODY_MAX_H, region.height * BODY_SCALE_H)
        radius = min(body_w, body_h) * CORNER_RADIUS
        body = Rect(region.mid_x - body_w / 2.0,
                    region.mid_y - body_h / 2.0 + body_h * BODY_DROP,
                    body_w, body_h)

        nub_w, nub_h = body_w * NUB_W, body_h * NUB_H
        nub = Rect(region.mid_x - nub_w / 2.0,
                   body.y - nub_h * (1.0 - NUB_OVERLAP),
                   nub_w, nub_h)
        return body, radius, nub, radius * NUB_RADIUS

    def build(self, region: Rect, config: Configuration, width: int, height: int) -> Mask:
        mask = Mask.empty(width, height)
        body, radius, nub, nub_radius = self.shapes(region, width, height)
        fill_rounded_rect(mask.alpha, body, radius)
        fill_rounded_rect(mask.alpha, nub, nub_radius)
        logger.debug(f"Synthetic body={body} nub={nub} radius={radius:.1f}")
        return mask


class ImageSilhouette:
    """
    Battery outline taken from an auxiliary image: the image is fitted
    around the glyph region and its background removed by a corner flood fill.
    """

    kind = SilhouetteKind.IMAGE

    def __init__(self, image_service: ImageService | None = None,
                 segmenter: BackgroundSegmenter | None = None):
        self.image_service = image_service or ImageService()
        self.segmenter = segmenter or BackgroundSegmenter()

    @staticmethod
    def fit(region: Rect, image_w: int, image_h: int, width: int, height: int) -> Rect:
        max_w, max_h = width * IMAGE_MAX_EXTENT, height * IMAGE_MAX_EXTENT
        aspect = image_w / image_h if image_w > 0 and image_h > 0 else 1.0

        draw_w = min(max_w, region.width * IMAGE_SCALE_W)
        draw_h = draw_w / max(0.0001, aspect)
        min_h = min(max_h, region.height * IMAGE_MIN_H)
        if draw_h < min_h:
            draw_h = min_h
            draw_w = min(max_w, draw_h * aspect)

        return Rect(region.mid_x - draw_w / 2.0,
                    region.mid_y - draw_h / 2.0 - draw_h * IMAGE_LIFT,
                    draw_w, draw_h)

    def build(self, region: Rect, config: Configuration, width: int, height: int) -> Mask:
        mask = Mask.empty(width, height)

        source = self.image_service.load(config.battery_image_path)
        draw = self.fit(region, source.width, source.height, width, height)
        bw = max(1, _round_half_away(draw.width))
        bh = max(1, _round_half_away(draw.height))
        scratch = self.image_service.render_scratch(source, bw, bh)

        foreground = self.segmenter.foreground_alpha(scratch, config.battery_threshold)
        mask.merge_max(foreground, int(math.floor(draw.x)), int(math.floor(draw.y)))
        logger.debug(f"Battery image fitted to {bw}x{bh} at ({draw.x:.1f}, {draw.y:.1f})")
        return mask


class SilhouetteMaskBuilder:
    """
    Picks the silhouette variant once from the Configuration and builds
    a width x height container mask around the estimated region.
    """

    def __init__(self, image_service: ImageService | None = None,
                 segmenter: BackgroundSegmenter | None = None):
        self.variants = {
            SilhouetteKind.SYNTHETIC: SyntheticSilhouette(),
            SilhouetteKind.IMAGE: ImageSilhouette(image_service, segmenter),
        }

    def build(self, region: Rect, config: Configuration, width: int, height: int) -> Mask:
        variant = self.variants[config.silhouette_kind]
        mask = variant.build(region, config, width, height)
        logger.info(f"Built {variant.kind.value} silhouette mask "
                    f"({mask.painted_fraction():.1%} of canvas)")
        return mask
