"""
Icon Renderer Pipeline
Places a black battery silhouette behind the dark glyph of a source image.
Runs once, top to bottom, on a single canvas.
"""

from pathlib import Path
from typing import Union
import logging

from ..models.configuration import Configuration
from ..models.pixel_buffer import PixelBuffer
from ..services.compositor_service import Compositor
from ..services.image_service import ImageService
from ..services.region_service import RegionEstimator
from ..services.silhouette_service import SilhouetteMaskBuilder

logger = logging.getLogger(__name__)


def render_icon(
    canvas: PixelBuffer,
    config: Configuration,
    *,
    region_estimator: RegionEstimator = RegionEstimator(),
    mask_builder: SilhouetteMaskBuilder = SilhouetteMaskBuilder(),
    compositor: Compositor = Compositor(),
) -> PixelBuffer:
    """
    For the given canvas:
        • estimate the glyph region (or fall back to a centred one)
        • build the container mask around it
        • darken the non-glyph pixels under the mask
    The canvas is mutated in place and returned.
    """
    region = region_estimator.estimate(canvas, config)
    mask = mask_builder.build(region.rect, config, canvas.width, canvas.height)
    return compositor.composite(canvas, mask, config)


def render_icon_file(
    input_path: Union[str, Path],
    output_path: Union[str, Path],
    config: Configuration,
    *,
    image_service: ImageService = ImageService(),
    region_estimator: RegionEstimator = RegionEstimator(),
    mask_builder: SilhouetteMaskBuilder = SilhouetteMaskBuilder(),
    compositor: Compositor = Compositor(),
) -> Path:
    """
    Load → render → save. Nothing is written unless every step succeeds.

    Returns:
        Path: where the PNG was written.
    """
    canvas = image_service.load_canvas(input_path, config.canvas_size)
    icon = render_icon(canvas, config,
                       region_estimator=region_estimator,
                       mask_builder=mask_builder,
                       compositor=compositor)
    return image_service.save(icon, output_path)
