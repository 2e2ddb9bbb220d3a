from pathlib import Path
from typing import Union
import logging

from ..models.pixel_buffer import PixelBuffer
from ..repositories.image_repository import ImageRepository

logger = logging.getLogger(__name__)


class ImageService:
    """I/O helpers.  No pixel analysis here."""

    def __init__(self):
        self.image_repository = ImageRepository()

    def load(self, path: Union[str, Path]) -> PixelBuffer:
        """Load a single image from disk as RGBA8."""
        return self.image_repository.load_rgba(path)

    def load_canvas(self, path: Union[str, Path], size: int) -> PixelBuffer:
        """
        Load the source art and scale it to fill a size x size canvas.
        """
        source = self.load(path)
        canvas = self.image_repository.resize(source, size, size)
        logger.info(f"Loaded {Path(path).name} ({source.width}x{source.height}) "
                    f"onto {size}x{size} canvas")
        return canvas

    def render_scratch(self, image: PixelBuffer, width: int, height: int) -> PixelBuffer:
        """Rasterise `image` into a fresh width x height scratch buffer."""
        return self.image_repository.resize(image, width, height)

    def save(self, buffer: PixelBuffer, path: Union[str, Path]) -> Path:
        """
        Business-level method to save the icon to a specific path.
        """
        out = self.image_repository.save_png(buffer, path)
        logger.info(f"Wrote {buffer.width}x{buffer.height} PNG to {out}")
        return out
