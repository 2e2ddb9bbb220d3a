from pathlib import Path
from typing import Union
import logging
import os
import tempfile
import numpy as np
import cv2
from PIL import Image as PILImage

from ..models.errors import BufferAllocationError, InputReadError, OutputWriteError
from ..models.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


class ImageRepository:
    """
    Handles file I/O and resampling for PixelBuffer entities.
    Decoding goes through OpenCV, PNG encoding through Pillow.
    """

    @staticmethod
    def _to_rgba8(arr: np.ndarray) -> np.ndarray:
        if arr.dtype == np.uint16:
            arr = (arr >> 8).astype(np.uint8)
        elif arr.dtype != np.uint8:
            arr = np.clip(arr, 0, 255).astype(np.uint8)

        if arr.ndim == 2:
            return cv2.cvtColor(arr, cv2.COLOR_GRAY2RGBA)
        channels = arr.shape[2]
        if channels == 1:
            return cv2.cvtColor(arr[:, :, 0], cv2.COLOR_GRAY2RGBA)
        if channels == 3:
            return cv2.cvtColor(arr, cv2.COLOR_BGR2RGBA)
        if channels == 4:
            return cv2.cvtColor(arr, cv2.COLOR_BGRA2RGBA)
        raise InputReadError(f"Unsupported channel count: {channels}")

    def load_rgba(self, path: Union[str, Path]) -> PixelBuffer:
        path = Path(path)
        if not path.is_file():
            raise InputReadError(f"Failed to read image at: {path}")

        arr = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
        if arr is None:
            raise InputReadError(f"Failed to read image at: {path}")

        logger.debug(f"Decoded {path.name}: shape={arr.shape} dtype={arr.dtype}")
        return PixelBuffer(np.ascontiguousarray(self._to_rgba8(arr)))

    @staticmethod
    def _resize_premultiplied(pixels: np.ndarray, width: int, height: int, interpolation) -> np.ndarray:
        """
        Resample with colour weighted by alpha so transparent pixels do not
        bleed their RGB into anti-aliased edges.
        """
        px = pixels.astype(np.float32)
        px[:, :, :3] *= px[:, :, 3:4] / 255.0
        out = np.clip(cv2.resize(px, (width, height), interpolation=interpolation), 0.0, 255.0)

        alpha = out[:, :, 3:4]
        rgb = np.where(alpha > 0.0, out[:, :, :3] * 255.0 / np.maximum(alpha, 1e-6), 0.0)
        out[:, :, :3] = np.clip(rgb, 0.0, 255.0)
        return np.rint(out).astype(np.uint8)

    @classmethod
    def resize(cls, buffer: PixelBuffer, width: int, height: int) -> PixelBuffer:
        """Scale to exactly width x height (aspect ratio not preserved)."""
        if width <= 0 or height <= 0:
            raise BufferAllocationError(f"Invalid target size {width}x{height}")
        if (buffer.width, buffer.height) == (width, height):
            return buffer.copy()

        shrinking = width < buffer.width and height < buffer.height
        interpolation = cv2.INTER_AREA if shrinking else cv2.INTER_CUBIC
        try:
            if (buffer.alpha == 255).all():
                out = cv2.resize(buffer.pixels, (width, height), interpolation=interpolation)
            else:
                out = cls._resize_premultiplied(buffer.pixels, width, height, interpolation)
        except (cv2.error, MemoryError) as err:
            raise BufferAllocationError(f"Cannot resample to {width}x{height}: {err}") from err
        return PixelBuffer(np.ascontiguousarray(out))

    @staticmethod
    def _default_file_mode() -> int:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask

    @classmethod
    def save_png(cls, buffer: PixelBuffer, path: Union[str, Path]) -> Path:
        """
        Encode as RGBA PNG. Parent directories are created; the file only
        appears once it has been fully written, with umask-based permissions.
        """
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise OutputWriteError(f"Failed to create directory {path.parent}: {err}") from err

        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}-", suffix=".png")
            with os.fdopen(fd, "wb") as fh:
                PILImage.fromarray(buffer.pixels).save(fh, format="PNG")
            # mkstemp creates the file owner-only
            os.chmod(tmp_name, cls._default_file_mode())
            os.replace(tmp_name, path)
        except (OSError, ValueError) as err:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise OutputWriteError(f"Failed to write PNG: {err}") from err

        return path
