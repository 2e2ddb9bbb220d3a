from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
import numpy as np

from .errors import BufferAllocationError


@dataclass
class PixelBuffer:
    """
    Simple data object: RGBA8 pixels, row-major.
    Owned by one pipeline stage at a time; stages mutate `pixels` in place.
    """
    pixels: np.ndarray  # Shape (H, W, 4), dtype uint8, RGBA order.

    def __post_init__(self):
        if not isinstance(self.pixels, np.ndarray):
            raise BufferAllocationError("PixelBuffer needs a numpy array")
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise BufferAllocationError(f"Expected (H, W, 4) pixels, got {self.pixels.shape}")
        if self.pixels.dtype != np.uint8:
            raise BufferAllocationError(f"Expected uint8 pixels, got {self.pixels.dtype}")
        if not self.pixels.flags['C_CONTIGUOUS']:
            self.pixels = np.ascontiguousarray(self.pixels)

    @classmethod
    def blank(cls, width: int, height: int) -> "PixelBuffer":
        """Fully transparent buffer."""
        if width <= 0 or height <= 0:
            raise BufferAllocationError(f"Invalid buffer size {width}x{height}")
        try:
            return cls(np.zeros((height, width, 4), dtype=np.uint8))
        except MemoryError as err:
            raise BufferAllocationError(f"Cannot allocate {width}x{height} buffer") from err

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def stride(self) -> int:
        """Bytes per row."""
        return self.pixels.strides[0]

    def _check(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} buffer")

    def get_pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        self._check(x, y)
        r, g, b, a = self.pixels[y, x]
        return int(r), int(g), int(b), int(a)

    def set_pixel(self, x: int, y: int, rgba: Tuple[int, int, int, int]) -> None:
        self._check(x, y)
        self.pixels[y, x] = rgba

    @property
    def rgb(self) -> np.ndarray:
        return self.pixels[:, :, :3]

    @property
    def alpha(self) -> np.ndarray:
        return self.pixels[:, :, 3]

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.pixels.copy())
