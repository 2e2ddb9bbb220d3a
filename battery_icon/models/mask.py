from __future__ import annotations
from dataclasses import dataclass
import numpy as np

from .errors import BufferAllocationError


@dataclass
class Mask:
    """
    Alpha-only coverage of the container silhouette.
    0 = nothing to paint, 255 = full coverage.
    """
    alpha: np.ndarray  # Shape (H, W), dtype uint8.

    def __post_init__(self):
        if not isinstance(self.alpha, np.ndarray) or self.alpha.ndim != 2:
            raise BufferAllocationError("Mask needs a 2-D numpy array")
        if self.alpha.dtype != np.uint8:
            raise BufferAllocationError(f"Expected uint8 mask, got {self.alpha.dtype}")

    @classmethod
    def empty(cls, width: int, height: int) -> "Mask":
        if width <= 0 or height <= 0:
            raise BufferAllocationError(f"Invalid mask size {width}x{height}")
        try:
            return cls(np.zeros((height, width), dtype=np.uint8))
        except MemoryError as err:
            raise BufferAllocationError(f"Cannot allocate {width}x{height} mask") from err

    @property
    def width(self) -> int:
        return self.alpha.shape[1]

    @property
    def height(self) -> int:
        return self.alpha.shape[0]

    def coverage_at(self, x: int, y: int) -> float:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Mask cell ({x}, {y}) outside {self.width}x{self.height} mask")
        return float(self.alpha[y, x]) / 255.0

    def coverage(self) -> np.ndarray:
        """Float coverage map in [0, 1]."""
        return self.alpha.astype(np.float64) / 255.0

    def merge_max(self, patch: np.ndarray, ox: int, oy: int) -> None:
        """
        Write `patch` with its top-left corner at (ox, oy), clipped to the
        mask. Existing values are only ever raised.
        """
        ph, pw = patch.shape[:2]
        x0, y0 = max(0, ox), max(0, oy)
        x1, y1 = min(self.width, ox + pw), min(self.height, oy + ph)
        if x0 >= x1 or y0 >= y1:
            return
        src = patch[y0 - oy:y1 - oy, x0 - ox:x1 - ox]
        dst = self.alpha[y0:y1, x0:x1]
        np.maximum(dst, src, out=dst)

    def painted_fraction(self) -> float:
        return float(np.count_nonzero(self.alpha)) / self.alpha.size
