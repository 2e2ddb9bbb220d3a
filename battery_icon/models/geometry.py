from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class BoundingBox:
    min_x: int  # inclusive
    min_y: int
    max_x: int  # inclusive
    max_y: int

    @property
    def is_degenerate(self) -> bool:
        return self.min_x >= self.max_x or self.min_y >= self.max_y

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def height(self) -> int:
        return self.max_y - self.min_y + 1


@dataclass(frozen=True)
class Rect:
    """Float rectangle in top-down canvas coordinates."""
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_box(cls, box: BoundingBox) -> "Rect":
        return cls(box.min_x, box.min_y, box.width, box.height)

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def mid_x(self) -> float:
        return self.x + self.width / 2.0

    @property
    def mid_y(self) -> float:
        return self.y + self.height / 2.0

    @property
    def area(self) -> float:
        return self.width * self.height

    def padded(self, pad: float) -> "Rect":
        return Rect(self.x - pad, self.y - pad, self.width + 2 * pad, self.height + 2 * pad)


@dataclass(frozen=True)
class RegionEstimate:
    rect: Rect                        # placement rectangle for the silhouette
    box: Optional[BoundingBox]        # raw glyph box, None when nothing qualified
    count: int                        # qualifying dark pixels
    dark_fraction: float              # count / sampled pixels
    fallback_reason: Optional[str] = None

    @property
    def used_fallback(self) -> bool:
        return self.fallback_reason is not None
