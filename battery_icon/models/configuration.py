from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
import os

from dotenv import load_dotenv

from .errors import InvalidArgumentError

# Load environment variables
load_dotenv()


class SilhouetteKind(Enum):
    SYNTHETIC = "synthetic"   # rounded rectangle + nub
    IMAGE = "image"           # flood-filled auxiliary image


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as err:
        raise InvalidArgumentError(f"Invalid {name}: {raw!r}") from err


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as err:
        raise InvalidArgumentError(f"Invalid {name}: {raw!r}") from err


@dataclass(frozen=True)
class Configuration:
    """
    Value-object threaded through every stage of a render run.
    Ratios are in [0, 1].
    """
    glyph_threshold: float = 0.40        # τ_g, luminance below this is glyph
    battery_alpha: float = 0.92          # α_b, opacity of the black container
    battery_image_path: Path | None = None
    battery_threshold: float = 0.80      # τ_bg, flood-fill background cutoff
    canvas_size: int = 1024

    def __post_init__(self):
        for name in ("glyph_threshold", "battery_alpha", "battery_threshold"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not 0.0 <= value <= 1.0:
                raise InvalidArgumentError(f"{name} must be within [0, 1], got {value!r}")
        if self.canvas_size <= 0:
            raise InvalidArgumentError(f"canvas_size must be positive, got {self.canvas_size}")
        if self.battery_image_path is not None and not isinstance(self.battery_image_path, Path):
            object.__setattr__(self, "battery_image_path", Path(self.battery_image_path))

    @property
    def silhouette_kind(self) -> SilhouetteKind:
        if self.battery_image_path is None:
            return SilhouetteKind.SYNTHETIC
        return SilhouetteKind.IMAGE

    @classmethod
    def from_env(cls) -> "Configuration":
        """Defaults overridable through the environment / a .env file."""
        image_path = os.getenv("BATTERY_IMAGE_PATH") or None
        return cls(
            glyph_threshold=_env_float("GLYPH_THRESHOLD", 0.40),
            battery_alpha=_env_float("BATTERY_ALPHA", 0.92),
            battery_image_path=Path(image_path) if image_path else None,
            battery_threshold=_env_float("BATTERY_THRESHOLD", 0.80),
            canvas_size=_env_int("ICON_CANVAS_SIZE", 1024),
        )

    def with_overrides(self, **changes) -> "Configuration":
        """New Configuration with the non-None `changes` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
