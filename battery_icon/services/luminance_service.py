import numpy as np

# Rec. 709 luma weights.
LUMA_R = 0.2126
LUMA_G = 0.7152
LUMA_B = 0.0722

OPACITY_CUTOFF = 0.5      # below this a pixel is ignored by glyph detection
ALPHA_EPSILON = 0.001     # "fully transparent" for blending and segmentation


class LuminanceAnalyzer:
    """
    Brightness helpers shared by every stage.
    Scalar methods work on one RGBA pixel; *_map methods on whole arrays.
    """

    @staticmethod
    def luminance(r: int, g: int, b: int) -> float:
        return LUMA_R * (r / 255.0) + LUMA_G * (g / 255.0) + LUMA_B * (b / 255.0)

    @staticmethod
    def luminance_map(pixels: np.ndarray) -> np.ndarray:
        """
        Args:
            pixels (np.ndarray): (H, W, 3|4) uint8, RGB(A) order.
        Returns:
            (np.ndarray): (H, W) float64 luminance in [0, 1].
        """
        rgb = pixels[..., :3].astype(np.float64) / 255.0
        return LUMA_R * rgb[..., 0] + LUMA_G * rgb[..., 1] + LUMA_B * rgb[..., 2]

    @classmethod
    def is_glyph_dark(cls, rgba, threshold: float) -> bool:
        r, g, b, a = rgba
        if a / 255.0 <= OPACITY_CUTOFF:
            return False
        return cls.luminance(r, g, b) < threshold

    @classmethod
    def glyph_dark_map(cls, pixels: np.ndarray, threshold: float) -> np.ndarray:
        """Boolean (H, W): sufficiently opaque and darker than `threshold`."""
        opaque = pixels[..., 3].astype(np.float64) / 255.0 > OPACITY_CUTOFF
        return opaque & (cls.luminance_map(pixels) < threshold)

    @staticmethod
    def visible_map(pixels: np.ndarray) -> np.ndarray:
        """Boolean (H, W): alpha above the transparency epsilon."""
        return pixels[..., 3].astype(np.float64) / 255.0 > ALPHA_EPSILON
