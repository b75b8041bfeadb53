"""
Color grading and post-processing.

Turns the line color into RGB, blooms the rasterized curve and compresses
highlights before the frame is quantized.
"""

import colorsys
from typing import Sequence, Tuple

import numpy as np
from scipy.ndimage import gaussian_filter


def hsl_to_rgb(
    hue: float,
    saturation: float = 1.0,
    lightness: float = 0.5,
) -> Tuple[float, float, float]:
    """
    HSL color to an RGB triple in [0, 1].

    Args:
        hue: Hue in [0, 1); wrapped if outside.
        saturation: HSL saturation (0-1).
        lightness: HSL lightness (0-1).
    """
    return colorsys.hls_to_rgb(hue % 1.0, lightness, saturation)


def multi_scale_bloom(
    field: np.ndarray,
    sigma: float = 2.0,
    weights: Sequence[float] = (0.7, 0.4, 0.15),
    scales: Sequence[float] = (1.0, 3.0, 8.0),
) -> np.ndarray:
    """
    Add stacked gaussian blurs of an HDR field onto itself.

    Tight core glow, mid halo and wide corona. Blurs are spatial only, the
    channel axis is left alone.

    Args:
        field: (H, W, 3) float32 linear RGB.
        sigma: Base blur radius in pixels.
        weights: Contribution of each blur layer.
        scales: Multiple of ``sigma`` for each blur layer.

    Returns:
        (H, W, 3) float32 composite.
    """
    if sigma <= 0:
        return field

    out = field.astype(np.float32, copy=True)
    for weight, scale in zip(weights, scales):
        s = sigma * scale
        out += weight * gaussian_filter(field, sigma=[s, s, 0])
    return out


def aces_tone_map(field: np.ndarray, exposure: float = 1.0) -> np.ndarray:
    """
    Hill ACES filmic approximation.

    Args:
        field: (H, W, 3) float linear RGB, unbounded.
        exposure: Multiplier applied before the curve.

    Returns:
        (H, W, 3) float32 in [0, 1].
    """
    x = field * exposure
    _a, _b, _c, _d, _e = 2.51, 0.03, 2.43, 0.59, 0.14
    return np.clip(
        (x * (_a * x + _b)) / (x * (_c * x + _d) + _e), 0.0, 1.0
    ).astype(np.float32)


def tone_map_soft(
    frame: np.ndarray,
    shoulder: float = 0.78,
) -> np.ndarray:
    """
    Soft-knee tone mapping to compress highlights without hard clipping.

    Pixels below ``shoulder`` (as a fraction of 255) pass through unchanged.
    Highlights above it are compressed via a Reinhard-style curve so they
    approach 255 instead of slamming into it.

    Args:
        frame: (H, W, 3) uint8 RGB array.
        shoulder: Brightness fraction (0-1) where compression begins.

    Returns:
        (H, W, 3) uint8 RGB array.
    """
    threshold = shoulder * 255.0
    headroom = 255.0 - threshold

    f = frame.astype(np.float32)
    above = np.maximum(f - threshold, 0.0)
    compressed = threshold + above * headroom / (above + headroom)

    result = np.where(f > threshold, compressed, f)
    return result.astype(np.uint8)


def vignette(
    frame: np.ndarray,
    strength: float = 0.4,
) -> np.ndarray:
    """
    Apply radial vignette darkening.

    Args:
        frame: (H, W, 3) uint8.
        strength: Vignette darkness (0 = none, 1 = full black at edges).

    Returns:
        (H, W, 3) uint8.
    """
    if strength <= 0:
        return frame

    h, w = frame.shape[:2]
    cy, cx = h / 2, w / 2
    max_r = np.sqrt(cx ** 2 + cy ** 2)

    y = np.arange(h, dtype=np.float32) - cy
    x = np.arange(w, dtype=np.float32) - cx
    xg, yg = np.meshgrid(x, y)
    r = np.sqrt(xg ** 2 + yg ** 2) / max_r

    vign = 1.0 - np.clip(r * strength, 0, 1) ** 2
    vign = vign[:, :, np.newaxis]

    return (frame.astype(np.float32) * vign).astype(np.uint8)
