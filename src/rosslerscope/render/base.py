"""
Scene configuration and the universal finishing pass.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from rosslerscope.render.colorgrade import (
    aces_tone_map,
    multi_scale_bloom,
    tone_map_soft,
    vignette,
)


@dataclass
class SceneConfig:
    """Frame size and look of the rendered scene."""
    width: int = 1280
    height: int = 720
    fps: int = 60

    background: Tuple[int, int, int] = (5, 5, 15)
    line_width: int = 2
    line_brightness: float = 1.2      # HDR multiplier on the line color
    line_saturation: float = 1.0
    line_lightness: float = 0.5

    # Post-processing
    glow_enabled: bool = True
    glow_radius: float = 2.0          # base sigma of the bloom pyramid
    tone_map: str = "aces"            # "aces" or "soft"
    vignette_strength: float = 0.3

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Frame size must be positive, got {self.width}x{self.height}")
        if self.fps <= 0:
            raise ValueError(f"fps must be positive, got {self.fps}")
        if self.tone_map not in ("aces", "soft"):
            raise ValueError(f"tone_map must be 'aces' or 'soft', got {self.tone_map!r}")


class FramePolisher:
    """
    Turns the linear HDR line field into a finished uint8 frame.

    bloom -> tone map -> composite over background -> vignette
    """

    def __init__(self, config: SceneConfig):
        self.cfg = config

    def apply(self, field: np.ndarray) -> np.ndarray:
        """
        Args:
            field: (H, W, 3) float32 linear RGB of the curve on black.

        Returns:
            (H, W, 3) uint8 RGB frame.
        """
        if self.cfg.glow_enabled:
            field = multi_scale_bloom(field, sigma=self.cfg.glow_radius)

        if self.cfg.tone_map == "aces":
            mapped = aces_tone_map(field)
        else:
            mapped = np.clip(field, 0.0, None)

        bg = np.asarray(self.cfg.background, dtype=np.float32) / 255.0
        # Screen blend keeps the dark background under faint glow
        out = 1.0 - (1.0 - bg) * (1.0 - np.clip(mapped, 0.0, 1.0))
        frame = (out * 255.0).astype(np.uint8)

        if self.cfg.tone_map == "soft":
            frame = tone_map_soft(frame)

        return vignette(frame, strength=self.cfg.vignette_strength)
