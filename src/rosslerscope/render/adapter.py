"""
Render adapter.

Boundary between the reveal animation and whatever draws the curve. Turns
(trajectory, visible count, hue, frame index) into a DrawCall: one shared
vertex buffer, a draw range, a solid color and the scene rotation.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from rosslerscope.core.trajectory import Trajectory
from rosslerscope.render.colorgrade import hsl_to_rgb

logger = logging.getLogger(__name__)

ROTATION_PER_TICK = 0.001  # radians about +Y per rendered frame


def hue_to_rgb(
    hue: float, saturation: float = 1.0, lightness: float = 0.5
) -> Tuple[float, float, float]:
    """Line color for a hue in [0, 1)."""
    return hsl_to_rgb(hue, saturation, lightness)


@dataclass(frozen=True)
class DrawCall:
    """
    Everything the renderer needs for one frame.

    ``positions`` is the adapter's buffer, valid until the next ``prepare``;
    only the first ``draw_count`` rows are to be drawn.
    """
    positions: np.ndarray
    draw_count: int
    color: Tuple[float, float, float]
    rotation_y: float

    @property
    def visible_positions(self) -> np.ndarray:
        return self.positions[: self.draw_count]


class RenderAdapter:
    """
    Owns the single mutable draw buffer.

    The buffer is refilled only when a different trajectory arrives; reveal
    progress and hue come in as arguments every frame.
    """

    def __init__(
        self,
        saturation: float = 1.0,
        lightness: float = 0.5,
        rotation_per_tick: float = ROTATION_PER_TICK,
    ):
        self.saturation = saturation
        self.lightness = lightness
        self.rotation_per_tick = rotation_per_tick

        self.buffer: np.ndarray = np.zeros((0, 3), dtype=np.float32)
        self._source: Optional[Trajectory] = None
        self._drawable = 0

    def _load(self, trajectory: Trajectory):
        n = len(trajectory)
        if self.buffer.shape[0] != n:
            self.buffer = np.zeros((n, 3), dtype=np.float32)

        self._drawable = trajectory.drawable_length

        # Non-finite rows are never drawn; keep the buffer itself finite
        self.buffer[: self._drawable] = trajectory.points[: self._drawable]
        self.buffer[self._drawable:] = 0.0
        self._source = trajectory

        if self._drawable < n:
            logger.warning(
                "Trajectory %s is non-finite from point %d; drawing %d of %d points",
                trajectory.params, self._drawable, self._drawable, n,
            )

    def prepare(
        self,
        trajectory: Trajectory,
        visible_count: int,
        hue: float,
        frame_index: int,
    ) -> DrawCall:
        """
        Build the draw call for one frame.

        Args:
            trajectory: Currently installed trajectory.
            visible_count: Reveal prefix length.
            hue: Line hue in [0, 1).
            frame_index: Number of frames rendered so far; drives rotation.
        """
        if trajectory is not self._source:
            self._load(trajectory)

        draw_count = max(0, min(int(visible_count), self._drawable))
        return DrawCall(
            positions=self.buffer,
            draw_count=draw_count,
            color=hue_to_rgb(hue, self.saturation, self.lightness),
            rotation_y=frame_index * self.rotation_per_tick,
        )
