"""
Software polyline renderer.

Draws the revealed prefix of the attractor as a connected line seen through
an orbit camera. The curve is rasterized into a grayscale coverage mask with
PIL, tinted with the frame's single color, then bloomed and tone-mapped.
"""

import math
from typing import Iterator, Optional, Tuple

import numpy as np
from PIL import Image, ImageDraw

from rosslerscope.render.adapter import DrawCall
from rosslerscope.render.base import FramePolisher, SceneConfig
from rosslerscope.render.camera import OrbitControls


def rotate_y(points: np.ndarray, angle: float) -> np.ndarray:
    """Rotate (N, 3) points about +Y by ``angle`` radians."""
    ca, sa = math.cos(angle), math.sin(angle)
    rot = np.array(
        [[ca, 0.0, sa], [0.0, 1.0, 0.0], [-sa, 0.0, ca]], dtype=np.float64
    )
    return points.astype(np.float64) @ rot.T


def _visible_runs(mask: np.ndarray) -> Iterator[Tuple[int, int]]:
    """Yield [start, stop) ranges of consecutive True values."""
    if not len(mask):
        return
    padded = np.concatenate([[False], mask, [False]])
    edges = np.flatnonzero(np.diff(padded.astype(np.int8)))
    for start, stop in zip(edges[::2], edges[1::2]):
        yield int(start), int(stop)


class RasterRenderer:
    """
    Renders DrawCalls to RGB frames.

    Segments with an endpoint behind the camera's near plane are dropped,
    which splits the polyline into independently drawn runs.
    """

    def __init__(self, config: Optional[SceneConfig] = None):
        self.cfg = config or SceneConfig()
        self.polisher = FramePolisher(self.cfg)

    def coverage(self, draw_call: DrawCall, camera: OrbitControls) -> np.ndarray:
        """(H, W) float32 line coverage in [0, 1]."""
        W, H = self.cfg.width, self.cfg.height
        img = Image.new("L", (W, H), 0)

        pts = draw_call.visible_positions
        if len(pts) >= 2:
            world = rotate_y(pts, draw_call.rotation_y)
            x_px, y_px, visible = camera.project(world, W, H)
            draw = ImageDraw.Draw(img)
            for start, stop in _visible_runs(visible):
                if stop - start < 2:
                    continue
                xy = np.column_stack([x_px[start:stop], y_px[start:stop]])
                draw.line(
                    [tuple(p) for p in xy.tolist()],
                    fill=255,
                    width=self.cfg.line_width,
                )

        return np.asarray(img, dtype=np.float32) / 255.0

    def render(self, draw_call: DrawCall, camera: OrbitControls) -> np.ndarray:
        """
        Args:
            draw_call: Output of RenderAdapter.prepare.
            camera: Orbit camera (already updated for this frame).

        Returns:
            (H, W, 3) uint8 RGB frame.
        """
        mask = self.coverage(draw_call, camera)
        color = np.asarray(draw_call.color, dtype=np.float32) * self.cfg.line_brightness
        field = mask[:, :, np.newaxis] * color[np.newaxis, np.newaxis, :]
        return self.polisher.apply(field)
