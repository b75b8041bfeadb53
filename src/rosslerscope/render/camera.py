"""
Orbit camera.

Spherical orbit around a target point with damped rotate and zoom, plus the
look-at view matrix and perspective projection the raster renderer uses.
Angles follow the y-up convention: ``theta`` is the azimuth around +Y,
``phi`` the polar angle from +Y.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

_EPS = 1e-6


@dataclass
class OrbitConfig:
    """Orbit control behaviour and initial camera placement."""
    position: Tuple[float, float, float] = (25.0, 25.0, 25.0)
    target: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    enable_damping: bool = True
    damping_factor: float = 0.05
    rotate_speed: float = 0.5
    zoom_speed: float = 0.8
    min_distance: float = 2.0
    max_distance: float = 400.0
    fov: float = 50.0     # vertical field of view, degrees
    near: float = 0.1
    far: float = 1000.0

    def __post_init__(self):
        if not 0.0 < self.damping_factor <= 1.0:
            raise ValueError(f"damping_factor must be in (0, 1], got {self.damping_factor}")
        if self.min_distance <= 0 or self.max_distance < self.min_distance:
            raise ValueError("distance limits must satisfy 0 < min_distance <= max_distance")


class OrbitControls:
    """
    Mouse-driven orbit around ``target``.

    ``rotate`` and ``zoom`` only accumulate input; ``update`` (once per frame)
    applies it. With damping, each update applies ``delta * damping_factor``
    and keeps the rest, so motion eases out over the following frames.
    """

    def __init__(self, config: Optional[OrbitConfig] = None):
        self.cfg = config or OrbitConfig()
        self.target = np.asarray(self.cfg.target, dtype=np.float64)
        offset = np.asarray(self.cfg.position, dtype=np.float64) - self.target

        self.radius = float(np.linalg.norm(offset))
        self.theta = math.atan2(offset[0], offset[2])
        self.phi = math.acos(np.clip(offset[1] / max(self.radius, _EPS), -1.0, 1.0))

        self._d_theta = 0.0
        self._d_phi = 0.0
        self._scale = 1.0

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def rotate(self, dx: float, dy: float, viewport_height: int):
        """Drag by (dx, dy) pixels; a full-height drag turns 2*pi*rotate_speed."""
        k = 2.0 * math.pi * self.cfg.rotate_speed / max(viewport_height, 1)
        self._d_theta -= dx * k
        self._d_phi -= dy * k

    def zoom(self, steps: float):
        """Wheel steps; positive zooms in."""
        factor = 0.95 ** self.cfg.zoom_speed
        self._scale *= factor ** steps

    # ------------------------------------------------------------------
    # Per-frame
    # ------------------------------------------------------------------

    def update(self):
        damping = self.cfg.damping_factor if self.cfg.enable_damping else 1.0

        self.theta += self._d_theta * damping
        self.phi += self._d_phi * damping
        self.phi = min(max(self.phi, _EPS), math.pi - _EPS)

        self.radius *= self._scale
        self.radius = min(max(self.radius, self.cfg.min_distance), self.cfg.max_distance)
        self._scale = 1.0

        if self.cfg.enable_damping:
            self._d_theta *= 1.0 - damping
            self._d_phi *= 1.0 - damping
        else:
            self._d_theta = 0.0
            self._d_phi = 0.0

    @property
    def position(self) -> np.ndarray:
        sin_phi = math.sin(self.phi)
        offset = np.array([
            self.radius * sin_phi * math.sin(self.theta),
            self.radius * math.cos(self.phi),
            self.radius * sin_phi * math.cos(self.theta),
        ])
        return self.target + offset

    # ------------------------------------------------------------------
    # Projection
    # ------------------------------------------------------------------

    def view_matrix(self) -> np.ndarray:
        """3x4 world-to-camera transform; the camera looks down -Z."""
        eye = self.position
        forward = self.target - eye
        forward /= np.linalg.norm(forward)
        right = np.cross(forward, np.array([0.0, 1.0, 0.0]))
        right /= max(np.linalg.norm(right), _EPS)
        up = np.cross(right, forward)

        rot = np.stack([right, up, -forward])
        return np.hstack([rot, (-rot @ eye)[:, np.newaxis]])

    def project(
        self, points: np.ndarray, width: int, height: int
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        World points to pixel coordinates.

        Args:
            points: (N, 3) world coordinates.
            width, height: Viewport size in pixels.

        Returns:
            x_px, y_px: float64 pixel coordinates.
            visible: bool mask, False for points outside the near/far range.
        """
        view = self.view_matrix()
        cam = points @ view[:, :3].T + view[:, 3]
        depth = -cam[:, 2]
        visible = (depth > self.cfg.near) & (depth < self.cfg.far)

        f = 1.0 / math.tan(math.radians(self.cfg.fov) / 2.0)
        safe_depth = np.where(visible, depth, 1.0)
        ndc_x = f * cam[:, 0] / (safe_depth * (width / height))
        ndc_y = f * cam[:, 1] / safe_depth

        x_px = (ndc_x + 1.0) * 0.5 * width
        y_px = (1.0 - ndc_y) * 0.5 * height  # flip Y for screen coords
        return x_px, y_px, visible
