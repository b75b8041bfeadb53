"""
Host loop for the Rössler visualization.

Wires the parameter session, trajectory cache, reveal controller, render
adapter, orbit camera and raster renderer together. The host (the pygame
preview or the offline exporter) calls ``tick`` or ``render_frame`` once per
frame; everything runs on that one thread.
"""

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional

import numpy as np

from rosslerscope.core.reveal import RevealConfig, RevealController
from rosslerscope.core.session import ParamEvent, ParameterSession, SessionConfig
from rosslerscope.core.trajectory import (
    DT,
    NUM_POINTS,
    TRANSIENT_STEPS,
    Parameters,
    Trajectory,
    TrajectoryCache,
)
from rosslerscope.render.adapter import DrawCall, RenderAdapter
from rosslerscope.render.base import SceneConfig
from rosslerscope.render.camera import OrbitConfig, OrbitControls
from rosslerscope.render.raster import RasterRenderer

logger = logging.getLogger(__name__)


@dataclass
class AppConfig:
    """Top-level configuration; each component keeps its own section."""
    scene: SceneConfig = field(default_factory=SceneConfig)
    reveal: RevealConfig = field(default_factory=RevealConfig)
    orbit: OrbitConfig = field(default_factory=OrbitConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    initial: Optional[Parameters] = None   # starting parameters; reset still uses session defaults

    num_points: int = NUM_POINTS
    transient_steps: int = TRANSIENT_STEPS
    dt: float = DT

    def __post_init__(self):
        if self.num_points < 0:
            raise ValueError(f"num_points must be >= 0, got {self.num_points}")
        if self.transient_steps < 0:
            raise ValueError(f"transient_steps must be >= 0, got {self.transient_steps}")
        if not (math.isfinite(self.dt) and self.dt > 0):
            raise ValueError(f"dt must be a positive finite number, got {self.dt}")


class AttractorApp:
    """
    One running visualization.

    Trajectory generation happens synchronously inside the commit callback,
    so the reveal tick of the same frame already sees the new trajectory.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.cfg = config or AppConfig()
        self.clock = clock

        self.session = ParameterSession(
            self.cfg.session, clock=clock, initial=self.cfg.initial
        )
        self.cache = TrajectoryCache(
            num_points=self.cfg.num_points,
            transient_steps=self.cfg.transient_steps,
            dt=self.cfg.dt,
        )
        self.reveal = RevealController(
            self.cache.get(self.session.committed), self.cfg.reveal
        )
        self.adapter = RenderAdapter(
            saturation=self.cfg.scene.line_saturation,
            lightness=self.cfg.scene.line_lightness,
        )
        self.camera = OrbitControls(self.cfg.orbit)
        self.renderer = RasterRenderer(self.cfg.scene)

        self.session.add_listener(self._on_commit)
        self.start_time = clock()
        self.frame_index = 0
        self.closed = False

    @property
    def trajectory(self) -> Trajectory:
        return self.reveal.trajectory

    @property
    def parameters(self) -> Parameters:
        return self.session.committed

    def _on_commit(self, params: Parameters):
        """Install the committed trajectory; unchanged parameters keep the current reveal."""
        if params == self.trajectory.params:
            return
        started = time.perf_counter()
        trajectory = self.cache.get(params)
        logger.debug(
            "Regenerated trajectory for %s in %.1f ms",
            params, (time.perf_counter() - started) * 1000.0,
        )
        self.reveal.install(trajectory)

    def handle(self, event: ParamEvent):
        """Route a control event: restart goes to the reveal, the rest to the session."""
        if event.kind == "restart":
            self.reveal.restart()
        else:
            self.session.handle(event)

    def tick(self, elapsed: Optional[float] = None) -> DrawCall:
        """
        Advance one frame without rasterizing.

        Args:
            elapsed: Seconds since start; read from the clock when None.
        """
        if self.closed:
            raise RuntimeError("AttractorApp has been closed")
        if elapsed is None:
            elapsed = self.clock() - self.start_time

        self.session.on_tick()
        self.camera.update()
        state = self.reveal.tick(elapsed)
        draw_call = self.adapter.prepare(
            self.trajectory, state.visible_count, state.hue, self.frame_index
        )
        self.frame_index += 1
        return draw_call

    def render_frame(self, elapsed: Optional[float] = None) -> np.ndarray:
        """Advance one frame and rasterize it to (H, W, 3) uint8."""
        return self.renderer.render(self.tick(elapsed), self.camera)

    def render_frames(
        self,
        n_frames: int,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> Iterator[np.ndarray]:
        """
        Render frames against a simulated clock (frame_index / fps).

        Yields:
            (H, W, 3) uint8 frames.
        """
        fps = self.cfg.scene.fps
        for i in range(n_frames):
            yield self.render_frame(i / fps)
            if progress_callback:
                progress_callback(i + 1, n_frames)

    def close(self):
        """Tear down: cancel the pending commit, refuse further ticks."""
        if self.closed:
            return
        self.session.teardown()
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
