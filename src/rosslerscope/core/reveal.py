"""
Progressive reveal of a trajectory.

Each rendered frame calls ``tick(elapsed)``. While filling, the visible prefix
grows by a fixed batch; once the whole curve is shown it holds, and in the
looping variant restarts when the wall clock passes a period boundary. The
line hue rotates with wall-clock time regardless of reveal progress.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from rosslerscope.core.trajectory import Trajectory

logger = logging.getLogger(__name__)


class RevealPhase(enum.Enum):
    FILLING = "filling"
    HOLDING_FULL = "holding_full"


@dataclass
class RevealConfig:
    """Reveal animation timing."""
    batch_size: int = 20          # points revealed per tick
    hue_rate: float = 0.05        # hue revolutions per second
    looping: bool = True
    loop_period: float = 30.0     # seconds
    loop_threshold: float = 0.1   # tolerance window after each period boundary

    def __post_init__(self):
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if self.loop_period <= 0:
            raise ValueError(f"loop_period must be positive, got {self.loop_period}")


@dataclass(frozen=True)
class RevealState:
    """Snapshot handed to the render adapter each frame."""
    visible_count: int
    hue: float
    phase: RevealPhase


class RevealController:
    """
    Per-frame state machine over one installed trajectory.

    ``visible_count`` only grows within a cycle and only ``tick`` grows it.
    It drops back to 0 on ``install``, ``restart`` or a loop restart.

    The loop check ``elapsed % period < threshold`` is a best-effort
    boundary test: a slow frame can step over the window and a fast one can
    land in it twice. A second hit while still filling is harmless since the
    check only runs in HOLDING_FULL.
    """

    def __init__(
        self,
        trajectory: Optional[Trajectory] = None,
        config: Optional[RevealConfig] = None,
    ):
        self.cfg = config or RevealConfig()
        self.trajectory = trajectory
        self.visible_count = 0
        self.hue = 0.0
        self.phase = RevealPhase.FILLING
        self.cycles = 0
        self._sync_phase()

    @property
    def total(self) -> int:
        return len(self.trajectory) if self.trajectory is not None else 0

    @property
    def state(self) -> RevealState:
        return RevealState(self.visible_count, self.hue, self.phase)

    def _sync_phase(self):
        if self.trajectory is not None and self.visible_count >= self.total:
            self.phase = RevealPhase.HOLDING_FULL

    def install(self, trajectory: Trajectory):
        """Replace the trajectory and start revealing it from the beginning."""
        self.trajectory = trajectory
        self.restart()

    def restart(self):
        """Force an empty prefix and the FILLING phase."""
        self.visible_count = 0
        self.phase = RevealPhase.FILLING
        self._sync_phase()

    def tick(self, elapsed: float) -> RevealState:
        """
        Advance one frame.

        Args:
            elapsed: Wall-clock seconds since the visualization started.

        Returns:
            The state after this tick.
        """
        self.hue = (elapsed * self.cfg.hue_rate) % 1.0

        if self.trajectory is None:
            return self.state

        if self.phase is RevealPhase.FILLING:
            self.visible_count = min(self.visible_count + self.cfg.batch_size, self.total)
            self._sync_phase()
        elif self.cfg.looping and elapsed % self.cfg.loop_period < self.cfg.loop_threshold:
            self.cycles += 1
            logger.debug("Reveal loop restart at t=%.3fs (cycle %d)", elapsed, self.cycles)
            self.restart()

        return self.state
