"""
Trajectory generation.

Integrates the Rössler system from a fixed initial condition, throws away the
transient while the orbit settles onto the attractor, and records a fixed
number of points. The whole sequence depends on (a, b, c), so any parameter
change regenerates it from scratch.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from rosslerscope.core.integrator import rossler_step

logger = logging.getLogger(__name__)

DT = 0.01
TRANSIENT_STEPS = 1000
NUM_POINTS = 10_000
INITIAL_STATE: Tuple[float, float, float] = (0.1, 0.0, 0.0)

PARAM_NAMES = ("a", "b", "c")


@dataclass(frozen=True)
class Parameters:
    """Equation coefficients. Immutable for the life of one trajectory."""
    a: float = 0.2
    b: float = 0.2
    c: float = 5.7

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.a, self.b, self.c)


DEFAULT_PARAMETERS = Parameters()


class Trajectory:
    """
    Fixed-length, read-only sequence of 3D points in temporal order.

    Row ``i`` is the state ``i * dt`` after the transient skip. If the
    integration diverged, every row from ``finite_length`` onwards holds at
    least one non-finite coordinate. ``drawable_length`` (never larger) is
    the prefix that also stays finite once cast to float32.
    """

    def __init__(self, points: np.ndarray, params: Parameters, dt: float = DT):
        points = np.asarray(points, dtype=np.float64)
        if points.ndim != 2 or points.shape[1] != 3:
            raise ValueError(f"Trajectory points must have shape (N, 3), got {points.shape}")
        points.flags.writeable = False
        self.points = points
        self.params = params
        self.dt = dt

        finite = np.isfinite(points).all(axis=1)
        bad = np.flatnonzero(~finite)
        self.finite_length = int(bad[0]) if len(bad) else len(points)

        # Draw buffers are float32; huge float64 values overflow there
        with np.errstate(over="ignore"):
            cast = points[: self.finite_length].astype(np.float32)
        bad = np.flatnonzero(~np.isfinite(cast).all(axis=1))
        self.drawable_length = int(bad[0]) if len(bad) else self.finite_length

    def __len__(self) -> int:
        return len(self.points)

    def __getitem__(self, index):
        return self.points[index]

    @property
    def diverged(self) -> bool:
        return self.finite_length < len(self.points)

    def __repr__(self) -> str:
        return (
            f"Trajectory(n={len(self)}, params={self.params}, "
            f"finite_length={self.finite_length})"
        )


def generate(
    a: float,
    b: float,
    c: float,
    *,
    num_points: int = NUM_POINTS,
    transient_steps: int = TRANSIENT_STEPS,
    dt: float = DT,
    initial: Tuple[float, float, float] = INITIAL_STATE,
) -> Trajectory:
    """
    Generate a Rössler trajectory.

    Args:
        a, b, c: Equation coefficients.
        num_points: Number of recorded states.
        transient_steps: Steps integrated and discarded before recording.
        dt: Fixed time step.
        initial: Starting (x, y, z).

    Returns:
        Trajectory with exactly ``num_points`` rows. Identical inputs give
        bit-identical output.
    """
    if num_points < 0:
        raise ValueError(f"num_points must be >= 0, got {num_points}")
    if transient_steps < 0:
        raise ValueError(f"transient_steps must be >= 0, got {transient_steps}")
    if not (math.isfinite(dt) and dt > 0):
        raise ValueError(f"dt must be a positive finite number, got {dt}")

    # Plain Python floats: scalar IEEE arithmetic, no numpy overflow warnings
    a, b, c, dt = float(a), float(b), float(c), float(dt)
    x, y, z = (float(v) for v in initial)

    for _ in range(transient_steps):
        x, y, z = rossler_step(x, y, z, a, b, c, dt)

    pts = np.empty((num_points, 3), dtype=np.float64)
    for i in range(num_points):
        x, y, z = rossler_step(x, y, z, a, b, c, dt)
        pts[i, 0] = x
        pts[i, 1] = y
        pts[i, 2] = z

    trajectory = Trajectory(pts, Parameters(a, b, c), dt)
    if trajectory.diverged:
        logger.warning(
            "Trajectory for a=%g b=%g c=%g diverged at point %d of %d",
            a, b, c, trajectory.finite_length, num_points,
        )
    return trajectory


def generate_parameters(params: Parameters, **kwargs) -> Trajectory:
    """Parameters form of :func:`generate`."""
    return generate(params.a, params.b, params.c, **kwargs)


class TrajectoryCache:
    """
    Single-slot trajectory cache keyed on Parameters.

    Holds the trajectory for the most recently requested parameters; asking
    for different parameters replaces it wholesale.
    """

    def __init__(
        self,
        num_points: int = NUM_POINTS,
        transient_steps: int = TRANSIENT_STEPS,
        dt: float = DT,
    ):
        self.num_points = num_points
        self.transient_steps = transient_steps
        self.dt = dt
        self._params: Optional[Parameters] = None
        self._trajectory: Optional[Trajectory] = None
        self.generations = 0

    @property
    def current(self) -> Optional[Trajectory]:
        return self._trajectory

    def get(self, params: Parameters) -> Trajectory:
        if self._trajectory is not None and params == self._params:
            return self._trajectory

        logger.debug("Generating trajectory for %s", params)
        self._trajectory = generate_parameters(
            params,
            num_points=self.num_points,
            transient_steps=self.transient_steps,
            dt=self.dt,
        )
        self._params = params
        self.generations += 1
        return self._trajectory

    def clear(self):
        self._params = None
        self._trajectory = None
