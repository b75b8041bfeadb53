"""
Rössler system integrator.

    dx/dt = -y - z
    dy/dt = x + a*y
    dz/dt = b + z*(x - c)

Explicit (forward) Euler, one fixed step per call. First order and not
symplectic; the local error per step is O(dt^2), which is fine for drawing.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class SystemState:
    """Instantaneous point of the dynamical system."""
    x: float
    y: float
    z: float

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


def rossler_step(
    x: float,
    y: float,
    z: float,
    a: float,
    b: float,
    c: float,
    dt: float,
) -> Tuple[float, float, float]:
    """
    Advance (x, y, z) by one Euler step.

    Never raises. Diverging parameters produce inf/nan coordinates, which
    callers treat as the end of the usable trajectory.
    """
    dx = (-y - z) * dt
    dy = (x + a * y) * dt
    dz = (b + z * (x - c)) * dt
    return x + dx, y + dy, z + dz


def step(state: SystemState, a: float, b: float, c: float, dt: float) -> SystemState:
    """SystemState form of :func:`rossler_step`."""
    return SystemState(*rossler_step(state.x, state.y, state.z, a, b, c, dt))
