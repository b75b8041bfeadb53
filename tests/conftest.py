"""Pytest configuration and shared fixtures."""

import pytest

from rosslerscope.core.trajectory import generate


class FakeClock:
    """Manually advanced monotonic clock for debounce tests."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(scope="session")
def canonical_trajectory():
    """Default-parameter trajectory (a=0.2, b=0.2, c=5.7), 10,000 points."""
    return generate(0.2, 0.2, 5.7)


@pytest.fixture(scope="session")
def diverging_trajectory():
    """
    a=1.0 blows up under Euler at dt=0.01; the first non-finite point lands
    a few hundred points into the recorded range.
    """
    return generate(1.0, 0.2, 5.7)
