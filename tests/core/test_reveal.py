"""Tests for the reveal state machine."""

import math

import numpy as np
import pytest

from rosslerscope.core.reveal import RevealConfig, RevealController, RevealPhase
from rosslerscope.core.trajectory import DEFAULT_PARAMETERS, Trajectory


def _trajectory(n: int) -> Trajectory:
    return Trajectory(np.zeros((n, 3)), DEFAULT_PARAMETERS)


def _fill(ctrl: RevealController, elapsed: float = 1.0) -> int:
    """Tick until full, return the number of ticks taken."""
    ticks = 0
    while ctrl.phase is RevealPhase.FILLING:
        ctrl.tick(elapsed)
        ticks += 1
        assert ticks <= 100_000
    return ticks


class TestFilling:
    def test_initial_state(self):
        ctrl = RevealController(_trajectory(100))
        assert ctrl.visible_count == 0
        assert ctrl.phase is RevealPhase.FILLING

    def test_batch_increment(self):
        ctrl = RevealController(_trajectory(100))
        ctrl.tick(0.0)
        assert ctrl.visible_count == 20
        ctrl.tick(0.016)
        assert ctrl.visible_count == 40

    @pytest.mark.parametrize("n", [10_000, 1005, 20, 7, 1])
    def test_reaches_full_in_ceil_ticks(self, n):
        ctrl = RevealController(_trajectory(n), RevealConfig(looping=False))
        assert _fill(ctrl) == math.ceil(n / 20)
        assert ctrl.visible_count == n

    def test_clamped_to_length(self):
        ctrl = RevealController(_trajectory(30))
        ctrl.tick(0.0)
        ctrl.tick(0.0)
        assert ctrl.visible_count == 30
        assert ctrl.phase is RevealPhase.HOLDING_FULL

    def test_monotonic_within_cycle(self):
        ctrl = RevealController(_trajectory(1000), RevealConfig(looping=False))
        counts = [ctrl.tick(i / 60).visible_count for i in range(80)]
        assert all(b >= a for a, b in zip(counts, counts[1:]))
        assert counts[-1] == 1000

    def test_holds_when_not_looping(self):
        ctrl = RevealController(_trajectory(40), RevealConfig(looping=False))
        _fill(ctrl)
        ctrl.tick(30.05)
        assert ctrl.visible_count == 40
        assert ctrl.phase is RevealPhase.HOLDING_FULL

    def test_empty_trajectory_is_full(self):
        ctrl = RevealController(_trajectory(0))
        assert ctrl.phase is RevealPhase.HOLDING_FULL
        ctrl.tick(1.0)
        assert ctrl.visible_count == 0

    def test_no_trajectory(self):
        ctrl = RevealController()
        state = ctrl.tick(2.0)
        assert state.visible_count == 0
        assert state.hue == pytest.approx(0.1)


class TestHue:
    def test_hue_follows_wall_clock(self):
        ctrl = RevealController(_trajectory(100))
        assert ctrl.tick(0.0).hue == 0.0
        assert ctrl.tick(10.0).hue == pytest.approx(0.5)
        assert ctrl.tick(25.0).hue == pytest.approx(0.25)

    def test_hue_in_unit_interval(self):
        ctrl = RevealController(_trajectory(100))
        for t in np.linspace(0, 500, 777):
            hue = ctrl.tick(float(t)).hue
            assert 0.0 <= hue < 1.0

    def test_hue_independent_of_progress(self):
        a = RevealController(_trajectory(100))
        b = RevealController(_trajectory(5000))
        for _ in range(10):
            a.tick(3.0)
        assert a.tick(7.0).hue == b.tick(7.0).hue


class TestLooping:
    def test_restarts_inside_window(self):
        ctrl = RevealController(_trajectory(40))
        _fill(ctrl)
        ctrl.tick(30.05)
        assert ctrl.visible_count == 0
        assert ctrl.phase is RevealPhase.FILLING
        assert ctrl.cycles == 1

    def test_holds_outside_window(self):
        ctrl = RevealController(_trajectory(40))
        _fill(ctrl)
        for t in (12.0, 29.95, 30.2, 45.0):
            ctrl.tick(t)
            assert ctrl.visible_count == 40

    def test_window_check_skipped_while_filling(self):
        ctrl = RevealController(_trajectory(100))
        ctrl.tick(1.0)
        ctrl.tick(60.01)
        assert ctrl.visible_count == 40

    def test_refills_after_loop(self):
        ctrl = RevealController(_trajectory(40))
        _fill(ctrl)
        ctrl.tick(30.0)
        assert ctrl.visible_count == 0
        ctrl.tick(30.016)
        assert ctrl.visible_count == 20


class TestRestart:
    @pytest.mark.parametrize("ticks", [0, 1, 3, 50])
    def test_restart_from_any_point(self, ticks):
        ctrl = RevealController(_trajectory(100))
        for _ in range(ticks):
            ctrl.tick(1.0)
        ctrl.restart()
        assert ctrl.visible_count == 0
        assert ctrl.phase is RevealPhase.FILLING

    def test_install_resets(self):
        ctrl = RevealController(_trajectory(100))
        _fill(ctrl)
        new = _trajectory(60)
        ctrl.install(new)
        assert ctrl.trajectory is new
        assert ctrl.visible_count == 0
        assert ctrl.phase is RevealPhase.FILLING
        assert _fill(ctrl) == 3


class TestRevealConfig:
    def test_custom_batch(self):
        ctrl = RevealController(_trajectory(100), RevealConfig(batch_size=7, looping=False))
        assert _fill(ctrl) == 15

    @pytest.mark.parametrize("batch", [0, -3])
    def test_rejects_non_positive_batch(self, batch):
        with pytest.raises(ValueError):
            RevealConfig(batch_size=batch)

    def test_rejects_non_positive_period(self):
        with pytest.raises(ValueError):
            RevealConfig(loop_period=0.0)
