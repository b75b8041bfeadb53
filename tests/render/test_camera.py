"""Tests for the orbit camera."""

import math

import numpy as np
import pytest

from rosslerscope.render.camera import OrbitConfig, OrbitControls


class TestOrbitControls:
    def test_initial_position(self):
        cam = OrbitControls()
        np.testing.assert_allclose(cam.position, (25.0, 25.0, 25.0), atol=1e-9)

    def test_defaults(self):
        cfg = OrbitConfig()
        assert cfg.damping_factor == 0.05
        assert cfg.rotate_speed == 0.5
        assert cfg.zoom_speed == 0.8

    def test_target_projects_to_center(self):
        cam = OrbitControls()
        x, y, visible = cam.project(np.zeros((1, 3)), 640, 480)
        assert visible[0]
        assert x[0] == pytest.approx(320.0)
        assert y[0] == pytest.approx(240.0)

    def test_behind_camera_invisible(self):
        cam = OrbitControls()
        behind = cam.position * 2.0
        _, _, visible = cam.project(behind[np.newaxis, :], 640, 480)
        assert not visible[0]

    def test_up_is_up_on_screen(self):
        cam = OrbitControls()
        _, y, _ = cam.project(np.array([[0.0, 5.0, 0.0]]), 640, 480)
        assert y[0] < 240.0

    def test_damped_rotation_eases_in(self):
        cam = OrbitControls()
        theta0 = cam.theta
        cam.rotate(100, 0, 600)
        total = -100 * 2 * math.pi * 0.5 / 600
        cam.update()
        assert cam.theta - theta0 == pytest.approx(total * 0.05)
        for _ in range(600):
            cam.update()
        assert cam.theta - theta0 == pytest.approx(total, rel=1e-6)

    def test_undamped_rotation_immediate(self):
        cam = OrbitControls(OrbitConfig(enable_damping=False))
        theta0 = cam.theta
        cam.rotate(60, 0, 600)
        cam.update()
        after = cam.theta
        cam.update()
        assert after - theta0 == pytest.approx(-60 * 2 * math.pi * 0.5 / 600)
        assert cam.theta == after

    def test_polar_angle_clamped(self):
        cam = OrbitControls(OrbitConfig(enable_damping=False))
        cam.rotate(0, 10_000, 100)
        cam.update()
        assert 0.0 < cam.phi < math.pi

    def test_zoom_in_and_clamp(self):
        cam = OrbitControls()
        r0 = cam.radius
        cam.zoom(1)
        cam.update()
        assert cam.radius == pytest.approx(r0 * 0.95 ** 0.8)
        cam.zoom(500)
        cam.update()
        assert cam.radius == cam.cfg.min_distance

    def test_zoom_out_clamped(self):
        cam = OrbitControls()
        cam.zoom(-1000)
        cam.update()
        assert cam.radius == cam.cfg.max_distance

    @pytest.mark.parametrize("kwargs", [
        {"damping_factor": 0.0},
        {"damping_factor": 1.5},
        {"min_distance": 0.0},
        {"min_distance": 10.0, "max_distance": 5.0},
    ])
    def test_invalid_config(self, kwargs):
        with pytest.raises(ValueError):
            OrbitConfig(**kwargs)
