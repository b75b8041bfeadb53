"""Tests for the render adapter."""

import numpy as np
import pytest

from rosslerscope.core.trajectory import DEFAULT_PARAMETERS, Trajectory
from rosslerscope.render.adapter import DrawCall, RenderAdapter, hue_to_rgb


def _trajectory(pts) -> Trajectory:
    return Trajectory(np.asarray(pts, dtype=np.float64), DEFAULT_PARAMETERS)


class TestHueToRgb:
    def test_primaries(self):
        np.testing.assert_allclose(hue_to_rgb(0.0), (1.0, 0.0, 0.0), atol=1e-9)
        np.testing.assert_allclose(hue_to_rgb(1 / 3), (0.0, 1.0, 0.0), atol=1e-9)
        np.testing.assert_allclose(hue_to_rgb(2 / 3), (0.0, 0.0, 1.0), atol=1e-9)

    def test_lightness_and_saturation(self):
        r, g, b = hue_to_rgb(0.0, saturation=0.8, lightness=0.6)
        assert r == pytest.approx(0.92)
        assert g == pytest.approx(0.28)
        assert b == pytest.approx(0.28)


class TestRenderAdapter:
    def test_prefix_only(self, canonical_trajectory):
        adapter = RenderAdapter()
        call = adapter.prepare(canonical_trajectory, 120, 0.0, 0)
        assert isinstance(call, DrawCall)
        assert call.draw_count == 120
        assert call.visible_positions.shape == (120, 3)
        np.testing.assert_allclose(
            call.visible_positions, canonical_trajectory.points[:120], rtol=1e-6
        )

    def test_visible_count_clamped(self, canonical_trajectory):
        adapter = RenderAdapter()
        assert adapter.prepare(canonical_trajectory, 50_000, 0.0, 0).draw_count == 10_000
        assert adapter.prepare(canonical_trajectory, -4, 0.0, 0).draw_count == 0

    def test_single_color_from_hue(self, canonical_trajectory):
        adapter = RenderAdapter()
        call = adapter.prepare(canonical_trajectory, 10, 0.5, 0)
        np.testing.assert_allclose(call.color, (0.0, 1.0, 1.0), atol=1e-9)

    def test_rotation_follows_frame_index(self, canonical_trajectory):
        adapter = RenderAdapter()
        assert adapter.prepare(canonical_trajectory, 10, 0.0, 0).rotation_y == 0.0
        assert adapter.prepare(canonical_trajectory, 10, 0.0, 1500).rotation_y == pytest.approx(1.5)

    def test_buffer_reused(self, canonical_trajectory):
        adapter = RenderAdapter()
        first = adapter.prepare(canonical_trajectory, 10, 0.0, 0)
        second = adapter.prepare(canonical_trajectory, 30, 0.2, 1)
        assert first.positions is second.positions
        assert first.positions is adapter.buffer
        assert adapter.buffer.dtype == np.float32

    def test_reloads_on_new_trajectory(self):
        adapter = RenderAdapter()
        adapter.prepare(_trajectory(np.zeros((4, 3))), 4, 0.0, 0)
        call = adapter.prepare(_trajectory(np.ones((4, 3))), 4, 0.0, 1)
        np.testing.assert_array_equal(call.visible_positions, np.ones((4, 3)))

    def test_truncates_at_divergence(self, diverging_trajectory):
        adapter = RenderAdapter()
        call = adapter.prepare(diverging_trajectory, 10_000, 0.0, 0)
        assert call.draw_count == diverging_trajectory.drawable_length
        assert call.draw_count <= diverging_trajectory.finite_length
        assert np.isfinite(call.positions).all()
        np.testing.assert_array_equal(
            call.visible_positions,
            diverging_trajectory.points[: call.draw_count].astype(np.float32),
        )

    def test_prefix_before_divergence_untouched(self, diverging_trajectory):
        adapter = RenderAdapter()
        n = diverging_trajectory.finite_length
        assert adapter.prepare(diverging_trajectory, n // 2, 0.0, 0).draw_count == n // 2

    def test_float32_overflow_treated_as_non_finite(self):
        pts = np.zeros((6, 3))
        pts[4, 0] = 1e300  # finite in float64, inf in float32
        adapter = RenderAdapter()
        call = adapter.prepare(_trajectory(pts), 6, 0.0, 0)
        assert call.draw_count == 4
        assert np.isfinite(call.positions).all()
