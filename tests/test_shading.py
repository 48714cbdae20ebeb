"""Unit tests for primary-ray shading.

Tests cover:
- Background gradient endpoints and midpoint
- Gradient invariance under rotation about the vertical axis
- Normal-to-color remapping
"""

import math

import taichi as ti


def _background(direction):
    """Evaluate background_color with the default horizon/zenith colors."""
    from src.raytracer.core.shading import (
        DEFAULT_HORIZON_COLOR,
        DEFAULT_ZENITH_COLOR,
        background_color,
    )

    result = ti.field(dtype=ti.math.vec3, shape=())

    @ti.kernel
    def test_kernel(d: ti.math.vec3, horizon: ti.math.vec3, zenith: ti.math.vec3):
        result[None] = background_color(d, horizon, zenith)

    test_kernel(
        ti.math.vec3(*direction),
        ti.math.vec3(*DEFAULT_HORIZON_COLOR),
        ti.math.vec3(*DEFAULT_ZENITH_COLOR),
    )
    c = result[None]
    return (c[0], c[1], c[2])


class TestBackgroundGradient:
    """Tests for background_color()."""

    def test_straight_up_is_zenith(self):
        r, g, b = _background((0.0, 1.0, 0.0))
        assert abs(r - 0.5) < 1e-6
        assert abs(g - 0.7) < 1e-6
        assert abs(b - 1.0) < 1e-6

    def test_straight_down_is_horizon(self):
        r, g, b = _background((0.0, -1.0, 0.0))
        assert abs(r - 1.0) < 1e-6
        assert abs(g - 1.0) < 1e-6
        assert abs(b - 1.0) < 1e-6

    def test_level_is_midpoint(self):
        r, g, b = _background((0.0, 0.0, -1.0))
        assert abs(r - 0.75) < 1e-6
        assert abs(g - 0.85) < 1e-6
        assert abs(b - 1.0) < 1e-6

    def test_direction_length_ignored(self):
        a = _background((0.0, 3.0, -4.0))
        b = _background((0.0, 0.6, -0.8))
        assert all(abs(x - y) < 1e-6 for x, y in zip(a, b))

    def test_invariant_under_yaw(self):
        """Rotating about world up leaves the y component, and the color, unchanged."""
        base = _background((0.0, 0.4, -0.9))
        for angle in (0.3, 1.2, 2.5, -2.0):
            x = -0.9 * math.sin(angle)
            z = -0.9 * math.cos(angle)
            rotated = _background((x, 0.4, z))
            assert all(abs(p - q) < 1e-6 for p, q in zip(base, rotated))

    def test_red_increases_downward(self):
        """Lower rays are closer to the white horizon color."""
        upper = _background((0.0, 0.5, -1.0))
        lower = _background((0.0, -0.5, -1.0))
        assert upper[0] < lower[0]


class TestNormalColor:
    """Tests for normal_color()."""

    def test_remaps_to_unit_range(self):
        from src.raytracer.core.shading import normal_color, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = normal_color(vec3(0.0, -1.0, 1.0))

        test_kernel()
        c = result[None]
        assert abs(c[0] - 0.5) < 1e-6
        assert abs(c[1]) < 1e-6
        assert abs(c[2] - 1.0) < 1e-6

    def test_shading_mode_values(self):
        from src.raytracer.core.shading import ShadingMode

        assert int(ShadingMode.NORMAL) == 0
        assert int(ShadingMode.ALBEDO) == 1
