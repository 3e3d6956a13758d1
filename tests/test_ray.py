"""Unit tests for the ray module.

Tests cover:
- Ray dataclass and ray_at function
- 4D vector helpers (dot, length_squared, normalize, sign)
"""

import pytest
import taichi as ti


class TestRayBasics:
    """Tests for Ray dataclass and basic operations."""

    @pytest.mark.parametrize(
        "t,expected",
        [
            (0.0, (1.0, 2.0, 3.0, 4.0)),
            (2.5, (1.0, 2.0, 3.0, 1.5)),
            (-1.0, (1.0, 2.0, 3.0, 5.0)),
        ],
    )
    def test_ray_at(self, t, expected):
        from hyperray.core.ray import make_ray, ray_at, vec4

        result = ti.field(dtype=ti.math.vec4, shape=())

        @ti.kernel
        def test_kernel(t: ti.f32):
            ray = make_ray(vec4(1.0, 2.0, 3.0, 4.0), vec4(0.0, 0.0, 0.0, -1.0))
            result[None] = ray_at(ray, t)

        test_kernel(t)
        r = result[None]
        for k in range(4):
            assert abs(r[k] - expected[k]) < 1e-6

    def test_ray_fields(self):
        from hyperray.core.ray import Ray, vec4

        origin = ti.field(dtype=ti.math.vec4, shape=())
        direction = ti.field(dtype=ti.math.vec4, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec4(1.0, 0.0, 0.0, 0.0), direction=vec4(0.0, 0.0, 0.0, 1.0))
            origin[None] = ray.origin
            direction[None] = ray.direction

        test_kernel()
        assert abs(origin[None][0] - 1.0) < 1e-6
        assert abs(direction[None][3] - 1.0) < 1e-6


class TestVectorHelpers:
    """Tests for the 4D vector helpers."""

    def test_dot_includes_w(self):
        from hyperray.core.ray import dot, vec4

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = dot(vec4(1.0, 2.0, 3.0, 4.0), vec4(4.0, 3.0, 2.0, 1.0))

        test_kernel()
        assert abs(result[None] - 20.0) < 1e-6

    def test_length_squared(self):
        from hyperray.core.ray import length_squared, vec4

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = length_squared(vec4(1.0, 1.0, 1.0, 1.0))

        test_kernel()
        assert abs(result[None] - 4.0) < 1e-6

    def test_normalize(self):
        from hyperray.core.ray import normalize, vec4

        result = ti.field(dtype=ti.math.vec4, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = normalize(vec4(0.0, 3.0, 0.0, 4.0))

        test_kernel()
        r = result[None]
        assert abs(r[1] - 0.6) < 1e-6
        assert abs(r[3] - 0.8) < 1e-6

    @pytest.mark.parametrize("value,expected", [(2.5, 1.0), (-0.1, -1.0), (0.0, 0.0)])
    def test_sign(self, value, expected):
        from hyperray.core.ray import sign

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel(x: ti.f32):
            result[None] = sign(x)

        test_kernel(value)
        assert result[None] == expected
