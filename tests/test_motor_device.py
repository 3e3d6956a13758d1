"""Tests for the device-side motor functions against the host reference.

Tests cover:
- reverse on device matches the host reversion
- apply_to_point / apply_to_direction match transform_point / transform_direction
- axis_image matches apply_to_direction of the local y axis
- Translation-only motors leave directions unchanged
"""

import math

import numpy as np
import taichi as ti

from hyperray.algebra import motors


def random_unit_motor(rng):
    angles = {plane: rng.uniform(-math.pi, math.pi) for plane in motors.ROTATION_PLANES}
    return motors.from_position_and_angles(rng.uniform(-3.0, 3.0, size=4), angles)


class TestDeviceMotor:
    """Device motor functions evaluated in a kernel."""

    def _fields(self):
        motor_in = ti.Vector.field(16, dtype=ti.f32, shape=())
        vector_in = ti.Vector.field(4, dtype=ti.f32, shape=())
        vector_out = ti.Vector.field(4, dtype=ti.f32, shape=())
        return motor_in, vector_in, vector_out

    def test_reverse(self):
        from hyperray.core.motor import reverse

        motor_in = ti.Vector.field(16, dtype=ti.f32, shape=())
        motor_out = ti.Vector.field(16, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            motor_out[None] = reverse(motor_in[None])

        m = np.arange(1.0, 17.0)
        motor_in[None] = m.tolist()
        test_kernel()
        np.testing.assert_allclose(motor_out[None].to_numpy(), motors.reverse(m), atol=1e-6)

    def test_apply_to_point_matches_reference(self):
        from hyperray.core.motor import apply_to_point

        motor_in, point_in, point_out = self._fields()

        @ti.kernel
        def test_kernel():
            point_out[None] = apply_to_point(motor_in[None], point_in[None])

        rng = np.random.default_rng(11)
        for _ in range(8):
            m = random_unit_motor(rng)
            p = rng.uniform(-2.0, 2.0, size=4)
            motor_in[None] = m.tolist()
            point_in[None] = p.tolist()
            test_kernel()
            np.testing.assert_allclose(
                point_out[None].to_numpy(), motors.transform_point(m, p), atol=1e-4
            )

    def test_apply_to_direction_matches_reference(self):
        from hyperray.core.motor import apply_to_direction

        motor_in, direction_in, direction_out = self._fields()

        @ti.kernel
        def test_kernel():
            direction_out[None] = apply_to_direction(motor_in[None], direction_in[None])

        rng = np.random.default_rng(12)
        for _ in range(8):
            m = random_unit_motor(rng)
            d = rng.normal(size=4)
            motor_in[None] = m.tolist()
            direction_in[None] = d.tolist()
            test_kernel()
            np.testing.assert_allclose(
                direction_out[None].to_numpy(), motors.transform_direction(m, d), atol=1e-4
            )

    def test_direction_ignores_translation(self):
        from hyperray.core.motor import apply_to_direction

        motor_in, direction_in, direction_out = self._fields()

        @ti.kernel
        def test_kernel():
            direction_out[None] = apply_to_direction(motor_in[None], direction_in[None])

        motor_in[None] = motors.translation((3.0, -1.0, 2.0, 5.0)).tolist()
        direction_in[None] = [0.0, 0.6, 0.0, 0.8]
        test_kernel()
        d = direction_out[None]
        assert abs(d[0]) < 1e-6
        assert abs(d[1] - 0.6) < 1e-6
        assert abs(d[2]) < 1e-6
        assert abs(d[3] - 0.8) < 1e-6

    def test_axis_image_matches_direction(self):
        from hyperray.core.motor import apply_to_direction, axis_image

        motor_in = ti.Vector.field(16, dtype=ti.f32, shape=())
        folded = ti.Vector.field(4, dtype=ti.f32, shape=())
        unfolded = ti.Vector.field(4, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            folded[None] = axis_image(motor_in[None])
            unfolded[None] = apply_to_direction(motor_in[None], ti.math.vec4(0.0, 1.0, 0.0, 0.0))

        rng = np.random.default_rng(13)
        for _ in range(8):
            m = random_unit_motor(rng)
            motor_in[None] = m.tolist()
            test_kernel()
            np.testing.assert_allclose(folded[None].to_numpy(), unfolded[None].to_numpy(), atol=1e-5)
            np.testing.assert_allclose(folded[None].to_numpy(), motors.basis_image(m, 1), atol=1e-4)

    def test_axis_image_quarter_turn(self):
        from hyperray.core.motor import axis_image

        motor_in = ti.Vector.field(16, dtype=ti.f32, shape=())
        image = ti.Vector.field(4, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            image[None] = axis_image(motor_in[None])

        # A quarter turn in yw carries +y to +w
        motor_in[None] = motors.rotation("yw", math.pi / 2).tolist()
        test_kernel()
        n = image[None]
        assert abs(n[0]) < 1e-6
        assert abs(n[1]) < 1e-6
        assert abs(n[2]) < 1e-6
        assert abs(n[3] - 1.0) < 1e-6
