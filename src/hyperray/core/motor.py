"""Device-side motor algebra for 4D rigid motions.

A motor is a 16-component vector (``motor16``) in the slot order of
``hyperray.algebra.blades``. The four operations here are pure Taichi
functions with no failure paths:

    reverse            negate the ten bivector slots
    apply_to_point     reverse(M) * P * M, rotation and translation
    apply_to_direction the same sandwich over the seven rotational slots
    axis_image         image of the local y axis, used for slab normals

Each output coordinate of a sandwich is a fixed cubic polynomial in the motor
and point coefficients. The polynomials are not spelled out in this file:
the ``ti.static`` loops below unroll the term tables from
``hyperray.algebra.blades`` at kernel compile time, so the generated code is
the closed form and nothing is looped over at run time.

Non-unit motors are not rejected; they produce a scaled or sheared transform.
"""

import taichi as ti
import taichi.math as tm

from hyperray.algebra.blades import (
    DIRECTION_LEFT_TERMS,
    DIRECTION_RIGHT_TERMS,
    MOTOR_REVERSION_SIGNS,
    MOTOR_SIZE,
    NUM_BLADES,
    POINT_COEFFICIENTS,
    POINT_LEFT_TERMS,
    POINT_RIGHT_TERMS,
    Y_AXIS_TERMS,
)

vec4 = tm.vec4

# Type alias for a motor
motor16 = ti.types.vector(MOTOR_SIZE, ti.f32)

_REVERSION_TERMS = tuple(enumerate(MOTOR_REVERSION_SIGNS))

# (point slot, coordinate, sign) for the four coordinate-carrying point blades
_POINT_COORDINATE_SLOTS = tuple(
    (k, coordinate, sign)
    for k, (coordinate, sign) in enumerate(POINT_COEFFICIENTS)
    if coordinate is not None
)
_POINT_SLOTS = len(POINT_COEFFICIENTS)


@ti.func
def reverse(m: motor16) -> motor16:
    """Reversion of a motor; the inverse rigid motion when ``m`` is unit."""
    result = ti.Vector.zero(ti.f32, MOTOR_SIZE)
    for i, s in ti.static(_REVERSION_TERMS):
        result[i] = s * m[i]
    return result


@ti.func
def _point_blades(p: vec4):
    """Grade-4 coefficients of a point: e1234 - x e0234 + y e0134 - z e0124 + w e0123."""
    q = ti.Vector.zero(ti.f32, _POINT_SLOTS)
    q[0] = 1.0
    for k, coordinate, s in ti.static(_POINT_COORDINATE_SLOTS):
        q[k] = s * p[coordinate]
    return q


@ti.func
def apply_to_point(m: motor16, p: vec4) -> vec4:
    """Apply the full rigid motion of ``m`` to the point ``p``.

    Args:
        m: The motor.
        p: Point coordinates (x, y, z, w).

    Returns:
        The transformed point.
    """
    q = _point_blades(p)

    # reverse(m) * P, indexed by blade mask
    left = ti.Vector.zero(ti.f32, NUM_BLADES)
    for i, k, blade, s in ti.static(POINT_LEFT_TERMS):
        left[blade] += s * m[i] * q[k]

    result = vec4(0.0, 0.0, 0.0, 0.0)
    for blade, j, coordinate, s in ti.static(POINT_RIGHT_TERMS):
        result[coordinate] += s * left[blade] * m[j]
    return result


@ti.func
def apply_to_direction(m: motor16, d: vec4) -> vec4:
    """Apply only the rotational part of ``m`` to the direction ``d``.

    The translation slots (e01..e04, e0123..e0234) never enter the result.
    """
    q = _point_blades(d)

    left = ti.Vector.zero(ti.f32, NUM_BLADES)
    for i, k, blade, s in ti.static(DIRECTION_LEFT_TERMS):
        left[blade] += s * m[i] * q[k]

    result = vec4(0.0, 0.0, 0.0, 0.0)
    for blade, j, coordinate, s in ti.static(DIRECTION_RIGHT_TERMS):
        result[coordinate] += s * left[blade] * m[j]
    return result


@ti.func
def axis_image(m: motor16) -> vec4:
    """Image of the local y axis (0, 1, 0, 0) under the rotational part of ``m``.

    Equal to ``apply_to_direction(m, vec4(0, 1, 0, 0))`` with the input folded
    into the coefficients.
    """
    result = vec4(0.0, 0.0, 0.0, 0.0)
    for i, j, coordinate, c in ti.static(Y_AXIS_TERMS):
        result[coordinate] += c * m[i] * m[j]
    return result
