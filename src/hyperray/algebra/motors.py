"""Host-side construction and reference evaluation of 4D motors.

A motor is a length-16 NumPy array in the slot order documented in
``hyperray.algebra.blades``. Everything here runs in Python scope through the
full 32-component geometric product, so it doubles as the reference the
device-side closed forms in ``hyperray.core.motor`` are checked against.

Motors act on points by ``reverse(M) * P * M``. ``then(a, b)`` returns the
motor that applies ``a`` first and ``b`` second.

Example:
    >>> import math
    >>> from hyperray.algebra import motors
    >>> m = motors.then(motors.rotation("xy", math.pi / 2), motors.translation((1, 0, 0, 0)))
    >>> motors.transform_point(m, (1.0, 0.0, 0.0, 0.0))  # approximately (1, 1, 0, 0)
"""

import math

import numpy as np

from .blades import (
    MOTOR_BLADE_NAMES,
    MOTOR_REVERSION_SIGNS,
    MOTOR_SIZE,
    TRANSLATION_SLOTS,
    blade_mask,
    geometric_product,
    motor_to_multivector,
    multivector_to_motor,
    multivector_to_point,
    point_to_multivector,
    reverse_multivector,
)

# Rotation planes and the bivector slot that generates each
ROTATION_PLANES = {
    "xy": MOTOR_BLADE_NAMES.index("e12"),
    "xz": MOTOR_BLADE_NAMES.index("e13"),
    "xw": MOTOR_BLADE_NAMES.index("e14"),
    "yz": MOTOR_BLADE_NAMES.index("e23"),
    "yw": MOTOR_BLADE_NAMES.index("e24"),
    "zw": MOTOR_BLADE_NAMES.index("e34"),
}

# Slots of the translation bivectors e01..e04
_TRANSLATION_BIVECTOR_SLOTS = tuple(MOTOR_BLADE_NAMES.index(f"e0{i}") for i in range(1, 5))

_SCALAR = blade_mask("s")


def identity() -> np.ndarray:
    """The motor that leaves every point in place."""
    motor = np.zeros(MOTOR_SIZE, dtype=np.float64)
    motor[0] = 1.0
    return motor


def translation(offset) -> np.ndarray:
    """Motor translating points by ``offset`` (x, y, z, w)."""
    offset = np.asarray(offset, dtype=np.float64)
    if offset.shape != (4,):
        raise ValueError(f"Translation offset must have 4 components, got shape {offset.shape}")
    motor = identity()
    motor[list(_TRANSLATION_BIVECTOR_SLOTS)] = 0.5 * offset
    return motor


def rotation(plane: str, angle: float) -> np.ndarray:
    """Motor rotating by ``angle`` radians in one of the six coordinate planes.

    Args:
        plane: One of ``"xy", "xz", "xw", "yz", "yw", "zw"``.
        angle: Rotation angle in radians.

    Raises:
        ValueError: If the plane name is unknown.
    """
    try:
        slot = ROTATION_PLANES[plane]
    except KeyError:
        raise ValueError(
            f"Unknown rotation plane {plane!r}; expected one of {sorted(ROTATION_PLANES)}"
        ) from None
    motor = np.zeros(MOTOR_SIZE, dtype=np.float64)
    motor[0] = math.cos(angle * 0.5)
    motor[slot] = math.sin(angle * 0.5)
    return motor


def then(first, second) -> np.ndarray:
    """Compose two motors: apply ``first``, then ``second``."""
    product = geometric_product(motor_to_multivector(first), motor_to_multivector(second))
    return multivector_to_motor(product)


def reverse(motor) -> np.ndarray:
    """Reversion: negates the ten bivector slots."""
    return np.asarray(motor, dtype=np.float64) * np.asarray(MOTOR_REVERSION_SIGNS, dtype=np.float64)


def rotor_part(motor) -> np.ndarray:
    """Drop the eight translation-bearing slots, keeping the rotation."""
    result = np.array(motor, dtype=np.float64)
    result[list(TRANSLATION_SLOTS)] = 0.0
    return result


def norm_squared(motor) -> np.ndarray:
    """``reverse(M) * M`` as a full multivector; a unit motor gives exactly 1."""
    mv = motor_to_multivector(motor)
    return geometric_product(reverse_multivector(mv), mv)


def is_unit(motor, tolerance: float = 1e-3) -> bool:
    """Check that ``reverse(M) * M`` is the scalar 1 within ``tolerance``."""
    product = norm_squared(motor)
    expected = np.zeros_like(product)
    expected[_SCALAR] = 1.0
    return bool(np.all(np.abs(product - expected) <= tolerance))


def transform_point(motor, point) -> np.ndarray:
    """Apply the full rigid motion (rotation and translation) to a point."""
    mv = motor_to_multivector(motor)
    sandwich = geometric_product(
        geometric_product(reverse_multivector(mv), point_to_multivector(point)), mv
    )
    return multivector_to_point(sandwich)


def transform_direction(motor, direction) -> np.ndarray:
    """Apply only the rotational part of a motor to a direction."""
    return transform_point(rotor_part(motor), direction)


def position(motor) -> np.ndarray:
    """Image of the origin under the motor."""
    return transform_point(motor, np.zeros(4))


def basis_image(motor, axis: int) -> np.ndarray:
    """Image of the local basis direction ``axis`` (0 = x ... 3 = w)."""
    direction = np.zeros(4)
    direction[axis] = 1.0
    return transform_direction(motor, direction)


def from_position_and_angles(location, angles: dict[str, float] | None = None) -> np.ndarray:
    """Build an object motor from a position and plane rotation angles.

    The rotations are applied in the fixed plane order xy, xz, xw, yz, yw, zw
    about the local origin, then the result is translated to ``location``.

    Args:
        location: Target position (x, y, z, w).
        angles: Mapping from plane name to angle in radians. Missing planes are 0.

    Returns:
        The composed motor.
    """
    angles = angles or {}
    unknown = set(angles) - set(ROTATION_PLANES)
    if unknown:
        raise ValueError(f"Unknown rotation planes: {sorted(unknown)}")

    motor = identity()
    for plane in ROTATION_PLANES:
        angle = angles.get(plane, 0.0)
        if angle:
            motor = then(motor, rotation(plane, angle))
    return then(motor, translation(location))
