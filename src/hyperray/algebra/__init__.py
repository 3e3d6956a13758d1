"""Geometric algebra for 4D rigid motions.

Components:
    blades: Basis blade products, NumPy multivector products, the motor and
        point layouts, and the term tables the device-side sandwich products
        are unrolled from
    motors: Host-side motor construction (translations, plane rotations,
        composition) and reference point/direction transforms

Nothing in this subpackage creates Taichi fields, so it can be imported
before ``ti.init``.
"""

from . import motors
from .blades import (
    MOTOR_BLADE_NAMES,
    MOTOR_SIZE,
    ROTOR_SLOTS,
    TRANSLATION_SLOTS,
    geometric_product,
    outer_product,
    point_to_multivector,
)

__all__ = [
    "motors",
    "MOTOR_BLADE_NAMES",
    "MOTOR_SIZE",
    "ROTOR_SLOTS",
    "TRANSLATION_SLOTS",
    "geometric_product",
    "outer_product",
    "point_to_multivector",
]
