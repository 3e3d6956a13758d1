"""Basis blades and product tables for the 4D rigid-motion algebra.

The algebra has five generators. ``e0`` is null (``e0 * e0 = 0``) and encodes
translation; ``e1`` to ``e4`` square to +1 and span the four spatial axes.
Basis blades are stored as 5-bit masks where bit ``i`` stands for ``e_i``, so
the full algebra has 32 components indexed by mask.

A motor lives in the even sub-algebra and keeps 16 of those components:

    slot  0        : s
    slots 1 - 4    : e01, e02, e03, e04        (translation bivectors)
    slots 5 - 10   : e12, e13, e14, e23, e24, e34   (rotation bivectors)
    slots 11 - 14  : e0123, e0124, e0134, e0234     (translation quadvectors)
    slot  15       : e1234

A point ``(x, y, z, w)`` is the outer product of four hyperplanes
``(e1 - x e0) ^ (e2 - y e0) ^ (e3 - z e0) ^ (e4 - w e0)``, which expands to

    e1234 - x e0234 + y e0134 - z e0124 + w e0123

The device-side sandwich products in ``hyperray.core.motor`` are not written
out by hand. They are unrolled from the term tables built at the bottom of
this module, which are derived from ``blade_product``.

Example:
    >>> from hyperray.algebra.blades import blade_product, blade_mask
    >>> blade_product(blade_mask("e1"), blade_mask("e0"))
    (-1, 3)
"""

from collections import defaultdict

import numpy as np

NUM_GENERATORS = 5
NUM_BLADES = 1 << NUM_GENERATORS

# Bit 0 of a blade mask
NULL_GENERATOR = 1


def blade_mask(name: str) -> int:
    """Convert a blade name such as ``"e0234"`` (or ``"s"``) to its bitmask."""
    if name == "s":
        return 0
    if not name.startswith("e"):
        raise ValueError(f"Invalid blade name: {name!r}")
    mask = 0
    for digit in name[1:]:
        index = int(digit)
        if index >= NUM_GENERATORS or mask & (1 << index):
            raise ValueError(f"Invalid blade name: {name!r}")
        mask |= 1 << index
    return mask


def blade_name(mask: int) -> str:
    """Convert a blade bitmask to its canonical name."""
    if mask == 0:
        return "s"
    return "e" + "".join(str(i) for i in range(NUM_GENERATORS) if mask & (1 << i))


def grade(mask: int) -> int:
    """Number of generators in a blade."""
    return bin(mask).count("1")


def reversion_sign(mask: int) -> int:
    """Sign picked up by a blade under reversion: (-1)^(k(k-1)/2)."""
    k = grade(mask)
    return -1 if (k * (k - 1) // 2) % 2 else 1


def _reordering_sign(a: int, b: int) -> int:
    """Sign of moving the generators of ``b`` past those of ``a`` into canonical order."""
    a >>= 1
    swaps = 0
    while a:
        swaps += grade(a & b)
        a >>= 1
    return -1 if swaps % 2 else 1


def blade_product(a: int, b: int) -> tuple[int, int]:
    """Geometric product of two basis blades.

    Args:
        a: Left blade mask.
        b: Right blade mask.

    Returns:
        Tuple ``(sign, mask)``. ``sign`` is 0 when the product vanishes
        (both blades contain the null generator ``e0``).
    """
    if a & b & NULL_GENERATOR:
        return 0, 0
    return _reordering_sign(a, b), a ^ b


def blade_outer_product(a: int, b: int) -> tuple[int, int]:
    """Outer (wedge) product of two basis blades."""
    if a & b:
        return 0, 0
    return _reordering_sign(a, b), a ^ b


def _build_tables(product):
    signs = np.zeros((NUM_BLADES, NUM_BLADES), dtype=np.float64)
    indices = np.zeros((NUM_BLADES, NUM_BLADES), dtype=np.int64)
    for a in range(NUM_BLADES):
        for b in range(NUM_BLADES):
            sign, mask = product(a, b)
            signs[a, b] = sign
            indices[a, b] = mask
    return signs, indices


CAYLEY_SIGNS, CAYLEY_INDICES = _build_tables(blade_product)
OUTER_SIGNS, OUTER_INDICES = _build_tables(blade_outer_product)
REVERSION_SIGNS = np.array([reversion_sign(m) for m in range(NUM_BLADES)], dtype=np.float64)


# =============================================================================
# Multivector Products (NumPy, host side)
# =============================================================================


def _table_product(a: np.ndarray, b: np.ndarray, signs: np.ndarray, indices: np.ndarray) -> np.ndarray:
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    products = np.outer(a, b) * signs
    result = np.zeros(NUM_BLADES, dtype=np.float64)
    np.add.at(result, indices, products)
    return result


def geometric_product(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Geometric product of two 32-component multivectors."""
    return _table_product(a, b, CAYLEY_SIGNS, CAYLEY_INDICES)


def outer_product(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Outer product of two 32-component multivectors."""
    return _table_product(a, b, OUTER_SIGNS, OUTER_INDICES)


def reverse_multivector(a: np.ndarray) -> np.ndarray:
    """Reversion of a 32-component multivector."""
    return np.asarray(a, dtype=np.float64) * REVERSION_SIGNS


def basis_vector(mask: int, coefficient: float = 1.0) -> np.ndarray:
    """Multivector holding a single blade."""
    result = np.zeros(NUM_BLADES, dtype=np.float64)
    result[mask] = coefficient
    return result


# =============================================================================
# Motor and Point Layout
# =============================================================================

MOTOR_BLADE_NAMES = (
    "s",
    "e01", "e02", "e03", "e04",
    "e12", "e13", "e14", "e23", "e24", "e34",
    "e0123", "e0124", "e0134", "e0234",
    "e1234",
)
MOTOR_BLADES = tuple(blade_mask(name) for name in MOTOR_BLADE_NAMES)
MOTOR_SIZE = len(MOTOR_BLADES)

# Motor slots that carry no e0 factor (scalar, rotation bivectors, e1234)
ROTOR_SLOTS = tuple(i for i, m in enumerate(MOTOR_BLADES) if not m & NULL_GENERATOR)
TRANSLATION_SLOTS = tuple(i for i, m in enumerate(MOTOR_BLADES) if m & NULL_GENERATOR)
BIVECTOR_SLOTS = tuple(i for i, m in enumerate(MOTOR_BLADES) if grade(m) == 2)

# Per-slot reversion signs of a motor
MOTOR_REVERSION_SIGNS = tuple(reversion_sign(m) for m in MOTOR_BLADES)

# Point blades in device order, with (coordinate index, sign) of their coefficient.
# The weight blade e1234 has coefficient 1.
POINT_BLADES = tuple(blade_mask(name) for name in ("e1234", "e0234", "e0134", "e0124", "e0123"))
POINT_COEFFICIENTS = ((None, 1), (0, -1), (1, 1), (2, -1), (3, 1))

COORDINATE_OF_BLADE = {
    POINT_BLADES[k]: (coordinate, sign)
    for k, (coordinate, sign) in enumerate(POINT_COEFFICIENTS)
    if coordinate is not None
}


def motor_to_multivector(motor) -> np.ndarray:
    """Embed a 16-slot motor into a 32-component multivector."""
    motor = np.asarray(motor, dtype=np.float64)
    if motor.shape != (MOTOR_SIZE,):
        raise ValueError(f"Motor must have {MOTOR_SIZE} coefficients, got shape {motor.shape}")
    result = np.zeros(NUM_BLADES, dtype=np.float64)
    result[list(MOTOR_BLADES)] = motor
    return result


def multivector_to_motor(mv: np.ndarray) -> np.ndarray:
    """Project a multivector onto the 16 motor slots."""
    return np.asarray(mv, dtype=np.float64)[list(MOTOR_BLADES)].copy()


def point_to_multivector(point) -> np.ndarray:
    """Embed a 4D point as the outer product of its four coordinate hyperplanes."""
    point = np.asarray(point, dtype=np.float64)
    result = basis_vector(0)
    for axis in range(4):
        plane = basis_vector(1 << (axis + 1)) - point[axis] * basis_vector(NULL_GENERATOR)
        result = outer_product(result, plane)
    return result


def multivector_to_point(mv: np.ndarray) -> np.ndarray:
    """Read the (x, y, z, w) coordinates back from a point multivector.

    The weight (e1234 coefficient) is not divided out; unit motors keep it at 1.
    """
    mv = np.asarray(mv, dtype=np.float64)
    point = np.zeros(4, dtype=np.float64)
    for mask, (coordinate, sign) in COORDINATE_OF_BLADE.items():
        point[coordinate] = sign * mv[mask]
    return point


# =============================================================================
# Sandwich Term Tables
# =============================================================================


def _sandwich_terms(motor_slots):
    """Derive the expanded ``reverse(M) * P * M`` product restricted to ``motor_slots``.

    Returns:
        Tuple ``(left, right)``:
        - left: ``(motor_slot, point_slot, blade, sign)`` terms of ``reverse(M) * P``,
          accumulated into a 32-component intermediate indexed by ``blade``.
        - right: ``(blade, motor_slot, coordinate, sign)`` terms multiplying the
          intermediate by ``M`` and landing on an output coordinate.
    """
    left = []
    for i in motor_slots:
        rev = MOTOR_REVERSION_SIGNS[i]
        for k, point_blade in enumerate(POINT_BLADES):
            sign, mask = blade_product(MOTOR_BLADES[i], point_blade)
            if sign:
                left.append((i, k, mask, rev * sign))

    right = []
    for mask in sorted({term[2] for term in left}):
        for j in motor_slots:
            sign, out = blade_product(mask, MOTOR_BLADES[j])
            if sign and out in COORDINATE_OF_BLADE:
                coordinate, coordinate_sign = COORDINATE_OF_BLADE[out]
                right.append((mask, j, coordinate, sign * coordinate_sign))

    used = {term[0] for term in right}
    left = [term for term in left if term[2] in used]
    return tuple(left), tuple(right)


POINT_LEFT_TERMS, POINT_RIGHT_TERMS = _sandwich_terms(range(MOTOR_SIZE))
DIRECTION_LEFT_TERMS, DIRECTION_RIGHT_TERMS = _sandwich_terms(ROTOR_SLOTS)


def axis_terms(axis: int):
    """Fold the direction sandwich for the fixed input ``e_axis`` (0 = x ... 3 = w).

    Returns:
        Tuple of ``(slot_a, slot_b, coordinate, coefficient)`` so that
        ``image[coordinate] = sum(coefficient * m[slot_a] * m[slot_b])``.
    """
    if not 0 <= axis < 4:
        raise ValueError(f"Axis must be in [0, 3], got {axis}")

    right_by_blade = defaultdict(list)
    for mask, j, coordinate, sign in DIRECTION_RIGHT_TERMS:
        right_by_blade[mask].append((j, coordinate, sign))

    coefficients = defaultdict(int)
    for i, k, mask, left_sign in DIRECTION_LEFT_TERMS:
        coordinate_index, point_sign = POINT_COEFFICIENTS[k]
        if coordinate_index is None:
            value = point_sign
        elif coordinate_index == axis:
            value = point_sign
        else:
            continue
        for j, coordinate, right_sign in right_by_blade[mask]:
            coefficients[(i, j, coordinate)] += left_sign * right_sign * value

    return tuple(
        (i, j, coordinate, value)
        for (i, j, coordinate), value in sorted(coefficients.items())
        if value != 0
    )


Y_AXIS_TERMS = axis_terms(1)
