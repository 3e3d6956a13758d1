"""Input checks layered above the rendering core.

The Taichi side never validates anything: a non-unit motor silently shears
space and a negative radius just produces odd normals. Everything that
enters the scene or camera fields from Python is checked here first, and
rejected with a ``SceneValidationError`` that names the offending value.

Colors are the one exception: values outside [0, 1] are legal (they clamp
in the final image) and only produce a warning.

This module itself creates no Taichi fields.
"""

import logging
import math
from typing import Any

from hyperray.algebra import motors
from hyperray.algebra.blades import MOTOR_SIZE

logger = logging.getLogger(__name__)

# Tolerance on reverse(M) * M == 1 for accepted motors
MOTOR_UNIT_TOLERANCE = 1e-3

SCENE_DOCUMENT_KEYS = ("camera", "groups", "hyperspheres", "hyperplanes")

VIEW_AXES_NAMES = ("xyz", "xwz", "xyw")


class SceneValidationError(ValueError):
    """Raised when a scene, camera or scene document is malformed."""


def validate_vector(value, size: int, name: str) -> tuple[float, ...]:
    """Check that ``value`` is a sequence of ``size`` finite numbers.

    Returns:
        The components as a tuple of floats.

    Raises:
        SceneValidationError: On wrong length, non-numeric or non-finite input.
    """
    try:
        components = tuple(float(v) for v in value)
    except (TypeError, ValueError) as exc:
        raise SceneValidationError(f"{name} must be a sequence of {size} numbers, got {value!r}") from exc
    if len(components) != size:
        raise SceneValidationError(
            f"{name} must have {size} components, got {len(components)}"
        )
    if not all(math.isfinite(v) for v in components):
        raise SceneValidationError(f"{name} must be finite, got {components}")
    return components


def validate_color(color, name: str = "color") -> tuple[float, float, float]:
    """Check an RGB color. Components outside [0, 1] are logged, not rejected."""
    components = validate_vector(color, 3, name)
    if any(c < 0.0 or c > 1.0 for c in components):
        logger.warning("%s %s has components outside [0, 1]; they will clamp", name, components)
    return components


def validate_positive(value, name: str) -> float:
    """Check that a scalar is finite and strictly positive."""
    (result,) = validate_vector((value,), 1, name)
    if result <= 0.0:
        raise SceneValidationError(f"{name} must be positive, got {result}")
    return result


def validate_radius(radius) -> float:
    return validate_positive(radius, "radius")


def validate_extents(width, height, depth) -> tuple[float, float, float]:
    """Check hyperplane extents.

    Zero and ``+inf`` are allowed; a slab with infinite extents is an
    unbounded plane. NaN and negative values are rejected.
    """
    extents = []
    for label, extent in zip(("width", "height", "depth"), (width, height, depth)):
        try:
            extent = float(extent)
        except (TypeError, ValueError) as exc:
            raise SceneValidationError(f"{label} must be a number, got {extent!r}") from exc
        if math.isnan(extent) or extent < 0.0:
            raise SceneValidationError(f"{label} must be non-negative, got {extent}")
        extents.append(extent)
    return tuple(extents)


def validate_motor(motor, tolerance: float = MOTOR_UNIT_TOLERANCE) -> tuple[float, ...]:
    """Check that a motor has 16 finite coefficients and is unit.

    Raises:
        SceneValidationError: If ``reverse(M) * M`` differs from 1 by more
            than ``tolerance`` in any component.
    """
    coefficients = validate_vector(motor, MOTOR_SIZE, "motor")
    if not motors.is_unit(coefficients, tolerance):
        raise SceneValidationError(f"motor is not unit within {tolerance}: {coefficients}")
    return coefficients


def validate_camera(camera) -> None:
    """Check a camera record: finite components and non-zero direction vectors.

    Orthonormality is not required; a skewed basis only distorts the image.
    """
    validate_vector(camera.position, 4, "camera position")
    for name in ("forward", "up", "right"):
        vector = validate_vector(getattr(camera, name), 4, f"camera {name}")
        if not any(vector):
            raise SceneValidationError(f"camera {name} must not be the zero vector")


def validate_angles(angles) -> dict[str, float]:
    """Check a mapping of rotation plane names to finite angles."""
    if angles is None:
        return {}
    if not isinstance(angles, dict):
        raise SceneValidationError(f"rotation angles must be a mapping, got {type(angles).__name__}")
    unknown = set(angles) - set(motors.ROTATION_PLANES)
    if unknown:
        raise SceneValidationError(
            f"unknown rotation planes {sorted(unknown)}; expected {sorted(motors.ROTATION_PLANES)}"
        )
    return {plane: validate_vector((angle,), 1, f"{plane} angle")[0] for plane, angle in angles.items()}


def validate_document(data: Any) -> dict[str, Any]:
    """Check the top-level shape of a scene document.

    A document is a mapping whose optional ``groups``, ``hyperspheres`` and
    ``hyperplanes`` entries are lists of mappings and whose optional
    ``camera`` entry is a mapping. Unknown keys are ignored with a warning.

    Returns:
        The document itself.
    """
    if not isinstance(data, dict):
        raise SceneValidationError(f"scene document must be a mapping, got {type(data).__name__}")

    extra = set(data) - set(SCENE_DOCUMENT_KEYS)
    if extra:
        logger.warning("Ignoring unknown scene document keys: %s", sorted(extra))

    if "camera" in data and not isinstance(data["camera"], dict):
        raise SceneValidationError("scene document 'camera' must be a mapping")

    for key in ("groups", "hyperspheres", "hyperplanes"):
        entries = data.get(key, [])
        if not isinstance(entries, list):
            raise SceneValidationError(f"scene document '{key}' must be a list")
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise SceneValidationError(f"scene document '{key}[{index}]' must be a mapping")
    return data


def validate_view_axes(value) -> str:
    """Check a view axes name ("xyz", "xwz" or "xyw", any case)."""
    name = str(value).lower()
    if name not in VIEW_AXES_NAMES:
        raise SceneValidationError(f"unknown view axes {value!r}; expected one of {VIEW_AXES_NAMES}")
    return name
