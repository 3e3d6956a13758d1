"""Camera basis and primary ray generation for 4D views.

A 4D camera is a position plus three direction vectors (forward, up, right).
The image plane spans up and right; the fourth local axis is simply not seen.
Which three of the camera's local axes are used is selected by ``ViewAxes``,
so one camera rig can be looked through as an XYZ, XWZ or XYW slice.

The basis is not checked for orthonormality here. Use
``hyperray.scene.validation.validate_camera`` for that.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from hyperray.camera.basis import Camera, setup_camera
    >>>
    >>> camera = Camera(
    ...     position=(0.0, 0.0, -5.0, 0.0),
    ...     forward=(0.0, 0.0, 1.0, 0.0),
    ...     up=(0.0, 1.0, 0.0, 0.0),
    ...     right=(1.0, 0.0, 0.0, 0.0),
    ... )
    >>> setup_camera(camera)
"""

import math
from dataclasses import dataclass, field
from enum import Enum

import numpy as np
import taichi as ti
import taichi.math as tm

from hyperray.algebra import motors
from hyperray.core.ray import Ray, make_ray

Vector4 = tuple[float, float, float, float]

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class Camera:
    """A 4D camera record.

    Attributes:
        position: Camera position (x, y, z, w).
        forward: Direction through the image center.
        up: Direction of increasing image row.
        right: Direction of increasing image column.
    """

    position: Vector4
    forward: Vector4
    up: Vector4
    right: Vector4


class ViewAxes(Enum):
    """Which local camera axes become (forward, up, right)."""

    XYZ = "xyz"
    XWZ = "xwz"
    XYW = "xyw"

    @property
    def axes(self) -> tuple[int, int, int]:
        """Local axis indices (0 = x ... 3 = w) for forward, up and right."""
        return tuple("xyzw".index(c) for c in self.value)


def camera_from_motor(motor, view_axes: ViewAxes = ViewAxes.XYZ) -> Camera:
    """Build a camera from a motor placing the camera's local frame.

    The camera sits at the image of the origin and looks along its local x
    axis. ``view_axes`` picks the local axes used for up and right.

    Args:
        motor: The 16 motor coefficients.
        view_axes: The local axes to view through.

    Returns:
        The camera record.
    """
    forward_axis, up_axis, right_axis = view_axes.axes

    def axis(index):
        return tuple(float(v) for v in motors.basis_image(motor, index))

    return Camera(
        position=tuple(float(v) for v in motors.position(motor)),
        forward=axis(forward_axis),
        up=axis(up_axis),
        right=axis(right_axis),
    )


@dataclass
class CameraRig:
    """A movable camera: a position, free rotations and a clamped pitch.

    The free rotations are applied first (in plane order), then the pitch in
    the xy plane, then the translation to ``position``. Pitch is kept within
    a quarter turn either way so the view never flips over.

    Attributes:
        position: Rig position (x, y, z, w).
        angles: Plane name to angle in radians for the free rotations.
        pitch: Rotation in the xy plane in radians.
        view_axes: Default axes to look through.
    """

    position: Vector4 = (0.0, 0.0, 0.0, 0.0)
    angles: dict[str, float] = field(default_factory=dict)
    pitch: float = 0.0
    view_axes: ViewAxes = ViewAxes.XYZ

    def __post_init__(self) -> None:
        self.pitch = min(max(self.pitch, -0.5 * math.pi), 0.5 * math.pi)

    def rotation(self) -> np.ndarray:
        """The rotation-only motor of the rig."""
        free = motors.from_position_and_angles((0.0, 0.0, 0.0, 0.0), self.angles)
        return motors.then(free, motors.rotation("xy", self.pitch))

    def motor(self) -> np.ndarray:
        """The full motor placing the rig in the world."""
        return motors.then(self.rotation(), motors.translation(self.position))

    def move(self, forward: float = 0.0, up: float = 0.0, right: float = 0.0, ana: float = 0.0) -> None:
        """Move the rig along its own local x, y, z and w axes."""
        rotation = self.rotation()
        offset = np.asarray(self.position, dtype=np.float64)
        for axis, amount in enumerate((forward, up, right, ana)):
            if amount:
                offset = offset + amount * motors.basis_image(rotation, axis)
        self.position = tuple(float(v) for v in offset)

    def camera(self, view_axes: ViewAxes | None = None) -> Camera:
        """The camera record seen through ``view_axes`` (default: the rig's own)."""
        return camera_from_motor(self.motor(), view_axes or self.view_axes)


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_position = ti.Vector.field(4, dtype=ti.f32, shape=())
_camera_forward = ti.Vector.field(4, dtype=ti.f32, shape=())
_camera_up = ti.Vector.field(4, dtype=ti.f32, shape=())
_camera_right = ti.Vector.field(4, dtype=ti.f32, shape=())


def setup_camera(camera: Camera) -> None:
    """Write a camera record to the Taichi fields read by the dispatch kernel.

    Must be called from Python scope, not from within a kernel.
    """
    _camera_position[None] = [float(v) for v in camera.position]
    _camera_forward[None] = [float(v) for v in camera.forward]
    _camera_up[None] = [float(v) for v in camera.up]
    _camera_right[None] = [float(v) for v in camera.right]


def get_camera_info() -> dict[str, Vector4]:
    """Get the current camera fields as plain tuples, for inspection."""
    return {
        name: tuple(float(v) for v in f[None])
        for name, f in (
            ("position", _camera_position),
            ("forward", _camera_forward),
            ("up", _camera_up),
            ("right", _camera_right),
        )
    }


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_primary_ray(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray through the center of a pixel.

    Pixel centers map to ``uv`` in [-1, 1] on both axes; the horizontal
    component is stretched by the aspect ratio so pixels stay square.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray from the camera position with a unit direction.
    """
    w = ti.cast(width, ti.f32)
    h = ti.cast(height, ti.f32)
    u = (ti.cast(pixel_i, ti.f32) + 0.5) / w * 2.0 - 1.0
    v = (ti.cast(pixel_j, ti.f32) + 0.5) / h * 2.0 - 1.0
    aspect = w / h

    direction = tm.normalize(
        _camera_forward[None] + _camera_up[None] * v + _camera_right[None] * u * aspect
    )
    return make_ray(_camera_position[None], direction)
