"""Scene primitive storage and nearest-hit traversal.

The scene stores hyperspheres and hyperplane slabs in Taichi fields using a
Structure of Arrays layout. Fields are written from Python scope between
dispatches and only read inside kernels.

Traversal is a linear scan: all hyperspheres first, then all hyperplanes, in
insertion order. A later primitive replaces the current best only when it is
strictly closer, so equidistant hits resolve to the primitive added first.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from hyperray.scene.intersection import add_hypersphere, clear_scene, intersect_scene
    >>> clear_scene()
    >>> add_hypersphere((0.0, 0.0, 0.0, 0.0), (1.0, 0.0, 0.0), 1.0)
    0
    >>> # Use intersect_scene within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from hyperray.algebra.blades import MOTOR_SIZE
from hyperray.core.ray import Ray
from hyperray.geometry.hyperplane import Hyperplane, intersect_hyperplane
from hyperray.geometry.hypersphere import Hit, Hypersphere, intersect_hypersphere, make_miss

# Type aliases using Taichi's math module
vec3 = tm.vec3
vec4 = tm.vec4

# Maximum number of primitives supported in the scene
MAX_HYPERSPHERES = 1024
MAX_HYPERPLANES = 1024

# Hypersphere storage
hypersphere_positions = ti.Vector.field(4, dtype=ti.f32, shape=MAX_HYPERSPHERES)
hypersphere_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_HYPERSPHERES)
hypersphere_radii = ti.field(dtype=ti.f32, shape=MAX_HYPERSPHERES)
num_hyperspheres = ti.field(dtype=ti.i32, shape=())

# Hyperplane storage
hyperplane_transforms = ti.Vector.field(MOTOR_SIZE, dtype=ti.f32, shape=MAX_HYPERPLANES)
hyperplane_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_HYPERPLANES)
hyperplane_widths = ti.field(dtype=ti.f32, shape=MAX_HYPERPLANES)
hyperplane_heights = ti.field(dtype=ti.f32, shape=MAX_HYPERPLANES)
hyperplane_depths = ti.field(dtype=ti.f32, shape=MAX_HYPERPLANES)
num_hyperplanes = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all primitives from the scene.

    Resets the primitive counts to zero. Field contents are left in place
    and overwritten as new primitives are added.
    """
    num_hyperspheres[None] = 0
    num_hyperplanes[None] = 0


def add_hypersphere(position, color, radius: float) -> int:
    """Add a hypersphere to the scene.

    Args:
        position: The center (x, y, z, w).
        color: The surface color (r, g, b).
        radius: The radius (should be positive).

    Returns:
        The index of the added hypersphere.

    Raises:
        RuntimeError: If the maximum number of hyperspheres is exceeded.
    """
    idx = num_hyperspheres[None]
    if idx >= MAX_HYPERSPHERES:
        raise RuntimeError(f"Maximum number of hyperspheres ({MAX_HYPERSPHERES}) exceeded")
    hypersphere_positions[idx] = [float(v) for v in position]
    hypersphere_colors[idx] = [float(v) for v in color]
    hypersphere_radii[idx] = radius
    num_hyperspheres[None] = idx + 1
    return idx


def add_hyperplane(transform, color, width: float, height: float, depth: float) -> int:
    """Add a hyperplane slab to the scene.

    Args:
        transform: The 16 motor coefficients placing the slab.
        color: The surface color (r, g, b).
        width: Full extent along the local z axis.
        height: Full extent along the local x axis.
        depth: Full extent along the local w axis.

    Returns:
        The index of the added hyperplane.

    Raises:
        RuntimeError: If the maximum number of hyperplanes is exceeded.
    """
    idx = num_hyperplanes[None]
    if idx >= MAX_HYPERPLANES:
        raise RuntimeError(f"Maximum number of hyperplanes ({MAX_HYPERPLANES}) exceeded")
    hyperplane_transforms[idx] = [float(v) for v in transform]
    hyperplane_colors[idx] = [float(v) for v in color]
    hyperplane_widths[idx] = width
    hyperplane_heights[idx] = height
    hyperplane_depths[idx] = depth
    num_hyperplanes[None] = idx + 1
    return idx


def get_hypersphere_count() -> int:
    """Get the number of hyperspheres in the scene."""
    return int(num_hyperspheres[None])


def get_hyperplane_count() -> int:
    """Get the number of hyperplanes in the scene."""
    return int(num_hyperplanes[None])


@ti.func
def get_hypersphere(i: ti.i32) -> Hypersphere:
    """Load hypersphere ``i`` from the scene fields."""
    return Hypersphere(
        position=hypersphere_positions[i],
        color=hypersphere_colors[i],
        radius=hypersphere_radii[i],
    )


@ti.func
def get_hyperplane(i: ti.i32) -> Hyperplane:
    """Load hyperplane ``i`` from the scene fields."""
    return Hyperplane(
        transform=hyperplane_transforms[i],
        color=hyperplane_colors[i],
        width=hyperplane_widths[i],
        height=hyperplane_heights[i],
        depth=hyperplane_depths[i],
    )


@ti.func
def intersect_scene(ray: Ray) -> Hit:
    """Find the nearest intersection of a ray with every primitive in the scene.

    Args:
        ray: The ray to trace.

    Returns:
        The closest Hit, or a miss when nothing is intersected.
    """
    result = make_miss()

    for i in range(num_hyperspheres[None]):
        rec = intersect_hypersphere(ray, get_hypersphere(i))
        if rec.hit == 1 and (result.hit == 0 or rec.distance < result.distance):
            result = rec

    for i in range(num_hyperplanes[None]):
        rec = intersect_hyperplane(ray, get_hyperplane(i))
        if rec.hit == 1 and (result.hit == 0 or rec.distance < result.distance):
            result = rec

    return result
