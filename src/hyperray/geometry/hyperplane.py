"""Finite hyperplane slab primitive with ray intersection.

A hyperplane slab lives in the y = 0 hyperplane of its local frame and is
placed in the world by a motor. It is bounded along the three in-plane local
axes and has no thickness along y:

    |x| <= height / 2
    |z| <= width / 2
    |w| <= depth / 2

Intersection moves the ray into the local frame with the reversed motor,
solves the crossing of y = 0 there, clips against the extents, and reports
the world-space hit point from the original ray. The normal is the world image
of the local y axis, flipped to face the side the ray came from.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from hyperray.geometry.hyperplane import Hyperplane, intersect_hyperplane
    >>> # Inside a kernel:
    >>> # plane = Hyperplane(transform=identity_motor, color=vec3(0.8), width=2.0, height=2.0, depth=2.0)
    >>> # hit = intersect_hyperplane(ray, plane)
"""

import taichi as ti
import taichi.math as tm

from hyperray.core.motor import apply_to_direction, apply_to_point, axis_image, motor16, reverse
from hyperray.core.ray import Ray, ray_at, sign

from .hypersphere import Hit, make_miss

# Type aliases using Taichi's math module
vec3 = tm.vec3
vec4 = tm.vec4


@ti.dataclass
class Hyperplane:
    """A finite hyperplane slab.

    Attributes:
        transform: Motor placing the slab's local frame in the world.
        color: Surface color (vec3).
        width: Full extent along the local z axis.
        height: Full extent along the local x axis.
        depth: Full extent along the local w axis.
    """

    transform: motor16
    color: vec3
    width: ti.f32
    height: ti.f32
    depth: ti.f32


@ti.func
def intersect_hyperplane(ray: Ray, plane: Hyperplane) -> Hit:
    """Intersect a ray with a hyperplane slab.

    The ray misses when its local origin and local direction have the same
    y sign (moving away from the plane), when it runs parallel to the plane,
    or when the crossing point lies outside the slab extents.

    Args:
        ray: The ray to test.
        plane: The slab to test against.

    Returns:
        A Hit record, or a miss.
    """
    result = make_miss()

    inverse = reverse(plane.transform)
    local_origin = apply_to_point(inverse, ray.origin)
    local_direction = apply_to_direction(inverse, ray.direction)

    origin_side = sign(local_origin.y)
    if local_direction.y != 0.0 and origin_side != sign(local_direction.y):
        distance = ti.abs(local_origin.y / local_direction.y)
        local_hit = local_origin + local_direction * distance

        inside = (
            ti.abs(local_hit.x) <= plane.height * 0.5
            and ti.abs(local_hit.z) <= plane.width * 0.5
            and ti.abs(local_hit.w) <= plane.depth * 0.5
        )
        if inside:
            result = Hit(
                hit=1,
                distance=distance,
                position=ray_at(ray, distance),
                normal=axis_image(plane.transform) * origin_side,
                color=plane.color,
            )

    return result


@ti.func
def make_hyperplane(
    transform: motor16,
    color: vec3,
    width: ti.f32,
    height: ti.f32,
    depth: ti.f32,
) -> Hyperplane:
    """Create a hyperplane slab inside a kernel."""
    return Hyperplane(transform=transform, color=color, width=width, height=height, depth=depth)
