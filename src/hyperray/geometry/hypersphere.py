"""Hypersphere primitive with closed-form ray intersection.

This module provides the Hypersphere dataclass, the Hit record shared by all
primitives, and the ray-hypersphere intersection routine.

The intersection solves |origin + t * direction - center|^2 = radius^2 in the
half-b form:

    oc = center - origin
    a = dot(direction, direction)
    h = dot(direction, oc)
    c = dot(oc, oc) - radius^2
    discriminant = h^2 - a * c

Only the near root (h - sqrt(discriminant)) / a is considered. When it is not
strictly positive the ray reports a miss, even if the far root is in front of
the origin; a ray starting inside a hypersphere therefore never hits it. Shadow
rays rely on this to leave a surface without re-hitting it.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from hyperray.geometry.hypersphere import Hypersphere, intersect_hypersphere
    >>> # Inside a kernel:
    >>> # sphere = Hypersphere(position=vec4(0.0), color=vec3(1.0, 0.0, 0.0), radius=1.0)
    >>> # hit = intersect_hypersphere(ray, sphere)
"""

import taichi as ti
import taichi.math as tm

from hyperray.core.ray import Ray, ray_at

# Type aliases using Taichi's math module
vec3 = tm.vec3
vec4 = tm.vec4


@ti.dataclass
class Hypersphere:
    """A hypersphere defined by center, color and radius.

    Attributes:
        position: The center point (vec4).
        color: Surface color (vec3).
        radius: The radius (positive).
    """

    position: vec4
    color: vec3
    radius: ti.f32


@ti.dataclass
class Hit:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: 1 if the ray intersected the primitive, 0 otherwise.
        distance: Ray parameter of the intersection. Only valid if hit == 1.
        position: The intersection point. Only valid if hit == 1.
        normal: Unit surface normal at the intersection. Only valid if hit == 1.
        color: Color of the primitive that was hit. Only valid if hit == 1.
    """

    hit: ti.i32
    distance: ti.f32
    position: vec4
    normal: vec4
    color: vec3


@ti.func
def make_miss() -> Hit:
    """Create a Hit record that reports no intersection."""
    return Hit(
        hit=0,
        distance=0.0,
        position=vec4(0.0, 0.0, 0.0, 0.0),
        normal=vec4(0.0, 0.0, 0.0, 0.0),
        color=vec3(0.0, 0.0, 0.0),
    )


@ti.func
def intersect_hypersphere(ray: Ray, sphere: Hypersphere) -> Hit:
    """Intersect a ray with a hypersphere.

    Args:
        ray: The ray to test. The direction need not be unit length; the
            quadratic coefficient ``a`` is computed from it.
        sphere: The hypersphere to test against.

    Returns:
        A Hit with the outward normal at the near intersection, or a miss when
        the discriminant is negative or the near root is not in front of the
        ray origin.
    """
    result = make_miss()

    oc = sphere.position - ray.origin
    a = tm.dot(ray.direction, ray.direction)
    h = tm.dot(ray.direction, oc)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = h * h - a * c

    if discriminant >= 0.0:
        distance = (h - ti.sqrt(discriminant)) / a
        if distance > 0.0:
            position = ray_at(ray, distance)
            result = Hit(
                hit=1,
                distance=distance,
                position=position,
                normal=(position - sphere.position) / sphere.radius,
                color=sphere.color,
            )

    return result


@ti.func
def make_hypersphere(position: vec4, color: vec3, radius: ti.f32) -> Hypersphere:
    """Create a hypersphere inside a kernel."""
    return Hypersphere(position=position, color=color, radius=radius)
