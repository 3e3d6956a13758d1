"""Ray data structure and 4D vector utilities.

This module provides the Ray dataclass and the small set of vector helpers
used by the intersection and shading code. All functions are Taichi
functions and run inside kernels.

Vectors here have four independent spatial components (x, y, z, w); there is
no homogeneous coordinate.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from hyperray.core.ray import Ray, ray_at, vec4
    >>> # Inside a kernel:
    >>> # ray = Ray(origin=vec4(0.0, 0.0, -5.0, 0.0), direction=vec4(0.0, 0.0, 1.0, 0.0))
    >>> # point = ray_at(ray, 5.0)
"""

import taichi as ti
import taichi.math as tm

# Type aliases using Taichi's math module
vec3 = tm.vec3
vec4 = tm.vec4


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec4).
        direction: The direction of the ray (vec4). Primary and shadow rays
            are unit length; intersection code does not rely on it.
    """

    origin: vec4
    direction: vec4


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec4:
    """Compute the point ray.origin + t * ray.direction."""
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec4, direction: vec4) -> Ray:
    """Create a ray from origin and direction inside a kernel."""
    return Ray(origin=origin, direction=direction)


@ti.func
def dot(a: vec4, b: vec4) -> ti.f32:
    """Dot product of two 4D vectors."""
    return tm.dot(a, b)


@ti.func
def length_squared(v: vec4) -> ti.f32:
    """Squared Euclidean length of a 4D vector."""
    return tm.dot(v, v)


@ti.func
def normalize(v: vec4) -> vec4:
    """Scale a 4D vector to unit length."""
    return tm.normalize(v)


@ti.func
def sign(x: ti.f32) -> ti.f32:
    """Sign of a scalar: -1.0, 0.0 or 1.0."""
    result = 0.0
    if x > 0.0:
        result = 1.0
    elif x < 0.0:
        result = -1.0
    return result
