"""Direct lighting with one hard directional light and a sky fallback.

Shading is deliberately simple: there is a single sun at infinity, no
bounces and no soft shadows. A ray that escapes the scene takes the sky
color; a ray that hits a surface is lit by the sun when a shadow ray toward
it is unobstructed, and never falls below an ambient floor.

    color = hit.color * max(AMBIENT_FLOOR, shadow * dot(normal, sun))

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from hyperray.core.shading import trace_ray
    >>> # Inside a kernel:
    >>> # color = trace_ray(ray)
"""

import math

import taichi as ti
import taichi.math as tm

from hyperray.core.ray import Ray, make_ray
from hyperray.scene.intersection import intersect_scene

# Type aliases using Taichi's math module
vec3 = tm.vec3
vec4 = tm.vec4

# =============================================================================
# Shading Constants
# =============================================================================

# Offset of shadow ray origins along the surface normal
SHADOW_EPSILON = 1e-3

# Minimum light intensity applied to every hit, lit or not
AMBIENT_FLOOR = 0.1

# Cosine above which an escaping ray sees the sun disc
SUN_THRESHOLD = 0.99

# Direction toward the sun (not normalized)
SUN_DIRECTION = (-0.4, 1.0, -0.3, 0.2)

SUN_COLOR = (1.0, 0.9, 0.6)

# Sky gradient endpoints, looking straight down and straight up
SKY_DARK_COLOR = (0.1, 0.1, 0.15)
SKY_BRIGHT_COLOR = (0.5, 0.7, 1.0)

_sun_length = math.sqrt(sum(c * c for c in SUN_DIRECTION))
SUN_UNIT_DIRECTION = tuple(c / _sun_length for c in SUN_DIRECTION)

# Kernel-side constants
_SUN = vec4(*SUN_UNIT_DIRECTION)
_SUN_COLOR = vec3(*SUN_COLOR)
_SKY_DARK = vec3(*SKY_DARK_COLOR)
_SKY_BRIGHT = vec3(*SKY_BRIGHT_COLOR)


@ti.func
def sky_color(direction: vec4) -> vec3:
    """Color seen by a ray that escapes the scene.

    A linear blend from SKY_DARK_COLOR (direction.y = -1) to
    SKY_BRIGHT_COLOR (direction.y = +1), replaced by SUN_COLOR inside the
    sun disc.

    Args:
        direction: The ray direction. Expected to be unit length.

    Returns:
        The sky color (RGB).
    """
    t = 0.5 * (direction.y + 1.0)
    color = (1.0 - t) * _SKY_DARK + t * _SKY_BRIGHT
    if tm.dot(direction, _SUN) > SUN_THRESHOLD:
        color = _SUN_COLOR
    return color


@ti.func
def in_shadow(position: vec4, normal: vec4) -> ti.i32:
    """Check whether anything blocks the way from a surface point to the sun."""
    shadow_ray = make_ray(position + normal * SHADOW_EPSILON, _SUN)
    return intersect_scene(shadow_ray).hit


@ti.func
def trace_ray(ray: Ray) -> vec3:
    """Shade one ray against the scene.

    Args:
        ray: The primary ray.

    Returns:
        The unclamped color (RGB) for the ray.
    """
    color = vec3(0.0, 0.0, 0.0)
    rec = intersect_scene(ray)

    if rec.hit == 0:
        color = sky_color(ray.direction)
    else:
        shadow = 1.0
        if in_shadow(rec.position, rec.normal) == 1:
            shadow = 0.0
        intensity = tm.max(AMBIENT_FLOOR, shadow * tm.dot(rec.normal, _SUN))
        color = rec.color * intensity

    return color
