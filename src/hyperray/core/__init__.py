"""Core rendering module.

Components:
    ray: Ray data structure and 4D vector helpers
    motor: Device-side motor algebra (reverse, point and direction
        transforms, axis image)
    shading: Sky gradient, sun disc and shadowed direct lighting
    integrator: Per-pixel dispatch and the RGBA output surface
    renderer: Renderer facade with camera upload and image access

All compute-intensive operations use Taichi kernels.
"""

from .motor import apply_to_direction, apply_to_point, axis_image, motor16, reverse
from .ray import Ray, dot, length_squared, make_ray, normalize, ray_at, sign, vec3, vec4

# Note: shading, integrator and renderer are NOT imported here to avoid circular imports.
# Import directly from hyperray.core.integrator or hyperray.core.renderer when needed.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "vec4",
    "dot",
    "length_squared",
    "normalize",
    "sign",
    "motor16",
    "reverse",
    "apply_to_point",
    "apply_to_direction",
    "axis_image",
]
