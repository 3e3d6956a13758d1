"""Per-pixel dispatch and the output surface.

Every pixel is independent: one primary ray from the camera, one traversal,
at most one shadow ray, one write. The frame kernel runs over a grid rounded
up to whole TILE_SIZE x TILE_SIZE tiles and skips the coordinates that fall
outside the image, so the loop shape only depends on the tile count.

Colors are clamped to [0, 1] and stored as RGBA with alpha 1. Row 0 is the
bottom of the image; ``get_image_numpy`` flips to the usual top-left origin.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from hyperray.core.integrator import render_frame, setup_render_target
    >>> from hyperray.camera.basis import Camera, setup_camera
    >>>
    >>> setup_camera(Camera((0, 0, -5, 0), (0, 0, 1, 0), (0, 1, 0, 0), (1, 0, 0, 0)))
    >>> setup_render_target(320, 240)
    >>> render_frame()
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from hyperray.camera.basis import get_primary_ray
from hyperray.core.shading import trace_ray

vec3 = tm.vec3
vec4 = tm.vec4

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Dispatch granularity in pixels along each axis
TILE_SIZE = 16

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# RGBA output surface (preallocated to max size)
_output = ti.Vector.field(4, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Set the active image size and clear the output surface.

    Args:
        width: Image width in pixels (1 to MAX_IMAGE_WIDTH).
        height: Image height in pixels (1 to MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If a dimension is not positive or exceeds the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the output surface to transparent black."""
    _output.fill(0.0)


def reset_render_target() -> None:
    """Forget the render target so that rendering requires a new setup."""
    _render_target_initialized[None] = 0
    _image_width[None] = 0
    _image_height[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def get_output() -> "ti.MatrixField":
    """Get the full preallocated RGBA output field.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    return _output


def dispatch_grid(width: int, height: int) -> tuple[int, int]:
    """Round an image size up to whole tiles."""
    return (
        (width + TILE_SIZE - 1) // TILE_SIZE * TILE_SIZE,
        (height + TILE_SIZE - 1) // TILE_SIZE * TILE_SIZE,
    )


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.func
def shade_pixel(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> vec4:
    """Trace the primary ray of one pixel and return its clamped RGBA color."""
    ray = get_primary_ray(pixel_i, pixel_j, width, height)
    color = tm.clamp(trace_ray(ray), 0.0, 1.0)
    return vec4(color.x, color.y, color.z, 1.0)


@ti.kernel
def _render_frame(width: ti.i32, height: ti.i32, grid_width: ti.i32, grid_height: ti.i32):
    for i, j in ti.ndrange(grid_width, grid_height):
        if i < width and j < height:
            _output[i, j] = shade_pixel(i, j, width, height)


@ti.kernel
def _render_single_pixel(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> vec4:
    return shade_pixel(pixel_i, pixel_j, width, height)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_frame() -> None:
    """Render every pixel of the active render target once.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    grid_width, grid_height = dispatch_grid(width, height)
    _render_frame(width, height, grid_width, grid_height)


def render_pixel(pixel_i: int, pixel_j: int) -> tuple[float, float, float, float]:
    """Render a single pixel without touching the output surface.

    This is a Python-callable function for testing. For whole images use
    render_frame(), which processes all pixels in parallel.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).

    Returns:
        Tuple of (R, G, B, A).

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If the pixel lies outside the image.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    if not (0 <= pixel_i < width and 0 <= pixel_j < height):
        raise ValueError(f"Pixel ({pixel_i}, {pixel_j}) outside {width}x{height} image")

    color = _render_single_pixel(pixel_i, pixel_j, width, height)
    return tuple(float(c) for c in color)


def get_image_numpy() -> npt.NDArray[np.float32]:
    """Get the rendered RGBA image as a NumPy array.

    The array shape is (height, width, 4) with the first row at the top.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    # Extract active region
    image = _output.to_numpy()[:width, :height, :]

    # Transpose from (width, height, 4) to (height, width, 4) for standard image format
    image = np.transpose(image, (1, 0, 2))

    # Flip vertically (Taichi uses bottom-left origin, images use top-left)
    image = np.flipud(image)

    return np.ascontiguousarray(image, dtype=np.float32)
