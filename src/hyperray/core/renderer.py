"""Renderer facade over the dispatch kernel.

The Renderer owns the image size, validates and uploads the camera, runs
frames and hands back NumPy images. It delegates to the global Taichi
fields in ``hyperray.core.integrator`` and ``hyperray.camera.basis``, so
only one Renderer should be active at a time.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from hyperray.core.renderer import Renderer
    >>> from hyperray.camera.basis import Camera
    >>>
    >>> renderer = Renderer(320, 240)
    >>> renderer.set_camera(Camera((0, 0, -5, 0), (0, 0, 1, 0), (0, 1, 0, 0), (1, 0, 0, 0)))
    >>> renderer.render()
    >>> image = renderer.get_image_numpy()
"""

import logging
import time
from pathlib import Path

import numpy as np
import numpy.typing as npt

from hyperray.camera.basis import Camera, setup_camera
from hyperray.core.integrator import (
    clear_render_target,
    get_image_numpy,
    render_frame,
    render_pixel,
    setup_render_target,
)
from hyperray.preview.export import image_to_uint8, save_png
from hyperray.scene.validation import validate_camera

logger = logging.getLogger(__name__)


class Renderer:
    """Renders the current scene through a camera into an RGBA image.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        frame_count: Number of frames rendered since the last resize.
    """

    def __init__(self, width: int, height: int) -> None:
        """Initialize the renderer.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).

        Raises:
            ValueError: If dimensions are not positive or exceed the maximum.
        """
        self._width = width
        self._height = height
        self._camera: Camera | None = None
        self.frame_count = 0
        setup_render_target(width, height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def camera(self) -> Camera | None:
        """The camera last passed to set_camera()."""
        return self._camera

    def set_camera(self, camera: Camera) -> None:
        """Validate a camera and upload it for the next frame.

        Raises:
            SceneValidationError: If the camera has non-finite components or
                a zero direction vector.
        """
        validate_camera(camera)
        setup_camera(camera)
        self._camera = camera

    def resize(self, width: int, height: int) -> None:
        """Resize the render target and clear it.

        Raises:
            ValueError: If dimensions are not positive or exceed the maximum.
        """
        setup_render_target(width, height)
        self._width = width
        self._height = height
        self.frame_count = 0

    def clear(self) -> None:
        """Clear the output surface without changing its size."""
        clear_render_target()

    def render(self) -> float:
        """Render one frame.

        Returns:
            Wall time of the frame in seconds.

        Raises:
            RuntimeError: If no camera has been set.
        """
        if self._camera is None:
            raise RuntimeError("No camera set. Call set_camera() first.")

        start = time.perf_counter()
        render_frame()
        elapsed = time.perf_counter() - start

        self.frame_count += 1
        logger.debug("Frame %d (%dx%d) took %.3f s", self.frame_count, self.width, self.height, elapsed)
        return elapsed

    def render_pixel(self, pixel_i: int, pixel_j: int) -> tuple[float, float, float, float]:
        """Render one pixel (row 0 at the bottom) and return its RGBA color."""
        if self._camera is None:
            raise RuntimeError("No camera set. Call set_camera() first.")
        return render_pixel(pixel_i, pixel_j)

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the rendered image, shape (height, width, 4), top row first."""
        return get_image_numpy()

    def get_image_uint8(self, gamma: float = 1.0) -> npt.NDArray[np.uint8]:
        """Get the rendered RGB image as 8-bit values."""
        return image_to_uint8(self.get_image_numpy()[:, :, :3], gamma=gamma)

    def save_image(self, filepath: str | Path, gamma: float = 1.0) -> None:
        """Save the rendered image as a PNG file."""
        save_png(self.get_image_numpy(), filepath, gamma=gamma)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return f"Renderer(width={self.width}, height={self.height}, frames={self.frame_count})"
