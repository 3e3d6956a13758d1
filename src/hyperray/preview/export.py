"""Image export utilities for rendered images.

Rendered images are already clamped to [0, 1], so export is a matter of an
optional gamma curve, quantization and writing the file with Pillow.

Example:
    >>> from hyperray.preview.export import save_png
    >>> from hyperray.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(512, 512)
    >>> renderer.render()
    >>> save_png(renderer.get_image_numpy(), "output.png")
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)


def image_to_uint8(
    image: npt.NDArray[np.floating],
    *,
    gamma: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a float image in [0, 1] to uint8.

    Args:
        image: Image array of shape (H, W, 3) or (H, W, 4). Values outside
            [0, 1] are clamped.
        gamma: Gamma correction value. Default 1.0 (colors are written as
            rendered); use 2.2 for an sRGB-like curve.

    Returns:
        8-bit image array with the same shape.
    """
    processed = np.clip(np.asarray(image, dtype=np.float32), 0.0, 1.0)
    if gamma != 1.0:
        processed = np.power(processed, 1.0 / gamma)
    return np.round(processed * 255.0).astype(np.uint8)


def save_png(
    image: npt.NDArray[np.floating],
    filepath: str | Path,
    *,
    gamma: float = 1.0,
    alpha: bool = False,
) -> None:
    """Save a rendered image as an 8-bit PNG file.

    Args:
        image: Image array of shape (H, W, 3) or (H, W, 4), top row first.
        filepath: Output file path.
        gamma: Gamma correction applied to the color channels.
        alpha: Keep the alpha channel of an RGBA image. RGB images ignore it.

    Raises:
        ValueError: If the image does not have 3 or 4 channels.
    """
    if image.ndim != 3 or image.shape[2] not in (3, 4):
        raise ValueError(f"Expected an (H, W, 3) or (H, W, 4) image, got shape {image.shape}")

    channels = 4 if alpha and image.shape[2] == 4 else 3
    image_uint8 = image_to_uint8(image[:, :, :channels], gamma=gamma)

    mode = "RGBA" if channels == 4 else "RGB"
    PILImage.fromarray(image_uint8).save(filepath)
    logger.info("Wrote %dx%d %s image to %s", image.shape[1], image.shape[0], mode, filepath)


def load_png(filepath: str | Path) -> npt.NDArray[np.float32]:
    """Load an 8-bit PNG as an RGB float image in [0, 1]."""
    with PILImage.open(filepath) as pil_image:
        return np.asarray(pil_image.convert("RGB"), dtype=np.float32) / 255.0


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Compute root mean squared error between two images.

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
