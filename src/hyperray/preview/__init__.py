"""Preview module for image output.

Components:
    export: PNG export with Pillow, uint8 conversion and image comparison
"""

from hyperray.preview.export import compute_rmse, image_to_uint8, load_png, save_png

__all__ = [
    "save_png",
    "load_png",
    "image_to_uint8",
    "compute_rmse",
]
