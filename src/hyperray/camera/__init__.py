"""Camera module for 4D views and primary ray generation.

Components:
    basis: Camera records, ViewAxes, camera rigs built from motors, and
        the per-pixel primary ray function

Ray generation maps pixel centers to uv in [-1, 1] and stretches the
horizontal axis by the aspect ratio.
"""

from .basis import (
    Camera,
    CameraRig,
    ViewAxes,
    camera_from_motor,
    get_camera_info,
    get_primary_ray,
    setup_camera,
)

__all__ = [
    "Camera",
    "CameraRig",
    "ViewAxes",
    "camera_from_motor",
    "setup_camera",
    "get_camera_info",
    "get_primary_ray",
]
