"""Default demonstration scene.

A red hypersphere resting on a wide grey floor slab, with two smaller
hyperspheres offset along z and w so that the XWZ and XYW views show
something different from the XYZ view. The camera stands back along -x and
looks toward +x, tilted slightly down.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from hyperray.scene.default_scene import create_default_scene
    >>>
    >>> scene, rig = create_default_scene()
    >>> scene.upload()
    (3, 1)
"""

from dataclasses import dataclass

from hyperray.camera.basis import CameraRig
from hyperray.scene.manager import SceneManager


@dataclass
class DefaultSceneParams:
    """Parameters for the default scene.

    Attributes:
        sphere_color: Color of the central hypersphere.
        floor_color: Color of the floor slab.
        floor_size: Full extent of the floor along x, z and w.
        camera_distance: Distance of the camera from the origin along -x.
        camera_pitch: Camera pitch in radians (negative looks down).
    """

    sphere_color: tuple[float, float, float] = (1.0, 0.0, 0.0)
    floor_color: tuple[float, float, float] = (0.8, 0.8, 0.8)
    floor_size: float = 20.0
    camera_distance: float = 5.0
    camera_pitch: float = -0.15


def create_default_scene(
    params: DefaultSceneParams | None = None,
) -> tuple[SceneManager, CameraRig]:
    """Build the default scene.

    The returned manager has not been uploaded yet; call ``upload()`` before
    rendering.

    Args:
        params: Scene parameters. Uses defaults if None.

    Returns:
        Tuple of (scene manager, camera rig). The rig is also stored as the
        manager's camera so that it is saved with the scene.
    """
    if params is None:
        params = DefaultSceneParams()

    scene = SceneManager()

    scene.add_hypersphere("Center", radius=1.0, color=params.sphere_color)

    scene.add_group("Satellites", position=(0.0, -0.5, 0.0, 0.0))
    scene.add_hypersphere(
        "Z Satellite", position=(0.5, 0.0, 2.0, 0.0), radius=0.5, color=(0.1, 0.3, 0.9), group="Satellites"
    )
    scene.add_hypersphere(
        "W Satellite", position=(0.5, 0.0, 0.0, 2.0), radius=0.5, color=(0.1, 0.8, 0.2), group="Satellites"
    )

    scene.add_hyperplane(
        "Floor",
        position=(0.0, -1.0, 0.0, 0.0),
        width=params.floor_size,
        height=params.floor_size,
        depth=params.floor_size,
        color=params.floor_color,
    )

    rig = CameraRig(
        position=(-params.camera_distance, 0.5, 0.0, 0.0),
        pitch=params.camera_pitch,
    )
    scene.camera = rig
    return scene, rig
