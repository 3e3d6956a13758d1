"""Scene module for primitive storage, traversal and scene management.

Components:
    intersection: Structure-of-Arrays primitive fields and nearest-hit
        traversal
    validation: Input checks and SceneValidationError
    manager: Named, grouped objects, upload to the scene fields, and JSON
        scene files
    default_scene: The demonstration scene used by the command line script
"""

from .default_scene import DefaultSceneParams, create_default_scene
from .intersection import (
    MAX_HYPERPLANES,
    MAX_HYPERSPHERES,
    add_hyperplane,
    add_hypersphere,
    clear_scene,
    get_hyperplane_count,
    get_hypersphere_count,
    intersect_scene,
)
from .manager import (
    Group,
    HyperplaneInfo,
    HypersphereInfo,
    ObjectTransform,
    SceneConfig,
    SceneManager,
)
from .validation import SceneValidationError

__all__ = [
    # Intersection module
    "add_hypersphere",
    "add_hyperplane",
    "clear_scene",
    "get_hypersphere_count",
    "get_hyperplane_count",
    "intersect_scene",
    "MAX_HYPERSPHERES",
    "MAX_HYPERPLANES",
    # Manager module
    "SceneManager",
    "ObjectTransform",
    "Group",
    "HypersphereInfo",
    "HyperplaneInfo",
    "SceneConfig",
    # Default scene module
    "create_default_scene",
    "DefaultSceneParams",
    # Validation module
    "SceneValidationError",
]
