"""Scene manager for named, grouped 4D objects.

This module keeps the editable description of a scene on the Python side and
turns it into the flat primitive records the renderer reads. Objects carry a
name, an optional group and a transform (a position plus six plane rotation
angles); a group carries a transform of its own that is applied after the
object's. ``upload()`` validates everything, composes the motors and writes
the result into the Taichi scene fields.

Scenes serialize to plain dictionaries and JSON files with the keys
``camera``, ``groups``, ``hyperspheres`` and ``hyperplanes``.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from hyperray.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> floor = scene.add_group("floor")
    >>> slab = scene.add_hyperplane("slab", position=(0, -1, 0, 0), width=10, height=10, depth=10,
    ...                             color=(0.8, 0.8, 0.8), group="floor")
    >>> ball = scene.add_hypersphere("ball", radius=1.0, color=(1.0, 0.0, 0.0))
    >>> scene.upload()
    (1, 1)
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np

from hyperray.algebra import motors
from hyperray.camera.basis import CameraRig, ViewAxes
from hyperray.scene.intersection import (
    MAX_HYPERPLANES,
    MAX_HYPERSPHERES,
    add_hyperplane,
    add_hypersphere,
    clear_scene,
    get_hyperplane_count,
    get_hypersphere_count,
)
from hyperray.scene.validation import (
    SceneValidationError,
    validate_angles,
    validate_color,
    validate_document,
    validate_extents,
    validate_motor,
    validate_radius,
    validate_vector,
    validate_view_axes,
)

logger = logging.getLogger(__name__)

WHITE = (1.0, 1.0, 1.0)


@dataclass
class ObjectTransform:
    """Position and plane rotation angles of an object or group.

    Attributes:
        position: Translation (x, y, z, w).
        angles: Plane name ("xy", "xz", "xw", "yz", "yw", "zw") to angle
            in radians. Missing planes are not rotated.
    """

    position: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)
    angles: dict[str, float] = field(default_factory=dict)

    def motor(self) -> np.ndarray:
        """Rotate about the local origin, then translate to ``position``."""
        return motors.from_position_and_angles(self.position, self.angles)

    def to_dict(self) -> dict[str, Any]:
        return {"position": list(self.position), "angles": dict(self.angles)}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "ObjectTransform":
        data = data or {}
        return cls(
            position=validate_vector(data.get("position", (0.0, 0.0, 0.0, 0.0)), 4, "position"),
            angles=validate_angles(data.get("angles", {})),
        )


@dataclass
class Group:
    """A named transform shared by the objects that reference it."""

    name: str
    transform: ObjectTransform = field(default_factory=ObjectTransform)


@dataclass
class HypersphereInfo:
    """A hypersphere as edited on the Python side.

    The center is the image of the local origin under the global transform,
    so the rotation angles have no visible effect on a lone hypersphere.
    """

    name: str
    transform: ObjectTransform = field(default_factory=ObjectTransform)
    radius: float = 1.0
    color: tuple[float, float, float] = WHITE
    group: str | None = None


@dataclass
class HyperplaneInfo:
    """A hyperplane slab as edited on the Python side.

    Attributes:
        name: Display name.
        transform: Local transform.
        width: Full extent along local z.
        height: Full extent along local x.
        depth: Full extent along local w.
        color: Surface color.
        group: Name of the group whose transform is applied after this one.
    """

    name: str
    transform: ObjectTransform = field(default_factory=ObjectTransform)
    width: float = 1.0
    height: float = 1.0
    depth: float = 1.0
    color: tuple[float, float, float] = WHITE
    group: str | None = None


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        camera: Camera rig settings, or None to leave the camera to the caller.
        groups: List of group configurations.
        hyperspheres: List of hypersphere configurations.
        hyperplanes: List of hyperplane configurations.
    """

    camera: dict[str, Any] | None = None
    groups: list[dict[str, Any]] = field(default_factory=list)
    hyperspheres: list[dict[str, Any]] = field(default_factory=list)
    hyperplanes: list[dict[str, Any]] = field(default_factory=list)


class SceneManager:
    """Python-side scene description that uploads to the Taichi scene fields.

    Attributes:
        groups: Groups by name.
        hyperspheres: Hyperspheres in insertion (and traversal) order.
        hyperplanes: Hyperplanes in insertion (and traversal) order.
        camera: Optional camera rig stored with the scene.
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.groups: dict[str, Group] = {}
        self.hyperspheres: list[HypersphereInfo] = []
        self.hyperplanes: list[HyperplaneInfo] = []
        self.camera: CameraRig | None = None

    def clear(self) -> None:
        """Remove every group, object and the camera, and empty the scene fields."""
        self.groups.clear()
        self.hyperspheres.clear()
        self.hyperplanes.clear()
        self.camera = None
        clear_scene()

    # =========================================================================
    # Groups
    # =========================================================================

    def add_group(self, name: str, position=(0.0, 0.0, 0.0, 0.0), angles=None) -> Group:
        """Add a named group.

        Raises:
            SceneValidationError: If a group with this name already exists.
        """
        if name in self.groups:
            raise SceneValidationError(f"Duplicate group name: {name!r}")
        group = Group(
            name=name,
            transform=ObjectTransform(validate_vector(position, 4, "position"), validate_angles(angles)),
        )
        self.groups[name] = group
        return group

    def remove_group(self, name: str) -> None:
        """Remove a group; its members become ungrouped.

        Raises:
            KeyError: If no group has this name.
        """
        del self.groups[name]
        self._cleanup_invalid_groups()

    def _resolve_group(self, group: str | None, owner: str) -> str | None:
        if group is not None and group not in self.groups:
            logger.warning("%s references unknown group %r; treating it as ungrouped", owner, group)
            return None
        return group

    def _cleanup_invalid_groups(self) -> None:
        for obj in (*self.hyperspheres, *self.hyperplanes):
            obj.group = self._resolve_group(obj.group, obj.name)

    # =========================================================================
    # Objects
    # =========================================================================

    def add_hypersphere(
        self,
        name: str,
        position=(0.0, 0.0, 0.0, 0.0),
        radius: float = 1.0,
        color=WHITE,
        angles=None,
        group: str | None = None,
    ) -> HypersphereInfo:
        """Add a hypersphere.

        Args:
            name: Display name.
            position: Local position (x, y, z, w).
            radius: Radius, must be positive.
            color: Surface color (r, g, b).
            angles: Local plane rotation angles in radians.
            group: Optional group name.

        Returns:
            The stored HypersphereInfo.

        Raises:
            SceneValidationError: If any parameter is malformed.
        """
        info = HypersphereInfo(
            name=name,
            transform=ObjectTransform(validate_vector(position, 4, "position"), validate_angles(angles)),
            radius=validate_radius(radius),
            color=validate_color(color, f"{name} color"),
            group=self._resolve_group(group, name),
        )
        self.hyperspheres.append(info)
        return info

    def add_hyperplane(
        self,
        name: str,
        position=(0.0, 0.0, 0.0, 0.0),
        width: float = 1.0,
        height: float = 1.0,
        depth: float = 1.0,
        color=WHITE,
        angles=None,
        group: str | None = None,
    ) -> HyperplaneInfo:
        """Add a hyperplane slab.

        The slab's thin axis is its local y; ``height``, ``width`` and
        ``depth`` bound local x, z and w.

        Raises:
            SceneValidationError: If any parameter is malformed.
        """
        width, height, depth = validate_extents(width, height, depth)
        info = HyperplaneInfo(
            name=name,
            transform=ObjectTransform(validate_vector(position, 4, "position"), validate_angles(angles)),
            width=width,
            height=height,
            depth=depth,
            color=validate_color(color, f"{name} color"),
            group=self._resolve_group(group, name),
        )
        self.hyperplanes.append(info)
        return info

    def remove_hypersphere(self, name: str) -> None:
        """Remove the first hypersphere called ``name``.

        Raises:
            KeyError: If there is none.
        """
        self.hyperspheres.remove(self._find(self.hyperspheres, name))

    def remove_hyperplane(self, name: str) -> None:
        """Remove the first hyperplane called ``name``.

        Raises:
            KeyError: If there is none.
        """
        self.hyperplanes.remove(self._find(self.hyperplanes, name))

    @staticmethod
    def _find(objects, name: str):
        for obj in objects:
            if obj.name == name:
                return obj
        raise KeyError(name)

    # =========================================================================
    # Upload
    # =========================================================================

    def global_motor(self, obj: HypersphereInfo | HyperplaneInfo) -> np.ndarray:
        """The object's transform followed by its group's transform, if any."""
        motor = obj.transform.motor()
        group = self.groups.get(obj.group) if obj.group is not None else None
        if group is not None:
            motor = motors.then(motor, group.transform.motor())
        return motor

    def upload(self) -> tuple[int, int]:
        """Validate the scene and write it into the Taichi scene fields.

        The fields are cleared first, so the device scene always mirrors this
        manager exactly.

        Returns:
            Tuple of (hypersphere count, hyperplane count).

        Raises:
            SceneValidationError: If a composed motor is not unit.
            RuntimeError: If a primitive store overflows.
        """
        if len(self.hyperspheres) > MAX_HYPERSPHERES:
            raise RuntimeError(f"Maximum number of hyperspheres ({MAX_HYPERSPHERES}) exceeded")
        if len(self.hyperplanes) > MAX_HYPERPLANES:
            raise RuntimeError(f"Maximum number of hyperplanes ({MAX_HYPERPLANES}) exceeded")

        self._cleanup_invalid_groups()
        clear_scene()

        for sphere in self.hyperspheres:
            center = motors.position(validate_motor(self.global_motor(sphere)))
            add_hypersphere(center, sphere.color, sphere.radius)

        for plane in self.hyperplanes:
            transform = validate_motor(self.global_motor(plane))
            add_hyperplane(transform, plane.color, plane.width, plane.height, plane.depth)

        counts = (get_hypersphere_count(), get_hyperplane_count())
        logger.info("Uploaded %d hyperspheres and %d hyperplanes", *counts)
        return counts

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object."""
        config = SceneConfig()

        if self.camera is not None:
            config.camera = {
                "position": list(self.camera.position),
                "angles": dict(self.camera.angles),
                "pitch": self.camera.pitch,
                "view_axes": self.camera.view_axes.value,
            }

        for group in self.groups.values():
            config.groups.append({"name": group.name, "transform": group.transform.to_dict()})

        for sphere in self.hyperspheres:
            config.hyperspheres.append(
                {
                    "name": sphere.name,
                    "group": sphere.group,
                    "transform": sphere.transform.to_dict(),
                    "radius": sphere.radius,
                    "color": list(sphere.color),
                }
            )

        for plane in self.hyperplanes:
            config.hyperplanes.append(
                {
                    "name": plane.name,
                    "group": plane.group,
                    "transform": plane.transform.to_dict(),
                    "width": plane.width,
                    "height": plane.height,
                    "depth": plane.depth,
                    "color": list(plane.color),
                }
            )

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene first. Groups are loaded before objects so
        that group references resolve; a reference to a missing group is
        logged and dropped.

        Raises:
            SceneValidationError: If the configuration contains invalid data.
        """
        self.clear()

        if config.camera is not None:
            self.camera = CameraRig(
                position=validate_vector(config.camera.get("position", (0.0, 0.0, 0.0, 0.0)), 4, "camera position"),
                angles=validate_angles(config.camera.get("angles", {})),
                pitch=validate_vector((config.camera.get("pitch", 0.0),), 1, "camera pitch")[0],
                view_axes=ViewAxes(validate_view_axes(config.camera.get("view_axes", "xyz"))),
            )

        for group_config in config.groups:
            transform = ObjectTransform.from_dict(group_config.get("transform"))
            self.add_group(
                group_config.get("name", "Default Group"),
                position=transform.position,
                angles=transform.angles,
            )

        for sphere_config in config.hyperspheres:
            transform = ObjectTransform.from_dict(sphere_config.get("transform"))
            self.add_hypersphere(
                sphere_config.get("name", "Default Hypersphere"),
                position=transform.position,
                radius=sphere_config.get("radius", 1.0),
                color=sphere_config.get("color", WHITE),
                angles=transform.angles,
                group=sphere_config.get("group"),
            )

        for plane_config in config.hyperplanes:
            transform = ObjectTransform.from_dict(plane_config.get("transform"))
            self.add_hyperplane(
                plane_config.get("name", "Default Hyperplane"),
                position=transform.position,
                width=plane_config.get("width", 1.0),
                height=plane_config.get("height", 1.0),
                depth=plane_config.get("depth", 1.0),
                color=plane_config.get("color", WHITE),
                angles=transform.angles,
                group=plane_config.get("group"),
            )

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        config = self.to_config()
        data: dict[str, Any] = {
            "groups": config.groups,
            "hyperspheres": config.hyperspheres,
            "hyperplanes": config.hyperplanes,
        }
        if config.camera is not None:
            data["camera"] = config.camera
        return data

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with optional 'camera', 'groups', 'hyperspheres'
                and 'hyperplanes' keys.
        """
        validate_document(data)
        config = SceneConfig(
            camera=data.get("camera"),
            groups=data.get("groups", []),
            hyperspheres=data.get("hyperspheres", []),
            hyperplanes=data.get("hyperplanes", []),
        )
        self.from_config(config)

    def save(self, path) -> None:
        """Write the scene to a JSON file."""
        path = Path(path)
        path.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Saved scene to %s", path)

    def load(self, path) -> None:
        """Replace the scene with the contents of a JSON file.

        Raises:
            SceneValidationError: If the file is not valid JSON or not a
                valid scene document.
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError as exc:
            raise SceneValidationError(f"{path} is not valid JSON: {exc}") from exc
        self.from_dict(data)
        logger.info(
            "Loaded scene from %s: %d groups, %d hyperspheres, %d hyperplanes",
            path,
            len(self.groups),
            len(self.hyperspheres),
            len(self.hyperplanes),
        )

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_hyperspheres() -> int:
        """Get the maximum number of hyperspheres supported."""
        return MAX_HYPERSPHERES

    @staticmethod
    def get_max_hyperplanes() -> int:
        """Get the maximum number of hyperplanes supported."""
        return MAX_HYPERPLANES
