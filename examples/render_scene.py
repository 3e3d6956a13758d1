#!/usr/bin/env python3
"""Render a 4D scene to a PNG file.

Without ``--scene`` the built-in default scene is rendered: a red
hypersphere over a floor slab with two satellites offset along z and w.

Usage:
    python -m examples.render_scene [options]

Options:
    --scene PATH        JSON scene file (default: built-in scene)
    --width WIDTH       Image width in pixels (default: 640)
    --height HEIGHT     Image height in pixels (default: 480)
    --view-axes AXES    Camera axes to look through: xyz, xwz or xyw
                        (default: the scene camera's, else xyz)
    --output OUTPUT     Output file path (default: render.png)
    --arch ARCH         Taichi backend: cpu or gpu (default: gpu, falling
                        back to cpu)
    --verbose           Log debug output

Example:
    python -m examples.render_scene --scene examples/scenes/default.json --view-axes xwz
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import taichi as ti

logger = logging.getLogger("render_scene")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a 4D scene to a PNG file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        type=Path,
        default=None,
        help="JSON scene file (default: built-in scene)",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=640,
        help="Image width in pixels (default: 640)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=480,
        help="Image height in pixels (default: 480)",
    )
    parser.add_argument(
        "--view-axes",
        choices=["xyz", "xwz", "xyw"],
        default=None,
        help="Camera axes to look through (default: the scene camera's, else xyz)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="render.png",
        help="Output file path (default: render.png)",
    )
    parser.add_argument(
        "--arch",
        choices=["cpu", "gpu"],
        default="gpu",
        help="Taichi backend (default: gpu, falling back to cpu)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output",
    )
    return parser.parse_args(argv)


def init_taichi(arch: str, verbose: bool) -> None:
    """Initialize Taichi on the requested backend, falling back to CPU."""
    log_level = ti.DEBUG if verbose else ti.WARN
    if arch == "gpu":
        try:
            ti.init(arch=ti.gpu, log_level=log_level)
            logger.info("Using GPU backend")
            return
        except RuntimeError as exc:
            logger.warning("GPU backend unavailable (%s); using CPU", exc)
    ti.init(arch=ti.cpu, log_level=log_level)
    logger.info("Using CPU backend")


def render_scene(
    scene_path: Path | None = None,
    width: int = 640,
    height: int = 480,
    view_axes: str | None = None,
    output_path: str = "render.png",
) -> Path:
    """Load or build a scene, render one frame and save it.

    Args:
        scene_path: JSON scene file, or None for the default scene.
        width: Image width in pixels.
        height: Image height in pixels.
        view_axes: "xyz", "xwz" or "xyw"; None uses the scene camera's.
        output_path: Output file path (PNG).

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from hyperray.camera.basis import CameraRig, ViewAxes
    from hyperray.core.renderer import Renderer
    from hyperray.scene.default_scene import create_default_scene
    from hyperray.scene.manager import SceneManager

    if scene_path is None:
        scene, rig = create_default_scene()
    else:
        scene = SceneManager()
        scene.load(scene_path)
        rig = scene.camera
        if rig is None:
            logger.warning("%s has no camera; using the default camera", scene_path)
            rig = CameraRig(position=(-5.0, 0.0, 0.0, 0.0))

    num_spheres, num_planes = scene.upload()

    axes = ViewAxes(view_axes) if view_axes is not None else rig.view_axes
    renderer = Renderer(width, height)
    renderer.set_camera(rig.camera(axes))

    logger.info(
        "Rendering %d hyperspheres and %d hyperplanes at %dx%d through %s",
        num_spheres,
        num_planes,
        width,
        height,
        axes.value,
    )
    elapsed = renderer.render()

    output_file = Path(output_path)
    renderer.save_image(output_file)
    logger.info("Saved %s in %.2fs", output_file.absolute(), elapsed)

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    init_taichi(args.arch, args.verbose)

    try:
        render_scene(
            scene_path=args.scene,
            width=args.width,
            height=args.height,
            view_axes=args.view_axes,
            output_path=args.output,
        )
        return 0
    except (OSError, ValueError, RuntimeError) as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
