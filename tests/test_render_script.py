"""Tests for the render_scene command-line script."""

import importlib.util
from pathlib import Path

import numpy as np
import pytest

SCRIPT = Path(__file__).resolve().parent.parent / "examples" / "render_scene.py"
SCENE_FILE = SCRIPT.parent / "scenes" / "default.json"


@pytest.fixture(scope="module")
def render_script():
    spec = importlib.util.spec_from_file_location("render_scene", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestArguments:
    """Tests for argument parsing."""

    def test_defaults(self, render_script):
        args = render_script.parse_args([])
        assert args.scene is None
        assert (args.width, args.height) == (640, 480)
        assert args.view_axes is None
        assert args.output == "render.png"
        assert args.arch == "gpu"
        assert not args.verbose

    def test_options(self, render_script):
        args = render_script.parse_args(
            ["--scene", "s.json", "--width", "64", "--view-axes", "xwz", "--arch", "cpu", "--verbose"]
        )
        assert args.scene == Path("s.json")
        assert args.width == 64
        assert args.view_axes == "xwz"
        assert args.arch == "cpu"
        assert args.verbose

    def test_rejects_unknown_view(self, render_script):
        with pytest.raises(SystemExit):
            render_script.parse_args(["--view-axes", "zyx"])


class TestRenderScene:
    """Tests for rendering through the script entry point."""

    def test_default_scene(self, render_script, tmp_path):
        from hyperray.preview.export import load_png

        output = render_script.render_scene(width=24, height=16, output_path=str(tmp_path / "out.png"))
        assert output.exists()
        assert load_png(output).shape == (16, 24, 3)

    def test_scene_file_with_view(self, render_script, tmp_path):
        from hyperray.preview.export import load_png

        output = render_script.render_scene(
            scene_path=SCENE_FILE,
            width=20,
            height=20,
            view_axes="xyw",
            output_path=str(tmp_path / "xyw.png"),
        )
        image = load_png(output)
        assert image.shape == (20, 20, 3)
        assert np.any(image != image[0, 0])
