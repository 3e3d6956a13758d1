"""Pytest configuration for hyperray tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session. Modules that
create Taichi fields are imported inside tests and fixtures, after
initialization.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene and render target state before and after each test."""
    from hyperray.core.integrator import clear_render_target, reset_render_target
    from hyperray.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        clear_render_target()
        reset_render_target()

    _clear_all()

    yield

    _clear_all()
