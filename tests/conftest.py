"""Pytest configuration for ray tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
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
    # Import here to ensure Taichi is initialized
    from src.firsthit.core.renderer import reset_render_target
    from src.firsthit.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        reset_render_target()

    _clear_all()

    yield

    _clear_all()


@pytest.fixture
def look_down_negative_z():
    """Camera at (0, 0, 5) looking at the origin, square image."""
    from src.firsthit.camera.view import ViewCamera, setup_camera

    camera = ViewCamera(eye=(0.0, 0.0, 5.0), target=(0.0, 0.0, 0.0))
    setup_camera(camera)
    return camera
