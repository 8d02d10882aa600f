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
def clear_scene_data():
    """Empty the shape arena and switch the light off around each test."""
    # Import here to ensure Taichi is initialized
    from whitted.scene.intersection import clear_scene
    from whitted.scene.light import disable_light

    clear_scene()
    disable_light()
    yield
    clear_scene()
    disable_light()
