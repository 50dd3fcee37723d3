"""Pytest configuration for ray caster tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import math

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
def clear_render_buffers():
    """Clear the batch renderer's image buffer before and after each test."""
    # Import here so Taichi is initialized before fields are allocated
    from src.caster.core.integrator import clear_render_target

    clear_render_target()
    yield
    clear_render_target()


@pytest.fixture
def default_world():
    """The two concentric spheres under one white light."""
    from src.caster.scene.world import World

    return World.default()


@pytest.fixture
def front_camera():
    """An 11x11 camera at (0, 0, -5) looking at the origin."""
    from src.caster.camera.camera import Camera
    from src.caster.core.matrix import view_transform
    from src.caster.core.vector import point, vector

    transform = view_transform(point(0, 0, -5), point(0, 0, 0), vector(0, 1, 0))
    return Camera(11, 11, math.pi / 2, transform)
