"""Pytest configuration for raytracer tests.

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


@pytest.fixture
def single_sphere_scene():
    """The one-sphere scene: radius 0.5 at (0, 0, -1)."""
    from src.raytracer.scene.presets import create_single_sphere_scene

    return create_single_sphere_scene()


@pytest.fixture
def make_viewport():
    """Factory returning a (camera, renderer) pair sized to the same viewport."""
    from src.raytracer.camera.camera import Camera
    from src.raytracer.core.renderer import Renderer, RenderSettings

    def _make(width, height, *, vertical_fov=45.0, position=(0.0, 0.0, 0.0), **settings):
        camera = Camera(vertical_fov, 0.1, 100.0, position=position)
        renderer = Renderer(RenderSettings(**settings))
        camera.on_resize(width, height)
        renderer.on_resize(width, height)
        return camera, renderer

    return _make
