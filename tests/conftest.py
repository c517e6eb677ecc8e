"""Pytest configuration for path tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate the fields declared by already imported modules.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_render_state():
    """Clear scene, render target and integrator settings around each test."""
    # Import here so Taichi is initialized before fields are declared
    from src.pathtracer.core.integrator import clear_render_target, reset_integrator_settings
    from src.pathtracer.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        clear_render_target()
        reset_integrator_settings()

    _clear_all()
    yield
    _clear_all()


@pytest.fixture
def furnace_scene():
    """A single emissive diffuse sphere with the camera-free origin inside it.

    Every path started at the center hits the sphere at every bounce, so the
    expected radiance is emission / (1 - albedo).
    """
    from src.pathtracer.scene.manager import SceneManager

    scene = SceneManager()
    scene.add_diffuse_sphere(
        (0.0, 0.0, 0.0), 10.0, albedo=(0.5, 0.5, 0.5), emission=(1.0, 1.0, 1.0)
    )
    return scene
