"""Tests that every package module imports and exposes its public names.

Modules holding @ti.dataclass structs and @ti.kernel functions must keep
their type annotations evaluated at import time, so each one is imported
here on its own.
"""

import importlib

import pytest

MODULES = [
    "src.raytracer",
    "src.raytracer.core",
    "src.raytracer.core.vector",
    "src.raytracer.core.ray",
    "src.raytracer.core.pixels",
    "src.raytracer.core.shading",
    "src.raytracer.core.renderer",
    "src.raytracer.geometry",
    "src.raytracer.geometry.sphere",
    "src.raytracer.scene",
    "src.raytracer.scene.scene",
    "src.raytracer.scene.intersection",
    "src.raytracer.scene.presets",
    "src.raytracer.camera",
    "src.raytracer.camera.camera",
    "src.raytracer.camera.transforms",
    "src.raytracer.preview",
    "src.raytracer.preview.export",
    "src.raytracer.preview.display",
    "src.raytracer.preview.interactive",
]


class TestModuleImports:
    """Each module imports cleanly."""

    @pytest.mark.parametrize("name", MODULES)
    def test_import(self, name):
        module = importlib.import_module(name)
        assert module.__name__ == name

    @pytest.mark.parametrize(
        "name",
        ["src.raytracer.core", "src.raytracer.geometry", "src.raytracer.scene", "src.raytracer.camera"],
    )
    def test_exports_resolve(self, name):
        module = importlib.import_module(name)
        for attr in module.__all__:
            assert hasattr(module, attr), f"{name} is missing {attr}"


class TestTaichiTypes:
    """Taichi structs and kernels built at import time are usable."""

    def test_hit_payload_fields(self):
        import taichi as ti

        from src.raytracer.scene.intersection import HitPayload, vec3

        distance = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            payload = HitPayload(
                hit_distance=2.5,
                object_index=3,
                world_position=vec3(0.0, 0.0, 0.0),
                world_normal=vec3(0.0, 1.0, 0.0),
            )
            distance[None] = payload.hit_distance

        test_kernel()
        assert distance[None] == 2.5

    def test_render_kernel_runs(self, make_viewport, single_sphere_scene):
        camera, renderer = make_viewport(2, 2, vertical_fov=90.0)
        image = renderer.render(camera, single_sphere_scene)
        assert image is not None
        assert image.shape == (4,)
