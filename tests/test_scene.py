"""Unit tests for the Python-side scene model.

Tests cover:
- Adding materials and spheres, index return values
- Validation of radii and material indices
- Capacity limits
- Re-validation after in-place edits
- Dictionary serialization and presets
"""

import pytest


class TestSceneBuilding:
    """Tests for Scene.add_material() and Scene.add_sphere()."""

    def test_empty_scene(self):
        from src.raytracer.scene.scene import Scene

        scene = Scene()
        assert scene.get_sphere_count() == 0
        assert scene.get_material_count() == 0
        scene.validate()

    def test_add_returns_indices(self):
        from src.raytracer.core.vector import Color, Vector3
        from src.raytracer.scene.scene import Scene

        scene = Scene()
        assert scene.add_material(albedo=Color(1.0, 0.0, 0.0)) == 0
        assert scene.add_material(albedo=(0.0, 1.0, 0.0)) == 1
        assert scene.add_sphere(Vector3(0.0, 0.0, -1.0), 0.5, 1) == 0
        assert scene.add_sphere((1.0, 0.0, -1.0), 0.25, 0) == 1
        assert scene.get_sphere_count() == 2
        assert scene.spheres[1].position == Vector3(1.0, 0.0, -1.0)

    def test_materials_are_shared_by_index(self):
        from src.raytracer.core.vector import Color
        from src.raytracer.scene.scene import Scene

        scene = Scene()
        red = scene.add_material(albedo=(1.0, 0.0, 0.0))
        scene.add_sphere((0.0, 0.0, 0.0), 1.0, red)
        scene.add_sphere((3.0, 0.0, 0.0), 1.0, red)

        scene.materials[red].albedo = Color(0.0, 0.0, 1.0)
        assert scene.material_for(0).albedo == Color(0.0, 0.0, 1.0)
        assert scene.material_for(1) is scene.material_for(0)

    def test_material_defaults(self):
        from src.raytracer.core.vector import Color
        from src.raytracer.scene.scene import Material

        material = Material()
        assert material.albedo == Color(1.0, 1.0, 1.0)
        assert material.roughness == 1.0
        assert material.metallic == 0.0

    def test_clear(self):
        from src.raytracer.scene.presets import create_default_scene

        scene = create_default_scene()
        scene.clear()
        assert scene.get_sphere_count() == 0
        assert scene.get_material_count() == 0


class TestSceneValidation:
    """Tests for invalid spheres and capacity limits."""

    def test_invalid_material_index(self):
        from src.raytracer.scene.scene import Scene

        scene = Scene()
        scene.add_material()
        with pytest.raises(ValueError, match="invalid material_index"):
            scene.add_sphere((0.0, 0.0, 0.0), 1.0, 1)
        with pytest.raises(ValueError, match="invalid material_index"):
            scene.add_sphere((0.0, 0.0, 0.0), 1.0, -1)
        assert scene.get_sphere_count() == 0

    def test_sphere_without_materials(self):
        from src.raytracer.scene.scene import Scene

        with pytest.raises(ValueError):
            Scene().add_sphere((0.0, 0.0, 0.0), 1.0, 0)

    @pytest.mark.parametrize("radius", [0.0, -1.0, float("nan")])
    def test_non_positive_radius(self, radius):
        from src.raytracer.scene.scene import Scene

        scene = Scene()
        scene.add_material()
        with pytest.raises(ValueError, match="non-positive radius"):
            scene.add_sphere((0.0, 0.0, 0.0), radius, 0)

    def test_validate_catches_edits(self):
        from src.raytracer.scene.presets import create_default_scene

        scene = create_default_scene()
        scene.spheres[0].material_index = 5
        with pytest.raises(ValueError, match="Sphere 0"):
            scene.validate()

    def test_validate_catches_removed_material(self):
        from src.raytracer.scene.presets import create_default_scene

        scene = create_default_scene()
        scene.materials.pop()
        with pytest.raises(ValueError, match="Sphere 1"):
            scene.validate()

    def test_material_capacity(self):
        from src.raytracer.scene.scene import MAX_MATERIALS, Scene

        scene = Scene()
        for _ in range(MAX_MATERIALS):
            scene.add_material()
        with pytest.raises(RuntimeError, match="materials"):
            scene.add_material()

    def test_sphere_capacity(self):
        from src.raytracer.scene.scene import MAX_SPHERES, Scene

        scene = Scene()
        scene.add_material()
        for i in range(MAX_SPHERES):
            scene.add_sphere((float(i), 0.0, 0.0), 0.5, 0)
        with pytest.raises(RuntimeError, match="spheres"):
            scene.add_sphere((0.0, 0.0, 0.0), 0.5, 0)


class TestSceneSerialization:
    """Tests for to_dict()/from_dict()."""

    def test_dict_round_trip(self):
        from src.raytracer.scene.presets import create_default_scene
        from src.raytracer.scene.scene import Scene

        original = create_default_scene()
        data = original.to_dict()
        restored = Scene.from_dict_data(data)

        assert restored.get_sphere_count() == 2
        assert restored.get_material_count() == 2
        assert restored.to_dict() == data
        assert data["spheres"][1]["position"] == (0.0, -101.0, 0.0)

    def test_unknown_keys_rejected(self):
        from src.raytracer.scene.scene import Scene

        data = {"materials": [{"albedo": (1.0, 1.0, 1.0), "emission": 2.0}], "spheres": []}
        with pytest.raises(ValueError, match="Unknown material keys"):
            Scene.from_dict_data(data)

    def test_invalid_sphere_in_dict(self):
        from src.raytracer.scene.scene import Scene

        data = {"materials": [], "spheres": [{"position": (0.0, 0.0, 0.0), "radius": 1.0}]}
        with pytest.raises(ValueError, match="invalid material_index"):
            Scene.from_dict_data(data)

    def test_failed_load_keeps_existing_scene(self):
        from src.raytracer.scene.presets import create_default_scene

        scene = create_default_scene()
        before = scene.to_dict()
        data = {
            "materials": [{"albedo": (1.0, 0.0, 0.0)}],
            "spheres": [{"position": (0.0, 0.0, 0.0), "radius": 1.0, "material_index": 5}],
        }
        with pytest.raises(ValueError, match="invalid material_index"):
            scene.from_dict(data)

        assert scene.get_sphere_count() == 2
        assert scene.get_material_count() == 2
        assert scene.to_dict() == before

    def test_failed_load_unknown_key_keeps_existing_scene(self):
        from src.raytracer.scene.presets import create_single_sphere_scene

        scene = create_single_sphere_scene()
        with pytest.raises(ValueError, match="Unknown sphere keys"):
            scene.from_dict({"materials": [{}], "spheres": [{"center": (0.0, 0.0, 0.0)}]})
        assert repr(scene) == "Scene(spheres=1, materials=1)"

    def test_successful_load_replaces_contents(self):
        from src.raytracer.scene.presets import create_default_scene, create_single_sphere_scene

        scene = create_default_scene()
        scene.from_dict(create_single_sphere_scene().to_dict())
        assert repr(scene) == "Scene(spheres=1, materials=1)"

    def test_repr(self):
        from src.raytracer.scene.presets import create_single_sphere_scene

        assert repr(create_single_sphere_scene()) == "Scene(spheres=1, materials=1)"


class TestPresets:
    """Tests for the preset scenes."""

    def test_single_sphere_scene(self):
        from src.raytracer.core.vector import Vector3
        from src.raytracer.scene.presets import create_single_sphere_scene

        scene = create_single_sphere_scene()
        assert scene.get_sphere_count() == 1
        assert scene.spheres[0].position == Vector3(0.0, 0.0, -1.0)
        assert scene.spheres[0].radius == 0.5

    def test_default_scene_layout(self):
        from src.raytracer.core.vector import Color, Vector3
        from src.raytracer.scene.presets import create_default_scene

        scene = create_default_scene()
        unit, ground = scene.spheres
        assert unit.position == Vector3(0.0, 0.0, 0.0)
        assert unit.radius == 1.0
        assert ground.radius == 100.0
        # Ground top touches the bottom of the unit sphere
        assert ground.position.y + ground.radius == -1.0
        assert scene.material_for(0).albedo == Color(1.0, 0.0, 1.0)
        assert scene.material_for(1).albedo == Color(0.2, 0.3, 1.0)
        assert scene.materials[1].roughness == 0.1

    def test_create_scene_by_name(self):
        from src.raytracer.scene.presets import SCENE_PRESETS, create_scene

        for name in SCENE_PRESETS:
            assert create_scene(name).get_sphere_count() >= 1

    def test_unknown_preset(self):
        from src.raytracer.scene.presets import create_scene

        with pytest.raises(ValueError, match="Unknown scene preset"):
            create_scene("cornell")
