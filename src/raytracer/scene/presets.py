"""Ready-made scenes.

Two scenes are provided:

- create_single_sphere_scene(): one sphere of radius 0.5 at (0, 0, -1) with a
  single white material. Rendered with ShadingMode.NORMAL this is the classic
  normal-visualization test image.
- create_default_scene(): a unit sphere resting on a very large "ground" sphere,
  each with its own material, meant for ShadingMode.ALBEDO.

Example:
    >>> from src.raytracer.scene.presets import create_default_scene
    >>> scene = create_default_scene()
    >>> scene.get_sphere_count(), scene.get_material_count()
    (2, 2)
"""

from dataclasses import dataclass

from src.raytracer.core.vector import Color, Vector3
from src.raytracer.scene.scene import Scene

SCENE_PRESETS = ("default", "single")


@dataclass
class DefaultSceneParams:
    """Parameters for the two-sphere scene.

    Attributes:
        sphere_albedo: Albedo of the unit sphere. Default is magenta.
        ground_albedo: Albedo of the ground sphere. Default is blue.
        ground_radius: Radius of the ground sphere.
    """

    sphere_albedo: tuple[float, float, float] = (1.0, 0.0, 1.0)
    ground_albedo: tuple[float, float, float] = (0.2, 0.3, 1.0)
    ground_radius: float = 100.0


def create_single_sphere_scene(
    center: tuple[float, float, float] = (0.0, 0.0, -1.0),
    radius: float = 0.5,
) -> Scene:
    """Create the one-sphere scene.

    Args:
        center: Sphere center.
        radius: Sphere radius.

    Returns:
        A Scene with one white material and one sphere.
    """
    scene = Scene()
    white = scene.add_material(albedo=Color(1.0, 1.0, 1.0))
    scene.add_sphere(position=center, radius=radius, material_index=white)
    return scene


def create_default_scene(params: DefaultSceneParams | None = None) -> Scene:
    """Create the two-sphere scene with materials.

    The unit sphere sits at the origin and the ground sphere's top touches
    y = -1, directly beneath it.

    Args:
        params: Optional customization. Defaults to DefaultSceneParams().

    Returns:
        A Scene with two materials and two spheres.
    """
    if params is None:
        params = DefaultSceneParams()

    scene = Scene()
    sphere_material = scene.add_material(albedo=params.sphere_albedo, roughness=0.0)
    ground_material = scene.add_material(albedo=params.ground_albedo, roughness=0.1)

    scene.add_sphere(position=Vector3(0.0, 0.0, 0.0), radius=1.0, material_index=sphere_material)
    scene.add_sphere(
        position=Vector3(0.0, -1.0 - params.ground_radius, 0.0),
        radius=params.ground_radius,
        material_index=ground_material,
    )
    return scene


def create_scene(name: str) -> Scene:
    """Create a preset scene by name ("default" or "single").

    Raises:
        ValueError: If the name is not a known preset.
    """
    if name == "default":
        return create_default_scene()
    if name == "single":
        return create_single_sphere_scene()
    raise ValueError(f"Unknown scene preset: {name} (expected one of {SCENE_PRESETS})")
