"""Scene module for scene data and ray-scene queries.

Components:
    scene: Sphere/Material dataclasses and the validated Scene container
    intersection: Taichi field mirror of a scene and closest-hit query
    presets: Ready-made single-sphere and two-sphere scenes

Scene data is authored on the Python side and uploaded once per render into
Structure-of-Arrays Taichi fields.
"""

from .intersection import HitPayload, SceneBuffers, TraceResult, intersect_scene
from .presets import (
    SCENE_PRESETS,
    DefaultSceneParams,
    create_default_scene,
    create_scene,
    create_single_sphere_scene,
)
from .scene import MAX_MATERIALS, MAX_SPHERES, Material, Scene, SceneConfig, Sphere

__all__ = [
    # Scene model
    "Scene",
    "Sphere",
    "Material",
    "SceneConfig",
    "MAX_SPHERES",
    "MAX_MATERIALS",
    # Intersection
    "SceneBuffers",
    "HitPayload",
    "TraceResult",
    "intersect_scene",
    # Presets
    "create_default_scene",
    "create_single_sphere_scene",
    "create_scene",
    "DefaultSceneParams",
    "SCENE_PRESETS",
]
