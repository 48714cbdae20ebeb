"""Scene-level ray intersection on GPU-resident sphere data.

A Scene lives on the Python side as lists of dataclasses. Before each render
its spheres and materials are copied into Taichi fields owned by SceneBuffers
(Structure of Arrays layout), and the render kernel queries them through
intersect_scene().

The query is a brute-force linear scan: every sphere is tested and the smallest
positive distance wins. Comparisons are strict, so when two spheres report the
exact same distance the one stored first in the scene is kept.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.raytracer.scene.presets import create_single_sphere_scene
    >>> buffers = SceneBuffers()
    >>> buffers.upload(create_single_sphere_scene())
    1
    >>> buffers.trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
    TraceResult(object_index=0, hit_distance=0.5)
"""

from collections.abc import Iterable
from typing import NamedTuple

import numpy as np
import taichi as ti
import taichi.math as tm

from src.raytracer.core.ray import Ray, make_ray, ray_at
from src.raytracer.geometry.sphere import Sphere, hit_sphere, sphere_normal
from src.raytracer.scene.scene import MAX_MATERIALS, MAX_SPHERES, Scene

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Upper bound for hit distances; anything farther is ignored
T_MAX = 1e30


@ti.dataclass
class HitPayload:
    """Result of a closest-hit scene query.

    Attributes:
        hit_distance: Ray parameter of the closest hit, -1 on miss.
        object_index: Index of the hit sphere in scene order, -1 on miss.
        world_position: Hit point in world space. Only valid on hit.
        world_normal: Outward unit normal at the hit point. Only valid on hit.
    """

    hit_distance: ti.f32
    object_index: ti.i32
    world_position: vec3
    world_normal: vec3


class TraceResult(NamedTuple):
    """Python-side result of SceneBuffers.trace()."""

    object_index: int
    hit_distance: float

    @property
    def hit(self) -> bool:
        return self.object_index >= 0


@ti.func
def _make_miss_payload() -> HitPayload:
    return HitPayload(
        hit_distance=-1.0,
        object_index=-1,
        world_position=vec3(0.0, 0.0, 0.0),
        world_normal=vec3(0.0, 0.0, 0.0),
    )


@ti.func
def intersect_scene(
    ray: Ray,
    centers: ti.template(),
    radii: ti.template(),
    sphere_count: ti.i32,
) -> HitPayload:
    """Find the closest sphere hit with t > 0.

    Args:
        ray: The ray to trace.
        centers: Vector field of sphere centers.
        radii: Scalar field of sphere radii.
        sphere_count: Number of active entries in the fields.

    Returns:
        HitPayload for the closest hit, or a miss payload.
    """
    closest_t = T_MAX
    closest_index = -1

    for i in range(sphere_count):
        sphere = Sphere(center=centers[i], radius=radii[i])
        t = hit_sphere(ray.origin, ray.direction, sphere)
        if t > 0.0 and t < closest_t:
            closest_t = t
            closest_index = i

    result = _make_miss_payload()
    if closest_index >= 0:
        point = ray_at(ray, closest_t)
        result = HitPayload(
            hit_distance=closest_t,
            object_index=closest_index,
            world_position=point,
            world_normal=sphere_normal(point, centers[closest_index]),
        )
    return result


@ti.kernel
def _trace_single_ray(
    centers: ti.template(),
    radii: ti.template(),
    sphere_count: ti.i32,
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    result_index: ti.template(),
    result_distance: ti.template(),
):
    ray = make_ray(vec3(ox, oy, oz), vec3(dx, dy, dz))
    payload = intersect_scene(ray, centers, radii, sphere_count)
    result_index[None] = payload.object_index
    result_distance[None] = payload.hit_distance


class SceneBuffers:
    """Taichi field mirror of a Scene.

    Fields are preallocated to MAX_SPHERES / MAX_MATERIALS so that uploading a
    scene with a different number of spheres never reallocates them, which
    keeps compiled kernels valid across scene edits.

    Attributes:
        centers: Sphere centers (vec3 per sphere).
        radii: Sphere radii.
        material_indices: Material index per sphere.
        albedos: Material albedo per material.
        sphere_count: Number of spheres from the last upload.
        material_count: Number of materials from the last upload.
    """

    def __init__(self) -> None:
        self.centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
        self.radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
        self.material_indices = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
        self.albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
        self.sphere_count = 0
        self.material_count = 0

        self._result_index = ti.field(dtype=ti.i32, shape=())
        self._result_distance = ti.field(dtype=ti.f32, shape=())

    def upload(self, scene: Scene) -> int:
        """Validate a scene and copy it into the fields.

        Args:
            scene: The scene to mirror.

        Returns:
            The number of spheres uploaded.

        Raises:
            ValueError: If the scene fails validation.
            RuntimeError: If the scene exceeds capacity.
        """
        scene.validate()

        centers = np.zeros((MAX_SPHERES, 3), dtype=np.float32)
        radii = np.zeros(MAX_SPHERES, dtype=np.float32)
        material_indices = np.zeros(MAX_SPHERES, dtype=np.int32)
        albedos = np.zeros((MAX_MATERIALS, 3), dtype=np.float32)

        for i, sphere in enumerate(scene.spheres):
            centers[i] = sphere.position.to_tuple()
            radii[i] = sphere.radius
            material_indices[i] = sphere.material_index
        for i, material in enumerate(scene.materials):
            albedos[i] = material.albedo.to_tuple()

        self.centers.from_numpy(centers)
        self.radii.from_numpy(radii)
        self.material_indices.from_numpy(material_indices)
        self.albedos.from_numpy(albedos)

        self.sphere_count = len(scene.spheres)
        self.material_count = len(scene.materials)
        return self.sphere_count

    def trace(
        self,
        origin: Iterable[float],
        direction: Iterable[float],
    ) -> TraceResult:
        """Trace one ray against the uploaded spheres.

        Args:
            origin: Ray origin (x, y, z).
            direction: Ray direction (x, y, z), any nonzero length.

        Returns:
            TraceResult with the closest sphere index and distance, or
            (-1, -1.0) on miss.
        """
        ox, oy, oz = (float(v) for v in origin)
        dx, dy, dz = (float(v) for v in direction)
        _trace_single_ray(
            self.centers,
            self.radii,
            self.sphere_count,
            ox,
            oy,
            oz,
            dx,
            dy,
            dz,
            self._result_index,
            self._result_distance,
        )
        return TraceResult(int(self._result_index[None]), float(self._result_distance[None]))
