"""Scene model: spheres referencing a shared list of materials by index.

The Scene owns two ordered lists. Spheres hold a non-owning integer index into
the material list, so many spheres can share one material. Indices are checked
when spheres are added and again when the scene is validated before upload to
the GPU; the render kernel itself never range-checks them.

Roughness and metallic are stored with each material for editing and
serialization but are not consumed by any shading mode.

Example:
    >>> from src.raytracer.core.vector import Vector3
    >>> from src.raytracer.scene.scene import Scene
    >>> scene = Scene()
    >>> pink = scene.add_material(albedo=Vector3(1.0, 0.0, 1.0), roughness=0.0)
    >>> scene.add_sphere(position=Vector3(0.0, 0.0, 0.0), radius=1.0, material_index=pink)
    0
    >>> scene.get_sphere_count()
    1
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.raytracer.core.vector import Color, Vector3

# Maximum number of primitives/materials mirrored into GPU fields
MAX_SPHERES = 1024
MAX_MATERIALS = 256


@dataclass
class Material:
    """Surface description shared by index across spheres.

    Attributes:
        albedo: Base color, components conventionally in [0, 1] (not clamped).
        roughness: Surface roughness. Stored only.
        metallic: Metalness. Stored only.
    """

    albedo: Color = field(default_factory=lambda: Color(1.0, 1.0, 1.0))
    roughness: float = 1.0
    metallic: float = 0.0


@dataclass
class Sphere:
    """A sphere primitive in the scene.

    Attributes:
        position: Center in world space.
        radius: Radius, must be positive.
        material_index: Index into Scene.materials.
    """

    position: Vector3 = field(default_factory=Vector3)
    radius: float = 0.5
    material_index: int = 0


@dataclass
class SceneConfig:
    """Plain-data form of a scene.

    Attributes:
        materials: One dict per material with albedo, roughness, metallic.
        spheres: One dict per sphere with position, radius, material_index.
    """

    materials: list[dict[str, Any]] = field(default_factory=list)
    spheres: list[dict[str, Any]] = field(default_factory=list)


class Scene:
    """Ordered collection of spheres and materials.

    Attributes:
        spheres: Spheres in intersection order (earlier wins exact ties).
        materials: Materials addressed by Sphere.material_index.
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.spheres: list[Sphere] = []
        self.materials: list[Material] = []

    def clear(self) -> None:
        """Remove all spheres and materials."""
        self.spheres.clear()
        self.materials.clear()

    # =========================================================================
    # Materials
    # =========================================================================

    def add_material(
        self,
        albedo: Color | tuple[float, float, float] = (1.0, 1.0, 1.0),
        roughness: float = 1.0,
        metallic: float = 0.0,
    ) -> int:
        """Add a material to the scene.

        Args:
            albedo: Base color as a Color or (R, G, B) tuple.
            roughness: Surface roughness.
            metallic: Metalness.

        Returns:
            The index of the new material.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
        """
        if len(self.materials) >= MAX_MATERIALS:
            raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")
        material = Material(
            albedo=Color.from_iterable(albedo),
            roughness=float(roughness),
            metallic=float(metallic),
        )
        self.materials.append(material)
        return len(self.materials) - 1

    def get_material_count(self) -> int:
        """Get the number of materials in the scene."""
        return len(self.materials)

    # =========================================================================
    # Spheres
    # =========================================================================

    def add_sphere(
        self,
        position: Vector3 | tuple[float, float, float],
        radius: float = 0.5,
        material_index: int = 0,
    ) -> int:
        """Add a sphere referencing an existing material.

        Args:
            position: Center in world space.
            radius: Radius (must be positive).
            material_index: Index of a material already in the scene.

        Returns:
            The index of the new sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If the radius is not positive or the material index
                does not refer to an existing material.
        """
        if len(self.spheres) >= MAX_SPHERES:
            raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
        sphere = Sphere(
            position=Vector3.from_iterable(position),
            radius=float(radius),
            material_index=int(material_index),
        )
        self._validate_sphere(len(self.spheres), sphere)
        self.spheres.append(sphere)
        return len(self.spheres) - 1

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return len(self.spheres)

    def material_for(self, sphere_index: int) -> Material:
        """Get the material used by a sphere."""
        return self.materials[self.spheres[sphere_index].material_index]

    # =========================================================================
    # Validation
    # =========================================================================

    def _validate_sphere(self, index: int, sphere: Sphere) -> None:
        if not sphere.radius > 0.0:
            raise ValueError(f"Sphere {index} has non-positive radius: {sphere.radius}")
        if not 0 <= sphere.material_index < len(self.materials):
            raise ValueError(
                f"Sphere {index} has invalid material_index {sphere.material_index} "
                f"({len(self.materials)} materials in scene)"
            )

    def validate(self) -> None:
        """Check every sphere against the current material list.

        Spheres and materials are plain mutable dataclasses that editors may
        change between frames, so this is re-run before each GPU upload.

        Raises:
            RuntimeError: If a capacity limit is exceeded.
            ValueError: If any sphere is invalid.
        """
        if len(self.spheres) > MAX_SPHERES:
            raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
        if len(self.materials) > MAX_MATERIALS:
            raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")
        for index, sphere in enumerate(self.spheres):
            self._validate_sphere(index, sphere)

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene as a SceneConfig."""
        config = SceneConfig()
        for material in self.materials:
            config.materials.append(
                {
                    "albedo": material.albedo.to_tuple(),
                    "roughness": material.roughness,
                    "metallic": material.metallic,
                }
            )
        for sphere in self.spheres:
            config.spheres.append(
                {
                    "position": sphere.position.to_tuple(),
                    "radius": sphere.radius,
                    "material_index": sphere.material_index,
                }
            )
        return config

    def from_config(self, config: SceneConfig) -> None:
        """Replace the scene contents with those of a SceneConfig.

        Entries are loaded into a new scene first (materials before spheres so
        sphere indices can be validated). This scene is left untouched if any
        entry is rejected.

        Raises:
            ValueError: If an entry has unknown keys or invalid values.
            RuntimeError: If the config exceeds capacity.
        """
        staged = Scene()
        for entry in config.materials:
            _check_keys(entry, {"albedo", "roughness", "metallic"}, "material")
            staged.add_material(**entry)
        for entry in config.spheres:
            _check_keys(entry, {"position", "radius", "material_index"}, "sphere")
            staged.add_sphere(**entry)

        self.spheres = staged.spheres
        self.materials = staged.materials

    def to_dict(self) -> dict[str, Any]:
        """Export the scene as a plain dictionary."""
        config = self.to_config()
        return {"materials": config.materials, "spheres": config.spheres}

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load the scene from a plain dictionary produced by to_dict()."""
        config = SceneConfig(
            materials=list(data.get("materials", [])),
            spheres=list(data.get("spheres", [])),
        )
        self.from_config(config)

    @classmethod
    def from_dict_data(cls, data: dict[str, Any]) -> Scene:
        """Create a new scene from a plain dictionary."""
        scene = cls()
        scene.from_dict(data)
        return scene

    def __repr__(self) -> str:
        return f"Scene(spheres={len(self.spheres)}, materials={len(self.materials)})"


def _check_keys(entry: dict[str, Any], allowed: set[str], kind: str) -> None:
    unknown = set(entry) - allowed
    if unknown:
        raise ValueError(f"Unknown {kind} keys: {sorted(unknown)}")
