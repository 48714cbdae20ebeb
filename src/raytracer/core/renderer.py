"""Per-pixel primary-ray renderer.

The Renderer owns the output pixel buffer and its auxiliary per-pixel storage,
and runs one full pass over the viewport per render() call:

1. Upload the camera's cached ray directions and the scene's spheres/materials
   to Taichi fields.
2. For every pixel in parallel, build a ray from the camera position along the
   pixel's cached direction, find the closest sphere hit, and resolve a color
   (surface strategy on hit, background gradient on miss).
3. Pack the float colors into the ABGR uint32 buffer in place.

Pixels are independent: each one reads only camera and scene state and writes
only its own entries, so the pass is a single parallel loop with no
synchronization.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.raytracer.camera.camera import Camera
    >>> from src.raytracer.scene.presets import create_default_scene
    >>> camera = Camera(position=(0.0, 0.0, 6.0))
    >>> renderer = Renderer()
    >>> camera.on_resize(320, 240)
    >>> renderer.on_resize(320, 240)
    >>> image = renderer.render(camera, create_default_scene())
    >>> image.shape, image.dtype
    ((76800,), dtype('uint32'))
"""

import time
from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.raytracer.camera.camera import Camera
from src.raytracer.core.pixels import pack_abgr, unpack_abgr
from src.raytracer.core.ray import make_ray
from src.raytracer.core.shading import (
    DEFAULT_HORIZON_COLOR,
    DEFAULT_ZENITH_COLOR,
    ShadingMode,
    background_color,
    normal_color,
)
from src.raytracer.core.vector import Color
from src.raytracer.scene.intersection import SceneBuffers, intersect_scene
from src.raytracer.scene.scene import Scene

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Compile-time value of the shading template argument
_NORMAL_SHADING = int(ShadingMode.NORMAL)


@dataclass
class RenderSettings:
    """User-tunable render options.

    Attributes:
        flip_y: If True, rows are stored bottom-to-top in the output buffer.
        shading: Surface color strategy for hits.
        horizon_color: Background color for rays pointing straight down.
        zenith_color: Background color for rays pointing straight up.
    """

    flip_y: bool = False
    shading: ShadingMode = ShadingMode.ALBEDO
    horizon_color: Color = field(default_factory=lambda: DEFAULT_HORIZON_COLOR)
    zenith_color: Color = field(default_factory=lambda: DEFAULT_ZENITH_COLOR)


@ti.kernel
def _render_pass(
    ray_directions: ti.template(),
    colors: ti.template(),
    hit_distances: ti.template(),
    object_indices: ti.template(),
    centers: ti.template(),
    radii: ti.template(),
    material_indices: ti.template(),
    albedos: ti.template(),
    sphere_count: ti.i32,
    uniforms: ti.template(),
    flip_y: ti.i32,
    shading: ti.template(),
):
    """Trace every pixel of the viewport.

    ``uniforms`` holds three vec3 entries: camera origin, horizon color and
    zenith color.
    """
    height = ray_directions.shape[0]

    for y, x in ray_directions:
        ray = make_ray(uniforms[0], ray_directions[y, x])
        payload = intersect_scene(ray, centers, radii, sphere_count)

        color = background_color(ray.direction, uniforms[1], uniforms[2])
        if payload.object_index >= 0:
            if ti.static(shading == _NORMAL_SHADING):
                color = normal_color(payload.world_normal)
            else:
                color = albedos[material_indices[payload.object_index]]

        row = y
        if flip_y != 0:
            row = height - 1 - y
        colors[row, x] = color
        hit_distances[row, x] = payload.hit_distance
        object_indices[row, x] = payload.object_index


class Renderer:
    """Renders a Scene through a Camera into a packed ABGR pixel buffer.

    The buffer and all per-pixel Taichi fields are reallocated only when the
    viewport size actually changes.

    Attributes:
        settings: Flip, shading and background options used by render().
        last_render_time_ms: Wall time of the most recent render() call.
    """

    def __init__(self, settings: RenderSettings | None = None) -> None:
        self.settings = settings if settings is not None else RenderSettings()
        self.last_render_time_ms = 0.0

        self._width = 0
        self._height = 0
        self._image_data: npt.NDArray[np.uint32] | None = None

        # Per-pixel fields, shape (height, width)
        self._ray_directions: ti.MatrixField | None = None
        self._colors: ti.MatrixField | None = None
        self._hit_distances: ti.ScalarField | None = None
        self._object_indices: ti.ScalarField | None = None

        self._scene_buffers = SceneBuffers()
        self._uniforms = ti.Vector.field(3, dtype=ti.f32, shape=3)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def image_data(self) -> npt.NDArray[np.uint32] | None:
        """The packed output buffer (width * height uint32), or None before sizing."""
        return self._image_data

    @property
    def scene_buffers(self) -> SceneBuffers:
        """GPU mirror of the scene from the most recent render."""
        return self._scene_buffers

    def on_resize(self, width: int, height: int) -> None:
        """Resize the output buffer and per-pixel storage.

        Does nothing if either dimension is zero or the size is unchanged.
        """
        if width == 0 or height == 0:
            return
        if self._image_data is not None and width == self._width and height == self._height:
            return

        self._width = int(width)
        self._height = int(height)
        self._image_data = np.zeros(self._width * self._height, dtype=np.uint32)

        shape = (self._height, self._width)
        self._ray_directions = ti.Vector.field(3, dtype=ti.f32, shape=shape)
        self._colors = ti.Vector.field(3, dtype=ti.f32, shape=shape)
        self._hit_distances = ti.field(dtype=ti.f32, shape=shape)
        self._object_indices = ti.field(dtype=ti.i32, shape=shape)

    def render(self, camera: Camera, scene: Scene) -> npt.NDArray[np.uint32] | None:
        """Render one frame.

        Args:
            camera: Camera whose viewport matches this renderer's.
            scene: Scene to trace. Validated before upload.

        Returns:
            The packed pixel buffer (the same array object across frames of
            the same size), or None if no viewport has been set yet.

        Raises:
            ValueError: If the camera's viewport differs from the renderer's,
                or the scene is invalid.
        """
        if self._image_data is None:
            return None

        if camera.viewport_width != self._width or camera.viewport_height != self._height:
            raise ValueError(
                f"Camera viewport ({camera.viewport_width}x{camera.viewport_height}) "
                f"doesn't match renderer viewport ({self._width}x{self._height})"
            )

        start_time = time.perf_counter()

        directions = camera.ray_directions.reshape(self._height, self._width, 3)
        self._ray_directions.from_numpy(np.ascontiguousarray(directions, dtype=np.float32))

        sphere_count = self._scene_buffers.upload(scene)
        self._upload_uniforms(camera)

        _render_pass(
            self._ray_directions,
            self._colors,
            self._hit_distances,
            self._object_indices,
            self._scene_buffers.centers,
            self._scene_buffers.radii,
            self._scene_buffers.material_indices,
            self._scene_buffers.albedos,
            sphere_count,
            self._uniforms,
            1 if self.settings.flip_y else 0,
            int(self.settings.shading),
        )

        colors = self._colors.to_numpy()
        pack_abgr(colors, out=self._image_data.reshape(self._height, self._width))

        self.last_render_time_ms = (time.perf_counter() - start_time) * 1000.0
        return self._image_data

    def _upload_uniforms(self, camera: Camera) -> None:
        uniforms = np.array(
            [
                camera.position.to_tuple(),
                self.settings.horizon_color.to_tuple(),
                self.settings.zenith_color.to_tuple(),
            ],
            dtype=np.float32,
        )
        self._uniforms.from_numpy(uniforms)

    # =========================================================================
    # Output access
    # =========================================================================

    def _check_allocated(self) -> None:
        if self._image_data is None:
            raise RuntimeError("Render target not set up. Call on_resize() first.")

    def get_image_rgb(self) -> npt.NDArray[np.float32]:
        """The last frame as a float RGB image of shape (height, width, 3).

        Raises:
            RuntimeError: If no viewport has been set.
        """
        self._check_allocated()
        return unpack_abgr(self._image_data, self._width, self._height)

    def get_hit_distances(self) -> npt.NDArray[np.float32]:
        """Per-pixel closest hit distance (height, width), -1 on miss.

        Rows follow the same order as the pixel buffer.

        Raises:
            RuntimeError: If no viewport has been set.
        """
        self._check_allocated()
        return self._hit_distances.to_numpy()

    def get_object_indices(self) -> npt.NDArray[np.int32]:
        """Per-pixel index of the hit sphere (height, width), -1 on miss.

        Raises:
            RuntimeError: If no viewport has been set.
        """
        self._check_allocated()
        return self._object_indices.to_numpy()

    def __repr__(self) -> str:
        return (
            f"Renderer(width={self._width}, height={self._height}, "
            f"last_render_time_ms={self.last_render_time_ms:.3f})"
        )
