"""Interactive viewer window using Taichi GGUI.

This module is the presentation shell around Camera and Renderer. Each frame
it:
- measures the frame timestep and collects pointer/button/key state
- lets the camera react to that input
- draws the settings panel (render time, flip, shading, sphere and material
  editors) and records whether anything was edited
- re-renders only when the camera moved or a setting/scene value changed
- shows the packed pixel buffer on the canvas

Controls:
    Hold right mouse button: enable camera movement and mouse look
    W/S, A/D, Q/E: move forward/back, left/right, down/up
    Shift: move three times faster

Example:
    >>> from src.raytracer.preview.interactive import InteractiveViewer
    >>> from src.raytracer.scene.presets import create_default_scene
    >>> viewer = InteractiveViewer(1280, 720, create_default_scene())
    >>> viewer.run()  # Blocks until the window is closed
"""

from __future__ import annotations

import os
import time
from datetime import datetime
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti

from src.raytracer.camera.camera import Camera, CameraInput, Key
from src.raytracer.core.pixels import unpack_abgr
from src.raytracer.core.renderer import Renderer, RenderSettings
from src.raytracer.core.shading import ShadingMode
from src.raytracer.core.vector import Color, Vector3

if TYPE_CHECKING:
    import numpy.typing as npt

    from src.raytracer.scene.scene import Scene

BOOST_MULTIPLIER = 3.0

# Slider tolerance for change detection
_EPSILON = 1e-6


class InteractiveViewer:
    """Interactive window that drives a Camera and Renderer.

    Attributes:
        width: Window (and viewport) width in pixels.
        height: Window (and viewport) height in pixels.
        scene: The scene being rendered and edited.
        camera: The fly-through camera.
        renderer: The renderer producing the displayed buffer.
        display_image: Taichi field storing the display image (RGB float),
            shape (width, height) with the origin at the bottom-left.
    """

    def __init__(
        self,
        width: int,
        height: int,
        scene: Scene,
        *,
        camera: Camera | None = None,
        settings: RenderSettings | None = None,
        title: str = "Ray Tracing",
    ) -> None:
        """Create the viewer. The window opens lazily on first use.

        Args:
            width: Window width in pixels.
            height: Window height in pixels.
            scene: Scene to render and edit.
            camera: Camera to drive (default: 45 degree camera at z=6).
            settings: Initial render settings.
            title: Window title.
        """
        self.width = width
        self.height = height
        self.scene = scene
        self.camera = camera if camera is not None else Camera(45.0, 0.1, 100.0, position=(0.0, 0.0, 6.0))
        self.renderer = Renderer(settings)
        self._title = title
        self._is_initialized = False

        self._window: ti.ui.Window | None = None
        self._canvas: ti.ui.Canvas | None = None

        self.display_image: ti.MatrixField = ti.Vector.field(3, dtype=ti.f32, shape=(width, height))

        self.camera.on_resize(width, height)
        self.renderer.on_resize(width, height)

    def _initialize_window(self) -> None:
        if self._is_initialized:
            return

        self._window = ti.ui.Window(name=self._title, res=(self.width, self.height), vsync=True)
        self._canvas = self._window.get_canvas()
        self._is_initialized = True

    @property
    def window(self) -> ti.ui.Window:
        """Get the Taichi GGUI window, initializing if needed."""
        if self._window is None:
            self._initialize_window()
        assert self._window is not None
        return self._window

    @property
    def canvas(self) -> ti.ui.Canvas:
        """Get the canvas for rendering."""
        if self._canvas is None:
            self._initialize_window()
        assert self._canvas is not None
        return self._canvas

    # =========================================================================
    # Display
    # =========================================================================

    def update_image(self, image: npt.NDArray[np.float32]) -> None:
        """Update the display image from a float RGB array.

        Args:
            image: Array of shape (height, width, 3), row 0 at the top.

        Raises:
            ValueError: If image shape doesn't match (height, width, 3).
        """
        expected_shape = (self.height, self.width, 3)
        if image.shape != expected_shape:
            raise ValueError(f"Image shape {image.shape} doesn't match expected {expected_shape}")

        # Taichi fields use (x, y) indexing with the origin at bottom-left
        image_transposed = np.ascontiguousarray(np.transpose(np.flipud(image), (1, 0, 2)))
        self.display_image.from_numpy(image_transposed.astype(np.float32))

    def update_from_buffer(self, buffer: npt.NDArray[np.uint32]) -> None:
        """Update the display image from a packed ABGR pixel buffer."""
        self.update_image(unpack_abgr(buffer, self.width, self.height))

    def is_running(self) -> bool:
        return self.window.running

    def show_frame(self) -> None:
        """Present the current display image."""
        self.canvas.set_image(self.display_image)
        self.window.show()

    def close(self) -> None:
        if self._window is not None:
            self._window.running = False

    @staticmethod
    def is_display_available() -> bool:
        """Check if a display is available for GUI rendering.

        Returns:
            True if a display is available, False for headless environments.
        """
        display = os.environ.get("DISPLAY")
        wayland = os.environ.get("WAYLAND_DISPLAY")

        if os.name == "nt":
            return True

        if os.uname().sysname == "Darwin":
            ssh_connection = os.environ.get("SSH_CONNECTION")
            return not (ssh_connection and not display)

        return bool(display or wayland)

    # =========================================================================
    # Input
    # =========================================================================

    def read_camera_input(self) -> CameraInput:
        """Snapshot pointer, button and key state for this frame."""
        window = self.window
        cursor_x, cursor_y = window.get_cursor_pos()

        keys = frozenset(key for key in Key if window.is_pressed(key.value))
        boosted = window.is_pressed(ti.ui.SHIFT)

        return CameraInput(
            # GGUI cursor coordinates are normalized with y pointing up
            mouse_position=(cursor_x * self.width, (1.0 - cursor_y) * self.height),
            rotating=window.is_pressed(ti.ui.RMB),
            keys=keys,
            speed_multiplier=BOOST_MULTIPLIER if boosted else 1.0,
        )

    # =========================================================================
    # Main loop
    # =========================================================================

    def render_frame(self) -> None:
        """Render the scene and push the result to the display image."""
        buffer = self.renderer.render(self.camera, self.scene)
        if buffer is not None:
            self.update_from_buffer(buffer)

    def run(self) -> None:
        """Run the event loop until the window is closed.

        Re-renders only on the first frame, when the camera reports movement,
        or when the settings panel edited something.
        """
        self._initialize_window()

        needs_render = True
        last_time = time.perf_counter()

        while self.is_running():
            now = time.perf_counter()
            timestep = now - last_time
            last_time = now

            if self.camera.on_update(timestep, self.read_camera_input()):
                needs_render = True
            if self._draw_gui_panel():
                needs_render = True

            if needs_render:
                self.render_frame()
                needs_render = False

            self.show_frame()

    # =========================================================================
    # Settings panel
    # =========================================================================

    def _draw_gui_panel(self) -> bool:
        """Draw the settings and scene panels.

        Returns:
            True if any render setting or scene value was changed.
        """
        changed = False
        settings = self.renderer.settings

        with self.window.GUI.sub_window("Settings", 0.02, 0.02, 0.3, 0.2) as gui:
            gui.text(f"Last render: {self.renderer.last_render_time_ms:.3f}ms")

            flip_y = gui.checkbox("Flip Y", settings.flip_y)
            if flip_y != settings.flip_y:
                settings.flip_y = flip_y
                changed = True

            show_normals = gui.checkbox("Normals", settings.shading == ShadingMode.NORMAL)
            shading = ShadingMode.NORMAL if show_normals else ShadingMode.ALBEDO
            if shading != settings.shading:
                settings.shading = shading
                changed = True

            if gui.button("Export PNG"):
                self._export_png()

        with self.window.GUI.sub_window("Scene", 0.02, 0.24, 0.3, 0.7) as gui:
            material_limit = max(len(self.scene.materials) - 1, 0)

            for i, sphere in enumerate(self.scene.spheres):
                gui.text(f"Sphere {i}")
                position = tuple(
                    gui.slider_float(f"{axis} ##sphere{i}", value, minimum=-10.0, maximum=10.0)
                    for axis, value in zip("XYZ", sphere.position)
                )
                radius = gui.slider_float(f"Radius ##sphere{i}", sphere.radius, minimum=0.01, maximum=200.0)
                material_index = gui.slider_int(
                    f"Material ##sphere{i}", sphere.material_index, minimum=0, maximum=material_limit
                )

                if _vector_changed(sphere.position, position):
                    sphere.position = Vector3.from_iterable(position)
                    changed = True
                if abs(radius - sphere.radius) > _EPSILON:
                    sphere.radius = radius
                    changed = True
                if material_index != sphere.material_index:
                    sphere.material_index = material_index
                    changed = True

            for i, material in enumerate(self.scene.materials):
                gui.text(f"Material {i}")
                albedo = gui.color_edit_3(f"Albedo ##material{i}", material.albedo.to_tuple())
                roughness = gui.slider_float(
                    f"Roughness ##material{i}", material.roughness, minimum=0.0, maximum=1.0
                )
                metallic = gui.slider_float(
                    f"Metallic ##material{i}", material.metallic, minimum=0.0, maximum=1.0
                )

                if _vector_changed(material.albedo, albedo):
                    material.albedo = Color.from_iterable(albedo)
                    changed = True
                # Stored only; editing them does not change the image
                material.roughness = roughness
                material.metallic = metallic

        return changed

    def _export_png(self) -> None:
        """Export the current frame to a timestamped PNG file."""
        from src.raytracer.preview.export import save_png

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"render_{timestamp}.png"

        save_png(self.renderer, filename)
        print(f"Exported: {filename} ({self.width}x{self.height})")


def _vector_changed(current: Vector3, edited: tuple[float, ...]) -> bool:
    return any(abs(a - b) > _EPSILON for a, b in zip(current, edited))
