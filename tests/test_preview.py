"""Tests for the preview module.

This module tests the preview/display, preview/export and preview/interactive
functionality including:
- PNG export of packed pixel buffers and reading them back
- Matplotlib still preview (with plt.show stubbed out)
- InteractiveViewer construction and image upload

Note: Tests avoid creating actual windows. The viewer's window is created
lazily, so construction and image handling can be tested headless.
"""

import os
import tempfile

import matplotlib
import numpy as np
import pytest
from PIL import Image as PILImage

matplotlib.use("Agg")


@pytest.fixture
def rendered(make_viewport, single_sphere_scene):
    """A 6x4 renderer that has rendered the single-sphere scene once."""
    camera, renderer = make_viewport(6, 4, vertical_fov=90.0)
    renderer.render(camera, single_sphere_scene)
    return renderer


class TestSavePng:
    """Test PNG export functionality."""

    def test_save_png_creates_file(self, rendered):
        from src.raytracer.preview.export import save_png

        with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as f:
            filepath = f.name

        try:
            save_png(rendered, filepath)

            assert os.path.exists(filepath)
            img = PILImage.open(filepath)
            assert img.size == (6, 4)
            assert img.mode == "RGBA"
        finally:
            if os.path.exists(filepath):
                os.remove(filepath)

    def test_png_preserves_pixels(self, rendered, tmp_path):
        from src.raytracer.preview.export import load_png_as_buffer, save_png

        filepath = tmp_path / "frame.png"
        save_png(rendered, str(filepath))
        buffer, width, height = load_png_as_buffer(str(filepath))

        assert (width, height) == (6, 4)
        np.testing.assert_array_equal(buffer, rendered.image_data)

    def test_png_top_row_is_buffer_row_zero(self, tmp_path):
        from src.raytracer.preview.export import save_png_from_buffer

        buffer = np.array([0xFF0000FF, 0xFF0000FF, 0xFFFF0000, 0xFFFF0000], dtype=np.uint32)
        filepath = tmp_path / "rows.png"
        save_png_from_buffer(buffer, 2, 2, str(filepath))

        with PILImage.open(filepath) as img:
            assert img.getpixel((0, 0)) == (255, 0, 0, 255)
            assert img.getpixel((1, 1)) == (0, 0, 255, 255)

    def test_save_png_without_image_raises(self, tmp_path):
        from src.raytracer.core.renderer import Renderer
        from src.raytracer.preview.export import save_png

        with pytest.raises(RuntimeError, match="no image"):
            save_png(Renderer(), str(tmp_path / "empty.png"))


class TestDisplay:
    """Tests for the Matplotlib still preview."""

    def test_preview_title(self, rendered):
        from src.raytracer.preview.display import preview_title

        title = preview_title(rendered)
        assert title.startswith("Render Preview - 6x4")
        assert title.endswith("ms)")

    def test_show_preview_draws_image(self, rendered, monkeypatch):
        import matplotlib.pyplot as plt

        from src.raytracer.preview.display import show_preview

        calls = []
        monkeypatch.setattr(plt, "show", lambda block=True: calls.append(block))

        show_preview(rendered, title="Frame", block=False)

        assert calls == [False]
        ax = plt.gcf().axes[0]
        assert ax.get_title() == "Frame"
        assert ax.images[0].get_array().shape == (4, 6, 3)
        plt.close("all")

    def test_show_preview_without_image_raises(self):
        from src.raytracer.core.renderer import Renderer
        from src.raytracer.preview.display import show_preview

        with pytest.raises(RuntimeError):
            show_preview(Renderer(), block=False)


class TestModuleExports:
    """Tests for package-level exports."""

    def test_preview_exports(self):
        from src.raytracer import preview

        for name in ("InteractiveViewer", "show_preview", "preview_title", "save_png",
                     "save_png_from_buffer", "load_png_as_buffer"):
            assert name in preview.__all__
            assert callable(getattr(preview, name))


class TestInteractiveViewer:
    """Tests for the InteractiveViewer class.

    Note: These tests avoid creating actual GUI windows by testing
    the initialization and data handling logic only.
    """

    def test_init_sizes_camera_and_renderer(self, single_sphere_scene):
        from src.raytracer.preview.interactive import InteractiveViewer

        viewer = InteractiveViewer(32, 24, single_sphere_scene)

        assert viewer.display_image.shape == (32, 24)
        assert viewer.camera.viewport_width == 32
        assert viewer.camera.viewport_height == 24
        assert viewer.renderer.image_data.shape == (32 * 24,)

    def test_init_defers_window_creation(self, single_sphere_scene):
        from src.raytracer.preview.interactive import InteractiveViewer

        viewer = InteractiveViewer(16, 16, single_sphere_scene)

        assert viewer._window is None
        assert viewer._canvas is None
        assert viewer._is_initialized is False

    def test_default_camera_and_title(self, single_sphere_scene):
        from src.raytracer.core.vector import Vector3
        from src.raytracer.preview.interactive import InteractiveViewer

        viewer = InteractiveViewer(16, 16, single_sphere_scene)
        assert viewer.camera.position == Vector3(0.0, 0.0, 6.0)
        assert viewer._title == "Ray Tracing"

    def test_custom_camera_and_settings(self, single_sphere_scene):
        from src.raytracer.camera.camera import Camera
        from src.raytracer.core.renderer import RenderSettings
        from src.raytracer.core.shading import ShadingMode
        from src.raytracer.preview.interactive import InteractiveViewer

        camera = Camera(90.0, position=(0.0, 0.0, 0.0))
        settings = RenderSettings(shading=ShadingMode.NORMAL)
        viewer = InteractiveViewer(8, 8, single_sphere_scene, camera=camera, settings=settings, title="T")

        assert viewer.camera is camera
        assert viewer.renderer.settings is settings
        assert viewer._title == "T"

    def test_update_image_validates_shape(self, single_sphere_scene):
        from src.raytracer.preview.interactive import InteractiveViewer

        viewer = InteractiveViewer(32, 24, single_sphere_scene)
        with pytest.raises(ValueError, match="doesn't match expected"):
            viewer.update_image(np.zeros((32, 24, 3), dtype=np.float32))

    def test_update_image_orientation(self, single_sphere_scene):
        """Row 0 of the image lands at the top (largest y) of the display field."""
        from src.raytracer.preview.interactive import InteractiveViewer

        viewer = InteractiveViewer(3, 2, single_sphere_scene)
        image = np.zeros((2, 3, 3), dtype=np.float32)
        image[0, 2] = (1.0, 0.0, 0.0)
        viewer.update_image(image)

        result = viewer.display_image.to_numpy()
        assert result.shape == (3, 2, 3)
        np.testing.assert_allclose(result[2, 1], [1.0, 0.0, 0.0])
        assert np.count_nonzero(result) == 1

    def test_render_frame_updates_display(self, single_sphere_scene):
        from src.raytracer.camera.camera import Camera
        from src.raytracer.preview.interactive import InteractiveViewer

        camera = Camera(90.0, position=(0.0, 0.0, 0.0))
        viewer = InteractiveViewer(3, 3, single_sphere_scene, camera=camera)
        viewer.render_frame()

        result = viewer.display_image.to_numpy()
        # Center pixel is the white sphere
        np.testing.assert_allclose(result[1, 1], [1.0, 1.0, 1.0])
        assert viewer.renderer.last_render_time_ms > 0.0

    def test_close_without_window(self, single_sphere_scene):
        from src.raytracer.preview.interactive import InteractiveViewer

        InteractiveViewer(4, 4, single_sphere_scene).close()

    def test_is_display_available_returns_bool(self):
        from src.raytracer.preview.interactive import InteractiveViewer

        assert isinstance(InteractiveViewer.is_display_available(), bool)

    def test_display_unavailable_without_env(self, monkeypatch):
        from src.raytracer.preview.interactive import InteractiveViewer

        if os.name == "nt" or os.uname().sysname == "Darwin":
            pytest.skip("Linux-only display detection")
        monkeypatch.delenv("DISPLAY", raising=False)
        monkeypatch.delenv("WAYLAND_DISPLAY", raising=False)
        assert InteractiveViewer.is_display_available() is False


class TestVectorChanged:
    """Tests for the slider change-detection helper."""

    def test_detects_change(self):
        from src.raytracer.core.vector import Vector3
        from src.raytracer.preview.interactive import _vector_changed

        assert _vector_changed(Vector3(0.0, 0.0, 0.0), (0.0, 0.5, 0.0))

    def test_ignores_float_noise(self):
        from src.raytracer.core.vector import Vector3
        from src.raytracer.preview.interactive import _vector_changed

        assert not _vector_changed(Vector3(0.1, 0.2, 0.3), (0.1, 0.2, 0.3 + 1e-9))
