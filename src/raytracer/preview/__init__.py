"""Preview module for output and visualization.

This module handles displaying and saving rendered frames:

Components:
    display: Matplotlib-based still preview
    export: PNG export of packed pixel buffers (Pillow)
    interactive: Taichi GGUI window with camera controls and scene editor

Example:
    >>> from src.raytracer.preview import save_png, show_preview
    >>> renderer.render(camera, scene)
    >>> show_preview(renderer)
    >>> save_png(renderer, "output.png")

For the interactive window:
    >>> from src.raytracer.preview import InteractiveViewer
    >>> InteractiveViewer(1280, 720, scene).run()
"""

from src.raytracer.preview.display import preview_title, show_preview
from src.raytracer.preview.export import load_png_as_buffer, save_png, save_png_from_buffer
from src.raytracer.preview.interactive import InteractiveViewer

__all__ = [
    # Interactive window
    "InteractiveViewer",
    # Display
    "show_preview",
    "preview_title",
    # Export
    "save_png",
    "save_png_from_buffer",
    "load_png_as_buffer",
]
