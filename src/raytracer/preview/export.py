"""Image export utilities for rendered frames.

Supported formats:
    - PNG (8-bit RGBA via Pillow)

Example:
    >>> from src.raytracer.preview.export import save_png
    >>> renderer.render(camera, scene)
    >>> save_png(renderer, "frame.png")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.raytracer.core.pixels import buffer_to_rgba

if TYPE_CHECKING:
    from src.raytracer.core.renderer import Renderer


def save_png(renderer: Renderer, filepath: str) -> None:
    """Save the renderer's last frame as a PNG file.

    Args:
        renderer: A Renderer that has rendered at least one frame.
        filepath: Output file path (should end in .png).

    Raises:
        RuntimeError: If the renderer has no viewport yet.
    """
    if renderer.image_data is None:
        raise RuntimeError("Renderer has no image. Call on_resize() and render() first.")
    save_png_from_buffer(renderer.image_data, renderer.width, renderer.height, filepath)


def save_png_from_buffer(
    buffer: npt.NDArray[np.uint32],
    width: int,
    height: int,
    filepath: str,
) -> None:
    """Save a packed ABGR pixel buffer as a PNG file.

    Args:
        buffer: Packed pixels, width * height entries, row 0 at the top.
        width: Image width in pixels.
        height: Image height in pixels.
        filepath: Output file path.
    """
    rgba = buffer_to_rgba(buffer, width, height)
    PILImage.fromarray(rgba).save(filepath)


def load_png_as_buffer(filepath: str) -> tuple[npt.NDArray[np.uint32], int, int]:
    """Read a PNG back into a packed ABGR buffer.

    Returns:
        Tuple of (buffer, width, height).
    """
    with PILImage.open(filepath) as image:
        rgba = np.asarray(image.convert("RGBA"), dtype=np.uint32)
    height, width = rgba.shape[:2]
    packed = (
        (rgba[..., 3] << 24) | (rgba[..., 2] << 16) | (rgba[..., 1] << 8) | rgba[..., 0]
    ).astype(np.uint32)
    return packed.reshape(-1), width, height
