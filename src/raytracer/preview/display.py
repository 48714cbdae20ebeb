"""Matplotlib-based still preview for rendered frames.

Example:
    >>> from src.raytracer.preview.display import show_preview
    >>> renderer.render(camera, scene)
    >>> show_preview(renderer)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.raytracer.core.renderer import Renderer


def preview_title(renderer: Renderer) -> str:
    """Default figure title: viewport size and last render time."""
    return (
        f"Render Preview - {renderer.width}x{renderer.height} "
        f"({renderer.last_render_time_ms:.3f} ms)"
    )


def show_preview(
    renderer: Renderer,
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 6),
    block: bool = True,
) -> None:
    """Display the renderer's last frame as a Matplotlib figure.

    Args:
        renderer: A Renderer that has rendered at least one frame.
        title: Custom title (default shows size and render time).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until the figure is closed.

    Raises:
        RuntimeError: If the renderer has no viewport yet.
    """
    import matplotlib.pyplot as plt

    image = renderer.get_image_rgb()

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(image)
    ax.axis("off")
    ax.set_title(title if title is not None else preview_title(renderer))

    plt.tight_layout()
    plt.show(block=block)
