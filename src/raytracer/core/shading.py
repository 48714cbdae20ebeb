"""Color resolution for primary rays.

Shading is direct only: a ray either hits a sphere and receives a surface color,
or misses everything and receives a vertical background gradient. There is no
light transport and no recursion.

Two surface strategies are supported and selected per render through
ShadingMode:
    NORMAL: remap the unit surface normal from [-1, 1] to [0, 1]
    ALBEDO: the flat albedo of the material referenced by the hit sphere

The strategy is a compile-time parameter of the render kernel, so switching it
costs one kernel compilation and nothing per pixel.
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from src.raytracer.core.vector import Color

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

DEFAULT_HORIZON_COLOR = Color(1.0, 1.0, 1.0)
DEFAULT_ZENITH_COLOR = Color(0.5, 0.7, 1.0)


class ShadingMode(IntEnum):
    """Surface color strategy for rays that hit a sphere."""

    NORMAL = 0
    ALBEDO = 1


@ti.func
def background_color(direction: vec3, horizon: vec3, zenith: vec3) -> vec3:
    """Vertical gradient for rays that miss every sphere.

    The gradient depends only on the y component of the normalized direction,
    so it is invariant under rotation about the vertical axis.

    Args:
        direction: Ray direction (any length).
        horizon: Color for rays pointing straight down (a = 0).
        zenith: Color for rays pointing straight up (a = 1).

    Returns:
        (1 - a) * horizon + a * zenith with a = 0.5 * (y + 1).
    """
    unit_direction = tm.normalize(direction)
    a = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - a) * horizon + a * zenith


@ti.func
def normal_color(normal: vec3) -> vec3:
    """Map a unit normal to a displayable color in [0, 1]."""
    return 0.5 * (normal + 1.0)
