"""NumPy matrix helpers for the camera.

Conventions are right-handed with the camera looking down -z in view space and
OpenGL-style clip space (depth in [-1, 1]). All matrices are 4x4 float64 and
act on column vectors (``M @ v``).
"""

from __future__ import annotations

import math

import numpy as np
import numpy.typing as npt

WORLD_UP = np.array([0.0, 1.0, 0.0])


def perspective_fov(
    vertical_fov_degrees: float,
    width: float,
    height: float,
    near_clip: float,
    far_clip: float,
) -> npt.NDArray[np.float64]:
    """Perspective projection from a vertical field of view and viewport size.

    Args:
        vertical_fov_degrees: Full vertical field of view in degrees.
        width: Viewport width (only the aspect ratio matters).
        height: Viewport height.
        near_clip: Distance to the near plane.
        far_clip: Distance to the far plane.

    Returns:
        The 4x4 projection matrix.
    """
    focal = 1.0 / math.tan(math.radians(vertical_fov_degrees) / 2.0)
    aspect = width / height

    projection = np.zeros((4, 4), dtype=np.float64)
    projection[0, 0] = focal / aspect
    projection[1, 1] = focal
    projection[2, 2] = -(far_clip + near_clip) / (far_clip - near_clip)
    projection[2, 3] = -(2.0 * far_clip * near_clip) / (far_clip - near_clip)
    projection[3, 2] = -1.0
    return projection


def look_at(
    eye: npt.NDArray[np.float64],
    target: npt.NDArray[np.float64],
    up: npt.NDArray[np.float64] = WORLD_UP,
) -> npt.NDArray[np.float64]:
    """World-to-view matrix for a camera at eye looking at target.

    Args:
        eye: Camera position.
        target: Point the camera looks at.
        up: Approximate up direction.

    Returns:
        The 4x4 view matrix.
    """
    forward = target - eye
    forward = forward / np.linalg.norm(forward)
    right = np.cross(forward, up)
    right = right / np.linalg.norm(right)
    true_up = np.cross(right, forward)

    view = np.eye(4, dtype=np.float64)
    view[0, :3] = right
    view[1, :3] = true_up
    view[2, :3] = -forward
    view[0, 3] = -np.dot(right, eye)
    view[1, 3] = -np.dot(true_up, eye)
    view[2, 3] = np.dot(forward, eye)
    return view


def rotate_about_axis(
    vector: npt.NDArray[np.float64],
    axis: npt.NDArray[np.float64],
    angle: float,
) -> npt.NDArray[np.float64]:
    """Rotate a vector about a unit axis by angle radians (Rodrigues)."""
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return (
        vector * cos_a
        + np.cross(axis, vector) * sin_a
        + axis * np.dot(axis, vector) * (1.0 - cos_a)
    )


def compute_ray_directions(
    width: int,
    height: int,
    inverse_projection: npt.NDArray[np.float64],
    inverse_view: npt.NDArray[np.float64],
) -> npt.NDArray[np.float32]:
    """Build the per-pixel world-space ray direction table.

    Pixel (x, y), with y = 0 the top row, samples the pixel center. Its
    normalized device coordinate is unprojected onto the far plane, normalized
    in view space, then rotated into world space.

    Args:
        width: Viewport width in pixels.
        height: Viewport height in pixels.
        inverse_projection: Inverse of the projection matrix.
        inverse_view: Inverse of the view matrix.

    Returns:
        Float32 array of shape (width * height, 3); entry x + y * width holds
        the unit direction for pixel (x, y).
    """
    ndc_x = (np.arange(width, dtype=np.float64) + 0.5) / width * 2.0 - 1.0
    ndc_y = 1.0 - (np.arange(height, dtype=np.float64) + 0.5) / height * 2.0
    grid_x, grid_y = np.meshgrid(ndc_x, ndc_y)

    ones = np.ones_like(grid_x)
    clip = np.stack([grid_x, grid_y, ones, ones], axis=-1).reshape(-1, 4)

    target = clip @ inverse_projection.T
    view_directions = target[:, :3] / target[:, 3:4]
    view_directions /= np.linalg.norm(view_directions, axis=1, keepdims=True)

    world_directions = view_directions @ inverse_view[:3, :3].T
    world_directions /= np.linalg.norm(world_directions, axis=1, keepdims=True)
    return world_directions.astype(np.float32)
