"""Camera module for view state and primary ray directions.

Components:
    camera: Fly-through perspective camera with a cached ray-direction table
    transforms: Projection, look-at and rotation helpers (NumPy)

The camera precomputes one world-space direction per pixel; the renderer only
adds the camera position to form each ray.
"""

from .camera import (
    DEFAULT_MOUSE_SENSITIVITY,
    DEFAULT_MOVEMENT_SPEED,
    DEFAULT_ROTATION_SPEED,
    MAX_PITCH,
    Camera,
    CameraInput,
    Key,
)
from .transforms import compute_ray_directions, look_at, perspective_fov, rotate_about_axis

__all__ = [
    "Camera",
    "CameraInput",
    "Key",
    "DEFAULT_ROTATION_SPEED",
    "DEFAULT_MOVEMENT_SPEED",
    "DEFAULT_MOUSE_SENSITIVITY",
    "MAX_PITCH",
    "perspective_fov",
    "look_at",
    "rotate_about_axis",
    "compute_ray_directions",
]
