"""Fly-through perspective camera with a cached ray-direction table.

The camera owns its projection and view matrices (and their inverses), its
position and forward direction, the viewport size, and one world-space ray
direction per pixel. The table is rebuilt eagerly whenever any of its inputs
changes:

- on_resize() with new nonzero dimensions (projection and table)
- on_update() when input moved or rotated the camera (view and table)

A stale table is a correctness bug, so there is no lazy invalidation: after
either call returns, ``ray_directions`` always matches the current state.

Input is supplied by the host each frame through CameraInput. Movement and
rotation only apply while ``rotating`` is held (the right mouse button in the
interactive viewer):
    W/S: forward/backward    A/D: left/right    Q/E: down/up
    pointer delta: yaw about world up, pitch about the camera's right axis

Example:
    >>> from src.raytracer.camera.camera import Camera, CameraInput, Key
    >>> camera = Camera(vertical_fov=45.0, position=(0.0, 0.0, 3.0))
    >>> camera.on_resize(320, 240)
    >>> camera.ray_directions.shape
    (76800, 3)
    >>> camera.on_update(0.016, CameraInput(rotating=True, keys=frozenset({Key.FORWARD})))
    True
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

import numpy as np
import numpy.typing as npt

from src.raytracer.camera.transforms import (
    WORLD_UP,
    compute_ray_directions,
    look_at,
    perspective_fov,
    rotate_about_axis,
)
from src.raytracer.core.vector import Vector3

DEFAULT_ROTATION_SPEED = 0.3
DEFAULT_MOVEMENT_SPEED = 5.0
DEFAULT_MOUSE_SENSITIVITY = 0.002

# Elevation limit for the forward direction, short of straight up or down
MAX_PITCH = math.radians(89.0)


class Key(Enum):
    """Directional movement keys understood by Camera.on_update()."""

    FORWARD = "w"
    BACKWARD = "s"
    LEFT = "a"
    RIGHT = "d"
    DOWN = "q"
    UP = "e"


@dataclass(frozen=True)
class CameraInput:
    """Per-frame input snapshot supplied by the host.

    Attributes:
        mouse_position: Current pointer position in pixels.
        rotating: Whether the rotate/move button is held.
        keys: Movement keys currently held.
        speed_multiplier: Scale applied to movement speed (e.g. a boost key).
    """

    mouse_position: tuple[float, float] = (0.0, 0.0)
    rotating: bool = False
    keys: frozenset[Key] = field(default_factory=frozenset)
    speed_multiplier: float = 1.0


# Translation direction sign per key, relative to (forward, right, up)
_KEY_AXES: dict[Key, tuple[str, float]] = {
    Key.FORWARD: ("forward", 1.0),
    Key.BACKWARD: ("forward", -1.0),
    Key.RIGHT: ("right", 1.0),
    Key.LEFT: ("right", -1.0),
    Key.UP: ("up", 1.0),
    Key.DOWN: ("up", -1.0),
}


def _as_unit(values: Iterable[float]) -> npt.NDArray[np.float64]:
    vector = np.array(list(values), dtype=np.float64)
    return vector / np.linalg.norm(vector)


class Camera:
    """Perspective camera producing one primary ray direction per pixel.

    Attributes:
        vertical_fov: Vertical field of view in degrees.
        near_clip: Near clip plane distance.
        far_clip: Far clip plane distance.
        rotation_speed: Radians of rotation per unit of scaled pointer delta.
        movement_speed: Units per second for key movement.
        mouse_sensitivity: Scale from pointer pixels to rotation units.
    """

    def __init__(
        self,
        vertical_fov: float = 45.0,
        near_clip: float = 0.1,
        far_clip: float = 100.0,
        *,
        position: Iterable[float] = (0.0, 0.0, 3.0),
        forward: Iterable[float] = (0.0, 0.0, -1.0),
        rotation_speed: float = DEFAULT_ROTATION_SPEED,
        movement_speed: float = DEFAULT_MOVEMENT_SPEED,
        mouse_sensitivity: float = DEFAULT_MOUSE_SENSITIVITY,
    ) -> None:
        self.vertical_fov = float(vertical_fov)
        self.near_clip = float(near_clip)
        self.far_clip = float(far_clip)
        self.rotation_speed = float(rotation_speed)
        self.movement_speed = float(movement_speed)
        self.mouse_sensitivity = float(mouse_sensitivity)

        self._position = np.array(list(position), dtype=np.float64)
        self._forward = _as_unit(forward)

        self._projection = np.eye(4, dtype=np.float64)
        self._inverse_projection = np.eye(4, dtype=np.float64)
        self._view = np.eye(4, dtype=np.float64)
        self._inverse_view = np.eye(4, dtype=np.float64)

        self._viewport_width = 0
        self._viewport_height = 0
        self._ray_directions = np.zeros((0, 3), dtype=np.float32)

        self._last_mouse_position: tuple[float, float] | None = None

        self._recalculate_view()

    # =========================================================================
    # Read-only state
    # =========================================================================

    @property
    def projection(self) -> npt.NDArray[np.float64]:
        return self._projection.copy()

    @property
    def inverse_projection(self) -> npt.NDArray[np.float64]:
        return self._inverse_projection.copy()

    @property
    def view(self) -> npt.NDArray[np.float64]:
        return self._view.copy()

    @property
    def inverse_view(self) -> npt.NDArray[np.float64]:
        return self._inverse_view.copy()

    @property
    def position(self) -> Vector3:
        """Camera position in world space."""
        return Vector3.from_iterable(self._position)

    @property
    def direction(self) -> Vector3:
        """Unit forward direction in world space."""
        return Vector3.from_iterable(self._forward)

    @property
    def viewport_width(self) -> int:
        return self._viewport_width

    @property
    def viewport_height(self) -> int:
        return self._viewport_height

    @property
    def ray_directions(self) -> npt.NDArray[np.float32]:
        """Cached unit ray directions, shape (width * height, 3), row-major.

        The array is owned by the camera and replaced (not mutated) when it is
        rebuilt; callers must not write to it.
        """
        return self._ray_directions

    # =========================================================================
    # Host callbacks
    # =========================================================================

    def on_resize(self, width: int, height: int) -> None:
        """Update the viewport size.

        Does nothing if either dimension is zero or the size is unchanged.
        Otherwise rebuilds the projection and the ray-direction table.
        """
        if width == 0 or height == 0:
            return
        if width == self._viewport_width and height == self._viewport_height:
            return

        self._viewport_width = int(width)
        self._viewport_height = int(height)

        self._recalculate_projection()
        self._recalculate_ray_directions()

    def on_update(self, timestep: float, camera_input: CameraInput) -> bool:
        """Apply one frame of input.

        Args:
            timestep: Seconds since the previous frame.
            camera_input: Pointer, button and key state for this frame.

        Returns:
            True if the camera moved or rotated (view and table rebuilt),
            False if nothing changed.
        """
        mouse = (float(camera_input.mouse_position[0]), float(camera_input.mouse_position[1]))
        if self._last_mouse_position is None:
            self._last_mouse_position = mouse
        delta_x = (mouse[0] - self._last_mouse_position[0]) * self.mouse_sensitivity
        delta_y = (mouse[1] - self._last_mouse_position[1]) * self.mouse_sensitivity
        self._last_mouse_position = mouse

        if not camera_input.rotating:
            return False

        moved = False

        right = np.cross(self._forward, WORLD_UP)
        right = right / np.linalg.norm(right)
        axes = {"forward": self._forward, "right": right, "up": WORLD_UP}

        speed = self.movement_speed * camera_input.speed_multiplier
        for key in camera_input.keys:
            axis, sign = _KEY_AXES[key]
            self._position = self._position + sign * axes[axis] * speed * timestep
            moved = True

        if delta_x != 0.0 or delta_y != 0.0:
            pitch_delta = delta_y * self.rotation_speed
            yaw_delta = delta_x * self.rotation_speed

            forward = rotate_about_axis(self._forward, WORLD_UP, -yaw_delta)

            # Yaw keeps the elevation, so pitch about the yawed right axis
            # changes it by exactly the pitch angle
            pitch_axis = np.cross(forward, WORLD_UP)
            pitch_axis = pitch_axis / np.linalg.norm(pitch_axis)
            elevation = math.asin(float(np.clip(forward[1], -1.0, 1.0)))
            target = min(max(elevation - pitch_delta, -MAX_PITCH), MAX_PITCH)
            forward = rotate_about_axis(forward, pitch_axis, target - elevation)
            self._forward = forward / np.linalg.norm(forward)
            moved = True

        if moved:
            self._recalculate_view()
            self._recalculate_ray_directions()

        return moved

    # =========================================================================
    # Recalculation
    # =========================================================================

    def _recalculate_projection(self) -> None:
        self._projection = perspective_fov(
            self.vertical_fov,
            float(self._viewport_width),
            float(self._viewport_height),
            self.near_clip,
            self.far_clip,
        )
        self._inverse_projection = np.linalg.inv(self._projection)

    def _recalculate_view(self) -> None:
        self._view = look_at(self._position, self._position + self._forward, WORLD_UP)
        self._inverse_view = np.linalg.inv(self._view)

    def _recalculate_ray_directions(self) -> None:
        if self._viewport_width == 0 or self._viewport_height == 0:
            return
        self._ray_directions = compute_ray_directions(
            self._viewport_width,
            self._viewport_height,
            self._inverse_projection,
            self._inverse_view,
        )

    def __repr__(self) -> str:
        p = self._position
        return (
            f"Camera(position=({p[0]:.3f}, {p[1]:.3f}, {p[2]:.3f}), "
            f"viewport={self._viewport_width}x{self._viewport_height}, "
            f"vertical_fov={self.vertical_fov})"
        )
