"""Immutable 3-component vector for Python-side scene and color math.

Vector3 is the value type used to author scenes (sphere positions, material
albedos, background colors) and to exchange camera state with callers. All
operators return new instances. Division by zero and normalization of a zero
vector follow IEEE float semantics: the result contains inf or nan instead of
raising, and downstream packing sanitizes it.

Example:
    >>> from src.raytracer.core.vector import Vector3
    >>> a = Vector3(1.0, 2.0, 3.0)
    >>> b = 2.0 * a - Vector3(1.0)
    >>> b
    Vector3(x=1.0, y=3.0, z=5.0)
    >>> a.dot(b)
    22.0
"""

from __future__ import annotations

import math
import numbers
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Union

import numpy as np

Operand = Union["Vector3", float, int]


def _divide(a: float, b: float) -> float:
    """Divide with IEEE semantics (x/0 -> +-inf, 0/0 -> nan)."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.true_divide(np.float64(a), np.float64(b)))


@dataclass(frozen=True)
class Vector3:
    """A 3D vector or RGB color.

    Attributes:
        x: First component (red for colors).
        y: Second component (green for colors).
        z: Third component (blue for colors).
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def splat(cls, value: float) -> Vector3:
        """Create a vector with all three components set to value."""
        return cls(value, value, value)

    @classmethod
    def from_iterable(cls, values: Iterable[float]) -> Vector3:
        """Create a vector from any iterable of exactly three numbers.

        Raises:
            ValueError: If the iterable does not hold three values.
        """
        items = [float(v) for v in values]
        if len(items) != 3:
            raise ValueError(f"Expected 3 components, got {len(items)}")
        return cls(items[0], items[1], items[2])

    def _components(self, other: Operand) -> tuple[float, float, float] | None:
        if isinstance(other, Vector3):
            return other.x, other.y, other.z
        if isinstance(other, numbers.Real):
            value = float(other)
            return value, value, value
        return None

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: Operand) -> Vector3:
        components = self._components(other)
        if components is None:
            return NotImplemented
        ox, oy, oz = components
        return Vector3(self.x + ox, self.y + oy, self.z + oz)

    def __radd__(self, other: Operand) -> Vector3:
        return self.__add__(other)

    def __sub__(self, other: Operand) -> Vector3:
        components = self._components(other)
        if components is None:
            return NotImplemented
        ox, oy, oz = components
        return Vector3(self.x - ox, self.y - oy, self.z - oz)

    def __rsub__(self, other: Operand) -> Vector3:
        components = self._components(other)
        if components is None:
            return NotImplemented
        ox, oy, oz = components
        return Vector3(ox - self.x, oy - self.y, oz - self.z)

    def __mul__(self, other: Operand) -> Vector3:
        components = self._components(other)
        if components is None:
            return NotImplemented
        ox, oy, oz = components
        return Vector3(self.x * ox, self.y * oy, self.z * oz)

    def __rmul__(self, other: Operand) -> Vector3:
        return self.__mul__(other)

    def __truediv__(self, other: Operand) -> Vector3:
        components = self._components(other)
        if components is None:
            return NotImplemented
        ox, oy, oz = components
        return Vector3(_divide(self.x, ox), _divide(self.y, oy), _divide(self.z, oz))

    def __rtruediv__(self, other: Operand) -> Vector3:
        components = self._components(other)
        if components is None:
            return NotImplemented
        ox, oy, oz = components
        return Vector3(_divide(ox, self.x), _divide(oy, self.y), _divide(oz, self.z))

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def dot(self, other: Vector3) -> float:
        """Dot product with another vector."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3) -> Vector3:
        """Right-handed cross product self x other."""
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length_squared(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def normalized(self) -> Vector3:
        """Return self / |self|. A zero vector yields nan components."""
        return self / self.length()

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


# Colors share the vector representation (r, g, b) = (x, y, z)
Color = Vector3


def dot(a: Vector3, b: Vector3) -> float:
    """Dot product of two vectors."""
    return a.dot(b)


def cross(a: Vector3, b: Vector3) -> Vector3:
    """Cross product of two vectors."""
    return a.cross(b)


def normalize(v: Vector3) -> Vector3:
    """Normalize a vector to unit length."""
    return v.normalized()
