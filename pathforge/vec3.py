"""
Vector3 class for 3D math operations.

This is the fundamental building block of the path tracer, used for:
- Points in 3D space
- Direction vectors
- RGB color values

Values are treated as immutable; only indexed assignment and the
in-place operators (+=, *=, /=) modify a vector.
"""

from __future__ import annotations
import math
from typing import Union
import numpy as np


class Vec3:
    """A 3D vector class supporting common vector operations.

    Uses numpy internally for efficient computation while providing
    a clean, Pythonic API.
    """

    __slots__ = ('_data',)

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self._data = np.array([x, y, z], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> Vec3:
        """Create Vec3 from numpy array."""
        v = cls.__new__(cls)
        v._data = np.asarray(arr, dtype=np.float64)
        return v

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    # Aliases for color operations
    @property
    def r(self) -> float:
        return self.x

    @property
    def g(self) -> float:
        return self.y

    @property
    def b(self) -> float:
        return self.z

    def __repr__(self) -> str:
        return f"Vec3({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vec3):
            return NotImplemented
        return np.allclose(self._data, other._data)

    def __hash__(self) -> int:
        return hash(tuple(self._data))

    def __neg__(self) -> Vec3:
        return Vec3.from_array(-self._data)

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3.from_array(self._data + other._data)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3.from_array(self._data - other._data)

    def __mul__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data * other._data)
        return Vec3.from_array(self._data * other)

    def __rmul__(self, other: float) -> Vec3:
        return Vec3.from_array(other * self._data)

    def __truediv__(self, other: float) -> Vec3:
        return Vec3.from_array(self._data / other)

    def __iadd__(self, other: Vec3) -> Vec3:
        self._data += other._data
        return self

    def __imul__(self, other: float) -> Vec3:
        self._data *= other
        return self

    def __itruediv__(self, other: float) -> Vec3:
        self._data /= other
        return self

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def __setitem__(self, index: int, value: float):
        self._data[index] = value

    def __iter__(self):
        return (float(c) for c in self._data)

    def length(self) -> float:
        """Return the magnitude (length) of the vector."""
        return math.sqrt(self.length_squared())

    def length_squared(self) -> float:
        """Return the squared magnitude (avoids sqrt for comparisons)."""
        return float(np.dot(self._data, self._data))

    def normalize(self) -> Vec3:
        """Return a unit vector in the same direction.

        Raises:
            ZeroDivisionError: if the vector has zero length. Callers are
                responsible for never normalizing a degenerate vector.
        """
        length = self.length()
        if length == 0:
            raise ZeroDivisionError("cannot normalize a zero-length vector")
        return Vec3.from_array(self._data / length)

    def dot(self, other: Vec3) -> float:
        """Compute dot product with another vector."""
        return float(np.dot(self._data, other._data))

    def cross(self, other: Vec3) -> Vec3:
        """Compute cross product with another vector."""
        return Vec3.from_array(np.cross(self._data, other._data))

    def near_zero(self, epsilon: float = 1e-8) -> bool:
        """Check if vector is close to zero in all dimensions."""
        return bool(np.all(np.abs(self._data) < epsilon))

    def to_array(self) -> np.ndarray:
        """Return the underlying numpy array (copy)."""
        return self._data.copy()

    @staticmethod
    def random(rng: np.random.Generator, min_val: float = 0.0, max_val: float = 1.0) -> Vec3:
        """Generate a random vector with components in [min_val, max_val)."""
        return Vec3.from_array(rng.uniform(min_val, max_val, 3))

    @staticmethod
    def random_unit_vector(rng: np.random.Generator) -> Vec3:
        """Generate a random unit vector (uniform on sphere surface).

        Rejection-samples the cube [-1, 1)^3 until a point falls strictly
        inside the unit ball, then projects it onto the surface.
        """
        while True:
            p = Vec3.random(rng, -1.0, 1.0)
            length_sq = p.length_squared()
            if 0.0 < length_sq < 1.0:
                return p / math.sqrt(length_sq)

    @staticmethod
    def random_on_hemisphere(rng: np.random.Generator, normal: Vec3) -> Vec3:
        """Generate a random unit vector in the hemisphere defined by normal."""
        on_unit_sphere = Vec3.random_unit_vector(rng)
        if on_unit_sphere.dot(normal) > 0.0:
            return on_unit_sphere
        return -on_unit_sphere

    @staticmethod
    def random_in_unit_disk(rng: np.random.Generator) -> Vec3:
        """Generate a random point inside the unit disk (z=0)."""
        while True:
            x, y = rng.uniform(-1.0, 1.0, 2)
            p = Vec3(x, y, 0.0)
            if p.length_squared() < 1:
                return p


# Convenience type aliases
Point3 = Vec3
Color = Vec3
