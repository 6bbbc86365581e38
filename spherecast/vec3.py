"""
Vector algebra for the ray tracer.

Three value types live here:
- Vector: a free vector (directions, offsets, shading colors)
- Point: a position in space
- UnitVector: a Vector known to have length 1

All of them are immutable. Arithmetic always returns a new object, so a
vector shared between pixels can never be modified by one of them.
"""

from __future__ import annotations
import math
from typing import Iterator, Tuple, Union
import numpy as np


def _frozen(arr) -> np.ndarray:
    data = np.array(arr, dtype=np.float64)
    data.flags.writeable = False
    return data


class _Coords:
    """Shared storage and accessors for Vector and Point."""

    __slots__ = ('_data',)

    # numpy scalars must defer to our reflected operators
    __array_ufunc__ = None

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

    def __len__(self) -> int:
        return 3

    def __hash__(self) -> int:
        return hash(tuple(self._data))

    def is_finite(self) -> bool:
        """True if no component is NaN or infinite."""
        return bool(np.all(np.isfinite(self._data)))

    def to_array(self) -> np.ndarray:
        """Return the components as a (writable) numpy copy."""
        return self._data.copy()

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


class Vector(_Coords):
    """A free 3D vector.

    Uses numpy internally; instances are read-only once built.
    """

    __slots__ = ()

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self._data = _frozen([x, y, z])

    @classmethod
    def from_array(cls, arr) -> Vector:
        """Create a Vector from any 3-element array-like."""
        v = object.__new__(Vector)
        v._data = _frozen(arr)
        return v

    def __repr__(self) -> str:
        return f"Vector({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"

    # Equality is approximate while hashing is exact: equal vectors may hash
    # differently, so do not rely on them as dict keys.
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return bool(np.allclose(self._data, other._data))

    __hash__ = _Coords.__hash__

    def __neg__(self) -> Vector:
        return Vector.from_array(-self._data)

    def __add__(self, other: Vector) -> Vector:
        if not isinstance(other, Vector):
            return NotImplemented
        return Vector.from_array(self._data + other._data)

    def __sub__(self, other: Vector) -> Vector:
        if not isinstance(other, Vector):
            return NotImplemented
        return Vector.from_array(self._data - other._data)

    def __mul__(self, scalar: float) -> Vector:
        if isinstance(scalar, _Coords):
            return NotImplemented
        return Vector.from_array(self._data * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector:
        if isinstance(scalar, _Coords):
            return NotImplemented
        return Vector.from_array(self._data / scalar)

    def dot(self, other: Vector) -> float:
        """Compute dot product with another vector."""
        return float(np.dot(self._data, other._data))

    def cross(self, other: Vector) -> Vector:
        """Compute cross product with another vector."""
        return Vector.from_array(np.cross(self._data, other._data))

    def norm2(self) -> float:
        """Return the squared length (avoids sqrt for comparisons)."""
        return float(np.dot(self._data, self._data))

    def norm(self) -> float:
        """Return the length of the vector."""
        return math.sqrt(self.norm2())

    def unit(self) -> UnitVector:
        """Return the unit vector pointing the same way.

        Raises:
            ValueError: if the vector is zero or has non-finite components
        """
        length = self.norm()
        if length == 0.0 or not math.isfinite(length):
            raise ValueError(f"Cannot normalize {self!r}")
        return UnitVector._wrap(self._data / length)

    def near_zero(self, epsilon: float = 1e-12) -> bool:
        """Check if vector is close to zero in all dimensions."""
        return bool(np.all(np.abs(self._data) < epsilon))


class UnitVector(Vector):
    """A Vector of length 1.

    Only obtainable through Vector.unit() or UnitVector.normalize(); the
    constructor is closed so that nothing unnormalized reaches the
    reflection and shading formulas.
    """

    __slots__ = ()

    def __init__(self, *args, **kwargs):
        raise TypeError("UnitVector cannot be built directly; use Vector.unit()")

    @classmethod
    def _wrap(cls, data) -> UnitVector:
        u = object.__new__(cls)
        u._data = _frozen(data)
        return u

    @classmethod
    def normalize(cls, vector: Vector) -> UnitVector:
        """Normalize a non-zero vector."""
        return vector.unit()

    def __repr__(self) -> str:
        return f"UnitVector({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"

    def __neg__(self) -> UnitVector:
        return UnitVector._wrap(-self._data)

    def unit(self) -> UnitVector:
        return self

    def to_vector(self) -> Vector:
        return Vector.from_array(self._data)


class Point(_Coords):
    """A position in 3D space.

    Point - Point gives a Vector, Point +/- Vector gives a Point.
    """

    __slots__ = ()

    ORIGIN: Point

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self._data = _frozen([x, y, z])

    @classmethod
    def from_array(cls, arr) -> Point:
        p = object.__new__(Point)
        p._data = _frozen(arr)
        return p

    def __repr__(self) -> str:
        return f"Point({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"

    # Approximate equality, exact hash; see Vector.
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return bool(np.allclose(self._data, other._data))

    __hash__ = _Coords.__hash__

    def __add__(self, other: Vector) -> Point:
        if not isinstance(other, Vector):
            return NotImplemented
        return Point.from_array(self._data + other._data)

    def __sub__(self, other: Union[Point, Vector]) -> Union[Vector, Point]:
        if isinstance(other, Point):
            return Vector.from_array(self._data - other._data)
        if isinstance(other, Vector):
            return Point.from_array(self._data - other._data)
        return NotImplemented

    def to(self, other: Point) -> Vector:
        """Return the vector going from this point to `other`."""
        return other - self


Point.ORIGIN = Point(0.0, 0.0, 0.0)


def x_reflexion(v: Vector, basis: Tuple[Vector, Vector, Vector]) -> Vector:
    """Mirror `v` across the plane orthogonal to the first basis vector.

    `v` is decomposed on the orthonormal basis (e1, e2, e3), its e1
    component is negated, and the result is expressed back in the
    canonical basis. A non-orthonormal basis gives a meaningless result.

    Args:
        v: Vector to reflect
        basis: Orthonormal basis (e1, e2, e3)

    Returns:
        The reflected vector; a UnitVector when `v` is one
    """
    e1, e2, e3 = basis
    data = (
        -v.dot(e1) * e1._data
        + v.dot(e2) * e2._data
        + v.dot(e3) * e3._data
    )
    if isinstance(v, UnitVector):
        return UnitVector._wrap(data)
    return Vector.from_array(data)
