"""
Ray class for representing rays in 3D space.

A ray is defined by an origin point and a unit direction.
Ray(t) = origin + t * direction, so t is a distance.
"""

from __future__ import annotations
from .vec3 import Point, UnitVector


class Ray:
    """A ray with origin and unit direction."""

    __slots__ = ('origin', 'direction')

    def __init__(self, origin: Point, direction: UnitVector):
        """Create a ray.

        Args:
            origin: The starting point of the ray
            direction: Unit direction; use Vector.unit() to obtain one
        """
        if not isinstance(direction, UnitVector):
            raise TypeError(f"Ray direction must be a UnitVector, got {type(direction).__name__}")
        self.origin = origin
        self.direction = direction

    def at(self, distance: float) -> Point:
        """Get the point at the given distance along the ray."""
        return self.origin + distance * self.direction

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin}, direction={self.direction})"
