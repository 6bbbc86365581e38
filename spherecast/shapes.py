"""
Sphere primitive and the scene that holds them.

A Scene is an ordered, immutable collection of spheres. It answers one
question for the tracer: which sphere does a ray reach first.
"""

from __future__ import annotations
import math
from typing import Iterable, Iterator, NamedTuple, Optional, Sequence, Union

from .errors import SceneConfigError
from .vec3 import Point, UnitVector, Vector


class Sphere:
    """A diffuse sphere defined by center, radius and color."""

    __slots__ = ('_id', '_center', '_squared_radius', '_color')

    def __init__(
        self,
        id: int,
        center: Point,
        radius: float,
        color: Union[Vector, Sequence[float]]
    ):
        """Create a sphere.

        Args:
            id: Identity used to exclude the sphere a ray just left
            center: Center point of the sphere
            radius: Radius, strictly positive
            color: Diffuse color, three channels in [0, 255]

        Raises:
            SceneConfigError: if any of the values is out of range
        """
        if not isinstance(center, Point) or not center.is_finite():
            raise SceneConfigError(f"Sphere {id}: center must be a finite Point, got {center!r}")
        radius = float(radius)
        if not math.isfinite(radius) or radius <= 0.0:
            raise SceneConfigError(f"Sphere {id}: radius must be positive, got {radius}")

        channels = tuple(float(c) for c in color)
        if len(channels) != 3:
            raise SceneConfigError(f"Sphere {id}: color must have 3 channels, got {len(channels)}")
        for channel in channels:
            if not 0.0 <= channel <= 255.0:
                raise SceneConfigError(f"Sphere {id}: color channel {channel} outside [0, 255]")

        self._id = id
        self._center = center
        self._squared_radius = radius * radius
        self._color = Vector(*channels)

    @property
    def id(self) -> int:
        return self._id

    @property
    def center(self) -> Point:
        return self._center

    @property
    def squared_radius(self) -> float:
        return self._squared_radius

    @property
    def radius(self) -> float:
        return math.sqrt(self._squared_radius)

    @property
    def color(self) -> Vector:
        return self._color

    def trace(self, start: Point, direction: UnitVector) -> float:
        """Distance from `start` to the sphere along `direction`.

        Solves |start + t*direction - center|^2 = r^2 with the half-b form:
        b = direction . (center - start), c = |center - start|^2 - r^2, and
        the reduced discriminant b^2 - c.

        Returns:
            The nearest non-negative root, or -inf when the ray misses.
            A tangent ray yields max(b, 0).
        """
        to_center = start.to(self._center)
        b = direction.dot(to_center)
        c = to_center.norm2() - self._squared_radius
        reduced_delta = b * b - c

        if reduced_delta < 0.0:
            return -math.inf

        if reduced_delta > 0.0:
            sqrt_delta = math.sqrt(reduced_delta)
            near = b - sqrt_delta
            if near >= 0.0:
                return near
            far = b + sqrt_delta
            if far >= 0.0:
                return far
            return -math.inf

        return max(b, 0.0)

    def normal_vector(self, point: Point) -> UnitVector:
        """Outward unit normal at a point lying on the surface."""
        return self._center.to(point).unit()

    def __repr__(self) -> str:
        return f"Sphere(id={self._id}, center={self._center}, radius={self.radius:.4f})"


class Collision(NamedTuple):
    """The nearest hit along a ray."""
    distance: float
    sphere: Sphere


def first_collision(
    start: Point,
    direction: UnitVector,
    last_sphere_id: Optional[int],
    spheres: Iterable[Sphere]
) -> Optional[Collision]:
    """Find the closest sphere hit by a ray.

    The sphere whose id is `last_sphere_id` is skipped: a ray leaving a
    surface would otherwise report a spurious near-zero hit on it.
    Non-positive distances are discarded. On equal distances the sphere
    listed first wins.
    """
    best: Optional[Collision] = None
    for sphere in spheres:
        if last_sphere_id is not None and sphere.id == last_sphere_id:
            continue
        distance = sphere.trace(start, direction)
        if distance <= 0.0:
            continue
        if best is None or distance < best.distance:
            best = Collision(distance, sphere)
    return best


class Scene:
    """An ordered, fixed collection of spheres.

    Built once before rendering and read-only afterwards.
    """

    __slots__ = ('_spheres',)

    def __init__(self, spheres: Iterable[Sphere] = ()):
        spheres = tuple(spheres)
        seen = set()
        for sphere in spheres:
            if not isinstance(sphere, Sphere):
                raise SceneConfigError(f"Scene only holds spheres, got {type(sphere).__name__}")
            if sphere.id in seen:
                raise SceneConfigError(f"Duplicate sphere id: {sphere.id}")
            seen.add(sphere.id)
        self._spheres = spheres

    @property
    def spheres(self) -> tuple:
        return self._spheres

    def __len__(self) -> int:
        return len(self._spheres)

    def __iter__(self) -> Iterator[Sphere]:
        return iter(self._spheres)

    def __getitem__(self, index: int) -> Sphere:
        return self._spheres[index]

    def first_collision(
        self,
        start: Point,
        direction: UnitVector,
        last_sphere_id: Optional[int] = None
    ) -> Optional[Collision]:
        """Nearest hit in this scene; see the module-level first_collision."""
        return first_collision(start, direction, last_sphere_id, self._spheres)

    def check_light_source(self, light: Point) -> None:
        """Reject a light placed on a sphere surface.

        Shading normalizes the vector from the hit point to the light,
        which would be zero there.
        """
        for sphere in self._spheres:
            if math.isclose(sphere.center.to(light).norm2(), sphere.squared_radius, rel_tol=1e-12):
                raise SceneConfigError(
                    f"Light source {light} lies on the surface of sphere {sphere.id}"
                )

    def __repr__(self) -> str:
        return f"Scene({len(self._spheres)} spheres)"
