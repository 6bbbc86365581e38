"""
Per-pixel bounce loop.

A ray starts at the observer and is advanced hit by hit. At each hit it
is mirrored about the surface normal and the diffuse shade of the hit
point is blended into the pixel color. The loop stops on the first miss
or once `max_bounces` hits have been processed.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

from .ray import Ray
from .shapes import Scene, Sphere
from .vec3 import Point, UnitVector, Vector, x_reflexion

Color = Tuple[int, int, int]


def bounce(direction: UnitVector, normal: UnitVector) -> UnitVector:
    """Mirror a ray direction about a surface normal.

    Builds the orthonormal basis (normal, normal x direction, e1 x e2) and
    flips the normal component. Same result as d - 2(d.n)n.
    """
    e1 = normal
    e2 = e1.cross(direction)
    if e2.near_zero():
        # Head-on: no plane of incidence, the ray goes straight back.
        return -direction
    e2 = e2.unit()
    e3 = e1.cross(e2)
    return x_reflexion(direction, (e1, e2, e3))


def shade(point: Point, sphere: Sphere, light_source: Point) -> Vector:
    """Lambertian color of a surface point lit by a point light."""
    to_light = point.to(light_source).unit()
    normal = sphere.center.to(point).unit()
    luminosity = max(to_light.dot(normal), 0.0)
    return luminosity * sphere.color


def add_color(color: Vector, current_color: Optional[Vector]) -> Vector:
    """Blend a new contribution with what has been accumulated so far."""
    if current_color is None:
        return color
    return 0.5 * current_color + 0.5 * color


def to_color(color: Vector) -> Color:
    """Truncate a shading vector, assumed in [0, 255], to a byte triple."""
    return (int(color.x), int(color.y), int(color.z))


@dataclass(frozen=True)
class RayState:
    """Everything carried from one bounce to the next.

    Attributes:
        point: Where the ray currently starts
        direction: Where it currently goes
        last_sphere_id: Sphere the ray just left, skipped on the next query
        color: Accumulated color, None until the first hit
        bounces: Number of hits processed so far
    """
    point: Point
    direction: UnitVector
    last_sphere_id: Optional[int] = None
    color: Optional[Vector] = None
    bounces: int = 0

    @classmethod
    def from_ray(cls, ray: Ray) -> RayState:
        return cls(point=ray.origin, direction=ray.direction)


def step(state: RayState, scene: Scene, light_source: Point) -> Optional[RayState]:
    """Advance the ray to its next hit.

    Returns:
        The state after the bounce, or None if the ray escapes the scene
    """
    collision = scene.first_collision(state.point, state.direction, state.last_sphere_id)
    if collision is None:
        return None

    distance, sphere = collision
    point = Ray(state.point, state.direction).at(distance)
    direction = bounce(state.direction, sphere.normal_vector(point))
    local_color = shade(point, sphere, light_source)

    return RayState(
        point=point,
        direction=direction,
        last_sphere_id=sphere.id,
        color=add_color(local_color, state.color),
        bounces=state.bounces + 1,
    )


def trace_pixel(
    ray: Ray,
    scene: Scene,
    light_source: Point,
    max_bounces: int
) -> RayState:
    """Run the bounce loop for one primary ray.

    At most `max_bounces` steps are taken; hitting the cap is a normal way
    to finish and keeps the color accumulated so far.
    """
    state = RayState.from_ray(ray)
    for _ in range(max_bounces):
        next_state = step(state, scene, light_source)
        if next_state is None:
            break
        state = next_state
    return state


def pixel_color(state: RayState, background_color: Color) -> Color:
    """Final color of a traced pixel."""
    if state.bounces == 0 or state.color is None:
        return background_color
    return to_color(state.color)
