#!/usr/bin/env python3
"""
Data models for the galaxy simulator.

This module defines the Body dataclass shared between the world, the
integrator, the collision code and the viewport.

Units and usage
- position is in meters [m], velocity in meters per second [m/s], mass in kg.
- A body is identified by its name alone: two bodies with the same name compare
  and hash equal whatever their state.
- kind selects the collision geometry: a Planet is a disc of radius
  cbrt(0.75 * mass / pi), a Comet an axis-aligned square of side cbrt(mass)
  that never drops below COMET_MIN_SIDE.
- trajectory and velocity_history sample the body's own position and velocity;
  they live exactly as long as the body does.
- A body reaches its siblings through the World it is attached to. The World
  owns the body, the body only keeps a weak handle back.
"""
import enum
import math
import weakref
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, NamedTuple, Optional

from .constants import COMET_MIN_SIDE
from .errors import WorldAttachmentError
from .history import History
from .vector import Vector2D

if TYPE_CHECKING:
    from .world import World


class BodyKind(enum.Enum):
    PLANET = "Planet"
    COMET = "Comet"

    @classmethod
    def parse(cls, text: str) -> "BodyKind":
        """Accept 'Planet', 'comet', 'universe.Planet' and similar spellings."""
        key = text.strip().rsplit(".", 1)[-1].lower()
        for kind in cls:
            if kind.value.lower() == key:
                return kind
        raise ValueError(f"Unknown body type: {text!r}")


class Rectangle(NamedTuple):
    """Axis-aligned rectangle given by its top-left corner and size."""
    x: float
    y: float
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Vector2D:
        return Vector2D(self.x + 0.5 * self.width, self.y + 0.5 * self.height)


@dataclass(eq=False)
class Body:
    """
    A planet or comet taking part in the simulation.

    Fields:
    - name: Identifier of the body, unique within a world
    - mass: Mass in kilograms (finite, > 0)
    - position: Center position in meters
    - velocity: Velocity in meters/second
    - kind: BodyKind.PLANET or BodyKind.COMET
    """
    name: str
    mass: float
    position: Vector2D
    velocity: Vector2D
    kind: BodyKind = BodyKind.PLANET
    trajectory: History[Vector2D] = field(init=False, repr=False)
    velocity_history: History[Vector2D] = field(init=False, repr=False)
    _world_ref: Optional["weakref.ReferenceType[World]"] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.mass = float(self.mass)
        if not math.isfinite(self.mass) or self.mass <= 0:
            raise ValueError(f"Body {self.name!r} needs a finite positive mass, got {self.mass}")
        self.trajectory = History(lambda: self.position)
        self.velocity_history = History(lambda: self.velocity)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Body):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    # -----------------------
    # World attachment
    # -----------------------

    @property
    def world(self) -> Optional["World"]:
        return self._world_ref() if self._world_ref is not None else None

    @property
    def is_attached(self) -> bool:
        """True while the world this body was attached to is alive."""
        return self.world is not None

    def attach(self, world: "World") -> None:
        """Bind the body to its world; a body can be attached only once."""
        if self._world_ref is not None:
            raise WorldAttachmentError(f"Body {self.name!r} is already attached to a world")
        self._world_ref = weakref.ref(world)

    # -----------------------
    # Dynamics
    # -----------------------

    def acceleration(self) -> Vector2D:
        """
        Newtonian acceleration caused by every other live body of the world.

            a = G * sum_j m_j * r_j / |r_j|^3,  r_j = x_j - x

        Gravity is not softened; coincident positions give a non-finite result.
        """
        world = self.world
        if world is None:
            raise WorldAttachmentError(f"Body {self.name!r} is not attached to a world")
        acceleration = Vector2D.zero()
        for other in world.bodies:
            if other is self:
                continue
            r = other.position.subtract(self.position)
            r_magnitude = r.magnitude
            acceleration = acceleration.add(r.mul(other.mass / (r_magnitude * r_magnitude * r_magnitude)))
        return acceleration.mul(world.gravitational_constant)

    def momentum(self) -> Vector2D:
        return self.velocity.mul(self.mass)

    def kinetic_energy(self) -> float:
        return 0.5 * self.mass * self.velocity.dot(self.velocity)

    def change_velocity_by(self, delta: Vector2D) -> None:
        self.velocity = self.velocity.add(delta)

    def change_position_by(self, delta: Vector2D) -> None:
        self.position = self.position.add(delta)

    # -----------------------
    # Geometry
    # -----------------------

    @property
    def is_planet(self) -> bool:
        return self.kind is BodyKind.PLANET

    @property
    def radius(self) -> float:
        """Radius of the equivalent unit-density sphere (planets only)."""
        if self.kind is not BodyKind.PLANET:
            raise AttributeError(f"{self.kind.value} {self.name!r} has no radius")
        return (0.75 * self.mass / math.pi) ** (1.0 / 3.0)

    @property
    def side_length(self) -> float:
        """Side of the comet's square (comets only)."""
        if self.kind is not BodyKind.COMET:
            raise AttributeError(f"{self.kind.value} {self.name!r} has no side length")
        side = self.mass ** (1.0 / 3.0)
        return max(side, COMET_MIN_SIDE)

    @property
    def width(self) -> float:
        if self.kind is BodyKind.PLANET:
            return 2 * self.radius
        return self.side_length

    @property
    def height(self) -> float:
        return self.width

    @property
    def x(self) -> float:
        return self.position.x - 0.5 * self.width

    @property
    def y(self) -> float:
        return self.position.y - 0.5 * self.height

    def bounding_rectangle(self) -> Rectangle:
        return Rectangle(self.x, self.y, self.width, self.height)

    def hit_test(self, point: Vector2D, extra: float = 0.0) -> bool:
        """True if point lies on the body, optionally grown by ``extra`` meters."""
        if self.kind is BodyKind.PLANET:
            reach = self.radius + extra
            d = point.subtract(self.position)
            return d.x * d.x + d.y * d.y <= reach * reach
        half = 0.5 * self.side_length + extra
        return (abs(point.x - self.position.x) <= half
                and abs(point.y - self.position.y) <= half)

    def collides_with(self, other: "Body") -> bool:
        """
        Geometric overlap test, evaluated only when this body is a planet.

        Planet-Planet: center distance <= sum of radii.
        Planet-Comet: the planet's disc intersects the comet's square.
        A comet never reports a collision itself; the clustering code scans the
        reverse edges to pick those pairs up from the planet's side.
        """
        if self.kind is not BodyKind.PLANET:
            return False
        if other.kind is BodyKind.PLANET:
            distance = other.position.subtract(self.position).magnitude
            return distance <= self.radius + other.radius
        return _disc_intersects_rectangle(self.position, self.radius, other.bounding_rectangle())


def _disc_intersects_rectangle(center: Vector2D, radius: float, rect: Rectangle) -> bool:
    """Exact disc/rectangle overlap via the rectangle point nearest the center."""
    if rect.width <= 0 or rect.height <= 0 or radius <= 0:
        return False
    near_x = min(max(center.x, rect.x), rect.max_x)
    near_y = min(max(center.y, rect.y), rect.max_y)
    dx = near_x - center.x
    dy = near_y - center.y
    return dx * dx + dy * dy < radius * radius
