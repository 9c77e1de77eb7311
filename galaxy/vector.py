#!/usr/bin/env python3
"""
Immutable 2D vector used for positions, velocities and accelerations.

Every operation returns a new value; the magnitude is computed once on first
use and cached on the instance.
"""
import math
from dataclasses import dataclass
from functools import cached_property
from typing import Iterator


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


@dataclass(frozen=True)
class Vector2D:
    x: float = 0.0
    y: float = 0.0

    @classmethod
    def zero(cls) -> "Vector2D":
        return cls(0.0, 0.0)

    def add(self, other: "Vector2D") -> "Vector2D":
        return Vector2D(self.x + other.x, self.y + other.y)

    def subtract(self, other: "Vector2D") -> "Vector2D":
        return Vector2D(self.x - other.x, self.y - other.y)

    def mul(self, s: float) -> "Vector2D":
        return Vector2D(s * self.x, s * self.y)

    def dot(self, other: "Vector2D") -> float:
        return self.x * other.x + self.y * other.y

    @cached_property
    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def __add__(self, other: "Vector2D") -> "Vector2D":
        return self.add(other)

    def __sub__(self, other: "Vector2D") -> "Vector2D":
        return self.subtract(other)

    def __mul__(self, s: float) -> "Vector2D":
        return self.mul(s)

    __rmul__ = __mul__

    def __truediv__(self, s: float) -> "Vector2D":
        return Vector2D(self.x / s, self.y / s)

    def __neg__(self) -> "Vector2D":
        return Vector2D(-self.x, -self.y)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
