#!/usr/bin/env python3
"""
Built-in scenarios, usable without any scenario file.

Distances are real SI values and velocities are computed for circular orbits
where applicable. Collision geometry assumes unit density, so bodies are far
larger than their real counterparts; the layouts keep them apart.
"""
import math
from typing import Callable, Dict, List

from .bodies import BodyKind
from .constants import (
    ASTRONOMICAL_UNIT,
    EARTH_MASS,
    EARTH_MOON_DISTANCE,
    G,
    MOON_MASS,
    SOLAR_MASS,
)
from .physics import circular_orbit_velocity
from .scenario_loader import BodySpec, Scenario
from .vector import Vector2D

DAY = 86400.0


def earth_moon(speed: float = DAY) -> Scenario:
    """
    Earth and Moon on a circular orbit around their common center of mass.

    Total momentum is zero, so the pair stays around the origin.
    """
    total = EARTH_MASS + MOON_MASS
    v = circular_orbit_velocity(G, total, EARTH_MOON_DISTANCE)
    earth_r = EARTH_MOON_DISTANCE * MOON_MASS / total
    moon_r = EARTH_MOON_DISTANCE * EARTH_MASS / total
    bodies = [
        BodySpec("Earth", BodyKind.PLANET, Vector2D(-earth_r, 0.0),
                 Vector2D(0.0, -v * MOON_MASS / total), EARTH_MASS),
        BodySpec("Moon", BodyKind.PLANET, Vector2D(moon_r, 0.0),
                 Vector2D(0.0, v * EARTH_MASS / total), MOON_MASS),
    ]
    return Scenario("Earth and Moon", G, speed, bodies)


def solar_system(speed: float = 30 * DAY) -> Scenario:
    """Sun with the four inner planets and Jupiter on circular orbits."""
    planets = [
        ("Mercury", 3.3011e23, 0.387),
        ("Venus", 4.8675e24, 0.723),
        ("Earth", EARTH_MASS, 1.0),
        ("Mars", 6.4171e23, 1.524),
        ("Jupiter", 1.898e27, 5.204),
    ]
    bodies = [BodySpec("Sun", BodyKind.PLANET, Vector2D.zero(), Vector2D.zero(), SOLAR_MASS)]
    for name, mass, au in planets:
        r = au * ASTRONOMICAL_UNIT
        v = circular_orbit_velocity(G, SOLAR_MASS, r)
        bodies.append(BodySpec(name, BodyKind.PLANET, Vector2D(r, 0.0), Vector2D(0.0, v), mass))
    return Scenario("Solar system", G, speed, bodies)


def three_body_figure_eight(speed: float = DAY) -> Scenario:
    """Classic equal-mass figure-eight periodic solution (Chenciner-Montgomery), scaled to SI.
    Dimensionless initial conditions (G=1, m=1):
    r1=(-0.97000436, 0.24308753), r2=(0.97000436,-0.24308753), r3=(0,0)
    v1=(0.4662036850, 0.4323657300), v2=(0.4662036850, 0.4323657300), v3=(-0.93240737,-0.86473146)
    Scaled by choosing mass m_si and length L, so that velocity V = sqrt(G*m_si/L).
    """
    m_si = 5e24
    L = 1.0e9  # meters
    V = math.sqrt(G * m_si / L)

    r = [(-0.97000436, 0.24308753), (0.97000436, -0.24308753), (0.0, 0.0)]
    v = [(0.4662036850, 0.4323657300), (0.4662036850, 0.4323657300), (-0.93240737, -0.86473146)]
    bodies = [
        BodySpec(name, BodyKind.PLANET, Vector2D(ri[0] * L, ri[1] * L), Vector2D(vi[0] * V, vi[1] * V), m_si)
        for name, ri, vi in zip("ABC", r, v)
    ]
    return Scenario("Figure eight", G, speed, bodies)


def comet_shower(count: int = 12, speed: float = DAY / 4) -> Scenario:
    """A planet with a ring of comets falling towards it; most of them hit."""
    planet_mass = EARTH_MASS
    bodies: List[BodySpec] = [
        BodySpec("Planet", BodyKind.PLANET, Vector2D.zero(), Vector2D.zero(), planet_mass)
    ]
    ring = 2.0 * EARTH_MOON_DISTANCE
    for i in range(count):
        angle = 2 * math.pi * i / count
        position = Vector2D(ring * math.cos(angle), ring * math.sin(angle))
        # mostly radial infall with a small tangential component
        tangential = Vector2D(-math.sin(angle), math.cos(angle)).mul(150.0 * (i % 3))
        velocity = position.mul(-1.0 / ring).mul(400.0).add(tangential)
        bodies.append(BodySpec(f"Comet {i + 1}", BodyKind.COMET, position, velocity, 1e14 * (1 + i)))
    return Scenario("Comet shower", G, speed, bodies)


PRESETS: Dict[str, Callable[[], Scenario]] = {
    "earth-moon": earth_moon,
    "solar-system": solar_system,
    "figure-eight": three_body_figure_eight,
    "comet-shower": comet_shower,
}
