#!/usr/bin/env python3
"""
Core physics for the galaxy simulator.

Responsibilities
- Choose the sub-step size and trajectory resolution from the population size.
- Advance body states with a kick-drift-kick (velocity Verlet / leapfrog) step.
- Provide diagnostics (momentum, kinetic and potential energy) and small
  helpers for common orbital computations (circular orbit velocity).

Units and conventions
- Positions are in meters [m], velocities in meters per second [m/s],
  masses in kilograms [kg], time steps in seconds [s].
- G is not a module constant here: every World carries its own.

Numerical notes
- Gravity is unsoftened Newtonian attraction; overlapping bodies are merged by
  the collision pass before they can coincide.
- Complexity: acceleration computation is O(N^2) per sub-step (direct summation).
- Energy: leapfrog is symplectic, so the energy error stays bounded over long
  runs instead of drifting like explicit Euler or RK4 would.

Threading
- Pure compute; callers hold the World lock while stepping.
"""
import math
from typing import Iterable, List, Tuple

from .bodies import Body
from .constants import SUBSTEP_SCHEDULE
from .vector import Vector2D


def substep_schedule(body_count: int, speed: float) -> Tuple[float, int]:
    """
    Pick the base sub-step and trajectory history limit for a population.

    <= 10 bodies: speed/1000 and 100 samples; <= 100 bodies: speed/100 and 10
    samples; more: speed/10 and 5 samples.

    Returns:
        (dt_min, trajectory_limit)
    """
    for max_count, divisor, limit in SUBSTEP_SCHEDULE:
        if max_count is None or body_count <= max_count:
            return speed / divisor, limit
    raise AssertionError("SUBSTEP_SCHEDULE has no catch-all entry")


def leapfrog_step(bodies: List[Body], dt: float) -> None:
    """
    Advance all bodies by one kick-drift-kick increment of length dt.

    Every acceleration is computed from the same snapshot before any position
    moves. Each body then gets a half kick, a drift and a second half kick with
    that acceleration.
    """
    accelerations = [body.acceleration() for body in bodies]
    for body, acceleration in zip(bodies, accelerations):
        half_kick = acceleration.mul(0.5 * dt)
        body.change_velocity_by(half_kick)
        body.change_position_by(body.velocity.mul(dt))
        body.change_velocity_by(half_kick)


def integrate(bodies: List[Body], duration: float, dt_min: float) -> int:
    """
    Integrate for ``duration`` seconds in increments of at most dt_min.

    Returns:
        Number of sub-steps taken.
    """
    t = duration
    substeps = 0
    while t > 0:
        dt = t if t < dt_min else dt_min
        leapfrog_step(bodies, dt)
        t -= dt
        substeps += 1
    return substeps


def total_momentum(bodies: Iterable[Body]) -> Vector2D:
    momentum = Vector2D.zero()
    for body in bodies:
        momentum = momentum.add(body.momentum())
    return momentum


def total_mass(bodies: Iterable[Body]) -> float:
    return sum(body.mass for body in bodies)


def kinetic_energy(bodies: Iterable[Body]) -> float:
    return sum(body.kinetic_energy() for body in bodies)


def potential_energy(bodies: List[Body], gravitational_constant: float) -> float:
    """Pairwise gravitational potential energy, -G m_i m_j / r_ij summed over i<j."""
    energy = 0.0
    n = len(bodies)
    for i in range(n):
        bi = bodies[i]
        for j in range(i + 1, n):
            bj = bodies[j]
            r = bj.position.subtract(bi.position).magnitude
            energy -= gravitational_constant * bi.mass * bj.mass / r
    return energy


def total_energy(bodies: List[Body], gravitational_constant: float) -> float:
    return kinetic_energy(bodies) + potential_energy(bodies, gravitational_constant)


def circular_orbit_velocity(gravitational_constant: float, central_mass: float, orbital_radius: float) -> float:
    """
    Speed of a circular orbit of the given radius around ``central_mass``.

    G * M / r = v^2 / r, so v = sqrt(G * M / r). For a two-body orbit pass the
    sum of both masses to get the relative speed.
    """
    if orbital_radius <= 0:
        return 0.0
    return math.sqrt(gravitational_constant * central_mass / orbital_radius)
