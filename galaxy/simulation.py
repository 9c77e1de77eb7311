#!/usr/bin/env python3
"""
Time advancement of a world.

A Simulation owns the simulated time and the speed (simulated seconds per real
second). A fresh simulation is paused at time zero; ``launch`` starts it once,
after which ``pause`` and ``resume`` toggle freely.

``step`` always advances, running or not: deciding whether to call it is up to
the driver. It is not reentrant; one scheduling source calls it.
"""
import logging
import math
import os
from dataclasses import dataclass, field
from typing import Dict, Union

from . import physics
from .bodies import Body
from .collisions import Cluster
from .errors import SimulationStateError
from .world import World

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Step:
    """Summary of one simulation step."""
    resolved_collisions: Dict[Cluster, Body] = field(default_factory=dict)
    substeps: int = 0
    time: float = 0.0


class Simulation:
    def __init__(self, world: World, speed: float):
        speed = float(speed)
        if not (math.isfinite(speed) and speed > 0):
            raise ValueError(f"Simulation speed must be finite and positive, got {speed}")
        self._world = world
        self._speed = speed
        self._time = 0.0
        self._running = False

    @classmethod
    def from_file(cls, path: Union[str, os.PathLike]) -> "Simulation":
        from .scenario_loader import load_scenario
        return load_scenario(path).build()

    @property
    def world(self) -> World:
        return self._world

    @property
    def time(self) -> float:
        """Simulated seconds elapsed since launch."""
        return self._time

    @property
    def speed(self) -> float:
        return self._speed

    @property
    def is_running(self) -> bool:
        return self._running

    def launch(self) -> None:
        if self._time != 0:
            raise SimulationStateError("Simulation has already been launched")
        logger.info("Launching simulation with %d bodies at %gx", self._world.count, self._speed)
        self.resume()

    def resume(self) -> None:
        self._running = True

    def pause(self) -> None:
        self._running = False

    def step(self, elapsed_real_seconds: float) -> Step:
        """
        Advance by ``speed * elapsed_real_seconds`` simulated seconds.

        Integrates with the population-dependent sub-step, then detects and
        resolves collisions once on the final state.
        """
        elapsed = self._speed * elapsed_real_seconds
        with self._world.lock:
            self._time += elapsed
            bodies = self._world.bodies
            dt_min, trajectory_limit = physics.substep_schedule(len(bodies), self._speed)
            for body in bodies:
                body.trajectory.set_limit(trajectory_limit)
            substeps = physics.integrate(bodies, elapsed, dt_min)
            clusters = self._world.detect_collisions()
            resolved = self._world.resolve_collisions(clusters)
        logger.debug("Stepped %.3f s in %d sub-steps, %d merges", elapsed, substeps, len(resolved))
        return Step(resolved_collisions=resolved, substeps=substeps, time=self._time)
