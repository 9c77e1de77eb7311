#!/usr/bin/env python3
"""
Real-time driver shared between the viewport thread and the UI thread.

SimulationController is the single scheduling source for Simulation.step. It
is fed wall-clock timestamps by the viewport loop and:

- samples every body's trajectory ``limit`` times per real second,
- samples velocities VELOCITY_SAMPLES_PER_SECOND times per real second,
- steps the simulation at most STEPS_PER_SECOND times per real second,
- re-targets the selection and the charted bodies after collisions.

All access is guarded by a re-entrant lock; readers take snapshots.
"""
import logging
import threading
from typing import List, NamedTuple, Optional, Tuple

from . import physics
from .bodies import Body
from .constants import (
    SPEED_UP_FACTOR,
    STEPS_PER_SECOND,
    VELOCITY_HISTORY_LIMIT,
    VELOCITY_SAMPLES_PER_SECOND,
)
from .simulation import Simulation, Step
from .vector import Vector2D

logger = logging.getLogger(__name__)


class ControllerSnapshot(NamedTuple):
    bodies: List[Body]
    time: float
    running: bool
    speed_up: float
    selected: Optional[Body]


class SimulationController:
    """
    Shared state between the UI thread (Dear PyGui) and the viewport thread (pygame).
    Includes thread-safe operations guarded by a lock.
    """

    def __init__(self, simulation: Simulation, steps_per_second: int = STEPS_PER_SECOND):
        self.lock = threading.RLock()
        self.simulation = simulation
        self.speed_up = 1.0
        self.selected: Optional[Body] = None
        self.charted: List[Body] = []
        self.step_interval = 1.0 / steps_per_second

        # Internal accumulators (real seconds)
        self._last_update: Optional[float] = None
        self._since_step = 0.0
        self._since_trajectory_sample = 0.0
        self._since_velocity_sample = 0.0

    # -----------------------
    # Run state
    # -----------------------

    def launch(self, now: float) -> None:
        with self.lock:
            for body in self.simulation.world.bodies:
                body.velocity_history.set_limit(VELOCITY_HISTORY_LIMIT)
            self._last_update = now
            self.simulation.launch()

    def replace_simulation(self, simulation: Simulation, now: float) -> None:
        """Swap in a freshly built simulation and launch it."""
        with self.lock:
            self.simulation = simulation
            self.selected = None
            self.charted = []
            self._since_step = 0.0
            self._since_trajectory_sample = 0.0
            self._since_velocity_sample = 0.0
            self.launch(now)

    def toggle_running(self) -> bool:
        """Pause a running simulation or resume a paused one; returns the new state."""
        with self.lock:
            if self.simulation.is_running:
                self.simulation.pause()
            else:
                self.simulation.resume()
            logger.info("Simulation %s", "resumed" if self.simulation.is_running else "paused")
            return self.simulation.is_running

    def faster(self) -> None:
        with self.lock:
            self.speed_up *= SPEED_UP_FACTOR

    def slower(self) -> None:
        with self.lock:
            self.speed_up /= SPEED_UP_FACTOR

    def reset_speed(self) -> None:
        with self.lock:
            self.speed_up = 1.0

    # -----------------------
    # Periodic update
    # -----------------------

    def update(self, now: float) -> Optional[Step]:
        """
        Advance the driver to wall-clock time ``now`` (seconds, monotonic).

        Returns:
            The Step taken, or None when no step was due.
        """
        with self.lock:
            if self._last_update is None or not self.simulation.is_running:
                self._last_update = now
                return None
            elapsed = max(0.0, now - self._last_update)
            self._last_update = now
            self._sample_histories(elapsed)

            self._since_step += elapsed
            if self._since_step < self.step_interval:
                return None
            step = self.simulation.step(self.speed_up * self._since_step)
            self._since_step = 0.0
            self._apply_collisions(step)
            return step

    def _sample_histories(self, elapsed: float) -> None:
        bodies = self.simulation.world.bodies
        if not bodies:
            return
        _, trajectory_limit = physics.substep_schedule(len(bodies), self.simulation.speed)

        # the remainder carries over; a long frame still yields one sample
        self._since_trajectory_sample += elapsed
        period = 1.0 / trajectory_limit
        if self._since_trajectory_sample >= period:
            self._since_trajectory_sample %= period
            for body in bodies:
                body.trajectory.add_current_value()

        self._since_velocity_sample += elapsed
        period = 1.0 / VELOCITY_SAMPLES_PER_SECOND
        if self._since_velocity_sample >= period:
            self._since_velocity_sample %= period
            for body in bodies:
                body.velocity_history.add_current_value()

    def _apply_collisions(self, step: Step) -> None:
        for cluster, merged in step.resolved_collisions.items():
            merged.velocity_history.set_limit(VELOCITY_HISTORY_LIMIT)
            if self.selected is not None and _contains(cluster, self.selected):
                self.selected = merged
            if any(_contains(cluster, body) for body in self.charted):
                self.charted = [b for b in self.charted if not _contains(cluster, b)]
                self.charted.append(merged)

    # -----------------------
    # Selection and queries
    # -----------------------

    def select_at(self, point: Vector2D, pick_radius: float = 0.0) -> Optional[Body]:
        """
        Select the body under ``point``, each body's shape grown by pick_radius.

        When several bodies are hit the one whose center is nearest wins. A
        newly selected body is also added to the charted bodies.
        """
        with self.lock:
            best = None
            best_d = float("inf")
            for body in self.simulation.world.bodies:
                if not body.hit_test(point, pick_radius):
                    continue
                d = point.subtract(body.position).magnitude
                if d < best_d:
                    best, best_d = body, d
            self.selected = best
            if best is not None and not any(b is best for b in self.charted):
                self.charted.append(best)
            return best

    def charted_speeds(self) -> List[Tuple[str, List[float]]]:
        """(name, speeds oldest first) for every charted body, in the order they were clicked."""
        with self.lock:
            bodies = list(self.charted)
        return [(body.name, [v.magnitude for v in body.velocity_history]) for body in bodies]

    def clear_charted(self) -> None:
        with self.lock:
            self.charted = []

    def snapshot(self) -> ControllerSnapshot:
        with self.lock:
            return ControllerSnapshot(
                bodies=self.simulation.world.bodies,
                time=self.simulation.time,
                running=self.simulation.is_running,
                speed_up=self.speed_up,
                selected=self.selected,
            )


def _contains(cluster, body: Body) -> bool:
    return any(member is body for member in cluster)
