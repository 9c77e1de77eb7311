#!/usr/bin/env python3
"""
Scenario loading utilities.

Two file formats are understood:

Data file (*.csv), one record per line:
    6.674e-11,86400                       # gravitational constant, speed
    Earth,universe.Planet,0,0,0,0,5.972e24
    Halley,universe.Comet,1e9,0,0,1e3,2.2e14
  Fields are name, type, x, y, vx, vy, mass. The type may also be written as
  plain "Planet" or "Comet". Records of other types are skipped.

Template (*.json):
{
  "name": "Human-friendly scenario name",
  "gravitational_constant": 6.674e-11,
  "speed": 86400,
  "bodies": [
    {"name": "Earth", "type": "Planet", "position": [0, 0], "velocity": [0, 0], "mass": 5.972e24}
  ]
}

Users can drop their own files into the scenarios folder and they'll be picked
up by list_scenarios.
"""
import csv
import json
import logging
import math
import os
from dataclasses import dataclass, field
from typing import List, NamedTuple, Union

from .bodies import Body, BodyKind
from .errors import ScenarioError
from .vector import Vector2D

logger = logging.getLogger(__name__)

SCENARIOS_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "scenarios")
SCENARIO_EXTENSIONS = (".csv", ".json")

PathLike = Union[str, "os.PathLike[str]"]


class BodySpec(NamedTuple):
    """Initial state of one body as read from a scenario."""
    name: str
    kind: BodyKind
    position: Vector2D
    velocity: Vector2D
    mass: float

    def create(self) -> Body:
        return Body(self.name, self.mass, self.position, self.velocity, self.kind)


@dataclass
class Scenario:
    name: str
    gravitational_constant: float
    speed: float
    bodies: List[BodySpec] = field(default_factory=list)

    def build(self):
        """Create a fresh world and simulation from this scenario."""
        from .simulation import Simulation
        from .world import World
        world = World(self.gravitational_constant, [spec.create() for spec in self.bodies])
        return Simulation(world, self.speed)


def list_scenarios(directory: PathLike = SCENARIOS_DIR) -> List[str]:
    """Return the scenario files available in ``directory``, sorted by name."""
    if not os.path.isdir(directory):
        return []
    return sorted(fn for fn in os.listdir(directory)
                  if fn.lower().endswith(SCENARIO_EXTENSIONS))


def load_scenario(path: PathLike) -> Scenario:
    """
    Load a scenario from a .csv data file or a .json template.

    Raises:
        ScenarioError: The file is unreadable, malformed or of unknown type.
    """
    path = os.fspath(path)
    ext = os.path.splitext(path)[1].lower()
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            if ext == ".json":
                scenario = _parse_template(json.load(f), path)
            elif ext == ".csv":
                scenario = _parse_data_file(f, path)
            else:
                raise ScenarioError(f"Unsupported scenario file type: {path}")
    except OSError as e:
        raise ScenarioError(f"Could not load data from file: {path}") from e
    except json.JSONDecodeError as e:
        raise ScenarioError(f"Invalid JSON in {path}: {e}") from e
    logger.info("Loaded scenario %r with %d bodies from %s",
                scenario.name, len(scenario.bodies), path)
    return scenario


def _parse_data_file(lines, path: str) -> Scenario:
    rows = [row for row in csv.reader(lines) if row and any(cell.strip() for cell in row)]
    if not rows:
        raise ScenarioError(f"Empty scenario file: {path}")
    header = rows[0]
    if len(header) < 2:
        raise ScenarioError(f"{path}:1: expected 'gravitational constant,speed'")
    gravitational_constant = _to_float(header[0], path, 1)
    speed = _to_float(header[1], path, 1)

    bodies: List[BodySpec] = []
    for line_no, row in enumerate(rows[1:], start=2):
        if len(row) < 7:
            raise ScenarioError(f"{path}:{line_no}: expected 7 fields, got {len(row)}")
        try:
            kind = BodyKind.parse(row[1])
        except ValueError:
            logger.warning("%s:%d: skipping body %r of unsupported type %r",
                           path, line_no, row[0], row[1])
            continue
        x, y, vx, vy, mass = (_to_float(v, path, line_no) for v in row[2:7])
        bodies.append(BodySpec(row[0].strip(), kind, Vector2D(x, y), Vector2D(vx, vy), mass))
    name = os.path.splitext(os.path.basename(path))[0]
    return _checked(Scenario(name, gravitational_constant, speed, bodies), path)


def _parse_template(data, path: str) -> Scenario:
    if not isinstance(data, dict):
        raise ScenarioError(f"{path}: expected a JSON object")
    try:
        gravitational_constant = float(data["gravitational_constant"])
        speed = float(data["speed"])
        bodies: List[BodySpec] = []
        for b in data.get("bodies", []):
            try:
                kind = BodyKind.parse(str(b.get("type", "Planet")))
            except ValueError:
                logger.warning("%s: skipping body %r of unsupported type %r",
                               path, b.get("name"), b.get("type"))
                continue
            bodies.append(BodySpec(
                name=str(b["name"]),
                kind=kind,
                position=Vector2D(float(b["position"][0]), float(b["position"][1])),
                velocity=Vector2D(float(b["velocity"][0]), float(b["velocity"][1])),
                mass=float(b["mass"]),
            ))
    except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
        raise ScenarioError(f"{path}: malformed scenario: {e!r}") from e
    name = data.get("name") or os.path.splitext(os.path.basename(path))[0]
    return _checked(Scenario(name, gravitational_constant, speed, bodies), path)


def _checked(scenario: Scenario, path: str) -> Scenario:
    if not math.isfinite(scenario.gravitational_constant):
        raise ScenarioError(f"{path}: gravitational constant must be finite, got {scenario.gravitational_constant}")
    if not (math.isfinite(scenario.speed) and scenario.speed > 0):
        raise ScenarioError(f"{path}: speed must be finite and positive, got {scenario.speed}")
    seen = set()
    for spec in scenario.bodies:
        if not (math.isfinite(spec.mass) and spec.mass > 0):
            raise ScenarioError(f"{path}: body {spec.name!r} needs a finite positive mass, got {spec.mass}")
        if not all(math.isfinite(v) for v in (*spec.position, *spec.velocity)):
            raise ScenarioError(f"{path}: body {spec.name!r} has a non-finite position or velocity")
        if spec.name in seen:
            raise ScenarioError(f"{path}: duplicate body name {spec.name!r}")
        seen.add(spec.name)
    return scenario


def _to_float(text: str, path: str, line_no: int) -> float:
    try:
        return float(text)
    except ValueError as e:
        raise ScenarioError(f"{path}:{line_no}: not a number: {text!r}") from e
