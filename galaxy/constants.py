#!/usr/bin/env python3
"""
Shared constants for the galaxy simulator (SI units unless stated otherwise).

Keeping constants in one place helps ensure values are consistent across the
codebase and makes tuning easier.
"""

# Physical constants
G = 6.674e-11  # m^3 kg^-1 s^-2
EARTH_MASS = 5.972e24  # kg
MOON_MASS = 7.342e22  # kg
SOLAR_MASS = 1.98847e30  # kg
EARTH_MOON_DISTANCE = 3.844e8  # m
ASTRONOMICAL_UNIT = 1.495978707e11  # m

# Body geometry
COMET_MIN_SIDE = 1e-9  # m; floor for degenerate comet squares

# Histories
DEFAULT_HISTORY_LIMIT = 10

# Sub-step schedule: (max body count or None, speed divisor, trajectory limit).
# Smaller swarms get finer integration steps and longer trajectories.
SUBSTEP_SCHEDULE = (
    (10, 1000.0, 100),
    (100, 100.0, 10),
    (None, 10.0, 5),
)

# Real-time driver
VELOCITY_SAMPLES_PER_SECOND = 5
VELOCITY_HISTORY_LIMIT = 30 * VELOCITY_SAMPLES_PER_SECOND + 1
STEPS_PER_SECOND = 60
SPEED_UP_FACTOR = 2.0

# Rendering (viewport)
VIEW_WIDTH = 1000
VIEW_HEIGHT = 700
BACKGROUND_COLOR = (10, 12, 18)
PLANET_COLOR = (70, 110, 235)
COMET_COLOR = (255, 175, 175)
PLANET_SELECTED_COLOR = (235, 60, 60)
COMET_SELECTED_COLOR = (255, 165, 0)
TRAJECTORY_COLOR = (204, 204, 204)
HUD_COLOR = (200, 200, 200)

# Camera zoom bounds (meters-per-pixel)
DEFAULT_METERS_PER_PIXEL = 1e6
MIN_METERS_PER_PIXEL = 1e-3
MAX_METERS_PER_PIXEL = 1e12
MIN_PAINTED_SIZE = 4  # pixels; bodies are never drawn smaller than this

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
