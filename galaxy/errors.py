#!/usr/bin/env python3
"""
Exceptions raised by the galaxy simulator core.

Precondition violations are programming errors: they are raised immediately
and never retried or swallowed inside the core.
"""


class GalaxyError(Exception):
    """Base class for simulator errors."""
    pass


class WorldAttachmentError(GalaxyError, RuntimeError):
    """A body was used without a world, or attached to a second one."""
    pass


class SimulationStateError(GalaxyError, RuntimeError):
    """The simulation was driven through an invalid state transition."""
    pass


class ScenarioError(GalaxyError, ValueError):
    """A scenario file could not be read or parsed."""
    pass
