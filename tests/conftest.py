import pytest

from galaxy.bodies import Body, BodyKind
from galaxy.vector import Vector2D
from galaxy.world import World


def planet(name, mass, x=0.0, y=0.0, vx=0.0, vy=0.0):
    return Body(name, mass, Vector2D(x, y), Vector2D(vx, vy), BodyKind.PLANET)


def comet(name, mass, x=0.0, y=0.0, vx=0.0, vy=0.0):
    return Body(name, mass, Vector2D(x, y), Vector2D(vx, vy), BodyKind.COMET)


@pytest.fixture
def make_world():
    def _make(*bodies, gravitational_constant=1.0):
        return World(gravitational_constant, bodies)
    return _make
