import gc
import math

import pytest

from conftest import comet, planet
from galaxy.bodies import Body, BodyKind
from galaxy.constants import COMET_MIN_SIDE
from galaxy.errors import WorldAttachmentError
from galaxy.vector import Vector2D
from galaxy.world import World


def test_identity_is_the_name():
    a = planet("Ares", 10.0, x=1.0)
    b = comet("Ares", 99.0, x=-5.0)
    assert a == b
    assert hash(a) == hash(b)
    assert len({a, b}) == 1
    assert a != planet("Zeus", 10.0)


def test_mass_must_be_positive_and_finite():
    with pytest.raises(ValueError):
        planet("Void", 0.0)
    with pytest.raises(ValueError):
        comet("Void", -1.0)
    with pytest.raises(ValueError):
        planet("Void", float("nan"))


def test_planet_geometry():
    p = planet("P", 4.0 / 3.0 * math.pi * 8.0, x=10.0, y=20.0)
    assert p.radius == pytest.approx(2.0)
    assert p.width == pytest.approx(4.0)
    assert tuple(p.bounding_rectangle()) == pytest.approx((8.0, 18.0, 4.0, 4.0))
    assert tuple(p.bounding_rectangle().center) == pytest.approx((10.0, 20.0))
    with pytest.raises(AttributeError):
        p.side_length


def test_comet_geometry():
    c = comet("C", 27.0, x=1.0, y=1.0)
    assert c.side_length == pytest.approx(3.0)
    assert c.width == c.height == pytest.approx(3.0)
    assert c.x == pytest.approx(-0.5)
    assert c.y == pytest.approx(-0.5)
    with pytest.raises(AttributeError):
        c.radius


def test_comet_side_is_floored():
    tiny = comet("Dust", 1e-30)
    assert tiny.side_length == COMET_MIN_SIDE
    assert tiny.width == COMET_MIN_SIDE
    grain = comet("Grain", 1e-18)
    assert grain.side_length == pytest.approx(1e-6)


def test_hit_test():
    p = planet("P", 4.0 / 3.0 * math.pi)  # radius 1
    assert p.hit_test(Vector2D(0.5, 0.5))
    assert not p.hit_test(Vector2D(1.0, 1.0))
    assert p.hit_test(Vector2D(1.0, 1.0), extra=0.5)
    c = comet("C", 8.0)  # side 2
    assert c.hit_test(Vector2D(0.9, -0.9))
    assert not c.hit_test(Vector2D(1.1, 0.0))


def test_acceleration_requires_world():
    body = planet("Lonely", 1.0)
    with pytest.raises(WorldAttachmentError):
        body.acceleration()


def test_attachment_is_one_shot():
    body = planet("Once", 1.0)
    world = World(1.0, [body])
    assert body.world is world
    with pytest.raises(WorldAttachmentError):
        body.attach(world)
    with pytest.raises(WorldAttachmentError):
        World(1.0, [body])


def test_attachment_ends_with_the_world():
    body = planet("Orphan", 1.0)
    assert not body.is_attached
    world = World(1.0, [body])
    assert body.is_attached
    del world
    gc.collect()
    assert not body.is_attached
    with pytest.raises(WorldAttachmentError):
        body.acceleration()


def test_acceleration_is_newtonian(make_world):
    a = planet("A", 1.0)
    b = planet("B", 8.0, x=2.0)
    world = make_world(a, b, gravitational_constant=0.5)
    # only B: G * m_B * r / |r|^3 = 0.5 * 8 * 2 / 8
    assert a.acceleration() == Vector2D(1.0, 0.0)


def test_acceleration_sums_over_siblings(make_world):
    a = planet("A", 1.0)
    b = planet("B", 8.0, x=2.0)
    c = planet("C", 4.0, y=-2.0)
    world = make_world(a, b, c, gravitational_constant=1.0)
    acc = a.acceleration()
    assert acc.x == pytest.approx(2.0)
    assert acc.y == pytest.approx(-1.0)


def test_single_body_feels_nothing(make_world):
    a = planet("A", 5.0, x=3.0)
    world = make_world(a)
    assert a.acceleration() == Vector2D(0.0, 0.0)


def test_momentum_and_mutation():
    body = comet("C", 2.0, vx=3.0, vy=-1.0)
    assert body.momentum() == Vector2D(6.0, -2.0)
    assert body.kinetic_energy() == pytest.approx(10.0)
    body.change_velocity_by(Vector2D(1.0, 1.0))
    body.change_position_by(Vector2D(-2.0, 0.5))
    assert body.velocity == Vector2D(4.0, 0.0)
    assert body.position == Vector2D(-2.0, 0.5)


def test_histories_sample_the_body():
    body = planet("H", 1.0, x=1.0, vx=2.0)
    body.trajectory.add_current_value()
    body.velocity_history.add_current_value()
    body.change_position_by(Vector2D(1.0, 0.0))
    body.change_velocity_by(Vector2D(0.0, 1.0))
    body.trajectory.add_current_value()
    body.velocity_history.add_current_value()
    assert body.trajectory.values() == [Vector2D(1.0, 0.0), Vector2D(2.0, 0.0)]
    assert body.velocity_history.values() == [Vector2D(2.0, 0.0), Vector2D(2.0, 1.0)]


def test_body_kind_parsing():
    assert BodyKind.parse("universe.Planet") is BodyKind.PLANET
    assert BodyKind.parse(" comet ") is BodyKind.COMET
    with pytest.raises(ValueError):
        BodyKind.parse("universe.Asteroid")


def test_default_kind_is_planet():
    body = Body("B", 1.0, Vector2D.zero(), Vector2D.zero())
    assert body.kind is BodyKind.PLANET
    assert body.is_planet
