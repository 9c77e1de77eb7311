import math

import pytest

from conftest import comet, planet
from galaxy import collisions
from galaxy.bodies import BodyKind
from galaxy.vector import Vector2D


def test_touching_planets_collide():
    a = planet("A", 1e6)
    b = planet("B", 2e6)
    b.change_position_by(Vector2D(a.radius + b.radius, 0.0))
    assert a.collides_with(b)
    assert b.collides_with(a)


def test_separated_planets_do_not_collide():
    a = planet("A", 1e6)
    b = planet("B", 2e6)
    b.change_position_by(Vector2D((a.radius + b.radius) * (1 + 1e-9), 0.0))
    assert not a.collides_with(b)


def test_comet_never_reports_a_collision():
    p = planet("P", 1e6)
    k = comet("K", 1e3, x=10.0)
    other = comet("L", 1e3, x=10.5)
    assert p.collides_with(k)
    assert not k.collides_with(p)
    assert not k.collides_with(other)


def test_disc_misses_square_corner_inside_bounding_box():
    p = planet("P", 1e6)
    r = p.radius
    # square of side 1 whose nearest corner sits just outside the disc
    offset = r / math.sqrt(2) + 0.05 + 0.5
    k = comet("K", 1.0, x=offset, y=offset)
    assert k.side_length == pytest.approx(1.0)
    assert k.bounding_rectangle().x < r
    assert not p.collides_with(k)


def test_clusters_depend_on_operand_order():
    p = planet("P", 1e6)
    k = comet("K", 1e3, x=60.0)
    assert collisions.detect_clusters([k, p]) == set()
    assert collisions.detect_clusters([p, k]) == {frozenset({p, k})}


def test_reverse_edges_join_the_cluster():
    a = planet("A", 1e6)
    b = planet("B", 1e6, x=100.0)
    direct = collisions.direct_collisions([a, b])
    assert direct == {a: {b}}
    assert collisions.build_clusters(direct) == {frozenset({a, b})}


def test_chain_of_three_forms_one_cluster():
    a = planet("A", 1e6)
    b = planet("B", 1e6, x=100.0)
    c = planet("C", 1e6, x=200.0)
    assert not a.collides_with(c)
    assert collisions.detect_clusters([a, b, c]) == {frozenset({a, b, c})}


def test_merge_conserves_mass_and_momentum():
    a = planet("A", 2e6, vx=3.0)
    b = planet("B", 1e6, x=100.0, vy=-4.0)
    merged = collisions.merge([a, b])
    assert merged.mass == pytest.approx(3e6)
    assert tuple(merged.momentum()) == pytest.approx((6e6, -4e6))
    assert merged.name == "A"
    assert merged.kind is BodyKind.PLANET
    rect = collisions.bounding_rectangle([a, b])
    assert tuple(merged.position) == pytest.approx(tuple(rect.center))


def test_dominant_comet_gives_its_kind_and_name():
    p = planet("P", 1e6)
    k = comet("K", 1e3, x=60.0, vx=1e4)
    merged = collisions.merge([p, k])
    assert merged.kind is BodyKind.COMET
    assert merged.name == "K"
    assert merged.mass == pytest.approx(1e6 + 1e3)
    assert merged.velocity.x == pytest.approx(1e7 / (1e6 + 1e3))


def test_momentum_tie_goes_to_earliest_member():
    a = planet("A", 1e6)
    b = planet("B", 1e6, x=10.0)
    assert collisions.merge([a, b]).name == "A"
    assert collisions.merge([b, a]).name == "B"


def test_merge_of_nothing_is_an_error():
    with pytest.raises(ValueError):
        collisions.merge([])


def test_bounding_rectangle_encloses_geometry():
    a = planet("A", 4.0 / 3.0 * math.pi)
    k = comet("K", 8.0, x=10.0, y=-5.0)
    rect = collisions.bounding_rectangle([a, k])
    assert rect.x == pytest.approx(-1.0)
    assert rect.y == pytest.approx(-6.0)
    assert rect.max_x == pytest.approx(11.0)
    assert rect.max_y == pytest.approx(1.0)
