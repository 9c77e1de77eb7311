import pytest

from galaxy import physics
from galaxy.presets import PRESETS, comet_shower, earth_moon


@pytest.mark.parametrize("key", sorted(PRESETS))
def test_presets_build_without_overlaps(key):
    sim = PRESETS[key]().build()
    assert sim.world.count >= 2
    assert sim.world.detect_collisions() == set()


def test_earth_moon_has_no_net_momentum():
    bodies = earth_moon().build().world.bodies
    momentum = physics.total_momentum(bodies)
    scale = bodies[0].momentum().magnitude
    assert momentum.magnitude < 1e-12 * scale


def test_comet_shower_population():
    scenario = comet_shower(count=5)
    assert len(scenario.bodies) == 6
    assert len({spec.name for spec in scenario.bodies}) == 6
