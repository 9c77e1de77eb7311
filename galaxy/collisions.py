#!/usr/bin/env python3
"""
Collision handling for the galaxy simulator.

Detection runs over all unordered pairs of the live bodies and records, for
every body, the bodies it reported a collision with. Clusters are then built
from that map:

- the body itself and its direct partners,
- the direct partners of those partners (one hop, not a full closure),
- every body that listed this body among its own partners.

The last rule picks up the pairs a comet cannot report itself. Chains longer
than two hops are not guaranteed to end up in a single cluster.

Resolution replaces every cluster by one body conserving mass and momentum.
The merged body sits at the center of the cluster's bounding rectangle, and
takes the kind and the name of the member with the largest momentum.
"""
from typing import Dict, FrozenSet, Iterable, List, Set

from .bodies import Body, Rectangle
from .vector import Vector2D

Cluster = FrozenSet[Body]


def direct_collisions(bodies: List[Body]) -> Dict[Body, Set[Body]]:
    """Map each body to the later bodies it collides with (first operand only)."""
    collisions: Dict[Body, Set[Body]] = {}
    n = len(bodies)
    for i in range(n):
        body = bodies[i]
        for j in range(i + 1, n):
            other = bodies[j]
            if body.collides_with(other):
                collisions.setdefault(body, set()).add(other)
    return collisions


def build_clusters(collisions: Dict[Body, Set[Body]]) -> Set[Cluster]:
    """Group direct collisions into clusters, deduplicated by membership."""
    clusters: Set[Cluster] = set()
    for body, partners in collisions.items():
        cluster = {body}
        cluster.update(partners)
        for partner in partners:
            cluster.update(collisions.get(partner, ()))
        for other, other_partners in collisions.items():
            if other is not body and body in other_partners:
                cluster.add(other)
        clusters.add(frozenset(cluster))
    return clusters


def detect_clusters(bodies: List[Body]) -> Set[Cluster]:
    return build_clusters(direct_collisions(bodies))


def bounding_rectangle(bodies: Iterable[Body]) -> Rectangle:
    """Smallest axis-aligned rectangle enclosing the bodies' geometric boxes."""
    min_x = min_y = float("inf")
    max_x = max_y = float("-inf")
    for body in bodies:
        rect = body.bounding_rectangle()
        min_x = min(min_x, rect.x)
        min_y = min(min_y, rect.y)
        max_x = max(max_x, rect.max_x)
        max_y = max(max_y, rect.max_y)
    return Rectangle(min_x, min_y, max_x - min_x, max_y - min_y)


def merge(members: List[Body]) -> Body:
    """
    Build the body replacing the given cluster members.

    Members are expected in a stable order; on equal momentum magnitudes the
    earliest one is the dominant body.
    """
    total_mass = 0.0
    total_momentum = Vector2D.zero()
    dominant = None
    for body in members:
        momentum = body.momentum()
        total_mass += body.mass
        total_momentum = total_momentum.add(momentum)
        if dominant is None or momentum.magnitude > dominant.momentum().magnitude:
            dominant = body
    if dominant is None:
        raise ValueError("Cannot merge an empty cluster")
    return Body(
        name=dominant.name,
        mass=total_mass,
        position=bounding_rectangle(members).center,
        velocity=total_momentum.mul(1 / total_mass),
        kind=dominant.kind,
    )
