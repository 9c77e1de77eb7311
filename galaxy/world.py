#!/usr/bin/env python3
"""
The world: live bodies plus the gravitational constant they obey.

Membership changes only through collision resolution. The live set is an
insertion-ordered mapping guarded by a re-entrant lock; readers always get a
snapshot list, and the simulator holds the lock for a whole step, so a reader
sees either the pre-step or the post-step set.
"""
import logging
import threading
from typing import Dict, Iterable, List, Optional, Set

from . import collisions
from .bodies import Body, Rectangle
from .collisions import Cluster

logger = logging.getLogger(__name__)


class World:
    """
    Container of the live bodies.

    Args:
        gravitational_constant: G used by every body of this world.
        bodies: Initial bodies; those not attached yet are attached here.
    """

    def __init__(self, gravitational_constant: float, bodies: Iterable[Body] = ()):
        self.gravitational_constant = float(gravitational_constant)
        self.lock = threading.RLock()
        self._bodies: Dict[str, Body] = {}
        for body in bodies:
            if body.name in self._bodies:
                raise ValueError(f"Duplicate body name: {body.name!r}")
            if body.world is not self:
                body.attach(self)
            self._bodies[body.name] = body

    @property
    def bodies(self) -> List[Body]:
        """Snapshot of the live bodies in insertion order."""
        with self.lock:
            return list(self._bodies.values())

    @property
    def count(self) -> int:
        with self.lock:
            return len(self._bodies)

    def __len__(self) -> int:
        return self.count

    def __contains__(self, body: object) -> bool:
        with self.lock:
            return isinstance(body, Body) and self._bodies.get(body.name) is body

    def get(self, name: str) -> Optional[Body]:
        with self.lock:
            return self._bodies.get(name)

    def bounding_rectangle(self, bodies: Optional[Iterable[Body]] = None) -> Rectangle:
        """Rectangle enclosing the given bodies (all live bodies by default)."""
        return collisions.bounding_rectangle(self.bodies if bodies is None else bodies)

    # -----------------------
    # Collisions
    # -----------------------

    def detect_collisions(self) -> Set[Cluster]:
        """Clusters of bodies colliding in the current state."""
        return collisions.detect_clusters(self.bodies)

    def resolve_collisions(self, clusters: Iterable[Cluster]) -> Dict[Cluster, Body]:
        """
        Replace every cluster by a single merged body.

        Clusters are handled in live-set order of their earliest member; among
        clusters sharing that member the larger one goes first, then the one
        with the earlier remaining members. A body shared by two clusters goes
        to the first one; a later cluster left with fewer than two live members
        is skipped.

        Returns:
            Mapping from each resolved cluster to the body that replaced it.
        """
        resolved: Dict[Cluster, Body] = {}
        with self.lock:
            order = {id(body): index for index, body in enumerate(self._bodies.values())}

            def rank(cluster):
                indices = sorted(order.get(id(b), len(order)) for b in cluster)
                return (indices[0], -len(indices), indices)

            pending = sorted((cluster for cluster in clusters if cluster), key=rank)
            for cluster in pending:
                ids = {id(b) for b in cluster}
                members = [b for b in self._bodies.values() if id(b) in ids]
                if len(members) < 2:
                    logger.debug("Skipping cluster %s: already absorbed", _names(cluster))
                    continue
                merged = collisions.merge(members)
                for member in members:
                    del self._bodies[member.name]
                merged.attach(self)
                self._bodies[merged.name] = merged
                resolved[cluster] = merged
                logger.info("Merged %s into %s (mass %.3e kg)",
                            _names(members), merged.name, merged.mass)
        return resolved


def _names(bodies: Iterable[Body]) -> str:
    return ", ".join(sorted(b.name for b in bodies))
