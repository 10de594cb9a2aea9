from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np

from flocking.components import Boid, Transform, Velocity
from flocking.constants import BOID_INITIAL_SPEED, NUMBER_BOIDS
from flocking.core.store import BoidStore
from flocking.math import heading_from_velocity
from flocking.resources import WorldBounds
from flocking.types import EntityId, Vector2

logger = logging.getLogger(__name__)


def spawn_boid(
    store: BoidStore,
    *,
    position: Vector2,
    velocity: Vector2,
    boid: Optional[Boid] = None,
) -> EntityId:
    heading = heading_from_velocity(velocity) if velocity.length() > 0.0 else 0.0
    return store.spawn(
        Transform(pos=position, heading=heading),
        Velocity(velocity),
        boid or Boid(),
    )


def spawn_flock(
    store: BoidStore,
    bounds: WorldBounds,
    *,
    count: int = NUMBER_BOIDS,
    rng: Optional[np.random.Generator] = None,
    initial_speed: float = BOID_INITIAL_SPEED,
    boid: Optional[Boid] = None,
) -> List[EntityId]:
    """
    Scatters `count` boids uniformly inside bounds, each heading in a random
    direction at initial_speed.
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")

    rng = rng if rng is not None else np.random.default_rng()
    template = boid or Boid()

    hw, hh = bounds.width / 2.0, bounds.height / 2.0
    xs = rng.uniform(-hw, hw, size=count)
    ys = rng.uniform(-hh, hh, size=count)
    angles = rng.uniform(0.0, np.pi * 2.0, size=count)

    eids = []
    for x, y, angle in zip(xs, ys, angles):
        eids.append(
            spawn_boid(
                store,
                position=Vector2(float(x), float(y)),
                velocity=Vector2.from_angle(float(angle), initial_speed),
                boid=template,
            )
        )

    logger.debug("Spawned %d boids in a %gx%g world", count, bounds.width, bounds.height)
    return eids
